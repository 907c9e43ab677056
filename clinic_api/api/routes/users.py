from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlalchemy.orm import Session
from typing import Optional

from ...core.config import settings
from ...core.database import get_db
from ...core.errors import InvalidInputError
from ...core.security import (
    UserRole, create_session_token, set_session_cookie, clear_session_cookie
)
from ...api.deps import get_current_admin, get_current_patient, rate_limit_check
from ...services.auth_service import AuthService, AvatarUpload
from ...services.image_host import CloudinaryImageHost, get_image_host
from ...schemas.user import (
    AdminCreate, DoctorCreate, PatientRegister, UserLogin, UserResponse
)
from ...models.user import User

router = APIRouter(prefix="/api", tags=["Users"])


def _start_session(response: Response, user: User) -> str:
    token = create_session_token(user.id, user.role)
    set_session_cookie(response, user.role, token)
    return token


@router.post("/patient/register")
def register_patient(
    user_data: PatientRegister,
    response: Response,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Self-registration for patients; signs the new patient in."""
    user = AuthService(db).register_patient(user_data)
    token = _start_session(response, user)

    return {
        "success": True,
        "message": "User Registered!",
        "user": UserResponse.model_validate(user),
        "token": token,
    }


@router.post("/login")
def login(
    login_data: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Role-scoped login; sets the cookie for the requested role."""
    user = AuthService(db).authenticate_user(login_data)
    token = _start_session(response, user)

    return {
        "success": True,
        "message": "Login Successfully!",
        "user": UserResponse.model_validate(user),
        "token": token,
    }


@router.post("/admin/addnew")
def add_new_admin(
    admin_data: AdminCreate,
    db: Session = Depends(get_db),
    _admin: User = Depends(get_current_admin)
):
    admin = AuthService(db).add_staff_member(admin_data, UserRole.ADMIN)
    return {
        "success": True,
        "message": "New Admin Registered!",
        "admin": UserResponse.model_validate(admin),
    }


@router.post("/doctor/addnew")
def add_new_doctor(
    first_name: str = Form(...),
    last_name: str = Form(...),
    email: str = Form(...),
    phone: str = Form(...),
    nic: str = Form(...),
    dob: str = Form(...),
    gender: str = Form(...),
    password: str = Form(...),
    doctor_department: str = Form(...),
    doc_avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    image_host: CloudinaryImageHost = Depends(get_image_host),
    _admin: User = Depends(get_current_admin)
):
    """Create a doctor from a multipart form with an optional avatar."""
    # Raises pydantic.ValidationError, rendered as a 400 by the app
    doctor_data = DoctorCreate(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        nic=nic,
        dob=dob,
        gender=gender,
        password=password,
        doctor_department=doctor_department,
    )

    avatar = None
    if doc_avatar is not None and doc_avatar.filename:
        # Read one byte past the cap to detect oversized files
        content = doc_avatar.file.read(settings.MAX_AVATAR_BYTES + 1)
        if len(content) > settings.MAX_AVATAR_BYTES:
            raise InvalidInputError("Doctor Avatar Is Too Large!")
        avatar = AvatarUpload(
            filename=doc_avatar.filename,
            content=content,
            content_type=doc_avatar.content_type,
        )

    doctor = AuthService(db).add_staff_member(
        doctor_data, UserRole.DOCTOR, avatar=avatar, image_host=image_host
    )
    return {
        "success": True,
        "message": "New Doctor Registered!",
        "doctor": UserResponse.model_validate(doctor),
    }


@router.get("/doctors")
def list_doctors(db: Session = Depends(get_db)):
    doctors = db.query(User).filter(User.role == UserRole.DOCTOR).order_by(
        User.last_name, User.first_name
    ).all()
    return {
        "success": True,
        "doctors": [UserResponse.model_validate(doctor) for doctor in doctors],
    }


@router.get("/patient/me")
def get_patient_details(current_user: User = Depends(get_current_patient)):
    return {"success": True, "user": UserResponse.model_validate(current_user)}


@router.get("/admin/me")
def get_admin_details(current_user: User = Depends(get_current_admin)):
    return {"success": True, "user": UserResponse.model_validate(current_user)}


@router.get("/patient/logout")
def logout_patient(
    response: Response,
    _patient: User = Depends(get_current_patient)
):
    # Tokens are stateless: only the cookie goes away
    clear_session_cookie(response, UserRole.PATIENT)
    return {"success": True, "message": "Patient Logged Out Successfully."}


@router.get("/admin/logout")
def logout_admin(
    response: Response,
    _admin: User = Depends(get_current_admin)
):
    clear_session_cookie(response, UserRole.ADMIN)
    return {"success": True, "message": "Admin Logged Out Successfully."}
