from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional, Union
import logging

from ..models.user import User
from ..core.errors import (
    AuthenticationError, ConflictError, InvalidInputError
)
from ..core.security import (
    verify_password, get_password_hash, dummy_verify,
    UserRole, SESSION_COOKIES
)
from ..schemas.user import (
    PatientRegister, AdminCreate, DoctorCreate, UserLogin
)
from .image_host import ALLOWED_IMAGE_TYPES, CloudinaryImageHost

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGES = {
    UserRole.PATIENT: "User already Registered!",
    UserRole.ADMIN: "Admin With This Email Already Exists!",
    UserRole.DOCTOR: "Doctor With This Email Already Exists!",
}


class AvatarUpload:
    """An uploaded avatar file, already read into memory."""

    def __init__(self, filename: str, content: bytes, content_type: Optional[str]):
        self.filename = filename
        self.content = content
        self.content_type = content_type


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_patient(self, user_data: PatientRegister) -> User:
        """Register a new patient."""
        self._ensure_email_available(user_data.email, UserRole.PATIENT)
        user = self._create_user(user_data, UserRole.PATIENT)
        logger.info(f"Registered patient {user.id}")
        return user

    def add_staff_member(
        self,
        user_data: Union[AdminCreate, DoctorCreate],
        role: UserRole,
        avatar: Optional[AvatarUpload] = None,
        image_host: Optional[CloudinaryImageHost] = None
    ) -> User:
        """Create an admin or doctor account on behalf of an admin."""
        if role == UserRole.PATIENT:
            raise InvalidInputError("Patients must register themselves")

        if role == UserRole.DOCTOR and not getattr(user_data, "doctor_department", None):
            raise InvalidInputError("Doctor department is required")

        self._ensure_email_available(user_data.email, role)

        extra = {}
        if role == UserRole.DOCTOR:
            extra["doctor_department"] = user_data.doctor_department
            if avatar is not None:
                if avatar.content_type not in ALLOWED_IMAGE_TYPES:
                    raise InvalidInputError("File Format Not Supported!")
                if image_host is None:
                    raise InvalidInputError("Image hosting is not available")
                # Upload first so a failure leaves no partial doctor behind
                uploaded = image_host.upload(
                    avatar.filename, avatar.content, avatar.content_type
                )
                extra["doc_avatar_public_id"] = uploaded.public_id
                extra["doc_avatar_url"] = uploaded.url

        user = self._create_user(user_data, role, **extra)
        logger.info(f"Created {role.value.lower()} account {user.id}")
        return user

    def authenticate_user(self, login_data: UserLogin) -> User:
        """Check credentials for a role-scoped login."""
        if (
            login_data.confirm_password is not None
            and login_data.confirm_password != login_data.password
        ):
            raise InvalidInputError("Password & Confirm Password Do Not Match!")

        if login_data.role not in SESSION_COOKIES:
            raise InvalidInputError(f"{login_data.role.value} accounts cannot sign in here")

        user = self.db.query(User).filter(
            User.email == login_data.email
        ).first()

        if not user:
            dummy_verify()
            logger.warning("Failed login for unknown email")
            raise AuthenticationError("Invalid Email Or Password!")

        if not verify_password(login_data.password, user.password_hash):
            logger.warning(f"Failed login for user {user.id}")
            raise AuthenticationError("Invalid Email Or Password!")

        if user.role != login_data.role:
            raise AuthenticationError("User Not Found With This Role!")

        return user

    def _ensure_email_available(self, email: str, role: UserRole) -> None:
        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGES[role])

    def _create_user(self, user_data, role: UserRole, **extra) -> User:
        # Callers check the email first; the unique index covers the race
        new_user = User(
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=role,
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
            nic=user_data.nic,
            dob=user_data.dob,
            gender=user_data.gender,
            **extra
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise ConflictError(DUPLICATE_EMAIL_MESSAGES[role])
        self.db.refresh(new_user)

        return new_user
