from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_current_admin, get_current_patient
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentCreate, AppointmentResponse, AppointmentStatusUpdate
)
from ...models.user import User

router = APIRouter(prefix="/api/appointment", tags=["Appointments"])


@router.post("/post")
def post_appointment(
    appointment_data: AppointmentCreate,
    db: Session = Depends(get_db),
    current_patient: User = Depends(get_current_patient)
):
    """Book an appointment as the signed-in patient."""
    appointment = AppointmentService(db).book(current_patient, appointment_data)
    return {
        "success": True,
        "message": "Appointment Sent!",
        "appointment": AppointmentResponse.model_validate(appointment),
    }


@router.get("/getall")
def get_all_appointments(
    db: Session = Depends(get_db),
    _admin: User = Depends(get_current_admin)
):
    appointments = AppointmentService(db).list_all()
    return {
        "success": True,
        "appointments": [AppointmentResponse.model_validate(a) for a in appointments],
    }


@router.put("/update/{appointment_id}")
def update_appointment_status(
    appointment_id: str,
    status_data: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    _admin: User = Depends(get_current_admin)
):
    appointment = AppointmentService(db).update_status(
        appointment_id, status_data.status
    )
    return {
        "success": True,
        "message": "Appointment Status Updated!",
        "appointment": AppointmentResponse.model_validate(appointment),
    }


@router.delete("/delete/{appointment_id}")
def delete_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    _admin: User = Depends(get_current_admin)
):
    AppointmentService(db).delete(appointment_id)
    return {"success": True, "message": "Appointment Deleted!"}
