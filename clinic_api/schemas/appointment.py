from datetime import date, datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models.appointment import AppointmentStatus
from ..models.user import Gender


class AppointmentCreate(BaseModel):
    """
    Booking request.

    The doctor is picked either by ``doctor_id`` or by name plus department.
    Patient contact fields left out are taken from the patient's own record.
    """
    appointment_date: datetime
    department: Optional[str] = Field(None, max_length=100)
    doctor_id: Optional[str] = None
    doctor_first_name: Optional[str] = Field(None, max_length=100)
    doctor_last_name: Optional[str] = Field(None, max_length=100)
    reason: Optional[str] = Field(None, max_length=2000)
    has_visited: bool = False
    address: Optional[str] = Field(None, max_length=255)

    first_name: Optional[str] = Field(None, min_length=3, max_length=100)
    last_name: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=11, max_length=11)
    nic: Optional[str] = Field(None, min_length=13, max_length=13)
    dob: Optional[date] = None
    gender: Optional[Gender] = None

    @field_validator("appointment_date")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        # Stored naive, in UTC
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class AppointmentStatusUpdate(BaseModel):
    # Checked against the allowed transitions in the service
    status: str


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    nic: str
    dob: date
    gender: Gender
    address: Optional[str] = None
    patient_id: str
    doctor_id: str
    doctor_first_name: str
    doctor_last_name: str
    department: str
    appointment_date: datetime
    reason: Optional[str] = None
    has_visited: bool
    status: AppointmentStatus
    created_at: datetime
