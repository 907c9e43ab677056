from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..core.security import UserRole
from ..models.user import Gender


class UserBase(BaseModel):
    first_name: str = Field(..., min_length=3, max_length=100)
    last_name: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=11, max_length=11)
    nic: str = Field(..., min_length=13, max_length=13)
    dob: date
    gender: Gender


class PatientRegister(UserBase):
    password: str = Field(..., min_length=8, max_length=72)


class AdminCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=72)


class DoctorCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=72)
    doctor_department: str = Field(..., min_length=2, max_length=100)


class UserLogin(BaseModel):
    email: EmailStr
    password: str
    confirm_password: Optional[str] = None
    role: UserRole


class UserResponse(BaseModel):
    """Public view of a user; never includes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    nic: str
    dob: date
    gender: Gender
    role: UserRole
    doctor_department: Optional[str] = None
    doc_avatar_url: Optional[str] = None
    created_at: datetime
