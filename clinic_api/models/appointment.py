from sqlalchemy import Column, String, ForeignKey, Date, DateTime, Boolean, Text, Enum as SQLEnum
from datetime import datetime
import enum

from ..core.database import Base
from .user import Gender, generate_id


class AppointmentStatus(str, enum.Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(32), primary_key=True, default=generate_id)

    # Patient details as given at booking time
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    nic = Column(String(20), nullable=False)
    dob = Column(Date, nullable=False)
    gender = Column(SQLEnum(Gender), nullable=False)
    address = Column(String(255), nullable=True)

    # Relationships
    patient_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)

    # Doctor display fields, denormalized at booking time
    doctor_first_name = Column(String(100), nullable=False)
    doctor_last_name = Column(String(100), nullable=False)
    department = Column(String(100), nullable=False)

    # Appointment details
    appointment_date = Column(DateTime, nullable=False, index=True)
    reason = Column(Text, nullable=True)
    has_visited = Column(Boolean, default=False, nullable=False)
    status = Column(SQLEnum(AppointmentStatus), default=AppointmentStatus.PENDING, nullable=False)

    # Tracking
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, status='{self.status}')>"
