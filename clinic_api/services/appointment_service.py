from sqlalchemy.orm import Session
from typing import List
import logging

from ..models.appointment import Appointment, AppointmentStatus
from ..models.user import User
from ..core.errors import ConflictError, InvalidInputError, NotFoundError
from ..core.security import UserRole
from ..schemas.appointment import AppointmentCreate

logger = logging.getLogger(__name__)

# Statuses an admin may set; Pending is only ever assigned at booking
ADMIN_SETTABLE_STATUSES = (AppointmentStatus.ACCEPTED, AppointmentStatus.REJECTED)


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def book(self, patient: User, data: AppointmentCreate) -> Appointment:
        """Book an appointment for ``patient``; it always starts Pending."""
        doctor = self._resolve_doctor(data)

        appointment = Appointment(
            first_name=data.first_name or patient.first_name,
            last_name=data.last_name or patient.last_name,
            email=data.email or patient.email,
            phone=data.phone or patient.phone,
            nic=data.nic or patient.nic,
            dob=data.dob or patient.dob,
            gender=data.gender or patient.gender,
            address=data.address,
            patient_id=patient.id,
            doctor_id=doctor.id,
            doctor_first_name=doctor.first_name,
            doctor_last_name=doctor.last_name,
            department=doctor.doctor_department or data.department,
            appointment_date=data.appointment_date,
            reason=data.reason,
            has_visited=data.has_visited,
            status=AppointmentStatus.PENDING,
        )

        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Patient {patient.id} booked appointment {appointment.id} with doctor {doctor.id}"
        )
        return appointment

    def list_all(self) -> List[Appointment]:
        return self.db.query(Appointment).order_by(
            Appointment.created_at.desc()
        ).all()

    def update_status(self, appointment_id: str, new_status: str) -> Appointment:
        """
        Overwrite the status of an appointment.

        There is no transition guard: an Accepted appointment can be
        Rejected later and vice versa.
        """
        allowed = [s.value for s in ADMIN_SETTABLE_STATUSES]
        if new_status not in allowed:
            raise InvalidInputError(f"Status must be one of: {', '.join(allowed)}")

        appointment = self._get_or_404(appointment_id)
        previous = appointment.status
        appointment.status = AppointmentStatus(new_status)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} status {previous.value} -> {appointment.status.value}"
        )
        return appointment

    def delete(self, appointment_id: str) -> None:
        appointment = self._get_or_404(appointment_id)
        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"Deleted appointment {appointment_id}")

    def _get_or_404(self, appointment_id: str) -> Appointment:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()
        if not appointment:
            raise NotFoundError("Appointment not found!")
        return appointment

    def _resolve_doctor(self, data: AppointmentCreate) -> User:
        if data.doctor_id:
            doctor = self.db.query(User).filter(
                User.id == data.doctor_id,
                User.role == UserRole.DOCTOR
            ).first()
            if not doctor:
                raise NotFoundError("Doctor not found")
            return doctor

        if not (data.doctor_first_name and data.doctor_last_name and data.department):
            raise InvalidInputError(
                "Select a doctor by id or by first name, last name and department"
            )

        doctors = self.db.query(User).filter(
            User.role == UserRole.DOCTOR,
            User.first_name == data.doctor_first_name,
            User.last_name == data.doctor_last_name,
            User.doctor_department == data.department
        ).limit(2).all()

        if not doctors:
            raise NotFoundError("Doctor not found")
        if len(doctors) > 1:
            raise ConflictError("Doctors Conflict! Please Contact Through Email Or Phone!")
        return doctors[0]
