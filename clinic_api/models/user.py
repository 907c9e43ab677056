from sqlalchemy import Column, String, Date, DateTime, Enum as SQLEnum
from datetime import datetime
import enum
import uuid

from ..core.database import Base
from ..core.security import UserRole


def generate_id() -> str:
    return uuid.uuid4().hex


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)

    # Personal information
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    nic = Column(String(20), nullable=False)
    dob = Column(Date, nullable=False)
    gender = Column(SQLEnum(Gender), nullable=False)

    # Doctor only
    doctor_department = Column(String(100), nullable=True, index=True)
    doc_avatar_public_id = Column(String(255), nullable=True)
    doc_avatar_url = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
