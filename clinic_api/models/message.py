from sqlalchemy import Column, String, DateTime, Text
from datetime import datetime

from ..core.database import Base
from .user import generate_id


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(32), primary_key=True, default=generate_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Message(id={self.id}, email='{self.email}')>"
