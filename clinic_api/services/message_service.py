from sqlalchemy.orm import Session
from typing import List

from ..models.message import Message
from ..schemas.message import MessageCreate


class MessageService:
    def __init__(self, db: Session):
        self.db = db

    def send(self, data: MessageCreate) -> Message:
        message = Message(**data.model_dump())
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)
        return message

    def list_all(self) -> List[Message]:
        return self.db.query(Message).order_by(Message.created_at.desc()).all()
