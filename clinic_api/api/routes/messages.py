from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_current_admin, rate_limit_check
from ...services.message_service import MessageService
from ...schemas.message import MessageCreate, MessageResponse
from ...models.user import User

router = APIRouter(prefix="/api/message", tags=["Messages"])


@router.post("/send-message")
def send_message(
    message_data: MessageCreate,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    MessageService(db).send(message_data)
    return {"success": True, "message": "Message Sent!"}


# POST rather than GET to match the existing dashboard client
@router.post("/getall")
def get_all_messages(
    db: Session = Depends(get_db),
    _admin: User = Depends(get_current_admin)
):
    messages = MessageService(db).list_all()
    return {
        "success": True,
        "messages": [MessageResponse.model_validate(m) for m in messages],
    }
