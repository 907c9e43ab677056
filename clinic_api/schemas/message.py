from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class MessageCreate(BaseModel):
    first_name: str = Field(..., min_length=3, max_length=100)
    last_name: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=11, max_length=11)
    message: str = Field(..., min_length=10, max_length=5000)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    message: str
    created_at: datetime
