from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class MessageOut(BaseModel):
    id: int
    activity_id: int
    user_id: str
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# Chat history entry with the author's presentation fields
class MessageWithAuthor(MessageOut):
    display_name: str
    photo_url: str = ""
