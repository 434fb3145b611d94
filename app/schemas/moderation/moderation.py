from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.models.moderation.report import ReportReason, ReportStatus


class BlockCreate(BaseModel):
    blocked_id: str = Field(..., min_length=1)


class BlockOut(BaseModel):
    id: int
    blocker_id: str
    blocked_id: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BlockCheckOut(BaseModel):
    blocked: bool


class ReportCreate(BaseModel):
    reported_id: str = Field(..., min_length=1)
    reason: ReportReason
    details: Optional[str] = Field(None, max_length=2000)
    activity_id: Optional[int] = None
    message_id: Optional[int] = None


class ReportUpdate(BaseModel):
    status: ReportStatus
    admin_notes: Optional[str] = Field(None, max_length=2000)


class ReportOut(BaseModel):
    id: int
    reporter_id: str
    reported_id: str
    reason: ReportReason
    details: Optional[str] = None
    activity_id: Optional[int] = None
    message_id: Optional[int] = None
    status: ReportStatus
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SuspendRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    reason: str = Field(..., min_length=1, max_length=500)


class UnsuspendRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class GrantInviteRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    can_invite: bool = True
