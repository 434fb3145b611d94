from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime
from app.schemas.profile.profile import ProfileOut


class InviteValidate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)


class InviteRedeem(BaseModel):
    invite_code: str = Field(..., min_length=1)
    terms_version: str
    privacy_version: str


class InviteCreate(BaseModel):
    max_uses: Optional[int] = Field(None, ge=1, le=1000)
    expires_at: Optional[datetime] = None


class InviteOut(BaseModel):
    id: int
    code: str
    created_by: str
    max_uses: Optional[int] = None
    used_count: int = 0
    expires_at: Optional[datetime] = None
    is_disabled: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AccessStatusOut(BaseModel):
    status: Literal["suspended", "needs_invite", "needs_profile", "needs_terms", "active"]
    reason: Optional[str] = None
    is_admin: bool = False
    profile: Optional[ProfileOut] = None
