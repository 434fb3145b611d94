from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.models.profile.pilgrim_profile import VerificationStatus


class VerificationUploadRequest(BaseModel):
    name: Optional[str] = None
    size: Optional[int] = None
    content_type: Optional[str] = None
    type: Optional[str] = None


class UploadMetadata(BaseModel):
    name: str
    size: Optional[int] = None
    content_type: str


class VerificationUploadOut(BaseModel):
    upload_url: str
    object_path: str
    metadata: UploadMetadata


class VerificationSubmit(BaseModel):
    document_path: str = Field(..., min_length=1)
    selfie_path: str = Field(..., min_length=1)


class VerificationStatusOut(BaseModel):
    status: VerificationStatus
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reason: Optional[str] = None

    @classmethod
    def from_profile(cls, profile) -> "VerificationStatusOut":
        return cls(
            status=profile.verification_status or VerificationStatus.unverified,
            submitted_at=profile.verification_submitted_at,
            reviewed_at=profile.verification_reviewed_at,
            reason=profile.verification_reason,
        )


class VerificationReview(BaseModel):
    status: VerificationStatus
    reason: Optional[str] = Field(None, max_length=500)


class VerificationOut(BaseModel):
    user_id: str
    display_name: str
    verification_status: VerificationStatus
    document_url: Optional[str] = None
    selfie_url: Optional[str] = None
    verification_submitted_at: Optional[datetime] = None
    verification_reviewed_at: Optional[datetime] = None
    verification_reason: Optional[str] = None

    model_config = {"from_attributes": True}
