from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.profile.pilgrim_profile import DEFAULT_AFFINITY, VerificationStatus


class ProfileBase(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)
    language: Optional[str] = "en"
    nationality: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)
    photo_url: Optional[str] = None
    travel_start_date: Optional[str] = None
    travel_end_date: Optional[str] = None
    cities: List[str] = []
    pref_transport: int = Field(DEFAULT_AFFINITY, ge=0, le=5)
    pref_meals: int = Field(DEFAULT_AFFINITY, ge=0, le=5)
    pref_hiking: int = Field(DEFAULT_AFFINITY, ge=0, le=5)
    pref_lodging: int = Field(DEFAULT_AFFINITY, ge=0, le=5)

    @field_validator("cities", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    @field_validator("pref_transport", "pref_meals", "pref_hiking", "pref_lodging", mode="before")
    @classmethod
    def none_as_default(cls, v):
        return DEFAULT_AFFINITY if v is None else v


class ProfileUpsert(ProfileBase):
    pass


class ProfileOut(ProfileBase):
    id: int
    user_id: str
    is_admin: bool = False
    can_invite: bool = False
    is_suspended: bool = False
    verification_status: VerificationStatus = VerificationStatus.unverified
    accepted_terms_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PhotoUpload(BaseModel):
    photo_data: str


class PhotoUploadResponse(BaseModel):
    photo_url: str


# Entry of an activity roster
class ParticipantProfile(BaseModel):
    user_id: str
    display_name: str
    nationality: Optional[str] = None
    language: Optional[str] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None

    model_config = {"from_attributes": True}
