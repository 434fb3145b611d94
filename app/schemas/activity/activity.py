import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Optional
from app.models.activity.activity import ActivityTypeEnum, DEFAULT_SPOTS
from app.schemas.profile.profile import ParticipantProfile


class ActivityBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    type: ActivityTypeEnum
    city: str = Field(..., min_length=1, max_length=100)
    date: dt.date
    time: Optional[str] = Field(None, max_length=10)
    spots: int = Field(DEFAULT_SPOTS, ge=2, le=20)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    transport_from: Optional[str] = None
    transport_to: Optional[str] = None
    transport_route_id: Optional[str] = None


class ActivityCreate(ActivityBase):
    pass


class ActivityOut(ActivityBase):
    id: int
    creator_id: str
    created_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}


# Listing row, annotated with the derived seat counts
class ActivitySummary(ActivityOut):
    participant_count: int
    spots_left: int
    creator_name: str


class RecommendedActivity(ActivitySummary):
    score: Optional[int] = None


class ActivityDetail(ActivitySummary):
    is_creator: bool
    is_participant: bool
    participants: List[ParticipantProfile] = []


class MessageResponse(BaseModel):
    message: str
