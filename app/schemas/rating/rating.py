from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class RatingCreate(BaseModel):
    score: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=500)


class RatingOut(BaseModel):
    id: int
    activity_id: int
    user_id: str
    score: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RatingWithAuthor(RatingOut):
    display_name: str


class RankedUser(BaseModel):
    user_id: str
    display_name: str
    photo_url: Optional[str] = None
    avg_rating: float
    total_ratings: int
    activities_created: int
