from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.core.database import get_db
from app.core.security import Identity
from app.dependencies.auth import get_current_identity, get_active_identity
from app.schemas.rating.rating import RatingCreate, RatingOut, RatingWithAuthor, RankedUser
from app.services.ratings.rating_service import create_rating, get_ratings, get_user_rankings

router = APIRouter(tags=["Ratings"])

@router.get("/activities/{activity_id}/ratings", response_model=List[RatingWithAuthor])
async def list_ratings(
    activity_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await get_ratings(db, activity_id)

@router.post("/activities/{activity_id}/ratings", response_model=RatingOut, status_code=status.HTTP_201_CREATED)
async def rate_activity(
    activity_id: int,
    data: RatingCreate,
    identity: Identity = Depends(get_active_identity),
    db: AsyncSession = Depends(get_db)
):
    return await create_rating(db, activity_id, identity.user_id, data)

@router.get("/rankings", response_model=List[RankedUser])
async def rankings(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await get_user_rankings(db)
