from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.core.database import get_db
from app.core.redis_lifecyle import get_cache
from app.core.security import Identity
from app.dependencies.auth import get_current_identity, get_active_identity
from app.schemas.activity.activity import (
    ActivityCreate, ActivityOut, ActivitySummary, ActivityDetail, MessageResponse, RecommendedActivity
)
from app.services.activities.activity_service import ActivityService
from app.services.activities.detail_service import get_activity_detail
from app.services.activities.membership_service import MembershipService
from app.services.recommendations.recommend_service import recommend_activities

router = APIRouter(prefix="/activities", tags=["Activities"])

async def get_activity_service(
    cache=Depends(get_cache)
) -> ActivityService:
    return ActivityService(cache)

async def get_membership_service(
    cache=Depends(get_cache)
) -> MembershipService:
    return MembershipService(cache)

@router.get("", response_model=List[ActivitySummary])
async def list_activities(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity_service: ActivityService = Depends(get_activity_service)
):
    return await activity_service.list_activities(db)

@router.get("/recommended", response_model=List[RecommendedActivity])
async def recommended_activities(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity_service: ActivityService = Depends(get_activity_service)
):
    return await recommend_activities(db, activity_service, identity.user_id)

@router.get("/mine", response_model=List[ActivitySummary])
async def my_activities(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity_service: ActivityService = Depends(get_activity_service)
):
    return await activity_service.list_my_activities(db, identity.user_id)

@router.get("/{activity_id}", response_model=ActivityDetail)
async def get_activity(
    activity_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    detail = await get_activity_detail(db, activity_id, identity.user_id)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    return detail

@router.post("", response_model=ActivityOut, status_code=status.HTTP_201_CREATED)
async def create_activity(
    data: ActivityCreate,
    identity: Identity = Depends(get_active_identity),
    db: AsyncSession = Depends(get_db),
    activity_service: ActivityService = Depends(get_activity_service)
):
    return await activity_service.create_activity(db, data, identity)

@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(
    activity_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    activity_service: ActivityService = Depends(get_activity_service)
):
    return await activity_service.delete_activity(db, activity_id, identity.user_id)

@router.post("/{activity_id}/join", response_model=MessageResponse)
async def join_activity(
    activity_id: int,
    identity: Identity = Depends(get_active_identity),
    db: AsyncSession = Depends(get_db),
    membership_service: MembershipService = Depends(get_membership_service)
):
    return await membership_service.join_activity(db, activity_id, identity.user_id)

@router.post("/{activity_id}/leave", response_model=MessageResponse)
async def leave_activity(
    activity_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
    membership_service: MembershipService = Depends(get_membership_service)
):
    return await membership_service.leave_activity(db, activity_id, identity.user_id)
