from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.core.database import get_db
from app.core.redis_lifecyle import get_cache
from app.core.security import Identity
from app.dependencies.auth import get_current_identity, get_active_identity
from app.schemas.profile.profile import ProfileOut, ProfileUpsert, PhotoUpload, PhotoUploadResponse
from app.services.profile.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])

@router.get("", response_model=Optional[ProfileOut])
async def get_my_profile(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
):
    return await ProfileService.get_profile(db, identity.user_id)

@router.post("", response_model=ProfileOut)
async def save_my_profile(
    data: ProfileUpsert,
    identity: Identity = Depends(get_active_identity),
    db: AsyncSession = Depends(get_db),
    cache=Depends(get_cache)
):
    return await ProfileService.upsert_profile(db, identity.user_id, data, cache)

@router.post("/photo", response_model=PhotoUploadResponse)
async def upload_photo(
    data: PhotoUpload,
    identity: Identity = Depends(get_active_identity),
    db: AsyncSession = Depends(get_db)
):
    profile = await ProfileService.update_photo(db, identity.user_id, data.photo_data)
    return PhotoUploadResponse(photo_url=profile.photo_url)
