from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from typing import Dict, Iterable, Optional
from app.core.cache import RedisCache
from app.core.exceptions import NotFound, ValidationFailed
from app.core.logger import logger
from app.models.profile.pilgrim_profile import PilgrimProfile
from app.schemas.profile.profile import ProfileUpsert
from app.services.activities.listing_cache import invalidate_activity_listing

FALLBACK_DISPLAY_NAME = "Peregrino"
MAX_PHOTO_DATA_LENGTH = int(2 * 1024 * 1024 * 1.37)  # 2MB of image, base64 encoded


class ProfileService:
    @staticmethod
    async def get_profile(db: AsyncSession, user_id: str) -> Optional[PilgrimProfile]:
        result = await db.execute(select(PilgrimProfile).where(PilgrimProfile.user_id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_profile_or_404(db: AsyncSession, user_id: str) -> PilgrimProfile:
        profile = await ProfileService.get_profile(db, user_id)
        if not profile:
            raise NotFound("Profile not found")
        return profile

    @staticmethod
    async def get_profiles_by_user_ids(db: AsyncSession, user_ids: Iterable[str]) -> Dict[str, PilgrimProfile]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await db.execute(select(PilgrimProfile).where(PilgrimProfile.user_id.in_(ids)))
        return {p.user_id: p for p in result.scalars().all()}

    @staticmethod
    async def upsert_profile(
        db: AsyncSession,
        user_id: str,
        data: ProfileUpsert,
        cache: Optional[RedisCache] = None,
    ) -> PilgrimProfile:
        """Insert the caller's profile, or overwrite every editable field of it."""
        fields = data.model_dump()

        profile = await ProfileService.get_profile(db, user_id)
        if profile is None:
            profile = PilgrimProfile(user_id=user_id, **fields)
            db.add(profile)
            try:
                await db.commit()
            except IntegrityError:
                # A concurrent first save won the insert; overwrite it instead
                await db.rollback()
                profile = await ProfileService.get_profile_or_404(db, user_id)
                for key, value in fields.items():
                    setattr(profile, key, value)
                await db.commit()
        else:
            for key, value in fields.items():
                setattr(profile, key, value)
            await db.commit()

        await db.refresh(profile)

        if cache is not None:
            # creator names are denormalized into the activity listing
            await invalidate_activity_listing(cache)

        logger.info(f"Profile saved for user {user_id}")
        return profile

    @staticmethod
    async def update_photo(db: AsyncSession, user_id: str, photo_data: str) -> PilgrimProfile:
        if not photo_data.startswith("data:image/"):
            raise ValidationFailed("Invalid image format")
        if len(photo_data) > MAX_PHOTO_DATA_LENGTH:
            raise ValidationFailed("Image too large (max 2MB)")

        profile = await ProfileService.get_profile(db, user_id)
        if not profile:
            raise NotFound("Profile not found. Create a profile first.")

        profile.photo_url = photo_data
        await db.commit()
        await db.refresh(profile)
        logger.info(f"Profile photo updated for user {user_id}")
        return profile
