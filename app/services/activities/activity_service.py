from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, or_
from typing import List, Optional
from app.core.cache import RedisCache
from app.core.config import settings
from app.core.exceptions import AuthorizationDenied, NotFound
from app.core.logger import logger
from app.core.security import Identity
from app.models.activity.activity import Activity, VERIFICATION_REQUIRED_TYPES
from app.models.activity.activity_participant import ActivityParticipant
from app.models.activity.chat_message import ChatMessage
from app.models.activity.rating import Rating
from app.schemas.activity.activity import ActivityCreate, ActivityOut, ActivitySummary
from app.services.activities.listing_cache import ACTIVITY_LISTING_KEY, invalidate_activity_listing
from app.services.activities.roster import occupied_seats, participant_counts, spots_left
from app.services.profile.profile_service import FALLBACK_DISPLAY_NAME, ProfileService
from app.services.verification.verification_service import is_verified_user


def summarize(activity: Activity, raw_participant_count: int, creator_name: Optional[str]) -> ActivitySummary:
    count = occupied_seats(raw_participant_count)
    return ActivitySummary(
        **ActivityOut.model_validate(activity).model_dump(),
        participant_count=count,
        spots_left=spots_left(activity, count),
        creator_name=creator_name or FALLBACK_DISPLAY_NAME,
    )


class ActivityService:
    def __init__(self, cache: RedisCache):
        self.cache = cache

    async def create_activity(self, db: AsyncSession, data: ActivityCreate, identity: Identity) -> Activity:
        if data.type in VERIFICATION_REQUIRED_TYPES and not await is_verified_user(db, identity):
            logger.warning(f"Unverified user {identity.user_id} tried to create a {data.type.value} activity")
            raise AuthorizationDenied("Identity verification required for transport and lodging activities")

        fields = data.model_dump()
        fields["date"] = data.date.isoformat()
        new_activity = Activity(**fields, creator_id=identity.user_id)
        db.add(new_activity)
        await db.commit()
        await db.refresh(new_activity)

        await invalidate_activity_listing(self.cache)

        logger.info(f"Activity {new_activity.id} ({new_activity.type.value}) created by user {identity.user_id}")
        return new_activity

    async def get_activity(self, db: AsyncSession, activity_id: int) -> Optional[Activity]:
        return await db.get(Activity, activity_id)

    async def list_activities(self, db: AsyncSession) -> List[ActivitySummary]:
        """Every activity, newest first, annotated with seat counts and creator name."""
        cached = await self.cache.get(ACTIVITY_LISTING_KEY)
        if cached is not None:
            logger.info(f"Retrieved {len(cached)} activities from cache")
            return [ActivitySummary(**row) for row in cached]

        summaries = await self._build_listing(db)

        await self.cache.set(
            ACTIVITY_LISTING_KEY,
            [s.model_dump(mode="json") for s in summaries],
            expire=settings.ACTIVITY_CACHE_TTL_SECONDS,
        )
        logger.info(f"Retrieved {len(summaries)} activities from database")
        return summaries

    async def _build_listing(self, db: AsyncSession) -> List[ActivitySummary]:
        result = await db.execute(
            select(Activity).order_by(Activity.created_at.desc(), Activity.id.desc())
        )
        activities = result.scalars().all()
        counts = await participant_counts(db)
        creators = await ProfileService.get_profiles_by_user_ids(db, {a.creator_id for a in activities})

        return [
            summarize(
                activity,
                counts.get(activity.id, 0),
                creators[activity.creator_id].display_name if activity.creator_id in creators else None,
            )
            for activity in activities
        ]

    async def list_my_activities(self, db: AsyncSession, user_id: str) -> List[ActivitySummary]:
        """Activities the user created or joined, in listing order."""
        result = await db.execute(
            select(Activity.id).where(
                or_(
                    Activity.creator_id == user_id,
                    Activity.id.in_(
                        select(ActivityParticipant.activity_id).where(ActivityParticipant.user_id == user_id)
                    ),
                )
            )
        )
        my_ids = set(result.scalars().all())
        return [a for a in await self.list_activities(db) if a.id in my_ids]

    async def delete_activity(self, db: AsyncSession, activity_id: int, user_id: str) -> dict:
        activity = await db.get(Activity, activity_id)
        if not activity:
            raise NotFound("Activity not found")
        if activity.creator_id != user_id:
            logger.warning(f"Unauthorized delete attempt: activity {activity_id}, user {user_id}")
            raise AuthorizationDenied("Only the creator can delete this activity")

        # No cascading at the storage level: children go first, in one transaction
        await db.execute(delete(Rating).where(Rating.activity_id == activity_id))
        await db.execute(delete(ChatMessage).where(ChatMessage.activity_id == activity_id))
        await db.execute(delete(ActivityParticipant).where(ActivityParticipant.activity_id == activity_id))
        await db.delete(activity)
        await db.commit()

        await invalidate_activity_listing(self.cache)

        logger.info(f"Activity {activity_id} deleted by user {user_id}")
        return {"message": "Activity deleted"}
