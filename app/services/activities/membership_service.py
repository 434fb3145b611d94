from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy import delete, func, insert, literal
from fastapi import HTTPException
from datetime import datetime
from app.core.cache import RedisCache
from app.core.exceptions import ConflictOfState, NotFound
from app.core.logger import logger
from app.models.activity.activity import Activity, DEFAULT_SPOTS
from app.models.activity.activity_participant import ActivityParticipant
from app.services.activities.listing_cache import invalidate_activity_listing
from app.services.activities.roster import count_participants, is_participant, occupied_seats, spots_left, CREATOR_SEATS


def _insert_if_capacity(activity_id: int, user_id: str):
    """INSERT ... SELECT that only writes a row while occupied seats < spots."""
    occupied = (
        select(func.count(ActivityParticipant.id) + CREATOR_SEATS)
        .where(ActivityParticipant.activity_id == activity_id)
        .scalar_subquery()
    )
    capacity = (
        select(func.coalesce(Activity.spots, DEFAULT_SPOTS))
        .where(Activity.id == activity_id)
        .scalar_subquery()
    )
    return insert(ActivityParticipant).from_select(
        ["activity_id", "user_id", "joined_at"],
        select(literal(activity_id), literal(user_id), literal(datetime.utcnow())).where(occupied < capacity),
    )


class MembershipService:
    def __init__(self, cache: RedisCache):
        self.cache = cache

    async def join_activity(self, db: AsyncSession, activity_id: int, user_id: str) -> dict:
        """Add user_id as a participant.

        The activity row is locked for the rest of the transaction and the
        participant row is written with a conditional insert, so two
        concurrent joins cannot both take the last seat.
        """
        try:
            result = await db.execute(
                select(Activity).where(Activity.id == activity_id).with_for_update()
            )
            activity = result.scalar_one_or_none()
            if not activity:
                raise NotFound("Activity not found")
            if activity.creator_id == user_id:
                raise ConflictOfState("You are the creator")
            if await is_participant(db, activity_id, user_id):
                raise ConflictOfState("Already joined")

            count = occupied_seats(await count_participants(db, activity_id))
            if spots_left(activity, count) <= 0:
                raise ConflictOfState("No spots available")

            inserted = await db.execute(_insert_if_capacity(activity_id, user_id))
            if inserted.rowcount == 0:
                raise ConflictOfState("No spots available")

            await db.commit()
        except HTTPException as e:
            await db.rollback()
            logger.warning(f"Join refused: activity {activity_id}, user {user_id}: {e.detail}")
            raise
        except IntegrityError:
            await db.rollback()
            logger.warning(f"Join refused: activity {activity_id}, user {user_id}: duplicate")
            raise ConflictOfState("Already joined")

        await invalidate_activity_listing(self.cache)
        logger.info(f"User {user_id} joined activity {activity_id}")
        return {"message": "Joined"}

    async def leave_activity(self, db: AsyncSession, activity_id: int, user_id: str) -> dict:
        """Remove the membership row. Leaving something never joined is not an error."""
        result = await db.execute(
            delete(ActivityParticipant).where(
                ActivityParticipant.activity_id == activity_id,
                ActivityParticipant.user_id == user_id,
            )
        )
        await db.commit()

        if result.rowcount:
            await invalidate_activity_listing(self.cache)
            logger.info(f"User {user_id} left activity {activity_id}")
        return {"message": "Left"}
