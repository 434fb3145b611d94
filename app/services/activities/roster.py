"""Membership arithmetic shared by every view of an activity.

The creator of an activity is always a member and always occupies one seat,
but is never stored as an ActivityParticipant row. Counts, rosters and
membership checks all derive from the helpers below so that the implicit
creator seat is accounted for in exactly one place.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Dict, List, Optional
from app.models.activity.activity import Activity
from app.models.activity.activity_participant import ActivityParticipant

CREATOR_SEATS = 1


def effective_members(activity: Activity, participant_ids: List[str]) -> List[str]:
    """Creator first, then participants in join order."""
    return [activity.creator_id] + [uid for uid in participant_ids if uid != activity.creator_id]


def occupied_seats(raw_participant_count: int) -> int:
    return raw_participant_count + CREATOR_SEATS


def spots_left(activity: Activity, participant_count: int) -> int:
    return activity.capacity - participant_count


async def get_participant_ids(db: AsyncSession, activity_id: int) -> List[str]:
    result = await db.execute(
        select(ActivityParticipant.user_id)
        .where(ActivityParticipant.activity_id == activity_id)
        .order_by(ActivityParticipant.joined_at.asc(), ActivityParticipant.id.asc())
    )
    return list(result.scalars().all())


async def count_participants(db: AsyncSession, activity_id: int) -> int:
    """Stored participant rows only, without the creator seat."""
    count = await db.scalar(
        select(func.count(ActivityParticipant.id)).where(ActivityParticipant.activity_id == activity_id)
    )
    return count or 0


async def participant_counts(db: AsyncSession) -> Dict[int, int]:
    """Stored participant rows per activity id, in one grouped query."""
    result = await db.execute(
        select(ActivityParticipant.activity_id, func.count(ActivityParticipant.id))
        .group_by(ActivityParticipant.activity_id)
    )
    return {activity_id: count for activity_id, count in result.all()}


async def is_participant(db: AsyncSession, activity_id: int, user_id: str) -> bool:
    result = await db.execute(
        select(ActivityParticipant.id).where(
            ActivityParticipant.activity_id == activity_id,
            ActivityParticipant.user_id == user_id,
        )
    )
    return result.first() is not None


async def is_member(db: AsyncSession, activity_id: int, user_id: str, activity: Optional[Activity] = None) -> bool:
    """Creator or participant. False when the activity does not exist."""
    if activity is None:
        activity = await db.get(Activity, activity_id)
    if activity is None:
        return False
    if activity.creator_id == user_id:
        return True
    return await is_participant(db, activity_id, user_id)
