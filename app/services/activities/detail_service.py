from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.models.activity.activity import Activity
from app.schemas.activity.activity import ActivityDetail, ActivityOut
from app.schemas.profile.profile import ParticipantProfile
from app.services.activities.roster import effective_members, get_participant_ids, spots_left
from app.services.profile.profile_service import FALLBACK_DISPLAY_NAME, ProfileService


async def get_activity_detail(db: AsyncSession, activity_id: int, viewer_id: str) -> Optional[ActivityDetail]:
    """Full view of one activity as seen by viewer_id, or None when it does not exist.

    The roster lists the creator first, then participants in join order.
    Members without a saved profile are left out of the roster but still
    occupy their seat in participant_count.
    """
    activity = await db.get(Activity, activity_id)
    if activity is None:
        return None

    participant_ids = await get_participant_ids(db, activity_id)
    members = effective_members(activity, participant_ids)
    profiles = await ProfileService.get_profiles_by_user_ids(db, members)

    participant_count = len(members)
    creator = profiles.get(activity.creator_id)

    return ActivityDetail(
        **ActivityOut.model_validate(activity).model_dump(),
        participant_count=participant_count,
        spots_left=spots_left(activity, participant_count),
        creator_name=creator.display_name if creator else FALLBACK_DISPLAY_NAME,
        is_creator=activity.creator_id == viewer_id,
        is_participant=viewer_id in participant_ids,
        participants=[
            ParticipantProfile.model_validate(profiles[uid]) for uid in members if uid in profiles
        ],
    )
