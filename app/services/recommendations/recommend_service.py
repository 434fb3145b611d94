# services/recommendations/recommend_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date
from typing import List, Optional
from app.core.logger import logger
from app.schemas.activity.activity import RecommendedActivity
from app.services.activities.activity_service import ActivityService
from app.services.profile.profile_service import ProfileService
from app.services.recommendations.scoring import RECOMMENDED_FEED_SIZE, rank_activities


async def recommend_activities(
    db: AsyncSession,
    activity_service: ActivityService,
    viewer_id: str,
    today: Optional[date] = None,
) -> List[RecommendedActivity]:
    profile = await ProfileService.get_profile(db, viewer_id)
    activities = await activity_service.list_activities(db)

    if profile is None:
        logger.info(f"[Recommend] No profile for {viewer_id}; returning latest activities unscored")
        return [RecommendedActivity(**a.model_dump()) for a in activities[:RECOMMENDED_FEED_SIZE]]

    ranked = rank_activities(activities, profile, viewer_id, today or date.today())
    logger.info(f"[Recommend] Ranked {len(activities)} activities for {viewer_id}")
    return ranked
