from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List
from app.core.exceptions import AuthorizationDenied
from app.core.logger import logger
from app.models.activity.activity import Activity
from app.models.activity.rating import Rating
from app.schemas.rating.rating import RankedUser, RatingCreate, RatingOut, RatingWithAuthor
from app.services.activities.roster import is_member
from app.services.profile.profile_service import FALLBACK_DISPLAY_NAME, ProfileService


async def get_ratings(db: AsyncSession, activity_id: int) -> List[RatingWithAuthor]:
    result = await db.execute(
        select(Rating)
        .where(Rating.activity_id == activity_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
    )
    ratings = result.scalars().all()
    authors = await ProfileService.get_profiles_by_user_ids(db, {r.user_id for r in ratings})
    return [
        RatingWithAuthor(
            **RatingOut.model_validate(r).model_dump(),
            display_name=authors[r.user_id].display_name if r.user_id in authors else FALLBACK_DISPLAY_NAME,
        )
        for r in ratings
    ]


async def create_rating(db: AsyncSession, activity_id: int, user_id: str, data: RatingCreate) -> Rating:
    if not await is_member(db, activity_id, user_id):
        raise AuthorizationDenied("Not a member of this activity")

    rating = Rating(
        activity_id=activity_id,
        user_id=user_id,
        score=data.score,
        comment=data.comment or None,
    )
    db.add(rating)
    await db.commit()
    await db.refresh(rating)
    logger.info(f"User {user_id} rated activity {activity_id} with {data.score}")
    return rating


async def get_user_rankings(db: AsyncSession) -> List[RankedUser]:
    """Activity creators ranked by the average score their activities received."""
    rated = await db.execute(
        select(Activity.creator_id, func.avg(Rating.score), func.count(Rating.id))
        .join(Activity, Activity.id == Rating.activity_id)
        .group_by(Activity.creator_id)
    )
    rated_rows = rated.all()
    if not rated_rows:
        return []

    created = await db.execute(
        select(Activity.creator_id, func.count(Activity.id)).group_by(Activity.creator_id)
    )
    activities_created = {creator_id: count for creator_id, count in created.all()}
    profiles = await ProfileService.get_profiles_by_user_ids(db, [row[0] for row in rated_rows])

    rankings = [
        RankedUser(
            user_id=creator_id,
            display_name=profiles[creator_id].display_name if creator_id in profiles else FALLBACK_DISPLAY_NAME,
            photo_url=profiles[creator_id].photo_url if creator_id in profiles else None,
            avg_rating=round(float(avg), 1),
            total_ratings=total,
            activities_created=activities_created.get(creator_id, 0),
        )
        for creator_id, avg, total in rated_rows
    ]
    return sorted(rankings, key=lambda r: (r.avg_rating, r.total_ratings), reverse=True)
