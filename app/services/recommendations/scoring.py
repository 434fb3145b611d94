# services/recommendations/scoring.py
"""Fixed additive heuristic ranking activities for one viewer.

score_activity is a pure function of (activity, profile, viewer, reference
date): it reads nothing from storage and never mutates its inputs.
"""
from datetime import date
from typing import List, Optional, Sequence
from app.models.profile.pilgrim_profile import DEFAULT_AFFINITY
from app.schemas.activity.activity import ActivitySummary, RecommendedActivity

RECOMMENDED_FEED_SIZE = 10

CITY_MATCH_BONUS = 10

# (max absolute distance in days, bonus), checked in order
DATE_PROXIMITY_BONUSES = (
    (1, 8),
    (3, 5),
    (7, 2),
)

OPEN_SPOTS_BONUS = 3
ROOMY_SPOTS_THRESHOLD = 2
ROOMY_SPOTS_BONUS = 1

AFFINITY_THRESHOLD = 2
AFFINITY_BONUS = 2

# Larger than the best possible positive score (10 + 8 + 3 + 1 + 2 = 24),
# so the viewer's own activities always sink to the bottom of the feed.
OWN_ACTIVITY_PENALTY = -100

TYPE_PREFERENCE_FIELDS = {
    "transport": "pref_transport",
    "meal": "pref_meals",
    "hike": "pref_hiking",
    "lodging": "pref_lodging",
}


def date_proximity_bonus(activity_date: Optional[date], today: date) -> int:
    if activity_date is None:
        return 0
    distance = abs((activity_date - today).days)
    for max_days, bonus in DATE_PROXIMITY_BONUSES:
        if distance <= max_days:
            return bonus
    return 0


def availability_bonus(spots_left: int) -> int:
    bonus = 0
    if spots_left > 0:
        bonus += OPEN_SPOTS_BONUS
    if spots_left > ROOMY_SPOTS_THRESHOLD:
        bonus += ROOMY_SPOTS_BONUS
    return bonus


def affinity_bonus(activity_type: str, profile) -> int:
    field = TYPE_PREFERENCE_FIELDS.get(activity_type)
    if field is None:
        return 0
    value = getattr(profile, field, None)
    if value is None:
        value = DEFAULT_AFFINITY
    return AFFINITY_BONUS if value > AFFINITY_THRESHOLD else 0


def score_activity(activity: ActivitySummary, profile, viewer_id: str, today: date) -> int:
    score = 0

    if activity.city in set(profile.cities or []):
        score += CITY_MATCH_BONUS

    score += date_proximity_bonus(activity.date, today)
    score += availability_bonus(activity.spots_left)

    activity_type = getattr(activity.type, "value", activity.type)
    score += affinity_bonus(activity_type, profile)

    if activity.creator_id == viewer_id:
        score += OWN_ACTIVITY_PENALTY

    return score


def rank_activities(
    activities: Sequence[ActivitySummary],
    profile,
    viewer_id: str,
    today: date,
    limit: int = RECOMMENDED_FEED_SIZE,
) -> List[RecommendedActivity]:
    scored = [
        RecommendedActivity(**activity.model_dump(), score=score_activity(activity, profile, viewer_id, today))
        for activity in activities
    ]
    # sorted() is stable: equal scores keep listing order (newest first)
    scored = sorted(scored, key=lambda a: a.score, reverse=True)
    return scored[:limit]
