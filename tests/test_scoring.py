from datetime import date, datetime, timedelta

from app.models.profile.pilgrim_profile import PilgrimProfile
from app.schemas.activity.activity import ActivitySummary
from app.services.recommendations.scoring import (
    OWN_ACTIVITY_PENALTY,
    RECOMMENDED_FEED_SIZE,
    availability_bonus,
    date_proximity_bonus,
    rank_activities,
    score_activity,
)

TODAY = date(2025, 6, 10)


def make_summary(activity_id=1, city="Porto", type="meal", on=TODAY, spots=4, participant_count=1, creator_id="creator"):
    return ActivitySummary(
        id=activity_id,
        creator_id=creator_id,
        title=f"Activity {activity_id}",
        type=type,
        city=city,
        date=on,
        spots=spots,
        created_at=datetime(2025, 6, 1),
        participant_count=participant_count,
        spots_left=spots - participant_count,
        creator_name="Peregrino",
    )


def make_profile(**fields):
    defaults = dict(
        user_id="viewer",
        display_name="Viewer",
        cities=["Porto"],
        pref_transport=0,
        pref_meals=5,
        pref_hiking=0,
        pref_lodging=0,
    )
    defaults.update(fields)
    return PilgrimProfile(**defaults)


def test_city_date_availability_and_affinity_add_up():
    profile = make_profile()

    in_porto = make_summary(activity_id=1, city="Porto")
    elsewhere = make_summary(activity_id=2, city="Valença")

    assert score_activity(in_porto, profile, "viewer", TODAY) == 24
    assert score_activity(elsewhere, profile, "viewer", TODAY) == 14

    ranked = rank_activities([elsewhere, in_porto], profile, "viewer", TODAY)
    assert [a.id for a in ranked] == [1, 2]
    assert ranked[0].score == 24


def test_date_proximity_bands_are_symmetric():
    assert date_proximity_bonus(TODAY, TODAY) == 8
    assert date_proximity_bonus(TODAY - timedelta(days=1), TODAY) == 8
    assert date_proximity_bonus(TODAY + timedelta(days=3), TODAY) == 5
    assert date_proximity_bonus(TODAY - timedelta(days=7), TODAY) == 2
    assert date_proximity_bonus(TODAY + timedelta(days=8), TODAY) == 0
    assert date_proximity_bonus(None, TODAY) == 0


def test_availability_bonus():
    assert availability_bonus(0) == 0
    assert availability_bonus(2) == 3
    assert availability_bonus(3) == 4


def test_missing_affinity_counts_as_zero():
    profile = make_profile(cities=[], pref_meals=None)
    far_future = make_summary(on=TODAY + timedelta(days=30), spots=2, participant_count=2)
    assert score_activity(far_future, profile, "viewer", TODAY) == 0


def test_own_activity_sinks_below_zero_bonus_activities():
    profile = make_profile()
    own = make_summary(activity_id=1, creator_id="viewer")
    plain = make_summary(activity_id=2, city="Lisboa", type="hike", on=TODAY + timedelta(days=30), spots=2, participant_count=2)

    assert score_activity(plain, profile, "viewer", TODAY) == 0
    assert score_activity(own, profile, "viewer", TODAY) == 24 + OWN_ACTIVITY_PENALTY

    ranked = rank_activities([own, plain], profile, "viewer", TODAY)
    assert [a.id for a in ranked] == [2, 1]


def test_ranking_is_deterministic_and_truncated():
    profile = make_profile()
    activities = [make_summary(activity_id=i) for i in range(1, 15)]

    first = rank_activities(activities, profile, "viewer", TODAY)
    second = rank_activities(activities, profile, "viewer", TODAY)

    assert len(first) == RECOMMENDED_FEED_SIZE
    # equal scores keep their listing order
    assert [a.id for a in first] == list(range(1, 11))
    assert [a.id for a in first] == [a.id for a in second]


def test_scoring_does_not_mutate_inputs():
    profile = make_profile()
    activity = make_summary()
    before = activity.model_dump()

    score_activity(activity, profile, "viewer", TODAY)

    assert activity.model_dump() == before
    assert profile.cities == ["Porto"]
