"""
Tests for the injury-risk service.

Covers the full write path (validate, map, persist, aggregate, summarize)
and the recomputation triggered by edits and deletes.
"""

import datetime as dt

import pytest

from athlete_risk.catalog import WORKOUT_TYPE_BODY_PARTS
from athlete_risk.errors import (
    ActivityNotFoundError,
    ActivityValidationError,
    AthleteExistsError,
    AthleteNotFoundError,
)
from athlete_risk.schemas import Athlete, BodyPart, InjuryRecord, InjuryStatus, RiskLevel

DAY = dt.date(2024, 3, 4)
CARDIO_PARTS = {"right-leg", "left-leg", "chest", "abdomen", "right-foot", "left-foot"}


def parts_on(store, day):
    return {row.body_part for row in store.workloads_on("athlete_1", day)}


# Test Cases


def test_log_activity_stores_detected_parts(service, athlete, cardio_payload):
    result = service.log_activity(cardio_payload)

    assert result.activity.id is not None
    assert set(result.activity.affected_body_parts) == CARDIO_PARTS
    assert set(service.get_activity(result.activity.id).affected_body_parts) == CARDIO_PARTS


def test_log_activity_refreshes_snapshot(service, athlete, cardio_payload):
    result = service.log_activity(cardio_payload)

    assert result.injury_risk is not None
    assert result.injury_risk.date == DAY
    assert result.injury_risk.overall_risk_score == 29
    assert result.injury_risk.risk_level == RiskLevel.MINIMAL


def test_log_strength_workout(service, athlete, workout_payload):
    """Test a strength session with exercises loads type and exercise parts."""
    result = service.log_activity(workout_payload)

    assert set(WORKOUT_TYPE_BODY_PARTS["Strength"]) <= set(result.activity.affected_body_parts)
    assert {"right-foot", "left-foot"} <= set(result.activity.affected_body_parts)
    chest = next(r for r in result.workload_updates if r.body_part == "chest")
    arm = next(r for r in result.workload_updates if r.body_part == "right-arm")
    assert chest.workload_score > arm.workload_score


def test_log_sports_session(service, athlete, sports_payload):
    result = service.log_activity(sports_payload)

    assert result.activity.activity_type == "sports"
    leg = next(r for r in result.workload_updates if r.body_part == "left-leg")
    abdomen = next(r for r in result.workload_updates if r.body_part == "abdomen")
    # Soccer legs carry a 1.4 multiplier
    assert leg.workload_score == pytest.approx(abdomen.workload_score * 1.4, abs=0.01)


def test_apply_activity_overrides_athlete(service, athlete, cardio_payload):
    result = service.apply_activity("athlete_1", {**cardio_payload, "athlete_id": "someone_else"})
    assert result.activity.athlete_id == "athlete_1"


def test_unknown_athlete_rejected(service, cardio_payload):
    with pytest.raises(AthleteNotFoundError):
        service.log_activity(cardio_payload)


@pytest.mark.parametrize("payload", [
    {"activity_type": "workout"},
    {"athlete_id": "athlete_1"},
    {"athlete_id": "athlete_1", "activity_type": "yoga-retreat"},
    {"athlete_id": "athlete_1", "activity_type": "workout", "exercises": "lots"},
])
def test_invalid_payload_rejected_before_any_write(service, store, athlete, payload):
    with pytest.raises(ActivityValidationError):
        service.log_activity(payload)
    assert store.list_activities("athlete_1") == []


def test_delete_activity_rebuilds_day(service, store, athlete, cardio_payload):
    """Test that deleting one of two same-day sessions leaves the other's load."""
    first = service.log_activity(cardio_payload).activity
    service.log_activity(cardio_payload)

    result = service.delete_activity(first.id)

    assert set(result.recomputed_body_parts) == CARDIO_PARTS
    assert result.removed_body_parts == []
    leg = next(r for r in store.workloads_on("athlete_1", DAY) if r.body_part == "left-leg")
    assert leg.workload_score == pytest.approx(7.0)


def test_delete_last_activity_removes_rows_and_snapshot(service, store, athlete, cardio_payload):
    activity = service.log_activity(cardio_payload).activity

    result = service.delete_activity(activity.id)

    assert set(result.removed_body_parts) == CARDIO_PARTS
    assert result.injury_risk is None
    assert parts_on(store, DAY) == set()
    assert service.risk_history("athlete_1") == []


def test_delete_unknown_activity(service, athlete):
    with pytest.raises(ActivityNotFoundError):
        service.delete_activity(999)


def test_update_activity_intensity(service, store, athlete, cardio_payload):
    activity = service.log_activity(cardio_payload).activity

    result = service.update_activity(activity.id, {"intensity_level": "hard"})

    leg = next(r for r in result.workload_updates if r.body_part == "left-leg")
    assert leg.workload_score == pytest.approx(10.5)
    assert result.activity.duration == 45
    assert len(store.list_activities("athlete_1")) == 1


def test_update_activity_moves_date(service, store, athlete, cardio_payload):
    """Test that moving an activity clears the old day and fills the new one."""
    activity = service.log_activity(cardio_payload).activity
    new_day = DAY + dt.timedelta(days=2)

    service.update_activity(activity.id, {"date": new_day.isoformat()})

    assert parts_on(store, DAY) == set()
    assert parts_on(store, new_day) == CARDIO_PARTS
    assert [s.date for s in service.risk_history("athlete_1")] == [new_day]


def test_update_activity_redetects_parts(service, store, athlete, cardio_payload):
    activity = service.log_activity(cardio_payload).activity

    result = service.update_activity(activity.id, {"workout_type": "Yoga"})

    assert set(result.activity.affected_body_parts) == set(WORKOUT_TYPE_BODY_PARTS["Yoga"])
    assert parts_on(store, DAY) == set(WORKOUT_TYPE_BODY_PARTS["Yoga"])


def test_update_activity_keeps_athlete(service, athlete, cardio_payload):
    activity = service.log_activity(cardio_payload).activity
    result = service.update_activity(activity.id, {"athlete_id": "intruder"})
    assert result.activity.athlete_id == "athlete_1"


def test_get_risk_report(service, athlete, cardio_payload):
    service.log_activity(cardio_payload)

    report = service.get_risk("athlete_1", DAY)

    assert {r.part for r in report.body_part_risks} == CARDIO_PARTS
    assert all(r.message.startswith("LOW") for r in report.body_part_risks)
    assert report.overall_risk.overall_risk_score == 29
    assert len(report.workloads) == len(CARDIO_PARTS)


def test_get_risk_for_quiet_day(service, athlete):
    report = service.get_risk("athlete_1", DAY)
    assert report.body_part_risks == []
    assert report.overall_risk is None


def test_active_injury_raises_risk(service, athlete, cardio_payload):
    """Test that an injured leg scores higher than the healthy one under equal load."""
    service.record_injury(InjuryRecord(athlete_id="athlete_1", body_part=BodyPart.LEFT_LEG, occurred_on=DAY))

    result = service.log_activity(cardio_payload)

    rows = {r.body_part: r for r in result.workload_updates}
    assert rows["left-leg"].injury_risk_percentage == 44
    assert rows["right-leg"].injury_risk_percentage == 29


def test_resolve_injury(service, athlete):
    injury = service.record_injury(InjuryRecord(athlete_id="athlete_1", body_part=BodyPart.NECK))

    resolved = service.resolve_injury(injury.id)

    assert resolved.status == InjuryStatus.RESOLVED
    assert service.list_injuries("athlete_1")[0].status == InjuryStatus.RESOLVED


def test_list_activities_newest_first(service, athlete, cardio_payload):
    for offset in range(3):
        day = DAY + dt.timedelta(days=offset)
        service.log_activity({**cardio_payload, "date": day.isoformat()})

    newest = service.list_activities("athlete_1", limit=2)
    oldest = service.list_activities("athlete_1", limit=2, offset=2)

    assert [a.date for a in newest] == [DAY + dt.timedelta(days=2), DAY + dt.timedelta(days=1)]
    assert [a.date for a in oldest] == [DAY]


def test_history_views(service, athlete, cardio_payload):
    service.log_activity(cardio_payload)
    service.log_activity({**cardio_payload, "date": "2024-03-05"})

    history = service.workload_history("athlete_1", body_part="left-leg")
    assert [r.date for r in history] == [dt.date(2024, 3, 5), DAY]
    assert len(service.workload_history("athlete_1", limit=3)) == 3
    assert [s.date for s in service.risk_history("athlete_1")] == [dt.date(2024, 3, 5), DAY]


def test_body_part_recommendations(service, athlete, cardio_payload):
    service.log_activity(cardio_payload)

    recommendations = service.body_part_recommendations("athlete_1", "left-leg")

    assert recommendations
    assert all(r.body_parts == ["left-leg"] for r in recommendations)


def test_performance_metrics(service, athlete, cardio_payload):
    service.log_activity(cardio_payload)

    metrics = service.performance_metrics("athlete_1", days=30, as_of=DAY)

    assert metrics.daily_activity_count.data[-1] == 1
    assert metrics.intensity_distribution["moderate"] == 1


def test_athlete_lifecycle(service, store, athlete, cardio_payload):
    with pytest.raises(AthleteExistsError):
        service.create_athlete(Athlete(athlete_id="athlete_1", name="Duplicate"))

    updated = service.update_athlete("athlete_1", {"team": "Harbor City"})
    assert updated.team == "Harbor City"
    assert updated.position == "Midfielder"

    service.log_activity(cardio_payload)
    service.delete_athlete("athlete_1")

    with pytest.raises(AthleteNotFoundError):
        service.get_athlete("athlete_1")
    assert store.workload_history("athlete_1") == []


def test_run_recovery_through_service(service, store, athlete, cardio_payload):
    service.log_activity(cardio_payload)

    written = service.run_recovery(DAY + dt.timedelta(days=1))

    assert written == len(CARDIO_PARTS)
    assert parts_on(store, DAY + dt.timedelta(days=1)) == CARDIO_PARTS


def test_client_supplied_parts_are_kept(service, store, athlete, cardio_payload):
    result = service.log_activity({**cardio_payload, "affected_body_parts": ["neck"]})

    assert result.activity.affected_body_parts == ["neck"]
    assert parts_on(store, DAY) == {"neck"}
