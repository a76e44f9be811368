"""
Tests for per-body-part workload aggregation.

Ensures daily rows are derived from every activity of the day, that
re-applying an activity is idempotent, and that one failing body part does
not abort the others.
"""

import datetime as dt

import pytest

from athlete_risk.aggregator import WorkloadAggregator
from athlete_risk.database import SqlAlchemyStore
from athlete_risk.errors import PersistenceError
from athlete_risk.schemas import Athlete, BodyPartWorkload, ExerciseEntry, WorkoutActivity, parse_activity
from athlete_risk.service import InjuryRiskService

DAY = dt.date(2024, 3, 4)
CARDIO_PARTS = {"right-leg", "left-leg", "chest", "abdomen", "right-foot", "left-foot"}


class FailingPartStore(SqlAlchemyStore):
    """Store whose workload writes fail for one body part."""

    failing_part = "chest"

    def upsert_workload(self, row):
        if row.body_part == self.failing_part:
            raise PersistenceError("disk full")
        return super().upsert_workload(row)


class FailingListStore(SqlAlchemyStore):
    def list_activities(self, athlete_id, on_date=None, since=None, until=None):
        raise PersistenceError("connection lost")


# Fixtures

@pytest.fixture
def aggregator(service):
    return service.aggregator


# Test Cases


def test_cardio_rows_written_for_every_part(service, athlete, cardio_payload):
    """
    Test the rows of a 45-minute moderate cardio session with good recovery.

    Workload per part: 10 × 1.0 × (0.3 + 0.75 × 0.7) × 0.85 = 7.0. With no
    history: recovery 56 and risk 2.1 + 0.5 + 20 + 6.6 = 29.2.
    """
    result = service.log_activity(cardio_payload)

    assert {row.body_part for row in result.workload_updates} == CARDIO_PARTS
    assert result.failed_body_parts == []

    row = next(r for r in result.workload_updates if r.body_part == "left-leg")
    assert row.workload_score == pytest.approx(7.0)
    assert row.cumulative_7day == pytest.approx(7.0)
    assert row.cumulative_30day == pytest.approx(7.0)
    assert row.recovery_rate == pytest.approx(56.0)
    assert row.days_since_last_activity == 0
    assert row.activity_count == 1
    assert row.total_duration == pytest.approx(45.0)
    assert row.injury_risk_percentage == 29


def test_reapplying_activity_is_idempotent(service, store, athlete, cardio_payload):
    """Test that applying a stored activity again rewrites identical rows."""
    saved = service.log_activity(cardio_payload).activity
    before = {r.body_part: r.model_dump() for r in store.workloads_on("athlete_1", DAY)}

    service.aggregator.apply_activity("athlete_1", saved)
    service.aggregator.apply_activity("athlete_1", saved)
    after = {r.body_part: r.model_dump() for r in store.workloads_on("athlete_1", DAY)}

    assert after == before
    assert len(store.workload_history("athlete_1", body_part="left-leg")) == 1


def test_same_day_activities_are_summed(service, store, athlete, cardio_payload):
    service.log_activity(cardio_payload)
    result = service.log_activity(cardio_payload)

    row = next(r for r in result.workload_updates if r.body_part == "left-leg")
    assert row.workload_score == pytest.approx(14.0)
    assert row.total_duration == pytest.approx(90.0)
    assert row.activity_count == 1
    assert len(store.workloads_on("athlete_1", DAY)) == len(CARDIO_PARTS)


def test_next_day_builds_on_history(service, athlete, cardio_payload):
    service.log_activity(cardio_payload)
    result = service.log_activity({**cardio_payload, "date": "2024-03-05"})

    row = next(r for r in result.workload_updates if r.body_part == "left-leg")
    assert row.cumulative_7day == pytest.approx(14.0)
    assert row.recovery_rate == pytest.approx(8.0)
    assert row.activity_count == 2


def test_workout_contribution_only_counts_matching_exercises(aggregator):
    """
    Test that each part sums only the exercises that load it.

    Bench press (30 of 60 minutes, hard): 15 × 0.65 + 3 × 10 × √80 / 10
    = 36.6 for the arms. Chest also gets the 1.5 bench multiplier.
    """
    activity = WorkoutActivity(
        athlete_id="athlete_1",
        duration=60,
        intensity_level="hard",
        exercises=[
            ExerciseEntry(exercise="Bench Press", sets=3, reps=10, weight=80),
            ExerciseEntry(exercise="Crunches", sets=3, reps=20),
        ],
    )

    assert aggregator.contribution("right-arm", activity) == pytest.approx(36.6)
    assert aggregator.contribution("chest", activity) == pytest.approx(36.6 * 1.5)
    assert aggregator.contribution("left-foot", activity) == 0


def test_sports_contribution_prefers_minutes_played(aggregator, sports_payload):
    activity = parse_activity(sports_payload)
    played = aggregator.contribution("abdomen", activity)
    full = aggregator.contribution("abdomen", activity.model_copy(update={"minutes_played": None}))

    # 90 played minutes vs 120 scheduled minutes
    assert played == pytest.approx(30.4)
    assert full > played


def test_sports_intensity_defaults_to_hard(aggregator):
    activity = parse_activity({"athlete_id": "athlete_1", "activity_type": "sports", "sport": "Golf"})
    assert aggregator.contribution("abdomen", activity) == pytest.approx(15.0)


def test_days_since_is_gap_to_latest_row(aggregator):
    """Test that rest days stored on a decay row do not add to the gap."""
    decayed = BodyPartWorkload(
        athlete_id="athlete_1",
        body_part="left-leg",
        date=DAY,
        workload_score=5.0,
        recovery_rate=40,
        days_since_last_activity=3,
        activity_count=0,
    )
    row = aggregator.build_row("athlete_1", "left-leg", DAY + dt.timedelta(days=1), 10, 60, [decayed])

    assert row.recovery_rate == pytest.approx(8.0)
    assert row.activity_count == 1
    assert row.days_since_last_activity == 0


def test_avg_intensity_without_history_is_zero(aggregator):
    row = aggregator.build_row("athlete_1", "left-leg", DAY, 10, 60, [])
    assert row.avg_intensity == 0


def test_avg_intensity_is_mean_of_prior_rows(aggregator):
    """Test that only the prior rows feed the average, not today's session."""
    prior = [
        BodyPartWorkload(athlete_id="athlete_1", body_part="left-leg", date=DAY - dt.timedelta(days=i + 1),
                         workload_score=5.0, avg_intensity=value)
        for i, value in enumerate([1.0, 2.0])
    ]
    row = aggregator.build_row("athlete_1", "left-leg", DAY, 10, 60, prior)
    assert row.avg_intensity == pytest.approx(1.5)


def test_logged_rows_average_prior_intensity(service, athlete, cardio_payload):
    """Test that a logged session's own intensity is not folded into its row."""
    first = service.log_activity(cardio_payload)
    second = service.log_activity({**cardio_payload, "date": "2024-03-05"})

    leg = next(r for r in first.workload_updates if r.body_part == "left-leg")
    assert leg.avg_intensity == 0
    leg = next(r for r in second.workload_updates if r.body_part == "left-leg")
    assert leg.avg_intensity == 0
