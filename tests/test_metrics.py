"""
Tests for the performance metric series.
"""

import datetime as dt

import pytest

from athlete_risk.metrics import PerformanceMetricsCalculator
from athlete_risk.schemas import SportsActivity, WorkoutActivity

AS_OF = dt.date(2024, 3, 13)  # a Wednesday


def session(day, **fields):
    return WorkoutActivity(athlete_id="athlete_1", date=day, **fields)


# Fixtures

@pytest.fixture
def calculator():
    return PerformanceMetricsCalculator(daily_window_days=7, weekly_window_weeks=3)


@pytest.fixture
def activities():
    return [
        session(AS_OF, duration=60, intensity_level="hard", heart_rate_avg=150, fatigue_level=6),
        session(AS_OF, duration=30, intensity_level="light", heart_rate_avg=120, fatigue_level=3),
        session(AS_OF - dt.timedelta(days=2), duration=90, intensity_level="moderate", calories_burned=700),
        SportsActivity(athlete_id="athlete_1", date=AS_OF - dt.timedelta(days=9), duration=120, intensity_level="hard"),
    ]


# Test Cases


def test_daily_activity_count(calculator, activities):
    series = calculator.daily_activity_count(activities, AS_OF)

    assert series.labels[0] == AS_OF - dt.timedelta(days=6)
    assert series.labels[-1] == AS_OF
    assert series.data == [0, 0, 0, 0, 1, 0, 2]


def test_weekly_training_hours_use_monday_weeks(calculator, activities):
    """
    Test weekly hours.

    This week (from Monday 11 March): 60 + 30 + 90 minutes = 3.0 h. The
    previous week holds the 120-minute match.
    """
    series = calculator.weekly_training_hours(activities, AS_OF)

    assert series.labels == [dt.date(2024, 2, 26), dt.date(2024, 3, 4), dt.date(2024, 3, 11)]
    assert series.data == [0.0, 2.0, 3.0]


def test_trends_average_per_day(calculator, activities):
    metrics = calculator.calculate("athlete_1", activities, AS_OF)

    assert metrics.heart_rate_trend.data[-1] == 135
    assert metrics.fatigue_trend.data[-1] == pytest.approx(4.5)
    assert metrics.calories_trend.data[-3] == 700
    assert metrics.heart_rate_trend.data[0] is None


def test_intensity_distribution(calculator, activities):
    distribution = calculator.intensity_distribution(activities, AS_OF)

    assert distribution["hard"] == 1
    assert distribution["light"] == 1
    assert distribution["moderate"] == 1
    assert distribution["maximum"] == 0


def test_no_activities(calculator):
    metrics = calculator.calculate("athlete_1", [], AS_OF)

    assert metrics.daily_activity_count.data == [0] * 7
    assert metrics.weekly_training_hours.data == [0.0, 0.0, 0.0]
    assert sum(metrics.intensity_distribution.values()) == 0
