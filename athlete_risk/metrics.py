"""
Performance metrics for charts.

Aggregates an athlete's logged activities into daily and weekly series:
activity counts, training hours, heart-rate trend, a multi-metric comparison
and the intensity distribution.
"""

import datetime as dt
from collections import defaultdict
from statistics import mean
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from athlete_risk.schemas import IntensityLevel
from athlete_risk.store import AnyActivity


class MetricSeries(BaseModel):
    """A labelled series, one value per day or week."""

    labels: List[dt.date] = Field(default_factory=list, description="Day (or week start) of each value")
    data: List[Optional[float]] = Field(default_factory=list, description="Values; None where nothing was logged")


class PerformanceMetrics(BaseModel):
    """All chart series for one athlete."""

    athlete_id: str
    as_of: dt.date
    daily_activity_count: MetricSeries
    weekly_training_hours: MetricSeries
    heart_rate_trend: MetricSeries
    calories_trend: MetricSeries
    fatigue_trend: MetricSeries
    intensity_distribution: Dict[str, int]


class PerformanceMetricsCalculator:
    """
    Builds PerformanceMetrics from raw activities.

    Daily series cover the last `daily_window_days` days ending at `as_of`;
    the weekly series covers the last `weekly_window_weeks` Monday-based
    weeks.
    """

    def __init__(self, daily_window_days: int = 30, weekly_window_weeks: int = 12):
        self.daily_window_days = daily_window_days
        self.weekly_window_weeks = weekly_window_weeks

    def calculate(
        self,
        athlete_id: str,
        activities: Sequence[AnyActivity],
        as_of: Optional[dt.date] = None,
    ) -> PerformanceMetrics:
        day = as_of or dt.date.today()
        return PerformanceMetrics(
            athlete_id=athlete_id,
            as_of=day,
            daily_activity_count=self.daily_activity_count(activities, day),
            weekly_training_hours=self.weekly_training_hours(activities, day),
            heart_rate_trend=self._daily_mean(activities, day, lambda a: a.heart_rate_avg, digits=0),
            calories_trend=self._daily_mean(activities, day, lambda a: a.calories_burned, digits=0),
            fatigue_trend=self._daily_mean(activities, day, lambda a: a.fatigue_level, digits=1),
            intensity_distribution=self.intensity_distribution(activities, day),
        )

    def _days(self, as_of: dt.date) -> List[dt.date]:
        return [as_of - dt.timedelta(days=i) for i in range(self.daily_window_days - 1, -1, -1)]

    def daily_activity_count(self, activities: Sequence[AnyActivity], as_of: dt.date) -> MetricSeries:
        days = self._days(as_of)
        counts = dict.fromkeys(days, 0)
        for activity in activities:
            if activity.date in counts:
                counts[activity.date] += 1
        return MetricSeries(labels=days, data=[counts[d] for d in days])

    def weekly_training_hours(self, activities: Sequence[AnyActivity], as_of: dt.date) -> MetricSeries:
        current_week = as_of - dt.timedelta(days=as_of.weekday())
        weeks = [current_week - dt.timedelta(weeks=i) for i in range(self.weekly_window_weeks - 1, -1, -1)]
        minutes = dict.fromkeys(weeks, 0.0)
        for activity in activities:
            week = activity.date - dt.timedelta(days=activity.date.weekday())
            if week in minutes and activity.date <= as_of:
                minutes[week] += max(activity.duration or 0.0, 0.0)
        return MetricSeries(labels=weeks, data=[round(minutes[w] / 60, 1) for w in weeks])

    def _daily_mean(self, activities, as_of: dt.date, value_of, digits: int) -> MetricSeries:
        days = self._days(as_of)
        values = defaultdict(list)
        for activity in activities:
            value = value_of(activity)
            if value is not None:
                values[activity.date].append(value)
        data = [round(mean(values[d]), digits) if values[d] else None for d in days]
        return MetricSeries(labels=days, data=data)

    def intensity_distribution(self, activities: Sequence[AnyActivity], as_of: dt.date) -> Dict[str, int]:
        start = as_of - dt.timedelta(days=self.daily_window_days)
        counts = {level.value: 0 for level in IntensityLevel}
        for activity in activities:
            if start <= activity.date <= as_of and activity.intensity_level in counts:
                counts[activity.intensity_level] += 1
        return counts
