"""
Per-body-part workload aggregation.

For every body part an activity loads, derives that day's BodyPartWorkload row
from the day's activities and the part's prior rows, scores it, and writes it
back to the record store.
"""

import datetime as dt
import logging
from statistics import mean
from typing import List, Optional, Sequence, Set, Tuple

from athlete_risk.body_parts import AnyActivity, BodyPartMapper
from athlete_risk.config import EngineConfig
from athlete_risk.errors import PersistenceError
from athlete_risk.risk import RiskScorer
from athlete_risk.schemas import BodyPartWorkload, RiskInputs, SportsActivity, WorkloadKey
from athlete_risk.store import RecordStore
from athlete_risk.workload import WorkloadCalculator

logger = logging.getLogger(__name__)

# (activity, affected parts, parts of each logged exercise)
MappedActivity = Tuple[AnyActivity, Set[str], List[Set[str]]]


class WorkloadAggregator:
    """
    Maintains the daily BodyPartWorkload rows.

    A day's row for a part is always re-derived from every activity of that
    day that loads the part, so re-applying an activity, editing it or
    deleting it converges on the same row.

    Rolling statistics come from the part's rows dated strictly before the
    day (newest first, at most `history_window_rows`):
    - cumulative_7day / cumulative_30day: sum of the 7 / 30 prior rows + today
    - days_since_last_activity: days between today and the newest prior row
      (7 with no history)
    - recovery_rate: min(days × 8, 100), before today's load
    - activity_count: loaded rows among the acute rows within the last
      7 days, plus today
    - avg_intensity: mean of the acute rows' averages (0 with no history)

    Writes are best-effort: each part is read, computed and upserted without
    a lock, so two concurrent submissions for the same (athlete, part, date)
    race and the later write wins. A failure on one part is logged and
    reported without aborting the others.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Optional[EngineConfig] = None,
        mapper: Optional[BodyPartMapper] = None,
        calculator: Optional[WorkloadCalculator] = None,
        scorer: Optional[RiskScorer] = None,
    ):
        self.store = store
        self.config = config or EngineConfig()
        self.mapper = mapper or BodyPartMapper()
        self.calculator = calculator or WorkloadCalculator(self.config)
        self.scorer = scorer or RiskScorer(self.config)

    # ===== ENTRY POINTS =====

    def apply_activity(self, athlete_id: str, activity: AnyActivity) -> List[BodyPartWorkload]:
        """
        Update the rows of every body part an activity loads.

        Args:
            athlete_id: Athlete who performed the activity
            activity: The (usually just persisted) activity

        Returns:
            Successfully written rows (unordered)
        """
        if activity.athlete_id != athlete_id:
            activity = activity.model_copy(update={"athlete_id": athlete_id})
        updates, _ = self.update_body_parts(activity)
        return updates

    def update_body_parts(
        self,
        activity: AnyActivity,
        body_parts: Optional[Set[str]] = None,
    ) -> Tuple[List[BodyPartWorkload], List[str]]:
        """
        Recompute the day's rows for the parts an activity loads.

        The activity is merged with the athlete's other stored activities of
        the same date (matched on id, so an already-persisted activity is
        not counted twice).

        Args:
            activity: Activity being applied
            body_parts: Parts to recompute (defaults to the activity's parts)

        Returns:
            (written rows, parts that failed)
        """
        parts = set(body_parts) if body_parts is not None else self.mapper.affected_parts(activity)

        try:
            stored = self.store.list_activities(activity.athlete_id, on_date=activity.date)
        except PersistenceError:
            logger.exception(
                "Could not load activities of %s on %s; no body parts updated",
                activity.athlete_id,
                activity.date,
            )
            return [], sorted(parts)

        day_activities = [a for a in stored if activity.id is None or a.id != activity.id]
        day_activities.append(activity)
        mapped = self._map_activities(day_activities)

        updates: List[BodyPartWorkload] = []
        failed: List[str] = []
        for body_part in sorted(parts):
            try:
                row = self._recompute(activity.athlete_id, body_part, activity.date, mapped)
            except Exception:
                logger.exception(
                    "Failed to update %s workload for athlete %s on %s",
                    body_part,
                    activity.athlete_id,
                    activity.date,
                )
                failed.append(body_part)
                continue
            if row is not None:
                updates.append(row)

        return updates, failed

    def recompute_day(
        self,
        athlete_id: str,
        body_part: str,
        day: dt.date,
        activities: Sequence[AnyActivity],
    ) -> Optional[BodyPartWorkload]:
        """
        Re-derive one part's row for a day from the given activities.

        Used after an activity is edited or deleted. When none of the
        activities loads the part, the row is deleted.

        Returns:
            The written row, or None if the row was removed
        """
        return self._recompute(athlete_id, body_part, day, self._map_activities(activities))

    # ===== CONTRIBUTIONS =====

    def contribution(
        self,
        body_part: str,
        activity: AnyActivity,
        exercise_parts: Optional[List[Set[str]]] = None,
    ) -> float:
        """
        Workload one activity puts on one body part.

        Workouts sum the score of every exercise that loads the part, with
        the session duration split evenly across exercises and each score
        scaled by the part's intensity multiplier for that exercise. A
        workout without exercises is scored as a single session. Sports
        sessions are a single score scaled by the part's multiplier.

        Args:
            body_part: Body part being scored
            activity: Workout or sports activity
            exercise_parts: Pre-mapped parts of each exercise (looked up if None)

        Returns:
            Workload contribution (>= 0)
        """
        if isinstance(activity, SportsActivity):
            base = self.calculator.score(
                intensity=self._intensity_label(activity),
                duration=self._duration(activity),
                recovery_status=activity.recovery_status,
                match_type=activity.match_type,
                is_match=True,
            )
            return base * self.mapper.intensity_multiplier(body_part, activity)

        if not activity.exercises:
            base = self.calculator.score(
                intensity=self._intensity_label(activity),
                duration=activity.duration,
                recovery_status=activity.recovery_status,
            )
            return base * self.mapper.intensity_multiplier(body_part, activity)

        if exercise_parts is None:
            exercise_parts = [set(self.mapper.parts_for_exercise(e)) for e in activity.exercises]

        per_exercise_duration = activity.duration / len(activity.exercises)
        total = 0.0
        for exercise, parts in zip(activity.exercises, exercise_parts):
            if body_part not in parts:
                continue
            base = self.calculator.score(
                intensity=exercise.intensity or self._intensity_label(activity),
                duration=per_exercise_duration,
                recovery_status=activity.recovery_status,
                sets=exercise.sets,
                reps=exercise.reps,
                weight=exercise.weight,
            )
            total += base * self.mapper.intensity_multiplier(body_part, activity, exercise)
        return total

    # ===== INTERNALS =====

    def _map_activities(self, activities: Sequence[AnyActivity]) -> List[MappedActivity]:
        mapped = []
        for activity in activities:
            exercise_parts = []
            if not isinstance(activity, SportsActivity):
                exercise_parts = [set(self.mapper.parts_for_exercise(e)) for e in activity.exercises]
            mapped.append((activity, self.mapper.affected_parts(activity), exercise_parts))
        return mapped

    def _recompute(
        self,
        athlete_id: str,
        body_part: str,
        day: dt.date,
        mapped: List[MappedActivity],
    ) -> Optional[BodyPartWorkload]:
        contributing = [(a, ex) for a, parts, ex in mapped if body_part in parts]
        if not contributing:
            self.store.delete_workload(WorkloadKey(athlete_id=athlete_id, body_part=body_part, date=day))
            logger.debug("Removed %s row of %s on %s: no remaining activities", body_part, athlete_id, day)
            return None

        workload = sum(self.contribution(body_part, a, ex) for a, ex in contributing)
        duration = sum(max(self._duration(a), 0.0) for a, _ in contributing)

        prior = self.store.recent_workloads(athlete_id, body_part, before=day, limit=self.config.history_window_rows)
        row = self.build_row(athlete_id, body_part, day, workload, duration, prior)
        return self.store.upsert_workload(row)

    def build_row(
        self,
        athlete_id: str,
        body_part: str,
        day: dt.date,
        workload: float,
        duration: float,
        prior: Sequence[BodyPartWorkload],
    ) -> BodyPartWorkload:
        """
        Assemble and score a day's row from its contribution and prior rows.

        Args:
            athlete_id: Owning athlete
            body_part: Body part
            day: Day of the row
            workload: Today's summed contribution
            duration: Today's contributing minutes
            prior: Rows before `day`, newest first

        Returns:
            Unsaved BodyPartWorkload
        """
        acute = list(prior[: self.config.acute_window_rows])
        chronic = list(prior[: self.config.history_window_rows])

        cumulative_7day = sum(r.workload_score for r in acute) + workload
        cumulative_30day = sum(r.workload_score for r in chronic) + workload

        avg_intensity = mean(r.avg_intensity for r in acute) if acute else 0.0

        if acute:
            days_since = (day - acute[0].date).days
        else:
            days_since = self.config.days_without_history
        recovery_rate = self.calculator.recovery_rate(days_since)

        activity_count = 1 + sum(
            1 for r in acute
            if r.activity_count > 0 and (day - r.date).days < self.config.acute_window_rows
        )

        assessment = self.scorer.assess(RiskInputs(
            current_workload=workload,
            cumulative_7day=cumulative_7day,
            cumulative_30day=cumulative_30day,
            days_since_last_activity=days_since,
            recovery_rate=recovery_rate,
            activity_count=activity_count,
            avg_intensity=avg_intensity,
            has_active_injury=self.store.has_active_injury(athlete_id, body_part),
        ))

        return BodyPartWorkload(
            athlete_id=athlete_id,
            body_part=body_part,
            date=day,
            workload_score=round(workload, 2),
            cumulative_7day=round(cumulative_7day, 2),
            cumulative_30day=round(cumulative_30day, 2),
            injury_risk_percentage=assessment.percentage,
            risk_level=assessment.level,
            recovery_rate=recovery_rate,
            days_since_last_activity=0,
            activity_count=activity_count,
            total_duration=round(duration, 2),
            avg_intensity=round(avg_intensity, 3),
        )

    def _intensity_label(self, activity: AnyActivity) -> str:
        if activity.intensity_level:
            return activity.intensity_level
        if isinstance(activity, SportsActivity):
            return self.config.default_sports_intensity
        return self.config.default_intensity

    @staticmethod
    def _duration(activity: AnyActivity) -> float:
        if isinstance(activity, SportsActivity) and activity.minutes_played is not None:
            return activity.minutes_played
        return activity.duration
