"""
Athlete-level risk summary.

Rolls a day's per-body-part rows up into one InjuryRiskSnapshot with an
overall score, risk partitions and rule-based recommendations.
"""

import datetime as dt
import logging
from statistics import mean
from typing import List, Optional, Sequence

from athlete_risk.config import EngineConfig
from athlete_risk.errors import PersistenceError
from athlete_risk.risk import RiskScorer, round_half_up
from athlete_risk.schemas import (
    BodyPartWorkload,
    InjuryRiskSnapshot,
    Recommendation,
    RecommendationPriority,
    SnapshotKey,
)
from athlete_risk.store import RecordStore

logger = logging.getLogger(__name__)


class AthleteRiskSummarizer:
    """
    Builds and stores the daily InjuryRiskSnapshot of an athlete.

    Must be re-run after every activity create, edit or delete and after the
    recovery decay pass so the snapshot tracks the current rows.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Optional[EngineConfig] = None,
        scorer: Optional[RiskScorer] = None,
    ):
        self.store = store
        self.config = config or EngineConfig()
        self.scorer = scorer or RiskScorer(self.config)

    def summarize(self, athlete_id: str, as_of: Optional[dt.date] = None) -> Optional[InjuryRiskSnapshot]:
        """
        Summarize one athlete's rows for a day and upsert the snapshot.

        Args:
            athlete_id: Athlete to summarize
            as_of: Day to summarize (default: today)

        Returns:
            The stored snapshot, or None when the athlete has no rows that
            day or the store failed
        """
        day = as_of or dt.date.today()
        key = SnapshotKey(athlete_id=athlete_id, date=day)

        try:
            rows = self.store.workloads_on(athlete_id, day)
            if not rows:
                # Drop a snapshot left over from rows that have since been removed
                self.store.delete_snapshot(key)
                return None

            snapshot = self.build_snapshot(athlete_id, day, rows)
            return self.store.upsert_snapshot(snapshot)
        except PersistenceError:
            logger.exception("Failed to summarize injury risk for athlete %s on %s", athlete_id, day)
            return None

    def build_snapshot(
        self,
        athlete_id: str,
        day: dt.date,
        rows: Sequence[BodyPartWorkload],
    ) -> InjuryRiskSnapshot:
        """
        Compute the snapshot of a non-empty set of same-day rows.

        Args:
            athlete_id: Athlete
            day: Day the rows belong to
            rows: Per-body-part rows

        Returns:
            Unsaved InjuryRiskSnapshot
        """
        overall = round_half_up(mean(r.injury_risk_percentage for r in rows))

        high_risk = [r.body_part for r in rows if r.injury_risk_percentage >= self.config.high_risk_floor]
        medium_risk = [
            r.body_part for r in rows
            if self.config.medium_risk_floor <= r.injury_risk_percentage < self.config.high_risk_floor
        ]

        training_load = mean(r.cumulative_7day for r in rows)
        recovery_score = mean(100.0 if r.recovery_rate is None else r.recovery_rate for r in rows)

        return InjuryRiskSnapshot(
            athlete_id=athlete_id,
            date=day,
            overall_risk_score=overall,
            risk_level=self.scorer.risk_level(overall),
            training_load_score=round(training_load, 2),
            fatigue_index=round(100 - recovery_score, 2),
            recovery_score=round(recovery_score, 2),
            high_risk_body_parts=high_risk,
            medium_risk_body_parts=medium_risk,
            recommendations=self._generate_recommendations(overall, high_risk, medium_risk, recovery_score),
        )

    def _generate_recommendations(
        self,
        overall: int,
        high_risk: List[str],
        medium_risk: List[str],
        recovery_score: float,
    ) -> List[Recommendation]:
        """
        Generate deterministic advice in priority order.

        Logic:
        - Overall risk at or above the floor: reduce intensity (high)
        - Any high-risk parts: target recovery for those parts (high)
        - Recovery below the threshold: increase recovery time (medium)
        - Any medium-risk parts: monitor those parts (medium)
        """
        recommendations = []

        if overall >= self.config.overall_reduce_intensity_floor:
            recommendations.append(Recommendation(
                priority=RecommendationPriority.HIGH,
                title="Reduce Training Intensity",
                description="High injury risk detected. Reduce training intensity by 30-40% for the next 3-5 days.",
            ))

        if high_risk:
            recommendations.append(Recommendation(
                priority=RecommendationPriority.HIGH,
                title="Target Recovery for High-Risk Areas",
                description=(
                    f"Focus recovery efforts on: {', '.join(high_risk)}. "
                    "Consider physiotherapy or additional rest."
                ),
                body_parts=list(high_risk),
            ))

        if recovery_score < self.config.low_recovery_threshold:
            recommendations.append(Recommendation(
                priority=RecommendationPriority.MEDIUM,
                title="Increase Recovery Time",
                description="Recovery deficit detected. Schedule additional rest days and ensure adequate sleep (8+ hours).",
            ))

        if medium_risk:
            recommendations.append(Recommendation(
                priority=RecommendationPriority.MEDIUM,
                title="Monitor Medium-Risk Areas",
                description=(
                    f"Elevated stress in: {', '.join(medium_risk)}. "
                    "Keep load steady and watch for soreness."
                ),
                body_parts=list(medium_risk),
            ))

        return recommendations
