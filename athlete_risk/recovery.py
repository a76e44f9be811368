"""
Passive recovery decay.

Once a day, every body part that was not loaded today gets a decayed copy of
its latest row: workload and risk fall geometrically while recovery rises.
"""

import datetime as dt
import logging
from typing import List, Optional

from athlete_risk.config import EngineConfig
from athlete_risk.risk import RiskScorer
from athlete_risk.schemas import BodyPartWorkload, RiskInputs
from athlete_risk.store import RecordStore
from athlete_risk.summarizer import AthleteRiskSummarizer

logger = logging.getLogger(__name__)


class RecoveryDecayJob:
    """
    Daily decay pass across all athletes.

    For each (athlete, body part) whose most recent row is dated before
    `as_of_date`, one new row is written for `as_of_date`:
    - workload_score ×0.92, cumulative_7day ×0.92, cumulative_30day ×0.97
    - recovery_rate + 8, capped at 100
    - activity_count 0, total_duration 0, avg_intensity ×0.95
    - days_since_last_activity: days elapsed since the latest row
    - risk re-scored from the decayed stats

    A multi-day gap is collapsed into a single decay step: the factors are
    applied once per run regardless of how many days elapsed.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Optional[EngineConfig] = None,
        scorer: Optional[RiskScorer] = None,
        summarizer: Optional[AthleteRiskSummarizer] = None,
    ):
        self.store = store
        self.config = config or EngineConfig()
        self.scorer = scorer or RiskScorer(self.config)
        self.summarizer = summarizer or AthleteRiskSummarizer(store, self.config, self.scorer)

    def run(self, as_of_date: Optional[dt.date] = None) -> int:
        """
        Decay every athlete's stale rows.

        Athletes are processed independently: a failure for one is logged
        and the others continue.

        Args:
            as_of_date: Day the decayed rows are written for (default: today)

        Returns:
            Number of rows written
        """
        day = as_of_date or dt.date.today()
        written = 0

        for athlete_id in self.store.list_athlete_ids():
            try:
                rows = self.decay_athlete(athlete_id, day)
            except Exception:
                logger.exception("Recovery decay failed for athlete %s", athlete_id)
                continue
            written += len(rows)
            if rows:
                self.summarizer.summarize(athlete_id, as_of=day)

        logger.info("Recovery decay for %s wrote %d body-part rows", day, written)
        return written

    def decay_athlete(self, athlete_id: str, as_of_date: dt.date) -> List[BodyPartWorkload]:
        written = []
        for latest in self.store.latest_workloads(athlete_id):
            days_elapsed = (as_of_date - latest.date).days
            if days_elapsed <= 0:
                continue
            has_injury = self.store.has_active_injury(athlete_id, latest.body_part)
            written.append(self.store.upsert_workload(self.decay_row(latest, as_of_date, has_injury)))
        return written

    def decay_row(
        self,
        latest: BodyPartWorkload,
        as_of_date: dt.date,
        has_active_injury: bool = False,
    ) -> BodyPartWorkload:
        """
        Build the decayed row for `as_of_date` from a part's latest row.

        Args:
            latest: Most recent row of the part (dated before as_of_date)
            as_of_date: Day of the new row
            has_active_injury: Whether the part has an active injury

        Returns:
            Unsaved BodyPartWorkload
        """
        decay = self.config.decay
        days_since = (as_of_date - latest.date).days

        workload = max(latest.workload_score * decay.workload, 0.0)
        cumulative_7day = latest.cumulative_7day * decay.cumulative_7day
        cumulative_30day = latest.cumulative_30day * decay.cumulative_30day
        recovery_rate = min(latest.recovery_rate + self.config.recovery_per_day, 100.0)
        avg_intensity = latest.avg_intensity * decay.avg_intensity

        assessment = self.scorer.assess(RiskInputs(
            current_workload=workload,
            cumulative_7day=cumulative_7day,
            cumulative_30day=cumulative_30day,
            days_since_last_activity=days_since,
            recovery_rate=recovery_rate,
            activity_count=0,
            avg_intensity=avg_intensity,
            has_active_injury=has_active_injury,
        ))

        return BodyPartWorkload(
            athlete_id=latest.athlete_id,
            body_part=latest.body_part,
            date=as_of_date,
            workload_score=workload,
            cumulative_7day=cumulative_7day,
            cumulative_30day=cumulative_30day,
            injury_risk_percentage=assessment.percentage,
            risk_level=assessment.level,
            recovery_rate=recovery_rate,
            days_since_last_activity=days_since,
            activity_count=0,
            total_duration=0.0,
            avg_intensity=avg_intensity,
        )
