"""
Injury-risk service.

Wires the engine components to a record store and exposes the operations the
HTTP API and CLI call: logging, editing and deleting activities, reading risk,
running the recovery pass, and athlete and injury bookkeeping.
"""

import datetime as dt
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from athlete_risk.advice import BodyPartAdvisor
from athlete_risk.aggregator import WorkloadAggregator
from athlete_risk.body_parts import BodyPartMapper
from athlete_risk.catalog import BodyPartCatalog
from athlete_risk.config import EngineConfig, Settings
from athlete_risk.errors import (
    ActivityNotFoundError,
    ActivityValidationError,
    AthleteNotFoundError,
)
from athlete_risk.metrics import PerformanceMetrics, PerformanceMetricsCalculator
from athlete_risk.recovery import RecoveryDecayJob
from athlete_risk.risk import RiskScorer
from athlete_risk.schemas import (
    ActivityDeleteResult,
    ActivityLogResult,
    Athlete,
    BodyPartRisk,
    BodyPartWorkload,
    InjuryRecord,
    InjuryRiskSnapshot,
    Recommendation,
    RiskReport,
    SnapshotKey,
    parse_activity,
)
from athlete_risk.store import AnyActivity, RecordStore
from athlete_risk.summarizer import AthleteRiskSummarizer
from athlete_risk.workload import WorkloadCalculator

logger = logging.getLogger(__name__)

ActivityInput = Union[Dict[str, Any], AnyActivity]


class InjuryRiskService:
    """
    Facade over the injury-risk engine.

    Every write that changes a day's workload rows re-summarizes the athlete
    for that day so the snapshot never lags the rows.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Optional[EngineConfig] = None,
        catalog: Optional[BodyPartCatalog] = None,
    ):
        self.store = store
        self.config = config or EngineConfig()
        self.mapper = BodyPartMapper(catalog)
        self.calculator = WorkloadCalculator(self.config)
        self.scorer = RiskScorer(self.config)
        self.aggregator = WorkloadAggregator(store, self.config, self.mapper, self.calculator, self.scorer)
        self.summarizer = AthleteRiskSummarizer(store, self.config, self.scorer)
        self.recovery_job = RecoveryDecayJob(store, self.config, self.scorer, self.summarizer)
        self.advisor = BodyPartAdvisor(self.scorer)
        self.metrics = PerformanceMetricsCalculator()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "InjuryRiskService":
        """
        Build a service backed by the configured SQLAlchemy database.

        Args:
            settings: Process settings (read from the environment if None)

        Returns:
            Wired InjuryRiskService
        """
        from athlete_risk.database import SqlAlchemyStore

        settings = settings or Settings.from_env()
        catalog = BodyPartCatalog.from_file(settings.catalog_path) if settings.catalog_path else None
        store = SqlAlchemyStore.from_url(settings.database_url, settings.store_timeout_seconds)
        return cls(store, settings.load_engine_config(), catalog)

    # ===== ATHLETES =====

    def create_athlete(self, athlete: Athlete) -> Athlete:
        created = self.store.add_athlete(athlete)
        logger.info("Created athlete %s", athlete.athlete_id)
        return created

    def get_athlete(self, athlete_id: str) -> Athlete:
        athlete = self.store.get_athlete(athlete_id)
        if athlete is None:
            raise AthleteNotFoundError(athlete_id)
        return athlete

    def list_athletes(self) -> List[Athlete]:
        return self.store.list_athletes()

    def update_athlete(self, athlete_id: str, changes: Dict[str, Any]) -> Athlete:
        current = self.get_athlete(athlete_id)
        updated = Athlete(**{**current.model_dump(), **changes, "athlete_id": athlete_id})
        return self.store.update_athlete(updated)

    def delete_athlete(self, athlete_id: str) -> None:
        if not self.store.delete_athlete(athlete_id):
            raise AthleteNotFoundError(athlete_id)
        logger.info("Deleted athlete %s and all owned records", athlete_id)

    # ===== ACTIVITIES =====

    def log_activity(self, payload: ActivityInput) -> ActivityLogResult:
        """
        Validate, persist and apply a new activity.

        The activity is saved first and never rolled back: body parts whose
        workload update failed are listed in the result instead.

        Args:
            payload: Raw activity dict or an already parsed activity

        Returns:
            ActivityLogResult with the saved activity, updated rows, failed
            parts and the refreshed athlete snapshot

        Raises:
            ActivityValidationError: If the payload is invalid
            AthleteNotFoundError: If the athlete does not exist
        """
        activity = self._with_detected_parts(self._parse(payload))

        logger.info(
            "Logging %s activity for %s on %s affecting %s",
            activity.activity_type,
            activity.athlete_id,
            activity.date,
            ", ".join(activity.affected_body_parts),
        )

        saved = self.store.add_activity(activity)
        updates, failed = self.aggregator.update_body_parts(saved)
        if failed:
            logger.warning("Workload update failed for %s: %s", saved.athlete_id, ", ".join(failed))

        snapshot = self.summarizer.summarize(saved.athlete_id, as_of=saved.date)
        return ActivityLogResult(
            activity=saved,
            workload_updates=updates,
            failed_body_parts=failed,
            injury_risk=snapshot,
        )

    def apply_activity(self, athlete_id: str, payload: ActivityInput) -> ActivityLogResult:
        """Log an activity on behalf of `athlete_id`."""
        if isinstance(payload, dict):
            payload = {**payload, "athlete_id": athlete_id}
        else:
            payload = payload.model_copy(update={"athlete_id": athlete_id})
        return self.log_activity(payload)

    def get_activity(self, activity_id: int) -> AnyActivity:
        activity = self.store.get_activity(activity_id)
        if activity is None:
            raise ActivityNotFoundError(activity_id)
        return activity

    def list_activities(
        self,
        athlete_id: str,
        limit: int = 50,
        offset: int = 0,
        since: Optional[dt.date] = None,
        until: Optional[dt.date] = None,
    ) -> List[AnyActivity]:
        """Athlete's activities, newest first."""
        self.get_athlete(athlete_id)
        activities = self.store.list_activities(athlete_id, since=since, until=until)
        activities.reverse()
        return activities[offset:offset + limit]

    def update_activity(self, activity_id: int, payload: Dict[str, Any]) -> ActivityLogResult:
        """
        Replace an activity and recompute every day and part it touched.

        Fields missing from `payload` keep their stored values, except the
        affected parts, which are re-detected unless given. The athlete
        cannot be changed. Parts the old version loaded are re-derived from
        what remains on the old date; the new version is then applied on
        its own date.

        Raises:
            ActivityNotFoundError: If the activity does not exist
            ActivityValidationError: If the new payload is invalid
        """
        old = self.get_activity(activity_id)
        base = old.model_dump(mode="json", exclude={"affected_body_parts"})
        merged = {**base, **payload, "athlete_id": old.athlete_id, "id": activity_id}
        new = self._with_detected_parts(self._parse(merged))

        saved = self.store.update_activity(new)

        stale_parts = set(old.affected_body_parts)
        if old.date == saved.date:
            stale_parts -= set(saved.affected_body_parts)
        if stale_parts:
            self._recompute_parts(old.athlete_id, old.date, stale_parts)
            if old.date != saved.date:
                self.summarizer.summarize(old.athlete_id, as_of=old.date)

        updates, failed = self.aggregator.update_body_parts(saved)
        snapshot = self.summarizer.summarize(saved.athlete_id, as_of=saved.date)

        return ActivityLogResult(
            activity=saved,
            workload_updates=updates,
            failed_body_parts=failed,
            injury_risk=snapshot,
        )

    def delete_activity(self, activity_id: int) -> ActivityDeleteResult:
        """
        Delete an activity and rebuild its day from the remaining activities.

        Parts no remaining activity loads lose their row for that day.

        Raises:
            ActivityNotFoundError: If the activity does not exist
        """
        activity = self.get_activity(activity_id)
        if not self.store.delete_activity(activity_id):
            raise ActivityNotFoundError(activity_id)

        parts = set(activity.affected_body_parts) or self.mapper.affected_parts(activity)
        recomputed, removed, failed = self._recompute_parts(activity.athlete_id, activity.date, parts)
        snapshot = self.summarizer.summarize(activity.athlete_id, as_of=activity.date)

        logger.info(
            "Deleted activity %s of %s; recomputed %d parts, removed %d",
            activity_id,
            activity.athlete_id,
            len(recomputed),
            len(removed),
        )

        return ActivityDeleteResult(
            activity_id=activity_id,
            athlete_id=activity.athlete_id,
            date=activity.date,
            recomputed_body_parts=recomputed,
            removed_body_parts=removed,
            failed_body_parts=failed,
            injury_risk=snapshot,
        )

    # ===== RISK =====

    def get_risk(self, athlete_id: str, day: Optional[dt.date] = None) -> RiskReport:
        """
        Per-part risk and the athlete snapshot for a day.

        Args:
            athlete_id: Athlete
            day: Day to report (default: today)

        Returns:
            RiskReport (empty lists and no snapshot when nothing was logged)
        """
        self.get_athlete(athlete_id)
        day = day or dt.date.today()

        workloads = self.store.workloads_on(athlete_id, day)
        body_part_risks = [
            BodyPartRisk(
                part=row.body_part,
                risk=row.risk_level,
                percentage=row.injury_risk_percentage,
                message=self.scorer.risk_message(row.injury_risk_percentage, row.body_part),
            )
            for row in workloads
        ]

        return RiskReport(
            athlete_id=athlete_id,
            date=day,
            body_part_risks=body_part_risks,
            overall_risk=self.store.get_snapshot(SnapshotKey(athlete_id=athlete_id, date=day)),
            workloads=workloads,
        )

    def workload_history(
        self,
        athlete_id: str,
        body_part: Optional[str] = None,
        limit: int = 100,
    ) -> List[BodyPartWorkload]:
        self.get_athlete(athlete_id)
        return self.store.workload_history(athlete_id, body_part=body_part)[:limit]

    def risk_history(self, athlete_id: str, limit: int = 30) -> List[InjuryRiskSnapshot]:
        self.get_athlete(athlete_id)
        return self.store.snapshot_history(athlete_id)[:limit]

    def body_part_recommendations(self, athlete_id: str, body_part: str) -> List[Recommendation]:
        """Advice for a part based on its most recent row (no row means no risk)."""
        self.get_athlete(athlete_id)
        history = self.store.workload_history(athlete_id, body_part=body_part)
        percentage = history[0].injury_risk_percentage if history else 0
        return self.advisor.recommendations(body_part, percentage)

    def performance_metrics(
        self,
        athlete_id: str,
        days: int = 90,
        as_of: Optional[dt.date] = None,
    ) -> PerformanceMetrics:
        self.get_athlete(athlete_id)
        as_of = as_of or dt.date.today()
        activities = self.store.list_activities(athlete_id, since=as_of - dt.timedelta(days=days), until=as_of)
        return self.metrics.calculate(athlete_id, activities, as_of)

    def run_recovery(self, as_of: Optional[dt.date] = None) -> int:
        return self.recovery_job.run(as_of)

    # ===== INJURIES =====

    def record_injury(self, injury: InjuryRecord) -> InjuryRecord:
        """Record an injury. An active injury raises future risk for that part."""
        saved = self.store.add_injury(injury)
        logger.info("Recorded %s injury for %s", injury.body_part.value, injury.athlete_id)
        return saved

    def resolve_injury(self, injury_id: int) -> InjuryRecord:
        return self.store.resolve_injury(injury_id)

    def list_injuries(self, athlete_id: str) -> List[InjuryRecord]:
        self.get_athlete(athlete_id)
        return self.store.list_injuries(athlete_id)

    # ===== INTERNALS =====

    @staticmethod
    def _parse(payload: ActivityInput) -> AnyActivity:
        if isinstance(payload, dict):
            return parse_activity(payload)
        if hasattr(payload, "activity_type"):
            return payload
        raise ActivityValidationError("Activity payload must be an object")

    def _with_detected_parts(self, activity: AnyActivity) -> AnyActivity:
        """Store the mapped parts on the activity so later edits know what it loaded."""
        if activity.affected_body_parts:
            return activity
        parts = sorted(self.mapper.affected_parts(activity))
        return activity.model_copy(update={"affected_body_parts": parts})

    def _recompute_parts(
        self,
        athlete_id: str,
        day: dt.date,
        parts: Iterable[str],
    ) -> Tuple[List[str], List[str], List[str]]:
        """
        Rebuild a day's rows for some parts from the activities left that day.

        Returns:
            (recomputed parts, removed parts, failed parts)
        """
        recomputed: List[str] = []
        removed: List[str] = []
        failed: List[str] = []

        remaining = self.store.list_activities(athlete_id, on_date=day)
        for body_part in sorted(set(parts)):
            try:
                row = self.aggregator.recompute_day(athlete_id, body_part, day, remaining)
            except Exception:
                logger.exception("Failed to recompute %s for %s on %s", body_part, athlete_id, day)
                failed.append(body_part)
                continue
            (recomputed if row is not None else removed).append(body_part)

        return recomputed, removed, failed

