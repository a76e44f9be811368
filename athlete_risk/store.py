"""
Record store interface.

Everything the engine reads or writes goes through a RecordStore: athletes,
activity logs, injury records, per-body-part workload rows and athlete risk
snapshots. The engine itself holds no state between calls.
"""

import datetime as dt
from abc import ABC, abstractmethod
from typing import List, Optional, Union

from athlete_risk.schemas import (
    Athlete,
    BodyPartWorkload,
    InjuryRecord,
    InjuryRiskSnapshot,
    SnapshotKey,
    SportsActivity,
    WorkloadKey,
    WorkoutActivity,
)

AnyActivity = Union[WorkoutActivity, SportsActivity]


class RecordStore(ABC):
    """
    Persistence boundary of the engine.

    Implementations raise PersistenceError for storage failures and the
    *NotFoundError types for missing parents. Workload and snapshot writes
    are read-if-exists then insert-or-replace on their composite key, with no
    lock held between the read and the write.
    """

    # ===== ATHLETES =====

    @abstractmethod
    def add_athlete(self, athlete: Athlete) -> Athlete:
        ...

    @abstractmethod
    def get_athlete(self, athlete_id: str) -> Optional[Athlete]:
        ...

    @abstractmethod
    def update_athlete(self, athlete: Athlete) -> Athlete:
        ...

    @abstractmethod
    def delete_athlete(self, athlete_id: str) -> bool:
        """Delete an athlete and everything it owns. Returns False if absent."""

    @abstractmethod
    def list_athletes(self) -> List[Athlete]:
        ...

    def list_athlete_ids(self) -> List[str]:
        return [athlete.athlete_id for athlete in self.list_athletes()]

    # ===== ACTIVITIES =====

    @abstractmethod
    def add_activity(self, activity: AnyActivity) -> AnyActivity:
        """Persist a new activity and return it with its assigned id."""

    @abstractmethod
    def get_activity(self, activity_id: int) -> Optional[AnyActivity]:
        ...

    @abstractmethod
    def update_activity(self, activity: AnyActivity) -> AnyActivity:
        ...

    @abstractmethod
    def delete_activity(self, activity_id: int) -> bool:
        ...

    @abstractmethod
    def list_activities(
        self,
        athlete_id: str,
        on_date: Optional[dt.date] = None,
        since: Optional[dt.date] = None,
        until: Optional[dt.date] = None,
    ) -> List[AnyActivity]:
        """Activities of an athlete ordered by date then id, optionally filtered."""

    # ===== INJURIES =====

    @abstractmethod
    def has_active_injury(self, athlete_id: str, body_part: str) -> bool:
        ...

    @abstractmethod
    def add_injury(self, injury: InjuryRecord) -> InjuryRecord:
        ...

    @abstractmethod
    def resolve_injury(self, injury_id: int) -> InjuryRecord:
        ...

    @abstractmethod
    def list_injuries(self, athlete_id: str) -> List[InjuryRecord]:
        ...

    # ===== WORKLOAD ROWS =====

    @abstractmethod
    def recent_workloads(
        self,
        athlete_id: str,
        body_part: str,
        before: dt.date,
        limit: int = 30,
    ) -> List[BodyPartWorkload]:
        """Rows for one part dated strictly before `before`, newest first."""

    @abstractmethod
    def workloads_on(self, athlete_id: str, day: dt.date) -> List[BodyPartWorkload]:
        ...

    @abstractmethod
    def latest_workloads(self, athlete_id: str) -> List[BodyPartWorkload]:
        """The most recent row of every body part the athlete has loaded."""

    @abstractmethod
    def workload_history(
        self,
        athlete_id: str,
        body_part: Optional[str] = None,
        since: Optional[dt.date] = None,
        until: Optional[dt.date] = None,
    ) -> List[BodyPartWorkload]:
        ...

    @abstractmethod
    def upsert_workload(self, row: BodyPartWorkload) -> BodyPartWorkload:
        ...

    @abstractmethod
    def delete_workload(self, key: WorkloadKey) -> bool:
        ...

    # ===== SNAPSHOTS =====

    @abstractmethod
    def upsert_snapshot(self, snapshot: InjuryRiskSnapshot) -> InjuryRiskSnapshot:
        ...

    @abstractmethod
    def get_snapshot(self, key: SnapshotKey) -> Optional[InjuryRiskSnapshot]:
        ...

    @abstractmethod
    def delete_snapshot(self, key: SnapshotKey) -> bool:
        ...

    @abstractmethod
    def snapshot_history(
        self,
        athlete_id: str,
        since: Optional[dt.date] = None,
        until: Optional[dt.date] = None,
    ) -> List[InjuryRiskSnapshot]:
        ...
