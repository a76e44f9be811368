"""
SQLAlchemy Database Models for the Injury-Risk Engine

Provides persistent storage for:
- Athlete profiles and their injury history
- Logged workout and sports activities
- Daily per-body-part workload rows
- Daily athlete-level injury risk snapshots

SqlAlchemyStore implements the RecordStore interface on top of these tables.
"""

import datetime as dt
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    create_engine,
    func,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker

from athlete_risk.errors import (
    ActivityNotFoundError,
    AthleteExistsError,
    AthleteNotFoundError,
    InjuryNotFoundError,
    PersistenceError,
)
from athlete_risk.schemas import (
    Athlete,
    BodyPartWorkload,
    InjuryRecord,
    InjuryRiskSnapshot,
    InjuryStatus,
    SnapshotKey,
    WorkloadKey,
    parse_activity,
)
from athlete_risk.store import AnyActivity, RecordStore

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_DATABASE_URL = "sqlite:///athlete_risk.db"


class AthleteRecord(Base):
    """
    Athlete profile.

    Attributes:
        id: Primary key
        athlete_id: Unique public identifier
        name: Display name
        email, age, height, weight: Optional profile data
        primary_sport, position, team: Sport context used by the dashboard
        status: Roster status (active, injured, recovering, inactive)
        created_at: Account creation timestamp
    """

    __tablename__ = "athletes"

    id = Column(Integer, primary_key=True)
    athlete_id = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    age = Column(Integer, nullable=True)
    height = Column(Float, nullable=True)
    weight = Column(Float, nullable=True)
    primary_sport = Column(String, nullable=True)
    position = Column(String, nullable=True)
    team = Column(String, nullable=True)
    status = Column(String, default="active", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    activities = relationship("ActivityRecord", back_populates="athlete", cascade="all, delete-orphan")
    workloads = relationship("BodyPartWorkloadRecord", back_populates="athlete", cascade="all, delete-orphan")
    snapshots = relationship("InjuryRiskSnapshotRecord", back_populates="athlete", cascade="all, delete-orphan")
    injuries = relationship("InjuryHistoryRecord", back_populates="athlete", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<AthleteRecord(athlete_id='{self.athlete_id}', name='{self.name}')>"


class ActivityRecord(Base):
    """
    Logged activity.

    The full validated payload is kept as JSON; date and type are copied into
    columns for filtering.

    Attributes:
        id: Primary key (the activity id)
        athlete_id: Foreign key to athletes.athlete_id
        activity_date: Day the activity took place
        activity_type: 'workout' or 'sports'
        payload: Activity fields as JSON
        created_at: When this activity was saved
    """

    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True)
    athlete_id = Column(String, ForeignKey("athletes.athlete_id"), nullable=False, index=True)
    activity_date = Column(Date, nullable=False, index=True)
    activity_type = Column(String, nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    athlete = relationship("AthleteRecord", back_populates="activities")

    def __repr__(self):
        return f"<ActivityRecord(id={self.id}, type='{self.activity_type}', date='{self.activity_date}')>"


class BodyPartWorkloadRecord(Base):
    """
    One day of workload and risk state for one body part.

    Unique on (athlete_id, body_part, date).
    """

    __tablename__ = "body_part_workload"
    __table_args__ = (
        UniqueConstraint("athlete_id", "body_part", "date", name="uq_workload_athlete_part_date"),
    )

    id = Column(Integer, primary_key=True)
    athlete_id = Column(String, ForeignKey("athletes.athlete_id"), nullable=False, index=True)
    body_part = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    workload_score = Column(Float, default=0.0, nullable=False)
    cumulative_7day = Column(Float, default=0.0, nullable=False)
    cumulative_30day = Column(Float, default=0.0, nullable=False)
    injury_risk_percentage = Column(Integer, default=0, nullable=False)
    risk_level = Column(String, default="minimal", nullable=False)
    recovery_rate = Column(Float, default=100.0, nullable=False)
    days_since_last_activity = Column(Integer, default=0, nullable=False)
    activity_count = Column(Integer, default=0, nullable=False)
    total_duration = Column(Float, default=0.0, nullable=False)
    avg_intensity = Column(Float, default=0.0, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    athlete = relationship("AthleteRecord", back_populates="workloads")

    def __repr__(self):
        return (
            f"<BodyPartWorkloadRecord(athlete_id='{self.athlete_id}', part='{self.body_part}', "
            f"date='{self.date}', risk={self.injury_risk_percentage})>"
        )


class InjuryRiskSnapshotRecord(Base):
    """Athlete-level daily risk summary. Unique on (athlete_id, date)."""

    __tablename__ = "injury_risk_snapshots"
    __table_args__ = (
        UniqueConstraint("athlete_id", "date", name="uq_snapshot_athlete_date"),
    )

    id = Column(Integer, primary_key=True)
    athlete_id = Column(String, ForeignKey("athletes.athlete_id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    overall_risk_score = Column(Integer, nullable=False)
    risk_level = Column(String, nullable=False)
    training_load_score = Column(Float, nullable=False)
    fatigue_index = Column(Float, nullable=False)
    recovery_score = Column(Float, nullable=False)
    high_risk_body_parts = Column(JSON, nullable=False)
    medium_risk_body_parts = Column(JSON, nullable=False)
    recommendations = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    athlete = relationship("AthleteRecord", back_populates="snapshots")

    def __repr__(self):
        return f"<InjuryRiskSnapshotRecord(athlete_id='{self.athlete_id}', date='{self.date}', score={self.overall_risk_score})>"


class InjuryHistoryRecord(Base):
    """Injury record. An 'active' status feeds the risk multiplier."""

    __tablename__ = "injury_history"

    id = Column(Integer, primary_key=True)
    athlete_id = Column(String, ForeignKey("athletes.athlete_id"), nullable=False, index=True)
    body_part = Column(String, nullable=False)
    status = Column(String, default="active", nullable=False, index=True)
    injury_type = Column(String, nullable=True)
    occurred_on = Column(Date, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    athlete = relationship("AthleteRecord", back_populates="injuries")

    def __repr__(self):
        return f"<InjuryHistoryRecord(id={self.id}, part='{self.body_part}', status='{self.status}')>"


# Database connection and session management

def get_engine(database_url: str = DEFAULT_DATABASE_URL, timeout_seconds: float = 10.0):
    """
    Create SQLAlchemy engine.

    Args:
        database_url: Database connection string (default: SQLite file)
        timeout_seconds: Bound on lock waits (SQLite) or pool checkout (others)

    Returns:
        SQLAlchemy Engine instance
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=False,
            connect_args={"timeout": timeout_seconds, "check_same_thread": False},
        )
    return create_engine(database_url, echo=False, pool_timeout=timeout_seconds, pool_pre_ping=True)


def get_session_factory(engine):
    """
    Create session factory.

    Args:
        engine: SQLAlchemy Engine instance

    Returns:
        Session factory (sessionmaker)
    """
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_database(database_url: str = DEFAULT_DATABASE_URL, timeout_seconds: float = 10.0):
    """
    Initialize database and create all tables.

    Args:
        database_url: Database connection string
        timeout_seconds: Store call timeout

    Returns:
        SQLAlchemy Engine instance
    """
    engine = get_engine(database_url, timeout_seconds)
    Base.metadata.create_all(engine)
    return engine


# ============================================================================
# Record <-> Model Conversion
# ============================================================================

def _athlete_from_record(record: AthleteRecord) -> Athlete:
    return Athlete(
        athlete_id=record.athlete_id,
        name=record.name,
        email=record.email,
        age=record.age,
        height=record.height,
        weight=record.weight,
        primary_sport=record.primary_sport,
        position=record.position,
        team=record.team,
        status=record.status,
    )


def _activity_from_record(record: ActivityRecord) -> AnyActivity:
    return parse_activity({**record.payload, "id": record.id})


def _activity_payload(activity: AnyActivity) -> dict:
    return activity.model_dump(mode="json", exclude={"id"})


_WORKLOAD_FIELDS = (
    "workload_score",
    "cumulative_7day",
    "cumulative_30day",
    "injury_risk_percentage",
    "recovery_rate",
    "days_since_last_activity",
    "activity_count",
    "total_duration",
    "avg_intensity",
)


def _workload_from_record(record: BodyPartWorkloadRecord) -> BodyPartWorkload:
    return BodyPartWorkload(
        athlete_id=record.athlete_id,
        body_part=record.body_part,
        date=record.date,
        risk_level=record.risk_level,
        **{field: getattr(record, field) for field in _WORKLOAD_FIELDS},
    )


def _snapshot_from_record(record: InjuryRiskSnapshotRecord) -> InjuryRiskSnapshot:
    return InjuryRiskSnapshot(
        athlete_id=record.athlete_id,
        date=record.date,
        overall_risk_score=record.overall_risk_score,
        risk_level=record.risk_level,
        training_load_score=record.training_load_score,
        fatigue_index=record.fatigue_index,
        recovery_score=record.recovery_score,
        high_risk_body_parts=record.high_risk_body_parts,
        medium_risk_body_parts=record.medium_risk_body_parts,
        recommendations=record.recommendations,
    )


def _injury_from_record(record: InjuryHistoryRecord) -> InjuryRecord:
    return InjuryRecord(
        id=record.id,
        athlete_id=record.athlete_id,
        body_part=record.body_part,
        status=record.status,
        injury_type=record.injury_type,
        occurred_on=record.occurred_on,
        notes=record.notes,
    )


# ============================================================================
# Store
# ============================================================================

class SqlAlchemyStore(RecordStore):
    """
    RecordStore backed by a SQLAlchemy engine.

    Each call opens a short-lived session, commits on success and rolls back
    on failure. SQLAlchemyError is re-raised as PersistenceError.
    """

    def __init__(self, engine):
        self.engine = engine
        self.session_factory = get_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str = DEFAULT_DATABASE_URL, timeout_seconds: float = 10.0) -> "SqlAlchemyStore":
        """Create the tables if needed and return a store bound to them."""
        try:
            return cls(init_database(database_url, timeout_seconds))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not initialize database {database_url}: {e}") from e

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Database operation failed: %s", e)
            raise PersistenceError(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _require_athlete(self, session: Session, athlete_id: str) -> AthleteRecord:
        record = session.query(AthleteRecord).filter_by(athlete_id=athlete_id).one_or_none()
        if record is None:
            raise AthleteNotFoundError(athlete_id)
        return record

    # ===== ATHLETES =====

    def add_athlete(self, athlete: Athlete) -> Athlete:
        with self._session() as session:
            existing = session.query(AthleteRecord).filter_by(athlete_id=athlete.athlete_id).one_or_none()
            if existing is not None:
                raise AthleteExistsError(athlete.athlete_id)
            session.add(AthleteRecord(**athlete.model_dump(mode="json")))
        return athlete

    def get_athlete(self, athlete_id: str) -> Optional[Athlete]:
        with self._session() as session:
            record = session.query(AthleteRecord).filter_by(athlete_id=athlete_id).one_or_none()
            return _athlete_from_record(record) if record else None

    def update_athlete(self, athlete: Athlete) -> Athlete:
        with self._session() as session:
            record = self._require_athlete(session, athlete.athlete_id)
            for field, value in athlete.model_dump(mode="json", exclude={"athlete_id"}).items():
                setattr(record, field, value)
        return athlete

    def delete_athlete(self, athlete_id: str) -> bool:
        with self._session() as session:
            record = session.query(AthleteRecord).filter_by(athlete_id=athlete_id).one_or_none()
            if record is None:
                return False
            session.delete(record)
            return True

    def list_athletes(self) -> List[Athlete]:
        with self._session() as session:
            records = session.query(AthleteRecord).order_by(AthleteRecord.athlete_id).all()
            return [_athlete_from_record(r) for r in records]

    def list_athlete_ids(self) -> List[str]:
        with self._session() as session:
            rows = session.query(AthleteRecord.athlete_id).order_by(AthleteRecord.athlete_id).all()
            return [row[0] for row in rows]

    # ===== ACTIVITIES =====

    def add_activity(self, activity: AnyActivity) -> AnyActivity:
        with self._session() as session:
            self._require_athlete(session, activity.athlete_id)
            record = ActivityRecord(
                athlete_id=activity.athlete_id,
                activity_date=activity.date,
                activity_type=activity.activity_type,
                payload=_activity_payload(activity),
            )
            session.add(record)
            session.flush()
            activity_id = record.id
        return activity.model_copy(update={"id": activity_id})

    def get_activity(self, activity_id: int) -> Optional[AnyActivity]:
        with self._session() as session:
            record = session.get(ActivityRecord, activity_id)
            return _activity_from_record(record) if record else None

    def update_activity(self, activity: AnyActivity) -> AnyActivity:
        if activity.id is None:
            raise ValueError("Cannot update an activity without an id")
        with self._session() as session:
            record = session.get(ActivityRecord, activity.id)
            if record is None:
                raise ActivityNotFoundError(activity.id)
            if record.athlete_id != activity.athlete_id:
                self._require_athlete(session, activity.athlete_id)
            record.athlete_id = activity.athlete_id
            record.activity_date = activity.date
            record.activity_type = activity.activity_type
            record.payload = _activity_payload(activity)
        return activity

    def delete_activity(self, activity_id: int) -> bool:
        with self._session() as session:
            record = session.get(ActivityRecord, activity_id)
            if record is None:
                return False
            session.delete(record)
            return True

    def list_activities(
        self,
        athlete_id: str,
        on_date: Optional[dt.date] = None,
        since: Optional[dt.date] = None,
        until: Optional[dt.date] = None,
    ) -> List[AnyActivity]:
        with self._session() as session:
            query = session.query(ActivityRecord).filter(ActivityRecord.athlete_id == athlete_id)
            if on_date is not None:
                query = query.filter(ActivityRecord.activity_date == on_date)
            if since is not None:
                query = query.filter(ActivityRecord.activity_date >= since)
            if until is not None:
                query = query.filter(ActivityRecord.activity_date <= until)
            records = query.order_by(ActivityRecord.activity_date, ActivityRecord.id).all()
            return [_activity_from_record(r) for r in records]

    # ===== INJURIES =====

    def has_active_injury(self, athlete_id: str, body_part: str) -> bool:
        with self._session() as session:
            count = (
                session.query(func.count(InjuryHistoryRecord.id))
                .filter(
                    InjuryHistoryRecord.athlete_id == athlete_id,
                    InjuryHistoryRecord.body_part == body_part,
                    InjuryHistoryRecord.status == InjuryStatus.ACTIVE.value,
                )
                .scalar()
            )
            return bool(count)

    def add_injury(self, injury: InjuryRecord) -> InjuryRecord:
        with self._session() as session:
            self._require_athlete(session, injury.athlete_id)
            record = InjuryHistoryRecord(**injury.model_dump(mode="python", exclude={"id"}))
            record.body_part = injury.body_part.value
            record.status = injury.status.value
            session.add(record)
            session.flush()
            injury_id = record.id
        return injury.model_copy(update={"id": injury_id})

    def resolve_injury(self, injury_id: int) -> InjuryRecord:
        with self._session() as session:
            record = session.get(InjuryHistoryRecord, injury_id)
            if record is None:
                raise InjuryNotFoundError(injury_id)
            record.status = InjuryStatus.RESOLVED.value
            session.flush()
            return _injury_from_record(record)

    def list_injuries(self, athlete_id: str) -> List[InjuryRecord]:
        with self._session() as session:
            records = (
                session.query(InjuryHistoryRecord)
                .filter(InjuryHistoryRecord.athlete_id == athlete_id)
                .order_by(InjuryHistoryRecord.occurred_on.desc(), InjuryHistoryRecord.id.desc())
                .all()
            )
            return [_injury_from_record(r) for r in records]

    # ===== WORKLOAD ROWS =====

    def recent_workloads(
        self,
        athlete_id: str,
        body_part: str,
        before: dt.date,
        limit: int = 30,
    ) -> List[BodyPartWorkload]:
        with self._session() as session:
            records = (
                session.query(BodyPartWorkloadRecord)
                .filter(
                    BodyPartWorkloadRecord.athlete_id == athlete_id,
                    BodyPartWorkloadRecord.body_part == body_part,
                    BodyPartWorkloadRecord.date < before,
                )
                .order_by(BodyPartWorkloadRecord.date.desc())
                .limit(limit)
                .all()
            )
            return [_workload_from_record(r) for r in records]

    def workloads_on(self, athlete_id: str, day: dt.date) -> List[BodyPartWorkload]:
        with self._session() as session:
            records = (
                session.query(BodyPartWorkloadRecord)
                .filter(
                    BodyPartWorkloadRecord.athlete_id == athlete_id,
                    BodyPartWorkloadRecord.date == day,
                )
                .order_by(BodyPartWorkloadRecord.body_part)
                .all()
            )
            return [_workload_from_record(r) for r in records]

    def latest_workloads(self, athlete_id: str) -> List[BodyPartWorkload]:
        with self._session() as session:
            latest = (
                session.query(
                    BodyPartWorkloadRecord.body_part,
                    func.max(BodyPartWorkloadRecord.date).label("latest_date"),
                )
                .filter(BodyPartWorkloadRecord.athlete_id == athlete_id)
                .group_by(BodyPartWorkloadRecord.body_part)
                .subquery()
            )
            records = (
                session.query(BodyPartWorkloadRecord)
                .join(
                    latest,
                    (BodyPartWorkloadRecord.body_part == latest.c.body_part)
                    & (BodyPartWorkloadRecord.date == latest.c.latest_date),
                )
                .filter(BodyPartWorkloadRecord.athlete_id == athlete_id)
                .order_by(BodyPartWorkloadRecord.body_part)
                .all()
            )
            return [_workload_from_record(r) for r in records]

    def workload_history(
        self,
        athlete_id: str,
        body_part: Optional[str] = None,
        since: Optional[dt.date] = None,
        until: Optional[dt.date] = None,
    ) -> List[BodyPartWorkload]:
        with self._session() as session:
            query = session.query(BodyPartWorkloadRecord).filter(BodyPartWorkloadRecord.athlete_id == athlete_id)
            if body_part is not None:
                query = query.filter(BodyPartWorkloadRecord.body_part == body_part)
            if since is not None:
                query = query.filter(BodyPartWorkloadRecord.date >= since)
            if until is not None:
                query = query.filter(BodyPartWorkloadRecord.date <= until)
            records = query.order_by(BodyPartWorkloadRecord.date.desc(), BodyPartWorkloadRecord.body_part).all()
            return [_workload_from_record(r) for r in records]

    def upsert_workload(self, row: BodyPartWorkload) -> BodyPartWorkload:
        with self._session() as session:
            record = (
                session.query(BodyPartWorkloadRecord)
                .filter_by(athlete_id=row.athlete_id, body_part=row.body_part, date=row.date)
                .one_or_none()
            )
            if record is None:
                self._require_athlete(session, row.athlete_id)
                record = BodyPartWorkloadRecord(athlete_id=row.athlete_id, body_part=row.body_part, date=row.date)
                session.add(record)
            for field in _WORKLOAD_FIELDS:
                setattr(record, field, getattr(row, field))
            record.risk_level = row.risk_level.value
        return row

    def delete_workload(self, key: WorkloadKey) -> bool:
        with self._session() as session:
            deleted = (
                session.query(BodyPartWorkloadRecord)
                .filter_by(athlete_id=key.athlete_id, body_part=key.body_part, date=key.date)
                .delete()
            )
            return deleted > 0

    # ===== SNAPSHOTS =====

    def upsert_snapshot(self, snapshot: InjuryRiskSnapshot) -> InjuryRiskSnapshot:
        values = snapshot.model_dump(mode="json", exclude={"athlete_id", "date"})
        with self._session() as session:
            record = (
                session.query(InjuryRiskSnapshotRecord)
                .filter_by(athlete_id=snapshot.athlete_id, date=snapshot.date)
                .one_or_none()
            )
            if record is None:
                self._require_athlete(session, snapshot.athlete_id)
                record = InjuryRiskSnapshotRecord(athlete_id=snapshot.athlete_id, date=snapshot.date)
                session.add(record)
            for field, value in values.items():
                setattr(record, field, value)
        return snapshot

    def get_snapshot(self, key: SnapshotKey) -> Optional[InjuryRiskSnapshot]:
        with self._session() as session:
            record = (
                session.query(InjuryRiskSnapshotRecord)
                .filter_by(athlete_id=key.athlete_id, date=key.date)
                .one_or_none()
            )
            return _snapshot_from_record(record) if record else None

    def delete_snapshot(self, key: SnapshotKey) -> bool:
        with self._session() as session:
            deleted = (
                session.query(InjuryRiskSnapshotRecord)
                .filter_by(athlete_id=key.athlete_id, date=key.date)
                .delete()
            )
            return deleted > 0

    def snapshot_history(
        self,
        athlete_id: str,
        since: Optional[dt.date] = None,
        until: Optional[dt.date] = None,
    ) -> List[InjuryRiskSnapshot]:
        with self._session() as session:
            query = session.query(InjuryRiskSnapshotRecord).filter(InjuryRiskSnapshotRecord.athlete_id == athlete_id)
            if since is not None:
                query = query.filter(InjuryRiskSnapshotRecord.date >= since)
            if until is not None:
                query = query.filter(InjuryRiskSnapshotRecord.date <= until)
            records = query.order_by(InjuryRiskSnapshotRecord.date.desc()).all()
            return [_snapshot_from_record(r) for r in records]
