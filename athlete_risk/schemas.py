"""
Pydantic models for the workload and injury-risk engine.

This module defines the core data structures for:
- Athletes and injury records
- Activity logs: a tagged union of workout and sports sessions
- Per-body-part daily workload rows and their composite keys
- Athlete-level risk snapshots, recommendations and API-facing reports
"""

import datetime as dt
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from athlete_risk.errors import ActivityValidationError


# ============================================================================
# Enumerations
# ============================================================================

class ActivityType(str, Enum):
    """Discriminant of the activity union."""
    WORKOUT = "workout"
    SPORTS = "sports"


class IntensityLevel(str, Enum):
    """Self-reported session intensity."""
    VERY_LIGHT = "very-light"
    LIGHT = "light"
    MODERATE = "moderate"
    HARD = "hard"
    VERY_HARD = "very-hard"
    MAXIMUM = "maximum"


class RecoveryStatus(str, Enum):
    """How recovered the athlete felt going into the session."""
    EXCELLENT = "excellent"
    GOOD = "good"
    NORMAL = "normal"
    MILD_SORENESS = "mild-soreness"
    SIGNIFICANT_FATIGUE = "significant-fatigue"
    CONCERNING = "concerning"
    INJURED = "injured"


class MatchType(str, Enum):
    """Competitive context of a sports session."""
    TRAINING = "training"
    PRACTICE = "practice"
    FRIENDLY = "friendly"
    COMPETITIVE = "competitive"
    TOURNAMENT = "tournament"
    PLAYOFF = "playoff"


class RiskLevel(str, Enum):
    """Categorical injury-risk level."""
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BodyPart(str, Enum):
    """Anatomical regions tracked by the engine."""
    HEAD = "head"
    NECK = "neck"
    CHEST = "chest"
    ABDOMEN = "abdomen"
    RIGHT_SHOULDER = "right-shoulder"
    LEFT_SHOULDER = "left-shoulder"
    RIGHT_ARM = "right-arm"
    LEFT_ARM = "left-arm"
    RIGHT_HAND = "right-hand"
    LEFT_HAND = "left-hand"
    RIGHT_LEG = "right-leg"
    LEFT_LEG = "left-leg"
    RIGHT_FOOT = "right-foot"
    LEFT_FOOT = "left-foot"


class InjuryStatus(str, Enum):
    """Lifecycle of an injury record."""
    ACTIVE = "active"
    RECOVERING = "recovering"
    RESOLVED = "resolved"


class AthleteStatus(str, Enum):
    """Roster status, maintained outside the engine."""
    ACTIVE = "active"
    INJURED = "injured"
    RECOVERING = "recovering"
    INACTIVE = "inactive"


class RecommendationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ============================================================================
# Athletes and Injuries
# ============================================================================

class Athlete(BaseModel):
    """Athlete profile. Aggregation root for activities and workload rows."""

    athlete_id: str = Field(
        ...,
        min_length=1,
        pattern=r"^[a-zA-Z0-9_-]+$",
        description="Unique identifier for the athlete"
    )

    name: str = Field(..., min_length=1, description="Display name")
    email: Optional[str] = Field(None, description="Contact email")
    age: Optional[int] = Field(None, ge=5, le=100, description="Age in years")
    height: Optional[float] = Field(None, gt=0, description="Height in cm")
    weight: Optional[float] = Field(None, gt=0, description="Body weight in kg")
    primary_sport: Optional[str] = Field(None, description="Main sport (e.g., 'Soccer')")
    position: Optional[str] = Field(None, description="Playing position (e.g., 'Goalkeeper')")
    team: Optional[str] = Field(None, description="Team or squad name")

    status: AthleteStatus = Field(
        default=AthleteStatus.ACTIVE,
        description="Roster status; derived externally, never mutated by the engine"
    )


class InjuryRecord(BaseModel):
    """
    Injury history entry for one body part.

    The engine only consumes these: an ACTIVE record for (athlete, body_part)
    switches on the active-injury multiplier in risk scoring.
    """

    id: Optional[int] = Field(None, description="Store-assigned identifier")
    athlete_id: str = Field(..., description="Injured athlete")
    body_part: BodyPart = Field(..., description="Injured body part")
    status: InjuryStatus = Field(default=InjuryStatus.ACTIVE, description="Injury lifecycle status")
    injury_type: Optional[str] = Field(None, description="Free-text injury type (e.g., 'strain')")
    occurred_on: dt.date = Field(default_factory=dt.date.today, description="Date of injury")
    notes: Optional[str] = Field(None, description="Clinical or coaching notes")


# ============================================================================
# Activities (tagged union)
# ============================================================================

class ExerciseEntry(BaseModel):
    """A single logged exercise inside a workout."""

    exercise: str = Field(..., min_length=1, description="Exercise name (e.g., 'Bench Press')")
    sets: int = Field(default=0, ge=0, description="Number of sets")
    reps: int = Field(default=0, ge=0, description="Repetitions per set")
    weight: float = Field(default=0.0, ge=0, description="Load per repetition in kg")

    intensity: Optional[str] = Field(
        None,
        description="Per-exercise intensity; falls back to the workout intensity"
    )


class ActivityBase(BaseModel):
    """
    Fields shared by every activity.

    Multiplier-driving fields (intensity_level, recovery_status) are plain
    strings: unknown values must degrade to neutral multipliers rather than
    reject the activity.
    """

    id: Optional[int] = Field(None, description="Store-assigned identifier")
    athlete_id: str = Field(..., min_length=1, description="Athlete who performed the activity")
    date: dt.date = Field(default_factory=dt.date.today, description="Day the activity took place")

    duration: float = Field(
        default=60.0,
        description="Session duration in minutes; non-positive values score as zero"
    )

    intensity_level: Optional[str] = Field(
        None,
        description="Session intensity (very-light, light, moderate, hard, very-hard, maximum)"
    )

    recovery_status: Optional[str] = Field(
        default=RecoveryStatus.NORMAL.value,
        description="Recovery state going into the session"
    )

    affected_body_parts: List[str] = Field(
        default_factory=list,
        description="Body parts loaded by this activity; auto-detected when empty"
    )

    heart_rate_avg: Optional[float] = Field(None, ge=0, description="Average heart rate (bpm)")
    heart_rate_max: Optional[float] = Field(None, ge=0, description="Maximum heart rate (bpm)")
    calories_burned: Optional[float] = Field(None, ge=0, description="Estimated calories")
    fatigue_level: Optional[float] = Field(None, ge=0, le=10, description="Post-session fatigue 0-10")
    notes: Optional[str] = Field(None, description="Free-text notes")

    @field_validator("intensity_level", "recovery_status", mode="before")
    @classmethod
    def normalize_label(cls, value):
        """Lower-case and trim enum-like labels so table lookups match."""
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, str):
            return value.strip().lower()
        return value


class WorkoutActivity(ActivityBase):
    """Gym or conditioning session made of individual exercises."""

    activity_type: Literal["workout"] = Field(
        default="workout",
        description="Discriminant for workout sessions"
    )

    workout_type: Optional[str] = Field(None, description="Workout category (e.g., 'Strength', 'HIIT')")
    exercises: List[ExerciseEntry] = Field(default_factory=list, description="Logged exercises")
    equipment_used: List[str] = Field(default_factory=list, description="Equipment used")


class SportsActivity(ActivityBase):
    """Training session or match in a sport."""

    activity_type: Literal["sports"] = Field(
        default="sports",
        description="Discriminant for sports sessions"
    )

    sport: Optional[str] = Field(None, description="Sport name (e.g., 'Soccer')")
    position: Optional[str] = Field(None, description="Position played (e.g., 'Goalkeeper')")

    match_type: Optional[str] = Field(
        None,
        description="Match context (training, practice, friendly, competitive, tournament, playoff)"
    )

    minutes_played: Optional[float] = Field(
        None,
        description="Minutes actually played; preferred over duration when present"
    )

    opponent: Optional[str] = Field(None, description="Opponent name")
    result: Optional[str] = Field(None, description="Match result")
    surface_type: Optional[str] = Field(None, description="Playing surface")
    injuries: List[str] = Field(default_factory=list, description="Injuries sustained during the session")

    @field_validator("match_type", mode="before")
    @classmethod
    def normalize_match_type(cls, value):
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, str):
            return value.strip().lower()
        return value


Activity = Annotated[
    Union[WorkoutActivity, SportsActivity],
    Field(discriminator="activity_type"),
]

_activity_adapter = TypeAdapter(Activity)


def parse_activity(payload: Dict[str, Any]) -> Union[WorkoutActivity, SportsActivity]:
    """
    Validate a raw activity payload into the tagged union.

    Args:
        payload: Loosely shaped activity dict (e.g., a JSON request body)

    Returns:
        WorkoutActivity or SportsActivity

    Raises:
        ActivityValidationError: If athlete_id or activity_type is missing,
            activity_type is unknown, or a field cannot be coerced
    """
    if not isinstance(payload, dict):
        raise ActivityValidationError("Activity payload must be an object")

    missing = [key for key in ("athlete_id", "activity_type") if not payload.get(key)]
    if missing:
        raise ActivityValidationError(
            f"{' and '.join(missing)} {'is' if len(missing) == 1 else 'are'} required"
        )

    activity_type = str(payload["activity_type"]).strip().lower()
    if activity_type not in {t.value for t in ActivityType}:
        raise ActivityValidationError(
            f"Unknown activity_type '{payload['activity_type']}'. "
            f"Expected one of: {[t.value for t in ActivityType]}"
        )

    try:
        return _activity_adapter.validate_python({**payload, "activity_type": activity_type})
    except ValidationError as e:
        raise ActivityValidationError(f"Invalid activity: {e}") from e


# ============================================================================
# Workload Rows and Keys
# ============================================================================

class WorkloadKey(BaseModel):
    """
    Composite key of a BodyPartWorkload row.

    Writes are read-if-exists then insert-or-replace on this key. Two writers
    holding the same key race; the later write wins.
    """

    model_config = ConfigDict(frozen=True)

    athlete_id: str
    body_part: str
    date: dt.date


class SnapshotKey(BaseModel):
    """Composite key of an InjuryRiskSnapshot row."""

    model_config = ConfigDict(frozen=True)

    athlete_id: str
    date: dt.date


class BodyPartWorkload(BaseModel):
    """One day of workload and risk state for one body part of one athlete."""

    athlete_id: str = Field(..., description="Owning athlete")
    body_part: str = Field(..., description="Body part (see BodyPart)")
    date: dt.date = Field(..., description="Day this row represents")

    workload_score: float = Field(default=0.0, ge=0, description="That day's workload contribution")
    cumulative_7day: float = Field(default=0.0, ge=0, description="Rolling 7-row sum including this day")
    cumulative_30day: float = Field(default=0.0, ge=0, description="Rolling 30-row sum including this day")

    injury_risk_percentage: int = Field(default=0, ge=0, le=100, description="Injury risk 0-100")
    risk_level: RiskLevel = Field(default=RiskLevel.MINIMAL, description="Categorical risk level")

    recovery_rate: float = Field(
        default=100.0,
        ge=0,
        le=100,
        description="Recovery progress since last activity (0-100)"
    )

    days_since_last_activity: int = Field(default=0, ge=0, description="Rest days carried by this row")

    activity_count: int = Field(
        default=0,
        ge=0,
        description="Activities in the trailing 7-day window including this day; 0 on decay rows"
    )

    total_duration: float = Field(default=0.0, ge=0, description="Minutes of contributing activity that day")
    avg_intensity: float = Field(default=0.0, ge=0, description="Rolling average intensity multiplier")

    @property
    def key(self) -> WorkloadKey:
        return WorkloadKey(athlete_id=self.athlete_id, body_part=self.body_part, date=self.date)


# ============================================================================
# Risk Scoring
# ============================================================================

class RiskInputs(BaseModel):
    """Rolling workload statistics fed to the risk scorer."""

    current_workload: float = Field(default=0.0, description="Today's workload for the part")
    cumulative_7day: float = Field(default=0.0, description="Rolling 7-day load")
    cumulative_30day: float = Field(default=0.0, description="Rolling 30-day load")
    days_since_last_activity: int = Field(default=0, description="Rest days before today")
    recovery_rate: float = Field(default=100.0, description="Recovery progress 0-100")
    activity_count: int = Field(default=0, description="Activities in the trailing 7-day window")
    avg_intensity: float = Field(default=0.0, description="Rolling average intensity")
    has_active_injury: bool = Field(default=False, description="Whether an active injury exists")


class RiskAssessment(BaseModel):
    """Result object for a risk calculation."""

    percentage: int = Field(..., ge=0, le=100, description="Injury risk percentage")
    level: RiskLevel = Field(..., description="Categorical risk level")
    breakdown: Dict[str, float] = Field(
        default_factory=dict,
        description="Points contributed by each scoring term before the injury multiplier"
    )


class Recommendation(BaseModel):
    """Actionable coaching recommendation."""

    priority: RecommendationPriority = Field(..., description="Urgency")
    title: str = Field(..., description="Short headline")
    description: str = Field(..., description="What to do")
    body_parts: List[str] = Field(default_factory=list, description="Body parts the advice targets")


class InjuryRiskSnapshot(BaseModel):
    """Athlete-level daily summary across all body parts."""

    athlete_id: str = Field(..., description="Athlete")
    date: dt.date = Field(..., description="Day summarized")
    overall_risk_score: int = Field(..., ge=0, le=100, description="Rounded mean of per-part percentages")
    risk_level: RiskLevel = Field(..., description="Level of the overall score")
    training_load_score: float = Field(..., ge=0, description="Mean cumulative 7-day load")
    fatigue_index: float = Field(..., description="100 - recovery_score")
    recovery_score: float = Field(..., description="Mean recovery rate")
    high_risk_body_parts: List[str] = Field(default_factory=list, description="Parts at or above the high floor")
    medium_risk_body_parts: List[str] = Field(default_factory=list, description="Parts in the medium band")
    recommendations: List[Recommendation] = Field(default_factory=list, description="Generated advice")

    @property
    def key(self) -> SnapshotKey:
        return SnapshotKey(athlete_id=self.athlete_id, date=self.date)


# ============================================================================
# Service Results
# ============================================================================

class BodyPartRisk(BaseModel):
    """Per-part risk entry for body-diagram consumers."""

    part: str
    risk: RiskLevel
    percentage: int = Field(..., ge=0, le=100)
    message: str


class RiskReport(BaseModel):
    """Response of get_risk for one athlete and date."""

    athlete_id: str
    date: dt.date
    body_part_risks: List[BodyPartRisk] = Field(default_factory=list)
    overall_risk: Optional[InjuryRiskSnapshot] = None
    workloads: List[BodyPartWorkload] = Field(default_factory=list)


class ActivityLogResult(BaseModel):
    """
    Outcome of logging (or editing) an activity.

    The activity write is never rolled back: parts that failed to update are
    listed in failed_body_parts instead.
    """

    activity: Union[WorkoutActivity, SportsActivity] = Field(..., discriminator="activity_type")
    workload_updates: List[BodyPartWorkload] = Field(default_factory=list)
    failed_body_parts: List[str] = Field(default_factory=list)
    injury_risk: Optional[InjuryRiskSnapshot] = None


class ActivityDeleteResult(BaseModel):
    """Outcome of deleting an activity."""

    activity_id: int
    athlete_id: str
    date: dt.date
    recomputed_body_parts: List[str] = Field(default_factory=list)
    removed_body_parts: List[str] = Field(default_factory=list)
    failed_body_parts: List[str] = Field(default_factory=list)
    injury_risk: Optional[InjuryRiskSnapshot] = None
