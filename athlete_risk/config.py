"""
Engine configuration.

Two layers:
- EngineConfig: the tuning constants of the workload, risk, aggregation and
  decay formulas. Immutable, loaded once and passed explicitly into each
  component. Any subset can be overridden from a JSON file.
- Settings: process-level settings read from environment variables
  (database URL, store timeout, log level, CORS origins).
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Default Multiplier Tables
# ============================================================================

DEFAULT_INTENSITY_MULTIPLIERS: Dict[str, float] = {
    "very-light": 0.3,
    "light": 0.5,
    "moderate": 1.0,
    "hard": 1.5,
    "very-hard": 2.0,
    "maximum": 2.5,
}

DEFAULT_RECOVERY_MODIFIERS: Dict[str, float] = {
    "excellent": 0.7,
    "good": 0.85,
    "normal": 1.0,
    "mild-soreness": 1.15,
    "significant-fatigue": 1.4,
    "concerning": 1.7,
    "injured": 2.0,
}

DEFAULT_MATCH_TYPE_MULTIPLIERS: Dict[str, float] = {
    "training": 0.5,
    "practice": 0.6,
    "friendly": 0.8,
    "competitive": 1.5,
    "tournament": 1.8,
    "playoff": 2.0,
}


# ============================================================================
# Engine Configuration
# ============================================================================

class RiskThresholds(BaseModel):
    """Floors of the risk levels. A score below `low` is minimal."""

    model_config = ConfigDict(frozen=True)

    low: int = Field(default=30, ge=0, le=100)
    medium: int = Field(default=60, ge=0, le=100)
    high: int = Field(default=80, ge=0, le=100)
    critical: int = Field(default=90, ge=0, le=100)

    @model_validator(mode="after")
    def validate_ordering(self):
        """Ensure floors are non-decreasing."""
        if not (self.low <= self.medium <= self.high <= self.critical):
            raise ValueError(
                f"Risk thresholds must be ordered low <= medium <= high <= critical, got "
                f"{self.low}/{self.medium}/{self.high}/{self.critical}"
            )
        return self


class WorkloadConstants(BaseModel):
    """Constants of the single-activity workload formula."""

    model_config = ConfigDict(frozen=True)

    base_workload: float = Field(default=10.0, ge=0)
    duration_baseline_minutes: float = Field(default=60.0, gt=0)
    duration_factor_cap: float = Field(default=3.0, gt=0)
    duration_floor: float = Field(default=0.3, ge=0)
    duration_slope: float = Field(default=0.7, ge=0)
    volume_divisor: float = Field(default=10.0, gt=0)


class RiskScoringConstants(BaseModel):
    """Caps and breakpoints of the additive risk score."""

    model_config = ConfigDict(frozen=True)

    workload_reference: float = Field(default=100.0, gt=0, description="Workload that earns the full term")
    workload_points: float = Field(default=30.0, ge=0)

    chronic_daily_reference: float = Field(default=50.0, gt=0, description="7-day daily average earning the full term")
    chronic_points: float = Field(default=25.0, ge=0)

    spike_ratio: float = Field(default=1.5, description="Acute:chronic ratio above which spikes score")
    spike_slope: float = Field(default=20.0, ge=0)
    spike_points: float = Field(default=20.0, ge=0)

    detraining_ratio: float = Field(default=0.5, description="Acute:chronic ratio below which detraining scores")
    detraining_slope: float = Field(default=15.0, ge=0)
    detraining_points: float = Field(default=15.0, ge=0)

    detraining_chronic_floor: float = Field(
        default=10.0,
        description="Chronic daily load required before detraining is penalized (unvalidated heuristic)"
    )

    recovery_points: float = Field(default=15.0, ge=0)

    frequency_free_sessions: int = Field(default=6, ge=0)
    frequency_step: float = Field(default=2.0, ge=0)
    frequency_points: float = Field(default=10.0, ge=0)

    active_injury_multiplier: float = Field(default=1.5, ge=1.0)


class DecayFactors(BaseModel):
    """Per-run geometric decay applied by the recovery job."""

    model_config = ConfigDict(frozen=True)

    workload: float = Field(default=0.92, ge=0, le=1)
    cumulative_7day: float = Field(default=0.92, ge=0, le=1)
    cumulative_30day: float = Field(default=0.97, ge=0, le=1)
    avg_intensity: float = Field(default=0.95, ge=0, le=1)


class EngineConfig(BaseModel):
    """
    Tuning parameters of the injury-risk engine.

    Every table and threshold used by the calculator, scorer, aggregator,
    summarizer and decay job lives here so tests and deployments can override
    them without touching code.
    """

    model_config = ConfigDict(frozen=True)

    intensity_multipliers: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_INTENSITY_MULTIPLIERS),
        description="Session intensity -> workload multiplier"
    )

    recovery_modifiers: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_RECOVERY_MODIFIERS),
        description="Recovery status -> workload multiplier"
    )

    match_type_multipliers: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_MATCH_TYPE_MULTIPLIERS),
        description="Match type -> workload multiplier"
    )

    risk_thresholds: RiskThresholds = Field(default_factory=RiskThresholds)
    workload: WorkloadConstants = Field(default_factory=WorkloadConstants)
    risk_scoring: RiskScoringConstants = Field(default_factory=RiskScoringConstants)
    decay: DecayFactors = Field(default_factory=DecayFactors)

    # Input defaults
    default_intensity: str = Field(default="moderate")
    default_sports_intensity: str = Field(default="hard")
    default_duration_minutes: float = Field(default=60.0, ge=0)
    default_recovery_status: str = Field(default="normal")

    # Rolling windows and recovery
    history_window_rows: int = Field(default=30, ge=1, description="Prior rows read per body part")
    acute_window_rows: int = Field(default=7, ge=1, description="Prior rows in the acute window")
    recovery_per_day: float = Field(default=8.0, ge=0, description="Recovery points credited per rest day")
    days_without_history: int = Field(default=7, ge=0, description="Rest days assumed with no prior row")

    # Athlete summary
    high_risk_floor: int = Field(default=60, ge=0, le=100, description="Per-part percentage listed as high risk")
    medium_risk_floor: int = Field(default=40, ge=0, le=100, description="Per-part percentage listed as medium risk")
    overall_reduce_intensity_floor: int = Field(default=60, ge=0, le=100)
    low_recovery_threshold: float = Field(default=70.0, ge=0, le=100)

    @classmethod
    def from_file(cls, config_path: Path) -> "EngineConfig":
        """
        Load engine configuration overrides from a JSON file.

        Keys missing from the file keep their defaults.

        Args:
            config_path: Path to a JSON object with EngineConfig fields

        Returns:
            EngineConfig instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the JSON is invalid or violates field constraints
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Engine config file not found: {config_path}")

        with open(config_path, "r") as f:
            config_data = json.load(f)

        try:
            return cls(**config_data)
        except Exception as e:
            raise ValueError(f"Invalid engine config file: {e}")


# ============================================================================
# Process Settings
# ============================================================================

class Settings(BaseModel):
    """Process-level settings resolved from the environment."""

    database_url: str = Field(default="sqlite:///athlete_risk.db")
    engine_config_path: Optional[Path] = Field(default=None)
    catalog_path: Optional[Path] = Field(default=None)
    store_timeout_seconds: float = Field(default=10.0, gt=0)
    log_level: str = Field(default="INFO")
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    @classmethod
    def from_env(cls) -> "Settings":
        engine_config = os.getenv("ATHLETE_RISK_ENGINE_CONFIG")
        catalog = os.getenv("ATHLETE_RISK_CATALOG")
        origins = os.getenv("ATHLETE_RISK_CORS_ORIGINS")
        return cls(
            database_url=os.getenv("ATHLETE_RISK_DATABASE_URL", "sqlite:///athlete_risk.db"),
            engine_config_path=Path(engine_config) if engine_config else None,
            catalog_path=Path(catalog) if catalog else None,
            store_timeout_seconds=float(os.getenv("ATHLETE_RISK_STORE_TIMEOUT", "10")),
            log_level=os.getenv("ATHLETE_RISK_LOG_LEVEL", "INFO").upper(),
            **({"cors_allow_origins": [o.strip() for o in origins.split(",") if o.strip()]} if origins else {}),
        )

    def load_engine_config(self) -> EngineConfig:
        if self.engine_config_path:
            return EngineConfig.from_file(self.engine_config_path)
        return EngineConfig()
