"""
Workload score calculation module.

Turns the parameters of one session (intensity, duration, recovery status,
strength volume, match context) into a single unitless workload score.
"""

import math
from typing import Any, Optional

from athlete_risk.config import EngineConfig


def _as_float(value: Any, default: float) -> float:
    """Coerce to float, falling back to `default` for missing or non-numeric values."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def _as_label(value: Any, default: str) -> str:
    if value is None:
        return default
    label = str(getattr(value, "value", value)).strip().lower()
    return label or default


class WorkloadCalculator:
    """
    Computes the workload score of a single activity.

    Workload = (base × intensity × duration_factor × recovery + volume) × match

    - duration_factor = floor + min(duration / baseline, cap) × slope
    - volume = sets × reps × √max(weight, 1) / divisor (strength work only)
    - match applies to sports sessions only

    The calculator is pure and never raises: missing or unknown inputs fall
    back to the configured defaults or a neutral 1.0 multiplier.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize calculator with engine configuration.

        Args:
            config: Multiplier tables and formula constants (defaults if None)
        """
        self.config = config or EngineConfig()
        self.constants = self.config.workload

    def score(
        self,
        intensity: Optional[str] = None,
        duration: Optional[float] = None,
        recovery_status: Optional[str] = None,
        sets: Optional[int] = 0,
        reps: Optional[int] = 0,
        weight: Optional[float] = 0,
        match_type: Optional[str] = None,
        is_match: bool = False,
    ) -> float:
        """
        Calculate the workload score of one session.

        Args:
            intensity: Intensity label (very-light ... maximum)
            duration: Minutes; non-positive values count as zero
            recovery_status: Recovery label (excellent ... injured)
            sets: Strength sets (volume term applies when sets and reps > 0)
            reps: Repetitions per set
            weight: Load per repetition; values below 1 count as 1
            match_type: Match label (training ... playoff)
            is_match: Whether this is a sports session

        Returns:
            Workload score rounded to one decimal, never negative
        """
        c = self.constants

        workload = c.base_workload
        workload *= self.intensity_multiplier(intensity)

        minutes = max(_as_float(duration, self.config.default_duration_minutes), 0.0)
        duration_factor = min(minutes / c.duration_baseline_minutes, c.duration_factor_cap)
        workload *= c.duration_floor + duration_factor * c.duration_slope

        workload *= self.recovery_modifier(recovery_status)

        set_count = _as_float(sets, 0.0)
        rep_count = _as_float(reps, 0.0)
        if set_count > 0 and rep_count > 0:
            load = max(_as_float(weight, 1.0), 1.0)
            workload += set_count * rep_count * math.sqrt(load) / c.volume_divisor

        if is_match:
            workload *= self.match_multiplier(match_type)

        return max(0.0, round(workload, 1))

    def intensity_multiplier(self, intensity: Optional[str]) -> float:
        label = _as_label(intensity, self.config.default_intensity)
        return self.config.intensity_multipliers.get(label, 1.0)

    def recovery_modifier(self, recovery_status: Optional[str]) -> float:
        label = _as_label(recovery_status, self.config.default_recovery_status)
        return self.config.recovery_modifiers.get(label, 1.0)

    def match_multiplier(self, match_type: Optional[str]) -> float:
        if match_type is None:
            return 1.0
        return self.config.match_type_multipliers.get(_as_label(match_type, ""), 1.0)

    def recovery_rate(self, days_since_last_activity: Any) -> float:
        """
        Recovery progress after a number of rest days.

        Args:
            days_since_last_activity: Elapsed rest days

        Returns:
            min(days × recovery_per_day, 100)
        """
        days = max(_as_float(days_since_last_activity, 0.0), 0.0)
        return min(days * self.config.recovery_per_day, 100.0)
