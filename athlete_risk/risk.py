"""
Injury risk scoring module.

Converts rolling per-body-part workload statistics into a 0-100 injury risk
percentage and a categorical risk level.
"""

import math
from typing import Dict, Optional

from athlete_risk.config import EngineConfig
from athlete_risk.schemas import RiskAssessment, RiskInputs, RiskLevel


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up."""
    return int(math.floor(value + 0.5))


class RiskScorer:
    """
    Computes injury risk from workload statistics.

    Risk = (workload + chronic + acute:chronic + recovery + frequency) × injury

    Each term is capped independently before summation:
    - workload: min(current / 100 × 30, 30)
    - chronic: min((cum7 / 7) / 50 × 25, 25)
    - acute:chronic: spike above 1.5 (max 20) or detraining below 0.5 (max 15)
    - recovery: (100 - recovery_rate) / 100 × 15
    - frequency: min((count - 6) × 2, 10) once count exceeds 6

    An active injury multiplies the raw sum by 1.5. The result is clamped to
    [0, 100] and rounded half up. Scoring is pure and monotonic in each
    risk-increasing input.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize scorer with engine configuration.

        Args:
            config: Risk thresholds and term constants (defaults if None)
        """
        self.config = config or EngineConfig()
        self.constants = self.config.risk_scoring
        self.thresholds = self.config.risk_thresholds

    def assess(self, inputs: RiskInputs) -> RiskAssessment:
        """
        Score one body part.

        Args:
            inputs: Rolling workload statistics for the part

        Returns:
            RiskAssessment with percentage, level and per-term breakdown
        """
        breakdown = self._term_breakdown(inputs)
        raw_score = sum(breakdown.values())

        if inputs.has_active_injury:
            raw_score *= self.constants.active_injury_multiplier

        percentage = round_half_up(max(0.0, min(100.0, raw_score)))

        return RiskAssessment(
            percentage=percentage,
            level=self.risk_level(percentage),
            breakdown=breakdown,
        )

    def risk_percentage(self, inputs: RiskInputs) -> int:
        return self.assess(inputs).percentage

    def risk_level(self, percentage: float) -> RiskLevel:
        """
        Map a percentage onto the configured level floors.

        Args:
            percentage: Risk percentage 0-100

        Returns:
            Highest level whose floor the percentage reaches (minimal below LOW)
        """
        t = self.thresholds
        if percentage >= t.critical:
            return RiskLevel.CRITICAL
        if percentage >= t.high:
            return RiskLevel.HIGH
        if percentage >= t.medium:
            return RiskLevel.MEDIUM
        if percentage >= t.low:
            return RiskLevel.LOW
        return RiskLevel.MINIMAL

    def risk_message(self, percentage: int, body_part: str) -> str:
        """
        Human-readable status shown next to a body part.

        Message bands (80/60/40/20) are finer than the risk levels so the
        body diagram can distinguish mild fatigue from optimal condition.
        """
        part = body_part.replace("-", " ")

        if percentage >= 80:
            return f"CRITICAL: Immediate rest required for {part}. Extremely high overuse detected."
        if percentage >= 60:
            return f"HIGH RISK: Significant overuse in {part}. Reduce training load by 30-40%."
        if percentage >= 40:
            return f"MODERATE: Elevated stress in {part}. Monitor closely and maintain proper recovery."
        if percentage >= 20:
            return f"LOW: Mild fatigue in {part}. Continue current training with adequate rest."
        return f"MINIMAL: {part} is in optimal condition. Current training load is appropriate."

    # ===== SCORING TERMS =====

    def _term_breakdown(self, inputs: RiskInputs) -> Dict[str, float]:
        return {
            "current_workload": self._workload_term(inputs),
            "chronic_load": self._chronic_term(inputs),
            "acute_chronic_ratio": self._ratio_term(inputs),
            "recovery_deficit": self._recovery_term(inputs),
            "frequency": self._frequency_term(inputs),
        }

    def _workload_term(self, inputs: RiskInputs) -> float:
        c = self.constants
        workload = max(inputs.current_workload, 0.0)
        return min(workload / c.workload_reference * c.workload_points, c.workload_points)

    def _chronic_term(self, inputs: RiskInputs) -> float:
        c = self.constants
        avg_daily_7day = max(inputs.cumulative_7day, 0.0) / 7
        return min(avg_daily_7day / c.chronic_daily_reference * c.chronic_points, c.chronic_points)

    def _ratio_term(self, inputs: RiskInputs) -> float:
        """
        Acute:chronic workload ratio term.

        Logic:
        - chronic_daily = cum30 / 30; ratio = cum7 / (chronic_daily × 7)
        - ratio > spike_ratio: penalize the load spike
        - ratio < detraining_ratio with chronic_daily above the floor:
          penalize sudden detraining after sustained load
        - No chronic history: ratio is 0 and nothing is scored
        """
        c = self.constants
        chronic_daily = inputs.cumulative_30day / 30
        if chronic_daily <= 0:
            return 0.0

        ratio = inputs.cumulative_7day / (chronic_daily * 7)

        if ratio > c.spike_ratio:
            return min((ratio - c.spike_ratio) * c.spike_slope, c.spike_points)
        if ratio < c.detraining_ratio and chronic_daily > c.detraining_chronic_floor:
            return min((c.detraining_ratio - ratio) * c.detraining_slope, c.detraining_points)
        return 0.0

    def _recovery_term(self, inputs: RiskInputs) -> float:
        recovery = max(0.0, min(100.0, inputs.recovery_rate))
        return (100 - recovery) / 100 * self.constants.recovery_points

    def _frequency_term(self, inputs: RiskInputs) -> float:
        c = self.constants
        if inputs.activity_count <= c.frequency_free_sessions:
            return 0.0
        return min((inputs.activity_count - c.frequency_free_sessions) * c.frequency_step, c.frequency_points)
