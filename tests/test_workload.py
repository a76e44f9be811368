"""
Tests for workload score calculation.

Ensures the single-session workload formula applies its intensity, duration,
recovery, volume and match factors and never fails on odd input.
"""

import pytest

from athlete_risk.config import EngineConfig
from athlete_risk.workload import WorkloadCalculator


# Fixtures

@pytest.fixture
def calculator():
    return WorkloadCalculator()


# Test Cases


def test_baseline_session_scores_ten(calculator):
    """Test that a moderate 60-minute session at normal recovery scores the base workload."""
    assert calculator.score(intensity="moderate", duration=60, recovery_status="normal") == 10.0


def test_missing_inputs_use_defaults(calculator):
    """Test that omitted intensity, duration and recovery fall back to moderate/60/normal."""
    assert calculator.score() == 10.0


def test_score_is_deterministic(calculator):
    kwargs = dict(intensity="hard", duration=75, recovery_status="mild-soreness", sets=4, reps=6, weight=90)
    assert calculator.score(**kwargs) == calculator.score(**kwargs)


def test_zero_duration_does_not_fail(calculator):
    """Test that a zero-minute workout still returns a non-negative floor score."""
    score = calculator.score(intensity="moderate", duration=0, recovery_status="normal")

    assert score >= 0
    assert score == pytest.approx(3.0)


def test_negative_duration_scores_like_zero(calculator):
    assert calculator.score(duration=-30) == calculator.score(duration=0)


def test_duration_factor_is_capped(calculator):
    """Test that sessions beyond three hours stop adding duration load."""
    assert calculator.score(duration=180) == pytest.approx(24.0)
    assert calculator.score(duration=500) == calculator.score(duration=180)


@pytest.mark.parametrize("intensity,expected", [
    ("very-light", 3.0),
    ("light", 5.0),
    ("hard", 15.0),
    ("maximum", 25.0),
])
def test_intensity_multiplier_scales_score(calculator, intensity, expected):
    assert calculator.score(intensity=intensity) == pytest.approx(expected)


def test_unknown_labels_are_neutral(calculator):
    """Test that unrecognized intensity and recovery labels count as 1.0."""
    assert calculator.score(intensity="extreme", recovery_status="meh") == 10.0


def test_recovery_status_modifies_score(calculator):
    assert calculator.score(recovery_status="excellent") == pytest.approx(7.0)
    assert calculator.score(recovery_status="injured") == pytest.approx(20.0)


def test_strength_volume_adds_load(calculator):
    """
    Test the strength volume term.

    3 sets × 10 reps at 100 kg adds 3 × 10 × √100 / 10 = 30.
    """
    assert calculator.score(sets=3, reps=10, weight=100) == pytest.approx(40.0)


def test_bodyweight_volume_treated_as_one_kg(calculator):
    assert calculator.score(sets=3, reps=10, weight=0) == pytest.approx(13.0)


def test_volume_requires_sets_and_reps(calculator):
    assert calculator.score(sets=3, reps=0, weight=100) == 10.0


def test_match_multiplier_applies_to_sports_only(calculator):
    """Test that match type only matters when the session is a sports session."""
    assert calculator.score(match_type="playoff") == 10.0
    assert calculator.score(match_type="playoff", is_match=True) == pytest.approx(20.0)
    assert calculator.score(match_type="training", is_match=True) == pytest.approx(5.0)


def test_competitive_match_compounds_factors(calculator):
    """Test a hard 90-minute competitive match: 10 × 1.5 × 1.35 × 1.5."""
    score = calculator.score(intensity="hard", duration=90, match_type="competitive", is_match=True)
    assert score == pytest.approx(30.4)


def test_non_numeric_inputs_degrade(calculator):
    score = calculator.score(duration="abc", sets="x", reps=None, weight=float("nan"))
    assert score == 10.0


def test_recovery_rate_is_capped():
    calculator = WorkloadCalculator()
    assert calculator.recovery_rate(0) == 0
    assert calculator.recovery_rate(3) == 24
    assert calculator.recovery_rate(20) == 100


def test_overridden_tables_are_used():
    """Test that multiplier tables passed in the config replace the defaults."""
    config = EngineConfig(intensity_multipliers={"moderate": 2.0})
    assert WorkloadCalculator(config).score(intensity="moderate") == pytest.approx(20.0)
