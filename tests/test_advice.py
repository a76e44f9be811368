"""
Tests for body-part specific advice.
"""

import pytest

from athlete_risk.advice import REGION_ADVICE, BodyPartAdvisor, format_body_part, region_of
from athlete_risk.schemas import BodyPart, RecommendationPriority, RiskLevel


# Fixtures

@pytest.fixture
def advisor():
    return BodyPartAdvisor()


# Test Cases


def test_format_body_part():
    assert format_body_part("right-shoulder") == "Right Shoulder"
    assert format_body_part("abdomen") == "Abdomen"


@pytest.mark.parametrize("body_part,region", [
    ("left-shoulder", "shoulder"),
    ("right-leg", "leg"),
    ("left-foot", "foot"),
    ("abdomen", "abdomen"),
    ("tail", None),
])
def test_region_of(body_part, region):
    assert region_of(body_part) == region


def test_every_body_part_has_advice_for_every_level():
    """Test that each tracked body part resolves to a region covering all levels."""
    for body_part in BodyPart:
        region = region_of(body_part.value)
        assert region is not None, body_part
        assert set(REGION_ADVICE[region]) == set(RiskLevel)


def test_critical_shoulder_names_the_side(advisor):
    recommendations = advisor.recommendations("right-shoulder", 95)

    assert recommendations[0].title == "Immediate Rest for Right Shoulder"
    assert recommendations[0].priority == RecommendationPriority.HIGH
    assert all(r.body_parts == ["right-shoulder"] for r in recommendations)


def test_left_and_right_share_region_text(advisor):
    left = advisor.recommendations("left-leg", 65)
    right = advisor.recommendations("right-leg", 65)
    assert [r.description for r in left] == [r.description for r in right]


def test_advice_follows_risk_level(advisor):
    assert advisor.recommendations("chest", 10) != advisor.recommendations("chest", 85)


def test_unknown_part_gets_generic_advice(advisor):
    recommendations = advisor.recommendations("tail", 85)

    assert len(recommendations) == 1
    assert recommendations[0].title == "High Risk Detected"
    assert recommendations[0].priority == RecommendationPriority.HIGH
    assert "Tail" in recommendations[0].description

    assert advisor.recommendations("tail", 10)[0].priority == RecommendationPriority.MEDIUM
