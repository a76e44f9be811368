"""
Tests for body-part mapping and per-part intensity multipliers.
"""

import json
import logging

import pytest

from athlete_risk.body_parts import BodyPartMapper
from athlete_risk.catalog import (
    POSITION_BODY_PARTS,
    SPORT_BODY_PARTS,
    WORKOUT_TYPE_BODY_PARTS,
    BodyPartCatalog,
    IntensityRule,
)
from athlete_risk.schemas import ExerciseEntry, SportsActivity, WorkoutActivity


# Fixtures

@pytest.fixture
def mapper():
    return BodyPartMapper()


def workout(**fields):
    return WorkoutActivity(athlete_id="athlete_1", **fields)


def sports(**fields):
    return SportsActivity(athlete_id="athlete_1", **fields)


# Test Cases


@pytest.mark.parametrize("raw,expected", [
    ("bench", "Bench Press"),
    ("BENCH PRESS", "Bench Press"),
    ("  Squats ", "Squats"),
    ("pull up", "Pull-ups"),
    ("Zercher Carry", "Zercher Carry"),
])
def test_exercise_name_normalization(mapper, raw, expected):
    assert mapper.normalize_exercise_name(raw) == expected


def test_sport_name_normalization(mapper):
    assert mapper.normalize_sport_name("soccer") == "Soccer"
    assert mapper.normalize_sport_name("Martial Arts") == "MMA"
    assert mapper.normalize_sport_name(None) is None


def test_unknown_exercise_is_logged_and_maps_to_nothing(mapper, caplog):
    with caplog.at_level(logging.WARNING, logger="athlete_risk.body_parts"):
        assert mapper.parts_for_exercise("Zercher Carry") == []
    assert "Zercher Carry" in caplog.text


def test_workout_type_parts(mapper):
    assert mapper.affected_parts(workout(workout_type="Strength")) == set(WORKOUT_TYPE_BODY_PARTS["Strength"])


def test_workout_merges_type_and_exercise_parts(mapper):
    """Test that workout parts are the union of type defaults and exercise parts."""
    activity = workout(
        workout_type="Pilates",
        exercises=[ExerciseEntry(exercise="Wrist Curls")],
    )
    parts = mapper.affected_parts(activity)

    assert set(WORKOUT_TYPE_BODY_PARTS["Pilates"]) <= parts
    assert {"right-hand", "left-hand"} <= parts


def test_unmapped_workout_uses_fallback(mapper):
    activity = workout(exercises=[ExerciseEntry(exercise="Zercher Carry")])
    assert mapper.affected_parts(activity) == {"abdomen", "chest", "right-leg", "left-leg"}


def test_position_takes_precedence_over_sport(mapper):
    activity = sports(sport="Soccer", position="Goalkeeper")
    assert mapper.affected_parts(activity) == set(POSITION_BODY_PARTS["Goalkeeper"])


def test_sport_parts_when_position_unknown(mapper):
    activity = sports(sport="soccer", position="Sweeper")
    assert mapper.affected_parts(activity) == set(SPORT_BODY_PARTS["Soccer"])


def test_unmapped_sport_uses_fallback(mapper):
    assert mapper.affected_parts(sports(sport="Quidditch")) == {"right-leg", "left-leg", "abdomen"}


def test_explicit_parts_win(mapper):
    activity = sports(sport="Soccer", affected_body_parts=["neck"])
    assert mapper.affected_parts(activity) == {"neck"}


def test_mapping_is_deterministic(mapper):
    activity = workout(workout_type="HIIT", exercises=[ExerciseEntry(exercise="Burpees")])
    assert mapper.affected_parts(activity) == mapper.affected_parts(activity)


# Intensity multipliers


def test_position_rule(mapper):
    pitcher = sports(sport="Baseball", position="Pitcher")
    assert mapper.intensity_multiplier("right-shoulder", pitcher) == pytest.approx(1.8)
    assert mapper.intensity_multiplier("abdomen", pitcher) == 1.0


def test_sport_rule_overrides_position_rule(mapper):
    """Test that a matching sport rule replaces the position multiplier."""
    kicker = sports(sport="Soccer", position="Kicker")
    assert mapper.intensity_multiplier("right-leg", kicker) == pytest.approx(1.4)


def test_exercise_rules(mapper):
    """Test exact and substring exercise rules, including leg substring targets."""
    activity = workout(exercises=[
        ExerciseEntry(exercise="Bench Press"),
        ExerciseEntry(exercise="squat"),
    ])
    assert mapper.intensity_multiplier("chest", activity) == pytest.approx(1.5)
    assert mapper.intensity_multiplier("left-leg", activity) == pytest.approx(1.5)
    assert mapper.intensity_multiplier("right-arm", activity) == 1.0


def test_exercise_rule_scoped_to_single_exercise(mapper):
    activity = workout(exercises=[
        ExerciseEntry(exercise="Bench Press"),
        ExerciseEntry(exercise="Deadlift"),
    ])
    assert mapper.intensity_multiplier("abdomen", activity) == pytest.approx(1.6)
    assert mapper.intensity_multiplier("abdomen", activity, activity.exercises[0]) == 1.0


# Custom catalogs


def test_custom_catalog_replaces_tables():
    catalog = BodyPartCatalog(
        exercises={"Zercher Carry": ["abdomen", "right-arm", "left-arm"]},
        intensity_rules=[
            IntensityRule(scope="exercise", match="Zercher Carry", body_parts=["abdomen"], multiplier=2.0),
        ],
    )
    mapper = BodyPartMapper(catalog)
    activity = workout(exercises=[ExerciseEntry(exercise="zercher carry")])

    assert mapper.affected_parts(activity) == {"abdomen", "right-arm", "left-arm"}
    assert mapper.intensity_multiplier("abdomen", activity) == pytest.approx(2.0)


def test_intensity_rule_needs_a_target():
    with pytest.raises(ValueError):
        IntensityRule(scope="sport", match="Golf", multiplier=1.2)


def test_catalog_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"sports_fallback_parts": ["abdomen"]}))

    catalog = BodyPartCatalog.from_file(path)

    assert catalog.sports_fallback_parts == ["abdomen"]
    assert "Soccer" in catalog.sports
    assert BodyPartMapper(catalog).affected_parts(sports(sport="Quidditch")) == {"abdomen"}


def test_catalog_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        BodyPartCatalog.from_file(tmp_path / "missing.json")


def test_catalog_from_invalid_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"intensity_rules": [{"scope": "planet", "match": "x", "multiplier": 1}]}))
    with pytest.raises(ValueError):
        BodyPartCatalog.from_file(path)
