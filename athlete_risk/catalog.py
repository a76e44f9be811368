"""
Body-part knowledge base.

Static tables mapping exercises, workout types, sports and playing positions
to the body parts they load, plus the per-part intensity rules. The tables
are wrapped in an immutable BodyPartCatalog that is handed to the mapper, so
tests and deployments can swap in their own.
"""

import json
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Shorthands for symmetric pairs
SHOULDERS = ["right-shoulder", "left-shoulder"]
ARMS = ["right-arm", "left-arm"]
HANDS = ["right-hand", "left-hand"]
LEGS = ["right-leg", "left-leg"]
FEET = ["right-foot", "left-foot"]
UPPER_PUSH = ["chest"] + SHOULDERS + ARMS
LOWER = LEGS + FEET


# ============================================================================
# Exercise Table
# ============================================================================

EXERCISE_BODY_PARTS: Dict[str, List[str]] = {
    # Chest
    "Bench Press": UPPER_PUSH,
    "Incline Bench Press": UPPER_PUSH,
    "Decline Bench Press": UPPER_PUSH,
    "Dumbbell Bench Press": UPPER_PUSH,
    "Push-ups": UPPER_PUSH + ["abdomen"],
    "Dumbbell Flyes": ["chest"] + SHOULDERS,
    "Cable Crossover": ["chest"] + SHOULDERS,
    "Chest Dips": UPPER_PUSH,
    "Pec Deck Machine": ["chest"] + SHOULDERS,

    # Shoulders
    "Overhead Press": SHOULDERS + ARMS + ["neck", "abdomen"],
    "Military Press": SHOULDERS + ARMS + ["abdomen"],
    "Dumbbell Shoulder Press": SHOULDERS + ARMS,
    "Arnold Press": SHOULDERS + ARMS,
    "Lateral Raises": SHOULDERS + ARMS,
    "Front Raises": SHOULDERS + ARMS,
    "Rear Delt Flyes": SHOULDERS,
    "Face Pulls": SHOULDERS + ["neck"],
    "Upright Rows": SHOULDERS + ARMS,
    "Shrugs": ["neck"] + SHOULDERS,

    # Back
    "Pull-ups": SHOULDERS + ARMS + ["abdomen"],
    "Chin-ups": SHOULDERS + ARMS + ["abdomen"],
    "Deadlift": ["abdomen"] + LEGS + SHOULDERS + ["neck"],
    "Romanian Deadlift": LEGS + ["abdomen"] + SHOULDERS,
    "Barbell Rows": SHOULDERS + ARMS + ["abdomen"],
    "Dumbbell Rows": SHOULDERS + ARMS + ["abdomen"],
    "Lat Pulldowns": SHOULDERS + ARMS,
    "Seated Cable Rows": SHOULDERS + ARMS + ["abdomen"],
    "T-Bar Rows": SHOULDERS + ARMS + ["abdomen"],
    "Single-Arm Dumbbell Rows": SHOULDERS + ARMS + ["abdomen"],

    # Arms
    "Bicep Curls": ARMS,
    "Barbell Curls": ARMS,
    "Hammer Curls": ARMS,
    "Preacher Curls": ARMS,
    "Concentration Curls": ARMS,
    "Cable Curls": ARMS,
    "Tricep Dips": ARMS + SHOULDERS + ["chest"],
    "Tricep Pushdowns": ARMS,
    "Overhead Tricep Extension": ARMS + SHOULDERS,
    "Skull Crushers": ARMS,
    "Close-Grip Bench Press": ARMS + ["chest"] + SHOULDERS,
    "Wrist Curls": HANDS + ARMS,

    # Legs
    "Squats": LEGS + ["abdomen"] + FEET,
    "Front Squats": LEGS + ["abdomen", "chest"],
    "Back Squats": LEGS + ["abdomen"] + SHOULDERS,
    "Bulgarian Split Squats": LEGS + ["abdomen"],
    "Lunges": LEGS + ["abdomen"],
    "Walking Lunges": LEGS + ["abdomen"],
    "Reverse Lunges": LEGS + ["abdomen"],
    "Leg Press": LEGS,
    "Leg Extensions": LEGS,
    "Leg Curls": LEGS,
    "Hamstring Curls": LEGS,
    "Calf Raises": LOWER,
    "Standing Calf Raises": LOWER,
    "Seated Calf Raises": LOWER,
    "Step-ups": LOWER + ["abdomen"],
    "Box Jumps": LOWER + ["abdomen"],
    "Jump Squats": LOWER + ["abdomen"],
    "Hip Thrusts": ["abdomen"] + LEGS,
    "Glute Bridges": ["abdomen"] + LEGS,

    # Core
    "Plank": ["abdomen"] + SHOULDERS,
    "Side Plank": ["abdomen"] + SHOULDERS,
    "Crunches": ["abdomen", "neck"],
    "Sit-ups": ["abdomen", "neck"] + LEGS,
    "Russian Twists": ["abdomen"],
    "Bicycle Crunches": ["abdomen"] + LEGS,
    "Hanging Leg Raises": ["abdomen"] + ARMS + SHOULDERS,
    "Ab Wheel Rollouts": ["abdomen"] + SHOULDERS + ARMS,
    "Mountain Climbers": ["abdomen"] + LEGS + SHOULDERS,
    "V-ups": ["abdomen"] + LEGS,
    "Leg Raises": ["abdomen"] + LEGS,
    "Cable Crunches": ["abdomen"],
    "Woodchoppers": ["abdomen"] + SHOULDERS,

    # Olympic lifts
    "Clean and Jerk": LEGS + SHOULDERS + ARMS + ["abdomen", "neck"],
    "Snatch": LEGS + SHOULDERS + ARMS + ["abdomen", "neck"],
    "Power Clean": LEGS + SHOULDERS + ARMS + ["abdomen"],
    "Hang Clean": LEGS + SHOULDERS + ARMS + ["abdomen"],

    # Cardio and conditioning
    "Running": LOWER + ["abdomen"],
    "Sprinting": LOWER + ["abdomen"],
    "Jogging": LOWER,
    "Treadmill": LOWER,
    "Cycling": LOWER,
    "Stationary Bike": LEGS,
    "Elliptical": LEGS + ARMS,
    "Rowing": ARMS + LEGS + ["abdomen"] + SHOULDERS,
    "Jump Rope": LOWER + ARMS + SHOULDERS,
    "Stair Climber": LOWER + ["abdomen"],
    "Battle Ropes": ARMS + SHOULDERS + ["abdomen", "chest"],

    # Functional
    "Burpees": LEGS + ARMS + ["chest", "abdomen"] + SHOULDERS,
    "Wall Balls": LEGS + SHOULDERS + ARMS + ["abdomen"],
    "Kettlebell Swings": LEGS + SHOULDERS + ["abdomen"] + HANDS,
    "Turkish Get-ups": ["abdomen"] + SHOULDERS + LEGS + ARMS,
    "Farmers Walk": HANDS + ARMS + SHOULDERS + ["abdomen"] + LEGS,
    "Sled Push": LEGS + SHOULDERS + ["chest", "abdomen"],
    "Sled Pull": LEGS + ARMS + SHOULDERS + ["abdomen"],
    "Box Step-ups": LOWER + ["abdomen"],
    "Medicine Ball Slams": ARMS + SHOULDERS + ["abdomen", "chest"],
}


# ============================================================================
# Sport, Workout Type and Position Tables
# ============================================================================

SPORT_BODY_PARTS: Dict[str, List[str]] = {
    # Team sports
    "Basketball": LOWER + SHOULDERS + ARMS + HANDS + ["abdomen"],
    "Soccer": LOWER + ["abdomen", "chest", "head"],
    "Football": ["head", "neck"] + SHOULDERS + LEGS + ["chest", "abdomen"] + ARMS,
    "American Football": ["head", "neck"] + SHOULDERS + LEGS + ["chest", "abdomen"] + ARMS,
    "Rugby": ["head", "neck"] + SHOULDERS + ["chest", "abdomen"] + LEGS + ARMS,
    "Hockey": LEGS + SHOULDERS + ARMS + ["chest", "abdomen"],
    "Ice Hockey": LEGS + SHOULDERS + ARMS + ["chest", "abdomen", "head"],
    "Field Hockey": LEGS + SHOULDERS + ARMS + ["abdomen"],
    "Volleyball": SHOULDERS + ARMS + HANDS + LOWER + ["abdomen"],
    "Baseball": SHOULDERS + ARMS + LEGS + HANDS + ["abdomen"],
    "Softball": SHOULDERS + ARMS + LEGS + HANDS,
    "Cricket": SHOULDERS + ARMS + LEGS + HANDS + ["abdomen"],
    "Lacrosse": ARMS + SHOULDERS + LEGS + ["abdomen", "chest"],
    "Ultimate Frisbee": ARMS + SHOULDERS + LEGS + ["abdomen"],

    # Racquet sports
    "Tennis": SHOULDERS + ARMS + HANDS + LOWER + ["abdomen"],
    "Badminton": SHOULDERS + ARMS + HANDS + LEGS,
    "Squash": SHOULDERS + ARMS + LEGS + ["abdomen"],
    "Racquetball": SHOULDERS + ARMS + LEGS,
    "Table Tennis": SHOULDERS + ARMS + HANDS + LEGS,

    # Individual sports
    "Track and Field": LOWER + ["abdomen", "chest"],
    "Marathon": LOWER + ["abdomen"],
    "Swimming": SHOULDERS + ARMS + LEGS + ["chest", "abdomen", "neck"],
    "Diving": SHOULDERS + ARMS + LEGS + ["abdomen", "neck"],
    "Cycling": LOWER + ["abdomen", "neck"] + SHOULDERS,
    "Mountain Biking": LEGS + ARMS + SHOULDERS + ["abdomen"],
    "Triathlon": LEGS + ARMS + SHOULDERS + ["chest", "abdomen"],
    "Rowing": ARMS + LEGS + ["abdomen"] + SHOULDERS + ["chest"],
    "CrossFit": LEGS + ARMS + SHOULDERS + ["chest", "abdomen"],
    "Golf": SHOULDERS + ARMS + ["abdomen"] + LEGS,
    "Rock Climbing": ARMS + HANDS + LOWER + SHOULDERS + ["abdomen"],
    "Gymnastics": ARMS + LEGS + SHOULDERS + ["abdomen"] + HANDS,
    "Surfing": ARMS + SHOULDERS + ["abdomen"] + LEGS + ["chest"],
    "Skateboarding": LOWER + ["abdomen"] + ARMS,

    # Combat sports
    "Boxing": HANDS + ARMS + SHOULDERS + LEGS + ["abdomen", "neck", "head"],
    "MMA": HANDS + ARMS + LOWER + ["head", "neck", "chest", "abdomen"],
    "Kickboxing": HANDS + ARMS + LOWER + ["abdomen"],
    "Muay Thai": HANDS + ARMS + LOWER + SHOULDERS,
    "Karate": HANDS + ARMS + LOWER,
    "Taekwondo": LOWER + HANDS + ARMS,
    "Judo": ARMS + SHOULDERS + LEGS + ["neck", "abdomen"],
    "Brazilian Jiu-Jitsu": ARMS + LEGS + ["neck", "abdomen"] + SHOULDERS,
    "Wrestling": ["head", "neck"] + ARMS + LEGS + SHOULDERS + ["abdomen"],

    # Winter sports
    "Skiing": LOWER + ["abdomen"] + ARMS,
    "Snowboarding": LOWER + ["abdomen"] + ARMS + SHOULDERS,
    "Ice Skating": LOWER + ["abdomen"],
    "Figure Skating": LOWER + ["abdomen"] + ARMS,
}

WORKOUT_TYPE_BODY_PARTS: Dict[str, List[str]] = {
    "Strength": ARMS + ["chest", "abdomen"] + LEGS + SHOULDERS,
    "Cardio": LEGS + ["chest", "abdomen"] + FEET,
    "HIIT": LEGS + ARMS + ["chest", "abdomen"] + SHOULDERS,
    "Flexibility": ["neck"] + SHOULDERS + ["abdomen"] + LEGS,
    "Yoga": ["neck"] + SHOULDERS + ["abdomen"] + LEGS + ARMS,
    "Pilates": ["abdomen"] + SHOULDERS + LEGS,
    "Plyometrics": LOWER + ["abdomen"],
    "Endurance": LEGS + ["chest", "abdomen"] + FEET,
    "Powerlifting": LEGS + ["chest"] + SHOULDERS + ARMS + ["abdomen"],
    "Bodybuilding": ["chest"] + SHOULDERS + ARMS + LEGS + ["abdomen"],
    "Calisthenics": ARMS + ["chest", "abdomen"] + SHOULDERS,
    "Circuit Training": LEGS + ARMS + ["chest", "abdomen"] + SHOULDERS,
}

POSITION_BODY_PARTS: Dict[str, List[str]] = {
    # American football
    "Quarterback": ["right-shoulder", "right-arm", "right-hand"] + LEGS + ["abdomen"],
    "Running Back": LEGS + SHOULDERS + ["abdomen", "chest"],
    "Wide Receiver": LEGS + HANDS + SHOULDERS,
    "Linebacker": ["head", "neck"] + SHOULDERS + ["chest"] + LEGS,
    "Defensive Back": LEGS + SHOULDERS + ["head", "neck"],
    "Offensive Line": ["head", "neck"] + SHOULDERS + LEGS + ["abdomen", "chest"],
    "Defensive Line": ["head", "neck"] + SHOULDERS + ARMS + ["chest"],
    "Tight End": SHOULDERS + LEGS + ["chest"] + HANDS,
    "Kicker": ["right-leg", "right-foot", "left-leg", "abdomen"],

    # Basketball
    "Point Guard": LOWER + HANDS + SHOULDERS,
    "Shooting Guard": LEGS + ["right-shoulder", "right-arm"] + HANDS,
    "Small Forward": LEGS + SHOULDERS + ARMS + ["abdomen"],
    "Power Forward": LEGS + SHOULDERS + ["chest", "abdomen"],
    "Center": LEGS + SHOULDERS + ["chest", "abdomen"] + ARMS,

    # Soccer
    "Goalkeeper": HANDS + ARMS + LEGS + SHOULDERS,
    "Defender": LEGS + ["head", "chest", "abdomen"],
    "Midfielder": LOWER + ["abdomen", "chest"],
    "Forward": LOWER + ["head", "abdomen"],
    "Striker": LOWER + ["head"],

    # Baseball
    "Pitcher": ["right-shoulder", "right-arm", "right-hand", "abdomen"] + LEGS,
    "Catcher": LEGS + HANDS + ["right-shoulder", "abdomen"],
    "Infielder": LEGS + ARMS + HANDS,
    "Outfielder": LEGS + ["right-arm", "right-shoulder", "right-hand"],

    # Tennis
    "Singles Player": ["right-shoulder", "right-arm", "right-hand"] + LEGS + ["abdomen"],
    "Doubles Player": ["right-shoulder", "right-arm", "right-hand"] + LEGS,
}


# ============================================================================
# Name Aliases
# ============================================================================

EXERCISE_ALIASES: Dict[str, str] = {
    "bench": "Bench Press",
    "squat": "Squats",
    "deadlift": "Deadlift",
    "pullup": "Pull-ups",
    "pull up": "Pull-ups",
    "pushup": "Push-ups",
    "push up": "Push-ups",
    "bicep curl": "Bicep Curls",
    "tricep dip": "Tricep Dips",
    "plank": "Plank",
    "running": "Running",
    "cycling": "Cycling",
}

SPORT_ALIASES: Dict[str, str] = {
    "running": "Track and Field",
    "track & field": "Track and Field",
    "martial arts": "MMA",
    "martial-arts": "MMA",
}


# ============================================================================
# Intensity Rules
# ============================================================================

class IntensityRule(BaseModel):
    """
    One row of the per-body-part intensity table.

    A rule matches on exactly one activity attribute (position, sport or
    exercise) and on a body part, either listed explicitly or by substring.
    Position and sport rules assign the multiplier (sport overriding
    position); exercise rules can only raise it.
    """

    model_config = ConfigDict(frozen=True)

    scope: Literal["position", "sport", "exercise"]
    match: str = Field(..., description="Position, sport or exercise name to match")
    match_contains: bool = Field(default=False, description="Match `match` as a substring")
    body_parts: List[str] = Field(default_factory=list, description="Exact body parts affected")
    body_part_contains: Optional[str] = Field(None, description="Substring selecting body parts (e.g., 'leg')")
    multiplier: float = Field(..., gt=0)

    @model_validator(mode="after")
    def validate_target(self):
        if not self.body_parts and not self.body_part_contains:
            raise ValueError("Intensity rule needs body_parts or body_part_contains")
        return self

    def matches_subject(self, value: Optional[str]) -> bool:
        if not value:
            return False
        if self.match_contains:
            return self.match.lower() in value.lower()
        return self.match == value

    def matches_part(self, body_part: str) -> bool:
        if body_part in self.body_parts:
            return True
        return bool(self.body_part_contains and self.body_part_contains in body_part)


DEFAULT_INTENSITY_RULES: List[IntensityRule] = [
    IntensityRule(scope="position", match="Pitcher", body_parts=["right-shoulder"], multiplier=1.8),
    IntensityRule(scope="position", match="Quarterback", body_parts=["right-shoulder"], multiplier=1.6),
    IntensityRule(scope="position", match="Goalkeeper", body_parts=HANDS, multiplier=1.5),
    IntensityRule(scope="position", match="Kicker", body_parts=["right-leg"], multiplier=1.7),
    IntensityRule(scope="sport", match="Boxing", body_parts=SHOULDERS, multiplier=1.5),
    IntensityRule(scope="sport", match="Soccer", body_parts=LEGS, multiplier=1.4),
    IntensityRule(scope="sport", match="Swimming", body_parts=SHOULDERS, multiplier=1.5),
    IntensityRule(scope="exercise", match="Deadlift", body_parts=["abdomen"], body_part_contains="leg", multiplier=1.6),
    IntensityRule(scope="exercise", match="Bench Press", body_parts=["chest"], multiplier=1.5),
    IntensityRule(scope="exercise", match="Squat", match_contains=True, body_part_contains="leg", multiplier=1.5),
]


# ============================================================================
# Catalog
# ============================================================================

class BodyPartCatalog(BaseModel):
    """Immutable bundle of every body-part lookup table."""

    model_config = ConfigDict(frozen=True)

    exercises: Dict[str, List[str]] = Field(default_factory=lambda: dict(EXERCISE_BODY_PARTS))
    sports: Dict[str, List[str]] = Field(default_factory=lambda: dict(SPORT_BODY_PARTS))
    workout_types: Dict[str, List[str]] = Field(default_factory=lambda: dict(WORKOUT_TYPE_BODY_PARTS))
    positions: Dict[str, List[str]] = Field(default_factory=lambda: dict(POSITION_BODY_PARTS))
    exercise_aliases: Dict[str, str] = Field(default_factory=lambda: dict(EXERCISE_ALIASES))
    sport_aliases: Dict[str, str] = Field(default_factory=lambda: dict(SPORT_ALIASES))
    intensity_rules: List[IntensityRule] = Field(default_factory=lambda: list(DEFAULT_INTENSITY_RULES))

    workout_fallback_parts: List[str] = Field(
        default_factory=lambda: ["abdomen", "chest", "right-leg", "left-leg"],
        description="Used when neither workout type nor exercises map to any part"
    )

    sports_fallback_parts: List[str] = Field(
        default_factory=lambda: ["right-leg", "left-leg", "abdomen"],
        description="Used when neither position nor sport is mapped"
    )

    @classmethod
    def from_file(cls, catalog_path: Path) -> "BodyPartCatalog":
        """
        Load catalog overrides from a JSON file.

        Tables present in the file replace the defaults wholesale.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the JSON is invalid
        """
        if not catalog_path.exists():
            raise FileNotFoundError(f"Body-part catalog not found: {catalog_path}")

        with open(catalog_path, "r") as f:
            catalog_data = json.load(f)

        try:
            return cls(**catalog_data)
        except Exception as e:
            raise ValueError(f"Invalid body-part catalog: {e}")
