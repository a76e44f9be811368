"""
Body-part mapping module.

Resolves which body parts an activity loads and how strongly each of them is
loaded, using the lookup tables of a BodyPartCatalog.
"""

import logging
from typing import List, Optional, Set, Union

from athlete_risk.catalog import BodyPartCatalog
from athlete_risk.schemas import ExerciseEntry, SportsActivity, WorkoutActivity

logger = logging.getLogger(__name__)

AnyActivity = Union[WorkoutActivity, SportsActivity]


class BodyPartMapper:
    """
    Maps activities to affected body parts.

    - Workouts: workout-type default parts ∪ parts of every logged exercise
    - Sports: position parts, else sport parts, else the sports fallback set

    Unknown exercises, sports and positions are mapping gaps: logged and
    treated as contributing no parts. Lookups are deterministic.
    """

    def __init__(self, catalog: Optional[BodyPartCatalog] = None):
        """
        Initialize mapper with a catalog.

        Args:
            catalog: Lookup tables (defaults if None)
        """
        self.catalog = catalog or BodyPartCatalog()
        self._exercise_index = {name.lower(): name for name in self.catalog.exercises}
        self._sport_index = {name.lower(): name for name in self.catalog.sports}

    # ===== NAME NORMALIZATION =====

    def normalize_exercise_name(self, exercise: Optional[str]) -> Optional[str]:
        """Resolve aliases and case variations to the catalog's exercise name."""
        if not exercise:
            return None
        key = exercise.strip().lower()
        if key in self.catalog.exercise_aliases:
            return self.catalog.exercise_aliases[key]
        return self._exercise_index.get(key, exercise.strip())

    def normalize_sport_name(self, sport: Optional[str]) -> Optional[str]:
        """Resolve aliases and case variations to the catalog's sport name."""
        if not sport:
            return None
        key = sport.strip().lower()
        if key in self.catalog.sport_aliases:
            return self.catalog.sport_aliases[key]
        return self._sport_index.get(key, sport.strip())

    # ===== PART LOOKUPS =====

    def parts_for_exercise(self, exercise: Union[ExerciseEntry, str]) -> List[str]:
        name = exercise.exercise if isinstance(exercise, ExerciseEntry) else exercise
        normalized = self.normalize_exercise_name(name)
        parts = self.catalog.exercises.get(normalized) if normalized else None
        if parts is None:
            logger.warning("No body-part mapping for exercise '%s'", name)
            return []
        return list(parts)

    def affected_parts(self, activity: AnyActivity) -> Set[str]:
        """
        Determine the body parts loaded by an activity.

        Explicit affected_body_parts on the activity take precedence.

        Args:
            activity: Workout or sports activity

        Returns:
            Set of body part identifiers (never empty)
        """
        if activity.affected_body_parts:
            return set(activity.affected_body_parts)

        if isinstance(activity, WorkoutActivity):
            return self._workout_parts(activity)
        return self._sports_parts(activity)

    def _workout_parts(self, activity: WorkoutActivity) -> Set[str]:
        parts: Set[str] = set()

        if activity.workout_type:
            type_parts = self.catalog.workout_types.get(activity.workout_type.strip())
            if type_parts is None:
                logger.warning("No body-part mapping for workout type '%s'", activity.workout_type)
            else:
                parts.update(type_parts)

        for exercise in activity.exercises:
            parts.update(self.parts_for_exercise(exercise))

        if not parts:
            logger.info(
                "No body parts detected for workout of athlete %s, using fallback set",
                activity.athlete_id,
            )
            parts.update(self.catalog.workout_fallback_parts)
        return parts

    def _sports_parts(self, activity: SportsActivity) -> Set[str]:
        position = activity.position.strip() if activity.position else None
        if position and position in self.catalog.positions:
            return set(self.catalog.positions[position])

        sport = self.normalize_sport_name(activity.sport)
        if sport and sport in self.catalog.sports:
            return set(self.catalog.sports[sport])

        logger.info(
            "No body-part mapping for sport '%s' / position '%s', using fallback set",
            activity.sport,
            activity.position,
        )
        return set(self.catalog.sports_fallback_parts)

    # ===== INTENSITY =====

    def intensity_multiplier(
        self,
        body_part: str,
        activity: AnyActivity,
        exercise: Optional[ExerciseEntry] = None,
    ) -> float:
        """
        Share of an activity's stress absorbed by one body part.

        Position rules assign first, sport rules override them, and exercise
        rules raise the multiplier to their value when higher. When `exercise`
        is given only that exercise is considered.

        Args:
            body_part: Body part being scored
            activity: The activity providing position/sport/exercise context
            exercise: Restrict exercise rules to this single exercise

        Returns:
            Multiplier (1.0 when no rule applies)
        """
        multiplier = 1.0
        rules = self.catalog.intensity_rules

        if isinstance(activity, SportsActivity):
            position = activity.position.strip() if activity.position else None
            sport = self.normalize_sport_name(activity.sport)
            for scope, subject in (("position", position), ("sport", sport)):
                for rule in rules:
                    if rule.scope == scope and rule.matches_subject(subject) and rule.matches_part(body_part):
                        multiplier = rule.multiplier
                        break
            return multiplier

        exercises = [exercise] if exercise is not None else activity.exercises
        for entry in exercises:
            name = self.normalize_exercise_name(entry.exercise)
            for rule in rules:
                if rule.scope == "exercise" and rule.matches_subject(name) and rule.matches_part(body_part):
                    multiplier = max(multiplier, rule.multiplier)
                    break
        return multiplier
