"""
Exception hierarchy for the injury-risk engine.

Computation code (workload, body-part mapping, risk scoring) never raises
these for bad field values; it degrades to neutral defaults instead. They
surface at the validation and persistence boundaries.
"""


class RiskEngineError(Exception):
    """Base class for engine errors."""


class ActivityValidationError(RiskEngineError, ValueError):
    """Activity payload rejected before any computation."""


class PersistenceError(RiskEngineError):
    """A read or write against the record store failed."""


class AthleteNotFoundError(RiskEngineError, LookupError):
    def __init__(self, athlete_id: str):
        super().__init__(f"Athlete '{athlete_id}' not found")
        self.athlete_id = athlete_id


class ActivityNotFoundError(RiskEngineError, LookupError):
    def __init__(self, activity_id: int):
        super().__init__(f"Activity {activity_id} not found")
        self.activity_id = activity_id


class InjuryNotFoundError(RiskEngineError, LookupError):
    def __init__(self, injury_id: int):
        super().__init__(f"Injury record {injury_id} not found")
        self.injury_id = injury_id


class AthleteExistsError(RiskEngineError):
    def __init__(self, athlete_id: str):
        super().__init__(f"Athlete '{athlete_id}' already exists")
        self.athlete_id = athlete_id
