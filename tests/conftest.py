"""
Shared fixtures: a SQLite-backed store under tmp_path and the wired service.
"""

import json
from pathlib import Path

import pytest

from athlete_risk.config import EngineConfig
from athlete_risk.database import SqlAlchemyStore
from athlete_risk.schemas import Athlete
from athlete_risk.service import InjuryRiskService

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    with open(FIXTURES / name) as f:
        return json.load(f)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'athlete_risk_test.db'}"


@pytest.fixture
def store(database_url):
    """Fresh SQLite store with all tables created."""
    return SqlAlchemyStore.from_url(database_url, timeout_seconds=5)


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def service(store, config):
    return InjuryRiskService(store, config)


@pytest.fixture
def athlete(service):
    """Registered midfielder used by most service tests."""
    return service.create_athlete(Athlete(
        athlete_id="athlete_1",
        name="Jordan Lee",
        primary_sport="Soccer",
        position="Midfielder",
    ))


@pytest.fixture
def workout_payload():
    return load_fixture("workout_strength.json")


@pytest.fixture
def sports_payload():
    return load_fixture("sports_soccer.json")


@pytest.fixture
def cardio_payload():
    return load_fixture("workout_cardio.json")
