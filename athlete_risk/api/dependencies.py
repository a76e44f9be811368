"""
FastAPI dependencies.

The service is built once per process from environment settings. Tests
replace it through `app.dependency_overrides[get_service]`.
"""

from functools import lru_cache

from athlete_risk.config import Settings
from athlete_risk.service import InjuryRiskService


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=1)
def _build_service() -> InjuryRiskService:
    return InjuryRiskService.from_settings(get_settings())


def get_service() -> InjuryRiskService:
    """Injury-risk service dependency."""
    return _build_service()
