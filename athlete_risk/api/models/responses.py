"""
API Response Models

Pydantic models for API responses.
"""

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from athlete_risk.schemas import (
    Activity,
    Athlete,
    BodyPartWorkload,
    InjuryRiskSnapshot,
    Recommendation,
)


class AthleteListResponse(BaseModel):
    """Response for GET /api/athletes."""

    athletes: List[Athlete] = Field(..., description="Registered athletes")
    count: int = Field(..., description="Number of athletes")


class ActivityListResponse(BaseModel):
    """Response for GET /api/athletes/{athlete_id}/activities."""

    activities: List[Activity] = Field(..., description="Activities, newest first")
    count: int = Field(..., description="Number of activities returned")


class WorkloadHistoryResponse(BaseModel):
    """Response for GET /api/athletes/{athlete_id}/body-part-workloads."""

    workloads: List[BodyPartWorkload] = Field(..., description="Rows, newest first")
    count: int = Field(..., description="Number of rows returned")


class RiskHistoryResponse(BaseModel):
    """Response for GET /api/athletes/{athlete_id}/injury-risk-history."""

    snapshots: List[InjuryRiskSnapshot] = Field(..., description="Snapshots, newest first")
    count: int = Field(..., description="Number of snapshots returned")


class BodyPartRecommendationsResponse(BaseModel):
    """Response for GET /api/athletes/{athlete_id}/body-parts/{body_part}/recommendations."""

    athlete_id: str
    body_part: str
    recommendations: List[Recommendation] = Field(..., description="Advice in priority order")


class RecoveryRunResponse(BaseModel):
    """Response for POST /api/recovery/daily-update."""

    as_of_date: dt.date = Field(..., description="Day the decayed rows were written for")
    updated_rows: int = Field(..., description="Number of body-part rows written")
    message: str = Field(..., description="Summary")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional details")
