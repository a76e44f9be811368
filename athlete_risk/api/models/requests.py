"""
API Request Models

Pydantic models for API request validation. Activity bodies are taken as raw
objects and validated by the service so malformed payloads surface as 400s.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from athlete_risk.schemas import AthleteStatus, BodyPart, InjuryStatus


class AthleteUpdateRequest(BaseModel):
    """Request model for partial athlete updates."""

    name: Optional[str] = Field(None, min_length=1, description="Display name")
    email: Optional[str] = Field(None, description="Contact email")
    age: Optional[int] = Field(None, ge=5, le=100, description="Age in years")
    height: Optional[float] = Field(None, gt=0, description="Height in cm")
    weight: Optional[float] = Field(None, gt=0, description="Body weight in kg")
    primary_sport: Optional[str] = Field(None, description="Main sport")
    position: Optional[str] = Field(None, description="Playing position")
    team: Optional[str] = Field(None, description="Team or squad")
    status: Optional[AthleteStatus] = Field(None, description="Roster status")


class InjuryCreateRequest(BaseModel):
    """Request model for recording an injury."""

    body_part: BodyPart = Field(..., description="Injured body part")
    status: InjuryStatus = Field(default=InjuryStatus.ACTIVE, description="Injury status")
    injury_type: Optional[str] = Field(None, description="Injury type (e.g., 'strain')")
    occurred_on: Optional[dt.date] = Field(None, description="Date of injury (default: today)")
    notes: Optional[str] = Field(None, description="Notes")


class RecoveryRunRequest(BaseModel):
    """Request model for the daily recovery pass."""

    as_of_date: Optional[dt.date] = Field(None, description="Day to decay to (default: today)")
