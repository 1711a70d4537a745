"""
Pydantic models for citizen reports.
These models handle validation for report submission and responses.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.utils.firestore_helpers import validate_document_id


class ReportStatus(str, Enum):
    """
    Report lifecycle:
    REPORTED → SCHEDULED → RESOLVED
    """
    REPORTED = "reported"      # Submitted by a citizen, no team yet
    SCHEDULED = "scheduled"    # A team has been assigned for repair
    RESOLVED = "resolved"      # Repaired; terminal


class ReportCreate(BaseModel):
    """
    Model for creating a new report (incoming POST request).
    These are the fields citizens provide when submitting a report.
    """
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        validation_alias=AliasChoices("category", "type"),
        description="Free-form defect tag, e.g. pothole",
    )
    description: str = Field(..., min_length=1, max_length=2000, description="What the citizen observed")
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")

    class Config:
        json_schema_extra = {
            "example": {
                "category": "pothole",
                "description": "large crack",
                "lat": 39.0,
                "lng": 35.0,
            }
        }
        extra = "ignore"


class AssignTeamRequest(BaseModel):
    team: str = Field(..., min_length=1, max_length=100, description="Name of the team to assign")

    @field_validator("team")
    @classmethod
    def check_team(cls, value: str) -> str:
        return validate_document_id(value)


class StatusUpdateRequest(BaseModel):
    status: ReportStatus = Field(..., description="New status value")
    note: Optional[str] = Field(None, max_length=500, description="Optional note for the status history")


class GeoJSONPoint(BaseModel):
    type: str = "Point"
    coordinates: List[float] = Field(..., description="[longitude, latitude]")


class ReportResponse(BaseModel):
    """
    Model for report responses (what API returns).
    """
    id: str = Field(..., description="Firestore document ID")
    category: str
    description: str
    location: GeoJSONPoint
    status: ReportStatus
    assigned_team: Optional[str] = None
    reported_by: Optional[str] = None
    status_history: List[Dict] = Field(default_factory=list, description="Status transition history")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str
    report: Optional[ReportResponse] = None
