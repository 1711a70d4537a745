"""
Team models. Teams are created from seed data; their availability only
changes as a side effect of report transitions.
"""

from enum import Enum

from pydantic import BaseModel


class TeamAvailability(str, Enum):
    AVAILABLE = "available"
    WORKING = "working"


class TeamResponse(BaseModel):
    name: str
    availability: TeamAvailability
