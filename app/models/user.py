"""
User models for authentication and user management.
"""

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field, field_validator

from app.utils.firestore_helpers import validate_document_id


class Role(str, Enum):
    USER = "user"          # Citizen reporting defects
    WORKER = "worker"      # Repair crew member
    MANAGER = "manager"    # Assigns teams, removes reports


class Principal(NamedTuple):
    """Claims carried by a validated credential."""
    subject: str
    role: Role


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=72)
    role: Role

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return validate_document_id(value)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return validate_document_id(value)


class TokenResponse(BaseModel):
    token: str
    role: Role


class UserResponse(BaseModel):
    username: str
    role: Role
