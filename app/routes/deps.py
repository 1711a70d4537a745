"""
Shared FastAPI dependencies.
"""

from typing import Optional

from fastapi import Header

from app.models.user import Principal
from app.services.identity_provider import get_identity_provider


def get_current_principal(authorization: Optional[str] = Header(None)) -> Principal:
    """
    Validate the bearer token on the request.

    Raises MissingCredential / MalformedCredential / InvalidOrExpiredCredential,
    rendered as 401 by the app-level handlers.
    """
    return get_identity_provider().validate(authorization)
