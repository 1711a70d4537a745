"""
Team endpoints - read-only; availability changes only through report transitions.
"""

from typing import List

from fastapi import APIRouter, Depends

from app.models.team import TeamResponse
from app.models.user import Principal
from app.routes.deps import get_current_principal
from app.services.lifecycle import get_lifecycle_coordinator

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.get("", response_model=List[TeamResponse])
def get_teams(principal: Principal = Depends(get_current_principal)):
    """List teams and their availability (role: manager)."""
    return get_lifecycle_coordinator().list_teams(principal)
