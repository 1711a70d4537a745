"""
Report endpoints - submission, listing and lifecycle transitions.

Handlers are plain functions (run in the threadpool) because the
Firestore client is blocking.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

from app.models.report import (
    AssignTeamRequest,
    MessageResponse,
    ReportCreate,
    ReportResponse,
    ReportStatus,
    StatusUpdateRequest,
)
from app.models.user import Principal
from app.routes.deps import get_current_principal
from app.services.lifecycle import get_lifecycle_coordinator

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def submit_report(report: ReportCreate, principal: Principal = Depends(get_current_principal)):
    """
    Submit a new defect report (role: user).

    The report starts in status reported with no team.
    """
    created = get_lifecycle_coordinator().create_report(principal, report)
    return MessageResponse(message="Report added", report=created)


@router.get("", response_model=List[ReportResponse])
def get_reports(
    status: Optional[ReportStatus] = None,
    principal: Principal = Depends(get_current_principal),
):
    return get_lifecycle_coordinator().list_reports(principal, status=status)


@router.put("/{report_id}/assign", response_model=MessageResponse)
def assign_team(
    report_id: str,
    request: AssignTeamRequest,
    principal: Principal = Depends(get_current_principal),
):
    """
    Assign a repair team (role: manager).

    Report → scheduled, team → working, in one transaction.
    """
    report = get_lifecycle_coordinator().assign_team(principal, report_id, request.team)
    return MessageResponse(message="Team assigned", report=report)


@router.put("/{report_id}/status", response_model=MessageResponse)
def update_status(
    report_id: str,
    request: StatusUpdateRequest,
    principal: Principal = Depends(get_current_principal),
):
    """
    Change report status (role: worker).

    Only scheduled → resolved is accepted; resolving frees the team.
    """
    report = get_lifecycle_coordinator().update_status(
        principal, report_id, request.status, note=request.note
    )
    return MessageResponse(message="Status updated", report=report)


@router.delete("/{report_id}", response_model=MessageResponse)
def delete_report(report_id: str, principal: Principal = Depends(get_current_principal)):
    get_lifecycle_coordinator().delete_report(principal, report_id)
    return MessageResponse(message="Deleted")
