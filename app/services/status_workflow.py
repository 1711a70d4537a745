"""
Status Workflow Engine - strict report state machine.

DESIGN PRINCIPLES:
- No skipping states
- No backward transitions
- All transitions logged in status_history
- Invalid transitions rejected programmatically
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.core.errors import InvalidTransitionError
from app.models.report import ReportStatus


class StatusWorkflowEngine:
    """
    State machine for report status.

    REPORTED → SCHEDULED happens only through team assignment.
    SCHEDULED → RESOLVED happens only through a worker status update.
    RESOLVED is terminal.
    """

    # Transitions a worker may request: {from_status: [to_status, ...]}
    WORKER_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.REPORTED: [],
        ReportStatus.SCHEDULED: [ReportStatus.RESOLVED],
        ReportStatus.RESOLVED: [],
    }

    # Statuses from which a manager may (re)assign a team
    ASSIGNABLE: List[ReportStatus] = [ReportStatus.REPORTED, ReportStatus.SCHEDULED]

    TERMINAL = ReportStatus.RESOLVED

    @classmethod
    def is_valid_transition(cls, from_status: ReportStatus, to_status: ReportStatus) -> bool:
        """
        Check if a worker status update is valid.

        Same status is always valid (no-op).
        """
        if from_status == to_status:
            return True
        return to_status in cls.WORKER_TRANSITIONS.get(from_status, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: ReportStatus) -> List[str]:
        return [status.value for status in cls.WORKER_TRANSITIONS.get(current_status, [])]

    @classmethod
    def check_transition(cls, current_status: ReportStatus, new_status: ReportStatus) -> None:
        """
        Raises:
            InvalidTransitionError: If the worker may not move current_status to new_status
        """
        if not cls.is_valid_transition(current_status, new_status):
            allowed = cls.get_allowed_transitions(current_status)
            raise InvalidTransitionError(
                f"Invalid status transition: {current_status.value} → {new_status.value}. "
                f"Allowed transitions from {current_status.value}: {allowed}"
            )

    @classmethod
    def check_assignable(cls, current_status: ReportStatus) -> None:
        if current_status not in cls.ASSIGNABLE:
            raise InvalidTransitionError(
                f"Cannot assign a team to a report in status {current_status.value}"
            )

    @classmethod
    def create_status_history_entry(
        cls,
        from_status: Optional[ReportStatus],
        to_status: ReportStatus,
        changed_by: str,
        note: Optional[str] = None
    ) -> Dict:
        """
        Create a status history entry for audit trail.
        """
        return {
            "from": from_status.value if from_status else "",
            "to": to_status.value,
            "changed_by": changed_by,
            "timestamp": datetime.now(timezone.utc),
            "note": note or ""
        }
