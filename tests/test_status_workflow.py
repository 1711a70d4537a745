"""Tests for app.services.status_workflow."""

import pytest

from app.core.errors import InvalidTransitionError
from app.models.report import ReportStatus
from app.services.status_workflow import StatusWorkflowEngine

R, S, D = ReportStatus.REPORTED, ReportStatus.SCHEDULED, ReportStatus.RESOLVED


class TestWorkerTransitions:
    def test_scheduled_to_resolved(self) -> None:
        assert StatusWorkflowEngine.is_valid_transition(S, D)

    @pytest.mark.parametrize("status", [R, S, D])
    def test_same_status_is_noop(self, status: ReportStatus) -> None:
        assert StatusWorkflowEngine.is_valid_transition(status, status)

    @pytest.mark.parametrize("from_status,to_status", [(R, S), (R, D), (S, R), (D, S), (D, R)])
    def test_rejected(self, from_status: ReportStatus, to_status: ReportStatus) -> None:
        assert not StatusWorkflowEngine.is_valid_transition(from_status, to_status)
        with pytest.raises(InvalidTransitionError, match="Invalid status transition"):
            StatusWorkflowEngine.check_transition(from_status, to_status)

    def test_allowed_transitions(self) -> None:
        assert StatusWorkflowEngine.get_allowed_transitions(S) == ["resolved"]
        assert StatusWorkflowEngine.get_allowed_transitions(D) == []


class TestAssignable:
    @pytest.mark.parametrize("status", [R, S])
    def test_assignable(self, status: ReportStatus) -> None:
        StatusWorkflowEngine.check_assignable(status)

    def test_resolved_not_assignable(self) -> None:
        with pytest.raises(InvalidTransitionError):
            StatusWorkflowEngine.check_assignable(D)


def test_history_entry() -> None:
    entry = StatusWorkflowEngine.create_status_history_entry(None, R, "alice", note="Report created")
    assert entry["from"] == ""
    assert entry["to"] == "reported"
    assert entry["changed_by"] == "alice"
    assert entry["note"] == "Report created"
    assert entry["timestamp"].tzinfo is not None
