"""Tests for app.services.access_policy: the role and operation table."""

import pytest

from app.core.errors import AuthorizationError
from app.models.user import Role
from app.services.access_policy import Operation, authorize, is_allowed

ALLOWED = {
    (Role.USER, Operation.CREATE_REPORT),
    (Role.USER, Operation.LIST_REPORTS),
    (Role.WORKER, Operation.LIST_REPORTS),
    (Role.WORKER, Operation.UPDATE_STATUS),
    (Role.MANAGER, Operation.LIST_REPORTS),
    (Role.MANAGER, Operation.LIST_TEAMS),
    (Role.MANAGER, Operation.ASSIGN_TEAM),
    (Role.MANAGER, Operation.DELETE_REPORT),
}


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("operation", list(Operation))
def test_table(role: Role, operation: Operation) -> None:
    assert is_allowed(role, operation) == ((role, operation) in ALLOWED)


@pytest.mark.parametrize(
    "operation", [Operation.ASSIGN_TEAM, Operation.UPDATE_STATUS, Operation.DELETE_REPORT]
)
def test_user_cannot_mutate(operation: Operation) -> None:
    with pytest.raises(AuthorizationError) as exc_info:
        authorize(Role.USER, operation)
    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Forbidden"


def test_authorize_allowed_returns_none() -> None:
    assert authorize(Role.WORKER, Operation.UPDATE_STATUS) is None
