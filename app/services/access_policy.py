"""
Access Policy - which role may perform which operation.

Pure lookup, no I/O. Anything not listed in POLICY is denied.
"""

from enum import Enum
from typing import Dict, FrozenSet
import logging

from app.core.errors import AuthorizationError
from app.models.user import Role

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    CREATE_REPORT = "create_report"
    LIST_REPORTS = "list_reports"
    LIST_TEAMS = "list_teams"
    ASSIGN_TEAM = "assign_team"
    UPDATE_STATUS = "update_status"
    DELETE_REPORT = "delete_report"


POLICY: Dict[Operation, FrozenSet[Role]] = {
    Operation.CREATE_REPORT: frozenset({Role.USER}),
    Operation.LIST_REPORTS: frozenset({Role.USER, Role.WORKER, Role.MANAGER}),
    Operation.LIST_TEAMS: frozenset({Role.MANAGER}),
    Operation.ASSIGN_TEAM: frozenset({Role.MANAGER}),
    Operation.UPDATE_STATUS: frozenset({Role.WORKER}),
    Operation.DELETE_REPORT: frozenset({Role.MANAGER}),
}


def is_allowed(role: Role, operation: Operation) -> bool:
    return role in POLICY.get(operation, frozenset())


def authorize(role: Role, operation: Operation) -> None:
    """
    Raises:
        AuthorizationError: If role may not perform operation
    """
    if not is_allowed(role, operation):
        logger.warning(f"Denied {operation.value} for role '{role.value}'")
        raise AuthorizationError()
