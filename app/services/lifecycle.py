"""
Lifecycle Coordinator - role-gated report transitions.

The coordinator is the only writer of report status, report assignment
and team availability. Each operation:
1. Authorizes the caller's role (before touching the store, so a denied
   caller learns nothing about the report)
2. Reads the report and team(s) inside one transaction
3. Validates the transition with StatusWorkflowEngine
4. Writes report and team changes in the same transaction

Invariants kept by every committed transaction:
- status is one of reported / scheduled / resolved
- assigned_team is set iff status is scheduled or resolved
- a team is working iff it is assigned to a scheduled report
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from app.config.firebase import atomic, get_db
from app.core.errors import NotFoundError, TeamUnavailableError
from app.models.report import ReportCreate, ReportResponse, ReportStatus
from app.models.team import TeamAvailability, TeamResponse
from app.models.user import Principal
from app.services.access_policy import Operation, authorize
from app.services.report_store import ReportStore
from app.services.status_workflow import StatusWorkflowEngine
from app.services.team_store import TeamStore
from app.utils.firestore_helpers import store_errors
from app.utils.geo import to_geojson, to_geopoint

logger = logging.getLogger(__name__)


def to_report_response(data: Dict) -> ReportResponse:
    return ReportResponse(
        id=data["id"],
        category=data["category"],
        description=data["description"],
        location=to_geojson(data["location"]),
        status=ReportStatus(data["status"]),
        assigned_team=data.get("assigned_team"),
        reported_by=data.get("reported_by"),
        status_history=data.get("status_history", []),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
    )


class LifecycleCoordinator:
    def __init__(self, db=None):
        self.db = db if db is not None else get_db()
        self.reports = ReportStore(self.db)
        self.teams = TeamStore(self.db)
        self.workflow = StatusWorkflowEngine()

    def _get_report(self, report_id: str, transaction) -> Dict:
        report = self.reports.get(report_id, transaction=transaction)
        if report is None:
            raise NotFoundError(f"Report {report_id} not found")
        return report

    def _get_team(self, name: str, transaction) -> Dict:
        team = self.teams.get(name, transaction=transaction)
        if team is None:
            raise NotFoundError(f"Team {name} not found")
        return team

    def create_report(self, principal: Principal, report_data: ReportCreate) -> ReportResponse:
        """
        Store a new report in status reported with no team.
        """
        authorize(principal.role, Operation.CREATE_REPORT)

        ref = self.reports.new_ref()
        now = datetime.now(timezone.utc)
        initial_status = ReportStatus.REPORTED
        report = {
            "category": report_data.category,
            "description": report_data.description,
            "location": to_geopoint(report_data.lat, report_data.lng),
            "status": initial_status.value,
            "assigned_team": None,
            "reported_by": principal.subject,
            "status_history": [self.workflow.create_status_history_entry(
                from_status=None,
                to_status=initial_status,
                changed_by=principal.subject,
                note="Report created"
            )],
            "created_at": now,
            "updated_at": now,
        }

        with store_errors("report create"):
            atomic(self.db, lambda transaction: self.reports.create(transaction, ref, report))

        logger.info(f"Report {ref.id} created by {principal.subject} ({report_data.category})")
        report["id"] = ref.id
        return to_report_response(report)

    def list_reports(self, principal: Principal, status: Optional[ReportStatus] = None) -> List[ReportResponse]:
        authorize(principal.role, Operation.LIST_REPORTS)
        return [to_report_response(r) for r in self.reports.list(status=status)]

    def list_teams(self, principal: Principal) -> List[TeamResponse]:
        authorize(principal.role, Operation.LIST_TEAMS)
        return [
            TeamResponse(name=t["name"], availability=TeamAvailability(t["availability"]))
            for t in self.teams.list()
        ]

    def assign_team(self, principal: Principal, report_id: str, team_name: str) -> ReportResponse:
        """
        Schedule a report for repair by a team.

        Report becomes scheduled with assigned_team=team_name and the team
        becomes working. Re-assigning a scheduled report frees its previous
        team. Assigning the team it already has is a no-op.

        Raises:
            AuthorizationError: Caller is not a manager
            NotFoundError: Report or team missing
            InvalidTransitionError: Report already resolved
            TeamUnavailableError: Team is working on another report
        """
        authorize(principal.role, Operation.ASSIGN_TEAM)

        def _assign(transaction) -> Dict:
            report = self._get_report(report_id, transaction)
            team = self._get_team(team_name, transaction)
            current_status = ReportStatus(report["status"])
            self.workflow.check_assignable(current_status)

            previous_team = report.get("assigned_team")
            if previous_team == team_name:
                return report
            if team.get("availability") == TeamAvailability.WORKING.value:
                raise TeamUnavailableError(f"Team {team_name} is already working on another report")

            release_previous = (
                previous_team is not None
                and self.teams.get(previous_team, transaction=transaction) is not None
            )

            # Reads done, writes below
            note = f"Reassigned from {previous_team} to {team_name}" if previous_team else f"Assigned to {team_name}"
            history = report.get("status_history", []) + [self.workflow.create_status_history_entry(
                from_status=current_status,
                to_status=ReportStatus.SCHEDULED,
                changed_by=principal.subject,
                note=note
            )]
            fields = {
                "status": ReportStatus.SCHEDULED.value,
                "assigned_team": team_name,
                "status_history": history,
                "updated_at": datetime.now(timezone.utc),
            }
            self.reports.update(transaction, report_id, fields)
            self.teams.set_availability(transaction, team_name, TeamAvailability.WORKING)
            if release_previous:
                self.teams.set_availability(transaction, previous_team, TeamAvailability.AVAILABLE)

            report.update(fields)
            return report

        with store_errors("team assignment"):
            report = atomic(self.db, _assign)

        logger.info(f"Report {report_id} assigned to team {team_name} by {principal.subject}")
        return to_report_response(report)

    def update_status(
        self,
        principal: Principal,
        report_id: str,
        new_status: ReportStatus,
        note: Optional[str] = None
    ) -> ReportResponse:
        """
        Worker status update.

        Moving to the terminal status frees the report's assigned team in
        the same transaction. Any other status leaves teams untouched.

        Raises:
            AuthorizationError: Caller is not a worker
            NotFoundError: Report missing
            InvalidTransitionError: Not a forward transition
        """
        authorize(principal.role, Operation.UPDATE_STATUS)

        def _update(transaction) -> Dict:
            report = self._get_report(report_id, transaction)
            current_status = ReportStatus(report["status"])
            self.workflow.check_transition(current_status, new_status)
            if current_status == new_status:
                return report

            # Team to free is read before the status write
            team_name = report.get("assigned_team")
            release_team = (
                new_status == self.workflow.TERMINAL
                and team_name is not None
                and self.teams.get(team_name, transaction=transaction) is not None
            )

            history = report.get("status_history", []) + [self.workflow.create_status_history_entry(
                from_status=current_status,
                to_status=new_status,
                changed_by=principal.subject,
                note=note
            )]
            fields = {
                "status": new_status.value,
                "status_history": history,
                "updated_at": datetime.now(timezone.utc),
            }
            self.reports.update(transaction, report_id, fields)
            if release_team:
                self.teams.set_availability(transaction, team_name, TeamAvailability.AVAILABLE)

            report.update(fields)
            return report

        with store_errors("status update"):
            report = atomic(self.db, _update)

        logger.info(f"Report {report_id} status → {new_status.value} by {principal.subject}")
        return to_report_response(report)

    def delete_report(self, principal: Principal, report_id: str) -> None:
        """
        Permanently remove a report. A scheduled report's team is freed.

        Raises:
            AuthorizationError: Caller is not a manager
            NotFoundError: Report missing
        """
        authorize(principal.role, Operation.DELETE_REPORT)

        def _delete(transaction) -> Optional[str]:
            report = self._get_report(report_id, transaction)
            team_name = report.get("assigned_team")
            release_team = (
                report["status"] == ReportStatus.SCHEDULED.value
                and team_name is not None
                and self.teams.get(team_name, transaction=transaction) is not None
            )

            self.reports.delete(transaction, report_id)
            if release_team:
                self.teams.set_availability(transaction, team_name, TeamAvailability.AVAILABLE)
                return team_name
            return None

        with store_errors("report delete"):
            released = atomic(self.db, _delete)

        logger.info(
            f"Report {report_id} deleted by {principal.subject}"
            + (f", team {released} released" if released else "")
        )


# Global service instance (singleton pattern)
_coordinator = None


def get_lifecycle_coordinator() -> LifecycleCoordinator:
    """
    Get or create LifecycleCoordinator singleton instance.
    """
    global _coordinator
    if _coordinator is None:
        _coordinator = LifecycleCoordinator()
    return _coordinator
