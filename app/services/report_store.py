"""
Report Store - authoritative record of reports and their status.

Writes take a Firestore transaction; only the lifecycle coordinator
calls them, inside app.config.firebase.atomic().
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.config.firebase import get_db
from app.models.report import ReportStatus
from app.utils.firestore_helpers import is_valid_document_id, store_errors, where_filter

logger = logging.getLogger(__name__)

REPORTS_COLLECTION = "reports"


class ReportStore:
    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def _ref(self, report_id: str):
        return self.db.collection(REPORTS_COLLECTION).document(report_id)

    def new_ref(self):
        """Reference for a report that does not exist yet (auto id)."""
        return self.db.collection(REPORTS_COLLECTION).document()

    def get(self, report_id: str, transaction=None) -> Optional[Dict]:
        if not is_valid_document_id(report_id):
            return None
        with store_errors("report read"):
            doc = self._ref(report_id).get(transaction=transaction)
        if not doc.exists:
            return None
        data = doc.to_dict()
        data["id"] = doc.id
        return data

    def create(self, transaction, ref, data: Dict) -> None:
        transaction.create(ref, data)

    def update(self, transaction, report_id: str, fields: Dict) -> None:
        transaction.update(self._ref(report_id), fields)

    def delete(self, transaction, report_id: str) -> None:
        transaction.delete(self._ref(report_id))

    def list(self, status: Optional[ReportStatus] = None) -> List[Dict]:
        """
        Fetch reports, oldest first.

        Args:
            status: Optional status filter
        """
        query = self.db.collection(REPORTS_COLLECTION)
        if status is not None:
            query = where_filter(query, "status", "==", status.value)

        reports = []
        with store_errors("report list"):
            for doc in query.stream():
                data = doc.to_dict()
                data["id"] = doc.id
                reports.append(data)

        epoch = datetime.min.replace(tzinfo=timezone.utc)
        reports.sort(key=lambda r: r.get("created_at") or epoch)
        return reports
