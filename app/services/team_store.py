"""
Team Store - authoritative record of teams and their availability.

Availability is written only through set_availability(), and only by
the lifecycle coordinator. ensure() is for seeding.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from app.config.firebase import get_db
from app.core.errors import ValidationError
from app.models.team import TeamAvailability
from app.utils.firestore_helpers import is_valid_document_id, store_errors, validate_document_id

logger = logging.getLogger(__name__)

TEAMS_COLLECTION = "teams"


class TeamStore:
    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def _ref(self, name: str):
        return self.db.collection(TEAMS_COLLECTION).document(name)

    def get(self, name: str, transaction=None) -> Optional[Dict]:
        if not is_valid_document_id(name):
            return None
        with store_errors("team read"):
            doc = self._ref(name).get(transaction=transaction)
        if not doc.exists:
            return None
        data = doc.to_dict()
        data["name"] = doc.id
        return data

    def list(self) -> List[Dict]:
        teams = []
        with store_errors("team list"):
            for doc in self.db.collection(TEAMS_COLLECTION).stream():
                data = doc.to_dict()
                data["name"] = doc.id
                teams.append(data)
        teams.sort(key=lambda t: t["name"])
        return teams

    def set_availability(self, transaction, name: str, availability: TeamAvailability) -> None:
        transaction.update(
            self._ref(name),
            {"availability": availability.value, "updated_at": datetime.now(timezone.utc)},
        )

    def ensure(self, names: Iterable[str]) -> List[str]:
        """
        Create missing teams as available. Existing teams are left untouched.

        Returns:
            Names of the teams that were created

        Raises:
            ValidationError: If a name cannot be used as a team id
        """
        names = list(names)
        for name in names:
            try:
                validate_document_id(name)
            except ValueError as e:
                raise ValidationError(f"Invalid team name '{name}': {e}") from e

        created = []
        with store_errors("team seed"):
            for name in names:
                ref = self._ref(name)
                if ref.get().exists:
                    continue
                ref.set({
                    "availability": TeamAvailability.AVAILABLE.value,
                    "updated_at": datetime.now(timezone.utc),
                })
                created.append(name)
        if created:
            logger.info(f"Seeded teams: {', '.join(created)}")
        return created
