"""
User Service - Manage users in Firestore.

Users are keyed by username, so uniqueness is enforced by the document
id itself.
"""

from datetime import datetime, timezone
from typing import Dict, Optional
import logging

from google.api_core.exceptions import AlreadyExists

from app.config.firebase import get_db
from app.core.errors import ConflictError, ValidationError
from app.models.user import Role
from app.utils.firestore_helpers import is_valid_document_id, store_errors

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class UserService:
    """
    Service for user management in Firestore.
    """

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def get_user(self, username: str) -> Optional[Dict]:
        """
        Get user by username.

        Returns:
            User dict (including password_hash) or None if not found
        """
        if not is_valid_document_id(username):
            return None
        with store_errors("user read"):
            doc = self.db.collection(USERS_COLLECTION).document(username).get()
        if not doc.exists:
            return None
        user_data = doc.to_dict()
        user_data["username"] = doc.id
        return user_data

    def create_user(self, username: str, password_hash: str, role: Role) -> Dict:
        """
        Create a new user.

        Raises:
            ConflictError: If the username is taken
            ValidationError: If the username cannot be used as a user id
        """
        if not is_valid_document_id(username):
            raise ValidationError(f"Invalid username '{username}'")

        user_data = {
            "password_hash": password_hash,
            "role": role.value,
            "created_at": datetime.now(timezone.utc),
        }
        with store_errors("user create"):
            try:
                self.db.collection(USERS_COLLECTION).document(username).create(user_data)
            except AlreadyExists as e:
                raise ConflictError("User already exists") from e

        logger.info(f"User created: {username} (role={role.value})")
        user_data["username"] = username
        return user_data
