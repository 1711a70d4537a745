"""
Firestore helpers shared by the stores.
"""

import logging
import re
from contextlib import contextmanager
from typing import Iterator

from google.api_core.exceptions import GoogleAPICallError, RetryError

from app.core.errors import StoreError

logger = logging.getLogger(__name__)

# Firestore reserves ids of the form __name__
_RESERVED_ID = re.compile(r"^__.*__$")
MAX_DOCUMENT_ID_BYTES = 1500


def validate_document_id(value: str) -> str:
    """
    Check that value can be used as a Firestore document id.

    Firestore rejects ids containing "/", the ids "." and "..", ids of
    the form __name__, and ids longer than 1500 bytes.

    Raises:
        ValueError: If value is not a usable document id
    """
    if not value:
        raise ValueError("must not be empty")
    if "/" in value:
        raise ValueError("must not contain '/'")
    if value in (".", ".."):
        raise ValueError("must not be '.' or '..'")
    if _RESERVED_ID.match(value):
        raise ValueError("must not start and end with '__'")
    if len(value.encode("utf-8")) > MAX_DOCUMENT_ID_BYTES:
        raise ValueError(f"must be at most {MAX_DOCUMENT_ID_BYTES} bytes")
    return value


def is_valid_document_id(value: str) -> bool:
    try:
        validate_document_id(value)
    except ValueError:
        return False
    return True


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore queries.

    Usage:
        query = where_filter(collection, "status", "==", "reported")
    """
    return query.where(field_path, op_string, value)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Re-raise Firestore API failures as StoreError.

    The original exception is logged, never shown to the caller.
    """
    try:
        yield
    except (GoogleAPICallError, RetryError) as e:
        logger.error(f"Store failure during {operation}: {e}", exc_info=True)
        raise StoreError() from e
