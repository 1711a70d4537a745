"""
Firebase Firestore initialization.
Single-source-of-truth Firestore client for RoadFix.
"""

import json
import logging
import os
from typing import Any, Callable, Optional

import firebase_admin
from firebase_admin import credentials, firestore, initialize_app

from app.core.errors import StoreError
from app.core.settings import settings

logger = logging.getLogger(__name__)

db: Optional[Any] = None


def _validate_credentials_file(cred_path: str) -> None:
    if not os.path.exists(cred_path):
        raise FileNotFoundError(
            f"Firebase credentials file not found: {cred_path}\n"
            f"Please check your .env file and ensure FIREBASE_CREDENTIALS_PATH is correct."
        )

    try:
        with open(cred_path, "r") as f:
            cred_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Firebase credentials file is not valid JSON: {e}")

    required_fields = ["type", "project_id", "private_key", "client_email"]
    missing_fields = [field for field in required_fields if field not in cred_data]
    if missing_fields:
        raise ValueError(
            f"Firebase credentials file is missing required fields: {missing_fields}"
        )

    logger.info(f"[FIRESTORE] Credentials file validated: {cred_path}")


def initialize_firestore():
    global db

    if db is not None:
        return db

    if settings.USE_MOCK_DB:
        from app.config.mock_firestore import get_mock_db
        db = get_mock_db()
        logger.info("[FIRESTORE] USING MOCK DATABASE")
        return db

    try:
        if not firebase_admin._apps:
            if settings.FIREBASE_CREDENTIALS_PATH:
                _validate_credentials_file(settings.FIREBASE_CREDENTIALS_PATH)
                cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
                initialize_app(cred)
                logger.info("[FIRESTORE] Firebase Admin SDK initialized with service account")
            else:
                logger.info("[FIRESTORE] No credentials path set, using Application Default Credentials")
                initialize_app()

        db = firestore.client()
        logger.info(f"[FIRESTORE] Project: {settings.FIREBASE_PROJECT_ID or 'default'}")
        return db

    except (FileNotFoundError, ValueError) as e:
        raise RuntimeError(
            f"Firestore initialization FAILED - {e}\n"
            f"SOLUTION: Download a fresh service account key from Firebase Console "
            f"and update FIREBASE_CREDENTIALS_PATH in .env"
        ) from e
    except Exception as e:
        raise RuntimeError(
            f"Firestore initialization FAILED. Error: {e}\n"
            f"Please check your Firebase credentials and configuration."
        ) from e


def get_db():
    """
    Get the initialized Firestore client.

    Raises RuntimeError if Firestore has not been initialized and cannot be.
    """
    if db is None:
        initialize_firestore()
    return db


def atomic(database, fn: Callable[[Any], Any]) -> Any:
    """
    Run fn(transaction) as one all-or-nothing unit.

    fn must do all of its reads before its first write. Against real
    Firestore it may be re-run on contention; it must not have side
    effects outside the transaction.

    Raises:
        StoreError: If Firestore gives up retrying a contended commit
    """
    run_transaction = getattr(database, "run_transaction", None)
    if run_transaction is not None:
        return run_transaction(fn)
    try:
        return firestore.transactional(fn)(database.transaction())
    except ValueError as e:
        # Raised by the client once its commit retries are exhausted
        logger.error(f"[FIRESTORE] Transaction abandoned: {e}")
        raise StoreError() from e
