"""
Security utilities: password hashing, token signing key and bearer
header parsing.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from passlib.context import CryptContext

from app.core.errors import MalformedCredential, MissingCredential

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


@dataclass(frozen=True)
class SigningKey:
    secret: str
    algorithm: str
    expire_minutes: int


# Set once at startup by init_signing_key(), read-only afterwards
_signing_key: Optional[SigningKey] = None


def init_signing_key(secret: Optional[str], algorithm: str, expire_minutes: int) -> SigningKey:
    """
    Install the process-wide token signing key.

    Calling it again with the same key is a no-op; with a different key
    it raises RuntimeError.
    """
    global _signing_key

    if not secret:
        raise RuntimeError("JWT_SECRET_KEY is not set. Refusing to start without a signing key.")

    key = SigningKey(secret=secret, algorithm=algorithm, expire_minutes=expire_minutes)
    if _signing_key is not None:
        if _signing_key != key:
            raise RuntimeError("Signing key already initialized with a different configuration")
        return _signing_key

    _signing_key = key
    logger.info(f"Token signing key initialized (algorithm={algorithm})")
    return _signing_key


def get_signing_key() -> SigningKey:
    if _signing_key is None:
        raise RuntimeError("Signing key not initialized. Call init_signing_key() at startup.")
    return _signing_key


def parse_bearer(authorization: Optional[str]) -> str:
    """
    Extract the token from an "Authorization: Bearer <token>" header value.

    Raises:
        MissingCredential: header absent or blank
        MalformedCredential: not exactly "Bearer <token>"
    """
    if not authorization or not authorization.strip():
        raise MissingCredential()

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise MalformedCredential()

    return parts[1]
