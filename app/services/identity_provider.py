"""
Identity Provider - credential verification and stateless session tokens.

Tokens are signed JWTs carrying the subject (username) and role. Nothing
is stored server-side per session; every request is validated from the
token alone.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import JWTError, jwt

from app.core.errors import InvalidCredentials, InvalidOrExpiredCredential
from app.models.user import Principal, Role, TokenResponse
from app.services.user_service import UserService
from app.utils.security import get_signing_key, hash_password, parse_bearer, verify_password

logger = logging.getLogger(__name__)


class IdentityProvider:
    def __init__(self, user_service: Optional[UserService] = None):
        self.users = user_service or UserService()

    def register(self, username: str, password: str, role: Role) -> Principal:
        """
        Create an account.

        Raises:
            ConflictError: If the username is taken
            ValidationError: If the username cannot be used as a user id
        """
        self.users.create_user(username, hash_password(password), role)
        return Principal(subject=username, role=role)

    def authenticate(self, username: str, password: str) -> Principal:
        """
        Check a username/password pair.

        Raises:
            InvalidCredentials: Unknown username or wrong password
        """
        user = self.users.get_user(username)
        if user is None or not verify_password(password, user.get("password_hash")):
            logger.warning(f"Failed login attempt for '{username}'")
            raise InvalidCredentials()
        return Principal(subject=username, role=Role(user["role"]))

    def issue_token(self, principal: Principal) -> str:
        key = get_signing_key()
        now = datetime.now(timezone.utc)
        payload = {
            "sub": principal.subject,
            "role": principal.role.value,
            "iat": now,
            "exp": now + timedelta(minutes=key.expire_minutes),
        }
        return jwt.encode(payload, key.secret, algorithm=key.algorithm)

    def login(self, username: str, password: str) -> TokenResponse:
        principal = self.authenticate(username, password)
        logger.info(f"User logged in: {principal.subject} (role={principal.role.value})")
        return TokenResponse(token=self.issue_token(principal), role=principal.role)

    def validate(self, authorization: Optional[str]) -> Principal:
        """
        Validate an Authorization header value and return its claims.

        Raises:
            MissingCredential: No header
            MalformedCredential: Not "Bearer <token>"
            InvalidOrExpiredCredential: Bad signature, expired, or bad claims
        """
        token = parse_bearer(authorization)
        key = get_signing_key()

        try:
            claims = jwt.decode(token, key.secret, algorithms=[key.algorithm])
        except JWTError as e:
            raise InvalidOrExpiredCredential() from e

        subject = claims.get("sub")
        try:
            role = Role(claims.get("role"))
        except ValueError as e:
            raise InvalidOrExpiredCredential() from e
        if not subject:
            raise InvalidOrExpiredCredential()

        return Principal(subject=subject, role=role)


# Global service instance (singleton pattern)
_identity_provider = None


def get_identity_provider() -> IdentityProvider:
    """
    Get or create IdentityProvider singleton instance.
    """
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = IdentityProvider()
    return _identity_provider
