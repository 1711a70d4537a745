"""Tests for app.services.identity_provider."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from app.core.errors import (
    ConflictError,
    InvalidCredentials,
    InvalidOrExpiredCredential,
    MalformedCredential,
    MissingCredential,
)
from app.models.user import Principal, Role
from app.services.identity_provider import IdentityProvider
from app.services.user_service import UserService
from app.utils.security import get_signing_key


@pytest.fixture
def idp(db) -> IdentityProvider:
    return IdentityProvider(UserService(db))


def _token(claims: dict, secret: str = None) -> str:
    key = get_signing_key()
    return jwt.encode(claims, secret or key.secret, algorithm=key.algorithm)


class TestRegisterAndAuthenticate:
    def test_register_then_authenticate(self, idp: IdentityProvider) -> None:
        idp.register("alice", "pw1", Role.USER)
        assert idp.authenticate("alice", "pw1") == Principal("alice", Role.USER)

    def test_password_is_not_stored_in_clear(self, idp: IdentityProvider, db) -> None:
        idp.register("alice", "pw1", Role.USER)
        stored = db.collection("users").document("alice").get().to_dict()
        assert stored["password_hash"] != "pw1"
        assert "password" not in stored

    def test_duplicate_username(self, idp: IdentityProvider) -> None:
        idp.register("alice", "pw1", Role.USER)
        with pytest.raises(ConflictError, match="already exists"):
            idp.register("alice", "other", Role.MANAGER)

    def test_unknown_user(self, idp: IdentityProvider) -> None:
        with pytest.raises(InvalidCredentials):
            idp.authenticate("nobody", "pw1")

    def test_wrong_password(self, idp: IdentityProvider) -> None:
        idp.register("alice", "pw1", Role.USER)
        with pytest.raises(InvalidCredentials):
            idp.authenticate("alice", "wrong")


class TestValidate:
    def test_login_token_round_trip(self, idp: IdentityProvider) -> None:
        idp.register("carol", "pw3", Role.MANAGER)
        token = idp.login("carol", "pw3")
        assert token.role == Role.MANAGER
        assert idp.validate(f"Bearer {token.token}") == Principal("carol", Role.MANAGER)

    def test_claims(self, idp: IdentityProvider) -> None:
        token = idp.issue_token(Principal("bob", Role.WORKER))
        key = get_signing_key()
        claims = jwt.decode(token, key.secret, algorithms=[key.algorithm])
        assert claims["sub"] == "bob"
        assert claims["role"] == "worker"
        assert claims["exp"] > claims["iat"]

    def test_missing(self, idp: IdentityProvider) -> None:
        with pytest.raises(MissingCredential):
            idp.validate(None)

    def test_malformed(self, idp: IdentityProvider) -> None:
        with pytest.raises(MalformedCredential):
            idp.validate("not-a-bearer-header")

    def test_wrong_signature(self, idp: IdentityProvider) -> None:
        token = _token({"sub": "alice", "role": "user"}, secret="some-other-key")
        with pytest.raises(InvalidOrExpiredCredential):
            idp.validate(f"Bearer {token}")

    def test_expired(self, idp: IdentityProvider) -> None:
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = _token({"sub": "alice", "role": "user", "iat": past - timedelta(hours=1), "exp": past})
        with pytest.raises(InvalidOrExpiredCredential):
            idp.validate(f"Bearer {token}")

    def test_unknown_role_claim(self, idp: IdentityProvider) -> None:
        token = _token({"sub": "alice", "role": "admin"})
        with pytest.raises(InvalidOrExpiredCredential):
            idp.validate(f"Bearer {token}")

    def test_garbage_token(self, idp: IdentityProvider) -> None:
        with pytest.raises(InvalidOrExpiredCredential):
            idp.validate("Bearer not.a.jwt")
