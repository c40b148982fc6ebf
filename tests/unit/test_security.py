"""Unit tests for password hashing and session tokens."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from backend.app.config import Settings
from backend.app.db.context import SessionContext
from backend.app.security.passwords import hash_password, verify_password
from backend.app.security.tokens import decode_session_token, encode_session_token


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret="unit-test-secret-at-least-32-bytes-long")


def _session(selected: uuid.UUID | None = None, ttl: timedelta = timedelta(hours=1)) -> SessionContext:
    return SessionContext(
        session_id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        selected_club_id=selected,
        version=3,
        expires_at=datetime.now(UTC) + ttl,
    )


def test_password_hash_verifies() -> None:
    hashed = hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert verify_password(hashed, "s3cret-pass")
    assert not verify_password(hashed, "wrong-pass")


def test_verify_password_rejects_malformed_hash() -> None:
    assert not verify_password("not-an-argon2-hash", "anything")


def test_token_claims_carry_session_not_role(settings: Settings) -> None:
    club_id = uuid.uuid4()
    session = _session(club_id)

    token = encode_session_token(session, settings)
    claims = decode_session_token(token, settings)
    payload = jwt.decode(token, options={"verify_signature": False})

    assert claims.session_id == session.session_id
    assert claims.user_id == session.user_id
    assert claims.version == 3
    assert claims.club_hint == club_id
    assert "role" not in payload


def test_token_without_selection(settings: Settings) -> None:
    claims = decode_session_token(encode_session_token(_session(), settings), settings)

    assert claims.club_hint is None


def test_expired_token_is_rejected(settings: Settings) -> None:
    token = encode_session_token(_session(ttl=timedelta(minutes=-5)), settings)

    with pytest.raises(jwt.InvalidTokenError):
        decode_session_token(token, settings)


def test_token_signed_with_other_secret_is_rejected(settings: Settings) -> None:
    token = encode_session_token(_session(), Settings(jwt_secret="someone-else-entirely-with-a-long-secret"))

    with pytest.raises(jwt.InvalidTokenError):
        decode_session_token(token, settings)
