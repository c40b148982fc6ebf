"""Session access tokens.

A token identifies a session (``sid``) and its user (``sub``). The ``club``
claim mirrors the selected club for clients; the server always reads the
selection from the session store. Tokens never carry a role.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Any

import jwt
from jwt import InvalidTokenError

from backend.app.config import Settings
from backend.app.db.context import SessionContext


@dataclass(frozen=True)
class TokenClaims:
    """Decoded claims of a session token."""

    user_id: uuid.UUID
    session_id: uuid.UUID
    version: int
    club_hint: uuid.UUID | None


def encode_session_token(session: SessionContext, settings: Settings) -> str:
    """Issue a token for a session, expiring with the session."""
    body: dict[str, Any] = {
        "iss": settings.jwt_issuer,
        "iat": int(time.time()),
        "exp": int(session.expires_at.timestamp()),
        "sub": str(session.user_id),
        "sid": str(session.session_id),
        "ver": session.version,
        "club": str(session.selected_club_id) if session.selected_club_id else None,
    }
    return jwt.encode(body, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str, settings: Settings) -> TokenClaims:
    """Decode and validate a session token.

    Raises:
        jwt.InvalidTokenError: If the signature, expiry, issuer or any
            required claim is invalid
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
        leeway=5,
        options={"require": ["exp", "iat", "iss", "sub", "sid"]},
    )

    try:
        club = payload.get("club")
        return TokenClaims(
            user_id=uuid.UUID(payload["sub"]),
            session_id=uuid.UUID(payload["sid"]),
            version=int(payload.get("ver", 1)),
            club_hint=uuid.UUID(club) if club else None,
        )
    except (ValueError, TypeError) as e:
        raise InvalidTokenError("malformed session claims") from e
