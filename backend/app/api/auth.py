"""Authentication dependencies.

Resolves the bearer token to a live session context and wires the
membership/session stores, verifier and session manager per request.
"""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Header
from jwt import InvalidTokenError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.authz.errors import Unauthenticated
from backend.app.authz.session_context import SessionContextManager
from backend.app.authz.verifier import PermissionVerifier
from backend.app.config import Settings, get_settings
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.sql_repositories import SqlMembershipStore, SqlSessionStore
from backend.app.security.tokens import decode_session_token


def get_membership_store(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SqlMembershipStore:
    """Membership store bound to the request's database session."""
    return SqlMembershipStore(session)


def get_verifier(
    memberships: Annotated[SqlMembershipStore, Depends(get_membership_store)],
) -> PermissionVerifier:
    """Permission verifier for this request; holds no state across requests."""
    return PermissionVerifier(memberships)


def get_session_manager(
    session: Annotated[AsyncSession, Depends(get_session)],
    memberships: Annotated[SqlMembershipStore, Depends(get_membership_store)],
    verifier: Annotated[PermissionVerifier, Depends(get_verifier)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionContextManager:
    """Session context manager for this request."""
    return SessionContextManager(
        memberships,
        SqlSessionStore(session),
        verifier,
        session_ttl=timedelta(hours=settings.session_ttl_hours),
    )


async def get_current_context(
    manager: Annotated[SessionContextManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> SessionContext:
    """Extract the session context from the authorization header.

    Args:
        manager: Session context manager
        settings: Application settings
        authorization: Authorization header ("Bearer <token>")

    Returns:
        SessionContext loaded from the session store

    Raises:
        Unauthenticated: If the header is missing or malformed, the token is
            invalid, or the session is revoked or expired
    """
    if not authorization:
        raise Unauthenticated()

    if not authorization.startswith("Bearer "):
        raise Unauthenticated("Invalid authorization header format")

    token = authorization[7:]  # Strip "Bearer "

    try:
        claims = decode_session_token(token, settings)
    except InvalidTokenError as e:
        raise Unauthenticated("Invalid bearer token") from e

    return await manager.load(claims.session_id, claims.user_id)
