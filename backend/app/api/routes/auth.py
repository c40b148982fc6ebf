"""Authentication and session endpoints.

``POST /auth/refresh`` is the normal refresh and never changes the selected
club. ``PATCH /auth/session`` is the explicit update trigger that switches
clubs without re-authentication.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context, get_session_manager
from backend.app.authz.errors import Unauthenticated
from backend.app.authz.session_context import SessionContextManager
from backend.app.config import Settings, get_settings
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import User
from backend.app.models.auth import (
    RegisterRequest,
    SessionResponse,
    SessionUpdateRequest,
    SignInRequest,
    UserResponse,
)
from backend.app.security.passwords import hash_password, verify_password
from backend.app.security.tokens import encode_session_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _session_response(
    ctx: SessionContext, settings: Settings, *, with_token: bool = True
) -> SessionResponse:
    return SessionResponse(
        session_id=str(ctx.session_id),
        user_id=str(ctx.user_id),
        selected_club_id=str(ctx.selected_club_id) if ctx.selected_club_id else None,
        version=ctx.version,
        expires_at=ctx.expires_at,
        access_token=encode_session_token(ctx, settings) if with_token else None,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    """Register a new user. New users belong to no club."""
    if len(request.password) < settings.password_min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {settings.password_min_length} characters",
        )

    email = request.email.lower()
    existing = await session.execute(select(User.user_id).where(func.lower(User.email) == email))
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    user = User(email=email, name=request.name, password_hash=hash_password(request.password))
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        ) from e

    logger.info("User registered", extra={"structured": {"user_id": str(user.user_id)}})
    return UserResponse(user_id=str(user.user_id), email=user.email, name=user.name)


@router.post("/signin", response_model=SessionResponse)
async def sign_in(
    request: SignInRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    manager: Annotated[SessionContextManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Sign in and start a session.

    A user with exactly one active membership lands inside that club; any
    other user starts with no club selected.
    """
    result = await session.execute(
        select(User).where(func.lower(User.email) == request.email.lower())
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(user.password_hash, request.password):
        raise Unauthenticated("Invalid email or password")

    ctx = await manager.start_session(user.user_id)
    return _session_response(ctx, settings)


@router.get("/session", response_model=SessionResponse)
async def get_session_context(
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Current session context."""
    return _session_response(ctx, settings, with_token=False)


@router.patch("/session", response_model=SessionResponse)
async def update_session(
    request: SessionUpdateRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    manager: Annotated[SessionContextManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Switch the selected club and return a token reflecting it.

    Returns 403 for any club the user has no active membership in; the
    previous selection is kept.
    """
    updated = await manager.switch_club(ctx, request.selected_club_id)
    return _session_response(updated, settings)


@router.post("/refresh", response_model=SessionResponse)
async def refresh_session(
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    manager: Annotated[SessionContextManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionResponse:
    """Extend the session and reissue its token; the selection is unchanged."""
    refreshed = await manager.refresh(ctx)
    return _session_response(refreshed, settings)


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    manager: Annotated[SessionContextManager, Depends(get_session_manager)],
) -> None:
    """Revoke the current session."""
    await manager.end(ctx)
