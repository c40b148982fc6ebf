"""Club endpoints: club picker, selection, details and membership management."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context, get_membership_store, get_session_manager
from backend.app.api.guard import ClubAccess, RequestGuard, get_request_guard
from backend.app.authz.errors import AuthorizationDenied, StaleSessionError
from backend.app.authz.roles import Capability, Role, satisfies
from backend.app.authz.session_context import SessionContextManager
from backend.app.config import Settings, get_settings
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import Club, User
from backend.app.db.repositories import MembershipRecord
from backend.app.db.sql_repositories import SqlMembershipStore
from backend.app.models.clubs import (
    AddMemberRequest,
    ClubMembershipItem,
    ClubResponse,
    ClubSelectionRequest,
    ClubSelectionResponse,
    MemberResponse,
    UpdateClubRequest,
    UpdateMemberRequest,
    UserClubsResponse,
)
from backend.app.security.tokens import encode_session_token
from backend.app.validators.errors import (
    DomainValidationError,
    DuplicateRecordError,
    ResourceNotFound,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clubs", tags=["clubs"])


def _member_response(record: MembershipRecord) -> MemberResponse:
    return MemberResponse(
        user_id=str(record.user_id),
        club_id=str(record.club_id),
        role=record.role,
        is_active=record.is_active,
    )


async def _authorize_path_club(
    guard: RequestGuard, ctx: SessionContext, club_id: uuid.UUID, capability: Capability
) -> ClubAccess:
    # The club in the path is the explicit club id for these endpoints
    return await guard.authorize_club(ctx, capability, club_id)


@router.get("", response_model=UserClubsResponse)
async def list_user_clubs(
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    memberships: Annotated[SqlMembershipStore, Depends(get_membership_store)],
) -> UserClubsResponse:
    """Clubs the caller actively belongs to, with the caller's role in each."""
    clubs = await memberships.list_user_clubs(ctx.user_id)
    return UserClubsResponse(
        data=[
            ClubMembershipItem(
                club_id=str(view.club_id),
                name=view.club_name,
                description=view.club_description,
                role=view.role,
            )
            for view in clubs
        ],
        selected_club_id=str(ctx.selected_club_id) if ctx.selected_club_id else None,
    )


@router.post("/select", response_model=ClubSelectionResponse)
async def select_club(
    request: ClubSelectionRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    manager: Annotated[SessionContextManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ClubSelectionResponse:
    """Select the club the session works in.

    Membership is re-verified here even though clients only offer the
    caller's own clubs.
    """
    updated = await manager.switch_club(ctx, request.club_id)
    selected = manager.current_selection(updated)
    if selected is None:
        raise StaleSessionError()
    return ClubSelectionResponse(
        selected_club_id=str(selected),
        version=updated.version,
        access_token=encode_session_token(updated, settings),
    )


@router.get("/{club_id}", response_model=ClubResponse)
async def get_club(
    club_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ClubResponse:
    """Club details for any active member."""
    await _authorize_path_club(guard, ctx, club_id, Capability.VIEW_CLUB)

    club = await session.get(Club, club_id)
    if club is None:
        raise ResourceNotFound("club")

    return ClubResponse(club_id=str(club.club_id), name=club.name, description=club.description)


@router.patch("/{club_id}", response_model=ClubResponse)
async def update_club(
    club_id: uuid.UUID,
    request: UpdateClubRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ClubResponse:
    """Update club name or description (OWNER only)."""
    await _authorize_path_club(guard, ctx, club_id, Capability.MANAGE_CLUB)

    club = await session.get(Club, club_id)
    if club is None:
        raise ResourceNotFound("club")

    if request.name is not None and request.name.lower() != club.name.lower():
        duplicate = await session.execute(
            select(Club.club_id).where(
                func.lower(Club.name) == request.name.lower(), Club.club_id != club_id
            )
        )
        if duplicate.first() is not None:
            raise DuplicateRecordError("Club with this name already exists")

    if request.name is not None:
        club.name = request.name
    if "description" in request.model_fields_set:
        club.description = request.description

    await session.commit()
    return ClubResponse(club_id=str(club.club_id), name=club.name, description=club.description)


@router.get("/{club_id}/members", response_model=list[MemberResponse])
async def list_members(
    club_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    memberships: Annotated[SqlMembershipStore, Depends(get_membership_store)],
) -> list[MemberResponse]:
    """All memberships of a club, inactive ones included (ADMIN+)."""
    await _authorize_path_club(guard, ctx, club_id, Capability.MANAGE_MEMBERS)
    return [_member_response(record) for record in await memberships.list_club_members(club_id)]


@router.post(
    "/{club_id}/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED
)
async def add_member(
    club_id: uuid.UUID,
    request: AddMemberRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    memberships: Annotated[SqlMembershipStore, Depends(get_membership_store)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> MemberResponse:
    """Add a registered user to the club, or reactivate their old membership.

    Nobody may grant a role above their own.
    """
    access = await _authorize_path_club(guard, ctx, club_id, Capability.MANAGE_MEMBERS)

    if not satisfies(access.role, request.role):
        raise AuthorizationDenied("Cannot grant a role above your own")

    result = await session.execute(
        select(User.user_id).where(func.lower(User.email) == request.email.lower())
    )
    user_id = result.scalar_one_or_none()
    if user_id is None:
        raise ResourceNotFound("user")

    existing = await memberships.get_membership(user_id, club_id)
    if existing is not None and existing.is_active:
        raise DuplicateRecordError("User is already a member of this club")

    record = await memberships.upsert_membership(user_id, club_id, request.role, is_active=True)
    logger.info(
        "Member added",
        extra={
            "structured": {
                "club_id": str(club_id),
                "user_id": str(user_id),
                "actor_id": str(ctx.user_id),
            }
        },
    )
    return _member_response(record)


@router.patch("/{club_id}/members/{user_id}", response_model=MemberResponse)
async def update_member(
    club_id: uuid.UUID,
    user_id: uuid.UUID,
    request: UpdateMemberRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    memberships: Annotated[SqlMembershipStore, Depends(get_membership_store)],
) -> MemberResponse:
    """Change a member's role or active flag (ADMIN+).

    Deactivation is the removal path; rows are never deleted.
    """
    access = await _authorize_path_club(guard, ctx, club_id, Capability.MANAGE_MEMBERS)

    target = await memberships.get_membership(user_id, club_id)
    if target is None:
        raise ResourceNotFound("membership")

    if not satisfies(access.role, target.role):
        raise AuthorizationDenied("Cannot modify a member with a higher role")

    new_role = request.role if request.role is not None else target.role
    new_active = request.is_active if request.is_active is not None else target.is_active

    if not satisfies(access.role, new_role):
        raise AuthorizationDenied("Cannot grant a role above your own")

    losing_owner = target.role is Role.OWNER and target.is_active and (
        new_role is not Role.OWNER or not new_active
    )
    if losing_owner:
        owners = [
            record
            for record in await memberships.list_club_members(club_id)
            if record.role is Role.OWNER and record.is_active
        ]
        if len(owners) <= 1:
            raise DomainValidationError("A club must keep at least one active owner")

    record = await memberships.upsert_membership(user_id, club_id, new_role, is_active=new_active)
    logger.info(
        "Member updated",
        extra={
            "structured": {
                "club_id": str(club_id),
                "user_id": str(user_id),
                "actor_id": str(ctx.user_id),
                "is_active": new_active,
            }
        },
    )
    return _member_response(record)
