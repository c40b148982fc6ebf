"""Age group endpoints.

Listing and reading are open to any member of the resolved club; creating,
renaming and deleting require ADMIN or above.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.guard import ClubAccess, RequestGuard, get_request_guard, require_club
from backend.app.authz.roles import Capability
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import AgeGroup
from backend.app.db.queries import query_age_groups
from backend.app.models.athletes import AgeGroupRequest, AgeGroupResponse, AgeGroupUpdateRequest
from backend.app.validators.club_records import (
    ensure_age_group_unused,
    ensure_unique_age_group_name,
)
from backend.app.validators.errors import ResourceNotFound

router = APIRouter(prefix="/age-groups", tags=["age-groups"])

RESOURCE = "age group"


def _to_response(age_group: AgeGroup) -> AgeGroupResponse:
    return AgeGroupResponse(
        age_group_id=str(age_group.age_group_id),
        club_id=str(age_group.club_id),
        name=age_group.name,
        ordinal=age_group.ordinal,
    )


async def _load(
    session: AsyncSession,
    guard: RequestGuard,
    ctx: SessionContext,
    age_group_id: uuid.UUID,
    capability: Capability,
) -> AgeGroup:
    age_group = await session.get(AgeGroup, age_group_id)
    if age_group is None:
        raise ResourceNotFound(RESOURCE)
    await guard.authorize_resource(ctx, age_group.club_id, capability, RESOURCE)
    return age_group


@router.get("", response_model=list[AgeGroupResponse])
async def list_age_groups(
    access: Annotated[ClubAccess, Depends(require_club(Capability.VIEW_CLUB))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[AgeGroupResponse]:
    """Age groups of the resolved club in display order."""
    query = query_age_groups(access.club_filter).order_by(AgeGroup.ordinal, AgeGroup.name)
    result = await session.execute(query)
    return [_to_response(row) for row in result.scalars().all()]


@router.post("", response_model=AgeGroupResponse, status_code=status.HTTP_201_CREATED)
async def create_age_group(
    request: AgeGroupRequest,
    access: Annotated[ClubAccess, Depends(require_club(Capability.MANAGE_AGE_GROUPS))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AgeGroupResponse:
    await ensure_unique_age_group_name(session, access.club_id, request.name)

    age_group = AgeGroup(club_id=access.club_id, name=request.name, ordinal=request.ordinal)
    session.add(age_group)
    await session.commit()
    return _to_response(age_group)


@router.get("/{age_group_id}", response_model=AgeGroupResponse)
async def get_age_group(
    age_group_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AgeGroupResponse:
    age_group = await _load(session, guard, ctx, age_group_id, Capability.VIEW_CLUB)
    return _to_response(age_group)


@router.patch("/{age_group_id}", response_model=AgeGroupResponse)
async def update_age_group(
    age_group_id: uuid.UUID,
    request: AgeGroupUpdateRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AgeGroupResponse:
    age_group = await _load(session, guard, ctx, age_group_id, Capability.MANAGE_AGE_GROUPS)

    if request.name is not None:
        await ensure_unique_age_group_name(
            session, age_group.club_id, request.name, exclude_id=age_group.age_group_id
        )
        age_group.name = request.name
    if request.ordinal is not None:
        age_group.ordinal = request.ordinal

    await session.commit()
    return _to_response(age_group)


@router.delete("/{age_group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_age_group(
    age_group_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete an age group that no athlete is assigned to."""
    age_group = await _load(session, guard, ctx, age_group_id, Capability.MANAGE_AGE_GROUPS)
    await ensure_age_group_unused(session, age_group.age_group_id)

    await session.delete(age_group)
    await session.commit()
