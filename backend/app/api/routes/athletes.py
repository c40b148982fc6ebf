"""Athlete endpoints. Any active member of the resolved club may manage athletes."""

import logging
import math
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.guard import ClubAccess, RequestGuard, get_request_guard, require_club
from backend.app.authz.roles import Capability
from backend.app.config import Settings, get_settings
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import Athlete
from backend.app.db.queries import query_athletes
from backend.app.models.athletes import (
    AthleteListResponse,
    AthleteRequest,
    AthleteResponse,
    AthleteUpdateRequest,
    Pagination,
)
from backend.app.validators.club_records import (
    ensure_age_group_in_club,
    ensure_athlete_unused,
    ensure_gender_exists,
    ensure_unique_athlete_name,
)
from backend.app.validators.errors import ResourceNotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/athletes", tags=["athletes"])

RESOURCE = "athlete"


def _to_response(athlete: Athlete) -> AthleteResponse:
    return AthleteResponse(
        athlete_id=str(athlete.athlete_id),
        club_id=str(athlete.club_id),
        first_name=athlete.first_name,
        last_name=athlete.last_name,
        gender_id=str(athlete.gender_id),
        age_group_id=str(athlete.age_group_id) if athlete.age_group_id else None,
    )


async def _load(
    session: AsyncSession,
    guard: RequestGuard,
    ctx: SessionContext,
    athlete_id: uuid.UUID,
    capability: Capability,
) -> Athlete:
    athlete = await session.get(Athlete, athlete_id)
    if athlete is None:
        raise ResourceNotFound(RESOURCE)
    await guard.authorize_resource(ctx, athlete.club_id, capability, RESOURCE)
    return athlete


@router.get("", response_model=AthleteListResponse)
async def list_athletes(
    access: Annotated[ClubAccess, Depends(require_club(Capability.VIEW_CLUB))],
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    search: Annotated[str | None, Query(max_length=128)] = None,
    gender_id: uuid.UUID | None = None,
    age_group_id: uuid.UUID | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> AthleteListResponse:
    """List athletes of the resolved club.

    ``search`` matches first or last name case-insensitively. ``limit`` is
    capped at the configured maximum page size.
    """
    page_size = min(limit or settings.default_page_size, settings.max_page_size)

    query = query_athletes(access.club_filter)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Athlete.first_name).like(pattern),
                func.lower(Athlete.last_name).like(pattern),
            )
        )
    if gender_id is not None:
        query = query.where(Athlete.gender_id == gender_id)
    if age_group_id is not None:
        query = query.where(Athlete.age_group_id == age_group_id)

    total = await session.scalar(select(func.count()).select_from(query.subquery())) or 0

    result = await session.execute(
        query.order_by(Athlete.last_name, Athlete.first_name)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return AthleteListResponse(
        data=[_to_response(row) for row in result.scalars().all()],
        pagination=Pagination(
            total=total,
            page=page,
            limit=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
        ),
    )


@router.post("", response_model=AthleteResponse, status_code=status.HTTP_201_CREATED)
async def create_athlete(
    request: AthleteRequest,
    access: Annotated[ClubAccess, Depends(require_club(Capability.MANAGE_ATHLETES))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AthleteResponse:
    """Create an athlete in the resolved club."""
    await ensure_gender_exists(session, request.gender_id)
    if request.age_group_id is not None:
        await ensure_age_group_in_club(session, access.club_id, request.age_group_id)
    await ensure_unique_athlete_name(
        session, access.club_id, request.first_name, request.last_name
    )

    athlete = Athlete(
        club_id=access.club_id,
        first_name=request.first_name,
        last_name=request.last_name,
        gender_id=request.gender_id,
        age_group_id=request.age_group_id,
    )
    session.add(athlete)
    await session.commit()

    logger.info(
        "Athlete created",
        extra={
            "structured": {
                "athlete_id": str(athlete.athlete_id),
                "club_id": str(access.club_id),
                "user_id": str(access.session.user_id),
            }
        },
    )
    return _to_response(athlete)


@router.get("/{athlete_id}", response_model=AthleteResponse)
async def get_athlete(
    athlete_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AthleteResponse:
    athlete = await _load(session, guard, ctx, athlete_id, Capability.VIEW_CLUB)
    return _to_response(athlete)


@router.patch("/{athlete_id}", response_model=AthleteResponse)
async def update_athlete(
    athlete_id: uuid.UUID,
    request: AthleteUpdateRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AthleteResponse:
    """Partially update an athlete. The owning club never changes."""
    athlete = await _load(session, guard, ctx, athlete_id, Capability.MANAGE_ATHLETES)

    if request.gender_id is not None:
        await ensure_gender_exists(session, request.gender_id)
    if request.age_group_id is not None:
        await ensure_age_group_in_club(session, athlete.club_id, request.age_group_id)

    first_name = request.first_name or athlete.first_name
    last_name = request.last_name or athlete.last_name
    if (first_name, last_name) != (athlete.first_name, athlete.last_name):
        await ensure_unique_athlete_name(
            session, athlete.club_id, first_name, last_name, exclude_id=athlete.athlete_id
        )

    athlete.first_name = first_name
    athlete.last_name = last_name
    if request.gender_id is not None:
        athlete.gender_id = request.gender_id
    if "age_group_id" in request.model_fields_set:
        athlete.age_group_id = request.age_group_id

    await session.commit()
    return _to_response(athlete)


@router.delete("/{athlete_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_athlete(
    athlete_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    athlete = await _load(session, guard, ctx, athlete_id, Capability.MANAGE_ATHLETES)
    await ensure_athlete_unused(session, athlete.athlete_id)

    await session.delete(athlete)
    await session.commit()
