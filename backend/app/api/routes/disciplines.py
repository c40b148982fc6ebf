"""Discipline endpoints.

Disciplines belong to a season and are shared by every club, so writes are
guarded by a global capability rather than a club.
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.app.api.auth import get_current_context
from backend.app.api.guard import require_global
from backend.app.authz.roles import Capability
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import Discipline, Season
from backend.app.models.catalog import DisciplineRequest, DisciplineResponse
from backend.app.validators.catalog import (
    ensure_discipline_unused,
    ensure_season_exists,
    ensure_unique_discipline_name,
    verify_discipline_kind,
)
from backend.app.validators.errors import DomainValidationError, ResourceNotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/disciplines", tags=["disciplines"])

SEARCH_LIMIT = 20


def _to_response(discipline: Discipline, season_name: str) -> DisciplineResponse:
    return DisciplineResponse(
        discipline_id=str(discipline.discipline_id),
        season_id=str(discipline.season_id),
        season_name=season_name,
        name=discipline.name,
        description=discipline.description,
        is_timed=discipline.is_timed,
        is_measured=discipline.is_measured,
        team_size=discipline.team_size,
    )


@router.get("", response_model=list[DisciplineResponse])
async def list_disciplines(
    _ctx: Annotated[SessionContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    season_id: uuid.UUID | None = None,
) -> list[DisciplineResponse]:
    """All disciplines, optionally restricted to one season."""
    query = select(Discipline).options(selectinload(Discipline.season)).order_by(Discipline.name)
    if season_id is not None:
        query = query.where(Discipline.season_id == season_id)

    result = await session.execute(query)
    return [_to_response(row, row.season.name) for row in result.scalars().all()]


@router.get("/search", response_model=list[DisciplineResponse])
async def search_disciplines(
    _ctx: Annotated[SessionContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
    q: str | None = None,
    season_id: uuid.UUID | None = None,
) -> list[DisciplineResponse]:
    """Case-insensitive match on name or description, at most 20 results."""
    term = (q or "").strip()
    if not term:
        raise DomainValidationError("Search term (q) is required")

    pattern = f"%{term.lower()}%"
    query = (
        select(Discipline)
        .join(Discipline.season)
        .options(selectinload(Discipline.season))
        .where(
            or_(
                func.lower(Discipline.name).like(pattern),
                func.lower(Discipline.description).like(pattern),
            )
        )
        .order_by(Season.name, Discipline.name)
    )
    if season_id is not None:
        query = query.where(Discipline.season_id == season_id)

    result = await session.execute(query.limit(SEARCH_LIMIT))
    return [_to_response(row, row.season.name) for row in result.scalars().all()]


@router.get("/{discipline_id}", response_model=DisciplineResponse)
async def get_discipline(
    discipline_id: uuid.UUID,
    _ctx: Annotated[SessionContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DisciplineResponse:
    discipline = await session.get(
        Discipline, discipline_id, options=[selectinload(Discipline.season)]
    )
    if discipline is None:
        raise ResourceNotFound("discipline")
    return _to_response(discipline, discipline.season.name)


@router.post("", response_model=DisciplineResponse, status_code=status.HTTP_201_CREATED)
async def create_discipline(
    request: DisciplineRequest,
    ctx: Annotated[SessionContext, Depends(require_global(Capability.MANAGE_DISCIPLINES))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DisciplineResponse:
    """Create a discipline. Requires ADMIN or OWNER in any club."""
    verify_discipline_kind(request.is_timed, request.is_measured)
    season = await ensure_season_exists(session, request.season_id)
    await ensure_unique_discipline_name(session, request.season_id, request.name)

    discipline = Discipline(
        season_id=request.season_id,
        name=request.name,
        description=request.description,
        is_timed=request.is_timed,
        is_measured=request.is_measured,
        team_size=request.team_size,
    )
    session.add(discipline)
    await session.commit()

    logger.info(
        "Discipline created",
        extra={
            "structured": {
                "discipline_id": str(discipline.discipline_id),
                "user_id": str(ctx.user_id),
            }
        },
    )
    return _to_response(discipline, season.name)


@router.put("/{discipline_id}", response_model=DisciplineResponse)
async def update_discipline(
    discipline_id: uuid.UUID,
    request: DisciplineRequest,
    _ctx: Annotated[SessionContext, Depends(require_global(Capability.MANAGE_DISCIPLINES))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DisciplineResponse:
    discipline = await session.get(Discipline, discipline_id)
    if discipline is None:
        raise ResourceNotFound("discipline")

    verify_discipline_kind(request.is_timed, request.is_measured)
    season = await ensure_season_exists(session, request.season_id)
    await ensure_unique_discipline_name(
        session, request.season_id, request.name, exclude_id=discipline_id
    )

    discipline.season_id = request.season_id
    discipline.name = request.name
    discipline.description = request.description
    discipline.is_timed = request.is_timed
    discipline.is_measured = request.is_measured
    discipline.team_size = request.team_size

    await session.commit()
    return _to_response(discipline, season.name)


@router.delete("/{discipline_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_discipline(
    discipline_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(require_global(Capability.MANAGE_DISCIPLINES))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete a discipline that has no recorded performances."""
    discipline = await session.get(Discipline, discipline_id)
    if discipline is None:
        raise ResourceNotFound("discipline")

    await ensure_discipline_unused(session, discipline_id)
    await session.delete(discipline)
    await session.commit()

    logger.info(
        "Discipline deleted",
        extra={
            "structured": {"discipline_id": str(discipline_id), "user_id": str(ctx.user_id)}
        },
    )
