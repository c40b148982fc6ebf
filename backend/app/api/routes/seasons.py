"""Season endpoints.

Seasons are shared by every club. Reading requires authentication only;
changes require ADMIN or OWNER in at least one club, with no club context.
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.guard import require_global
from backend.app.authz.roles import Capability
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import Discipline, Season
from backend.app.models.catalog import SeasonDetailResponse, SeasonRequest, SeasonResponse
from backend.app.validators.catalog import ensure_season_unused, ensure_unique_season_name
from backend.app.validators.errors import ResourceNotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/seasons", tags=["seasons"])


def _to_response(season: Season) -> SeasonResponse:
    return SeasonResponse(
        season_id=str(season.season_id), name=season.name, description=season.description
    )


@router.get("", response_model=list[SeasonResponse])
async def list_seasons(
    _ctx: Annotated[SessionContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[SeasonResponse]:
    result = await session.execute(select(Season).order_by(Season.name))
    return [_to_response(row) for row in result.scalars().all()]


@router.post("", response_model=SeasonResponse, status_code=status.HTTP_201_CREATED)
async def create_season(
    request: SeasonRequest,
    _ctx: Annotated[SessionContext, Depends(require_global(Capability.MANAGE_SEASONS))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SeasonResponse:
    await ensure_unique_season_name(session, request.name)

    season = Season(name=request.name, description=request.description)
    session.add(season)
    await session.commit()
    return _to_response(season)


@router.put("/{season_id}", response_model=SeasonResponse)
async def update_season(
    season_id: uuid.UUID,
    request: SeasonRequest,
    _ctx: Annotated[SessionContext, Depends(require_global(Capability.MANAGE_SEASONS))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SeasonResponse:
    season = await session.get(Season, season_id)
    if season is None:
        raise ResourceNotFound("season")

    await ensure_unique_season_name(session, request.name, exclude_id=season_id)
    season.name = request.name
    season.description = request.description

    await session.commit()
    return _to_response(season)


@router.get("/{season_id}", response_model=SeasonDetailResponse)
async def get_season(
    season_id: uuid.UUID,
    _ctx: Annotated[SessionContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SeasonDetailResponse:
    """One season with the number of disciplines it holds."""
    season = await session.get(Season, season_id)
    if season is None:
        raise ResourceNotFound("season")

    count = await session.scalar(
        select(func.count()).select_from(Discipline).where(Discipline.season_id == season_id)
    )
    return SeasonDetailResponse(
        season_id=str(season.season_id),
        name=season.name,
        description=season.description,
        discipline_count=count or 0,
    )


@router.delete("/{season_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_season(
    season_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(require_global(Capability.MANAGE_SEASONS))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete an empty season; disciplines must be removed first."""
    season = await session.get(Season, season_id)
    if season is None:
        raise ResourceNotFound("season")

    await ensure_season_unused(session, season_id)
    await session.delete(season)
    await session.commit()

    logger.info(
        "Season deleted",
        extra={"structured": {"season_id": str(season_id), "user_id": str(ctx.user_id)}},
    )
