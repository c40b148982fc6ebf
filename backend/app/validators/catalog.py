"""Rules for shared catalog data: seasons and disciplines."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import Discipline, Performance, Season
from backend.app.validators.errors import (
    DomainValidationError,
    DuplicateRecordError,
    ResourceInUse,
)

TIMED_XOR_MEASURED = "Discipline must be either timed or measured, not both"


def verify_discipline_kind(is_timed: bool, is_measured: bool) -> None:
    """A discipline is timed or measured, never both and never neither."""
    if is_timed == is_measured:
        raise DomainValidationError(TIMED_XOR_MEASURED)


async def ensure_unique_season_name(
    session: AsyncSession, name: str, *, exclude_id: uuid.UUID | None = None
) -> None:
    """Season names are unique system-wide (case-insensitive)."""
    query = select(Season.season_id).where(func.lower(Season.name) == name.lower())
    if exclude_id is not None:
        query = query.where(Season.season_id != exclude_id)

    if (await session.execute(query)).first() is not None:
        raise DuplicateRecordError("Season with this name already exists")


async def ensure_season_exists(session: AsyncSession, season_id: uuid.UUID) -> Season:
    """Return the season or fail with a validation error."""
    season = await session.get(Season, season_id)
    if season is None:
        raise DomainValidationError("Invalid season selected")
    return season


async def ensure_unique_discipline_name(
    session: AsyncSession,
    season_id: uuid.UUID,
    name: str,
    *,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """Discipline names are unique within a season."""
    query = select(Discipline.discipline_id).where(
        Discipline.season_id == season_id,
        func.lower(Discipline.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.where(Discipline.discipline_id != exclude_id)

    if (await session.execute(query)).first() is not None:
        raise DuplicateRecordError("Discipline with this name already exists in this season")


async def ensure_season_unused(session: AsyncSession, season_id: uuid.UUID) -> None:
    """A season that still has disciplines cannot be deleted."""
    count = await session.scalar(
        select(func.count()).select_from(Discipline).where(Discipline.season_id == season_id)
    )
    if count:
        raise ResourceInUse("Cannot delete season with existing disciplines")


async def ensure_discipline_unused(session: AsyncSession, discipline_id: uuid.UUID) -> None:
    """A discipline with recorded performances cannot be deleted."""
    count = await session.scalar(
        select(func.count())
        .select_from(Performance)
        .where(Performance.discipline_id == discipline_id)
    )
    if count:
        raise ResourceInUse("Cannot delete discipline with recorded performances")
