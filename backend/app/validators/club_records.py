"""Rules for club-scoped records: age groups, athletes and performances.

All lookups here run after the request guard has authorized the club, and
every one of them is restricted to that club.
"""

import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import AgeGroup, Athlete, Discipline, Gender, Medal, Performance
from backend.app.validators.errors import (
    DomainValidationError,
    DuplicateRecordError,
    ResourceInUse,
)


async def ensure_unique_age_group_name(
    session: AsyncSession,
    club_id: uuid.UUID,
    name: str,
    *,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """Age group names are unique within a club."""
    query = select(AgeGroup.age_group_id).where(
        AgeGroup.club_id == club_id, func.lower(AgeGroup.name) == name.lower()
    )
    if exclude_id is not None:
        query = query.where(AgeGroup.age_group_id != exclude_id)

    if (await session.execute(query)).first() is not None:
        raise DuplicateRecordError("Age group with this name already exists in this club")


async def ensure_age_group_unused(session: AsyncSession, age_group_id: uuid.UUID) -> None:
    """An age group with assigned athletes cannot be deleted."""
    count = await session.scalar(
        select(func.count()).select_from(Athlete).where(Athlete.age_group_id == age_group_id)
    )
    if count:
        raise ResourceInUse("Cannot delete age group with assigned athletes")

    count = await session.scalar(
        select(func.count())
        .select_from(Performance)
        .where(Performance.age_group_id == age_group_id)
    )
    if count:
        raise ResourceInUse("Cannot delete age group with recorded performances")


async def ensure_age_group_in_club(
    session: AsyncSession, club_id: uuid.UUID, age_group_id: uuid.UUID
) -> AgeGroup:
    """The age group must exist and belong to the same club."""
    age_group = await session.get(AgeGroup, age_group_id)
    if age_group is None or age_group.club_id != club_id:
        raise DomainValidationError("Invalid age group selected")
    return age_group


async def ensure_gender_exists(session: AsyncSession, gender_id: uuid.UUID) -> Gender:
    gender = await session.get(Gender, gender_id)
    if gender is None:
        raise DomainValidationError("Invalid gender selected")
    return gender


async def ensure_medal_exists(session: AsyncSession, medal_id: uuid.UUID) -> Medal:
    medal = await session.get(Medal, medal_id)
    if medal is None:
        raise DomainValidationError("Invalid medal selected")
    return medal


async def ensure_unique_athlete_name(
    session: AsyncSession,
    club_id: uuid.UUID,
    first_name: str,
    last_name: str,
    *,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """First and last name together are unique within a club (case-insensitive)."""
    query = select(Athlete.athlete_id).where(
        Athlete.club_id == club_id,
        func.lower(Athlete.first_name) == first_name.lower(),
        func.lower(Athlete.last_name) == last_name.lower(),
    )
    if exclude_id is not None:
        query = query.where(Athlete.athlete_id != exclude_id)

    if (await session.execute(query)).first() is not None:
        raise DuplicateRecordError("Athlete with this name already exists in this club")


async def ensure_athlete_in_club(
    session: AsyncSession, club_id: uuid.UUID, athlete_id: uuid.UUID
) -> Athlete:
    """The athlete must exist and belong to the same club."""
    athlete = await session.get(Athlete, athlete_id)
    if athlete is None or athlete.club_id != club_id:
        raise DomainValidationError("Invalid athlete selected")
    return athlete


async def ensure_discipline_exists(session: AsyncSession, discipline_id: uuid.UUID) -> Discipline:
    discipline = await session.get(Discipline, discipline_id)
    if discipline is None:
        raise DomainValidationError("Invalid discipline selected")
    return discipline


def verify_performance_value(
    discipline: Discipline, time_seconds: float | None, distance_meters: float | None
) -> None:
    """Timed disciplines record a time, measured ones a distance, never both."""
    if discipline.is_timed and (time_seconds is None or distance_meters is not None):
        raise DomainValidationError("Timed disciplines require time_seconds only")
    if discipline.is_measured and (distance_meters is None or time_seconds is not None):
        raise DomainValidationError("Measured disciplines require distance_meters only")


def verify_performance_date(event_date: date, today: date | None = None) -> None:
    if event_date > (today or date.today()):
        raise DomainValidationError("Performance date cannot be in the future")


async def ensure_unique_performance(
    session: AsyncSession,
    club_id: uuid.UUID,
    athlete_id: uuid.UUID,
    discipline_id: uuid.UUID,
    event_date: date,
    event_details: str,
    *,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """Same athlete, discipline, date and event means the same performance."""
    query = select(Performance.performance_id).where(
        Performance.club_id == club_id,
        Performance.athlete_id == athlete_id,
        Performance.discipline_id == discipline_id,
        Performance.event_date == event_date,
        func.lower(Performance.event_details) == event_details.lower(),
    )
    if exclude_id is not None:
        query = query.where(Performance.performance_id != exclude_id)

    if (await session.execute(query)).first() is not None:
        raise DuplicateRecordError("This performance has already been recorded")


async def ensure_athlete_unused(session: AsyncSession, athlete_id: uuid.UUID) -> None:
    """An athlete with recorded performances cannot be deleted."""
    count = await session.scalar(
        select(func.count()).select_from(Performance).where(Performance.athlete_id == athlete_id)
    )
    if count:
        raise ResourceInUse("Cannot delete athlete with recorded performances")
