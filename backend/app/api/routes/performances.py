"""Performance endpoints.

A performance records one result of a club athlete in a discipline. The
value must match the discipline kind: timed disciplines store a time,
measured disciplines a distance.
"""

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.api.guard import ClubAccess, RequestGuard, get_request_guard, require_club
from backend.app.authz.roles import Capability
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import Performance
from backend.app.db.queries import query_performances
from backend.app.models.performances import (
    PerformanceRequest,
    PerformanceResponse,
    PerformanceUpdateRequest,
)
from backend.app.validators.club_records import (
    ensure_age_group_in_club,
    ensure_athlete_in_club,
    ensure_discipline_exists,
    ensure_medal_exists,
    ensure_unique_performance,
    verify_performance_date,
    verify_performance_value,
)
from backend.app.validators.errors import ResourceNotFound

router = APIRouter(prefix="/performances", tags=["performances"])

RESOURCE = "performance"


def _to_response(performance: Performance) -> PerformanceResponse:
    return PerformanceResponse(
        performance_id=str(performance.performance_id),
        club_id=str(performance.club_id),
        athlete_id=str(performance.athlete_id),
        discipline_id=str(performance.discipline_id),
        age_group_id=str(performance.age_group_id),
        medal_id=str(performance.medal_id) if performance.medal_id else None,
        event_date=performance.event_date,
        time_seconds=performance.time_seconds,
        distance_meters=performance.distance_meters,
        event_details=performance.event_details,
    )


async def _load(
    session: AsyncSession,
    guard: RequestGuard,
    ctx: SessionContext,
    performance_id: uuid.UUID,
    capability: Capability,
) -> Performance:
    performance = await session.get(Performance, performance_id)
    if performance is None:
        raise ResourceNotFound(RESOURCE)
    await guard.authorize_resource(ctx, performance.club_id, capability, RESOURCE)
    return performance


@router.get("", response_model=list[PerformanceResponse])
async def list_performances(
    access: Annotated[ClubAccess, Depends(require_club(Capability.VIEW_CLUB))],
    session: Annotated[AsyncSession, Depends(get_session)],
    athlete_id: uuid.UUID | None = None,
    discipline_id: uuid.UUID | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[PerformanceResponse]:
    """Performances of the resolved club, newest first."""
    query = query_performances(access.club_filter)
    if athlete_id is not None:
        query = query.where(Performance.athlete_id == athlete_id)
    if discipline_id is not None:
        query = query.where(Performance.discipline_id == discipline_id)
    if date_from is not None:
        query = query.where(Performance.event_date >= date_from)
    if date_to is not None:
        query = query.where(Performance.event_date <= date_to)

    result = await session.execute(
        query.order_by(Performance.event_date.desc(), Performance.created_at.desc())
    )
    return [_to_response(row) for row in result.scalars().all()]


@router.post("", response_model=PerformanceResponse, status_code=status.HTTP_201_CREATED)
async def create_performance(
    request: PerformanceRequest,
    access: Annotated[ClubAccess, Depends(require_club(Capability.MANAGE_PERFORMANCES))],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PerformanceResponse:
    """Record a performance.

    Athlete and age group must belong to the resolved club.
    """
    await ensure_athlete_in_club(session, access.club_id, request.athlete_id)
    await ensure_age_group_in_club(session, access.club_id, request.age_group_id)
    discipline = await ensure_discipline_exists(session, request.discipline_id)
    if request.medal_id is not None:
        await ensure_medal_exists(session, request.medal_id)

    verify_performance_value(discipline, request.time_seconds, request.distance_meters)
    verify_performance_date(request.event_date)
    await ensure_unique_performance(
        session,
        access.club_id,
        request.athlete_id,
        request.discipline_id,
        request.event_date,
        request.event_details,
    )

    performance = Performance(
        club_id=access.club_id,
        athlete_id=request.athlete_id,
        discipline_id=request.discipline_id,
        age_group_id=request.age_group_id,
        medal_id=request.medal_id,
        event_date=request.event_date,
        time_seconds=request.time_seconds,
        distance_meters=request.distance_meters,
        event_details=request.event_details,
    )
    session.add(performance)
    await session.commit()
    return _to_response(performance)


@router.get("/{performance_id}", response_model=PerformanceResponse)
async def get_performance(
    performance_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PerformanceResponse:
    performance = await _load(session, guard, ctx, performance_id, Capability.VIEW_CLUB)
    return _to_response(performance)


@router.patch("/{performance_id}", response_model=PerformanceResponse)
async def update_performance(
    performance_id: uuid.UUID,
    request: PerformanceUpdateRequest,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PerformanceResponse:
    """Update result fields. Athlete, discipline and club are fixed."""
    performance = await _load(
        session, guard, ctx, performance_id, Capability.MANAGE_PERFORMANCES
    )
    fields = request.model_fields_set

    if "medal_id" in fields and request.medal_id is not None:
        await ensure_medal_exists(session, request.medal_id)

    time_seconds = request.time_seconds if "time_seconds" in fields else performance.time_seconds
    distance_meters = (
        request.distance_meters if "distance_meters" in fields else performance.distance_meters
    )
    event_date = request.event_date or performance.event_date
    event_details = request.event_details or performance.event_details

    discipline = await ensure_discipline_exists(session, performance.discipline_id)
    verify_performance_value(discipline, time_seconds, distance_meters)
    verify_performance_date(event_date)
    await ensure_unique_performance(
        session,
        performance.club_id,
        performance.athlete_id,
        performance.discipline_id,
        event_date,
        event_details,
        exclude_id=performance.performance_id,
    )

    if "medal_id" in fields:
        performance.medal_id = request.medal_id
    performance.time_seconds = time_seconds
    performance.distance_meters = distance_meters
    performance.event_date = event_date
    performance.event_details = event_details

    await session.commit()
    return _to_response(performance)


@router.delete("/{performance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_performance(
    performance_id: uuid.UUID,
    ctx: Annotated[SessionContext, Depends(get_current_context)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    performance = await _load(
        session, guard, ctx, performance_id, Capability.MANAGE_PERFORMANCES
    )
    await session.delete(performance)
    await session.commit()
