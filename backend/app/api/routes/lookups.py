"""Read-only reference data used by athlete and performance forms."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_context
from backend.app.db.context import SessionContext
from backend.app.db.engine import get_session
from backend.app.db.models import Gender, Medal
from backend.app.models.catalog import GenderResponse, MedalResponse

router = APIRouter(tags=["lookups"])


@router.get("/genders", response_model=list[GenderResponse])
async def list_genders(
    _ctx: Annotated[SessionContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[GenderResponse]:
    result = await session.execute(select(Gender).order_by(Gender.name))
    return [
        GenderResponse(gender_id=str(g.gender_id), name=g.name, initial=g.initial)
        for g in result.scalars().all()
    ]


@router.get("/medals", response_model=list[MedalResponse])
async def list_medals(
    _ctx: Annotated[SessionContext, Depends(get_current_context)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[MedalResponse]:
    result = await session.execute(select(Medal).order_by(Medal.ordinal))
    return [
        MedalResponse(medal_id=str(m.medal_id), name=m.name, ordinal=m.ordinal)
        for m in result.scalars().all()
    ]
