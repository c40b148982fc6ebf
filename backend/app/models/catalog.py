"""Shared catalog API models: seasons, disciplines, genders, medals."""

import uuid

from pydantic import BaseModel, Field


class SeasonRequest(BaseModel):
    """Request body for creating or updating a season."""

    name: str = Field(..., min_length=1, max_length=64)
    description: str | None = None


class SeasonResponse(BaseModel):
    season_id: str
    name: str
    description: str | None


class SeasonDetailResponse(SeasonResponse):
    discipline_count: int


class DisciplineRequest(BaseModel):
    """Request body for creating or updating a discipline.

    The timed/measured exclusivity rule is checked after authorization so
    that unauthorized callers learn nothing from validation messages.
    """

    season_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=128)
    description: str | None = None
    is_timed: bool
    is_measured: bool
    team_size: int | None = Field(None, ge=1, le=10)


class DisciplineResponse(BaseModel):
    discipline_id: str
    season_id: str
    season_name: str
    name: str
    description: str | None
    is_timed: bool
    is_measured: bool
    team_size: int | None


class GenderResponse(BaseModel):
    gender_id: str
    name: str
    initial: str


class MedalResponse(BaseModel):
    medal_id: str
    name: str
    ordinal: int
