"""Athlete and age group API models."""

import uuid

from pydantic import BaseModel, Field


class AgeGroupRequest(BaseModel):
    """Request body for creating an age group in the resolved club."""

    name: str = Field(..., min_length=1, max_length=32)
    ordinal: int = Field(..., ge=1)


class AgeGroupUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=32)
    ordinal: int | None = Field(None, ge=1)


class AgeGroupResponse(BaseModel):
    age_group_id: str
    club_id: str
    name: str
    ordinal: int


class AthleteRequest(BaseModel):
    """Request body for creating an athlete in the resolved club."""

    first_name: str = Field(..., min_length=1, max_length=64)
    last_name: str = Field(..., min_length=1, max_length=64)
    gender_id: uuid.UUID
    age_group_id: uuid.UUID | None = None


class AthleteUpdateRequest(BaseModel):
    """Partial athlete update. An explicit null ``age_group_id`` clears the age group."""

    first_name: str | None = Field(None, min_length=1, max_length=64)
    last_name: str | None = Field(None, min_length=1, max_length=64)
    gender_id: uuid.UUID | None = None
    age_group_id: uuid.UUID | None = None


class AthleteResponse(BaseModel):
    athlete_id: str
    club_id: str
    first_name: str
    last_name: str
    gender_id: str
    age_group_id: str | None


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class AthleteListResponse(BaseModel):
    """Response for GET /athletes."""

    data: list[AthleteResponse]
    pagination: Pagination
