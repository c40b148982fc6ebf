"""Performance API models."""

import uuid
from datetime import date

from pydantic import BaseModel, Field

MAX_TIME_SECONDS = 86400
MAX_DISTANCE_METERS = 1000
MAX_EVENT_DETAILS_LENGTH = 255


class PerformanceRequest(BaseModel):
    """Request body for recording a performance in the resolved club."""

    athlete_id: uuid.UUID
    discipline_id: uuid.UUID
    age_group_id: uuid.UUID
    medal_id: uuid.UUID | None = None
    event_date: date
    time_seconds: float | None = Field(None, gt=0, le=MAX_TIME_SECONDS)
    distance_meters: float | None = Field(None, gt=0, le=MAX_DISTANCE_METERS)
    event_details: str = Field(..., min_length=1, max_length=MAX_EVENT_DETAILS_LENGTH)


class PerformanceUpdateRequest(BaseModel):
    medal_id: uuid.UUID | None = None
    event_date: date | None = None
    time_seconds: float | None = Field(None, gt=0, le=MAX_TIME_SECONDS)
    distance_meters: float | None = Field(None, gt=0, le=MAX_DISTANCE_METERS)
    event_details: str | None = Field(None, min_length=1, max_length=MAX_EVENT_DETAILS_LENGTH)


class PerformanceResponse(BaseModel):
    performance_id: str
    club_id: str
    athlete_id: str
    discipline_id: str
    age_group_id: str
    medal_id: str | None
    event_date: date
    time_seconds: float | None
    distance_meters: float | None
    event_details: str
