"""Authentication and session context API models."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=256)


class UserResponse(BaseModel):
    """Public user profile."""

    user_id: str
    email: str
    name: str


class SignInRequest(BaseModel):
    """Request body for POST /auth/signin."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionUpdateRequest(BaseModel):
    """Request body for PATCH /auth/session - the explicit update trigger.

    ``selected_club_id`` is kept as a string so forged, non-UUID ids reach
    the club switch and are refused with 403 like any other foreign club.
    """

    selected_club_id: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Current session context, with a freshly issued token when it changed."""

    session_id: str
    user_id: str
    selected_club_id: str | None
    version: int
    expires_at: datetime
    access_token: str | None = None
    token_type: str = "bearer"
