"""Club and membership API models."""

from pydantic import BaseModel, EmailStr, Field, model_validator

from backend.app.authz.roles import Role


class ClubMembershipItem(BaseModel):
    """One club the caller belongs to, with the caller's role in it."""

    club_id: str
    name: str
    description: str | None
    role: Role


class UserClubsResponse(BaseModel):
    """Response for GET /clubs."""

    data: list[ClubMembershipItem]
    selected_club_id: str | None


class ClubSelectionRequest(BaseModel):
    """Request body for POST /clubs/select."""

    club_id: str = Field(..., min_length=1)


class ClubSelectionResponse(BaseModel):
    """Response for POST /clubs/select."""

    selected_club_id: str
    version: int
    access_token: str
    message: str = "Club selection processed successfully"


class ClubResponse(BaseModel):
    """Club details."""

    club_id: str
    name: str
    description: str | None


class UpdateClubRequest(BaseModel):
    """Request body for PATCH /clubs/{club_id}."""

    name: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = None


class MemberResponse(BaseModel):
    """Membership of one user in a club."""

    user_id: str
    club_id: str
    role: Role
    is_active: bool


class AddMemberRequest(BaseModel):
    """Request body for POST /clubs/{club_id}/members."""

    email: EmailStr
    role: Role = Role.MEMBER


class UpdateMemberRequest(BaseModel):
    """Request body for PATCH /clubs/{club_id}/members/{user_id}."""

    role: Role | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def require_change(self) -> "UpdateMemberRequest":
        if self.role is None and self.is_active is None:
            raise ValueError("role or is_active must be provided")
        return self
