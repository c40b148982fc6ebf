"""Models package - re-exports for convenience."""

from backend.app.models.athletes import (
    AgeGroupRequest,
    AgeGroupResponse,
    AgeGroupUpdateRequest,
    AthleteListResponse,
    AthleteRequest,
    AthleteResponse,
    AthleteUpdateRequest,
    Pagination,
)
from backend.app.models.auth import (
    RegisterRequest,
    SessionResponse,
    SessionUpdateRequest,
    SignInRequest,
    UserResponse,
)
from backend.app.models.catalog import (
    DisciplineRequest,
    DisciplineResponse,
    GenderResponse,
    MedalResponse,
    SeasonDetailResponse,
    SeasonRequest,
    SeasonResponse,
)
from backend.app.models.clubs import (
    AddMemberRequest,
    ClubMembershipItem,
    ClubResponse,
    ClubSelectionRequest,
    ClubSelectionResponse,
    MemberResponse,
    UpdateClubRequest,
    UpdateMemberRequest,
    UserClubsResponse,
)
from backend.app.models.performances import (
    PerformanceRequest,
    PerformanceResponse,
    PerformanceUpdateRequest,
)

__all__ = [
    "AddMemberRequest",
    "AgeGroupRequest",
    "AgeGroupResponse",
    "AgeGroupUpdateRequest",
    "AthleteListResponse",
    "AthleteRequest",
    "AthleteResponse",
    "AthleteUpdateRequest",
    "ClubMembershipItem",
    "ClubResponse",
    "ClubSelectionRequest",
    "ClubSelectionResponse",
    "DisciplineRequest",
    "DisciplineResponse",
    "GenderResponse",
    "MedalResponse",
    "MemberResponse",
    "Pagination",
    "PerformanceRequest",
    "PerformanceResponse",
    "PerformanceUpdateRequest",
    "RegisterRequest",
    "SeasonDetailResponse",
    "SeasonRequest",
    "SeasonResponse",
    "SessionResponse",
    "SessionUpdateRequest",
    "SignInRequest",
    "UpdateClubRequest",
    "UpdateMemberRequest",
    "UserClubsResponse",
    "UserResponse",
]
