"""Repository protocol interfaces for membership and session data."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from backend.app.authz.roles import Role


@dataclass(frozen=True)
class MembershipRecord:
    """Membership data record."""

    user_id: UUID
    club_id: UUID
    role: Role
    is_active: bool


@dataclass(frozen=True)
class ClubMembershipView:
    """Active membership joined with its club, for club pickers."""

    club_id: UUID
    club_name: str
    club_description: str | None
    role: Role


@dataclass(frozen=True)
class SessionRecord:
    """Stored session data record."""

    session_id: UUID
    user_id: UUID
    selected_club_id: UUID | None
    version: int
    expires_at: datetime
    revoked: bool


class MembershipStore(Protocol):
    """Durable store of (user, club, role, active) memberships."""

    async def get_membership(self, user_id: UUID, club_id: UUID) -> MembershipRecord | None:
        """Get membership for a user in a club, active or not.

        Args:
            user_id: User ID
            club_id: Club ID

        Returns:
            Membership record or None if the pair was never linked
        """
        ...

    async def list_active_memberships(self, user_id: UUID) -> list[MembershipRecord]:
        """List all active memberships of a user."""
        ...

    async def list_user_clubs(self, user_id: UUID) -> list[ClubMembershipView]:
        """List active memberships of a user with club details, ordered by club name."""
        ...

    async def list_club_members(self, club_id: UUID) -> list[MembershipRecord]:
        """List every membership of a club, including inactive ones."""
        ...

    async def upsert_membership(
        self, user_id: UUID, club_id: UUID, role: Role, *, is_active: bool = True
    ) -> MembershipRecord:
        """Create or update the membership row for (user, club).

        Args:
            user_id: User ID
            club_id: Club ID
            role: Role to store
            is_active: Active flag to store

        Returns:
            The stored membership record
        """
        ...


class SessionStore(Protocol):
    """Durable store of authenticated sessions."""

    async def create_session(
        self, user_id: UUID, selected_club_id: UUID | None, expires_at: datetime
    ) -> SessionRecord:
        """Create a new session with version 1."""
        ...

    async def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Get session by ID, including revoked or expired ones."""
        ...

    async def update_selection(
        self, session_id: UUID, club_id: UUID, *, expected_version: int
    ) -> SessionRecord | None:
        """Set the selected club if the stored version still matches.

        Args:
            session_id: Session ID
            club_id: New selected club
            expected_version: Version the caller read

        Returns:
            Updated record with version + 1, or None if the version moved on
        """
        ...

    async def extend_session(self, session_id: UUID, expires_at: datetime) -> SessionRecord | None:
        """Move the expiry of a live session without touching its selection."""
        ...

    async def revoke_session(self, session_id: UUID) -> None:
        """Revoke a session."""
        ...
