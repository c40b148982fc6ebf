"""In-memory implementations of repository interfaces."""

import uuid
from dataclasses import replace
from datetime import datetime

from backend.app.authz.roles import Role
from backend.app.db.repositories import ClubMembershipView, MembershipRecord, SessionRecord


class InMemoryMembershipStore:
    """In-memory implementation of MembershipStore."""

    def __init__(self, club_names: dict[uuid.UUID, str] | None = None) -> None:
        self._memberships: dict[tuple[uuid.UUID, uuid.UUID], MembershipRecord] = {}
        self._club_names = dict(club_names or {})

    def add_club(self, club_id: uuid.UUID, name: str) -> None:
        """Register a club name for list_user_clubs."""
        self._club_names[club_id] = name

    async def get_membership(
        self, user_id: uuid.UUID, club_id: uuid.UUID
    ) -> MembershipRecord | None:
        """Get membership for a user in a club."""
        return self._memberships.get((user_id, club_id))

    async def list_active_memberships(self, user_id: uuid.UUID) -> list[MembershipRecord]:
        """List all active memberships of a user."""
        return [
            record
            for (member_id, _), record in self._memberships.items()
            if member_id == user_id and record.is_active
        ]

    async def list_user_clubs(self, user_id: uuid.UUID) -> list[ClubMembershipView]:
        """List active memberships with club details."""
        views = [
            ClubMembershipView(
                club_id=record.club_id,
                club_name=self._club_names.get(record.club_id, str(record.club_id)),
                club_description=None,
                role=record.role,
            )
            for record in await self.list_active_memberships(user_id)
        ]
        views.sort(key=lambda view: view.club_name)
        return views

    async def list_club_members(self, club_id: uuid.UUID) -> list[MembershipRecord]:
        """List every membership of a club."""
        return [
            record for (_, member_club), record in self._memberships.items()
            if member_club == club_id
        ]

    async def upsert_membership(
        self,
        user_id: uuid.UUID,
        club_id: uuid.UUID,
        role: Role,
        *,
        is_active: bool = True,
    ) -> MembershipRecord:
        """Create or update a membership."""
        record = MembershipRecord(
            user_id=user_id, club_id=club_id, role=role, is_active=is_active
        )
        self._memberships[(user_id, club_id)] = record
        return record


class InMemorySessionStore:
    """In-memory implementation of SessionStore."""

    def __init__(self) -> None:
        self._sessions: dict[uuid.UUID, SessionRecord] = {}

    async def create_session(
        self, user_id: uuid.UUID, selected_club_id: uuid.UUID | None, expires_at: datetime
    ) -> SessionRecord:
        """Create a new session."""
        record = SessionRecord(
            session_id=uuid.uuid4(),
            user_id=user_id,
            selected_club_id=selected_club_id,
            version=1,
            expires_at=expires_at,
            revoked=False,
        )
        self._sessions[record.session_id] = record
        return record

    async def get_session(self, session_id: uuid.UUID) -> SessionRecord | None:
        """Get session by ID."""
        return self._sessions.get(session_id)

    async def update_selection(
        self, session_id: uuid.UUID, club_id: uuid.UUID, *, expected_version: int
    ) -> SessionRecord | None:
        """Compare-and-set the selected club."""
        record = self._sessions.get(session_id)

        if record is None or record.revoked or record.version != expected_version:
            return None

        updated = replace(record, selected_club_id=club_id, version=record.version + 1)
        self._sessions[session_id] = updated
        return updated

    async def extend_session(
        self, session_id: uuid.UUID, expires_at: datetime
    ) -> SessionRecord | None:
        """Move the expiry of a live session."""
        record = self._sessions.get(session_id)

        if record is None or record.revoked:
            return None

        updated = replace(record, expires_at=expires_at)
        self._sessions[session_id] = updated
        return updated

    async def revoke_session(self, session_id: uuid.UUID) -> None:
        """Revoke a session."""
        record = self._sessions.get(session_id)
        if record is not None:
            self._sessions[session_id] = replace(record, revoked=True)
