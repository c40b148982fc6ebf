"""SQL implementations of repository interfaces."""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.authz.errors import MembershipLookupError
from backend.app.authz.roles import Role, parse_role
from backend.app.db.models import AuthSession, Club, Membership
from backend.app.db.repositories import ClubMembershipView, MembershipRecord, SessionRecord

logger = logging.getLogger(__name__)


def _to_membership_record(row: Membership) -> MembershipRecord:
    return MembershipRecord(
        user_id=row.user_id,
        club_id=row.club_id,
        role=parse_role(row.role),
        is_active=row.is_active,
    )


def _to_session_record(row: AuthSession) -> SessionRecord:
    return SessionRecord(
        session_id=row.session_id,
        user_id=row.user_id,
        selected_club_id=row.selected_club_id,
        version=row.version,
        expires_at=row.expires_at,
        revoked=row.revoked,
    )


class SqlMembershipStore:
    """SQL implementation of MembershipStore.

    Read failures surface as MembershipLookupError so callers can never
    mistake a broken lookup for "no membership".
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_membership(
        self, user_id: uuid.UUID, club_id: uuid.UUID
    ) -> MembershipRecord | None:
        """Get membership for a user in a club."""
        try:
            result = await self._session.execute(
                select(Membership).where(
                    Membership.user_id == user_id, Membership.club_id == club_id
                )
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception("Membership lookup failed")
            raise MembershipLookupError() from e

        return _to_membership_record(row) if row is not None else None

    async def list_active_memberships(self, user_id: uuid.UUID) -> list[MembershipRecord]:
        """List all active memberships of a user."""
        try:
            result = await self._session.execute(
                select(Membership).where(
                    Membership.user_id == user_id, Membership.is_active.is_(True)
                )
            )
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.exception("Membership listing failed")
            raise MembershipLookupError() from e

        return [_to_membership_record(row) for row in rows]

    async def list_user_clubs(self, user_id: uuid.UUID) -> list[ClubMembershipView]:
        """List active memberships with club details."""
        try:
            result = await self._session.execute(
                select(Membership, Club)
                .join(Club, Club.club_id == Membership.club_id)
                .where(Membership.user_id == user_id, Membership.is_active.is_(True))
                .order_by(Club.name)
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.exception("Club listing failed")
            raise MembershipLookupError() from e

        return [
            ClubMembershipView(
                club_id=club.club_id,
                club_name=club.name,
                club_description=club.description,
                role=parse_role(membership.role),
            )
            for membership, club in rows
        ]

    async def list_club_members(self, club_id: uuid.UUID) -> list[MembershipRecord]:
        """List every membership of a club."""
        try:
            result = await self._session.execute(
                select(Membership)
                .where(Membership.club_id == club_id)
                .order_by(Membership.created_at)
            )
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.exception("Member listing failed")
            raise MembershipLookupError() from e

        return [_to_membership_record(row) for row in rows]

    async def upsert_membership(
        self,
        user_id: uuid.UUID,
        club_id: uuid.UUID,
        role: Role,
        *,
        is_active: bool = True,
    ) -> MembershipRecord:
        """Create or update the single (user, club) row."""
        result = await self._session.execute(
            select(Membership).where(
                Membership.user_id == user_id, Membership.club_id == club_id
            )
        )
        row = result.scalar_one_or_none()

        if row is None:
            row = Membership(
                user_id=user_id, club_id=club_id, role=role.value, is_active=is_active
            )
            self._session.add(row)
        else:
            row.role = role.value
            row.is_active = is_active
            row.updated_at = datetime.now(UTC)

        record = _to_membership_record(row)
        await self._session.commit()
        return record


class SqlSessionStore:
    """SQL implementation of SessionStore."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_session(
        self, user_id: uuid.UUID, selected_club_id: uuid.UUID | None, expires_at: datetime
    ) -> SessionRecord:
        """Create a new session."""
        row = AuthSession(
            session_id=uuid.uuid4(),
            user_id=user_id,
            selected_club_id=selected_club_id,
            version=1,
            expires_at=expires_at,
            revoked=False,
        )
        self._session.add(row)
        record = _to_session_record(row)
        await self._session.commit()
        return record

    async def get_session(self, session_id: uuid.UUID) -> SessionRecord | None:
        """Get session by ID."""
        result = await self._session.execute(
            select(AuthSession).where(AuthSession.session_id == session_id)
        )
        row = result.scalar_one_or_none()
        return _to_session_record(row) if row is not None else None

    async def update_selection(
        self, session_id: uuid.UUID, club_id: uuid.UUID, *, expected_version: int
    ) -> SessionRecord | None:
        """Compare-and-set the selected club in a single-row UPDATE."""
        result = await self._session.execute(
            update(AuthSession)
            .where(
                AuthSession.session_id == session_id,
                AuthSession.version == expected_version,
                AuthSession.revoked.is_(False),
            )
            .values(selected_club_id=club_id, version=AuthSession.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self._session.rollback()
            return None

        await self._session.commit()
        return await self._reload(session_id)

    async def extend_session(
        self, session_id: uuid.UUID, expires_at: datetime
    ) -> SessionRecord | None:
        """Move the expiry of a live session."""
        result = await self._session.execute(
            update(AuthSession)
            .where(AuthSession.session_id == session_id, AuthSession.revoked.is_(False))
            .values(expires_at=expires_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self._session.rollback()
            return None

        await self._session.commit()
        return await self._reload(session_id)

    async def revoke_session(self, session_id: uuid.UUID) -> None:
        """Revoke a session."""
        await self._session.execute(
            update(AuthSession)
            .where(AuthSession.session_id == session_id)
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        await self._session.commit()

    async def _reload(self, session_id: uuid.UUID) -> SessionRecord | None:
        result = await self._session.execute(
            select(AuthSession)
            .where(AuthSession.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_session_record(row) if row is not None else None
