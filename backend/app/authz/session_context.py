"""Session context manager - which club a session is currently inside.

State machine per session:

    Unselected --(auto-select | switch)--> Selected
    Selected   --(switch to other club)--> Selected'

There is no deselect operation; only ending the session clears context.
Every switch re-verifies membership against the store before anything is
written, so a forged club id can never reach the session.
"""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from backend.app.authz.errors import AuthorizationDenied, StaleSessionError, Unauthenticated
from backend.app.authz.roles import Capability
from backend.app.authz.verifier import ClubScope, PermissionVerifier
from backend.app.db.context import SessionContext
from backend.app.db.repositories import MembershipStore, SessionRecord, SessionStore
from backend.app.utils.logging import StructuredAuthzLogger
from backend.app.utils.metrics import PrometheusAuthzMetrics

logger = logging.getLogger(__name__)

SWITCH_DENIED = "Access denied to the specified club"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _coerce_club_id(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError):
        return None


def _to_context(record: SessionRecord, selected_club_id: UUID | None) -> SessionContext:
    return SessionContext(
        session_id=record.session_id,
        user_id=record.user_id,
        selected_club_id=selected_club_id,
        version=record.version,
        expires_at=_as_utc(record.expires_at),
    )


class SessionContextManager:
    """Create, load and switch session club context."""

    def __init__(
        self,
        memberships: MembershipStore,
        sessions: SessionStore,
        verifier: PermissionVerifier,
        *,
        session_ttl: timedelta = timedelta(days=30),
        logger: StructuredAuthzLogger | None = None,
        metrics: PrometheusAuthzMetrics | None = None,
    ) -> None:
        self._memberships = memberships
        self._sessions = sessions
        self._verifier = verifier
        self._session_ttl = session_ttl
        self._logger = logger or StructuredAuthzLogger()
        self._metrics = metrics or PrometheusAuthzMetrics()

    async def on_authenticate(self, user_id: UUID) -> UUID | None:
        """Initial club selection for a fresh login.

        Returns:
            The only club of a user with exactly one active membership,
            otherwise None (the user must select explicitly)
        """
        active = await self._memberships.list_active_memberships(user_id)
        if len(active) == 1:
            return active[0].club_id
        return None

    async def start_session(self, user_id: UUID, now: datetime | None = None) -> SessionContext:
        """Create a session for an authenticated user with its initial selection."""
        now = now or datetime.now(UTC)
        selected = await self.on_authenticate(user_id)
        record = await self._sessions.create_session(
            user_id, selected, expires_at=now + self._session_ttl
        )
        self._metrics.inc_session_started(auto_selected=selected is not None)
        logger.info(
            "Session started",
            extra={
                "structured": {
                    "session_id": str(record.session_id),
                    "user_id": str(user_id),
                    "auto_selected": selected is not None,
                }
            },
        )
        return _to_context(record, record.selected_club_id)

    async def load(
        self, session_id: UUID, user_id: UUID, now: datetime | None = None
    ) -> SessionContext:
        """Load a live session for a request.

        A stored selection whose membership has since been deactivated is
        reported as no selection; the stored row is left as it is.

        Raises:
            Unauthenticated: If the session is unknown, belongs to another
                user, is revoked or has expired
        """
        now = now or datetime.now(UTC)
        record = await self._sessions.get_session(session_id)

        if record is None or record.user_id != user_id or record.revoked:
            raise Unauthenticated("Invalid session")
        if _as_utc(record.expires_at) <= now:
            raise Unauthenticated("Session expired")

        selected = record.selected_club_id
        if selected is not None:
            membership = await self._memberships.get_membership(user_id, selected)
            if membership is None or not membership.is_active:
                selected = None

        return _to_context(record, selected)

    @staticmethod
    def current_selection(session: SessionContext) -> UUID | None:
        """Selected club of a session, or None."""
        return session.selected_club_id

    async def switch_club(self, session: SessionContext, club_id: UUID | str) -> SessionContext:
        """Switch the session to another club the user actively belongs to.

        The session is written only after verification succeeds; on any
        failure the previous selection stays in place. Ids that are not
        UUIDs are denied like any other club the user does not belong to.

        Raises:
            AuthorizationDenied: If the user has no active membership in club_id
            StaleSessionError: If the session changed since it was loaded
        """
        target = _coerce_club_id(club_id)
        allowed = False
        if target is not None:
            decision = await self._verifier.verify(
                session.user_id, ClubScope(club_id=target, capability=Capability.VIEW_CLUB)
            )
            allowed = decision.allowed

        if target is None or not allowed:
            self._metrics.inc_switch("denied")
            # Unparseable input is logged as None, never verbatim
            self._logger.log_switch(
                session.session_id, session.user_id, session.selected_club_id, target, "denied"
            )
            raise AuthorizationDenied(SWITCH_DENIED)

        record = await self._sessions.update_selection(
            session.session_id, target, expected_version=session.version
        )
        if record is None:
            self._metrics.inc_switch("stale")
            self._logger.log_switch(
                session.session_id, session.user_id, session.selected_club_id, target, "stale"
            )
            raise StaleSessionError()

        self._metrics.inc_switch("switched")
        self._logger.log_switch(
            session.session_id, session.user_id, session.selected_club_id, target, "switched"
        )
        return _to_context(record, target)

    async def refresh(
        self, session: SessionContext, now: datetime | None = None
    ) -> SessionContext:
        """Extend a session's lifetime; the selection is not touched."""
        now = now or datetime.now(UTC)
        record = await self._sessions.extend_session(
            session.session_id, expires_at=now + self._session_ttl
        )
        if record is None:
            raise Unauthenticated("Invalid session")
        return _to_context(record, session.selected_club_id)

    async def end(self, session: SessionContext) -> None:
        """Revoke a session (sign-out)."""
        await self._sessions.revoke_session(session.session_id)
        logger.info(
            "Session ended",
            extra={"structured": {"session_id": str(session.session_id)}},
        )
