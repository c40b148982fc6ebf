"""Request-scoped session context for club tenancy."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SessionContext:
    """Authenticated session as seen by one request.

    Immutable: a club switch produces a new context with a higher version.
    The selected club is a weak reference; authorization always re-reads
    the membership store and never trusts a role carried with the session.
    """

    session_id: UUID
    user_id: UUID
    selected_club_id: UUID | None
    version: int
    expires_at: datetime
