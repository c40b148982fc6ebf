"""Request guard pipeline shared by every privileged endpoint.

Order per request: authenticate -> resolve club -> verify capability ->
build club filter. Endpoints declare the capability they need through
``require_club`` / ``require_global`` and never check roles themselves.
Detail endpoints re-check the club recorded on the fetched row with
``RequestGuard.authorize_resource``.
"""

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query

from backend.app.api.auth import get_current_context, get_verifier
from backend.app.authz.errors import AuthorizationDenied, ClubContextMissing, OwnershipMismatch
from backend.app.authz.filters import ClubFilter, build_club_filter
from backend.app.authz.roles import Capability, Role
from backend.app.authz.verifier import (
    NO_CLUB_ACCESS,
    ClubScope,
    GlobalScope,
    PermissionVerifier,
)
from backend.app.db.context import SessionContext
from backend.app.utils.logging import StructuredAuthzLogger


@dataclass(frozen=True)
class ClubAccess:
    """Outcome of a successful club-scoped authorization."""

    session: SessionContext
    club_id: uuid.UUID
    role: Role
    club_filter: ClubFilter


def parse_club_id(value: str | uuid.UUID | None) -> uuid.UUID | None:
    """Parse a caller-supplied club id.

    Empty values count as absent. A value that is not a UUID cannot name a
    club the caller belongs to, so it is denied rather than reported as a
    validation error.

    Raises:
        AuthorizationDenied: If the value is present but not a UUID
    """
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except ValueError as e:
        raise AuthorizationDenied(NO_CLUB_ACCESS) from e


class RequestGuard:
    """Authorization steps of the request pipeline."""

    def __init__(
        self, verifier: PermissionVerifier, logger: StructuredAuthzLogger | None = None
    ) -> None:
        self._verifier = verifier
        self._logger = logger or StructuredAuthzLogger()

    @staticmethod
    def resolve_club_id(
        session: SessionContext, explicit_club_id: uuid.UUID | None
    ) -> uuid.UUID | None:
        """Explicit club id from the request, else the session's selection.

        Only picks a candidate; ``authorize_club`` decides whether it is allowed.
        """
        if explicit_club_id is not None:
            return explicit_club_id
        return session.selected_club_id

    async def authorize_club(
        self,
        session: SessionContext,
        capability: Capability,
        explicit_club_id: uuid.UUID | None = None,
    ) -> ClubAccess:
        """Resolve the club and verify a club-scoped capability in it.

        While a session is inside a club, an explicit club id may only
        repeat that club; the same rule ``authorize_resource`` applies to
        fetched rows.

        Raises:
            ClubContextMissing: If neither the request nor the session names a club
            AuthorizationDenied: If the explicit club differs from the selection,
                or the verifier denies
        """
        club_id = self.resolve_club_id(session, explicit_club_id)
        if club_id is None:
            raise ClubContextMissing()

        selected = session.selected_club_id
        if selected is not None and club_id != selected:
            self._logger.log_selection_mismatch(session.user_id, selected, club_id)
            raise AuthorizationDenied(NO_CLUB_ACCESS)

        decision = await self._verifier.verify(
            session.user_id, ClubScope(club_id=club_id, capability=capability)
        )
        if not decision.allowed or decision.membership is None:
            raise AuthorizationDenied(decision.reason)

        return ClubAccess(
            session=session,
            club_id=club_id,
            role=decision.membership.role,
            club_filter=build_club_filter(club_id),
        )

    async def authorize_global(self, session: SessionContext, capability: Capability) -> Role:
        """Verify a global capability; no club context is resolved.

        Returns:
            The role that satisfied the requirement

        Raises:
            AuthorizationDenied: If no active membership carries a high enough role
        """
        decision = await self._verifier.verify(
            session.user_id, GlobalScope(capability=capability)
        )
        if not decision.allowed or decision.membership is None:
            raise AuthorizationDenied(decision.reason)
        return decision.membership.role

    async def authorize_resource(
        self,
        session: SessionContext,
        resource_club_id: uuid.UUID,
        capability: Capability,
        resource: str,
    ) -> ClubAccess:
        """Re-check a fetched row against the club recorded on it.

        Only the row's own club is trusted; caller-supplied club ids are
        ignored. While a session is inside a club, rows of any other club
        are refused as well.

        Raises:
            OwnershipMismatch: If the row belongs to a club the caller has
                no active membership in, or to a club other than the selected one
            AuthorizationDenied: If the caller is a member but the role is too low
        """
        selected = session.selected_club_id
        if selected is not None and selected != resource_club_id:
            self._logger.log_ownership_denied(session.user_id, resource, resource_club_id)
            raise OwnershipMismatch(resource)

        decision = await self._verifier.verify(
            session.user_id, ClubScope(club_id=resource_club_id, capability=capability)
        )
        if not decision.allowed or decision.membership is None:
            if decision.reason == NO_CLUB_ACCESS:
                self._logger.log_ownership_denied(session.user_id, resource, resource_club_id)
                raise OwnershipMismatch(resource)
            raise AuthorizationDenied(decision.reason)

        return ClubAccess(
            session=session,
            club_id=resource_club_id,
            role=decision.membership.role,
            club_filter=build_club_filter(resource_club_id),
        )


def get_request_guard(
    verifier: Annotated[PermissionVerifier, Depends(get_verifier)],
) -> RequestGuard:
    """Request guard for this request."""
    return RequestGuard(verifier)


def require_club(capability: Capability) -> Callable[..., Awaitable[ClubAccess]]:
    """Dependency factory for club-scoped endpoints.

    The club comes from the ``club_id`` query parameter, falling back to
    the session's selected club.
    """

    async def dependency(
        session: Annotated[SessionContext, Depends(get_current_context)],
        guard: Annotated[RequestGuard, Depends(get_request_guard)],
        club_id: Annotated[str | None, Query()] = None,
    ) -> ClubAccess:
        return await guard.authorize_club(session, capability, parse_club_id(club_id))

    return dependency


def require_global(capability: Capability) -> Callable[..., Awaitable[SessionContext]]:
    """Dependency factory for endpoints guarding shared catalog data."""

    async def dependency(
        session: Annotated[SessionContext, Depends(get_current_context)],
        guard: Annotated[RequestGuard, Depends(get_request_guard)],
    ) -> SessionContext:
        await guard.authorize_global(session, capability)
        return session

    return dependency
