"""Unit tests for the request guard pipeline."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest

from backend.app.api.guard import RequestGuard, parse_club_id
from backend.app.authz.errors import AuthorizationDenied, ClubContextMissing, OwnershipMismatch
from backend.app.authz.roles import Capability, Role
from backend.app.authz.verifier import INSUFFICIENT_PERMISSIONS, PermissionVerifier
from backend.app.db.context import SessionContext
from backend.app.db.inmemory import InMemoryMembershipStore


def _session(user_id: uuid.UUID, selected: uuid.UUID | None) -> SessionContext:
    return SessionContext(
        session_id=uuid.uuid4(),
        user_id=user_id,
        selected_club_id=selected,
        version=1,
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )


@pytest.fixture
def store() -> InMemoryMembershipStore:
    return InMemoryMembershipStore()


@pytest.fixture
def guard(store: InMemoryMembershipStore) -> RequestGuard:
    return RequestGuard(PermissionVerifier(store))


def test_parse_club_id() -> None:
    club_id = uuid.uuid4()

    assert parse_club_id(None) is None
    assert parse_club_id("") is None
    assert parse_club_id(str(club_id)) == club_id
    assert parse_club_id(club_id) == club_id

    with pytest.raises(AuthorizationDenied):
        parse_club_id("fake-unauthorized-club-id")


def test_resolve_prefers_explicit_club_id() -> None:
    selected, explicit = uuid.uuid4(), uuid.uuid4()
    session = _session(uuid.uuid4(), selected)

    assert RequestGuard.resolve_club_id(session, explicit) == explicit
    assert RequestGuard.resolve_club_id(session, None) == selected


@pytest.mark.asyncio
async def test_explicit_own_club_other_than_selection_is_denied(
    store: InMemoryMembershipStore, guard: RequestGuard
) -> None:
    user_id, selected, other = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await store.upsert_membership(user_id, selected, Role.MEMBER)
    await store.upsert_membership(user_id, other, Role.OWNER)
    session = _session(user_id, selected)

    with pytest.raises(AuthorizationDenied) as exc_info:
        await guard.authorize_club(session, Capability.VIEW_CLUB, other)
    assert exc_info.value.detail == "Access denied to this club"

    access = await guard.authorize_club(session, Capability.VIEW_CLUB, selected)
    assert access.club_id == selected

    # Without a selection the explicit club is used as given
    access = await guard.authorize_club(_session(user_id, None), Capability.VIEW_CLUB, other)
    assert access.club_id == other


@pytest.mark.asyncio
async def test_no_club_anywhere_is_club_context_missing(guard: RequestGuard) -> None:
    with pytest.raises(ClubContextMissing) as exc_info:
        await guard.authorize_club(_session(uuid.uuid4(), None), Capability.VIEW_CLUB)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Club ID is required"


@pytest.mark.asyncio
async def test_authorized_club_yields_scoped_filter(
    store: InMemoryMembershipStore, guard: RequestGuard
) -> None:
    user_id, club_id = uuid.uuid4(), uuid.uuid4()
    await store.upsert_membership(user_id, club_id, Role.ADMIN)

    access = await guard.authorize_club(_session(user_id, club_id), Capability.MANAGE_AGE_GROUPS)

    assert access.club_id == club_id
    assert access.role is Role.ADMIN
    assert access.club_filter.club_id == club_id


@pytest.mark.asyncio
async def test_explicit_foreign_club_is_denied(
    store: InMemoryMembershipStore, guard: RequestGuard
) -> None:
    user_id, own_club, foreign_club = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await store.upsert_membership(user_id, own_club, Role.OWNER)

    with pytest.raises(AuthorizationDenied) as exc_info:
        await guard.authorize_club(
            _session(user_id, own_club), Capability.VIEW_CLUB, foreign_club
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Access denied to this club"


@pytest.mark.asyncio
async def test_global_capability_needs_no_club(
    store: InMemoryMembershipStore, guard: RequestGuard
) -> None:
    user_id = uuid.uuid4()
    await store.upsert_membership(user_id, uuid.uuid4(), Role.OWNER)

    role = await guard.authorize_global(_session(user_id, None), Capability.MANAGE_SEASONS)

    assert role is Role.OWNER


@pytest.mark.asyncio
async def test_resource_in_foreign_club_is_ownership_mismatch(
    store: InMemoryMembershipStore, guard: RequestGuard
) -> None:
    user_id, own_club, foreign_club = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await store.upsert_membership(user_id, own_club, Role.OWNER)

    with pytest.raises(OwnershipMismatch) as exc_info:
        await guard.authorize_resource(
            _session(user_id, None), foreign_club, Capability.VIEW_CLUB, "athlete"
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Access denied to this athlete"


@pytest.mark.asyncio
async def test_resource_outside_current_selection_is_refused(
    store: InMemoryMembershipStore, guard: RequestGuard
) -> None:
    """Membership in the row's club is not enough while working in another club."""
    user_id, club_a, club_b = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await store.upsert_membership(user_id, club_a, Role.MEMBER)
    await store.upsert_membership(user_id, club_b, Role.MEMBER)

    with pytest.raises(OwnershipMismatch):
        await guard.authorize_resource(
            _session(user_id, club_a), club_b, Capability.VIEW_CLUB, "performance"
        )


@pytest.mark.asyncio
async def test_resource_with_low_role_is_insufficient_permissions(
    store: InMemoryMembershipStore, guard: RequestGuard
) -> None:
    user_id, club_id = uuid.uuid4(), uuid.uuid4()
    await store.upsert_membership(user_id, club_id, Role.MEMBER)

    with pytest.raises(AuthorizationDenied) as exc_info:
        await guard.authorize_resource(
            _session(user_id, club_id), club_id, Capability.MANAGE_AGE_GROUPS, "age group"
        )

    assert exc_info.value.detail == INSUFFICIENT_PERMISSIONS
