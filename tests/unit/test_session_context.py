"""Unit tests for the session context manager."""

import logging
import uuid
from datetime import UTC, datetime, timedelta

import pytest

from backend.app.authz.errors import AuthorizationDenied, StaleSessionError, Unauthenticated
from backend.app.authz.roles import Role
from backend.app.authz.session_context import SWITCH_DENIED, SessionContextManager
from backend.app.authz.verifier import PermissionVerifier
from backend.app.db.inmemory import InMemoryMembershipStore, InMemorySessionStore


@pytest.fixture
def memberships() -> InMemoryMembershipStore:
    return InMemoryMembershipStore()


@pytest.fixture
def sessions() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def manager(
    memberships: InMemoryMembershipStore, sessions: InMemorySessionStore
) -> SessionContextManager:
    return SessionContextManager(memberships, sessions, PermissionVerifier(memberships))


@pytest.mark.asyncio
async def test_single_membership_is_auto_selected(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    user_id, club_id = uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_id, Role.MEMBER)

    ctx = await manager.start_session(user_id)

    assert ctx.selected_club_id == club_id
    assert SessionContextManager.current_selection(ctx) == club_id


@pytest.mark.asyncio
async def test_multiple_memberships_start_unselected(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    user_id = uuid.uuid4()
    await memberships.upsert_membership(user_id, uuid.uuid4(), Role.MEMBER)
    await memberships.upsert_membership(user_id, uuid.uuid4(), Role.ADMIN)

    ctx = await manager.start_session(user_id)

    assert ctx.selected_club_id is None


@pytest.mark.asyncio
async def test_no_membership_starts_unselected(manager: SessionContextManager) -> None:
    assert (await manager.on_authenticate(uuid.uuid4())) is None


@pytest.mark.asyncio
async def test_inactive_memberships_do_not_count_for_auto_select(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    user_id, active_club = uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, active_club, Role.MEMBER)
    await memberships.upsert_membership(user_id, uuid.uuid4(), Role.OWNER, is_active=False)

    assert (await manager.on_authenticate(user_id)) == active_club


@pytest.mark.asyncio
async def test_switch_to_member_club_updates_selection(
    memberships: InMemoryMembershipStore,
    sessions: InMemorySessionStore,
    manager: SessionContextManager,
) -> None:
    user_id, club_a, club_b = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_a, Role.MEMBER)
    await memberships.upsert_membership(user_id, club_b, Role.MEMBER)
    ctx = await manager.start_session(user_id)

    switched = await manager.switch_club(ctx, club_b)

    assert switched.selected_club_id == club_b
    assert switched.version == ctx.version + 1
    stored = await sessions.get_session(ctx.session_id)
    assert stored is not None and stored.selected_club_id == club_b


@pytest.mark.asyncio
async def test_switch_accepts_string_club_id(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    user_id, club_id = uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_id, Role.MEMBER)
    await memberships.upsert_membership(user_id, uuid.uuid4(), Role.MEMBER)
    ctx = await manager.start_session(user_id)

    switched = await manager.switch_club(ctx, str(club_id))

    assert switched.selected_club_id == club_id


@pytest.mark.parametrize("forged", ["fake-unauthorized-club-id", ""])
@pytest.mark.asyncio
async def test_switch_to_forged_id_is_denied_and_keeps_selection(
    forged: str,
    memberships: InMemoryMembershipStore,
    sessions: InMemorySessionStore,
    manager: SessionContextManager,
) -> None:
    user_id, club_id = uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_id, Role.MEMBER)
    ctx = await manager.start_session(user_id)

    with pytest.raises(AuthorizationDenied) as exc_info:
        await manager.switch_club(ctx, forged)

    assert exc_info.value.detail == SWITCH_DENIED
    stored = await sessions.get_session(ctx.session_id)
    assert stored is not None
    assert stored.selected_club_id == club_id
    assert stored.version == ctx.version


@pytest.mark.asyncio
async def test_denied_switch_never_logs_raw_input(
    memberships: InMemoryMembershipStore,
    manager: SessionContextManager,
    caplog: pytest.LogCaptureFixture,
) -> None:
    user_id = uuid.uuid4()
    await memberships.upsert_membership(user_id, uuid.uuid4(), Role.MEMBER)
    ctx = await manager.start_session(user_id)
    forged = "club\nINFO forged log line"

    with caplog.at_level(logging.WARNING, logger="backend.app.utils.logging"):
        with pytest.raises(AuthorizationDenied):
            await manager.switch_club(ctx, forged)

    (record,) = [r for r in caplog.records if r.getMessage() == "Club switch - denied"]
    assert record.structured["to_club_id"] is None
    assert "forged" not in caplog.text


@pytest.mark.asyncio
async def test_switch_to_non_member_club_is_denied(
    memberships: InMemoryMembershipStore,
    sessions: InMemorySessionStore,
    manager: SessionContextManager,
) -> None:
    user_id, own_club, foreign_club = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, own_club, Role.OWNER)
    await memberships.upsert_membership(uuid.uuid4(), foreign_club, Role.OWNER)
    ctx = await manager.start_session(user_id)

    with pytest.raises(AuthorizationDenied):
        await manager.switch_club(ctx, foreign_club)

    stored = await sessions.get_session(ctx.session_id)
    assert stored is not None and stored.selected_club_id == own_club


@pytest.mark.asyncio
async def test_switch_to_deactivated_club_is_denied(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    user_id, club_a, club_b = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_a, Role.MEMBER)
    await memberships.upsert_membership(user_id, club_b, Role.MEMBER, is_active=False)
    ctx = await manager.start_session(user_id)

    with pytest.raises(AuthorizationDenied):
        await manager.switch_club(ctx, club_b)


@pytest.mark.asyncio
async def test_switch_with_stale_version_is_rejected(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    """Two concurrent switches from the same snapshot: the second loses."""
    user_id, club_a, club_b = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_a, Role.MEMBER)
    await memberships.upsert_membership(user_id, club_b, Role.MEMBER)
    ctx = await manager.start_session(user_id)

    await manager.switch_club(ctx, club_a)

    with pytest.raises(StaleSessionError):
        await manager.switch_club(ctx, club_b)


@pytest.mark.asyncio
async def test_load_reports_deactivated_selection_as_none(
    memberships: InMemoryMembershipStore,
    sessions: InMemorySessionStore,
    manager: SessionContextManager,
) -> None:
    user_id, club_id = uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_id, Role.MEMBER)
    ctx = await manager.start_session(user_id)

    await memberships.upsert_membership(user_id, club_id, Role.MEMBER, is_active=False)
    loaded = await manager.load(ctx.session_id, user_id)

    assert loaded.selected_club_id is None
    stored = await sessions.get_session(ctx.session_id)
    assert stored is not None and stored.selected_club_id == club_id


@pytest.mark.asyncio
async def test_load_rejects_expired_revoked_and_foreign_sessions(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    user_id = uuid.uuid4()
    now = datetime.now(UTC)
    ctx = await manager.start_session(user_id, now=now)

    with pytest.raises(Unauthenticated):
        await manager.load(ctx.session_id, uuid.uuid4())

    with pytest.raises(Unauthenticated):
        await manager.load(ctx.session_id, user_id, now=now + timedelta(days=31))

    await manager.end(ctx)
    with pytest.raises(Unauthenticated):
        await manager.load(ctx.session_id, user_id)


@pytest.mark.asyncio
async def test_refresh_extends_expiry_without_touching_selection(
    memberships: InMemoryMembershipStore, manager: SessionContextManager
) -> None:
    user_id, club_id = uuid.uuid4(), uuid.uuid4()
    await memberships.upsert_membership(user_id, club_id, Role.MEMBER)
    start = datetime.now(UTC)
    ctx = await manager.start_session(user_id, now=start)

    refreshed = await manager.refresh(ctx, now=start + timedelta(days=1))

    assert refreshed.expires_at > ctx.expires_at
    assert refreshed.selected_club_id == club_id
    assert refreshed.version == ctx.version
