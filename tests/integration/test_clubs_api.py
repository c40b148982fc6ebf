"""Tests for /clubs endpoints and membership management."""

import pytest
from httpx import AsyncClient

from tests.helpers import EMAILS, World, bearer, headers_for, sign_in


@pytest.mark.asyncio
async def test_list_user_clubs_shows_roles_and_selection(client: AsyncClient, world: World) -> None:
    payload = await sign_in(client, "multi")

    response = await client.get("/clubs", headers=bearer(payload["access_token"]))

    assert response.status_code == 200
    data = response.json()
    assert data["selected_club_id"] is None
    clubs = {item["club_id"]: item for item in data["data"]}
    assert set(clubs) == {str(world.club_a), str(world.club_b)}
    assert clubs[str(world.club_b)]["name"] == "Metro Runners"
    assert clubs[str(world.club_a)]["role"] == "MEMBER"


@pytest.mark.asyncio
async def test_outsider_has_no_clubs(client: AsyncClient, world: World) -> None:
    payload = await sign_in(client, "outsider")

    response = await client.get("/clubs", headers=bearer(payload["access_token"]))

    assert response.json() == {"data": [], "selected_club_id": None}


@pytest.mark.asyncio
async def test_select_club_returns_new_token(client: AsyncClient, world: World) -> None:
    payload = await sign_in(client, "multi")

    response = await client.post(
        "/clubs/select",
        json={"club_id": str(world.club_a)},
        headers=bearer(payload["access_token"]),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["selected_club_id"] == str(world.club_a)
    assert data["version"] == payload["version"] + 1

    session = await client.get("/auth/session", headers=bearer(data["access_token"]))
    assert session.json()["selected_club_id"] == str(world.club_a)


@pytest.mark.asyncio
async def test_get_and_update_club(client: AsyncClient, world: World) -> None:
    owner = await headers_for(client, "owner_a")
    admin = await headers_for(client, "admin_a")

    response = await client.get(f"/clubs/{world.club_a}", headers=admin)
    assert response.status_code == 200
    assert response.json()["name"] == "Elite Athletics Club"

    response = await client.patch(
        f"/clubs/{world.club_a}", json={"description": "Sprinters"}, headers=admin
    )
    assert response.status_code == 403

    response = await client.patch(
        f"/clubs/{world.club_a}", json={"description": "Sprinters"}, headers=owner
    )
    assert response.status_code == 200
    assert response.json()["description"] == "Sprinters"

    response = await client.patch(
        f"/clubs/{world.club_a}", json={"name": "metro runners"}, headers=owner
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_get_foreign_club_is_denied(client: AsyncClient, world: World) -> None:
    headers = await headers_for(client, "owner_a")

    response = await client.get(f"/clubs/{world.club_b}", headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_member_list_requires_admin(client: AsyncClient, world: World) -> None:
    member = await headers_for(client, "member_a")
    admin = await headers_for(client, "admin_a")

    assert (await client.get(f"/clubs/{world.club_a}/members", headers=member)).status_code == 403

    response = await client.get(f"/clubs/{world.club_a}/members", headers=admin)
    assert response.status_code == 200
    assert len(response.json()) == 4


@pytest.mark.asyncio
async def test_admin_adds_member_but_cannot_grant_owner(client: AsyncClient, world: World) -> None:
    admin = await headers_for(client, "admin_a")

    response = await client.post(
        f"/clubs/{world.club_a}/members",
        json={"email": EMAILS["outsider"], "role": "OWNER"},
        headers=admin,
    )
    assert response.status_code == 403
    assert response.json() == {"detail": "Cannot grant a role above your own"}

    response = await client.post(
        f"/clubs/{world.club_a}/members",
        json={"email": EMAILS["outsider"], "role": "ADMIN"},
        headers=admin,
    )
    assert response.status_code == 201
    assert response.json()["role"] == "ADMIN"

    response = await client.post(
        f"/clubs/{world.club_a}/members",
        json={"email": EMAILS["outsider"]},
        headers=admin,
    )
    assert response.status_code == 409

    # The new member is auto-selected into the club on next sign-in
    payload = await sign_in(client, "outsider")
    assert payload["selected_club_id"] == str(world.club_a)


@pytest.mark.asyncio
async def test_add_unknown_user_is_404(client: AsyncClient, world: World) -> None:
    admin = await headers_for(client, "admin_a")

    response = await client.post(
        f"/clubs/{world.club_a}/members",
        json={"email": "nobody@example.com"},
        headers=admin,
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "User not found"}


@pytest.mark.asyncio
async def test_unknown_membership_is_404(client: AsyncClient, world: World) -> None:
    admin = await headers_for(client, "admin_a")

    response = await client.patch(
        f"/clubs/{world.club_a}/members/{world.outsider}",
        json={"role": "MEMBER"},
        headers=admin,
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "Membership not found"}


@pytest.mark.asyncio
async def test_deactivate_and_reactivate_member(client: AsyncClient, world: World) -> None:
    admin = await headers_for(client, "admin_a")
    member = await headers_for(client, "member_a")

    response = await client.patch(
        f"/clubs/{world.club_a}/members/{world.member_a}",
        json={"is_active": False},
        headers=admin,
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = await client.get(
        "/athletes", params={"club_id": str(world.club_a)}, headers=member
    )
    assert response.status_code == 403

    # Re-adding reactivates the existing row
    response = await client.post(
        f"/clubs/{world.club_a}/members",
        json={"email": EMAILS["member_a"]},
        headers=admin,
    )
    assert response.status_code == 201
    assert response.json()["is_active"] is True

    response = await client.get(
        "/athletes", params={"club_id": str(world.club_a)}, headers=member
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_admin_cannot_touch_owner(client: AsyncClient, world: World) -> None:
    admin = await headers_for(client, "admin_a")

    response = await client.patch(
        f"/clubs/{world.club_a}/members/{world.owner_a}",
        json={"is_active": False},
        headers=admin,
    )

    assert response.status_code == 403
    assert response.json() == {"detail": "Cannot modify a member with a higher role"}


@pytest.mark.asyncio
async def test_last_owner_cannot_step_down(client: AsyncClient, world: World) -> None:
    owner = await headers_for(client, "owner_a")

    response = await client.patch(
        f"/clubs/{world.club_a}/members/{world.owner_a}",
        json={"role": "ADMIN"},
        headers=owner,
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "A club must keep at least one active owner"}

    # With a second owner the first may step down
    response = await client.patch(
        f"/clubs/{world.club_a}/members/{world.admin_a}",
        json={"role": "OWNER"},
        headers=owner,
    )
    assert response.status_code == 200

    response = await client.patch(
        f"/clubs/{world.club_a}/members/{world.owner_a}",
        json={"role": "ADMIN"},
        headers=owner,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"


@pytest.mark.asyncio
async def test_role_change_applies_without_new_sign_in(client: AsyncClient, world: World) -> None:
    owner = await headers_for(client, "owner_a")
    member = await headers_for(client, "member_a")

    create = {"name": "U18", "ordinal": 2}
    assert (await client.post("/age-groups", json=create, headers=member)).status_code == 403

    response = await client.patch(
        f"/clubs/{world.club_a}/members/{world.member_a}",
        json={"role": "ADMIN"},
        headers=owner,
    )
    assert response.status_code == 200

    assert (await client.post("/age-groups", json=create, headers=member)).status_code == 201
