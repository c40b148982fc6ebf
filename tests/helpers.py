"""Helpers shared by API tests."""

import uuid
from dataclasses import dataclass

from httpx import AsyncClient

PASSWORD = "correct-horse-battery"

EMAILS = {
    "owner_a": "owner.a@example.com",
    "admin_a": "admin.a@example.com",
    "member_a": "member.a@example.com",
    "multi": "multi@example.com",
    "owner_b": "owner.b@example.com",
    "outsider": "outsider@example.com",
}


async def sign_in(client: AsyncClient, key: str) -> dict:
    """Sign in a seeded user; returns the session payload."""
    response = await client.post(
        "/auth/signin", json={"email": EMAILS[key], "password": PASSWORD}
    )
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def headers_for(
    client: AsyncClient, key: str, club_id: uuid.UUID | None = None
) -> dict[str, str]:
    """Sign in and, if given, switch to club_id; returns auth headers."""
    payload = await sign_in(client, key)
    token = payload["access_token"]
    if club_id is not None and payload["selected_club_id"] != str(club_id):
        response = await client.post(
            "/clubs/select", json={"club_id": str(club_id)}, headers=bearer(token)
        )
        assert response.status_code == 200, response.text
        token = response.json()["access_token"]
    return bearer(token)


@dataclass
class World:
    """Seeded clubs, users and lookup rows.

    Club A: owner_a (OWNER), admin_a (ADMIN), member_a (MEMBER), multi (MEMBER)
    Club B: owner_b (OWNER), multi (MEMBER)
    outsider has no membership at all.
    """

    club_a: uuid.UUID
    club_b: uuid.UUID
    owner_a: uuid.UUID
    admin_a: uuid.UUID
    member_a: uuid.UUID
    multi: uuid.UUID
    owner_b: uuid.UUID
    outsider: uuid.UUID
    male: uuid.UUID
    female: uuid.UUID
    gold: uuid.UUID
    season: uuid.UUID
