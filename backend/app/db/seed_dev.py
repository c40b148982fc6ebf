"""Dev seeding helper: lookup data, two clubs and one user per role."""

import asyncio
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.authz.roles import Role
from backend.app.config import get_settings
from backend.app.db.engine import get_async_engine
from backend.app.db.models import Club, Gender, Medal, Membership, Season, User
from backend.app.security.passwords import hash_password
from backend.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)

# Fixed IDs so local clients can refer to them
ELITE_CLUB_ID = uuid.UUID("00000000-0000-0000-0000-000000000101")
METRO_CLUB_ID = uuid.UUID("00000000-0000-0000-0000-000000000102")

DEV_PASSWORD = "password123"

GENDERS = [("Male", "M"), ("Female", "F")]
MEDALS = [("Gold", 1), ("Silver", 2), ("Bronze", 3)]
CLUBS = [
    (ELITE_CLUB_ID, "Elite Athletics Club", "Track and field club for competitive athletes"),
    (METRO_CLUB_ID, "Metro Runners", "Community running club"),
]
# email, name, memberships
USERS = [
    ("owner@example.com", "Olivia Owner", [(ELITE_CLUB_ID, Role.OWNER)]),
    ("admin@example.com", "Adam Admin", [(ELITE_CLUB_ID, Role.ADMIN)]),
    (
        "member@example.com",
        "Mia Member",
        [(ELITE_CLUB_ID, Role.MEMBER), (METRO_CLUB_ID, Role.MEMBER)],
    ),
    ("metro@example.com", "Max Metro", [(METRO_CLUB_ID, Role.OWNER)]),
]


async def _get_or_create(session: AsyncSession, model: type, lookup: dict, **values) -> object:
    result = await session.execute(select(model).filter_by(**lookup))
    row = result.scalar_one_or_none()
    if row is None:
        row = model(**lookup, **values)
        session.add(row)
        logger.info("Seeded %s %s", model.__name__, lookup)
    return row


async def seed_dev_data() -> None:
    """Seed lookup data, clubs, users and memberships.

    This function is idempotent - safe to run multiple times.
    """
    async with AsyncSession(get_async_engine()) as session:
        for name, initial in GENDERS:
            await _get_or_create(session, Gender, {"name": name}, initial=initial)
        for name, ordinal in MEDALS:
            await _get_or_create(session, Medal, {"name": name}, ordinal=ordinal)
        await _get_or_create(session, Season, {"name": "Outdoor"}, description="Outdoor season")
        await _get_or_create(session, Season, {"name": "Indoor"}, description="Indoor season")

        for club_id, name, description in CLUBS:
            await _get_or_create(session, Club, {"club_id": club_id}, name=name, description=description)
        await session.flush()

        password_hash = hash_password(DEV_PASSWORD)
        for email, name, memberships in USERS:
            user = await _get_or_create(
                session, User, {"email": email}, name=name, password_hash=password_hash
            )
            await session.flush()
            for club_id, role in memberships:
                await _get_or_create(
                    session,
                    Membership,
                    {"user_id": user.user_id, "club_id": club_id},  # type: ignore[attr-defined]
                    role=role.value,
                    is_active=True,
                )

        await session.commit()
        logger.info("Dev seeding complete")


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    asyncio.run(seed_dev_data())
