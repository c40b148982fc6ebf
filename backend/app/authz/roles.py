"""Role policy: role ordering and the minimum role of every capability.

Pure and stateless. Club-scoped capabilities need the role in the club that
owns the data; global capabilities guard shared catalog data (seasons,
disciplines) and need the role in any club the caller belongs to.
"""

from enum import Enum


class Role(str, Enum):
    """Club role, totally ordered MEMBER < ADMIN < OWNER."""

    MEMBER = "MEMBER"
    ADMIN = "ADMIN"
    OWNER = "OWNER"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK: dict[Role, int] = {Role.MEMBER: 1, Role.ADMIN: 2, Role.OWNER: 3}


class CapabilityKind(str, Enum):
    """Whether a capability is checked against one club or across all clubs."""

    club = "club"
    global_ = "global"


class Capability(str, Enum):
    """Named operation an endpoint declares it needs."""

    VIEW_CLUB = "view_club"
    MANAGE_ATHLETES = "manage_athletes"
    MANAGE_PERFORMANCES = "manage_performances"
    MANAGE_AGE_GROUPS = "manage_age_groups"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_CLUB = "manage_club"
    MANAGE_SEASONS = "manage_seasons"
    MANAGE_DISCIPLINES = "manage_disciplines"


_CAPABILITY_POLICY: dict[Capability, tuple[CapabilityKind, Role]] = {
    Capability.VIEW_CLUB: (CapabilityKind.club, Role.MEMBER),
    Capability.MANAGE_ATHLETES: (CapabilityKind.club, Role.MEMBER),
    Capability.MANAGE_PERFORMANCES: (CapabilityKind.club, Role.MEMBER),
    Capability.MANAGE_AGE_GROUPS: (CapabilityKind.club, Role.ADMIN),
    Capability.MANAGE_MEMBERS: (CapabilityKind.club, Role.ADMIN),
    Capability.MANAGE_CLUB: (CapabilityKind.club, Role.OWNER),
    Capability.MANAGE_SEASONS: (CapabilityKind.global_, Role.ADMIN),
    Capability.MANAGE_DISCIPLINES: (CapabilityKind.global_, Role.ADMIN),
}


def required_role_for(capability: Capability) -> Role:
    """Minimum role needed for a capability."""
    return _CAPABILITY_POLICY[capability][1]


def capability_kind(capability: Capability) -> CapabilityKind:
    """Club-scoped or global."""
    return _CAPABILITY_POLICY[capability][0]


def is_global(capability: Capability) -> bool:
    return capability_kind(capability) is CapabilityKind.global_


def satisfies(actual: Role, required: Role) -> bool:
    """Check whether a held role meets a required role.

    Examples:
        >>> satisfies(Role.ADMIN, Role.MEMBER)
        True
        >>> satisfies(Role.MEMBER, Role.ADMIN)
        False
    """
    return actual.rank >= required.rank


def parse_role(value: str) -> Role:
    """Parse a stored role string.

    Raises:
        ValueError: If the value is not a known role
    """
    return Role(value.upper())
