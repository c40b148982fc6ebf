"""Permission verifier - single entry point for every role check."""

from dataclasses import dataclass
from uuid import UUID

from backend.app.authz.roles import Capability, is_global, required_role_for, satisfies
from backend.app.db.repositories import MembershipRecord, MembershipStore
from backend.app.utils.logging import StructuredAuthzLogger
from backend.app.utils.metrics import PrometheusAuthzMetrics

NO_CLUB_ACCESS = "Access denied to this club"
INSUFFICIENT_PERMISSIONS = "Insufficient permissions"
GLOBAL_ROLE_REQUIRED = "Insufficient permissions - Admin or Owner role required"


@dataclass(frozen=True)
class ClubScope:
    """Capability checked against one specific club."""

    club_id: UUID
    capability: Capability


@dataclass(frozen=True)
class GlobalScope:
    """Capability checked against the caller's memberships in any club."""

    capability: Capability


Scope = ClubScope | GlobalScope


@dataclass(frozen=True)
class Decision:
    """Allow/deny outcome with a reason fit for the caller."""

    allowed: bool
    reason: str | None = None
    membership: MembershipRecord | None = None

    @classmethod
    def allow(cls, membership: MembershipRecord) -> "Decision":
        return cls(allowed=True, membership=membership)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)


class PermissionVerifier:
    """Decide whether a user may exercise a capability.

    Reads the membership store on every call; nothing is cached between
    calls, so role changes and deactivations apply to the next request.
    Store errors propagate unchanged.
    """

    def __init__(
        self,
        memberships: MembershipStore,
        logger: StructuredAuthzLogger | None = None,
        metrics: PrometheusAuthzMetrics | None = None,
    ) -> None:
        self._memberships = memberships
        self._logger = logger or StructuredAuthzLogger()
        self._metrics = metrics or PrometheusAuthzMetrics()

    async def verify(self, user_id: UUID, scope: Scope) -> Decision:
        """Verify a capability for a user.

        Args:
            user_id: Authenticated user ID
            scope: ClubScope or GlobalScope naming the capability

        Returns:
            Decision; deny reasons never reveal other users' roles
        """
        if isinstance(scope, GlobalScope):
            decision = await self._verify_global(user_id, scope.capability)
            scope_name = "global"
            club_id = None
        else:
            decision = await self._verify_club(user_id, scope.club_id, scope.capability)
            scope_name = "club"
            club_id = scope.club_id

        self._metrics.inc_decision(scope_name, "allow" if decision.allowed else "deny")
        self._logger.log_decision(
            user_id=user_id,
            club_id=club_id,
            capability=scope.capability.value,
            allowed=decision.allowed,
            reason=decision.reason,
        )
        return decision

    async def _verify_club(
        self, user_id: UUID, club_id: UUID, capability: Capability
    ) -> Decision:
        if is_global(capability):
            raise ValueError(f"{capability.value} is a global capability")

        membership = await self._memberships.get_membership(user_id, club_id)

        # Inactive rows grant nothing, whatever role they still hold
        if membership is None or not membership.is_active:
            return Decision.deny(NO_CLUB_ACCESS)

        if not satisfies(membership.role, required_role_for(capability)):
            return Decision.deny(INSUFFICIENT_PERMISSIONS)

        return Decision.allow(membership)

    async def _verify_global(self, user_id: UUID, capability: Capability) -> Decision:
        if not is_global(capability):
            raise ValueError(f"{capability.value} is a club-scoped capability")

        required = required_role_for(capability)
        for membership in await self._memberships.list_active_memberships(user_id):
            if membership.is_active and satisfies(membership.role, required):
                return Decision.allow(membership)

        return Decision.deny(GLOBAL_ROLE_REQUIRED)
