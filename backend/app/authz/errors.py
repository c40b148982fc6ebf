"""Access-control error taxonomy.

Every error carries the HTTP status the API maps it to. Authorization
failures are terminal for the request and are never retried.
"""

from fastapi import status


class AccessError(Exception):
    """Base class for authentication and authorization failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Access check failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(AccessError):
    """No session, or the session is invalid, expired or revoked."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class ClubContextMissing(AccessError):
    """A club-scoped operation was called without any resolvable club."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Club ID is required"


class AuthorizationDenied(AccessError):
    """Membership absent, inactive, or role too low."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied to this club"


class OwnershipMismatch(AuthorizationDenied):
    """A fetched resource belongs to a club the caller may not act in."""

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"Access denied to this {resource}")


class StaleSessionError(AccessError):
    """The session changed between read and write of a club switch."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Session was updated concurrently, please retry"


class MembershipLookupError(AccessError):
    """The membership store could not be read.

    Never interpreted as allow or deny; the request stops here.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to verify permissions"
