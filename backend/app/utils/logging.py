"""Structured logging for authorization and session events."""

import logging
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once at application startup."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


class StructuredAuthzLogger:
    """Structured logger for authorization decisions and club switches."""

    def log_decision(
        self,
        user_id: UUID,
        club_id: UUID | None,
        capability: str,
        allowed: bool,
        reason: str | None = None,
    ) -> None:
        """Log one permission decision with structured data."""
        log_data: dict[str, Any] = {
            "user_id": str(user_id),
            "club_id": str(club_id) if club_id else None,
            "capability": capability,
            "outcome": "allow" if allowed else "deny",
        }

        if reason:
            log_data["reason"] = reason

        log_msg = f"Authorization: {capability} - {log_data['outcome']}"

        if allowed:
            logger.debug(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})

    def log_switch(
        self,
        session_id: UUID,
        user_id: UUID,
        from_club_id: UUID | None,
        to_club_id: UUID | None,
        outcome: str,
    ) -> None:
        """Log a club switch attempt."""
        log_data: dict[str, Any] = {
            "session_id": str(session_id),
            "user_id": str(user_id),
            "from_club_id": str(from_club_id) if from_club_id else None,
            "to_club_id": str(to_club_id) if to_club_id else None,
            "outcome": outcome,
        }

        log_msg = f"Club switch - {outcome}"

        if outcome == "switched":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_ownership_denied(
        self, user_id: UUID, resource: str, resource_club_id: UUID
    ) -> None:
        """Log access to a resource owned by another club."""
        logger.warning(
            f"Ownership check failed for {resource}",
            extra={
                "structured": {
                    "user_id": str(user_id),
                    "resource": resource,
                    "resource_club_id": str(resource_club_id),
                }
            },
        )

    def log_selection_mismatch(
        self, user_id: UUID, selected_club_id: UUID, requested_club_id: UUID
    ) -> None:
        """Log a request naming a club other than the session's selection."""
        logger.warning(
            "Requested club differs from selected club",
            extra={
                "structured": {
                    "user_id": str(user_id),
                    "selected_club_id": str(selected_club_id),
                    "requested_club_id": str(requested_club_id),
                }
            },
        )
