"""Fail-closed club filters for club-scoped queries."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, false


@dataclass(frozen=True)
class ClubFilter:
    """Predicate restricting rows to one club.

    A filter built without a club id matches no row at all. There is no way
    to build an unrestricted filter.
    """

    club_id: UUID | None

    @property
    def is_impossible(self) -> bool:
        return self.club_id is None

    def matches(self, row_club_id: UUID | None) -> bool:
        """Apply the filter to a single row's club id."""
        if self.club_id is None:
            return False
        return row_club_id == self.club_id

    def clause(self, model: Any) -> ColumnElement[bool]:
        """SQL predicate for a model with a ``club_id`` column."""
        if self.club_id is None:
            return false()
        return model.club_id == self.club_id


def build_club_filter(club_id: UUID | None) -> ClubFilter:
    """Build the club filter for a resolved club id (None -> match nothing)."""
    return ClubFilter(club_id=club_id)
