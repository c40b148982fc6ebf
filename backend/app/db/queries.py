"""Tenancy-safe query helpers.

Every club-scoped select goes through a ClubFilter; a filter without a club
id produces a query that returns no rows.
"""

from typing import Any

from sqlalchemy import Select, select

from backend.app.authz.filters import ClubFilter
from backend.app.db.models import AgeGroup, Athlete, Performance


def query_club_scoped(model: Any, club_filter: ClubFilter) -> Select[Any]:
    """Select rows of a club-scoped model restricted by the club filter.

    Args:
        model: ORM model with a club_id column
        club_filter: Filter built from the resolved club id

    Returns:
        Select filtered by club_id, or matching nothing
    """
    return select(model).where(club_filter.clause(model))


def query_athletes(club_filter: ClubFilter) -> Select[Any]:
    """Query athlete table with club scoping enforced."""
    return query_club_scoped(Athlete, club_filter)


def query_age_groups(club_filter: ClubFilter) -> Select[Any]:
    """Query age_group table with club scoping enforced."""
    return query_club_scoped(AgeGroup, club_filter)


def query_performances(club_filter: ClubFilter) -> Select[Any]:
    """Query performance table with club scoping enforced."""
    return query_club_scoped(Performance, club_filter)
