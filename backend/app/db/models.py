"""SQLAlchemy ORM models for clubs, memberships, sessions and club data."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class User(Base):
    """User table - identity shared across clubs."""

    __tablename__ = "user_account"

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    memberships: Mapped[list["Membership"]] = relationship("Membership", back_populates="user")


class Club(Base):
    """Club table - the tenant boundary."""

    __tablename__ = "club"

    club_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    memberships: Mapped[list["Membership"]] = relationship("Membership", back_populates="club")


class Membership(Base):
    """Club membership - the only authorization-relevant relation.

    Rows are deactivated, never deleted, so history is preserved.
    """

    __tablename__ = "club_membership"
    __table_args__ = (
        UniqueConstraint("user_id", "club_id", name="uq_membership_user_club"),
        Index("idx_membership_user_active", "user_id", "is_active"),
    )

    membership_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("user_account.user_id"), nullable=False
    )
    club_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("club.club_id"), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="memberships")
    club: Mapped["Club"] = relationship("Club", back_populates="memberships")


class AuthSession(Base):
    """Authenticated session - holds the selected club for one login."""

    __tablename__ = "auth_session"
    __table_args__ = (Index("idx_session_user", "user_id", "revoked"),)

    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("user_account.user_id", ondelete="CASCADE"), nullable=False
    )
    selected_club_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("club.club_id"), nullable=True
    )
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Gender(Base):
    """Gender lookup table."""

    __tablename__ = "gender"

    gender_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    initial: Mapped[str] = mapped_column(String(1), nullable=False)


class Medal(Base):
    """Medal lookup table."""

    __tablename__ = "medal"

    medal_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    ordinal: Mapped[int] = mapped_column(Integer, nullable=False)


class Season(Base):
    """Season table - global catalog data."""

    __tablename__ = "season"

    season_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Discipline(Base):
    """Discipline table - global catalog data, grouped by season."""

    __tablename__ = "discipline"
    __table_args__ = (UniqueConstraint("season_id", "name", name="uq_discipline_season_name"),)

    discipline_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    season_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("season.season_id"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_timed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    is_measured: Mapped[bool] = mapped_column(Boolean, nullable=False)
    team_size: Mapped[int | None] = mapped_column(Integer, nullable=True)

    season: Mapped["Season"] = relationship("Season")


class AgeGroup(Base):
    """Age group table - club-scoped."""

    __tablename__ = "age_group"
    __table_args__ = (UniqueConstraint("club_id", "name", name="uq_age_group_club_name"),)

    age_group_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("club.club_id"), nullable=False)
    name: Mapped[str] = mapped_column(String(32), nullable=False)
    ordinal: Mapped[int] = mapped_column(Integer, nullable=False)


class Athlete(Base):
    """Athlete table - club-scoped."""

    __tablename__ = "athlete"
    __table_args__ = (Index("idx_athlete_club_name", "club_id", "last_name", "first_name"),)

    athlete_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("club.club_id"), nullable=False)
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    gender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("gender.gender_id"), nullable=False
    )
    age_group_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("age_group.age_group_id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Performance(Base):
    """Performance table - club-scoped result of one athlete in one discipline."""

    __tablename__ = "performance"
    __table_args__ = (Index("idx_performance_club_date", "club_id", "event_date"),)

    performance_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    club_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("club.club_id"), nullable=False)
    athlete_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("athlete.athlete_id"), nullable=False
    )
    discipline_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("discipline.discipline_id"), nullable=False
    )
    age_group_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("age_group.age_group_id"), nullable=False
    )
    medal_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("medal.medal_id"), nullable=True
    )
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    time_seconds: Mapped[float | None] = mapped_column(Float, nullable=True)
    distance_meters: Mapped[float | None] = mapped_column(Float, nullable=True)
    event_details: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
