"""
SQLAlchemy 2.x ORM models for the league hierarchy.

League -> Conference -> Division -> Team -> Player, one table per level.
Parent-to-children relationships cascade deletes both in the ORM and in the
foreign key definition, so a hard delete removes the whole subtree. Team and
Player carry the soft-delete capability.

Models use the Mapped[] type annotation syntax and mapped_column.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates

from league_data.db.validators import validate_bounded_text, validate_range

NAME_MAX_LENGTH = 100
ABBREVIATION_MAX_LENGTH = 10


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s",
        }
    )


class SoftDeleteMixin:
    """
    Deletion-state attributes for record types that are deleted logically.

    A model inheriting this mixin is never removed by the repositories:
    delete sets is_deleted and deleted_at instead, and default reads hide it.
    """

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(String(100), nullable=True)


def is_soft_deletable(model: type) -> bool:
    """Return True if the mapped class carries the soft-delete capability."""
    return isinstance(model, type) and issubclass(model, SoftDeleteMixin)


class League(Base):
    """Top of the hierarchy. `code` is an optional business key."""

    __tablename__ = "leagues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str | None] = mapped_column(String(20), nullable=True, unique=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    abbreviation: Mapped[str] = mapped_column(String(ABBREVIATION_MAX_LENGTH), nullable=False)

    # Relationships
    conferences: Mapped[list[Conference]] = relationship(
        "Conference",
        back_populates="league",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, NAME_MAX_LENGTH, required=True)

    @validates("abbreviation")
    def _validate_abbreviation(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, ABBREVIATION_MAX_LENGTH, required=True)

    def __repr__(self) -> str:
        return f"<League(id={self.id}, name={self.name})>"


class Conference(Base):
    __tablename__ = "conferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    league_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leagues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    abbreviation: Mapped[str] = mapped_column(String(ABBREVIATION_MAX_LENGTH), nullable=False)

    # Relationships
    league: Mapped[League] = relationship("League", back_populates="conferences")
    divisions: Mapped[list[Division]] = relationship(
        "Division",
        back_populates="conference",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, NAME_MAX_LENGTH, required=True)

    @validates("abbreviation")
    def _validate_abbreviation(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, ABBREVIATION_MAX_LENGTH, required=True)

    def __repr__(self) -> str:
        return f"<Conference(id={self.id}, league_id={self.league_id}, name={self.name})>"


class Division(Base):
    __tablename__ = "divisions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    conference_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("conferences.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    abbreviation: Mapped[str] = mapped_column(String(ABBREVIATION_MAX_LENGTH), nullable=False)

    # Relationships
    conference: Mapped[Conference] = relationship("Conference", back_populates="divisions")
    teams: Mapped[list[Team]] = relationship(
        "Team",
        back_populates="division",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, NAME_MAX_LENGTH, required=True)

    @validates("abbreviation")
    def _validate_abbreviation(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, ABBREVIATION_MAX_LENGTH, required=True)

    def __repr__(self) -> str:
        return f"<Division(id={self.id}, conference_id={self.conference_id}, name={self.name})>"


class Team(SoftDeleteMixin, Base):
    """
    A franchise within a division.

    Carries its season record (win/loss/tie, points for/against) and the
    stadium it plays in. `code` is an optional business key.
    """

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True, unique=True)
    division_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("divisions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    abbreviation: Mapped[str | None] = mapped_column(
        String(ABBREVIATION_MAX_LENGTH), nullable=True
    )

    # Season record
    win: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    loss: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tie: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_for: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_against: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Stadium
    stadium: Mapped[str | None] = mapped_column(String(100), nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    address: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(20), nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Relationships
    division: Mapped[Division] = relationship("Division", back_populates="teams")
    players: Mapped[list[Player]] = relationship(
        "Player",
        back_populates="team",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, NAME_MAX_LENGTH, required=True)

    @validates("abbreviation")
    def _validate_abbreviation(self, key: str, value: str | None) -> str | None:
        return validate_bounded_text(key, value, ABBREVIATION_MAX_LENGTH, required=False)

    @validates("win", "loss", "tie")
    def _validate_record(self, key: str, value: int) -> int:
        return validate_range(key, value, 0, 500)

    @validates("capacity")
    def _validate_capacity(self, key: str, value: int) -> int:
        return validate_range(key, value, 0, 500_000)

    @validates("latitude")
    def _validate_latitude(self, key: str, value: float) -> float:
        return validate_range(key, value, -90, 90)

    @validates("longitude")
    def _validate_longitude(self, key: str, value: float) -> float:
        return validate_range(key, value, -180, 180)

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, division_id={self.division_id}, name={self.name})>"


class Player(SoftDeleteMixin, Base):
    """
    A rostered player.

    team_id may be unset while a player is being created and assigned.
    """

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    position: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    # Physical attributes
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[int | None] = mapped_column(Integer, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Career attributes
    experience: Mapped[str | None] = mapped_column(String(50), nullable=True)
    draft_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    draft_round: Mapped[int | None] = mapped_column(Integer, nullable=True)
    draft_pick: Mapped[int | None] = mapped_column(Integer, nullable=True)
    college: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Ranking attributes
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    depth: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    team: Mapped[Team | None] = relationship("Team", back_populates="players")

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return validate_bounded_text(key, value, NAME_MAX_LENGTH, required=True)

    @validates("number")
    def _validate_number(self, key: str, value: int) -> int:
        return validate_range(key, value, 0, 99)

    @validates("rating")
    def _validate_rating(self, key: str, value: int | None) -> int | None:
        return validate_range(key, value, 0, 100)

    @validates("depth")
    def _validate_depth(self, key: str, value: int | None) -> int | None:
        return validate_range(key, value, 0, 10)

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, team_id={self.team_id}, name={self.name})>"
