"""Pydantic schemas for Player."""

from datetime import date
from typing import ClassVar

from pydantic import Field

from league_data.api.schemas.base import EntityCreate, EntityRead
from league_data.db.models import Player


class PlayerBase(EntityCreate):
    """Fields common to all Player operations."""

    orm_model: ClassVar[type[Player]] = Player
    # The team assignment is managed separately from the player's own fields
    ignored_on_map: ClassVar[frozenset[str]] = frozenset({"team_id"})

    team_id: int | None = Field(default=None, ge=1)
    number: int = Field(default=0, ge=0, le=99)
    position: str | None = Field(default=None, max_length=20, examples=["QB"])
    name: str = Field(..., min_length=1, max_length=100, examples=["J. Doe"])

    height: int | None = Field(default=None, ge=0, le=300, description="Height in inches")
    weight: int | None = Field(default=None, ge=0, le=500, description="Weight in pounds")
    age: int | None = Field(default=None, ge=0, le=100)
    birth_date: date | None = None

    experience: str | None = Field(default=None, max_length=50)
    draft_year: int | None = Field(default=None, ge=1900, le=2100)
    draft_round: int | None = Field(default=None, ge=0, le=50)
    draft_pick: int | None = Field(default=None, ge=0, le=500)
    college: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)

    rank: int | None = Field(default=None, ge=0)
    rating: int | None = Field(default=None, ge=0, le=100)
    depth: int | None = Field(default=None, ge=0, le=10)


class PlayerCreate(PlayerBase):
    """Schema for creating a Player; team_id is applied when given."""

    def to_model(self) -> Player:
        player = super().to_model()
        player.team_id = self.team_id
        return player


class PlayerRead(EntityRead):
    team_id: int | None = None
    number: int
    position: str | None = None
    name: str
    height: int | None = None
    weight: int | None = None
    age: int | None = None
    birth_date: date | None = None
    experience: str | None = None
    draft_year: int | None = None
    draft_round: int | None = None
    draft_pick: int | None = None
    college: str | None = None
    state: str | None = None
    rank: int | None = None
    rating: int | None = None
    depth: int | None = None
