"""Pydantic schemas for Team."""

from typing import ClassVar

from pydantic import Field

from league_data.api.schemas.base import EntityCreate, EntityRead
from league_data.api.schemas.player import PlayerRead
from league_data.db.models import Team


class TeamCreate(EntityCreate):
    orm_model: ClassVar[type[Team]] = Team

    code: str | None = Field(default=None, max_length=50)
    division_id: int = Field(..., ge=1)
    location: str | None = Field(default=None, max_length=100, examples=["Buffalo"])
    name: str = Field(..., min_length=1, max_length=100, examples=["Bills"])
    abbreviation: str | None = Field(default=None, max_length=10, examples=["BUF"])

    win: int = Field(default=0, ge=0, le=500)
    loss: int = Field(default=0, ge=0, le=500)
    tie: int = Field(default=0, ge=0, le=500)
    points_for: int = Field(default=0, ge=0)
    points_against: int = Field(default=0, ge=0)

    stadium: str | None = Field(default=None, max_length=100, examples=["Highmark Stadium"])
    capacity: int = Field(default=0, ge=0, le=500_000)
    address: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip: str | None = Field(default=None, max_length=20)
    latitude: float = Field(default=0.0, ge=-90, le=90)
    longitude: float = Field(default=0.0, ge=-180, le=180)


class TeamRead(EntityRead):
    code: str | None = None
    division_id: int
    location: str | None = None
    name: str
    abbreviation: str | None = None
    win: int
    loss: int
    tie: int
    points_for: int
    points_against: int
    stadium: str | None = None
    capacity: int
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    latitude: float
    longitude: float
    players: list[PlayerRead] = Field(default_factory=list)
