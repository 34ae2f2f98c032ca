"""Pydantic schemas for League."""

from typing import ClassVar

from pydantic import Field

from league_data.api.schemas.base import EntityCreate, EntityRead
from league_data.api.schemas.conference import ConferenceRead
from league_data.db.models import League


class LeagueCreate(EntityCreate):
    orm_model: ClassVar[type[League]] = League

    code: str | None = Field(default=None, max_length=20, examples=["NFL"])
    name: str = Field(
        ..., min_length=1, max_length=100, examples=["National Football League"]
    )
    abbreviation: str = Field(..., min_length=1, max_length=10, examples=["NFL"])


class LeagueRead(EntityRead):
    code: str | None = None
    name: str
    abbreviation: str
    conferences: list[ConferenceRead] = Field(default_factory=list)
