"""Pydantic schemas for Conference."""

from typing import ClassVar

from pydantic import Field

from league_data.api.schemas.base import EntityCreate, EntityRead
from league_data.api.schemas.division import DivisionRead
from league_data.db.models import Conference


class ConferenceCreate(EntityCreate):
    orm_model: ClassVar[type[Conference]] = Conference

    league_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=100, examples=["American Football Conference"])
    abbreviation: str = Field(..., min_length=1, max_length=10, examples=["AFC"])


class ConferenceRead(EntityRead):
    league_id: int
    name: str
    abbreviation: str
    divisions: list[DivisionRead] = Field(default_factory=list)
