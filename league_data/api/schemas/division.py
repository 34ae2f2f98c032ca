"""Pydantic schemas for Division."""

from typing import ClassVar

from pydantic import Field

from league_data.api.schemas.base import EntityCreate, EntityRead
from league_data.db.models import Division


class DivisionCreate(EntityCreate):
    orm_model: ClassVar[type[Division]] = Division

    conference_id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1, max_length=100, examples=["East"])
    abbreviation: str = Field(..., min_length=1, max_length=10, examples=["E"])


class DivisionRead(EntityRead):
    conference_id: int
    name: str
    abbreviation: str
