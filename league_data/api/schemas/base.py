"""
Shared base for the entity schemas and their mapping to ORM models.

Create schemas carry the fields a caller supplies; Read schemas add the
identity and are built from ORM records (from_attributes). Mapping ignores
child collections: they are loaded and persisted through their own
repositories.

Read schemas that nest a child collection read it from the record, so the
collection must have been eager-loaded (QueryOptions.includes) first.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from league_data.db.models import Base


class EntityCreate(BaseModel):
    """Base for schemas that map onto an ORM model."""

    orm_model: ClassVar[type[Base]]
    # Fields never copied onto the model
    ignored_on_map: ClassVar[frozenset[str]] = frozenset()

    def _mapped_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude=set(self.ignored_on_map))

    def to_model(self) -> Any:
        """Build a new, not yet persisted ORM instance from this schema."""
        return self.orm_model(**self._mapped_fields())

    def apply_to_model(self, model: Any) -> Any:
        """
        Copy every field of this schema onto an existing ORM instance.

        Used for whole-record updates: fields omitted by the caller take
        their schema defaults rather than keeping the old values.
        """
        for key, value in self._mapped_fields().items():
            setattr(model, key, value)
        return model


class EntityRead(BaseModel):
    """Base for schemas built from ORM records."""

    model_config = ConfigDict(from_attributes=True)

    id: int
