"""
Query options shared by every repository read.

A single QueryOptions value carries everything a read can be tuned with:
tracking mode, soft-delete inclusion, eager-load paths, ordering and
pagination. Repositories apply them in one fixed order (see
GenericRepository.build_query), so skip/take always index into the
filtered, ordered result.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QueryOptions(BaseModel):
    """Options for a repository read. All fields are optional."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    order_by: tuple[Any, ...] = Field(
        default=(),
        description="SQLAlchemy order expressions, e.g. (Team.name, Team.id.desc())",
    )
    skip: int = Field(default=0, ge=0, description="Number of rows to skip")
    take: int | None = Field(
        default=None, ge=0, description="Maximum number of rows to return (None = all)"
    )
    track: bool = Field(
        default=True,
        description="Keep results attached to the session; False returns detached records",
    )
    include_deleted: bool = Field(
        default=False, description="Include soft-deleted records in the result"
    )
    includes: tuple[str, ...] = Field(
        default=(),
        description='Relationship paths to eager-load, e.g. ("team.division",)',
    )

    @field_validator("order_by", mode="before")
    @classmethod
    def wrap_single_order_expression(cls, v: Any) -> Any:
        """Accept a single order expression as well as a sequence of them."""
        if v is None:
            return ()
        if isinstance(v, (list, tuple)):
            return tuple(v)
        return (v,)

    @field_validator("includes", mode="before")
    @classmethod
    def wrap_single_include(cls, v: Any) -> Any:
        """Accept a single include path as well as a sequence of them."""
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return tuple(v)

    @field_validator("includes")
    @classmethod
    def validate_include_paths(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for path in v:
            if not path or any(not part for part in path.split(".")):
                raise ValueError(f"Invalid include path: '{path}'")
        return v

    def with_defaults(self, **defaults: Any) -> "QueryOptions":
        """Return a copy where unset fields take the given defaults."""
        unset = {
            key: value for key, value in defaults.items() if key not in self.model_fields_set
        }
        if not unset:
            return self
        return self.model_copy(update=unset)


DEFAULT_OPTIONS = QueryOptions()
