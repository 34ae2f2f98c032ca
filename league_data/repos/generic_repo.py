"""
Generic repository providing CRUD and composable querying for any model.

Every read is composed by build_query in one fixed order:

    1. base set            select(Model)
    2. tracking mode       attached (default) or detached results
    3. soft-delete policy  hide deleted records unless include_deleted
    4. eager loads         selectinload chains named by relationship path
    5. predicate           the caller's boolean SQL expression
    6. ordering            options.order_by; primary key when paging
    7. pagination          OFFSET skip, LIMIT take

Mutations are one unit of work each: the change is flushed and committed
inside the call. Store errors roll the session back and propagate unchanged.
"""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, with_loader_criteria

from league_data.core.errors import InvalidArgumentError
from league_data.core.observability import db_metrics, get_user_id
from league_data.db.models import Base, SoftDeleteMixin, is_soft_deletable
from league_data.repos.query_options import DEFAULT_OPTIONS, QueryOptions

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class GenericRepository(Generic[ModelT]):
    """
    Repository for a single mapped class.

    Whether deletes are logical or physical is decided once, from the
    model's soft-delete capability, when the repository is created.
    """

    def __init__(self, db: AsyncSession, model: type[ModelT]):
        """
        Initialize the repository.

        Args:
            db: Async database session shared with the caller
            model: Mapped class this repository manages

        Raises:
            InvalidArgumentError: If db or model is None
        """
        if db is None:
            raise InvalidArgumentError("A database session is required")
        if model is None:
            raise InvalidArgumentError("A model class is required")

        self.db = db
        self.model = model
        self.entity_name = model.__name__
        self.soft_deletable = is_soft_deletable(model)
        self._mapper = inspect(model)
        self._primary_key = self._mapper.primary_key[0]

        logger.debug(
            f"Initialized {self.__class__.__name__} for {self.entity_name}",
            extra={"soft_deletable": self.soft_deletable},
        )

    # ========================================================================
    # Query composition
    # ========================================================================

    def build_query(
        self,
        predicate: ColumnElement[bool] | None = None,
        options: QueryOptions = DEFAULT_OPTIONS,
        stmt: Select | None = None,
    ) -> Select:
        """
        Compose a SELECT for this model following the fixed stage order.

        Tracking is the one stage that cannot be expressed in SQL; it is
        applied to the results by fetch.

        Args:
            predicate: Boolean SQL expression over the model's columns
            options: Query options
            stmt: Base statement to start from instead of select(Model);
                used by traversals that join ancestor tables first

        Returns:
            SQLAlchemy Select statement
        """
        if stmt is None:
            stmt = select(self.model)
        stmt = self._apply_soft_delete_filter(stmt, options.include_deleted)
        stmt = self._apply_includes(stmt, options.includes)
        if predicate is not None:
            stmt = stmt.where(predicate)
        if options.order_by:
            stmt = stmt.order_by(*options.order_by)
        elif options.skip or options.take is not None:
            # OFFSET/LIMIT over an unordered result is not a stable slice
            stmt = stmt.order_by(self._primary_key)
        if options.skip:
            stmt = stmt.offset(options.skip)
        if options.take is not None:
            stmt = stmt.limit(options.take)
        return stmt

    def _apply_soft_delete_filter(self, stmt: Select, include_deleted: bool) -> Select:
        """
        Hide soft-deleted rows unless include_deleted is set.

        The model's own rows are filtered in WHERE. Loader criteria extend
        the same policy to every soft-deletable entity the statement joins
        or eager-loads.
        """
        if include_deleted:
            return stmt

        if self.soft_deletable:
            stmt = stmt.where(self.model.is_deleted.is_(False))

        return stmt.options(
            with_loader_criteria(
                SoftDeleteMixin, lambda cls: cls.is_deleted.is_(False), include_aliases=True
            )
        )

    def _apply_includes(self, stmt: Select, includes: Sequence[str]) -> Select:
        for path in includes:
            stmt = stmt.options(self._loader_for_path(path))
        return stmt

    def _loader_for_path(self, path: str) -> Any:
        """
        Build a selectinload chain for a dotted relationship path.

        Raises:
            InvalidArgumentError: If a segment is not a relationship
        """
        mapper = self._mapper
        loader = None
        for name in path.split("."):
            relationship = mapper.relationships.get(name)
            if relationship is None:
                logger.warning(f"Unknown relationship '{name}' in include path '{path}'")
                raise InvalidArgumentError(
                    f"'{name}' is not a relationship of {mapper.class_.__name__}",
                    details={"include": path, "entity": self.entity_name},
                )
            attribute = getattr(mapper.class_, name)
            loader = selectinload(attribute) if loader is None else loader.selectinload(attribute)
            mapper = relationship.mapper
        return loader

    async def fetch(
        self, stmt: Select, options: QueryOptions, operation: str
    ) -> list[ModelT]:
        """
        Execute a composed statement and apply the tracking mode.

        Hierarchy repositories call this with statements they extend with
        ancestor joins before passing them through build_query.

        Detached reads only detach records this read brought into the
        session; records the caller already holds stay attached.
        """
        held = set(self.db.identity_map.keys())
        with db_metrics.track(operation, self.entity_name):
            result = await self.db.execute(stmt)
            records = list(result.scalars().unique().all())
        db_metrics.rows(operation, self.entity_name, len(records))

        if not options.track:
            for record in records:
                if record in self.db and inspect(record).identity_key not in held:
                    self.db.expunge(record)

        return records

    def collection_options(self, options: QueryOptions | None) -> QueryOptions:
        """Defaults for multi-record reads: detached results ordered by primary key."""
        return (options or DEFAULT_OPTIONS).with_defaults(
            track=False, order_by=(self._primary_key,)
        )

    # ========================================================================
    # Reads
    # ========================================================================

    async def get_all(self, options: QueryOptions | None = None) -> list[ModelT]:
        """
        Retrieve all records of this type.

        Soft-deleted records are excluded unless options.include_deleted.
        Results are detached and ordered by primary key unless options say
        otherwise.

        Returns:
            List of records
        """
        options = self.collection_options(options)
        logger.info(f"Fetching all records of type {self.entity_name}")

        stmt = self.build_query(options=options)
        return await self.fetch(stmt, options, "get_all")

    async def get_by_id(self, id: Any, options: QueryOptions | None = None) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            id: Primary key value
            options: Query options (include_deleted, includes, track)

        Returns:
            The record, or None if it does not exist or is soft-deleted
        """
        options = options or DEFAULT_OPTIONS
        logger.info(f"Fetching record with id={id} of type {self.entity_name}")

        stmt = self.build_query(self._primary_key == id, options)
        records = await self.fetch(stmt, options, "get_by_id")
        if not records:
            logger.debug(f"{self.entity_name} not found: id={id}")
            return None
        return records[0]

    async def find(
        self, predicate: ColumnElement[bool], options: QueryOptions | None = None
    ) -> list[ModelT]:
        """
        Retrieve records matching a predicate.

        Results are detached and ordered by primary key unless options say
        otherwise.

        Args:
            predicate: Boolean SQL expression, e.g. Team.win > 10

        Returns:
            List of matching records

        Raises:
            InvalidArgumentError: If predicate is None
        """
        self._require_predicate(predicate, "find")
        options = self.collection_options(options)
        logger.info(
            f"Fetching records of type {self.entity_name} with condition: {predicate}"
        )

        stmt = self.build_query(predicate, options)
        return await self.fetch(stmt, options, "find")

    async def get_by_predicate(
        self, predicate: ColumnElement[bool], options: QueryOptions | None = None
    ) -> list[ModelT]:
        """
        Retrieve records matching a predicate with the full query pipeline.

        Args:
            predicate: Boolean SQL expression; use sqlalchemy.true() to match all
            options: Tracking, soft-delete inclusion, includes, ordering, skip/take

        Returns:
            List of matching records; empty when skip/take fall past the end

        Raises:
            InvalidArgumentError: If predicate is None or an include path is unknown

        Example:
            teams = await repo.get_by_predicate(
                Team.division_id == 4,
                QueryOptions(order_by=Team.name, skip=10, take=10, includes=("players",)),
            )
        """
        self._require_predicate(predicate, "get_by_predicate")
        options = options or DEFAULT_OPTIONS
        logger.info(
            f"Fetching records of type {self.entity_name} with predicate: {predicate}",
            extra={
                "skip": options.skip,
                "take": options.take,
                "include_deleted": options.include_deleted,
                "includes": list(options.includes),
            },
        )

        stmt = self.build_query(predicate, options)
        return await self.fetch(stmt, options, "get_by_predicate")

    async def count(
        self,
        predicate: ColumnElement[bool] | None = None,
        options: QueryOptions | None = None,
    ) -> int:
        """
        Count records matching a predicate under the soft-delete policy.

        Ordering, pagination and includes in options are ignored.
        """
        options = options or DEFAULT_OPTIONS
        stmt = select(func.count()).select_from(self.model)
        if self.soft_deletable and not options.include_deleted:
            stmt = stmt.where(self.model.is_deleted.is_(False))
        if predicate is not None:
            stmt = stmt.where(predicate)

        with db_metrics.track("count", self.entity_name):
            result = await self.db.execute(stmt)
            total = result.scalar_one()

        logger.debug(f"Counted {total} records of type {self.entity_name}")
        return total

    # ========================================================================
    # Mutations
    # ========================================================================

    async def add(self, entity: ModelT) -> ModelT:
        """
        Persist a new record and commit.

        Returns:
            The persisted record with its identity populated

        Raises:
            InvalidArgumentError: If entity is None
        """
        self._require_entity(entity, "add")
        logger.info(
            f"Adding a new record of type {self.entity_name}: {entity!r}",
        )

        with db_metrics.track("add", self.entity_name):
            self.db.add(entity)
            await self._commit()

        logger.debug(f"Added {self.entity_name} id={self._identity(entity)}")
        return entity

    async def update(self, entity: ModelT) -> ModelT:
        """
        Replace a record with the given state and commit.

        The entity may be attached or detached; its full state is merged
        into the session.

        Returns:
            The session-attached record

        Raises:
            InvalidArgumentError: If entity is None
        """
        self._require_entity(entity, "update")
        logger.info(f"Updating a record of type {self.entity_name}: {entity!r}")

        with db_metrics.track("update", self.entity_name):
            merged = await self.db.merge(entity)
            await self._commit()

        return merged

    async def delete(
        self,
        entity: ModelT,
        *,
        reason: str | None = None,
        deleted_by: str | None = None,
    ) -> None:
        """
        Delete a record, logically or physically depending on its type.

        Soft-deletable types get is_deleted/deleted_at set (plus the optional
        reason and acting user); all other types are removed, cascading to
        their descendants.

        Args:
            entity: Record to delete
            reason: Deletion reason recorded on soft delete
            deleted_by: Acting user recorded on soft delete; defaults to the
                user of the current logging context

        Raises:
            InvalidArgumentError: If entity is None
        """
        self._require_entity(entity, "delete")
        logger.info(f"Deleting record of type {self.entity_name}: {entity!r}")

        with db_metrics.track("delete", self.entity_name):
            if self.soft_deletable:
                logger.debug(f"Soft deleting record of type {self.entity_name}: {entity!r}")
                entity.is_deleted = True
                entity.deleted_at = datetime.now(UTC)
                entity.deleted_reason = reason
                entity.deleted_by = deleted_by or get_user_id() or None
                await self.db.merge(entity)
            else:
                logger.debug(f"Hard deleting record of type {self.entity_name}: {entity!r}")
                target = await self._load_cascade(entity)
                if target is None:
                    logger.warning(
                        f"{self.entity_name} id={self._identity(entity)} no longer exists"
                    )
                else:
                    await self.db.delete(target)
            await self._commit()

    async def delete_by_id(
        self,
        id: Any,
        *,
        reason: str | None = None,
        deleted_by: str | None = None,
    ) -> bool:
        """
        Delete a record by primary key.

        Returns:
            True if a record was deleted, False if none was found
        """
        logger.info(f"Deleting record with id={id} of type {self.entity_name}")

        entity = await self.get_by_id(id)
        if entity is None:
            logger.warning(
                f"Record with id={id} of type {self.entity_name} not found for deletion"
            )
            return False

        await self.delete(entity, reason=reason, deleted_by=deleted_by)
        return True

    async def restore(self, entity: ModelT) -> ModelT:
        """
        Undo a soft delete and commit.

        Raises:
            InvalidArgumentError: If entity is None or the type is not soft-deletable
        """
        self._require_entity(entity, "restore")
        if not self.soft_deletable:
            raise InvalidArgumentError(
                f"{self.entity_name} does not support soft delete",
                details={"entity": self.entity_name},
            )
        logger.info(f"Restoring record of type {self.entity_name}: {entity!r}")

        with db_metrics.track("restore", self.entity_name):
            entity.is_deleted = False
            entity.deleted_at = None
            entity.deleted_reason = None
            entity.deleted_by = None
            merged = await self.db.merge(entity)
            await self._commit()

        return merged

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    def _identity(self, entity: ModelT) -> Any:
        return getattr(entity, self._primary_key.key)

    async def _load_cascade(self, entity: ModelT) -> ModelT | None:
        """
        Reload a record with every delete-cascading collection below it.

        Collections are loaded without the soft-delete filter and replace
        whatever an earlier filtered read left on the instances, so the
        ORM cascade reaches soft-deleted descendants too.
        """
        stmt = (
            select(self.model)
            .where(self._primary_key == self._identity(entity))
            .options(*self._cascade_loaders(self._mapper))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().unique().one_or_none()

    def _cascade_loaders(self, mapper: Any, parent: Any = None) -> list[Any]:
        loaders = []
        for relationship in mapper.relationships:
            if not relationship.cascade.delete:
                continue
            attribute = getattr(mapper.class_, relationship.key)
            loader = (
                selectinload(attribute) if parent is None else parent.selectinload(attribute)
            )
            loaders.append(loader)
            loaders.extend(self._cascade_loaders(relationship.mapper, loader))
        return loaders

    def _require_entity(self, entity: ModelT | None, operation: str) -> None:
        if entity is None:
            logger.warning(f"Attempted to {operation} a None {self.entity_name} entity")
            raise InvalidArgumentError(
                f"Cannot {operation} a None {self.entity_name}",
                details={"operation": operation, "entity": self.entity_name},
            )

    def _require_predicate(self, predicate: ColumnElement[bool] | None, operation: str) -> None:
        if predicate is None:
            logger.warning(f"{operation} called with a None predicate for {self.entity_name}")
            raise InvalidArgumentError(
                "A predicate is required; use sqlalchemy.true() to match every record",
                details={"operation": operation, "entity": self.entity_name},
            )
