"""
Capability-set interfaces for the repositories.

Callers depend on these Protocols rather than on the concrete classes, so a
component that only reads can be handed a ReadRepository view of a
repository that is also writable.
"""

from typing import Any, Protocol, TypeVar, runtime_checkable

from sqlalchemy import ColumnElement

from league_data.db.models import Conference, Division, League, Player, Team
from league_data.repos.query_options import QueryOptions

T = TypeVar("T")


@runtime_checkable
class ReadRepository(Protocol[T]):
    """Read operations shared by every repository."""

    async def get_all(self, options: QueryOptions | None = None) -> list[T]: ...

    async def get_by_id(self, id: Any, options: QueryOptions | None = None) -> T | None: ...

    async def find(
        self, predicate: ColumnElement[bool], options: QueryOptions | None = None
    ) -> list[T]: ...

    async def get_by_predicate(
        self, predicate: ColumnElement[bool], options: QueryOptions | None = None
    ) -> list[T]: ...

    async def count(
        self,
        predicate: ColumnElement[bool] | None = None,
        options: QueryOptions | None = None,
    ) -> int: ...


@runtime_checkable
class WriteRepository(Protocol[T]):
    """Mutations; each call is its own unit of work."""

    async def add(self, entity: T) -> T: ...

    async def update(self, entity: T) -> T: ...

    async def delete(
        self, entity: T, *, reason: str | None = None, deleted_by: str | None = None
    ) -> None: ...

    async def delete_by_id(
        self, id: Any, *, reason: str | None = None, deleted_by: str | None = None
    ) -> bool: ...


@runtime_checkable
class Repository(ReadRepository[T], WriteRepository[T], Protocol[T]):
    """Full read/write repository."""


class LeagueReader(ReadRepository[League], Protocol):
    async def get_leagues_by_name(
        self, name: str, options: QueryOptions | None = None
    ) -> list[League]: ...

    async def get_league_by_code(self, code: str) -> League | None: ...


class ConferenceReader(ReadRepository[Conference], Protocol):
    async def get_conferences_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Conference]: ...


class DivisionReader(ReadRepository[Division], Protocol):
    async def get_divisions_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Division]: ...

    async def get_divisions_by_conference_id(
        self, conference_id: int, options: QueryOptions | None = None
    ) -> list[Division]: ...

    async def get_division_by_team_id(
        self, team_id: int, options: QueryOptions | None = None
    ) -> Division: ...


class TeamReader(ReadRepository[Team], Protocol):
    async def get_teams_by_division_id(
        self, division_id: int, options: QueryOptions | None = None
    ) -> list[Team]: ...

    async def get_teams_by_conference_id(
        self, conference_id: int, options: QueryOptions | None = None
    ) -> list[Team]: ...

    async def get_teams_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Team]: ...

    async def get_team_by_code(self, code: str) -> Team | None: ...


class PlayerReader(ReadRepository[Player], Protocol):
    async def get_players_by_team_id(
        self, team_id: int, options: QueryOptions | None = None
    ) -> list[Player]: ...

    async def get_players_by_division_id(
        self, division_id: int, options: QueryOptions | None = None
    ) -> list[Player]: ...

    async def get_players_by_conference_id(
        self, conference_id: int, options: QueryOptions | None = None
    ) -> list[Player]: ...

    async def get_players_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Player]: ...

    async def get_players_by_position(
        self, position: str, options: QueryOptions | None = None
    ) -> list[Player]: ...


@runtime_checkable
class LeagueRepositoryInterface(LeagueReader, WriteRepository[League], Protocol):
    pass


@runtime_checkable
class ConferenceRepositoryInterface(ConferenceReader, WriteRepository[Conference], Protocol):
    pass


@runtime_checkable
class DivisionRepositoryInterface(DivisionReader, WriteRepository[Division], Protocol):
    pass


@runtime_checkable
class TeamRepositoryInterface(TeamReader, WriteRepository[Team], Protocol):
    pass


@runtime_checkable
class PlayerRepositoryInterface(PlayerReader, WriteRepository[Player], Protocol):
    pass
