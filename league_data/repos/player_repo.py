"""
Repository for Player data access.

Ancestor lookups (division, conference, league) join the chain from Player
down to the ancestor in a single statement. Players of a soft-deleted team
are hidden from them unless include_deleted is set.
"""

import logging

from sqlalchemy import ColumnElement, Select, and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from league_data.db.models import Conference, Division, Player, Team
from league_data.repos.generic_repo import GenericRepository
from league_data.repos.query_options import QueryOptions

logger = logging.getLogger(__name__)


def _players_with_ancestors(depth: int) -> Select:
    """
    SELECT players joined to `depth` levels of ancestors.

    depth 1 joins Team, 2 adds Division, 3 adds Conference.
    """
    stmt = select(Player).join(Player.team)
    loader = contains_eager(Player.team)
    if depth >= 2:
        stmt = stmt.join(Team.division)
        loader = loader.contains_eager(Team.division)
    if depth >= 3:
        stmt = stmt.join(Division.conference)
        loader = loader.contains_eager(Division.conference)
    return stmt.options(loader)


class PlayerRepository(GenericRepository[Player]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Player)

    def _through_teams(
        self, predicate: ColumnElement[bool], options: QueryOptions
    ) -> ColumnElement[bool]:
        """Restrict an ancestor predicate to teams visible under the soft-delete policy."""
        if options.include_deleted:
            return predicate
        return and_(predicate, Team.is_deleted.is_(False))

    async def get_players_by_team_id(
        self, team_id: int, options: QueryOptions | None = None
    ) -> list[Player]:
        """Retrieve the roster of a team."""
        logger.debug(f"Getting players for team ID {team_id}")
        options = self.collection_options(options)
        stmt = self.build_query(Player.team_id == team_id, options)
        return await self.fetch(stmt, options, "get_players_by_team_id")

    async def get_players_by_division_id(
        self, division_id: int, options: QueryOptions | None = None
    ) -> list[Player]:
        """Retrieve all players on teams of a division, with their team loaded."""
        logger.debug(f"Fetching players by Division ID: {division_id}")
        options = self.collection_options(options)
        stmt = self.build_query(
            self._through_teams(Team.division_id == division_id, options),
            options,
            stmt=_players_with_ancestors(1),
        )
        return await self.fetch(stmt, options, "get_players_by_division_id")

    async def get_players_by_conference_id(
        self, conference_id: int, options: QueryOptions | None = None
    ) -> list[Player]:
        """Retrieve all players of a conference, with team and division loaded."""
        logger.debug(f"Fetching players by Conference ID: {conference_id}")
        options = self.collection_options(options)
        stmt = self.build_query(
            self._through_teams(Division.conference_id == conference_id, options),
            options,
            stmt=_players_with_ancestors(2),
        )
        return await self.fetch(stmt, options, "get_players_by_conference_id")

    async def get_players_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Player]:
        """
        Retrieve all players of a league.

        Returns exactly the players whose team's division's conference belongs
        to the league, with team, division and conference loaded.
        """
        logger.debug(f"Fetching players by League ID: {league_id}")
        options = self.collection_options(options)
        stmt = self.build_query(
            self._through_teams(Conference.league_id == league_id, options),
            options,
            stmt=_players_with_ancestors(3),
        )
        return await self.fetch(stmt, options, "get_players_by_league_id")

    async def get_players_by_position(
        self, position: str, options: QueryOptions | None = None
    ) -> list[Player]:
        """Retrieve players playing the given position (exact match)."""
        logger.debug(f"Getting players by position: {position}")
        options = self.collection_options(options)
        stmt = self.build_query(Player.position == position, options)
        return await self.fetch(stmt, options, "get_players_by_position")
