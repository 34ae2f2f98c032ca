"""
Repository for Division data access.

Traversals run as a single statement: the ancestor tables are joined, the
filter on the ancestor key runs in the store, and the joined ancestors are
populated on the returned records with contains_eager.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from league_data.core.errors import NotFoundError
from league_data.db.models import Conference, Division, Team
from league_data.repos.generic_repo import GenericRepository
from league_data.repos.query_options import DEFAULT_OPTIONS, QueryOptions

logger = logging.getLogger(__name__)


class DivisionRepository(GenericRepository[Division]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Division)
        self._teams = GenericRepository(db, Team)

    async def get_divisions_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Division]:
        """
        Retrieve all divisions of a league, across its conferences.

        Each division is returned with its conference loaded.

        Returns:
            List of divisions; empty if the league has none or does not exist
        """
        logger.debug(f"Fetching divisions by League ID: {league_id}")
        options = self.collection_options(options)
        base = (
            select(Division)
            .join(Division.conference)
            .options(contains_eager(Division.conference))
        )
        stmt = self.build_query(Conference.league_id == league_id, options, stmt=base)
        return await self.fetch(stmt, options, "get_divisions_by_league_id")

    async def get_divisions_by_conference_id(
        self, conference_id: int, options: QueryOptions | None = None
    ) -> list[Division]:
        """Retrieve all divisions of a conference."""
        logger.debug(f"Fetching divisions by Conference ID: {conference_id}")
        options = self.collection_options(options)
        stmt = self.build_query(Division.conference_id == conference_id, options)
        return await self.fetch(stmt, options, "get_divisions_by_conference_id")

    async def get_division_by_team_id(
        self, team_id: int, options: QueryOptions | None = None
    ) -> Division:
        """
        Retrieve the division that owns a team.

        Args:
            team_id: Team primary key
            options: include_deleted also resolves soft-deleted teams

        Returns:
            The team's division

        Raises:
            NotFoundError: If the team does not exist (or is soft-deleted), or
                its division link does not resolve to a division
        """
        logger.debug(f"Fetching division by Team ID: {team_id}")
        options = (options or DEFAULT_OPTIONS).with_defaults(track=False)
        base = select(Team).outerjoin(Team.division).options(contains_eager(Team.division))
        stmt = self._teams.build_query(Team.id == team_id, options, stmt=base)
        teams = await self._teams.fetch(stmt, options, "get_division_by_team_id")

        if not teams:
            logger.warning(f"Team with ID {team_id} not found")
            raise NotFoundError(
                f"Team with ID {team_id} not found",
                details={"team_id": team_id},
            )

        team = teams[0]
        if team.division is None:
            logger.warning(f"Division for Team ID {team_id} not found")
            raise NotFoundError(
                f"Division for Team with ID {team_id} not found",
                details={"team_id": team_id, "division_id": team.division_id},
            )

        return team.division
