"""
Repository for Team data access.

Conference and league lookups join Team -> Division (-> Conference) in one
statement and return teams with those ancestors loaded.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from league_data.db.models import Conference, Division, Team
from league_data.repos.generic_repo import GenericRepository
from league_data.repos.query_options import QueryOptions

logger = logging.getLogger(__name__)


class TeamRepository(GenericRepository[Team]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Team)

    async def get_teams_by_division_id(
        self, division_id: int, options: QueryOptions | None = None
    ) -> list[Team]:
        """Retrieve all teams of a division."""
        logger.debug(f"Fetching teams by Division ID: {division_id}")
        options = self.collection_options(options)
        stmt = self.build_query(Team.division_id == division_id, options)
        return await self.fetch(stmt, options, "get_teams_by_division_id")

    async def get_teams_by_conference_id(
        self, conference_id: int, options: QueryOptions | None = None
    ) -> list[Team]:
        """
        Retrieve all teams of a conference, across its divisions.

        Returns:
            List of teams with their division loaded
        """
        logger.debug(f"Fetching teams by Conference ID: {conference_id}")
        options = self.collection_options(options)
        base = select(Team).join(Team.division).options(contains_eager(Team.division))
        stmt = self.build_query(Division.conference_id == conference_id, options, stmt=base)
        return await self.fetch(stmt, options, "get_teams_by_conference_id")

    async def get_teams_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Team]:
        """
        Retrieve all teams of a league.

        Returns:
            List of teams with their division and conference loaded
        """
        logger.debug(f"Fetching teams by League ID: {league_id}")
        options = self.collection_options(options)
        base = (
            select(Team)
            .join(Team.division)
            .join(Division.conference)
            .options(contains_eager(Team.division).contains_eager(Division.conference))
        )
        stmt = self.build_query(Conference.league_id == league_id, options, stmt=base)
        return await self.fetch(stmt, options, "get_teams_by_league_id")

    async def get_team_by_code(self, code: str) -> Team | None:
        """Retrieve a team by its business key, or None."""
        logger.debug(f"Fetching team by code: {code}")
        teams = await self.get_by_predicate(Team.code == code, QueryOptions(take=1))
        return teams[0] if teams else None
