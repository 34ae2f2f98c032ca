"""
Repository for League data access.

Adds name and business-key lookups on top of the generic repository.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from league_data.db.models import League
from league_data.repos.generic_repo import GenericRepository
from league_data.repos.query_options import QueryOptions

logger = logging.getLogger(__name__)


class LeagueRepository(GenericRepository[League]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, League)

    async def get_leagues_by_name(
        self, name: str, options: QueryOptions | None = None
    ) -> list[League]:
        """
        Retrieve leagues whose name contains the given text.

        The match is case-sensitive; LIKE wildcards in name are matched literally.

        Args:
            name: Text to look for within league names
            options: Ordering/pagination; defaults to primary key order

        Returns:
            List of matching leagues
        """
        logger.debug(f"Fetching leagues by name: {name}")
        options = self.collection_options(options)
        stmt = self.build_query(League.name.contains(name, autoescape=True), options)
        return await self.fetch(stmt, options, "get_leagues_by_name")

    async def get_league_by_code(self, code: str) -> League | None:
        """Retrieve a league by its business key, or None."""
        logger.debug(f"Fetching league by code: {code}")
        leagues = await self.get_by_predicate(League.code == code, QueryOptions(take=1))
        return leagues[0] if leagues else None
