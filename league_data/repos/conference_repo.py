"""Repository for Conference data access."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from league_data.db.models import Conference
from league_data.repos.generic_repo import GenericRepository
from league_data.repos.query_options import QueryOptions

logger = logging.getLogger(__name__)


class ConferenceRepository(GenericRepository[Conference]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Conference)

    async def get_conferences_by_league_id(
        self, league_id: int, options: QueryOptions | None = None
    ) -> list[Conference]:
        """
        Retrieve all conferences of a league.

        Returns:
            List of conferences; empty if the league has none or does not exist
        """
        logger.debug(f"Fetching conferences by League ID: {league_id}")
        options = self.collection_options(options)
        stmt = self.build_query(Conference.league_id == league_id, options)
        return await self.fetch(stmt, options, "get_conferences_by_league_id")
