"""
Repository layer for data access operations.

GenericRepository provides CRUD and the composable query pipeline for any
model; the hierarchy repositories add lookups by parent and ancestor id.
"""

from .conference_repo import ConferenceRepository
from .division_repo import DivisionRepository
from .generic_repo import GenericRepository
from .league_repo import LeagueRepository
from .player_repo import PlayerRepository
from .query_options import QueryOptions
from .team_repo import TeamRepository

__all__ = [
    "GenericRepository",
    "QueryOptions",
    "LeagueRepository",
    "ConferenceRepository",
    "DivisionRepository",
    "TeamRepository",
    "PlayerRepository",
]
