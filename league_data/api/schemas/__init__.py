"""
Pydantic schemas for the league entities.

These are the data-transfer shapes the HTTP layer exchanges with callers,
together with their mapping onto the ORM models.
"""

from .conference import ConferenceCreate as ConferenceCreate
from .conference import ConferenceRead as ConferenceRead
from .division import DivisionCreate as DivisionCreate
from .division import DivisionRead as DivisionRead
from .league import LeagueCreate as LeagueCreate
from .league import LeagueRead as LeagueRead
from .player import PlayerCreate as PlayerCreate
from .player import PlayerRead as PlayerRead
from .team import TeamCreate as TeamCreate
from .team import TeamRead as TeamRead
