"""
Pytest configuration and shared fixtures for the repository tests.

Provides:
- In-memory SQLite database through aiosqlite, schema created per test
- Async session bound to that database
- Factory helpers for each level of the league hierarchy
- A populated two-league tree for traversal tests

Async SQLAlchemy Fixtures:
- async_engine: Function-scoped async engine with the schema created
- async_session_maker: Session factory on the same database, for second sessions
- async_db_session: Function-scoped async session with real commits
- nfl_scenario: League NFL -> AFC -> East -> Bills -> J. Doe (QB)
- league_tree: Two leagues with several conferences, divisions, teams, players

Async Helper Functions:
- acreate_league_in_db(), acreate_conference_in_db(), acreate_division_in_db(),
  acreate_team_in_db(), acreate_player_in_db()
"""

from __future__ import annotations

import os
import sys
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; point them at a throwaway database first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402 (import after env setup)
from sqlalchemy.ext.asyncio import (  # noqa: E402 (import after env setup)
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)

from league_data.core.db import create_fresh_async_engine  # noqa: E402
from league_data.db.models import (  # noqa: E402 (import after env setup)
    Base,
    Conference,
    Division,
    League,
    Player,
    Team,
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


# ============================================================================
# Async Database Fixtures
# ============================================================================


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh async engine with the schema in place.

    Uses create_fresh_async_engine() to avoid singleton caching, so each
    test gets its own in-memory database bound to its own event loop.
    """
    engine = create_fresh_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def async_session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database, for work in a second session."""
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def async_db_session(
    async_session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Provide an async session; repository mutations commit for real."""
    async with async_session_maker() as session:
        yield session


# ============================================================================
# Async Helper Functions
# ============================================================================


async def _persist(db: AsyncSession, entity: Any) -> Any:
    db.add(entity)
    await db.flush()
    await db.commit()
    return entity


async def acreate_league_in_db(
    db: AsyncSession, name: str = "National Football League", **overrides: Any
) -> League:
    data = {"name": name, "abbreviation": "NFL"}
    data.update(overrides)
    return await _persist(db, League(**data))


async def acreate_conference_in_db(
    db: AsyncSession, league: League, name: str = "AFC", **overrides: Any
) -> Conference:
    data = {"league_id": league.id, "name": name, "abbreviation": name[:10]}
    data.update(overrides)
    return await _persist(db, Conference(**data))


async def acreate_division_in_db(
    db: AsyncSession, conference: Conference, name: str = "East", **overrides: Any
) -> Division:
    data = {"conference_id": conference.id, "name": name, "abbreviation": name[:10]}
    data.update(overrides)
    return await _persist(db, Division(**data))


async def acreate_team_in_db(
    db: AsyncSession,
    division: Division | None = None,
    name: str = "Bills",
    **overrides: Any,
) -> Team:
    data: dict[str, Any] = {"name": name, "location": "Somewhere"}
    if division is not None:
        data["division_id"] = division.id
    data.update(overrides)
    return await _persist(db, Team(**data))


async def acreate_player_in_db(
    db: AsyncSession,
    team: Team | None = None,
    name: str = "J. Doe",
    position: str | None = "QB",
    **overrides: Any,
) -> Player:
    data: dict[str, Any] = {"name": name, "position": position, "number": 12}
    if team is not None:
        data["team_id"] = team.id
    data.update(overrides)
    return await _persist(db, Player(**data))


# ============================================================================
# Hierarchy Fixtures
# ============================================================================


@dataclass
class NflScenario:
    league: League
    conference: Conference
    division: Division
    team: Team
    player: Player


@pytest.fixture
async def nfl_scenario(async_db_session: AsyncSession) -> NflScenario:
    """League NFL -> Conference AFC -> Division East -> Team Bills -> Player J. Doe."""
    league = await acreate_league_in_db(async_db_session, name="NFL", code="NFL")
    conference = await acreate_conference_in_db(async_db_session, league, name="AFC")
    division = await acreate_division_in_db(async_db_session, conference, name="East")
    team = await acreate_team_in_db(async_db_session, division, name="Bills", code="BUF")
    player = await acreate_player_in_db(async_db_session, team, name="J. Doe", position="QB")
    return NflScenario(league, conference, division, team, player)


@dataclass
class LeagueTree:
    nfl: League
    cfl: League
    afc: Conference
    nfc: Conference
    west: Conference
    afc_east: Division
    afc_north: Division
    nfc_east: Division
    cfl_west: Division
    bills: Team
    jets: Team
    ravens: Team
    giants: Team
    lions: Team
    doe: Player
    smith: Player
    jones: Player
    brown: Player
    white: Player


@pytest.fixture
async def league_tree(async_db_session: AsyncSession) -> LeagueTree:
    """
    Two leagues with uneven fan-out at every level.

    NFL
      AFC: East (Bills: Doe QB, Smith WR; Jets: Jones QB), North (Ravens: none)
      NFC: East (Giants: Brown RB)
    CFL
      West: West (Lions: White QB)
    """
    db = async_db_session
    nfl = await acreate_league_in_db(db, name="National Football League", code="NFL")
    cfl = await acreate_league_in_db(
        db, name="Canadian Football League", abbreviation="CFL", code="CFL"
    )

    afc = await acreate_conference_in_db(db, nfl, name="AFC")
    nfc = await acreate_conference_in_db(db, nfl, name="NFC")
    west = await acreate_conference_in_db(db, cfl, name="West")

    afc_east = await acreate_division_in_db(db, afc, name="AFC East")
    afc_north = await acreate_division_in_db(db, afc, name="AFC North")
    nfc_east = await acreate_division_in_db(db, nfc, name="NFC East")
    cfl_west = await acreate_division_in_db(db, west, name="CFL West")

    bills = await acreate_team_in_db(db, afc_east, name="Bills", code="BUF")
    jets = await acreate_team_in_db(db, afc_east, name="Jets", code="NYJ")
    ravens = await acreate_team_in_db(db, afc_north, name="Ravens", code="BAL")
    giants = await acreate_team_in_db(db, nfc_east, name="Giants", code="NYG")
    lions = await acreate_team_in_db(db, cfl_west, name="Lions", code="BCL")

    doe = await acreate_player_in_db(db, bills, name="J. Doe", position="QB")
    smith = await acreate_player_in_db(db, bills, name="A. Smith", position="WR")
    jones = await acreate_player_in_db(db, jets, name="B. Jones", position="QB")
    brown = await acreate_player_in_db(db, giants, name="C. Brown", position="RB")
    white = await acreate_player_in_db(db, lions, name="D. White", position="QB")

    return LeagueTree(
        nfl=nfl,
        cfl=cfl,
        afc=afc,
        nfc=nfc,
        west=west,
        afc_east=afc_east,
        afc_north=afc_north,
        nfc_east=nfc_east,
        cfl_west=cfl_west,
        bills=bills,
        jets=jets,
        ravens=ravens,
        giants=giants,
        lions=lions,
        doe=doe,
        smith=smith,
        jones=jones,
        brown=brown,
        white=white,
    )
