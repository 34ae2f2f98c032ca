"""
Tests for deletion semantics.

Team and Player are deleted logically: the row stays, flagged, and default
reads hide it. League, Conference and Division are removed together with
everything below them.
"""

import pytest
from sqlalchemy import inspect, select, true

from league_data.core.observability import set_user_id
from league_data.db.models import Conference, Division, League, Player, Team
from league_data.repos import (
    DivisionRepository,
    GenericRepository,
    LeagueRepository,
    PlayerRepository,
    QueryOptions,
    TeamRepository,
)


async def _row_exists(db, model, id) -> bool:
    result = await db.execute(select(model.id).where(model.id == id))
    return result.scalar_one_or_none() is not None


class TestSoftDelete:
    @pytest.mark.anyio
    async def test_soft_deleted_record_is_hidden_but_kept(self, async_db_session, nfl_scenario):
        repo = TeamRepository(async_db_session)
        team_id = nfl_scenario.team.id

        await repo.delete(nfl_scenario.team, reason="relocated")

        assert await repo.get_by_id(team_id) is None
        assert await repo.get_all() == []
        assert await _row_exists(async_db_session, Team, team_id)

        [deleted] = await repo.get_by_predicate(
            Team.id == team_id, QueryOptions(include_deleted=True)
        )
        assert deleted.is_deleted is True
        assert deleted.deleted_at is not None
        assert deleted.deleted_reason == "relocated"

    @pytest.mark.anyio
    async def test_delete_by_id_soft_deletes(self, async_db_session, nfl_scenario):
        repo = PlayerRepository(async_db_session)
        player_id = nfl_scenario.player.id

        assert await repo.delete_by_id(player_id, deleted_by="commissioner") is True

        assert await repo.get_by_id(player_id) is None
        player = await repo.get_by_id(player_id, QueryOptions(include_deleted=True))
        assert player.deleted_by == "commissioner"
        # Already deleted records are not found again
        assert await repo.delete_by_id(player_id) is False

    @pytest.mark.anyio
    async def test_deleted_by_defaults_to_context_user(self, async_db_session, nfl_scenario):
        repo = PlayerRepository(async_db_session)
        set_user_id("auditor@example.com")
        try:
            await repo.delete(nfl_scenario.player)
        finally:
            set_user_id("")

        player = await repo.get_by_id(nfl_scenario.player.id, QueryOptions(include_deleted=True))
        assert player.deleted_by == "auditor@example.com"

    @pytest.mark.anyio
    async def test_count_excludes_deleted_unless_asked(self, async_db_session, league_tree):
        repo = TeamRepository(async_db_session)
        await repo.delete(league_tree.jets)

        assert await repo.count() == 4
        assert await repo.count(options=QueryOptions(include_deleted=True)) == 5

    @pytest.mark.anyio
    async def test_restore_makes_record_visible_again(self, async_db_session, nfl_scenario):
        repo = TeamRepository(async_db_session)
        await repo.delete(nfl_scenario.team, reason="folded")

        restored = await repo.restore(nfl_scenario.team)

        assert restored.is_deleted is False
        assert restored.deleted_at is None
        assert restored.deleted_reason is None
        assert await repo.get_by_id(nfl_scenario.team.id) is not None

    @pytest.mark.anyio
    async def test_deleted_children_are_hidden_from_includes(
        self, async_db_session, async_session_maker, league_tree
    ):
        await PlayerRepository(async_db_session).delete(league_tree.smith)

        async with async_session_maker() as session:
            team = await TeamRepository(session).get_by_id(
                league_tree.bills.id, QueryOptions(includes="players", track=False)
            )
        assert [p.name for p in team.players] == ["J. Doe"]

        async with async_session_maker() as session:
            team = await TeamRepository(session).get_by_id(
                league_tree.bills.id,
                QueryOptions(includes="players", track=False, include_deleted=True),
            )
        assert sorted(p.name for p in team.players) == ["A. Smith", "J. Doe"]

    @pytest.mark.anyio
    async def test_deleted_teams_hidden_from_division_include(
        self, async_db_session, async_session_maker, league_tree
    ):
        await TeamRepository(async_db_session).delete(league_tree.jets)

        async with async_session_maker() as session:
            division = await DivisionRepository(session).get_by_id(
                league_tree.afc_east.id, QueryOptions(includes="teams", track=False)
            )

        assert [t.name for t in division.teams] == ["Bills"]


class TestHardDelete:
    @pytest.mark.anyio
    async def test_hard_deleted_record_is_gone(self, async_db_session, league_tree):
        repo = GenericRepository(async_db_session, Division)
        division_id = league_tree.afc_north.id

        await repo.delete(league_tree.afc_north)

        assert await repo.get_by_id(division_id) is None
        assert await repo.get_by_predicate(
            Division.id == division_id, QueryOptions(include_deleted=True)
        ) == []
        assert not await _row_exists(async_db_session, Division, division_id)

    @pytest.mark.anyio
    async def test_league_delete_cascades_to_descendants(self, async_db_session, league_tree):
        repo = LeagueRepository(async_db_session)

        assert await repo.delete_by_id(league_tree.nfl.id) is True

        db = async_db_session
        assert not await _row_exists(db, League, league_tree.nfl.id)
        assert not await _row_exists(db, Conference, league_tree.afc.id)
        assert not await _row_exists(db, Division, league_tree.nfc_east.id)
        assert not await _row_exists(db, Team, league_tree.bills.id)
        assert not await _row_exists(db, Player, league_tree.brown.id)

        # The other league is untouched
        remaining = await GenericRepository(db, Player).get_by_predicate(
            true(), QueryOptions(include_deleted=True)
        )
        assert [p.name for p in remaining] == ["D. White"]

    @pytest.mark.anyio
    async def test_division_delete_removes_soft_deleted_teams(
        self, async_db_session, async_session_maker, league_tree
    ):
        await TeamRepository(async_db_session).delete(league_tree.jets)

        async with async_session_maker() as session:
            deleted = await DivisionRepository(session).delete_by_id(league_tree.afc_east.id)
        assert deleted is True

        async with async_session_maker() as session:
            assert not await _row_exists(session, Division, league_tree.afc_east.id)
            assert not await _row_exists(session, Team, league_tree.jets.id)
            assert not await _row_exists(session, Team, league_tree.bills.id)
            assert not await _row_exists(session, Player, league_tree.jones.id)
            assert await _row_exists(session, Team, league_tree.ravens.id)

    @pytest.mark.anyio
    async def test_league_delete_removes_soft_deleted_players(
        self, async_db_session, async_session_maker, league_tree
    ):
        await PlayerRepository(async_db_session).delete(league_tree.smith)
        await TeamRepository(async_db_session).delete(league_tree.giants)

        async with async_session_maker() as session:
            # A filtered include read leaves partial collections on the instances
            await LeagueRepository(session).get_by_id(
                league_tree.nfl.id, QueryOptions(includes="conferences.divisions.teams.players")
            )
            assert await LeagueRepository(session).delete_by_id(league_tree.nfl.id) is True

        async with async_session_maker() as session:
            assert not await _row_exists(session, Player, league_tree.smith.id)
            assert not await _row_exists(session, Team, league_tree.giants.id)
            assert not await _row_exists(session, Player, league_tree.brown.id)
            remaining = await GenericRepository(session, Team).get_by_predicate(
                true(), QueryOptions(include_deleted=True)
            )
            assert [t.name for t in remaining] == ["Lions"]

    @pytest.mark.anyio
    async def test_detached_record_can_be_hard_deleted(
        self, async_db_session, async_session_maker, nfl_scenario
    ):
        async with async_session_maker() as session:
            [league] = await GenericRepository(session, League).get_all()
        assert inspect(league).detached

        repo = GenericRepository(async_db_session, League)
        await repo.delete(league)

        assert await repo.get_all() == []
        assert not await _row_exists(async_db_session, Player, nfl_scenario.player.id)
