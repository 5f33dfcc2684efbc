"""Tests for learner progress persistence."""

import pytest

from prepmsceit.core.progress import (
    LearnerSession,
    LocalState,
    LocalStateStore,
    SessionRegistry,
)
from prepmsceit.models.branch import Branch
from prepmsceit.models.stats import UserStats, initial_stats


USER_ID = "user-123"


@pytest.fixture
def store(tmp_path):
    return LocalStateStore(tmp_path, USER_ID)


@pytest.fixture
def session(supabase, store):
    return LearnerSession(USER_ID, supabase, store)


class TestUserStatsDocument:
    def test_document_uses_stored_shape(self):
        document = initial_stats().to_document()

        assert set(document) == {
            "scores", "masteryLevels", "consensusAlignment", "percentile",
            "history", "weakestBranch", "completionCount",
        }
        assert document["scores"] == {branch.value: 0 for branch in Branch}
        assert document["weakestBranch"] == "Managing Emotions"

    def test_missing_branches_are_filled(self):
        stats = UserStats.from_document({"scores": {"Using Emotions": 40}})

        assert stats.scores[Branch.USING] == 40
        assert set(stats.scores) == set(Branch)
        assert set(stats.mastery_levels) == set(Branch)

    def test_unknown_branch_is_rejected(self):
        with pytest.raises(ValueError):
            UserStats.from_document({"scores": {"Juggling Emotions": 40}})


class TestLocalStateStore:
    def test_missing_file_loads_defaults(self, store):
        state = store.load()
        assert state.theme == "light"
        assert state.stats == initial_stats()

    def test_round_trip(self, store):
        stats = UserStats(scores={Branch.MANAGING: 70}, completionCount=2)
        store.save(LocalState(theme="dark", stats=stats))

        loaded = store.load()
        assert loaded.theme == "dark"
        assert loaded.stats.scores[Branch.MANAGING] == 70
        assert loaded.stats.completion_count == 2

    def test_corrupt_file_loads_defaults(self, store):
        store.path.parent.mkdir(parents=True, exist_ok=True)
        store.path.write_text("{not json", encoding="utf-8")

        assert store.load() == LocalState()


class TestLoad:
    @pytest.mark.asyncio
    async def test_prefers_remote_document(self, session, fake_supabase, store):
        remote = UserStats(scores={Branch.USING: 88})
        fake_supabase.rows("user_progress").append({"user_id": USER_ID, "data": remote.to_document()})
        store.save(LocalState(stats=UserStats(scores={Branch.USING: 10})))

        stats = await session.load()

        assert stats.scores[Branch.USING] == 88
        assert session.remote_sync_enabled

    @pytest.mark.asyncio
    async def test_falls_back_to_local_when_no_remote_document(self, session, store):
        store.save(LocalState(theme="dark", stats=UserStats(scores={Branch.USING: 10})))

        stats = await session.load()

        assert stats.scores[Branch.USING] == 10
        assert session.theme == "dark"
        assert session.remote_sync_enabled

    @pytest.mark.asyncio
    async def test_remote_error_disables_sync(self, session, fake_supabase):
        fake_supabase.failures[("GET", "/rest/v1/user_progress")] = 500

        stats = await session.load()

        assert stats == initial_stats()
        assert not session.remote_sync_enabled

    @pytest.mark.asyncio
    async def test_profile_fetch_runs_in_background(self, session, fake_supabase):
        await session.load()
        await session._profile_task

        assert fake_supabase.calls("GET", "/rest/v1/profiles")


class TestSave:
    @pytest.mark.asyncio
    async def test_writes_local_and_remote(self, session, fake_supabase, store):
        stats = UserStats(scores={Branch.PERCEIVING: 55})

        await session.save(stats)

        assert store.load().stats.scores[Branch.PERCEIVING] == 55
        rows = fake_supabase.rows("user_progress")
        assert len(rows) == 1
        assert rows[0]["user_id"] == USER_ID
        assert rows[0]["data"]["scores"]["Perceiving Emotions"] == 55

    @pytest.mark.asyncio
    async def test_upsert_keeps_one_row_per_user(self, session, fake_supabase):
        await session.save(UserStats(scores={Branch.PERCEIVING: 55}))
        await session.save(UserStats(scores={Branch.PERCEIVING: 65}))

        rows = fake_supabase.rows("user_progress")
        assert len(rows) == 1
        assert rows[0]["data"]["scores"]["Perceiving Emotions"] == 65

    @pytest.mark.asyncio
    async def test_remote_failure_keeps_local_and_disables_sync(self, session, fake_supabase, store):
        fake_supabase.failures[("POST", "/rest/v1/user_progress")] = 500

        await session.save(UserStats(scores={Branch.PERCEIVING: 55}))
        assert store.load().stats.scores[Branch.PERCEIVING] == 55
        assert not session.remote_sync_enabled

        del fake_supabase.failures[("POST", "/rest/v1/user_progress")]
        await session.save(UserStats(scores={Branch.PERCEIVING: 75}))

        assert store.load().stats.scores[Branch.PERCEIVING] == 75
        assert len(fake_supabase.calls("POST", "/rest/v1/user_progress")) == 1


class TestCompleteAssessment:
    @pytest.mark.asyncio
    async def test_updates_stats_and_audits(self, session, fake_supabase):
        stats = await session.complete_assessment(85, Branch.MANAGING)

        assert stats.scores[Branch.MANAGING] == 85
        assert stats.mastery_levels[Branch.MANAGING] == 2
        assert session.stats == stats

        history = fake_supabase.rows("assessment_history")
        assert len(history) == 1
        assert history[0]["user_id"] == USER_ID
        assert history[0]["branch"] == "Managing Emotions"
        assert history[0]["score"] == 85

    @pytest.mark.asyncio
    async def test_audit_failure_is_not_fatal(self, session, fake_supabase):
        fake_supabase.failures[("POST", "/rest/v1/assessment_history")] = 500

        stats = await session.complete_assessment(40, Branch.USING)

        assert stats.completion_count == 1
        assert fake_supabase.rows("user_progress")

    @pytest.mark.asyncio
    async def test_reset_saves_baseline(self, session, fake_supabase):
        await session.complete_assessment(40, Branch.USING)
        stats = await session.reset()

        assert stats == initial_stats()
        assert fake_supabase.rows("user_progress")[0]["data"]["completionCount"] == 0


class TestTheme:
    def test_toggle_persists(self, session, store):
        assert session.toggle_theme() == "dark"
        assert store.load().theme == "dark"
        assert session.toggle_theme() == "light"
        assert store.load().theme == "light"


class TestSessionRegistry:
    @pytest.mark.asyncio
    async def test_reuses_session(self, supabase, tmp_path):
        registry = SessionRegistry(supabase, tmp_path)

        first = await registry.get(USER_ID)
        second = await registry.get(USER_ID)
        assert first is second

    @pytest.mark.asyncio
    async def test_dropped_session_re_enables_sync(self, supabase, fake_supabase, tmp_path):
        registry = SessionRegistry(supabase, tmp_path)
        fake_supabase.failures[("GET", "/rest/v1/user_progress")] = 500
        session = await registry.get(USER_ID)
        assert not session.remote_sync_enabled

        del fake_supabase.failures[("GET", "/rest/v1/user_progress")]
        registry.drop(USER_ID)
        session = await registry.get(USER_ID)
        assert session.remote_sync_enabled
