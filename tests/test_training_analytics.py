"""Tests for the training catalogue and analytics summaries."""

from datetime import datetime, timezone

import pytest

from prepmsceit.core.analytics import summarize
from prepmsceit.core.scoring import apply_assessment_result
from prepmsceit.core.training import (
    AdminRequiredError,
    TrainingCatalogue,
    TrainingCatalogueError,
    catalogue_for,
)
from prepmsceit.models.branch import Branch
from prepmsceit.models.profile import Identity
from prepmsceit.models.stats import UserStats, initial_stats
from prepmsceit.models.training import TRAINING_MODULES, TrainingModule


NOW = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)


class TestCatalogue:
    def test_new_learner_sees_level_one_unlocked(self):
        entries = catalogue_for(initial_stats())

        assert len(entries) == len(TRAINING_MODULES)
        unlocked = {entry.module.id for entry in entries if not entry.locked}
        assert unlocked == {"t1", "t2", "t3", "t4"}

    def test_mastery_unlocks_branch_modules(self):
        stats = UserStats(masteryLevels={Branch.PERCEIVING: 4})

        entries = catalogue_for(stats, branch=Branch.PERCEIVING)

        assert [(e.module.id, e.locked) for e in entries] == [
            ("t1", False), ("t5", False), ("t9", True),
        ]

    def test_search_matches_title_and_description(self):
        assert [e.module.id for e in catalogue_for(initial_stats(), search="vocal")] == ["t9"]
        assert [e.module.id for e in catalogue_for(initial_stats(), search="JEALOUSY")] == ["t2"]

    def test_search_and_branch_combine(self):
        entries = catalogue_for(initial_stats(), branch=Branch.MANAGING, search="team")
        assert [e.module.id for e in entries] == ["t11"]


class TestAnalytics:
    def test_new_learner(self):
        summary = summarize(initial_stats())

        assert summary.completion_count == 0
        assert summary.recent == []
        assert [b.branch for b in summary.branches] == list(Branch)
        assert all(b.attempts == 0 and b.average is None for b in summary.branches)

    def test_branch_figures_and_recent_history(self):
        stats = initial_stats()
        for score, branch in [(60, Branch.USING), (81, Branch.USING), (40, Branch.MANAGING)]:
            stats = apply_assessment_result(stats, score, branch, now=NOW)

        summary = summarize(stats, recent_limit=2)

        using = summary.branches[1]
        assert using.label == "Using"
        assert using.attempts == 2
        assert using.average == 71
        assert using.best == 81
        assert using.score == 71
        assert using.mastery_level == 2

        assert [item.score for item in summary.recent] == [40, 81]
        assert summary.weakest_branch == Branch.PERCEIVING


# ============================================================================
# STORED CATALOGUE
# ============================================================================

STORED_MODULE = {
    "id": "m-1",
    "title": "Reading the Room",
    "branch": "Perceiving Emotions",
    "duration": "10m",
    "description": "Created from Classes view",
    "created_at": "2026-02-01T09:00:00+00:00",
}


@pytest.fixture
def catalogue(supabase):
    return TrainingCatalogue(supabase)


@pytest.fixture
def admin(fake_supabase):
    user = fake_supabase.add_user("admin@example.com")
    fake_supabase.rows("profiles").append({"id": user["id"], "role": "admin"})
    return Identity.model_validate(user)


class TestStoredModules:
    @pytest.mark.asyncio
    async def test_lists_stored_modules(self, catalogue, fake_supabase):
        fake_supabase.rows("training_modules").append(dict(STORED_MODULE))

        modules = await catalogue.list_modules()

        assert [m.id for m in modules] == ["m-1"]
        assert modules[0].branch == Branch.PERCEIVING
        assert modules[0].required_level == 1
        request = fake_supabase.calls("GET", "/rest/v1/training_modules")[0]
        assert request.url.params["order"] == "created_at.desc"

    @pytest.mark.asyncio
    async def test_null_columns_take_defaults(self, catalogue, fake_supabase):
        fake_supabase.rows("training_modules").append(
            {**STORED_MODULE, "description": None, "duration": None}
        )

        module = (await catalogue.list_modules())[0]

        assert module.description == ""
        assert module.duration == "10m"

    @pytest.mark.asyncio
    async def test_store_failure_falls_back_to_built_in(self, catalogue, fake_supabase):
        fake_supabase.failures[("GET", "/rest/v1/training_modules")] = 500

        assert await catalogue.list_modules() == TRAINING_MODULES

    @pytest.mark.asyncio
    async def test_empty_store_falls_back_to_built_in(self, catalogue):
        assert await catalogue.list_modules() == TRAINING_MODULES

    @pytest.mark.asyncio
    async def test_malformed_rows_are_skipped(self, catalogue, fake_supabase):
        fake_supabase.rows("training_modules").extend([
            dict(STORED_MODULE),
            {"id": "m-2", "title": "No branch"},
        ])

        assert [m.id for m in await catalogue.list_modules()] == ["m-1"]

    @pytest.mark.asyncio
    async def test_stored_modules_feed_the_learner_catalogue(self, catalogue, fake_supabase):
        fake_supabase.rows("training_modules").append(dict(STORED_MODULE))

        entries = catalogue_for(initial_stats(), modules=await catalogue.list_modules())

        assert [(e.module.id, e.locked) for e in entries] == [("m-1", False)]


class TestCreateModule:
    @pytest.mark.asyncio
    async def test_admin_creates_module(self, catalogue, fake_supabase, admin):
        module = await catalogue.create_module(admin, "  Reading the Room ", Branch.USING)

        assert isinstance(module, TrainingModule)
        assert module.title == "Reading the Room"
        assert module.duration == "10m"
        row = fake_supabase.rows("training_modules")[0]
        assert row["id"] == module.id
        assert row["branch"] == "Using Emotions"
        assert row["title"] == "Reading the Room"

    @pytest.mark.asyncio
    async def test_metadata_role_counts_without_profile_row(self, catalogue, fake_supabase):
        user = fake_supabase.add_user("meta-admin@example.com", role="admin")

        module = await catalogue.create_module(
            Identity.model_validate(user), "Blends", Branch.UNDERSTANDING
        )

        assert module.branch == Branch.UNDERSTANDING

    @pytest.mark.asyncio
    async def test_student_is_rejected(self, catalogue, fake_supabase):
        user = fake_supabase.add_user("learner@example.com")
        fake_supabase.rows("profiles").append({"id": user["id"], "role": "student"})

        with pytest.raises(AdminRequiredError):
            await catalogue.create_module(Identity.model_validate(user), "Blends", Branch.USING)

        assert fake_supabase.rows("training_modules") == []

    @pytest.mark.asyncio
    async def test_blank_title_is_rejected(self, catalogue, admin):
        with pytest.raises(TrainingCatalogueError, match="Invalid module"):
            await catalogue.create_module(admin, "   ", Branch.USING)

    @pytest.mark.asyncio
    async def test_insert_failure(self, catalogue, fake_supabase, admin):
        fake_supabase.failures[("POST", "/rest/v1/training_modules")] = 500

        with pytest.raises(TrainingCatalogueError, match="Failed to create module"):
            await catalogue.create_module(admin, "Blends", Branch.USING)
