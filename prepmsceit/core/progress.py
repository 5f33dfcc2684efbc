"""
Learner progress persistence for prepMSCEIT

Handles the load/save lifecycle of a learner's state:
- LocalStateStore: JSON file per learner holding the theme and cached stats
- LearnerSession: local-first saves with best-effort remote sync
- SessionRegistry: one LearnerSession per signed-in learner

Remote sync disables itself after the first failure and stays off until
the session is recreated. Local saves are never rolled back.
"""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from prepmsceit.core.scoring import apply_assessment_result
from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError
from prepmsceit.models.branch import Branch
from prepmsceit.models.profile import Profile
from prepmsceit.models.question import Question
from prepmsceit.models.stats import UserStats, initial_stats

logger = logging.getLogger(__name__)


PROGRESS_TABLE = "user_progress"
HISTORY_TABLE = "assessment_history"
PROFILES_TABLE = "profiles"

Theme = Literal["light", "dark"]


class LocalState(BaseModel):
    """Everything the learner's device would keep between visits."""

    theme: Theme = "light"
    stats: UserStats = Field(default_factory=initial_stats)


class LocalStateStore:
    """JSON file cache for one learner's LocalState."""

    def __init__(self, cache_dir: Path, user_id: str):
        self.path = Path(cache_dir) / f"{user_id}.json"

    def load(self) -> LocalState:
        """Read the cached state; missing or unreadable files load as defaults."""
        if not self.path.exists():
            return LocalState()

        try:
            return LocalState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable local state {self.path}: {e}")
            return LocalState()

    def save(self, state: LocalState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            state.model_dump_json(by_alias=True, indent=2),
            encoding="utf-8",
        )


class LearnerSession:
    """
    A signed-in learner's progress, cached locally and mirrored remotely.

    Lifecycle:
        session = LearnerSession(user_id, supabase, store)
        await session.load()
        await session.complete_assessment(85, Branch.MANAGING)
    """

    def __init__(self, user_id: str, supabase: SupabaseClient, store: LocalStateStore):
        self.user_id = user_id
        self.supabase = supabase
        self.store = store

        self.stats: UserStats = initial_stats()
        self.theme: Theme = "light"
        self.remote_sync_enabled = True
        self.active_questions: list[Question] = []
        self._profile_task: asyncio.Task | None = None

    # =========================================================================
    # LOAD / SAVE
    # =========================================================================

    async def load(self) -> UserStats:
        """
        Load stats: remote document first, then the local cache, then the
        clean baseline.
        """
        local = self.store.load()
        self.theme = local.theme

        try:
            row = await self.supabase.select_one(
                PROGRESS_TABLE, {"user_id": self.user_id}, columns="data"
            )
        except SupabaseError as e:
            logger.warning(f"Remote stats unavailable for {self.user_id}, using local cache: {e}")
            self.remote_sync_enabled = False
            self.stats = local.stats
        else:
            self.stats = self._stats_from_row(row) or local.stats

        self._profile_task = asyncio.create_task(self._fetch_profile())
        return self.stats

    def _stats_from_row(self, row: dict | None) -> UserStats | None:
        if not row or not row.get("data"):
            logger.info(f"No remote stats found for {self.user_id}")
            return None

        try:
            return UserStats.from_document(row["data"])
        except ValidationError as e:
            logger.warning(f"Remote stats for {self.user_id} are malformed, ignoring: {e}")
            return None

    async def _fetch_profile(self) -> None:
        """Fire-and-forget profile fetch; the result is only logged."""
        try:
            row = await self.supabase.select_one(PROFILES_TABLE, {"id": self.user_id})
            profile = Profile.model_validate(row) if row else None
        except (SupabaseError, ValidationError) as e:
            logger.warning(f"Profile fetch failed for {self.user_id}: {e}")
            return

        if profile:
            logger.info(f"Profile details loaded for {self.user_id} (status: {profile.status})")

    async def save(self, stats: UserStats) -> None:
        """Save locally, then mirror to the remote store while sync is enabled."""
        self.stats = stats
        self.store.save(LocalState(theme=self.theme, stats=stats))

        if not self.remote_sync_enabled:
            return

        try:
            await self.supabase.upsert(
                PROGRESS_TABLE,
                {
                    "user_id": self.user_id,
                    "data": stats.to_document(),
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                on_conflict="user_id",
            )
        except SupabaseError as e:
            logger.error(f"Remote sync failed for {self.user_id}, disabling for this session: {e}")
            self.remote_sync_enabled = False

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def complete_assessment(
        self,
        score: int,
        branch: Branch,
        now: datetime | None = None,
    ) -> UserStats:
        """Fold a completed assessment into the stats, save, and audit it."""
        now = now or datetime.now(timezone.utc)
        new_stats = apply_assessment_result(self.stats, score, branch, now=now)

        await self.save(new_stats)
        await self._record_history(score, branch, now)

        logger.info(f"{self.user_id} completed {branch.value} with {score}%")
        return new_stats

    async def _record_history(self, score: int, branch: Branch, now: datetime) -> None:
        try:
            await self.supabase.insert(HISTORY_TABLE, {
                "user_id": self.user_id,
                "branch": branch.value,
                "score": score,
                "created_at": now.isoformat(),
            })
        except SupabaseError as e:
            logger.error(f"History save error for {self.user_id}: {e}")

    async def reset(self) -> UserStats:
        """Start over from the clean baseline."""
        stats = initial_stats()
        await self.save(stats)
        return stats

    def toggle_theme(self) -> Theme:
        """Flip between light and dark and persist the choice locally."""
        self.theme = "light" if self.theme == "dark" else "dark"
        self.store.save(LocalState(theme=self.theme, stats=self.stats))
        return self.theme


class SessionRegistry:
    """In-memory map of user id to LearnerSession."""

    def __init__(self, supabase: SupabaseClient, cache_dir: Path):
        self.supabase = supabase
        self.cache_dir = Path(cache_dir)
        self._sessions: dict[str, LearnerSession] = {}

    async def get(self, user_id: str) -> LearnerSession:
        """Return the learner's session, creating and loading it on first use."""
        session = self._sessions.get(user_id)
        if session is None:
            session = LearnerSession(
                user_id,
                self.supabase,
                LocalStateStore(self.cache_dir, user_id),
            )
            await session.load()
            self._sessions[user_id] = session
        return session

    def drop(self, user_id: str) -> None:
        """Forget a session so the next request starts a fresh one."""
        if self._sessions.pop(user_id, None) is not None:
            logger.info(f"Dropped session for {user_id}")
