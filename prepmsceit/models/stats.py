"""
Learner progress models for prepMSCEIT

UserStats is persisted as one opaque JSON document per learner. Field
aliases keep the stored document in the camelCase shape the dashboard reads.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prepmsceit.models.branch import BRANCH_ORDER, Branch


MIN_MASTERY_LEVEL = 1
MAX_MASTERY_LEVEL = 10
MAX_PERCENTILE = 99


class HistoryItem(BaseModel):
    """One completed assessment in the learner's history."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: str = Field(..., description="ISO date truncated to day")
    score: int = Field(..., ge=0, le=100)
    branch: Branch


class UserStats(BaseModel):
    """Cumulative learner progress across the four branches."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    scores: dict[Branch, int] = Field(
        default_factory=lambda: {branch: 0 for branch in BRANCH_ORDER},
        description="Branch score on a 0-100 scale",
    )
    mastery_levels: dict[Branch, int] = Field(
        default_factory=lambda: {branch: MIN_MASTERY_LEVEL for branch in BRANCH_ORDER},
        alias="masteryLevels",
        description="Unlocked difficulty tier per branch (1-10)",
    )
    consensus_alignment: int = Field(default=0, ge=0, le=100, alias="consensusAlignment")
    percentile: int = Field(default=0, ge=0, le=MAX_PERCENTILE)
    history: tuple[HistoryItem, ...] = Field(default_factory=tuple)
    weakest_branch: Branch = Field(default=Branch.MANAGING, alias="weakestBranch")
    completion_count: int = Field(default=0, ge=0, alias="completionCount")

    @field_validator("scores", mode="before")
    @classmethod
    def _complete_scores(cls, value: Any) -> dict:
        return _fill_branches(value, 0)

    @field_validator("mastery_levels", mode="before")
    @classmethod
    def _complete_levels(cls, value: Any) -> dict:
        return _fill_branches(value, MIN_MASTERY_LEVEL)

    @field_validator("scores")
    @classmethod
    def _check_score_range(cls, value: dict[Branch, int]) -> dict[Branch, int]:
        for branch, score in value.items():
            if not 0 <= score <= 100:
                raise ValueError(f"Score for {branch.value} out of range: {score}")
        return value

    @field_validator("mastery_levels")
    @classmethod
    def _check_level_range(cls, value: dict[Branch, int]) -> dict[Branch, int]:
        for branch, level in value.items():
            if not MIN_MASTERY_LEVEL <= level <= MAX_MASTERY_LEVEL:
                raise ValueError(f"Mastery level for {branch.value} out of range: {level}")
        return value

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored JSON document shape."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "UserStats":
        """Load from a stored JSON document."""
        return cls.model_validate(document)


def _fill_branches(value: Any, default: int) -> dict:
    """Key by Branch in canonical order, filling branches the document omits."""
    if value is None:
        value = {}
    if not isinstance(value, dict):
        raise ValueError("Expected a mapping of branch to value")

    provided = {
        key if isinstance(key, Branch) else Branch.parse(str(key)): raw
        for key, raw in value.items()
    }
    return {branch: provided.get(branch, default) for branch in BRANCH_ORDER}


def initial_stats() -> UserStats:
    """Clean baseline for a new learner."""
    return UserStats()
