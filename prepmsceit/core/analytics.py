"""
Analytics for prepMSCEIT

Aggregates a learner's UserStats into the figures the analytics and
history views display.
"""

from pydantic import BaseModel, Field

from prepmsceit.core.scoring import round_half_up
from prepmsceit.models.branch import BRANCH_ORDER, Branch
from prepmsceit.models.stats import HistoryItem, UserStats


RECENT_HISTORY_LIMIT = 5


class BranchSummary(BaseModel):
    """Per-branch figures."""

    branch: Branch
    label: str
    score: int
    mastery_level: int
    attempts: int
    average: int | None = None
    best: int | None = None


class AnalyticsSummary(BaseModel):
    """Dashboard-level figures."""

    consensus_alignment: int
    percentile: int
    weakest_branch: Branch
    completion_count: int
    branches: list[BranchSummary]
    recent: list[HistoryItem] = Field(default_factory=list)


def summarize(stats: UserStats, recent_limit: int = RECENT_HISTORY_LIMIT) -> AnalyticsSummary:
    """Build the analytics summary for one learner."""
    branches = []
    for branch in BRANCH_ORDER:
        attempts = [item.score for item in stats.history if item.branch == branch]
        branches.append(BranchSummary(
            branch=branch,
            label=branch.short_name,
            score=stats.scores[branch],
            mastery_level=stats.mastery_levels[branch],
            attempts=len(attempts),
            average=round_half_up(sum(attempts) / len(attempts)) if attempts else None,
            best=max(attempts) if attempts else None,
        ))

    recent = list(reversed(stats.history[-recent_limit:])) if recent_limit > 0 else []

    return AnalyticsSummary(
        consensus_alignment=stats.consensus_alignment,
        percentile=stats.percentile,
        weakest_branch=stats.weakest_branch,
        completion_count=stats.completion_count,
        branches=branches,
        recent=recent,
    )
