"""
Scoring for prepMSCEIT

Folds a completed assessment into the learner's cumulative UserStats.
Everything here is pure: callers own persistence.
"""

import math
from datetime import datetime, timezone
from typing import Mapping, Sequence
from uuid import uuid4

from prepmsceit.models.branch import BRANCH_ORDER, Branch
from prepmsceit.models.stats import (
    HistoryItem,
    MAX_MASTERY_LEVEL,
    MAX_PERCENTILE,
    UserStats,
)


LEVEL_UP_THRESHOLD = 80
PERCENTILE_FACTOR = 1.1


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def compute_percentile(consensus_alignment: int) -> int:
    """Display percentile derived from consensus alignment, capped at 99."""
    return min(MAX_PERCENTILE, round_half_up(consensus_alignment * PERCENTILE_FACTOR))


def find_weakest_branch(scores: Mapping[Branch, int]) -> Branch:
    """
    Branch with the lowest score.

    Ties go to the earliest branch in canonical order.
    """
    return min(BRANCH_ORDER, key=lambda branch: scores[branch])


def smooth_score(prior: int, new_score: int) -> int:
    """First attempt takes the new score, later attempts average with the prior."""
    if prior == 0:
        return new_score
    return round_half_up((prior + new_score) / 2)


def consensus_alignment(scores: Mapping[Branch, int], fallback: int) -> int:
    """Mean of the nonzero branch scores, or the fallback when all are zero."""
    attempted = [score for score in scores.values() if score > 0]
    if not attempted:
        return fallback
    return round_half_up(sum(attempted) / len(attempted))


def apply_assessment_result(
    stats: UserStats,
    new_score: int,
    branch: Branch,
    *,
    now: datetime | None = None,
    entry_id: str | None = None,
) -> UserStats:
    """
    Fold one assessment result into the learner's stats.

    Args:
        stats: Current stats snapshot (left untouched)
        new_score: Raw percentage for the completed assessment (0-100)
        branch: Branch the assessment covered
        now: Completion time, defaults to the current UTC time
        entry_id: History entry id, generated when omitted

    Returns:
        New UserStats snapshot

    Raises:
        ValueError: If branch is not one of the four branches or the score
            is out of range
    """
    if not isinstance(branch, Branch):
        branch = Branch(branch)
    if not 0 <= new_score <= 100:
        raise ValueError(f"Score out of range: {new_score}")

    now = now or datetime.now(timezone.utc)

    scores = dict(stats.scores)
    scores[branch] = smooth_score(stats.scores[branch], new_score)

    levels = dict(stats.mastery_levels)
    current_level = levels[branch]
    if new_score >= LEVEL_UP_THRESHOLD and current_level < MAX_MASTERY_LEVEL:
        levels[branch] = current_level + 1

    alignment = consensus_alignment(scores, fallback=new_score)

    entry = HistoryItem(
        id=entry_id or uuid4().hex,
        date=now.date().isoformat(),
        score=new_score,
        branch=branch,
    )

    return stats.model_copy(
        update={
            "scores": scores,
            "mastery_levels": levels,
            "consensus_alignment": alignment,
            "percentile": compute_percentile(alignment),
            "history": (*stats.history, entry),
            "weakest_branch": find_weakest_branch(scores),
            "completion_count": stats.completion_count + 1,
        }
    )


def score_answers(answer_scores: Sequence[float], question_count: int) -> int:
    """
    Percentage score for one assessment run.

    Args:
        answer_scores: Consensus score (0.0-1.0) of each chosen option
        question_count: Number of items in the run

    Returns:
        Rounded percentage of the maximum attainable consensus score
    """
    if question_count <= 0:
        return 0
    return round_half_up(sum(answer_scores) / question_count * 100)
