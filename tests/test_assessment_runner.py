"""Tests for stepping through and scoring an assessment run."""

import pytest

from prepmsceit.core.assessment_runner import AssessmentError, AssessmentRun
from prepmsceit.core.item_bank import STATIC_ITEM_BANK, get_static_items
from prepmsceit.models.branch import Branch


class TestAssessmentRun:
    def test_empty_run_rejected(self):
        with pytest.raises(AssessmentError):
            AssessmentRun([])

    def test_branch_is_first_item_branch(self):
        assert AssessmentRun(get_static_items()).branch == Branch.PERCEIVING

    def test_consensus_answers_score_full_marks(self):
        run = AssessmentRun(get_static_items())

        assert run.answer("3") is None
        assert run.answer("b") is None
        outcome = run.answer("b")

        assert outcome.score == 100
        assert outcome.branch == Branch.PERCEIVING
        assert outcome.answers == {"q1": 1.0, "q2": 1.0, "q3": 1.0}
        assert run.is_complete
        assert run.current_question is None

    def test_partial_credit_rounds_half_up(self):
        run = AssessmentRun(get_static_items())
        run.answer("1")
        run.answer("a")
        outcome = run.answer("a")

        # (0.2 + 0.4 + 0.2) / 3 = 26.67%
        assert outcome.score == 27

    def test_unknown_option_scores_zero(self):
        run = AssessmentRun(get_static_items())
        run.answer("nope")
        run.answer("b")
        outcome = run.answer("b")

        assert outcome.answers["q1"] == 0.0
        assert outcome.score == 67

    def test_answer_after_completion_rejected(self):
        run = AssessmentRun(get_static_items()[:1])
        run.answer("3")

        with pytest.raises(AssessmentError):
            run.answer("3")


class TestScoreSubmission:
    def test_scores_selections(self):
        outcome = AssessmentRun.score_submission(
            get_static_items(), {"q1": "3", "q2": "c", "q3": "b"}
        )
        assert outcome.score == 83

    def test_missing_selection_counts_as_zero(self):
        outcome = AssessmentRun.score_submission(get_static_items(), {"q1": "3"})
        assert outcome.score == 33


class TestItemBank:
    def test_copies_are_independent(self):
        items = get_static_items()
        items[0].scenario = "changed"

        assert STATIC_ITEM_BANK[0].scenario != "changed"

    def test_every_item_has_a_consensus_answer(self):
        for item in STATIC_ITEM_BANK:
            assert max(option.score for option in item.options) == 1.0
