"""
Assessment runner for prepMSCEIT

Steps through one set of items, collecting the consensus score of each
chosen option, and produces the final percentage for the run.
"""

import logging

from pydantic import BaseModel

from prepmsceit.core.scoring import score_answers
from prepmsceit.models.branch import Branch
from prepmsceit.models.question import Question

logger = logging.getLogger(__name__)


class AssessmentError(Exception):
    """Raised when a run is used out of sequence."""
    pass


class AssessmentOutcome(BaseModel):
    """Final result of a completed run."""

    score: int
    branch: Branch
    answers: dict[str, float]


class AssessmentRun:
    """
    One pass through a list of assessment items.

    The run's branch is the branch of its first item.
    """

    def __init__(self, questions: list[Question]):
        if not questions:
            raise AssessmentError("An assessment needs at least one question")

        self.questions = questions
        self.current_index = 0
        self.answers: dict[str, float] = {}
        self.outcome: AssessmentOutcome | None = None

    @property
    def branch(self) -> Branch:
        return self.questions[0].branch

    @property
    def is_complete(self) -> bool:
        return self.outcome is not None

    @property
    def current_question(self) -> Question | None:
        if self.is_complete:
            return None
        return self.questions[self.current_index]

    def answer(self, option_id: str) -> AssessmentOutcome | None:
        """
        Answer the current item.

        Returns:
            The outcome after the last item, otherwise None

        Raises:
            AssessmentError: If the run is already complete
        """
        question = self.current_question
        if question is None:
            raise AssessmentError("Assessment is already complete")

        self.answers[question.id] = question.option_score(option_id)

        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            return None

        self.outcome = AssessmentOutcome(
            score=score_answers(list(self.answers.values()), len(self.questions)),
            branch=self.branch,
            answers=dict(self.answers),
        )
        logger.info(f"Assessment complete: {self.outcome.score}% on {self.branch.value}")
        return self.outcome

    @classmethod
    def score_submission(cls, questions: list[Question], selections: dict[str, str]) -> AssessmentOutcome:
        """
        Score a whole run submitted at once.

        Items without a selection count as a zero-score answer.
        """
        run = cls(questions)
        outcome = None
        for question in questions:
            outcome = run.answer(selections.get(question.id, ""))
        return outcome
