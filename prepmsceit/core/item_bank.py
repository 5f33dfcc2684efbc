"""
Built-in assessment items, used whenever AI generation returns nothing.
"""

from prepmsceit.models.branch import Branch
from prepmsceit.models.question import Question, QuestionOption, QuestionType


STATIC_ITEM_BANK: list[Question] = [
    Question(
        id="q1",
        branch=Branch.PERCEIVING,
        type=QuestionType.IMAGE_ANALYSIS,
        scenario=(
            "Look at the facial expression in the image. To what extent is "
            "this person expressing Anticipation?"
        ),
        image_url="https://picsum.photos/600/400?grayscale",
        options=[
            QuestionOption(id="1", text="Not at all", score=0.2),
            QuestionOption(id="2", text="Slightly", score=0.5),
            QuestionOption(id="3", text="Moderately", score=1.0),
            QuestionOption(id="4", text="Very much", score=0.6),
            QuestionOption(id="5", text="Extremely", score=0.3),
        ],
    ),
    Question(
        id="q2",
        branch=Branch.UNDERSTANDING,
        type=QuestionType.MULTIPLE_CHOICE,
        scenario=(
            "Julia feels regretful about a decision she made. If this feeling "
            "intensifies and combines with annoyance at herself, what is she "
            "most likely to feel next?"
        ),
        options=[
            QuestionOption(id="a", text="Depression", score=0.4),
            QuestionOption(id="b", text="Guilt", score=1.0),
            QuestionOption(id="c", text="Anxiety", score=0.5),
            QuestionOption(id="d", text="Apathy", score=0.1),
        ],
    ),
    Question(
        id="q3",
        branch=Branch.MANAGING,
        type=QuestionType.MULTIPLE_CHOICE,
        scenario=(
            "You are leading a team that has just lost a major client. Morale "
            "is low, and people are blaming each other. What is the most "
            "effective action to manage the team's emotions?"
        ),
        options=[
            QuestionOption(
                id="a",
                text="Immediately hold a meeting to find out who is responsible.",
                score=0.2,
            ),
            QuestionOption(
                id="b",
                text=(
                    "Acknowledge the disappointment, then refocus the group on "
                    "a unified recovery plan."
                ),
                score=1.0,
            ),
            QuestionOption(
                id="c",
                text="Ignore the loss and tell everyone to stay positive.",
                score=0.3,
            ),
            QuestionOption(
                id="d",
                text="Meet with members individually to let them vent about their colleagues.",
                score=0.4,
            ),
        ],
    ),
]


def get_static_items() -> list[Question]:
    """Copies of the built-in items, safe for callers to mutate."""
    return [item.model_copy(deep=True) for item in STATIC_ITEM_BANK]
