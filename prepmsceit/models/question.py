"""
Assessment item models for prepMSCEIT
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from prepmsceit.models.branch import Branch


class QuestionType(str, Enum):
    """Assessment item formats."""

    MULTIPLE_CHOICE = "MC"
    LIKERT = "Likert"
    IMAGE_ANALYSIS = "Image"


class QuestionOption(BaseModel):
    """One answer option with its expert-consensus weight."""

    id: str
    text: str
    score: float = Field(
        ..., ge=0.0, le=1.0,
        description="Consensus score (1.0 = consensus answer)"
    )


class Question(BaseModel):
    """A single assessment item."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Unique item ID")
    branch: Branch = Field(..., description="Branch the item assesses")
    type: QuestionType = Field(default=QuestionType.MULTIPLE_CHOICE)
    scenario: str = Field(..., description="Item stem shown to the learner")
    image_url: str | None = Field(
        default=None,
        alias="imageUrl",
        description="Stimulus image for Perceiving items"
    )
    options: list[QuestionOption] = Field(default_factory=list)
    explanation: str | None = None

    def option_score(self, option_id: str) -> float:
        """Consensus score of an option, 0 when the option is unknown."""
        for option in self.options:
            if option.id == option_id:
                return option.score
        return 0.0
