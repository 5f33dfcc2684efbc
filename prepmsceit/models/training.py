"""
Training catalogue for prepMSCEIT

Modules unlock as the learner's mastery level in the module's branch
reaches the required level. Admins add modules to the training_modules
table; the definitions below are the built-in catalogue.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from prepmsceit.models.branch import Branch


DEFAULT_MODULE_DURATION = "10m"


class TrainingModule(BaseModel):
    """A self-paced training module."""

    id: str
    title: str = Field(..., min_length=1)
    description: str = ""
    branch: Branch
    duration: str = DEFAULT_MODULE_DURATION
    required_level: int = Field(default=1, ge=1, le=10)

    @field_validator("branch", mode="before")
    @classmethod
    def _parse_branch(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, Branch):
            return Branch.parse(value)
        return value

    @field_validator("description", "duration", "required_level", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Rows created from the admin view can leave these columns null
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class CatalogueEntry(BaseModel):
    """A training module as seen by one learner."""

    module: TrainingModule
    locked: bool


# ============================================================================
# MODULE DEFINITIONS
# ============================================================================

TRAINING_MODULES: list[TrainingModule] = [
    # Perceiving Emotions
    TrainingModule(
        id="t1",
        title="Micro-Expression Drilling",
        description="Rapidly identify subtle facial cues in 50ms flashes.",
        branch=Branch.PERCEIVING,
        duration="5 min",
        required_level=1,
    ),
    TrainingModule(
        id="t5",
        title="Non-Verbal Leakage",
        description="Detect when someone is hiding their true state through posture.",
        branch=Branch.PERCEIVING,
        duration="10 min",
        required_level=4,
    ),
    TrainingModule(
        id="t9",
        title="Vocal Prosody Analysis",
        description="Interpret emotional intent through tone, pitch, and pauses.",
        branch=Branch.PERCEIVING,
        duration="7 min",
        required_level=7,
    ),
    # Using Emotions
    TrainingModule(
        id="t4",
        title="Mood Induction",
        description="How to generate specific moods for creative versus analytical tasks.",
        branch=Branch.USING,
        duration="10 min",
        required_level=1,
    ),
    TrainingModule(
        id="t6",
        title="Emotional Catalysts",
        description="Using empathy to drive team innovation during brainstorming.",
        branch=Branch.USING,
        duration="12 min",
        required_level=5,
    ),
    # Understanding Emotions
    TrainingModule(
        id="t2",
        title="Emotional Vocabulary",
        description="Learn the nuance between similar states like Envy and Jealousy.",
        branch=Branch.UNDERSTANDING,
        duration="8 min",
        required_level=1,
    ),
    TrainingModule(
        id="t7",
        title="Transition Mapping",
        description="Predict how frustration transforms into anger or resignation.",
        branch=Branch.UNDERSTANDING,
        duration="15 min",
        required_level=6,
    ),
    TrainingModule(
        id="t10",
        title="Blend Identification",
        description="Deconstruct complex emotions like Bittersweet or Awe.",
        branch=Branch.UNDERSTANDING,
        duration="9 min",
        required_level=8,
    ),
    # Managing Emotions
    TrainingModule(
        id="t3",
        title="Conflict De-escalation",
        description="High-stakes management of emotional arguments and blame.",
        branch=Branch.MANAGING,
        duration="12 min",
        required_level=1,
    ),
    TrainingModule(
        id="t8",
        title="The Feedback Loop",
        description="Regulate your own response to critical clinical evaluations.",
        branch=Branch.MANAGING,
        duration="10 min",
        required_level=5,
    ),
    TrainingModule(
        id="t11",
        title="Group Regulation",
        description="Managing the emotional climate of an entire ward or team.",
        branch=Branch.MANAGING,
        duration="20 min",
        required_level=9,
    ),
]
