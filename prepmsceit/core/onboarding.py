"""
Onboarding intake for prepMSCEIT

A short fixed sequence of single-choice questions. Answers are stored on
the identity metadata and the profile row; persistence failures are logged
and never block the learner.
"""

import asyncio
import logging
from datetime import datetime, timezone

from pydantic import BaseModel

from prepmsceit.config.settings import get_settings
from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)


class OnboardingError(Exception):
    """Raised for answers that do not fit the intake sequence."""
    pass


class IntakeOption(BaseModel):
    id: str
    label: str


class IntakeQuestion(BaseModel):
    id: str
    title: str
    options: list[IntakeOption]

    def has_option(self, option_id: str) -> bool:
        return any(option.id == option_id for option in self.options)


INTAKE_QUESTIONS: list[IntakeQuestion] = [
    IntakeQuestion(
        id="role",
        title="What best describes you?",
        options=[
            IntakeOption(id="student", label="Medical Student"),
            IntakeOption(id="professional", label="Healthcare Professional"),
            IntakeOption(id="leader", label="Team Leader"),
            IntakeOption(id="enthusiast", label="EI Enthusiast"),
        ],
    ),
    IntakeQuestion(
        id="goal",
        title="What is your primary goal?",
        options=[
            IntakeOption(id="exam", label="Ace the MSCEIT Exam"),
            IntakeOption(id="leadership", label="Improve Leadership"),
            IntakeOption(id="relationships", label="Better Relationships"),
            IntakeOption(id="awareness", label="Self Awareness"),
        ],
    ),
    IntakeQuestion(
        id="experience",
        title="Current experience with EI?",
        options=[
            IntakeOption(id="novice", label="Beginner"),
            IntakeOption(id="intermediate", label="Intermediate"),
            IntakeOption(id="advanced", label="Advanced"),
        ],
    ),
]


class OnboardingResult(BaseModel):
    """Outcome of a submitted intake."""

    complete: bool = True
    answers: dict[str, str]
    metadata_saved: bool
    profile_saved: bool


class OnboardingFlow:
    """
    Steps a learner through the intake questions and submits the answers.

    Usage:
        flow = OnboardingFlow(supabase, access_token, user_id)
        for option_id in ("student", "exam", "novice"):
            flow.answer(option_id)
        result = await flow.submit()
    """

    def __init__(
        self,
        supabase: SupabaseClient,
        access_token: str,
        user_id: str,
        full_name: str = "",
        questions: list[IntakeQuestion] | None = None,
        delay_seconds: float | None = None,
    ):
        self.supabase = supabase
        self.access_token = access_token
        self.user_id = user_id
        self.full_name = full_name
        self.questions = questions or INTAKE_QUESTIONS
        self.delay_seconds = (
            delay_seconds if delay_seconds is not None
            else get_settings().onboarding_delay_seconds
        )

        self.step = 0
        self.answers: dict[str, str] = {}

    @property
    def current_question(self) -> IntakeQuestion | None:
        if self.step >= len(self.questions):
            return None
        return self.questions[self.step]

    @property
    def is_finished(self) -> bool:
        return self.step >= len(self.questions)

    def answer(self, option_id: str) -> IntakeQuestion | None:
        """
        Record the answer to the current question and advance.

        Returns:
            The next question, or None after the last one

        Raises:
            OnboardingError: If the flow is finished or the option is unknown
        """
        question = self.current_question
        if question is None:
            raise OnboardingError("Onboarding is already finished")
        if not question.has_option(option_id):
            raise OnboardingError(f"Unknown option '{option_id}' for question '{question.id}'")

        self.answers[question.id] = option_id
        self.step += 1
        return self.current_question

    async def submit(self) -> OnboardingResult:
        """
        Persist the answers, then wait the fixed progress delay.

        The intake counts as complete whatever the persistence outcome.
        """
        if not self.is_finished:
            raise OnboardingError("Answer every question before submitting")

        metadata_saved = await self._save_metadata()
        profile_saved = await self._save_profile()

        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        return OnboardingResult(
            answers=dict(self.answers),
            metadata_saved=metadata_saved,
            profile_saved=profile_saved,
        )

    async def _save_metadata(self) -> bool:
        try:
            await self.supabase.update_user_metadata(self.access_token, {
                "onboarding_complete": True,
                "profile": self.answers,
            })
        except SupabaseError as e:
            logger.error(f"Onboarding metadata update failed for {self.user_id}: {e}")
            return False
        return True

    async def _save_profile(self) -> bool:
        try:
            await self.supabase.upsert("profiles", {
                "id": self.user_id,
                "full_name": self.full_name,
                "role": self.answers.get("role"),
                "goal": self.answers.get("goal"),
                "experience_level": self.answers.get("experience"),
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
        except SupabaseError as e:
            logger.error(f"Onboarding profile upsert failed for {self.user_id}: {e}")
            return False
        return True
