"""
Account API endpoints

Handles:
- Onboarding intake
- Profile updates
- Sign-out (drops the learner session)
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from prepmsceit.api.dependencies import (
    AuthContext,
    get_auth_context,
    get_profile_service,
    get_sessions,
    get_supabase,
)
from prepmsceit.core.onboarding import (
    INTAKE_QUESTIONS,
    IntakeQuestion,
    OnboardingError,
    OnboardingFlow,
    OnboardingResult,
)
from prepmsceit.core.profiles import ProfileService, ProfileUpdateError
from prepmsceit.core.progress import SessionRegistry
from prepmsceit.core.supabase_client import SupabaseClient

router = APIRouter()


class OnboardingRequest(BaseModel):
    """Selected option id per intake question id."""
    answers: dict[str, str]


class ProfileUpdateRequest(BaseModel):
    full_name: str


class ProfileUpdateResponse(BaseModel):
    id: str
    full_name: str


@router.get("/onboarding/questions")
async def get_onboarding_questions() -> list[IntakeQuestion]:
    """Get the intake questions in order."""
    return INTAKE_QUESTIONS


@router.post("/onboarding", response_model=OnboardingResult)
async def submit_onboarding(
    request: OnboardingRequest,
    auth: AuthContext = Depends(get_auth_context),
    supabase: SupabaseClient = Depends(get_supabase),
    sessions: SessionRegistry = Depends(get_sessions),
) -> OnboardingResult:
    """
    Submit the intake answers.

    Persistence problems are reported in the result but never fail the call.
    """
    flow = OnboardingFlow(
        supabase,
        access_token=auth.access_token,
        user_id=auth.identity.id,
        full_name=auth.identity.full_name,
    )

    try:
        while not flow.is_finished:
            question = flow.current_question
            flow.answer(request.answers.get(question.id, ""))
    except OnboardingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = await flow.submit()

    session = await sessions.get(auth.identity.id)
    await session.reset()

    return result


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    auth: AuthContext = Depends(get_auth_context),
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    """Update the learner's display name."""
    try:
        identity = await profiles.update_profile(auth.access_token, request.full_name)
    except ProfileUpdateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ProfileUpdateResponse(id=identity.id, full_name=request.full_name)


@router.post("/session/logout", status_code=204)
async def logout(
    auth: AuthContext = Depends(get_auth_context),
    sessions: SessionRegistry = Depends(get_sessions),
) -> None:
    """
    End the learner's session.

    The next request loads a fresh session, with remote sync re-enabled.
    """
    sessions.drop(auth.identity.id)
