"""
Assessment API endpoints

Handles the assessment lifecycle:
- Loading items (AI-generated, or the built-in bank)
- Completing a run and folding its score into the learner's stats
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from prepmsceit.api.dependencies import AuthContext, get_auth_context, get_generator, get_sessions
from prepmsceit.core.assessment_runner import AssessmentRun
from prepmsceit.core.progress import SessionRegistry
from prepmsceit.core.question_generator import QuestionGenerator
from prepmsceit.models.branch import Branch

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class GenerateRequest(BaseModel):
    """Request model for loading an assessment."""
    branch: str | None = None


class GenerateResponse(BaseModel):
    """Items for one assessment run."""
    branch: str
    questions: list[dict[str, Any]]


class CompleteRequest(BaseModel):
    """
    Request model for completing an assessment.

    Either selections (question id -> option id) for the loaded items,
    or a precomputed score with its branch.
    """
    selections: dict[str, str] | None = None
    score: int | None = Field(default=None, ge=0, le=100)
    branch: str | None = None


class CompleteResponse(BaseModel):
    """Result of a completed assessment."""
    score: int
    branch: str
    stats: dict[str, Any]


def parse_branch(value: str | None) -> Branch | None:
    if value is None:
        return None
    try:
        return Branch.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("/generate", response_model=GenerateResponse)
async def generate_assessment(
    request: GenerateRequest,
    auth: AuthContext = Depends(get_auth_context),
    generator: QuestionGenerator = Depends(get_generator),
    sessions: SessionRegistry = Depends(get_sessions),
) -> GenerateResponse:
    """Load items for a new run and remember them for completion."""
    branch = parse_branch(request.branch)
    questions = await generator.load_assessment(branch)

    session = await sessions.get(auth.identity.id)
    session.active_questions = questions

    return GenerateResponse(
        branch=questions[0].branch.value,
        questions=[q.model_dump(mode="json", by_alias=True) for q in questions],
    )


@router.post("/complete", response_model=CompleteResponse)
async def complete_assessment(
    request: CompleteRequest,
    auth: AuthContext = Depends(get_auth_context),
    sessions: SessionRegistry = Depends(get_sessions),
) -> CompleteResponse:
    """Score a run and update the learner's stats."""
    session = await sessions.get(auth.identity.id)

    if request.selections is not None:
        if not session.active_questions:
            raise HTTPException(status_code=400, detail="No assessment in progress")
        outcome = AssessmentRun.score_submission(session.active_questions, request.selections)
        score, branch = outcome.score, outcome.branch
    else:
        branch = parse_branch(request.branch)
        if request.score is None or branch is None:
            raise HTTPException(status_code=400, detail="Provide selections, or a score and branch")
        score = request.score

    stats = await session.complete_assessment(score, branch)
    session.active_questions = []

    return CompleteResponse(
        score=score,
        branch=branch.value,
        stats=stats.to_document(),
    )
