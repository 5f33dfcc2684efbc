"""
Function endpoints

Request handlers formerly deployed as standalone edge functions:
- activate-user: mark the caller's profile active
- invite-user: invitations and login links
- parse-questions: free-text question import

Every failure is returned as {"error": message} with status 400.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from prepmsceit.api.dependencies import (
    bearer_token,
    get_invite_service,
    get_parser,
    get_profile_service,
    get_supabase,
)
from prepmsceit.core.invitations import InviteRequest, InviteService
from prepmsceit.core.profiles import ProfileService
from prepmsceit.core.question_parser import QuestionParser
from prepmsceit.core.supabase_client import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)

router = APIRouter()


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    return str(first.get("msg", error)).removeprefix("Value error, ")


async def read_json(request: Request) -> dict[str, Any]:
    """Request body as a JSON object; anything else raises ValueError."""
    try:
        body = await request.json()
    except ValueError:
        raise ValueError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("/activate-user")
async def activate_user(
    authorization: str | None = Header(default=None),
    supabase: SupabaseClient = Depends(get_supabase),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Mark the authenticated caller's profile as active."""
    try:
        token = bearer_token(authorization)
        if not token:
            raise ValueError("Missing Authorization header")

        try:
            identity = await supabase.get_user(token)
        except SupabaseError:
            raise ValueError("Unauthorized")

        await profiles.activate(identity)
        return {"message": "User activated successfully"}

    except Exception as e:
        return error_response(str(e))


@router.post("/invite-user")
async def invite_user(
    request: Request,
    service: InviteService = Depends(get_invite_service),
):
    """Invite a new user or send an existing user a login link."""
    try:
        invite = InviteRequest.model_validate(await read_json(request))
        result = await service.handle(invite)
        return result.model_dump()

    except ValidationError as e:
        return error_response(validation_message(e))
    except Exception as e:
        logger.error(f"invite-user failed: {e}")
        return error_response(str(e))


@router.post("/parse-questions")
async def parse_questions(
    request: Request,
    parser: QuestionParser = Depends(get_parser),
):
    """Extract practice-test questions from pasted text."""
    try:
        body = await read_json(request)
        questions = await parser.parse(body.get("rawText") or "")
        return {"questions": questions}

    except Exception as e:
        logger.error(f"parse-questions failed: {e}")
        return error_response(str(e))
