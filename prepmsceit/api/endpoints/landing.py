"""
Landing page API endpoints

Public, unauthenticated:
- Lead capture form submission
- Enrolment countdown
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from prepmsceit.api.dependencies import get_lead_client
from prepmsceit.config.settings import get_settings
from prepmsceit.core.lead_capture import (
    Countdown,
    LeadCaptureClient,
    LeadSubmissionError,
    countdown,
)

router = APIRouter()


class LeadRequest(BaseModel):
    name: str
    email: str


class LeadResponse(BaseModel):
    status: str
    message: str


@router.post("/leads", response_model=LeadResponse)
async def submit_lead(
    request: LeadRequest,
    client: LeadCaptureClient = Depends(get_lead_client),
) -> LeadResponse:
    """Forward a landing page application to the enrolment webhook."""
    try:
        await client.submit(request.name, request.email)
    except LeadSubmissionError as e:
        status_code = 502 if e.kind == "rejected" else 400
        raise HTTPException(
            status_code=status_code,
            detail={"error": str(e), "kind": e.kind},
        )

    return LeadResponse(status="submitted", message="Application submitted successfully!")


@router.get("/countdown", response_model=Countdown)
async def get_countdown() -> Countdown:
    """Time left until the enrolment deadline."""
    return countdown(get_settings().enrolment_deadline)
