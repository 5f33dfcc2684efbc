"""
Landing page support for prepMSCEIT

- Lead capture: forwards name/email to the enrolment webhook
- Countdown: time left until the enrolment deadline
"""

import logging
from datetime import datetime, timezone

import httpx
from pydantic import BaseModel

from prepmsceit.config.settings import get_settings

logger = logging.getLogger(__name__)


REJECTED_MESSAGE = (
    "Submission failed. This might be due to a CORS policy on the webhook. "
    "Please ensure the webhook allows requests from this domain."
)


class LeadSubmissionError(Exception):
    """
    User-visible lead capture failure.

    kind is "rejected" when the webhook refused or could not be reached
    (the cross-origin class of failure), "failed" otherwise.
    """

    def __init__(self, message: str, kind: str = "failed"):
        super().__init__(message)
        self.kind = kind


class LeadSubmission(BaseModel):
    """Payload posted to the webhook."""

    name: str
    email: str
    source: str
    timestamp: str


class LeadCaptureClient:
    """Posts landing page applications to the configured webhook. No retry."""

    def __init__(
        self,
        webhook_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.webhook_url = webhook_url if webhook_url is not None else settings.lead_webhook_url
        self.source = settings.lead_source
        self.client = httpx.AsyncClient(transport=transport)

    async def close(self):
        await self.client.aclose()

    async def submit(self, name: str, email: str) -> LeadSubmission:
        """
        Submit one application.

        Raises:
            LeadSubmissionError: On any failure
        """
        if not self.webhook_url:
            raise LeadSubmissionError("Lead capture is not configured", kind="failed")
        if not name.strip() or "@" not in email:
            raise LeadSubmissionError("Please provide your name and a valid email", kind="failed")

        payload = LeadSubmission(
            name=name.strip(),
            email=email.strip(),
            source=self.source,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

        try:
            response = await self.client.post(self.webhook_url, json=payload.model_dump())
        except httpx.HTTPError as e:
            logger.error(f"Submission error: {e}")
            raise LeadSubmissionError(REJECTED_MESSAGE, kind="rejected") from e

        if not response.is_success:
            logger.error(f"Submission error: webhook returned {response.status_code}")
            raise LeadSubmissionError(REJECTED_MESSAGE, kind="rejected")

        logger.info(f"Lead captured for {payload.email}")
        return payload


# ============================================================================
# COUNTDOWN
# ============================================================================

class Countdown(BaseModel):
    """Zero-padded time remaining."""

    days: str = "00"
    hours: str = "00"
    minutes: str = "00"
    seconds: str = "00"
    expired: bool = True


def countdown(deadline: datetime, now: datetime | None = None) -> Countdown:
    """Time left until the deadline, all zeros once it has passed."""
    now = now or datetime.now(timezone.utc)
    remaining = int((deadline - now).total_seconds())
    if remaining <= 0:
        return Countdown()

    days, remainder = divmod(remaining, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    return Countdown(
        days=f"{days:02d}",
        hours=f"{hours:02d}",
        minutes=f"{minutes:02d}",
        seconds=f"{seconds:02d}",
        expired=False,
    )
