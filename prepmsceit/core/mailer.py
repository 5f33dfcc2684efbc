"""
Transactional email via Resend.
"""

import logging

import httpx

from prepmsceit.config.settings import get_settings

logger = logging.getLogger(__name__)


class MailerError(Exception):
    """Raised when an email cannot be sent."""
    pass


class Mailer:
    """Sends transactional email through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str | None = None,
        sender: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.sender = sender or settings.mail_from

        self.client = httpx.AsyncClient(
            base_url=settings.resend_base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def close(self):
        await self.client.aclose()

    async def send(self, to: str, subject: str, html: str) -> str | None:
        """
        Send one email.

        Returns:
            Provider message id, when the provider returns one

        Raises:
            MailerError: If no API key is configured or the provider rejects the email
        """
        if not self.configured:
            raise MailerError("RESEND_API_KEY is not configured")

        try:
            response = await self.client.post(
                "/emails",
                json={
                    "from": self.sender,
                    "to": [to],
                    "subject": subject,
                    "html": html,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Resend request failed: {e}")
            raise MailerError(f"Email delivery failed: {e}") from e

        if response.is_error:
            logger.error(f"Resend rejected email to {to}: {response.status_code} {response.text}")
            raise MailerError(f"Email delivery failed: {response.text or response.status_code}")

        message_id = response.json().get("id") if response.content else None
        logger.info(f"Sent '{subject}' to {to} ({message_id})")
        return message_id
