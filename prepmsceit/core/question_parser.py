"""
Question Parser for prepMSCEIT

Turns a pasted block of free text into practice-test questions using the
OpenAI chat completions API in JSON-object mode. Structural problems are
reported to the caller as QuestionParsingError; nothing is retried.
"""

import json
import logging
from typing import Any

import httpx

from prepmsceit.config.settings import get_settings
from prepmsceit.prompts.parser import ParserPrompts

logger = logging.getLogger(__name__)


class QuestionParsingError(Exception):
    """Raised when the text cannot be turned into a questions array."""
    pass


class QuestionParser:
    """Free-text question extraction via OpenAI."""

    TEMPERATURE = 0.1

    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = get_settings()
        self.api_key = api_key if api_key is not None else self.settings.openai_api_key
        self.model = self.settings.openai_model
        self.prompts = ParserPrompts()

        self.client = httpx.AsyncClient(
            base_url=self.settings.openai_base_url,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def close(self):
        await self.client.aclose()

    async def parse(self, raw_text: str) -> list[dict[str, Any]]:
        """
        Extract questions from raw text.

        Args:
            raw_text: Pasted question text

        Returns:
            The "questions" array exactly as returned by the model

        Raises:
            QuestionParsingError: On missing input or credential, an API
                error, or a response without a questions array
        """
        if not raw_text:
            raise QuestionParsingError("Missing rawText in request body")

        if not self.api_key:
            logger.error("Missing OPENAI_API_KEY")
            raise QuestionParsingError("OPENAI_API_KEY is not configured")

        try:
            response = await self.client.post(
                "/chat/completions",
                json={
                    "model": self.model,
                    "response_format": {"type": "json_object"},
                    "messages": self.prompts.messages(raw_text),
                    "temperature": self.TEMPERATURE,
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            ai_data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"OpenAI request failed: {e}")
            raise QuestionParsingError(f"OpenAI request failed: {e}") from e

        if not isinstance(ai_data, dict):
            raise QuestionParsingError("OpenAI returned an unexpected response structure")

        if ai_data.get("error"):
            error = ai_data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.error(f"OpenAI API Error: {json.dumps(error)}")
            raise QuestionParsingError(f"OpenAI Error: {message}")

        content = self._extract_content(ai_data)

        try:
            parsed = json.loads(content)
        except (TypeError, json.JSONDecodeError):
            logger.error(f"JSON Parse Error. Content: {content}")
            raise QuestionParsingError("Failed to parse AI response as JSON")

        questions = parsed.get("questions") if isinstance(parsed, dict) else None
        if not isinstance(questions, list):
            logger.error(f"Invalid Structure: {parsed}")
            raise QuestionParsingError("AI returned invalid structure (missing questions array)")

        logger.info(f"Parsed {len(questions)} questions from {len(raw_text)} characters")
        return questions

    def _extract_content(self, ai_data: dict[str, Any]) -> Any:
        choices = ai_data.get("choices")
        if not choices or not isinstance(choices[0], dict) or not choices[0].get("message"):
            logger.error(f"Unexpected OpenAI Response: {json.dumps(ai_data)}")
            raise QuestionParsingError("OpenAI returned an unexpected response structure")
        return choices[0]["message"].get("content")
