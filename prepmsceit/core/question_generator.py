"""
Question Generator for prepMSCEIT

Generates original assessment items with Gemini using a schema-constrained
JSON response. Generation is strictly best-effort: every failure yields an
empty list, and callers fall back to the built-in item bank.
"""

import json
import logging
import random
import re
import time
from typing import Any

import httpx

from prepmsceit.config.settings import get_settings
from prepmsceit.core.item_bank import get_static_items
from prepmsceit.models.branch import Branch
from prepmsceit.models.question import Question, QuestionType
from prepmsceit.prompts.generator import GeneratorPrompts

logger = logging.getLogger(__name__)


PLACEHOLDER_IMAGE_URL = "https://picsum.photos/600/400?random={index}"

_FENCE_START = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```\s*$")


class GenerationError(Exception):
    """Raised internally when the upstream call cannot produce items."""
    pass


def strip_code_fences(text: str) -> str:
    """Remove an optional markdown code fence wrapping a JSON payload."""
    text = _FENCE_START.sub("", text)
    text = _FENCE_END.sub("", text)
    return text.strip()


class QuestionGenerator:
    """
    AI item generator backed by the Gemini generateContent API.

    Usage:
        generator = QuestionGenerator()
        items = await generator.generate(Branch.MANAGING)
        if not items:
            items = get_static_items()
    """

    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        rng: random.Random | None = None,
    ):
        self.settings = get_settings()
        self.api_key = api_key if api_key is not None else self.settings.gemini_api_key
        self.model = self.settings.gemini_model
        self.prompts = GeneratorPrompts()
        self.rng = rng or random.Random()

        self.client = httpx.AsyncClient(
            base_url=self.settings.gemini_base_url,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # GENERATION
    # =========================================================================

    async def generate(self, branch: Branch | None = None) -> list[Question]:
        """
        Generate assessment items for a branch.

        Args:
            branch: Target branch, a random branch when omitted

        Returns:
            Generated items, or an empty list on any failure
        """
        if not self.api_key:
            logger.warning("No Gemini API key configured. Returning no generated items.")
            return []

        branch = branch or self.rng.choice(list(Branch))

        try:
            text = await self._call_gemini(branch)
            items = self._parse_items(text, branch)
        except Exception as e:
            logger.error(f"Gemini generation failed for {branch.value}: {e}")
            return []

        logger.info(f"Generated {len(items)} items for {branch.value}")
        return items

    async def load_assessment(self, branch: Branch | None = None) -> list[Question]:
        """Generated items when available, otherwise the built-in item bank."""
        items = await self.generate(branch)
        if items:
            return items

        logger.info("Falling back to built-in item bank")
        return get_static_items()

    async def _call_gemini(self, branch: Branch) -> str:
        """Call generateContent and return the concatenated response text."""
        payload = {
            "systemInstruction": {
                "parts": [{"text": self.prompts.system_instruction(branch)}],
            },
            "contents": [
                {"role": "user", "parts": [{"text": self.prompts.user_prompt(branch)}]},
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": self.prompts.RESPONSE_SCHEMA,
            },
        }

        response = await self.client.post(
            f"/models/{self.model}:generateContent",
            json=payload,
            headers={"x-goog-api-key": self.api_key},
        )

        result = response.json()
        if isinstance(result, dict) and result.get("error"):
            error = result["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise GenerationError(f"Gemini API error: {message}")
        response.raise_for_status()

        return self._extract_text(result)

    def _extract_text(self, result: dict[str, Any]) -> str:
        """Extract text content from a generateContent response."""
        candidates = result.get("candidates") or []
        if not candidates:
            return "[]"

        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        return text or "[]"

    def _parse_items(self, text: str, branch: Branch) -> list[Question]:
        """Parse the model's JSON array into Question objects."""
        raw_items = json.loads(strip_code_fences(text))
        if not isinstance(raw_items, list):
            raise GenerationError("Expected a JSON array of items")

        stamp = int(time.time() * 1000)
        questions = []
        for index, item in enumerate(raw_items):
            question_type = QuestionType(item.get("type", QuestionType.MULTIPLE_CHOICE.value))
            questions.append(Question(
                id=f"gen-{stamp}-{index}",
                branch=branch,
                type=question_type,
                scenario=item["scenario"],
                image_url=(
                    PLACEHOLDER_IMAGE_URL.format(index=index)
                    if question_type == QuestionType.IMAGE_ANALYSIS
                    else None
                ),
                options=item.get("options", []),
                explanation=item.get("explanation"),
            ))

        return questions
