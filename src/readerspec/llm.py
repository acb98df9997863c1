"""LLM client wrapper around litellm.

Provides the raw ``call`` plus ``translate``, which turns a prompt into a
JSON readerspec block without ever raising.
"""

import logging
import re

from litellm import completion
from pydantic import BaseModel

from readerspec.config import DEFAULT_MODEL
from readerspec.errors import CompletionServiceError
from readerspec.parser.document import decode_json

logger = logging.getLogger(__name__)

TRANSLATE_SYSTEM_PROMPT = (
    "You are an expert API designer who converts human-readable API specifications "
    "into structured JSON. Always return valid JSON that follows the exact schema "
    "provided. Do not include explanations or markdown formatting."
)

# Reported for every reply that parses. Not a computed score.
FIXED_CONFIDENCE = 0.9

JSON_SPAN = re.compile(r"\{.*\}", re.DOTALL)


class TranslationResult(BaseModel):
    success: bool
    block: str | None = None
    confidence: float | None = None
    error: str | None = None


class LlmClient:
    """Wrapper for LLM API calls via litellm."""

    def __init__(
        self,
        model: str | None = None,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        api_key: str | None = None,
    ):
        self.model = model or DEFAULT_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = api_key

    def call(self, system: str, user: str) -> str:
        """Send a system+user message to the LLM and return the response text."""
        kwargs = {}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        try:
            response = completion(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                **kwargs,
            )
            content = response.choices[0].message.content if response.choices else None
        except Exception as e:  # litellm maps provider failures to many exception types
            raise CompletionServiceError(str(e)) from e

        if not content:
            raise CompletionServiceError("No response from completion service")
        return content

    def translate(self, prompt: str) -> TranslationResult:
        """Ask the model for a readerspec block and check that it is JSON."""
        try:
            response = self.call(system=TRANSLATE_SYSTEM_PROMPT, user=prompt)
        except CompletionServiceError as e:
            logger.warning("Completion request failed: %s", e)
            return TranslationResult(success=False, error=str(e))

        block = extract_json_span(response)
        if block is None:
            return TranslationResult(success=False, error="No JSON found in response")

        try:
            decode_json(block)
        except ValueError as e:
            return TranslationResult(success=False, error=f"Invalid JSON: {e}")

        return TranslationResult(success=True, block=block, confidence=FIXED_CONFIDENCE)


def extract_json_span(text: str) -> str | None:
    """Return the span from the first ``{`` to the last ``}``, if any."""
    match = JSON_SPAN.search(text)
    if match:
        return match.group(0)
    return None
