"""
Gemini inference adapter.

Takes a GenerationRequest, issues exactly one generate_content call and
returns the response text. Every failure leaves this module as an
InferenceError (InferenceTimeoutError for timeouts); no retries, no streaming.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, List, Optional

from google import genai
from google.genai import types

from whats_for_dinner.config import settings
from whats_for_dinner.models.submission import (
    ContentPart,
    GenerationRequest,
    InlineMediaPart,
    TextPart,
)
from whats_for_dinner.utils.exceptions import InferenceError, InferenceTimeoutError
from whats_for_dinner.utils.gemini_helpers import get_response_text, log_empty_response

logger = logging.getLogger(__name__)

NO_IDEAS_MESSAGE = "No ideas generated. Please try again."


def to_gemini_part(part: ContentPart) -> types.Part:
    """Serialize one content part into the SDK's Part type."""
    if isinstance(part, TextPart):
        return types.Part.from_text(text=part.text)
    if isinstance(part, InlineMediaPart):
        return types.Part.from_bytes(
            data=base64.b64decode(part.data), mime_type=part.mime_type
        )
    raise TypeError(f"Unsupported content part: {type(part).__name__}")


def to_gemini_contents(request: GenerationRequest) -> List[types.Content]:
    """A single user turn carrying every part of the request, in order."""
    return [
        types.Content(role="user", parts=[to_gemini_part(p) for p in request.parts])
    ]


class GeminiService:
    """Service for interacting with Gemini API."""

    def __init__(
        self, client: Optional[genai.Client] = None, timeout: Optional[float] = None
    ) -> None:
        self._client = client
        self._timeout = settings.inference_timeout if timeout is None else timeout

    @property
    def client(self) -> genai.Client:
        """Get or create Gemini client (lazy initialization)."""
        if self._client is None:
            self._client = genai.Client(api_key=settings.gemini_api_key)
        return self._client

    async def generate(self, request: GenerationRequest) -> str:
        """
        Send the request and return the model's text.

        Returns NO_IDEAS_MESSAGE when the response carries no usable text.

        Raises:
            InferenceTimeoutError: If the call exceeds the configured timeout
            InferenceError: On any transport, authentication or API error
        """
        logger.info(
            "Requesting dinner ideas (model=%s, parts=%s)",
            request.model,
            [p.kind for p in request.parts],
        )

        def _sync_call() -> Any:
            return self.client.models.generate_content(
                model=request.model,
                contents=to_gemini_contents(request),
            )

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(_sync_call), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            logger.error("Gemini call timed out after %.1fs", self._timeout)
            raise InferenceTimeoutError(
                f"Gemini did not respond within {self._timeout:.0f} seconds"
            ) from e
        except Exception as e:
            logger.error("Gemini call failed: %s", str(e), exc_info=True)
            raise InferenceError(f"Failed to generate dinner ideas: {str(e)}") from e

        text = get_response_text(response)
        if not text.strip():
            log_empty_response("[generate]", response)
            return NO_IDEAS_MESSAGE

        logger.debug("Gemini raw response:\n%s", text)
        return text
