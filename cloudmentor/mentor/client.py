"""
MentorClient - Gemini wrapper for the AI mentor.

Relays a conversation to the model under a fixed system instruction and
yields the reply incrementally. Failures surface as TransportError; there
is no automatic retry.
"""

import logging
import os
from typing import Any, Iterator, Optional

from google import genai
from google.genai import types as genai_types

from cloudmentor.config import DEFAULT_MODEL, DEFAULT_TEMPERATURE
from cloudmentor.errors import TransportError, ValidationError
from cloudmentor.schemas import ChatMessage
from cloudmentor.utils.prompt_loader import load_prompt


logger = logging.getLogger(__name__)

# Gemini calls the assistant side of a conversation "model"
ROLE_MAP = {"user": "user", "assistant": "model"}


def to_contents(messages: list[ChatMessage]) -> list[genai_types.Content]:
    """
    Convert transcript turns to Gemini contents.

    Leading assistant turns (the greeting) are dropped so the
    conversation starts with the user.
    """
    turns = list(messages)
    while turns and turns[0].role == "assistant":
        turns.pop(0)
    return [
        genai_types.Content(
            role=ROLE_MAP[m.role],
            parts=[genai_types.Part(text=m.content)],
        )
        for m in turns
    ]


class MentorClient:
    """Wrapper for Gemini API with the mentor system prompt."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        system_prompt: str | None = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize client.

        Args:
            api_key: Gemini API key (default: GEMINI_API_KEY env var)
            model: Model name
            temperature: Sampling temperature
            system_prompt: Override for the mentor system instruction
            client: Pre-built genai.Client (or compatible object)
        """
        if client is None:
            self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY not set.")
            client = genai.Client(api_key=self.api_key)

        self.client = client
        self.model_name = model
        self.temperature = temperature
        self.system_prompt = system_prompt or load_prompt("mentor", required=("system",))["system"]

    def stream_reply(self, messages: list[ChatMessage]) -> Iterator[str]:
        """
        Stream the assistant reply to a conversation.

        Yields text fragments until the model signals completion. On a
        transport failure, fragments already yielded stay delivered and a
        single TransportError is raised. Closing the generator stops
        consuming the remote stream.
        """
        contents = to_contents(messages)
        if not contents:
            raise ValidationError("No user message to send")

        delivered = 0
        try:
            stream = self.client.models.generate_content_stream(
                model=self.model_name,
                contents=contents,
                config=genai_types.GenerateContentConfig(
                    system_instruction=self.system_prompt,
                    temperature=self.temperature,
                ),
            )
            for chunk in stream:
                text = chunk.text
                if text:
                    delivered += 1
                    yield text
        except Exception as e:
            logger.warning(f"Mentor stream failed after {delivered} fragment(s): {e}")
            raise TransportError(f"Mentor stream failed: {e}") from e

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
    ) -> str:
        """Single non-streaming completion; empty string when the model returns nothing."""
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    temperature=self.temperature if temperature is None else temperature,
                ),
            )
        except Exception as e:
            logger.warning(f"Mentor completion failed: {e}")
            raise TransportError(f"Mentor completion failed: {e}") from e

        if response.text is None:
            if response.candidates and len(response.candidates) > 0:
                candidate = response.candidates[0]
                if candidate.content and candidate.content.parts:
                    return candidate.content.parts[0].text or ""
            return ""
        return response.text
