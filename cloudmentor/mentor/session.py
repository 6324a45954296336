"""
MentorSession - Visible chat transcript for one mentoring conversation.
"""

import logging
from typing import Iterator, Optional

from cloudmentor.errors import ValidationError
from cloudmentor.schemas import ChatMessage
from cloudmentor.utils.prompt_loader import load_prompt

from .client import MentorClient


logger = logging.getLogger(__name__)


def default_greeting() -> str:
    return load_prompt("mentor", required=("greeting",))["greeting"]


class MentorSession:
    """
    Holds the transcript and relays new questions to the mentor.

    The transcript is the only state. A reply is appended when its stream
    ends, whether it completed, failed or was closed early, so partial
    answers stay visible.
    """

    def __init__(self, client: MentorClient, greeting: Optional[str] = None):
        self.client = client
        self.transcript: list[ChatMessage] = [
            ChatMessage(role="assistant", content=greeting or default_greeting())
        ]

    def ask(self, text: str) -> Iterator[str]:
        """
        Send a user question and stream the reply.

        Raises:
            ValidationError: empty question (raised before anything is recorded)
            TransportError: stream failure, after the partial reply is recorded
        """
        if not text or not text.strip():
            raise ValidationError("Please enter a question")
        self.transcript.append(ChatMessage(role="user", content=text.strip()))
        return self._relay(list(self.transcript))

    def _relay(self, history: list[ChatMessage]) -> Iterator[str]:
        parts: list[str] = []
        try:
            for fragment in self.client.stream_reply(history):
                parts.append(fragment)
                yield fragment
        finally:
            if parts:
                self.transcript.append(ChatMessage(role="assistant", content="".join(parts)))
            logger.debug(f"Mentor reply recorded ({len(parts)} fragment(s))")

    @property
    def last_reply(self) -> Optional[str]:
        for message in reversed(self.transcript):
            if message.role == "assistant":
                return message.content
        return None
