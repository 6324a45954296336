"""
Mentor chat schemas for CloudMentor.
"""

from pydantic import BaseModel, Field
from typing import Literal


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body of POST /api/mentor/chat."""
    messages: list[ChatMessage] = []


class TranscriptionResult(BaseModel):
    text: str = Field(..., min_length=1)
