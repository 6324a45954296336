"""
CloudMentor Mentor - AI mentor chat passthrough.

This module provides:
- MentorClient: streaming Gemini wrapper with the mentor system prompt
- MentorSession: visible transcript for one conversation
- transcribe_audio: voice question stub
"""

from .client import (
    MentorClient,
    to_contents,
)

from .session import (
    MentorSession,
    default_greeting,
)

from .transcribe import transcribe_audio

__all__ = [
    "MentorClient",
    "to_contents",
    "MentorSession",
    "default_greeting",
    "transcribe_audio",
]
