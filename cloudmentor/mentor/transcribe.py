"""
Voice question transcription stub.

No speech recognition happens here: the model is asked for a plausible
question given a truncated base64 preview of the audio, and a fixed
phrase is used when it returns nothing.
"""

import base64
import logging
from typing import Optional

from cloudmentor.errors import ValidationError
from cloudmentor.schemas import TranscriptionResult
from cloudmentor.utils.prompt_loader import load_prompt, format_prompt

from .client import MentorClient


logger = logging.getLogger(__name__)

AUDIO_PREVIEW_CHARS = 100


def transcribe_audio(audio: Optional[bytes], client: Optional[MentorClient] = None) -> TranscriptionResult:
    """
    Turn a recorded question into text.

    Args:
        audio: Raw audio bytes from the recorder
        client: Mentor client used for the paraphrase (None: fallback phrase only)

    Raises:
        ValidationError: no audio
        TransportError: model call failed
    """
    if not audio:
        raise ValidationError("No audio provided")

    prompt = load_prompt("transcribe", required=("fallback_text", "user_template"))
    fallback = prompt["fallback_text"]
    if client is None:
        return TranscriptionResult(text=fallback)

    preview = base64.b64encode(audio).decode("ascii")[:AUDIO_PREVIEW_CHARS]
    text = client.generate(
        format_prompt(prompt["user_template"], audio_preview=preview),
        system_prompt=prompt.get("system"),
        temperature=prompt.get("meta", {}).get("temperature"),
    )
    text = (text or "").strip()
    if not text:
        logger.info("Empty transcription from model, using fallback phrase")
    return TranscriptionResult(text=text or fallback)
