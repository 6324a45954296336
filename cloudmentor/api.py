"""
CloudMentor HTTP API - mentor chat stream and voice transcription.

Usage:
    uvicorn cloudmentor.api:app --reload
"""

import itertools
import logging
import os
from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from cloudmentor.config import load_settings, setup_logging
from cloudmentor.errors import TransportError, ValidationError
from cloudmentor.mentor import MentorClient, transcribe_audio
from cloudmentor.schemas import ChatRequest


logger = logging.getLogger(__name__)

app = FastAPI(title="CloudMentor API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_mentor_client() -> MentorClient:
    settings = load_settings()
    try:
        return MentorClient(
            api_key=settings.gemini_api_key,
            model=settings.model,
            temperature=settings.temperature,
        )
    except ValueError as e:
        logger.error(f"Mentor client unavailable: {e}")
        raise HTTPException(status_code=500, detail="Mentor is not configured")


def get_optional_mentor_client() -> Optional[MentorClient]:
    """Transcription falls back to a fixed phrase when no model is configured."""
    try:
        return get_mentor_client()
    except HTTPException:
        return None


def _finish_stream(stream: Iterator[str]) -> Iterator[str]:
    # Headers are already sent once streaming starts; a failure ends the body early.
    try:
        yield from stream
    except TransportError as e:
        logger.error(f"Mentor stream interrupted: {e}")


@app.get("/")
def root():
    return {"message": "CloudMentor API running"}


@app.post("/api/mentor/chat")
def mentor_chat(request: ChatRequest, client: MentorClient = Depends(get_mentor_client)):
    stream = client.stream_reply(request.messages)
    try:
        first = next(stream)
    except StopIteration:
        return PlainTextResponse("")
    except ValidationError as e:
        return PlainTextResponse(str(e), status_code=400)
    except TransportError as e:
        logger.error(f"Error in mentor chat: {e}")
        return PlainTextResponse("Error processing request", status_code=500)

    return StreamingResponse(
        _finish_stream(itertools.chain([first], stream)),
        media_type="text/plain; charset=utf-8",
    )


@app.post("/api/mentor/transcribe")
def mentor_transcribe(
    audio: Optional[UploadFile] = File(None),
    client: Optional[MentorClient] = Depends(get_optional_mentor_client),
):
    data = audio.file.read() if audio is not None else None
    try:
        result = transcribe_audio(data, client)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except TransportError as e:
        logger.error(f"Transcription error: {e}")
        return JSONResponse({"error": "Failed to transcribe audio"}, status_code=500)
    return {"text": result.text}


if __name__ == "__main__":
    import uvicorn

    setup_logging(load_settings().log_level)
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
