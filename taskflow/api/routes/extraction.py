"""Extraction endpoints: turn typed or dictated text into a structured task."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile

from taskflow.api.models import ExtractedTaskResponse, TextToTaskRequest, VoiceToTaskResponse
from taskflow.config import settings
from taskflow.errors import TranscriptionError, TranscriptionUnavailableError
from taskflow.extraction.service import extraction_config_from_settings, text_to_task
from taskflow.transcription import AUDIO_EXTENSIONS, transcribe_audio

router = APIRouter()

# 25 MB is the Whisper API upload limit
MAX_AUDIO_BYTES = 25 * 1024 * 1024


@router.post("/api/text-to-task", response_model=ExtractedTaskResponse)
async def extract_text(body: TextToTaskRequest) -> ExtractedTaskResponse:
    """Convert natural-language text into a structured task.

    Uses the configured LLM when a key is present and falls back to
    rule-based extraction otherwise. The task is not stored.
    """
    config = extraction_config_from_settings(settings)
    # The LLM SDKs are synchronous; keep them off the event loop.
    outcome = await asyncio.to_thread(text_to_task, body.text, config)
    return ExtractedTaskResponse.from_task(outcome.task, outcome.source)


@router.post("/api/voice-to-task", response_model=VoiceToTaskResponse)
async def extract_voice(file: Annotated[UploadFile, File(...)]) -> VoiceToTaskResponse:
    """Transcribe a voice recording and convert the transcript into a task."""
    if not settings.openai_api_key:
        raise HTTPException(
            status_code=501,
            detail="Voice transcription is not configured. Please type the task instead.",
        )

    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty audio upload")
    if len(raw) > MAX_AUDIO_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {MAX_AUDIO_BYTES // (1024 * 1024)} MB.",
        )

    filename = file.filename or "recording.webm"
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in AUDIO_EXTENSIONS:
        # Browsers record webm by default; give Whisper a name it can sniff.
        filename = "recording.webm"

    try:
        transcript = await asyncio.to_thread(
            transcribe_audio,
            raw,
            settings.openai_api_key,
            filename,
            settings.transcription_model,
            settings.transcription_language,
        )
    except TranscriptionUnavailableError as exc:
        raise HTTPException(status_code=501, detail=str(exc)) from exc
    except TranscriptionError as exc:
        raise HTTPException(
            status_code=503,
            detail=f"Transcription service unavailable: {exc}",
        ) from exc

    if not transcript:
        raise HTTPException(status_code=400, detail="No speech detected in the recording")

    config = extraction_config_from_settings(settings)
    outcome = await asyncio.to_thread(text_to_task, transcript, config)
    return VoiceToTaskResponse(
        **outcome.task.to_dict(),
        source=outcome.source,
        transcript=transcript,
    )
