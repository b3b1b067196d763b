"""Speech-to-text helpers using OpenAI Whisper."""

from __future__ import annotations

import logging

from openai import OpenAI, OpenAIError

from taskflow.errors import TranscriptionError, TranscriptionUnavailableError

logger = logging.getLogger(__name__)

# Extensions accepted as audio uploads
AUDIO_EXTENSIONS = {"webm", "mp3", "wav", "m4a", "mp4", "ogg", "flac", "mpeg", "mpga"}


def transcribe_audio(
    audio: bytes,
    api_key: str,
    filename: str = "recording.webm",
    model: str = "whisper-1",
    language: str = "en",
) -> str:
    """Transcribe an audio recording to plain text.

    Args:
        audio: Raw audio bytes.
        api_key: OpenAI API key.
        filename: Upload name; Whisper infers the container format from its extension.
        model: Whisper model name.
        language: ISO-639-1 language hint.

    Returns:
        The transcribed text, stripped of surrounding whitespace.

    Raises:
        TranscriptionUnavailableError: No API key is configured.
        TranscriptionError: The Whisper API call failed.
    """
    if not api_key:
        raise TranscriptionUnavailableError("OpenAI API key is required for transcription")

    client = OpenAI(api_key=api_key)
    try:
        response = client.audio.transcriptions.create(
            model=model,
            file=(filename, audio),
            language=language,
        )
    except OpenAIError as exc:
        logger.warning("Whisper transcription failed for %s: %s", filename, exc)
        raise TranscriptionError(f"Whisper API error: {exc}") from exc

    return response.text.strip()
