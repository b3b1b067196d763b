"""Custom exceptions for the text-to-task pipeline."""


class TaskflowError(Exception):
    """Base class for errors raised by taskflow."""


class RemoteExtractionError(TaskflowError):
    """The LLM returned nothing usable, or no credential was configured."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"Remote extraction via '{provider}' failed: {message}")


class TranscriptionError(TaskflowError):
    """Speech-to-text failed upstream."""


class TranscriptionUnavailableError(TranscriptionError):
    """No credential is configured for speech-to-text."""
