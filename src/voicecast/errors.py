"""Error types for the voicecast synthesis pipeline.

Every component raises one of these; the session coordinator collapses
them into its status string.
"""


class VoicecastError(Exception):
    """Base exception for voicecast errors."""

    pass


class UnauthenticatedError(VoicecastError):
    """Raised when no API key is configured."""

    def __init__(self, message: str = "API key is required") -> None:
        super().__init__(message)


class TransportError(VoicecastError):
    """Raised on network-layer failures (DNS, timeout, connection reset)."""

    pass


class ServerError(VoicecastError):
    """Raised when the voice catalog endpoint returns a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: str | None = None) -> None:
        """Initialize server error.

        Args:
            message: Error message.
            status_code: HTTP status code.
            body: Raw response body, kept for diagnostics.
        """
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProviderError(ServerError):
    """Raised when the synthesis endpoint returns a non-2xx status."""

    pass


class DecodeError(VoicecastError):
    """Raised when a successful response body cannot be parsed."""

    pass


class AudioDecodeError(DecodeError):
    """Raised when the audio engine cannot decode synthesized audio."""

    pass


class EmptyInputError(VoicecastError):
    """Raised when there is no text to synthesize."""

    def __init__(self, message: str = "Please enter some text") -> None:
        super().__init__(message)


class NoVoiceAvailableError(VoicecastError):
    """Raised when the catalog has no voice to synthesize with."""

    def __init__(self, message: str = "No voice available") -> None:
        super().__init__(message)


class GenerationInProgressError(VoicecastError):
    """Raised when a synthesis is requested while another is in flight."""

    def __init__(self, message: str = "Speech generation already in progress") -> None:
        super().__init__(message)


class InvalidRequestError(VoicecastError, ValueError):
    """Raised when a synthesis request is missing a required field."""

    pass


class ExportError(VoicecastError):
    """Raised when an audio artifact cannot be written or shared."""

    pass


__all__ = [
    "AudioDecodeError",
    "DecodeError",
    "EmptyInputError",
    "ExportError",
    "GenerationInProgressError",
    "InvalidRequestError",
    "NoVoiceAvailableError",
    "ProviderError",
    "ServerError",
    "TransportError",
    "UnauthenticatedError",
    "VoicecastError",
]
