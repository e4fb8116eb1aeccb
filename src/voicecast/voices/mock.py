"""Mock voice catalog for testing."""

from ..credentials import Credentials
from ..errors import UnauthenticatedError, VoicecastError
from .models import Voice

DEFAULT_MOCK_VOICES = (
    Voice(voice_id="21m00Tcm4TlvDq8ikWAM", name="Rachel", category="premade"),
    Voice(voice_id="AZnzlk1XvdvUeBnXmlld", name="Domi", category="premade"),
    Voice(voice_id="EXAVITQu4vr4xnSDxMaL", name="Bella", category="premade"),
)


class MockVoiceCatalog:
    """Catalog returning a fixed voice list and counting fetches."""

    def __init__(self, voices: list[Voice] | None = None) -> None:
        self._voices = list(DEFAULT_MOCK_VOICES) if voices is None else list(voices)
        self._error: VoicecastError | None = None
        self._call_count = 0

    async def list_voices(self, credentials: Credentials) -> list[Voice]:
        self._call_count += 1
        if credentials.is_empty:
            raise UnauthenticatedError()
        if self._error is not None:
            raise self._error
        return list(self._voices)

    async def aclose(self) -> None:
        pass

    def set_voices(self, voices: list[Voice]) -> None:
        self._voices = list(voices)

    def set_error(self, error: VoicecastError | None) -> None:
        self._error = error

    @property
    def call_count(self) -> int:
        """Get number of list_voices calls."""
        return self._call_count


__all__ = ["DEFAULT_MOCK_VOICES", "MockVoiceCatalog"]
