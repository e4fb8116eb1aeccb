"""Session data classes."""

from dataclasses import dataclass, field
from datetime import datetime

from ..tts.formats import OutputFormat


@dataclass(frozen=True)
class AudioArtifact:
    """Audio produced by one successful synthesis.

    Attributes:
        data: Raw audio bytes exactly as returned by the provider
        audio_format: Format requested for the synthesis
        text: Text that was synthesized
        voice_id: Voice used
        created_at: When the synthesis completed
    """

    data: bytes = field(repr=False)
    audio_format: OutputFormat
    text: str
    voice_id: str
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return self.audio_format.extension


class SessionStatus:
    """Status strings shown to the user."""

    READY = "Ready"
    LOADING_VOICES = "Loading voices..."
    GENERATING = "Generating speech..."
    PLAYING = "Playing audio..."
    PREVIEWING = "Playing preview..."
    SAVING = "Saving audio..."
    FAILED = "Failed to generate speech"


__all__ = ["AudioArtifact", "SessionStatus"]
