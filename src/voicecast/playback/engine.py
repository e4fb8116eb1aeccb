"""Audio engine protocols and event types.

An AudioEngine decodes synthesized bytes into an AudioPlayer. Engines
report asynchronous completion and decode failures through a single
listener registered once by the playback controller; those callbacks may
arrive on any thread.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from ..tts.formats import OutputFormat


class EngineEventKind(Enum):
    """Asynchronous events raised by an audio engine."""

    FINISHED = auto()
    DECODE_ERROR = auto()


@dataclass(frozen=True)
class EngineEvent:
    """Tagged engine event.

    Attributes:
        kind: What happened
        player: The player that raised it (stale players are ignored)
        error: Failure detail for DECODE_ERROR
    """

    kind: EngineEventKind
    player: "AudioPlayer"
    error: Exception | None = None


EngineListener = Callable[[EngineEvent], None]


class AudioPlayer(Protocol):
    """One decoded, playable piece of audio."""

    def play(self) -> bool:
        """Start or resume playback.

        Returns:
            True if playback started
        """
        ...

    def pause(self) -> None:
        """Suspend playback, keeping the position."""
        ...

    def stop(self) -> None:
        """Stop playback and release resources. Safe to call twice."""
        ...

    @property
    def is_playing(self) -> bool:
        """Return True while audio is actively playing."""
        ...

    @property
    def duration(self) -> float:
        """Total duration in seconds."""
        ...

    @property
    def current_time(self) -> float:
        """Playback position in seconds."""
        ...

    @current_time.setter
    def current_time(self, value: float) -> None: ...

    @property
    def volume(self) -> float:
        """Output volume in [0, 1]."""
        ...

    @volume.setter
    def volume(self, value: float) -> None: ...


class AudioEngine(Protocol):
    """Factory for audio players, with a single event listener."""

    def set_listener(self, listener: EngineListener) -> None:
        """Register the callback that receives engine events."""
        ...

    def load(self, data: bytes, audio_format: OutputFormat) -> AudioPlayer:
        """Decode audio into a player.

        Args:
            data: Encoded audio bytes
            audio_format: Format the bytes were requested in

        Returns:
            A prepared player, not yet playing

        Raises:
            AudioDecodeError: If the bytes cannot be decoded
        """
        ...

    def close(self) -> None:
        """Release the audio backend. Safe to call twice."""
        ...


__all__ = [
    "AudioEngine",
    "AudioPlayer",
    "EngineEvent",
    "EngineEventKind",
    "EngineListener",
]
