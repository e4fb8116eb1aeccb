"""Mock audio engine for testing.

Players do not produce sound; time only moves when the test calls
``advance`` and completion only happens on ``finish``.
"""

from ..errors import AudioDecodeError
from ..tts.formats import OutputFormat
from .engine import EngineEvent, EngineEventKind, EngineListener


class MockAudioPlayer:
    """Mock player implementing the AudioPlayer protocol."""

    def __init__(self, engine: "MockAudioEngine", data: bytes, duration: float) -> None:
        self._engine = engine
        self._data = data
        self._duration = duration
        self._current_time = 0.0
        self._is_playing = False
        self._stopped = False
        self._volume = 1.0
        self.refuse_play = False
        self.play_count = 0

    def play(self) -> bool:
        if self._stopped or self.refuse_play:
            return False
        self._is_playing = True
        self.play_count += 1
        return True

    def pause(self) -> None:
        self._is_playing = False

    def stop(self) -> None:
        self._is_playing = False
        self._stopped = True

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def current_time(self) -> float:
        return self._current_time

    @current_time.setter
    def current_time(self, value: float) -> None:
        self._current_time = value

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = value

    def advance(self, seconds: float) -> None:
        """Move the playhead forward while playing."""
        if self._is_playing:
            self._current_time = min(self._duration, self._current_time + seconds)

    def finish(self) -> None:
        """Simulate the end of the audio and notify the engine listener."""
        self._is_playing = False
        self._current_time = self._duration
        self._engine.emit(EngineEvent(EngineEventKind.FINISHED, self))

    def halt(self) -> None:
        """Stop playing without any engine event (polling must notice)."""
        self._is_playing = False

    def fail_decode(self, error: Exception | None = None) -> None:
        """Simulate a mid-playback decode error."""
        self._is_playing = False
        self._engine.emit(
            EngineEvent(
                EngineEventKind.DECODE_ERROR,
                self,
                error or AudioDecodeError("Audio decode error"),
            )
        )


class MockAudioEngine:
    """Mock engine implementing the AudioEngine protocol.

    Records every load for later verification.
    """

    def __init__(self, duration: float = 2.0) -> None:
        """Initialize mock engine.

        Args:
            duration: Duration given to every loaded player
        """
        self._duration = duration
        self._listener: EngineListener | None = None
        self._players: list[MockAudioPlayer] = []
        self._fail_next_load = False
        self._close_count = 0
        self.listener_registrations = 0

    def set_listener(self, listener: EngineListener) -> None:
        self._listener = listener
        self.listener_registrations += 1

    def load(self, data: bytes, audio_format: OutputFormat) -> MockAudioPlayer:
        if self._fail_next_load or not data:
            self._fail_next_load = False
            raise AudioDecodeError(f"Could not decode {audio_format.extension} audio")
        player = MockAudioPlayer(self, data, self._duration)
        self._players.append(player)
        return player

    def emit(self, event: EngineEvent) -> None:
        """Deliver an event to the registered listener."""
        if self._listener is not None:
            self._listener(event)

    def close(self) -> None:
        self._close_count += 1

    @property
    def closed(self) -> bool:
        return self._close_count > 0

    @property
    def close_count(self) -> int:
        return self._close_count

    def fail_next_load(self) -> None:
        """Make the next ``load`` raise AudioDecodeError."""
        self._fail_next_load = True

    def set_duration(self, duration: float) -> None:
        self._duration = duration

    @property
    def players(self) -> list[MockAudioPlayer]:
        return self._players.copy()

    @property
    def last_player(self) -> MockAudioPlayer | None:
        return self._players[-1] if self._players else None

    @property
    def load_count(self) -> int:
        return len(self._players)


__all__ = ["MockAudioEngine", "MockAudioPlayer"]
