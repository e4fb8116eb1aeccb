"""Playback controller.

Owns the playback state machine for synthesized audio:

    idle -> loaded -> playing <-> paused
    playing -> finished
    playing | loaded -> failed      (decode error)
    any -> idle                     (stop)

Loading implies autoplay. All state changes happen on the asyncio loop
that first loaded audio; engine callbacks from audio threads are handed
to that loop with ``call_soon_threadsafe`` before they touch state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from ..errors import AudioDecodeError
from ..tts.formats import OutputFormat
from .engine import AudioEngine, AudioPlayer, EngineEvent, EngineEventKind

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.1


class PlaybackState(Enum):
    """Playback states."""

    IDLE = auto()
    LOADED = auto()
    PLAYING = auto()
    PAUSED = auto()
    FINISHED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Point-in-time view of the controller.

    Attributes:
        state: Current state
        position: Playback position in seconds
        duration: Total duration in seconds (0 when nothing is loaded)
        error: Last decode error message, if the state is FAILED
    """

    state: PlaybackState
    position: float
    duration: float
    error: str | None = None


PlaybackListener = Callable[[PlaybackSnapshot], None]


class PlaybackController:
    """Transport controls and position reporting for one audio player.

    Usage:
        controller = PlaybackController(create_audio_engine())
        controller.load(audio_bytes, MP3_44100_192)   # starts playing
        controller.pause()
        controller.seek(1.5)
        controller.play()
        controller.stop()
    """

    def __init__(
        self,
        engine: AudioEngine,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        loop: asyncio.AbstractEventLoop | None = None,
        volume: float = 1.0,
    ) -> None:
        """Initialize playback controller.

        Args:
            engine: Audio engine used to decode and play audio
            poll_interval: Seconds between position refreshes while playing
            loop: Owning event loop (defaults to the running loop at first load)
            volume: Initial output volume in [0, 1]
        """
        self._engine = engine
        self._poll_interval = poll_interval
        self._loop = loop
        self._volume = max(0.0, min(1.0, volume))

        self._player: AudioPlayer | None = None
        self._state = PlaybackState.IDLE
        self._position = 0.0
        self._duration = 0.0
        self._error: str | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._listeners: list[PlaybackListener] = []

        engine.set_listener(self._on_engine_event)

    # -- properties --------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def position(self) -> float:
        return self._position

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    @property
    def has_player(self) -> bool:
        return self._player is not None

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(self._state, self._position, self._duration, self._error)

    # -- listeners ---------------------------------------------------------

    def add_listener(self, listener: PlaybackListener) -> None:
        """Register a callback for state and position changes."""
        self._listeners.append(listener)

    def remove_listener(self, listener: PlaybackListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"Playback listener failed: {e}")

    def _set_state(self, state: PlaybackState) -> None:
        if state is not self._state:
            logger.debug(f"Playback {self._state.name} -> {state.name}")
        self._state = state
        self._notify()

    # -- transport ---------------------------------------------------------

    def load(self, data: bytes, audio_format: OutputFormat) -> None:
        """Load audio and start playing it.

        Any previously loaded audio is discarded first.

        Args:
            data: Encoded audio bytes
            audio_format: Format the audio was synthesized in

        Raises:
            AudioDecodeError: If the engine cannot decode the audio
                (the controller is left in FAILED)
            RuntimeError: If called outside an event loop
        """
        self._bind_loop()
        self._release_player()
        self._position = 0.0
        self._duration = 0.0
        self._error = None

        try:
            player = self._engine.load(data, audio_format)
        except AudioDecodeError as e:
            logger.warning(f"Audio decode error: {e}")
            self._error = str(e)
            self._set_state(PlaybackState.FAILED)
            raise

        player.volume = self._volume
        self._player = player
        self._duration = max(0.0, player.duration)
        logger.info(f"Audio loaded ({self._duration:.2f}s)")
        self._set_state(PlaybackState.LOADED)

        if player.play():
            self._set_state(PlaybackState.PLAYING)
            self._start_polling()
        else:
            logger.warning("Failed to start audio playback")

    def play(self) -> None:
        """Start or resume playback from LOADED, PAUSED or FINISHED."""
        if self._player is None or self._state is PlaybackState.PLAYING:
            return
        if self._state not in (
            PlaybackState.LOADED,
            PlaybackState.PAUSED,
            PlaybackState.FINISHED,
        ):
            return

        if self._state is PlaybackState.FINISHED:
            self._player.current_time = 0.0
            self._position = 0.0
        if self._player.play():
            self._set_state(PlaybackState.PLAYING)
            self._start_polling()
        else:
            logger.warning("Failed to resume audio playback")

    def pause(self) -> None:
        """Suspend playback, keeping the position. No-op unless playing."""
        if self._state is not PlaybackState.PLAYING or self._player is None:
            return
        self._player.pause()
        self._stop_polling()
        self._position = self._player.current_time
        self._set_state(PlaybackState.PAUSED)

    def stop(self) -> None:
        """Release the player and return to IDLE with position and duration reset."""
        self._release_player()
        self._position = 0.0
        self._duration = 0.0
        self._error = None
        self._set_state(PlaybackState.IDLE)

    def seek(self, position: float) -> None:
        """Move the playhead, clamped to [0, duration]. No-op without a player."""
        if self._player is None:
            return
        clamped = max(0.0, min(position, self._duration))
        self._player.current_time = clamped
        self._position = clamped
        self._notify()

    def set_volume(self, volume: float) -> None:
        """Set the output volume, clamped to [0, 1]."""
        self._volume = max(0.0, min(1.0, volume))
        if self._player is not None:
            self._player.volume = self._volume

    def close(self) -> None:
        """Stop playback, drop listeners and release the audio engine."""
        self.stop()
        self._listeners.clear()
        self._engine.close()

    # -- position polling --------------------------------------------------

    def refresh_position(self) -> bool:
        """Refresh the position from the player.

        Returns:
            True while playback is still active. When the player stopped on
            its own, the controller moves to FINISHED and returns False.
        """
        if self._state is not PlaybackState.PLAYING or self._player is None:
            return False
        if self._player.is_playing:
            self._position = self._player.current_time
            self._notify()
            return True
        self._finish()
        return False

    def _start_polling(self) -> None:
        self._stop_polling()
        loop = self._bind_loop()
        self._poll_task = loop.create_task(self._poll_position())

    def _stop_polling(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            try:
                current = asyncio.current_task()
            except RuntimeError:
                current = None
            if task is not current:
                task.cancel()

    async def _poll_position(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            try:
                active = self.refresh_position()
            except Exception as e:
                logger.error(f"Position refresh failed: {e}")
                active = False
            if not active:
                break

    # -- engine events -----------------------------------------------------

    def _on_engine_event(self, event: EngineEvent) -> None:
        """Receive an engine event on any thread and hand it to the owning loop."""
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug(f"Dropping {event.kind.name} event: no event loop")
            return
        loop.call_soon_threadsafe(self._handle_engine_event, event)

    def _handle_engine_event(self, event: EngineEvent) -> None:
        if event.player is not self._player:
            logger.debug(f"Ignoring {event.kind.name} from a released player")
            return

        if event.kind is EngineEventKind.FINISHED:
            if self._state in (PlaybackState.PLAYING, PlaybackState.LOADED):
                self._finish()
        elif event.kind is EngineEventKind.DECODE_ERROR:
            if self._state in (PlaybackState.PLAYING, PlaybackState.LOADED):
                logger.warning(f"Audio decode error: {event.error}")
                self._release_player()
                self._position = 0.0
                self._duration = 0.0
                self._error = str(event.error) if event.error else "Audio decode error"
                self._set_state(PlaybackState.FAILED)

    def _finish(self) -> None:
        self._stop_polling()
        self._position = 0.0
        logger.info("Audio playback finished")
        self._set_state(PlaybackState.FINISHED)

    # -- helpers -----------------------------------------------------------

    def _bind_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _release_player(self) -> None:
        self._stop_polling()
        player = self._player
        self._player = None
        if player is not None:
            player.stop()


__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "PlaybackController",
    "PlaybackListener",
    "PlaybackSnapshot",
    "PlaybackState",
]
