"""Playback module for voicecast.

Provides the playback controller and its audio engines.

Usage:
    engine = create_audio_engine(config.playback)
    controller = PlaybackController(engine)

    # For testing, use the mock engine
    from voicecast.playback.mock import MockAudioEngine
"""

from typing import TYPE_CHECKING

from .controller import (
    DEFAULT_POLL_INTERVAL,
    PlaybackController,
    PlaybackSnapshot,
    PlaybackState,
)
from .engine import AudioEngine, AudioPlayer, EngineEvent, EngineEventKind

if TYPE_CHECKING:
    from ..config import PlaybackConfig


def create_audio_engine(
    config: "PlaybackConfig | None" = None,
    use_mock: bool = False,
) -> AudioEngine:
    """Create an audio engine.

    Args:
        config: Playback configuration (uses defaults if None)
        use_mock: If True, return the mock engine for testing

    Returns:
        AudioEngine implementation

    Raises:
        RuntimeError: If PyAudio is not installed
    """
    if use_mock or (config is not None and config.use_mock):
        from .mock import MockAudioEngine

        return MockAudioEngine()

    from .pyaudio_engine import PyAudioEngine

    return PyAudioEngine()


def create_playback_controller(
    config: "PlaybackConfig | None" = None,
    use_mock: bool = False,
) -> PlaybackController:
    """Create a playback controller with the configured engine."""
    engine = create_audio_engine(config, use_mock=use_mock)
    if config is None:
        return PlaybackController(engine)
    return PlaybackController(
        engine,
        poll_interval=config.poll_interval,
        volume=config.volume,
    )


__all__ = [
    "AudioEngine",
    "AudioPlayer",
    "DEFAULT_POLL_INTERVAL",
    "EngineEvent",
    "EngineEventKind",
    "PlaybackController",
    "PlaybackSnapshot",
    "PlaybackState",
    "create_audio_engine",
    "create_playback_controller",
]
