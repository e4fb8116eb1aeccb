"""Session coordinator.

Drives one end-to-end "speak" operation: make sure a voice catalog is
available, resolve the voice, synthesize, hand the audio to playback,
and keep a single human-readable status string.

Only one synthesis may be in flight per coordinator. A request that
arrives while one is outstanding is rejected with
GenerationInProgressError; the outstanding request is not affected.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Protocol

from ..config import SessionConfig
from ..errors import (
    AudioDecodeError,
    EmptyInputError,
    GenerationInProgressError,
    NoVoiceAvailableError,
    VoicecastError,
)
from ..playback.controller import PlaybackState
from ..tts.client import SynthesisRequest
from ..tts.formats import resolve_output_format
from ..voices.models import Voice
from .export import AudioExporter
from .models import AudioArtifact, SessionStatus

if TYPE_CHECKING:
    from pathlib import Path

    from ..credentials import Credentials
    from ..playback.controller import PlaybackController, PlaybackSnapshot
    from ..tts.synthesizer import Synthesizer

logger = logging.getLogger(__name__)

PREVIEW_TEXT = "This is a preview of the selected voice."

# Fields whose change makes a cached artifact stale
_SYNTHESIS_FIELDS = ("voice_id", "model_id", "output_format", "speed", "voice_settings")


class VoiceSource(Protocol):
    """Anything that can list voices (VoiceCatalog in production)."""

    async def list_voices(self, credentials: Credentials) -> list[Voice]: ...

    async def aclose(self) -> None: ...


class SessionCoordinator:
    """Orchestrates catalog, synthesis, playback and export for one user session."""

    def __init__(
        self,
        config: SessionConfig,
        catalog: VoiceSource,
        synthesizer: Synthesizer,
        playback: PlaybackController,
        exporter: AudioExporter | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            config: Session configuration; change it with ``update_config``
            catalog: Voice catalog client
            synthesizer: Text-to-speech client
            playback: Playback controller fed with synthesized audio
            exporter: Exporter for ``save_or_share`` (built from config if None)
        """
        self._config = config
        self._catalog = catalog
        self._synthesizer = synthesizer
        self._playback = playback
        self._exporter = exporter or AudioExporter(
            directory=config.export.directory,
            prefix=config.export.prefix,
        )

        self._status = SessionStatus.READY
        self._voices: list[Voice] = []
        self._selected_voice_id: str | None = config.voice_id or None
        self._artifact: AudioArtifact | None = None
        # Bumped whenever the cached artifact stops matching config or voice
        self._artifact_epoch = 0
        self._in_flight = False

        self._playback.set_volume(config.playback.volume)
        self._playback.add_listener(self._on_playback_change)

    # -- state -------------------------------------------------------------

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def status(self) -> str:
        """Latest status or error message."""
        return self._status

    @property
    def voices(self) -> list[Voice]:
        return list(self._voices)

    @property
    def selected_voice_id(self) -> str | None:
        return self._selected_voice_id

    @property
    def selected_voice(self) -> Voice | None:
        return self._find_voice(self._selected_voice_id)

    @property
    def artifact(self) -> AudioArtifact | None:
        """Audio from the last successful generate, if still current."""
        return self._artifact

    @property
    def is_generating(self) -> bool:
        return self._in_flight

    @property
    def playback(self) -> PlaybackController:
        return self._playback

    def _set_status(self, status: str) -> None:
        self._status = status
        logger.debug(f"Status: {status}")

    # -- configuration -----------------------------------------------------

    def update_config(self, config: SessionConfig | None = None, **changes: Any) -> SessionConfig:
        """Replace the configuration.

        Pass a complete SessionConfig, or keyword changes to top-level
        fields. ``api_key`` is accepted as a shortcut for ``api.api_key``.

        A new API key empties the voice cache. Changes to any field that
        affects synthesis drop the cached artifact.
        """
        old = self._config
        if config is None:
            api_key = changes.pop("api_key", None)
            config = dataclasses.replace(old, **changes)
            if api_key is not None:
                config.api = dataclasses.replace(old.api, api_key=api_key)

        if config.api.api_key != old.api.api_key or config.api.base_url != old.api.base_url:
            logger.info("Credentials changed, clearing voice cache")
            self._voices = []
            self._invalidate_artifact()
        if any(getattr(config, f) != getattr(old, f) for f in _SYNTHESIS_FIELDS):
            self._invalidate_artifact()
        if config.voice_id != old.voice_id:
            self._selected_voice_id = config.voice_id or None
        if config.playback.volume != old.playback.volume:
            self._playback.set_volume(config.playback.volume)

        self._config = config
        return config

    def select_voice(self, voice_id: str | None) -> None:
        """Select the voice used by subsequent generate calls."""
        if voice_id != self._selected_voice_id:
            self._selected_voice_id = voice_id or None
            if self._artifact is None or self._artifact.voice_id != voice_id:
                self._invalidate_artifact()

    def _invalidate_artifact(self) -> None:
        self._artifact = None
        self._artifact_epoch += 1

    # -- voices ------------------------------------------------------------

    async def load_voices(self, force: bool = False) -> list[Voice]:
        """Load the voice catalog if it is empty (or always, with force).

        Raises:
            VoicecastError: If the catalog cannot be loaded (status is set too)
        """
        if self._voices and not force:
            return list(self._voices)

        self._set_status(SessionStatus.LOADING_VOICES)
        try:
            self._voices = await self._catalog.list_voices(self._config.credentials)
        except VoicecastError as e:
            logger.warning(f"Loading voices failed: {e}")
            self._set_status(str(e))
            raise
        self._set_status(SessionStatus.READY)
        return list(self._voices)

    async def _ensure_voices(self) -> list[Voice]:
        if not self._voices:
            self._voices = await self._catalog.list_voices(self._config.credentials)
        return self._voices

    def _find_voice(self, voice_id: str | None) -> Voice | None:
        if not voice_id:
            return None
        return next((v for v in self._voices if v.voice_id == voice_id), None)

    def _resolve_voice(self, voice_id: str | None) -> Voice:
        """Selected voice if still in the catalog, else the first one."""
        voice = self._find_voice(voice_id)
        if voice is not None:
            return voice
        if not self._voices:
            raise NoVoiceAvailableError()
        fallback = self._voices[0]
        if voice_id:
            logger.info(f"Voice {voice_id} not in catalog, using {fallback.name}")
        return fallback

    # -- synthesis ---------------------------------------------------------

    async def _synthesize(
        self,
        text: str,
        voice_id: str | None = None,
        replace_artifact: bool = True,
    ) -> AudioArtifact:
        """Run catalog resolution and synthesis for ``text``.

        Raises:
            EmptyInputError: If text is empty (no network call is made)
            GenerationInProgressError: If a synthesis is already in flight
            VoicecastError: Any catalog or synthesis failure
        """
        if not text or not text.strip():
            raise EmptyInputError()
        if self._in_flight:
            raise GenerationInProgressError()

        self._in_flight = True
        config = self._config
        try:
            if replace_artifact:
                self._artifact = None
            epoch = self._artifact_epoch
            await self._ensure_voices()
            voice = self._resolve_voice(voice_id or self._selected_voice_id)
            if replace_artifact and epoch == self._artifact_epoch:
                self._selected_voice_id = voice.voice_id

            audio_format = resolve_output_format(config.output_format)
            request = SynthesisRequest(
                text=text,
                voice_id=voice.voice_id,
                settings=config.voice_settings.to_settings(),
                model_id=config.model_id,
                output_format=audio_format.api_id,
                speed=config.speed,
            )
            logger.info(f"Synthesizing {len(text)} chars with voice {voice.name}")
            data = await self._synthesizer.synthesize_request(request, config.credentials)

            artifact = AudioArtifact(
                data=data,
                audio_format=audio_format,
                text=text,
                voice_id=voice.voice_id,
            )
            if replace_artifact:
                if epoch == self._artifact_epoch:
                    self._artifact = artifact
                else:
                    logger.info("Settings changed during synthesis, audio not cached")
            return artifact
        finally:
            self._in_flight = False

    async def generate(self, text: str) -> AudioArtifact | None:
        """Synthesize ``text`` and play it.

        On failure the status carries the error message, playback is left
        untouched, and None is returned.
        """
        if text and text.strip() and not self._in_flight:
            self._set_status(SessionStatus.GENERATING)
        try:
            artifact = await self._synthesize(text)
        except VoicecastError as e:
            logger.warning(f"Speech generation failed: {e}")
            self._set_status(str(e) or SessionStatus.FAILED)
            return None

        if self._play(artifact):
            self._set_status(SessionStatus.PLAYING)
        return artifact

    async def preview(self, voice_id: str | None = None) -> bool:
        """Play a short sample of a voice without replacing the current artifact.

        Returns:
            True if the preview started playing
        """
        if self._in_flight:
            self._set_status(str(GenerationInProgressError()))
            return False
        self._set_status(SessionStatus.GENERATING)
        try:
            if voice_id is not None:
                await self._ensure_voices()
                if self._find_voice(voice_id) is None:
                    raise NoVoiceAvailableError(f"Voice {voice_id} not found")
            artifact = await self._synthesize(
                PREVIEW_TEXT, voice_id=voice_id, replace_artifact=False
            )
        except VoicecastError as e:
            logger.warning(f"Voice preview failed: {e}")
            self._set_status(str(e))
            return False

        if self._play(artifact):
            self._set_status(SessionStatus.PREVIEWING)
            return True
        return False

    def _play(self, artifact: AudioArtifact) -> bool:
        try:
            self._playback.load(artifact.data, artifact.audio_format)
        except AudioDecodeError as e:
            self._set_status(str(e))
            return False
        return True

    # -- export ------------------------------------------------------------

    async def save_or_share(self, text: str | None = None) -> Path | None:
        """Export the current artifact, synthesizing it first if needed.

        The current artifact is reused when ``text`` is None or matches the
        artifact's text, so repeated exports make one synthesis call.
        Synthesizing here does not start playback.

        Returns:
            Location of the exported file, or None on failure
        """
        artifact = self._artifact
        if artifact is None or (text is not None and text != artifact.text):
            if text is not None and text.strip() and not self._in_flight:
                self._set_status(SessionStatus.GENERATING)
            try:
                artifact = await self._synthesize(text or "")
            except VoicecastError as e:
                logger.warning(f"Export failed: {e}")
                self._set_status(str(e))
                return None

        self._set_status(SessionStatus.SAVING)
        try:
            path = self._exporter.export(artifact)
        except VoicecastError as e:
            logger.warning(f"Export failed: {e}")
            self._set_status(str(e))
            return None

        self._set_status(f"Audio saved: {path.name}")
        logger.info(f"Exported audio to {path}")
        return path

    # -- playback feedback -------------------------------------------------

    def _on_playback_change(self, snapshot: PlaybackSnapshot) -> None:
        if self._status not in (SessionStatus.PLAYING, SessionStatus.PREVIEWING):
            return
        if snapshot.state in (PlaybackState.FINISHED, PlaybackState.IDLE):
            self._set_status(SessionStatus.READY)
        elif snapshot.state is PlaybackState.FAILED:
            self._set_status(snapshot.error or "Audio decode error")

    async def close(self) -> None:
        """Stop playback and close network clients."""
        self._playback.remove_listener(self._on_playback_change)
        self._playback.close()
        await self._catalog.aclose()
        await self._synthesizer.aclose()


__all__ = ["PREVIEW_TEXT", "SessionCoordinator", "VoiceSource"]
