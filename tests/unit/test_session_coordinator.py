"""Unit tests for the session coordinator."""

import asyncio
from datetime import datetime
from pathlib import Path

import pytest

from voicecast.config import SessionConfig
from voicecast.errors import (
    GenerationInProgressError,
    NoVoiceAvailableError,
    ProviderError,
    ServerError,
    UnauthenticatedError,
)
from voicecast.playback import PlaybackController, PlaybackState
from voicecast.playback.mock import MockAudioEngine
from voicecast.session import PREVIEW_TEXT, AudioExporter, SessionCoordinator, SessionStatus
from voicecast.tts import MockSynthesisClient
from voicecast.voices import Voice
from voicecast.voices.mock import MockVoiceCatalog

RACHEL = "21m00Tcm4TlvDq8ikWAM"
DOMI = "AZnzlk1XvdvUeBnXmlld"


class Harness:
    """Coordinator wired to mock collaborators."""

    def __init__(self, tmp_path: Path, config: SessionConfig | None = None) -> None:
        self.config = config or SessionConfig()
        if not self.config.api.api_key:
            self.config.api.api_key = "sk-test"
        self.catalog = MockVoiceCatalog()
        self.synthesizer = MockSynthesisClient(audio=b"fake-audio")
        self.engine = MockAudioEngine(duration=1.0)
        self.playback = PlaybackController(self.engine, poll_interval=0.01)
        self.exporter = AudioExporter(
            directory=tmp_path, clock=lambda: datetime(2024, 5, 1, 9, 3, 7)
        )
        self.session = SessionCoordinator(
            self.config, self.catalog, self.synthesizer, self.playback, self.exporter
        )


@pytest.fixture
def harness(tmp_path: Path) -> Harness:
    return Harness(tmp_path)


async def drain() -> None:
    await asyncio.sleep(0)
    await asyncio.sleep(0)


class TestGenerate:
    """Tests for generate."""

    async def test_generate_plays_audio(self, harness: Harness) -> None:
        artifact = await harness.session.generate("Hello world")

        assert artifact is not None
        assert artifact.data == b"fake-audio"
        assert artifact.voice_id == RACHEL
        assert harness.session.artifact is artifact
        assert harness.session.status == SessionStatus.PLAYING
        assert harness.playback.state is PlaybackState.PLAYING
        assert harness.engine.last_player.data == b"fake-audio"
        harness.playback.stop()

    async def test_request_uses_config(self, tmp_path: Path) -> None:
        config = SessionConfig(
            model_id="eleven_v3", output_format="WAV - 44.1kHz", speed=1.2
        )
        h = Harness(tmp_path, config)
        await h.session.generate("Hello")

        request = h.synthesizer.last_request
        assert request.model_id == "eleven_v3"
        assert request.output_format == "wav_44100"
        assert request.speed == 1.2
        assert request.settings.stability == 0.5
        assert h.session.artifact.extension == "wav"
        h.playback.stop()

    @pytest.mark.parametrize("text", ["", "   "])
    async def test_empty_text_makes_no_calls(self, harness: Harness, text: str) -> None:
        assert await harness.session.generate(text) is None

        assert harness.session.status == "Please enter some text"
        assert harness.catalog.call_count == 0
        assert harness.synthesizer.call_count == 0
        assert harness.engine.load_count == 0

    async def test_missing_api_key(self, tmp_path: Path) -> None:
        h = Harness(tmp_path)
        h.session.update_config(api_key="")

        assert await h.session.generate("Hello") is None
        assert h.session.status == "API key is required"
        assert h.synthesizer.call_count == 0

    async def test_first_voice_used_when_none_selected(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        assert harness.synthesizer.last_request.voice_id == RACHEL
        assert harness.session.selected_voice_id == RACHEL
        harness.playback.stop()

    async def test_selected_voice_used(self, harness: Harness) -> None:
        harness.session.select_voice(DOMI)
        await harness.session.generate("Hello")
        assert harness.synthesizer.last_request.voice_id == DOMI
        harness.playback.stop()

    async def test_stale_selection_falls_back(self, harness: Harness) -> None:
        harness.session.select_voice("deleted-voice")
        await harness.session.generate("Hello")
        assert harness.synthesizer.last_request.voice_id == RACHEL
        harness.playback.stop()

    async def test_empty_catalog(self, harness: Harness) -> None:
        harness.catalog.set_voices([])

        assert await harness.session.generate("Hello") is None
        assert harness.session.status == str(NoVoiceAvailableError())
        assert harness.synthesizer.call_count == 0

    async def test_catalog_loaded_once(self, harness: Harness) -> None:
        await harness.session.generate("one")
        await harness.session.generate("two")
        assert harness.catalog.call_count == 1
        harness.playback.stop()

    async def test_catalog_error_in_status(self, harness: Harness) -> None:
        harness.catalog.set_error(ServerError("API Error: 500", status_code=500))
        assert await harness.session.generate("Hello") is None
        assert harness.session.status == "API Error: 500"

    async def test_failure_leaves_playback_untouched(self, harness: Harness) -> None:
        await harness.session.generate("first")
        player = harness.engine.last_player
        harness.synthesizer.set_error(ProviderError("TTS Error: 500", status_code=500))

        assert await harness.session.generate("second") is None

        assert harness.session.status == "TTS Error: 500"
        assert harness.engine.last_player is player
        assert harness.playback.state is PlaybackState.PLAYING
        assert harness.session.artifact is None
        assert not harness.session.is_generating
        harness.playback.stop()

    async def test_decode_error_sets_status(self, harness: Harness) -> None:
        harness.engine.fail_next_load()
        artifact = await harness.session.generate("Hello")

        assert artifact is not None
        assert harness.session.status == "Could not decode mp3 audio"
        assert harness.playback.state is PlaybackState.FAILED

    async def test_rejected_while_in_flight(self, harness: Harness) -> None:
        harness.synthesizer.set_latency(50)
        first = asyncio.create_task(harness.session.generate("first"))
        await asyncio.sleep(0.01)
        assert harness.session.is_generating

        assert await harness.session.generate("second") is None
        assert harness.session.status == str(GenerationInProgressError())

        artifact = await first
        assert artifact is not None
        assert artifact.text == "first"
        assert harness.synthesizer.call_count == 1
        assert not harness.session.is_generating
        harness.playback.stop()

    async def test_status_ready_after_playback_finishes(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        harness.engine.last_player.finish()
        await drain()
        assert harness.session.status == SessionStatus.READY

    async def test_status_ready_after_stop(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        harness.playback.stop()
        assert harness.session.status == SessionStatus.READY

    async def test_mid_playback_decode_error_in_status(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        harness.engine.last_player.fail_decode()
        await drain()
        assert harness.session.status == "Audio decode error"


class TestLoadVoices:
    """Tests for load_voices."""

    async def test_load(self, harness: Harness) -> None:
        voices = await harness.session.load_voices()
        assert [v.name for v in voices] == ["Rachel", "Domi", "Bella"]
        assert harness.session.status == SessionStatus.READY

    async def test_cached_unless_forced(self, harness: Harness) -> None:
        await harness.session.load_voices()
        await harness.session.load_voices()
        assert harness.catalog.call_count == 1
        await harness.session.load_voices(force=True)
        assert harness.catalog.call_count == 2

    async def test_error_raised_and_reported(self, harness: Harness) -> None:
        harness.session.update_config(api_key="")
        with pytest.raises(UnauthenticatedError):
            await harness.session.load_voices()
        assert harness.session.status == "API key is required"

    async def test_selected_voice(self, harness: Harness) -> None:
        harness.session.select_voice(DOMI)
        assert harness.session.selected_voice is None
        await harness.session.load_voices()
        assert harness.session.selected_voice.name == "Domi"


class TestUpdateConfig:
    """Tests for configuration changes."""

    async def test_new_key_clears_voices_and_artifact(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        harness.playback.stop()

        harness.session.update_config(api_key="sk-other")

        assert harness.session.voices == []
        assert harness.session.artifact is None
        assert harness.session.config.api.api_key == "sk-other"
        await harness.session.generate("Hello")
        assert harness.catalog.call_count == 2
        harness.playback.stop()

    async def test_synthesis_field_clears_artifact(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        harness.playback.stop()

        harness.session.update_config(model_id="eleven_v3")

        assert harness.session.artifact is None
        assert harness.session.voices != []

    async def test_unrelated_field_keeps_artifact(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        harness.playback.stop()
        artifact = harness.session.artifact

        harness.session.update_config(logging=harness.config.logging)

        assert harness.session.artifact is artifact

    async def test_voice_id_updates_selection(self, harness: Harness) -> None:
        harness.session.update_config(voice_id=DOMI)
        assert harness.session.selected_voice_id == DOMI

    async def test_volume_applied(self, harness: Harness) -> None:
        from dataclasses import replace

        playback = replace(harness.config.playback, volume=0.25)
        harness.session.update_config(playback=playback)
        assert harness.playback.volume == 0.25

    async def test_select_different_voice_drops_artifact(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        harness.playback.stop()
        harness.session.select_voice(DOMI)
        assert harness.session.artifact is None

    async def test_change_during_synthesis_not_cached(self, harness: Harness) -> None:
        """Test that audio synthesized under old settings is not kept."""
        harness.synthesizer.set_latency(50)
        task = asyncio.create_task(harness.session.generate("Hello"))
        await asyncio.sleep(0.01)

        harness.session.update_config(output_format="WAV - 44.1kHz")

        artifact = await task
        assert artifact is not None
        assert harness.session.artifact is None

        harness.synthesizer.set_latency(0)
        path = await harness.session.save_or_share("Hello")
        assert harness.synthesizer.call_count == 2
        assert path.suffix == ".wav"
        harness.playback.stop()

    async def test_voice_selected_during_synthesis_not_cached(self, harness: Harness) -> None:
        harness.synthesizer.set_latency(50)
        task = asyncio.create_task(harness.session.generate("Hello"))
        await asyncio.sleep(0.01)

        harness.session.select_voice(DOMI)

        assert (await task).voice_id == RACHEL
        assert harness.session.artifact is None
        assert harness.session.selected_voice_id == DOMI
        harness.playback.stop()


class TestSaveOrShare:
    """Tests for save_or_share."""

    async def test_reuses_artifact(self, harness: Harness, tmp_path: Path) -> None:
        await harness.session.generate("Hello")
        harness.playback.stop()

        first = await harness.session.save_or_share()
        second = await harness.session.save_or_share("Hello")

        assert first == tmp_path / "voicecast_2024-05-01_09-03-07.mp3"
        assert second == first
        assert first.read_bytes() == b"fake-audio"
        assert harness.synthesizer.call_count == 1
        assert harness.session.status == "Audio saved: voicecast_2024-05-01_09-03-07.mp3"

    async def test_synthesizes_without_playing(self, harness: Harness) -> None:
        path = await harness.session.save_or_share("Fresh text")

        assert path is not None
        assert harness.synthesizer.call_count == 1
        assert harness.engine.load_count == 0
        assert harness.session.artifact.text == "Fresh text"

    async def test_twice_one_synthesis(self, harness: Harness) -> None:
        await harness.session.save_or_share("Same")
        await harness.session.save_or_share("Same")
        assert harness.synthesizer.call_count == 1
        assert harness.exporter.export_count == 2

    async def test_new_text_resynthesizes(self, harness: Harness) -> None:
        await harness.session.save_or_share("one")
        await harness.session.save_or_share("two")
        assert harness.synthesizer.call_count == 2

    async def test_nothing_to_save(self, harness: Harness) -> None:
        assert await harness.session.save_or_share() is None
        assert harness.session.status == "Please enter some text"
        assert harness.synthesizer.call_count == 0

    async def test_export_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        h = Harness(blocker)

        assert await h.session.save_or_share("Hello") is None
        assert h.session.status.startswith("Failed to save audio")


class TestPreview:
    """Tests for voice preview."""

    async def test_preview_keeps_artifact(self, harness: Harness) -> None:
        artifact = await harness.session.generate("Hello")
        harness.playback.stop()

        assert await harness.session.preview(DOMI)

        request = harness.synthesizer.last_request
        assert request.text == PREVIEW_TEXT
        assert request.voice_id == DOMI
        assert harness.session.artifact is artifact
        assert harness.session.selected_voice_id == RACHEL
        assert harness.session.status == SessionStatus.PREVIEWING
        harness.playback.stop()
        assert harness.session.status == SessionStatus.READY

    async def test_preview_unknown_voice(self, harness: Harness) -> None:
        assert not await harness.session.preview("nope")
        assert harness.session.status == "Voice nope not found"
        assert harness.synthesizer.call_count == 0

    async def test_preview_selected_voice(self, harness: Harness) -> None:
        harness.session.select_voice(DOMI)
        assert await harness.session.preview()
        assert harness.synthesizer.last_request.voice_id == DOMI
        harness.playback.stop()


class TestClose:
    """Tests for close."""

    async def test_close(self, harness: Harness) -> None:
        await harness.session.generate("Hello")
        await harness.session.close()

        assert harness.synthesizer.closed
        assert harness.playback.state is PlaybackState.IDLE
        assert not harness.playback.has_player
        assert harness.engine.closed


class TestCustomVoices:
    """Tests with a caller-provided catalog."""

    async def test_single_voice_catalog(self, tmp_path: Path) -> None:
        h = Harness(tmp_path)
        h.catalog.set_voices([Voice(voice_id="only", name="Only")])
        await h.session.generate("Hello")
        assert h.synthesizer.last_request.voice_id == "only"
        h.playback.stop()
