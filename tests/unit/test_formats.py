"""Unit tests for output formats."""

import pytest

from voicecast.tts.formats import (
    AVAILABLE_MODELS,
    DEFAULT_OUTPUT_FORMAT,
    MP3_44100_192,
    OGG_48000,
    OUTPUT_FORMATS,
    PCM_44100,
    WAV_44100,
    extension_for,
    resolve_output_format,
)


class TestOutputFormats:
    """Tests for format lookup."""

    def test_default_is_mp3(self) -> None:
        assert DEFAULT_OUTPUT_FORMAT is MP3_44100_192
        assert DEFAULT_OUTPUT_FORMAT.api_id == "mp3_44100_192"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("MP3 - 44.1kHz 192kbps", "mp3"),
            ("WAV - 44.1kHz", "wav"),
            ("OGG - 48kHz", "ogg"),
            ("PCM - 16bit 44.1kHz", "pcm"),
            ("opus_48000_128", "ogg"),
            ("Something else", "mp3"),
            (None, "mp3"),
        ],
    )
    def test_extension_for(self, name: str | None, expected: str) -> None:
        assert extension_for(name) == expected

    def test_resolve_by_label_and_id(self) -> None:
        assert resolve_output_format("WAV - 44.1kHz") is WAV_44100
        assert resolve_output_format("pcm_44100") is PCM_44100
        assert resolve_output_format("") is MP3_44100_192

    def test_only_pcm_is_raw(self) -> None:
        assert PCM_44100.is_raw_pcm
        assert not any(f.is_raw_pcm for f in OUTPUT_FORMATS if f is not PCM_44100)

    def test_ogg_sample_rate(self) -> None:
        assert OGG_48000.sample_rate == 48000

    def test_known_models(self) -> None:
        assert "eleven_multilingual_v2" in AVAILABLE_MODELS
        assert "eleven_v3" in AVAILABLE_MODELS
