"""Unit tests for voice data models."""

import pytest

from voicecast.voices.models import Voice, VoiceSample, VoiceSettings


class TestVoiceSettings:
    """Tests for VoiceSettings serialization."""

    def test_all_fields_serialized(self) -> None:
        settings = VoiceSettings(
            stability=0.4, similarity_boost=0.75, style=0.3, use_speaker_boost=True
        )
        assert settings.to_payload() == {
            "stability": 0.4,
            "similarity_boost": 0.75,
            "style": 0.3,
            "use_speaker_boost": True,
        }

    def test_absent_fields_omitted(self) -> None:
        """Unset fields are left out, not sent as null."""
        payload = VoiceSettings(stability=0.5).to_payload()
        assert payload == {"stability": 0.5}
        assert "style" not in payload

    def test_zero_and_false_are_kept(self) -> None:
        payload = VoiceSettings(style=0.0, use_speaker_boost=False).to_payload()
        assert payload == {"style": 0.0, "use_speaker_boost": False}

    def test_is_empty(self) -> None:
        assert VoiceSettings().is_empty
        assert not VoiceSettings(style=0.0).is_empty

    def test_from_dict_ignores_bad_types(self) -> None:
        settings = VoiceSettings.from_dict(
            {"stability": "high", "similarity_boost": 1, "use_speaker_boost": "yes"}
        )
        assert settings == VoiceSettings(similarity_boost=1.0)

    def test_from_dict_non_object(self) -> None:
        assert VoiceSettings.from_dict(None) is None
        assert VoiceSettings.from_dict([1, 2]) is None


class TestVoice:
    """Tests for Voice parsing."""

    def test_minimal_voice(self) -> None:
        voice = Voice.from_dict({"voice_id": "abc", "name": "Ann"})
        assert voice.voice_id == "abc"
        assert voice.name == "Ann"
        assert voice.category is None
        assert voice.labels == {}
        assert voice.settings is None

    def test_full_voice(self) -> None:
        voice = Voice.from_dict(
            {
                "voice_id": "abc",
                "name": "Ann",
                "category": "premade",
                "description": "Calm",
                "labels": {"accent": "british", "age": 30},
                "settings": {"stability": 0.2},
                "high_quality_base_model_ids": ["eleven_v3", 7],
                "safety_control": "NONE",
            }
        )
        assert voice.category == "premade"
        assert voice.description == "Calm"
        assert voice.labels == {"accent": "british"}
        assert voice.settings == VoiceSettings(stability=0.2)
        assert voice.high_quality_base_model_ids == ("eleven_v3",)
        assert voice.safety_control == "NONE"

    def test_malformed_nested_objects_are_dropped(self) -> None:
        voice = Voice.from_dict(
            {
                "voice_id": "abc",
                "name": "Ann",
                "samples": [{"sample_id": "s1", "size_bytes": 10}, "junk", {}],
                "sharing": "oops",
                "voice_verification": ["not", "an", "object"],
                "settings": 42,
            }
        )
        assert voice.samples == (VoiceSample(sample_id="s1", size_bytes=10),)
        assert voice.sharing is None
        assert voice.voice_verification is None
        assert voice.settings is None

    def test_nested_objects_kept_when_valid(self) -> None:
        voice = Voice.from_dict(
            {
                "voice_id": "abc",
                "name": "Ann",
                "sharing": {"status": "enabled"},
                "voice_verification": {"requires_verification": False},
            }
        )
        assert voice.sharing == {"status": "enabled"}
        assert voice.voice_verification == {"requires_verification": False}

    @pytest.mark.parametrize(
        "data",
        [
            {"name": "No id"},
            {"voice_id": "", "name": "Empty id"},
            {"voice_id": "abc"},
            "not an object",
        ],
    )
    def test_required_fields(self, data: object) -> None:
        with pytest.raises(ValueError):
            Voice.from_dict(data)

    def test_identity_is_voice_id(self) -> None:
        a = Voice(voice_id="abc", name="Ann")
        b = Voice(voice_id="abc", name="Renamed", category="cloned")
        assert a == b
        assert hash(a) == hash(b)
        assert a != Voice(voice_id="xyz", name="Ann")

    def test_display_name(self) -> None:
        assert Voice(voice_id="a", name="Ann", category="premade").display_name == (
            "Ann (premade)"
        )
        assert Voice(voice_id="a", name="Ann").display_name == "Ann"
