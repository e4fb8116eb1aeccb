"""Voice catalog and voice models."""

from .catalog import VoiceCatalog, parse_voices
from .models import Voice, VoiceSample, VoiceSettings

__all__ = [
    "Voice",
    "VoiceCatalog",
    "VoiceSample",
    "VoiceSettings",
    "parse_voices",
]
