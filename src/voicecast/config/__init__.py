"""Configuration module for voicecast.

Settings are explicit dataclasses handed to the session coordinator and
changed through its ``update_config`` call.
"""

from dataclasses import dataclass, field

from ..credentials import Credentials
from ..voices.models import VoiceSettings


@dataclass
class VoiceSettingsConfig:
    """Voice tuning defaults (normalized to [0, 1])."""

    stability: float | None = 0.5
    similarity_boost: float | None = 0.75
    style: float | None = 0.0
    use_speaker_boost: bool | None = True

    def to_settings(self) -> VoiceSettings:
        return VoiceSettings(
            stability=self.stability,
            similarity_boost=self.similarity_boost,
            style=self.style,
            use_speaker_boost=self.use_speaker_boost,
        )


@dataclass
class APIConfig:
    """ElevenLabs API configuration."""

    base_url: str = "https://api.elevenlabs.io/v1"
    api_key: str = field(default="", repr=False)
    timeout_seconds: float = 30.0
    synthesis_timeout_seconds: float = 60.0

    @property
    def credentials(self) -> Credentials:
        return Credentials(api_key=self.api_key)


@dataclass
class PlaybackConfig:
    """Audio playback configuration."""

    volume: float = 1.0
    poll_interval: float = 0.1
    use_mock: bool = False


@dataclass
class ExportConfig:
    """Export configuration."""

    directory: str | None = None
    prefix: str = "voicecast"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class SessionConfig:
    """Main voicecast session configuration."""

    voice_id: str = ""
    model_id: str = "eleven_multilingual_v2"
    output_format: str = "MP3 - 44.1kHz 192kbps"
    speed: float | None = None
    voice_settings: VoiceSettingsConfig = field(default_factory=VoiceSettingsConfig)
    api: APIConfig = field(default_factory=APIConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def credentials(self) -> Credentials:
        return self.api.credentials


__all__ = [
    "APIConfig",
    "ExportConfig",
    "LoggingConfig",
    "PlaybackConfig",
    "SessionConfig",
    "VoiceSettingsConfig",
]
