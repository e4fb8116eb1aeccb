"""Output formats and model identifiers offered by the settings screen."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OutputFormat:
    """A synthesis output format.

    Attributes:
        label: Human-readable name shown in settings
        api_id: Identifier sent as ``output_format``
        extension: File extension used on export
        sample_rate: Sample rate in Hz (needed to play raw PCM)
    """

    label: str
    api_id: str
    extension: str
    sample_rate: int

    @property
    def is_raw_pcm(self) -> bool:
        return self.extension == "pcm"


MP3_44100_192 = OutputFormat("MP3 - 44.1kHz 192kbps", "mp3_44100_192", "mp3", 44100)
WAV_44100 = OutputFormat("WAV - 44.1kHz", "wav_44100", "wav", 44100)
OGG_48000 = OutputFormat("OGG - 48kHz", "opus_48000_128", "ogg", 48000)
PCM_44100 = OutputFormat("PCM - 16bit 44.1kHz", "pcm_44100", "pcm", 44100)

OUTPUT_FORMATS: tuple[OutputFormat, ...] = (MP3_44100_192, WAV_44100, OGG_48000, PCM_44100)
DEFAULT_OUTPUT_FORMAT = MP3_44100_192

# Baseline model used when a request names none
DEFAULT_MODEL_ID = "eleven_monolingual_v1"

AVAILABLE_MODELS: tuple[str, ...] = (
    "eleven_multilingual_v2",
    "eleven_flash_v2_5",
    "eleven_turbo_v2_5",
    "eleven_v3",
    "eleven_ttv_v3",
)


def resolve_output_format(name: str | None) -> OutputFormat:
    """Look up a format by label or api id, defaulting to MP3."""
    if name:
        for fmt in OUTPUT_FORMATS:
            if name in (fmt.label, fmt.api_id):
                return fmt
    return DEFAULT_OUTPUT_FORMAT


def extension_for(name: str | None) -> str:
    """File extension for a format name; unknown names map to ``mp3``."""
    return resolve_output_format(name).extension


__all__ = [
    "AVAILABLE_MODELS",
    "DEFAULT_MODEL_ID",
    "DEFAULT_OUTPUT_FORMAT",
    "MP3_44100_192",
    "OGG_48000",
    "OUTPUT_FORMATS",
    "OutputFormat",
    "PCM_44100",
    "WAV_44100",
    "extension_for",
    "resolve_output_format",
]
