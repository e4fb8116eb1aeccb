"""Voice data models.

Voices come from the remote catalog and are never mutated locally.
Parsing is tolerant: only ``voice_id`` and ``name`` are required, and
optional nested objects that are absent or malformed are dropped rather
than failing the whole catalog.
"""

from dataclasses import dataclass, field
from typing import Any


def _optional_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _optional_dict(value: Any) -> dict[str, Any] | None:
    return dict(value) if isinstance(value, dict) else None


@dataclass(frozen=True)
class VoiceSettings:
    """Tunable synthesis parameters.

    Each field is optional; ``None`` means "use the provider default".
    Values are conventionally in [0, 1] but the provider does the real
    validation.

    Attributes:
        stability: Lower values give more expressive variation
        similarity_boost: How closely to match the original voice
        style: Style exaggeration
        use_speaker_boost: Enhances voice clarity
    """

    stability: float | None = None
    similarity_boost: float | None = None
    style: float | None = None
    use_speaker_boost: bool | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "VoiceSettings | None":
        """Parse settings from a wire object, or None if not an object."""
        if not isinstance(data, dict):
            return None
        boost = data.get("use_speaker_boost")
        return cls(
            stability=_optional_float(data.get("stability")),
            similarity_boost=_optional_float(data.get("similarity_boost")),
            style=_optional_float(data.get("style")),
            use_speaker_boost=boost if isinstance(boost, bool) else None,
        )

    def to_payload(self) -> dict[str, Any]:
        """Serialize only the fields that are set."""
        payload: dict[str, Any] = {}
        if self.stability is not None:
            payload["stability"] = self.stability
        if self.similarity_boost is not None:
            payload["similarity_boost"] = self.similarity_boost
        if self.style is not None:
            payload["style"] = self.style
        if self.use_speaker_boost is not None:
            payload["use_speaker_boost"] = self.use_speaker_boost
        return payload

    @property
    def is_empty(self) -> bool:
        """True when no field is set."""
        return not self.to_payload()


@dataclass(frozen=True)
class VoiceSample:
    """Audio sample attached to a cloned voice."""

    sample_id: str
    file_name: str = ""
    mime_type: str = ""
    size_bytes: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "VoiceSample | None":
        if not isinstance(data, dict) or not isinstance(data.get("sample_id"), str):
            return None
        size = data.get("size_bytes")
        return cls(
            sample_id=data["sample_id"],
            file_name=_optional_str(data.get("file_name")) or "",
            mime_type=_optional_str(data.get("mime_type")) or "",
            size_bytes=size if isinstance(size, int) and not isinstance(size, bool) else 0,
        )


@dataclass(frozen=True, eq=False)
class Voice:
    """A synthetic voice from the catalog.

    Identity is the voice id: two voices with the same id compare equal.
    """

    voice_id: str
    name: str
    category: str | None = None
    description: str | None = None
    labels: dict[str, str] = field(default_factory=dict)
    settings: VoiceSettings | None = None
    samples: tuple[VoiceSample, ...] = ()
    sharing: dict[str, Any] | None = None
    high_quality_base_model_ids: tuple[str, ...] = ()
    safety_control: str | None = None
    voice_verification: dict[str, Any] | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Voice):
            return NotImplemented
        return self.voice_id == other.voice_id

    def __hash__(self) -> int:
        return hash(self.voice_id)

    @classmethod
    def from_dict(cls, data: Any) -> "Voice":
        """Parse a voice object from the catalog response.

        Raises:
            ValueError: If ``voice_id`` or ``name`` is missing
        """
        if not isinstance(data, dict):
            raise ValueError(f"voice entry is not an object: {type(data).__name__}")

        voice_id = data.get("voice_id")
        name = data.get("name")
        if not isinstance(voice_id, str) or not voice_id:
            raise ValueError("voice entry has no voice_id")
        if not isinstance(name, str):
            raise ValueError(f"voice {voice_id} has no name")

        raw_labels = data.get("labels")
        labels = {}
        if isinstance(raw_labels, dict):
            labels = {
                str(k): v for k, v in raw_labels.items() if isinstance(v, str)
            }

        raw_samples = data.get("samples")
        samples: tuple[VoiceSample, ...] = ()
        if isinstance(raw_samples, list):
            parsed = (VoiceSample.from_dict(s) for s in raw_samples)
            samples = tuple(s for s in parsed if s is not None)

        raw_models = data.get("high_quality_base_model_ids")
        models: tuple[str, ...] = ()
        if isinstance(raw_models, list):
            models = tuple(m for m in raw_models if isinstance(m, str))

        return cls(
            voice_id=voice_id,
            name=name,
            category=_optional_str(data.get("category")),
            description=_optional_str(data.get("description")),
            labels=labels,
            settings=VoiceSettings.from_dict(data.get("settings")),
            samples=samples,
            sharing=_optional_dict(data.get("sharing")),
            high_quality_base_model_ids=models,
            safety_control=_optional_str(data.get("safety_control")),
            voice_verification=_optional_dict(data.get("voice_verification")),
        )

    @property
    def display_name(self) -> str:
        """Name with category, e.g. ``Rachel (premade)``."""
        if self.category:
            return f"{self.name} ({self.category})"
        return self.name


__all__ = ["Voice", "VoiceSample", "VoiceSettings"]
