"""API credentials for the ElevenLabs endpoints.

The key is only ever sent as the ``xi-api-key`` header and never
appears in logs or reprs.
"""

import os
from dataclasses import dataclass, field

API_KEY_ENV = "ELEVENLABS_API_KEY"
API_KEY_HEADER = "xi-api-key"
PLACEHOLDER_KEYS = frozenset({"", "your-elevenlabs-api-key"})


def mask_secret(secret: str, visible: int = 4) -> str:
    """Return a masked form of a secret suitable for logs."""
    if not secret:
        return "<empty>"
    if len(secret) <= visible * 2:
        return "***"
    return f"***{secret[-visible:]}"


@dataclass(frozen=True)
class Credentials:
    """Opaque API key wrapper."""

    api_key: str = field(default="", repr=False)

    @classmethod
    def from_env(cls) -> "Credentials":
        """Create credentials from the ELEVENLABS_API_KEY environment variable."""
        return cls(api_key=os.environ.get(API_KEY_ENV, "").strip())

    @property
    def is_empty(self) -> bool:
        """True when no usable key is configured."""
        return self.api_key.strip() in PLACEHOLDER_KEYS

    def headers(self) -> dict[str, str]:
        """Build the authentication and content headers for a request."""
        return {
            API_KEY_HEADER: self.api_key,
            "Content-Type": "application/json",
        }

    def __repr__(self) -> str:
        return f"Credentials(api_key={mask_secret(self.api_key)!r})"

    def __str__(self) -> str:
        return mask_secret(self.api_key)


__all__ = ["API_KEY_ENV", "API_KEY_HEADER", "Credentials", "mask_secret"]
