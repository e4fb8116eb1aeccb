"""Synthesizer protocol.

Defines the interface the session coordinator uses for text-to-speech.
"""

from typing import Protocol

from ..credentials import Credentials
from .client import SynthesisRequest


class Synthesizer(Protocol):
    """Interface for text-to-speech synthesis.

    Implementations submit one request and return raw audio bytes.
    """

    async def synthesize_request(
        self, request: SynthesisRequest, credentials: Credentials
    ) -> bytes:
        """Convert a synthesis request to audio bytes.

        Args:
            request: The request to submit
            credentials: API credentials

        Returns:
            Audio bytes in the requested output format

        Raises:
            VoicecastError: If synthesis fails
        """
        ...

    async def aclose(self) -> None:
        """Release any network resources."""
        ...


__all__ = ["Synthesizer"]
