"""Mock synthesis client for testing.

Provides a controllable implementation of the Synthesizer protocol for
unit tests and ``--mock`` runs.
"""

import asyncio
import math
import struct

from ..credentials import Credentials
from ..errors import UnauthenticatedError, VoicecastError
from .client import SynthesisRequest


class MockSynthesisClient:
    """Mock synthesizer that records requests.

    Returns configured audio bytes, or a generated tone proportional to
    the text length when none are configured.
    """

    def __init__(
        self,
        audio: bytes | None = None,
        sample_rate: int = 44100,
        latency_ms: int = 0,
    ) -> None:
        """Initialize mock synthesizer.

        Args:
            audio: Fixed bytes to return for every request
            sample_rate: Sample rate of generated tones
            latency_ms: Simulated network latency
        """
        self._audio = audio
        self._sample_rate = sample_rate
        self._latency_ms = latency_ms
        self._error: VoicecastError | None = None
        self._requests: list[SynthesisRequest] = []
        self._closed = False

    async def synthesize_request(
        self, request: SynthesisRequest, credentials: Credentials
    ) -> bytes:
        """Record the request and return audio (or raise the configured error)."""
        if credentials.is_empty:
            raise UnauthenticatedError()
        request.validate()
        self._requests.append(request)

        if self._latency_ms:
            await asyncio.sleep(self._latency_ms / 1000)
        if self._error is not None:
            raise self._error
        if self._audio is not None:
            return self._audio

        # Roughly 100ms per word
        words = len(request.text.split())
        return self._generate_tone(440, max(100, words * 100))

    def _generate_tone(self, frequency: int, duration_ms: int) -> bytes:
        """Generate a 16-bit mono sine wave."""
        num_samples = int(self._sample_rate * duration_ms / 1000)
        return b"".join(
            struct.pack(
                "<h",
                int(32767 * 0.3 * math.sin(2 * math.pi * frequency * i / self._sample_rate)),
            )
            for i in range(num_samples)
        )

    async def aclose(self) -> None:
        self._closed = True

    def set_audio(self, audio: bytes | None) -> None:
        """Set the bytes returned for subsequent requests."""
        self._audio = audio

    def set_error(self, error: VoicecastError | None) -> None:
        """Make subsequent requests fail with ``error``."""
        self._error = error

    def set_latency(self, latency_ms: int) -> None:
        """Set simulated latency."""
        self._latency_ms = latency_ms

    @property
    def call_count(self) -> int:
        """Get number of requests received."""
        return len(self._requests)

    @property
    def requests(self) -> list[SynthesisRequest]:
        """Get the recorded requests."""
        return self._requests.copy()

    @property
    def last_request(self) -> SynthesisRequest | None:
        return self._requests[-1] if self._requests else None

    @property
    def closed(self) -> bool:
        return self._closed

    def clear(self) -> None:
        """Reset recorded requests."""
        self._requests.clear()


__all__ = ["MockSynthesisClient"]
