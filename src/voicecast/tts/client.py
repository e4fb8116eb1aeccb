"""ElevenLabs text-to-speech client.

Builds a synthesis request, submits it exactly once, and returns the
raw audio bytes. No retry, no validation of the audio itself.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..api import DEFAULT_BASE_URL, APIEndpoint, response_text
from ..credentials import Credentials
from ..errors import (
    EmptyInputError,
    InvalidRequestError,
    ProviderError,
    UnauthenticatedError,
)
from ..voices.models import VoiceSettings
from .formats import DEFAULT_MODEL_ID

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SynthesisRequest:
    """One text-to-speech request.

    Attributes:
        text: Text to synthesize (non-empty)
        voice_id: Target voice identifier
        settings: Voice settings; unset fields are omitted from the body
        model_id: Model identifier (baseline model when None)
        output_format: Provider output format id, omitted when None
        speed: Speed multiplier, omitted when None
    """

    text: str
    voice_id: str
    settings: VoiceSettings | None = None
    model_id: str | None = None
    output_format: str | None = None
    speed: float | None = None

    def validate(self) -> None:
        """Check required fields.

        Raises:
            EmptyInputError: If text is empty
            InvalidRequestError: If voice_id is empty
        """
        if not self.text or not self.text.strip():
            raise EmptyInputError()
        if not self.voice_id:
            raise InvalidRequestError("Voice ID is required")

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON request body."""
        payload: dict[str, Any] = {
            "text": self.text,
            "model_id": self.model_id or DEFAULT_MODEL_ID,
        }
        if self.settings is not None and not self.settings.is_empty:
            payload["voice_settings"] = self.settings.to_payload()
        if self.speed is not None:
            payload["speed"] = self.speed
        if self.output_format is not None:
            payload["output_format"] = self.output_format
        return payload


class SynthesisClient(APIEndpoint):
    """Client for ``POST /text-to-speech/{voice_id}``."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url=base_url, timeout=timeout, http_client=http_client)

    async def synthesize(
        self,
        text: str,
        voice_id: str,
        settings: VoiceSettings | None,
        credentials: Credentials,
        model_id: str | None = None,
        output_format: str | None = None,
        speed: float | None = None,
    ) -> bytes:
        """Convert text to speech.

        Args:
            text: Text to synthesize
            voice_id: Voice to use
            settings: Voice settings (None for provider defaults)
            credentials: API credentials
            model_id: Model id (defaults to the baseline model)
            output_format: Provider output format id
            speed: Speed multiplier

        Returns:
            The response body, verbatim

        Raises:
            UnauthenticatedError: If credentials are empty
            EmptyInputError: If text is empty
            InvalidRequestError: If voice_id is empty
            TransportError: On network failure
            ProviderError: On a non-2xx response
        """
        request = SynthesisRequest(
            text=text,
            voice_id=voice_id,
            settings=settings,
            model_id=model_id,
            output_format=output_format,
            speed=speed,
        )
        return await self.synthesize_request(request, credentials)

    async def synthesize_request(
        self, request: SynthesisRequest, credentials: Credentials
    ) -> bytes:
        """Submit an already-built request. See ``synthesize``."""
        # A missing key is reported before bad input
        if credentials.is_empty:
            raise UnauthenticatedError()
        request.validate()

        response = await self._send(
            "POST",
            f"/text-to-speech/{request.voice_id}",
            credentials,
            json=request.to_payload(),
        )

        if not response.is_success:
            body = response_text(response)
            logger.warning(f"Synthesis failed with status {response.status_code}")
            message = f"TTS Error: {body}" if body else f"TTS Error: {response.status_code}"
            raise ProviderError(message, status_code=response.status_code, body=body)

        logger.debug(
            f"Synthesized {len(request.text)} chars with voice {request.voice_id} "
            f"({len(response.content)} bytes)"
        )
        return response.content


__all__ = ["SynthesisClient", "SynthesisRequest"]
