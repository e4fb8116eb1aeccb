"""Voice catalog client.

Fetches the voices available to the configured API key from
``GET /voices``. The provider does not guarantee the response envelope,
so both ``{"voices": [...]}`` and a bare ``[...]`` are accepted.
"""

import json
import logging
from typing import Any

from ..api import APIEndpoint, response_text
from ..credentials import Credentials
from ..errors import DecodeError, ServerError
from .models import Voice

logger = logging.getLogger(__name__)


def _parse_voice_list(items: Any) -> list[Voice]:
    if not isinstance(items, list):
        raise ValueError(f"expected a list of voices, got {type(items).__name__}")
    return [Voice.from_dict(item) for item in items]


def parse_voices(payload: Any) -> list[Voice]:
    """Parse a decoded catalog body into voices.

    The ``{"voices": [...]}`` envelope is tried first, then a bare array.

    Raises:
        DecodeError: If neither shape parses
    """
    try:
        if not isinstance(payload, dict):
            raise ValueError("response is not an object")
        if "voices" not in payload:
            raise ValueError("object has no 'voices' key")
        return _parse_voice_list(payload["voices"])
    except ValueError as envelope_error:
        logger.debug(f"Catalog body is not a voices envelope: {envelope_error}")
        try:
            return _parse_voice_list(payload)
        except ValueError as array_error:
            # Report the envelope failure for objects, the array failure otherwise
            reason = envelope_error if isinstance(payload, dict) else array_error
            raise DecodeError(f"Failed to parse voices: {reason}") from array_error


class VoiceCatalog(APIEndpoint):
    """Client for the voice catalog endpoint.

    Performs no caching; the session coordinator decides when to refetch.
    """

    async def list_voices(self, credentials: Credentials) -> list[Voice]:
        """Fetch all voices for the given credentials.

        Args:
            credentials: API credentials

        Returns:
            Voices in response order

        Raises:
            UnauthenticatedError: If credentials are empty
            TransportError: On network failure
            ServerError: On a non-2xx response
            DecodeError: If the body is not a recognized voice list
        """
        response = await self._send("GET", "/voices", credentials)

        if not response.is_success:
            body = response_text(response)
            logger.warning(f"Voice catalog request failed with status {response.status_code}")
            raise ServerError(
                f"API Error: {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        try:
            payload = json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Failed to parse voices: {e}") from e

        voices = parse_voices(payload)
        logger.info(f"Loaded {len(voices)} voices")
        return voices


__all__ = ["VoiceCatalog", "parse_voices"]
