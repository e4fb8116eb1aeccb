"""Text-to-speech module for voicecast.

Provides the ElevenLabs synthesis client, its request model, the output
format table, and a mock client for tests.
"""

import logging
from typing import TYPE_CHECKING

from .client import SynthesisClient, SynthesisRequest
from .formats import (
    AVAILABLE_MODELS,
    DEFAULT_MODEL_ID,
    DEFAULT_OUTPUT_FORMAT,
    OUTPUT_FORMATS,
    OutputFormat,
    extension_for,
    resolve_output_format,
)
from .mock import MockSynthesisClient
from .synthesizer import Synthesizer

if TYPE_CHECKING:
    import httpx

    from ..config import APIConfig

logger = logging.getLogger(__name__)


def create_synthesizer(
    config: "APIConfig | None" = None,
    use_mock: bool = False,
    http_client: "httpx.AsyncClient | None" = None,
) -> Synthesizer:
    """Create the synthesizer for the given API configuration.

    Args:
        config: API configuration (optional)
        use_mock: If True, return MockSynthesisClient for testing
        http_client: Optional shared HTTP client

    Returns:
        Synthesizer implementation
    """
    if use_mock:
        logger.info("TTS: Using MockSynthesisClient (requested)")
        return MockSynthesisClient()

    if config is None:
        return SynthesisClient(http_client=http_client)

    logger.debug(f"TTS: Using SynthesisClient at {config.base_url}")
    return SynthesisClient(
        base_url=config.base_url,
        timeout=config.synthesis_timeout_seconds,
        http_client=http_client,
    )


__all__ = [
    "AVAILABLE_MODELS",
    "DEFAULT_MODEL_ID",
    "DEFAULT_OUTPUT_FORMAT",
    "MockSynthesisClient",
    "OUTPUT_FORMATS",
    "OutputFormat",
    "SynthesisClient",
    "SynthesisRequest",
    "Synthesizer",
    "create_synthesizer",
    "extension_for",
    "resolve_output_format",
]
