"""Session module for voicecast.

Wires the voice catalog, synthesis client and playback controller into a
SessionCoordinator.
"""

import logging
from typing import TYPE_CHECKING

from .coordinator import PREVIEW_TEXT, SessionCoordinator, VoiceSource
from .export import (
    AudioExporter,
    DirectoryShareTarget,
    NullShareTarget,
    ShareTarget,
    export_filename,
)
from .models import AudioArtifact, SessionStatus

if TYPE_CHECKING:
    import httpx

    from ..config import SessionConfig

logger = logging.getLogger(__name__)


def create_session(
    config: "SessionConfig",
    use_mock: bool = False,
    http_client: "httpx.AsyncClient | None" = None,
    share_target: ShareTarget | None = None,
) -> SessionCoordinator:
    """Build a SessionCoordinator from configuration.

    Args:
        config: Session configuration
        use_mock: Use the mock synthesizer and mock audio engine
        http_client: Optional HTTP client shared by catalog and synthesizer
        share_target: Receiver for exported files

    Returns:
        A ready SessionCoordinator
    """
    from ..playback import create_playback_controller
    from ..tts import create_synthesizer
    from ..voices import VoiceCatalog
    from ..voices.mock import MockVoiceCatalog

    catalog: VoiceSource
    if use_mock:
        catalog = MockVoiceCatalog()
    else:
        catalog = VoiceCatalog(
            base_url=config.api.base_url,
            timeout=config.api.timeout_seconds,
            http_client=http_client,
        )
    synthesizer = create_synthesizer(config.api, use_mock=use_mock, http_client=http_client)
    playback = create_playback_controller(config.playback, use_mock=use_mock)
    exporter = AudioExporter(
        directory=config.export.directory,
        prefix=config.export.prefix,
        share_target=share_target,
    )
    logger.debug(f"Session created (mock={use_mock}, base_url={config.api.base_url})")
    return SessionCoordinator(config, catalog, synthesizer, playback, exporter)


__all__ = [
    "AudioArtifact",
    "AudioExporter",
    "DirectoryShareTarget",
    "NullShareTarget",
    "PREVIEW_TEXT",
    "SessionCoordinator",
    "SessionStatus",
    "ShareTarget",
    "VoiceSource",
    "create_session",
    "export_filename",
]
