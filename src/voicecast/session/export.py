"""Export of synthesized audio to files.

Files are written as ``<prefix>_<YYYY-MM-DD_HH-mm-ss>.<ext>`` and then
handed to a share target (the host's share/save integration).
"""

import logging
import shutil
import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Protocol

from ..errors import ExportError
from ..tts.formats import OutputFormat, extension_for
from .models import AudioArtifact

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "voicecast"


def export_filename(
    prefix: str,
    audio_format: OutputFormat | str | None,
    now: datetime | None = None,
) -> str:
    """Build an export filename.

    Args:
        prefix: Filename prefix
        audio_format: Output format, or a format label/api id
        now: Timestamp (defaults to the current time)

    Examples:
        >>> export_filename("voicecast", "WAV - 44.1kHz", datetime(2024, 5, 1, 9, 3, 7))
        'voicecast_2024-05-01_09-03-07.wav'
    """
    if isinstance(audio_format, OutputFormat):
        extension = audio_format.extension
    else:
        extension = extension_for(audio_format)
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
    return f"{prefix}_{stamp}.{extension}"


class ShareTarget(Protocol):
    """Receives an exported file (share sheet, save dialog, ...)."""

    def share(self, path: Path) -> Path:
        """Hand off an exported file.

        Returns:
            Final location of the file
        """
        ...


class NullShareTarget:
    """Leaves the exported file where it was written."""

    def share(self, path: Path) -> Path:
        return path


class DirectoryShareTarget:
    """Copies exported files into a destination directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def share(self, path: Path) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        destination = self._directory / path.name
        shutil.copy2(path, destination)
        logger.info(f"Saved audio to {destination}")
        return destination


class AudioExporter:
    """Writes audio artifacts to disk and hands them to a share target."""

    def __init__(
        self,
        directory: str | Path | None = None,
        prefix: str = DEFAULT_PREFIX,
        share_target: ShareTarget | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize exporter.

        Args:
            directory: Where files are written (system temp dir if None)
            prefix: Filename prefix
            share_target: Receiver of the written file
            clock: Time source for filenames
        """
        self._directory = Path(directory).expanduser() if directory else None
        self._prefix = prefix
        self._share_target = share_target or NullShareTarget()
        self._clock = clock
        self._export_count = 0

    @property
    def export_count(self) -> int:
        return self._export_count

    def export(self, artifact: AudioArtifact) -> Path:
        """Write the artifact and share it.

        Returns:
            Path returned by the share target

        Raises:
            ExportError: If the file cannot be written or shared
        """
        directory = self._directory or Path(tempfile.gettempdir())
        path = directory / export_filename(self._prefix, artifact.audio_format, self._clock())

        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(artifact.data)
        except OSError as e:
            raise ExportError(f"Failed to save audio: {e}") from e
        logger.debug(f"Wrote {artifact.size_bytes} bytes to {path}")

        try:
            shared = self._share_target.share(path)
        except OSError as e:
            raise ExportError(f"Failed to share audio: {e}") from e

        self._export_count += 1
        return shared


__all__ = [
    "AudioExporter",
    "DEFAULT_PREFIX",
    "DirectoryShareTarget",
    "NullShareTarget",
    "ShareTarget",
    "export_filename",
]
