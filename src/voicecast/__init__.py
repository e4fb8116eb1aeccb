"""voicecast - text-to-speech sessions over the ElevenLabs API.

voicecast wraps the synthesis pipeline of a TTS front-end:
- Voice catalog (GET /voices)
- Speech synthesis (POST /text-to-speech/{voice_id})
- Playback with transport controls and position updates
- Export of the synthesized audio

Usage:
    python -m voicecast voices
    python -m voicecast speak "Hello there" --save ~/Downloads
"""

__version__ = "0.1.0"

from .config import SessionConfig
from .config.loader import load_config
from .credentials import Credentials
from .session import SessionCoordinator, create_session

__all__ = [
    "Credentials",
    "SessionConfig",
    "SessionCoordinator",
    "__version__",
    "create_session",
    "load_config",
]
