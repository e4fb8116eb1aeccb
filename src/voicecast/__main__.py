"""voicecast command line entry point.

Usage:
    python -m voicecast [OPTIONS] COMMAND

Commands:
    voices             List the voices available to the API key
    speak TEXT         Synthesize TEXT and play it
    preview            Play a short sample of a voice

Options:
    --config PATH      Path to YAML config file
    --mock             Use the mock synthesizer and audio engine
    --log-level LEVEL  Override the configured log level
    --version          Show version
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from . import __version__
from .config import SessionConfig
from .config.loader import load_config
from .errors import VoicecastError
from .playback import PlaybackState
from .session import DirectoryShareTarget, SessionCoordinator, create_session


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="voicecast",
        description="voicecast - text-to-speech with ElevenLabs voices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m voicecast voices
  python -m voicecast speak "Hello there"
  python -m voicecast speak "Hello there" --voice 21m00Tcm4TlvDq8ikWAM --save ~/Music
  python -m voicecast --mock speak "Testing without network"

Environment:
  ELEVENLABS_API_KEY    API key (also read from a .env file)
""",
    )

    parser.add_argument("--config", type=Path, help="Path to YAML config file", metavar="PATH")
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock synthesis and audio (for testing without network or sound)",
    )
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument(
        "--version",
        action="version",
        version=f"voicecast v{__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("voices", help="List available voices")

    speak = commands.add_parser("speak", help="Synthesize text and play it")
    speak.add_argument("text", help="Text to synthesize")
    speak.add_argument("--voice", help="Voice ID to use")
    speak.add_argument("--save", type=Path, metavar="DIR", help="Also save the audio to DIR")
    speak.add_argument("--no-play", action="store_true", help="Only save, do not play")

    preview = commands.add_parser("preview", help="Play a sample of a voice")
    preview.add_argument("--voice", help="Voice ID to preview")

    return parser.parse_args(argv)


async def wait_for_playback(session: SessionCoordinator, poll_interval: float = 0.1) -> None:
    """Block until the session's playback is no longer playing."""
    while session.playback.state is PlaybackState.PLAYING:
        await asyncio.sleep(poll_interval)


async def run_voices(session: SessionCoordinator) -> int:
    try:
        voices = await session.load_voices()
    except VoicecastError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for voice in voices:
        print(f"{voice.voice_id}  {voice.display_name}")
    print(f"\n{len(voices)} voices")
    return 0


async def run_speak(session: SessionCoordinator, args: argparse.Namespace) -> int:
    if args.voice:
        session.select_voice(args.voice)

    if args.no_play:
        if args.save is None:
            print("Error: --no-play requires --save", file=sys.stderr)
            return 2
        path = await session.save_or_share(args.text)
        print(session.status)
        return 0 if path is not None else 1

    artifact = await session.generate(args.text)
    print(session.status)
    if artifact is None:
        return 1

    if args.save is not None:
        path = await session.save_or_share()
        print(session.status)
        if path is None:
            return 1

    if not args.mock:
        await wait_for_playback(session)
    return 0


async def run_preview(session: SessionCoordinator, args: argparse.Namespace) -> int:
    started = await session.preview(args.voice)
    print(session.status)
    if started and not args.mock:
        await wait_for_playback(session)
    return 0 if started else 1


async def run(config: SessionConfig, args: argparse.Namespace) -> int:
    """Run one CLI command inside an event loop."""
    share_target = None
    if getattr(args, "save", None) is not None:
        share_target = DirectoryShareTarget(args.save)

    session = create_session(config, use_mock=args.mock, share_target=share_target)
    try:
        if args.command == "voices":
            return await run_voices(session)
        if args.command == "speak":
            return await run_speak(session, args)
        return await run_preview(session, args)
    finally:
        await session.close()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for voicecast.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_args(argv)

    try:
        config = load_config(path=args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (TypeError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if args.mock and not config.api.api_key:
        config.api.api_key = "mock-api-key"

    setup_logging(args.log_level or config.logging.level)
    logger = logging.getLogger("voicecast")
    logger.debug(f"voicecast v{__version__}, credentials {config.credentials}")

    try:
        return asyncio.run(run(config, args))
    except RuntimeError as e:
        # Raised when the audio backend is unavailable
        logger.error(f"Failed to start: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
