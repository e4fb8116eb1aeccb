"""PyAudio playback engine.

Decodes synthesized audio to PCM (WAV via ``wave``, raw PCM directly,
MP3/OGG via pydub) and streams it through PyAudio from a background
thread. Completion and stream failures are reported to the engine
listener from that thread.
"""

import array
import io
import logging
import sys
import threading
import wave
from dataclasses import dataclass
from typing import Any

from ..errors import AudioDecodeError
from ..tts.formats import OutputFormat
from .engine import EngineEvent, EngineEventKind, EngineListener

logger = logging.getLogger(__name__)

# PyAudio import with fallback for type hints
try:
    import pyaudio

    PYAUDIO_AVAILABLE = True
except ImportError:
    PYAUDIO_AVAILABLE = False
    pyaudio = None

try:
    from pydub import AudioSegment

    PYDUB_AVAILABLE = True
except ImportError:
    PYDUB_AVAILABLE = False
    AudioSegment = None

CHUNK_FRAMES = 1024


@dataclass(frozen=True)
class DecodedAudio:
    """Interleaved PCM ready for output.

    Attributes:
        frames: Raw PCM bytes
        sample_rate: Sample rate in Hz
        channels: Channel count
        sample_width: Bytes per sample
    """

    frames: bytes
    sample_rate: int
    channels: int
    sample_width: int

    @property
    def frame_size(self) -> int:
        return self.channels * self.sample_width

    @property
    def num_frames(self) -> int:
        if self.frame_size == 0:
            return 0
        return len(self.frames) // self.frame_size

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.num_frames / self.sample_rate


def decode_audio(data: bytes, audio_format: OutputFormat) -> DecodedAudio:
    """Decode audio bytes according to the requested format.

    Raises:
        AudioDecodeError: If the bytes cannot be decoded
    """
    if not data:
        raise AudioDecodeError("Audio decode error: no audio data")

    if audio_format.is_raw_pcm:
        if len(data) % 2:
            raise AudioDecodeError("Audio decode error: truncated 16-bit PCM")
        return DecodedAudio(data, audio_format.sample_rate, channels=1, sample_width=2)

    if audio_format.extension == "wav":
        try:
            with wave.open(io.BytesIO(data), "rb") as wav_file:
                return DecodedAudio(
                    frames=wav_file.readframes(wav_file.getnframes()),
                    sample_rate=wav_file.getframerate(),
                    channels=wav_file.getnchannels(),
                    sample_width=wav_file.getsampwidth(),
                )
        except (wave.Error, EOFError) as e:
            raise AudioDecodeError(f"Audio decode error: {e}") from e

    if not PYDUB_AVAILABLE:
        raise AudioDecodeError(
            f"Cannot decode {audio_format.extension}: pydub not available. "
            "Install with: pip install pydub"
        )
    try:
        segment = AudioSegment.from_file(io.BytesIO(data), format=audio_format.extension)
    except Exception as e:
        raise AudioDecodeError(f"Audio decode error: {e}") from e
    return DecodedAudio(
        frames=segment.raw_data,
        sample_rate=segment.frame_rate,
        channels=segment.channels,
        sample_width=segment.sample_width,
    )


def _scale_volume(chunk: bytes, volume: float, sample_width: int) -> bytes:
    """Scale 16-bit samples by volume; other widths pass through."""
    if volume >= 1.0 or sample_width != 2:
        return chunk
    samples = array.array("h")
    samples.frombytes(chunk)
    if sys.byteorder != "little":
        samples.byteswap()
    for i, sample in enumerate(samples):
        samples[i] = int(sample * volume)
    if sys.byteorder != "little":
        samples.byteswap()
    return samples.tobytes()


class PyAudioPlayer:
    """AudioPlayer backed by a PyAudio output stream."""

    def __init__(self, engine: "PyAudioEngine", audio: DecodedAudio) -> None:
        self._engine = engine
        self._audio = audio
        self._frame_index = 0
        self._volume = 1.0
        self._lock = threading.Lock()
        self._play_flag = threading.Event()
        self._stop_flag = threading.Event()
        self._thread: threading.Thread | None = None
        # Set under the lock once the worker has left its loop; the thread
        # may still be alive while its stream drains
        self._worker_done = False

    def play(self) -> bool:
        if self._stop_flag.is_set():
            return False
        with self._lock:
            if self._frame_index >= self._audio.num_frames:
                self._frame_index = 0
            needs_worker = self._thread is None or self._worker_done
            self._worker_done = False
            self._play_flag.set()
        if needs_worker:
            self._thread = threading.Thread(
                target=self._run,
                daemon=True,
                name="voicecast-playback",
            )
            self._thread.start()
        return True

    def pause(self) -> None:
        self._play_flag.clear()

    def stop(self) -> None:
        self._stop_flag.set()
        self._play_flag.set()  # wake the worker so it can exit
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=1.0)
        self._thread = None

    @property
    def is_playing(self) -> bool:
        return (
            self._play_flag.is_set()
            and not self._stop_flag.is_set()
            and self._thread is not None
            and self._thread.is_alive()
        )

    @property
    def duration(self) -> float:
        return self._audio.duration

    @property
    def current_time(self) -> float:
        if self._audio.sample_rate <= 0:
            return 0.0
        with self._lock:
            return self._frame_index / self._audio.sample_rate

    @current_time.setter
    def current_time(self, value: float) -> None:
        frame = int(max(0.0, value) * self._audio.sample_rate)
        with self._lock:
            self._frame_index = min(frame, self._audio.num_frames)

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = max(0.0, min(1.0, value))

    def _next_chunk(self) -> bytes:
        """Take the next chunk; an empty chunk ends the worker's loop."""
        frame_size = self._audio.frame_size
        with self._lock:
            start = self._frame_index
            end = min(start + CHUNK_FRAMES, self._audio.num_frames)
            self._frame_index = end
            if start >= end:
                self._play_flag.clear()
                self._worker_done = True
        return self._audio.frames[start * frame_size : end * frame_size]

    def _mark_worker_done(self) -> None:
        with self._lock:
            self._play_flag.clear()
            self._worker_done = True

    def _run(self) -> None:
        """Stream PCM until the end, a stop, or an error."""
        stream: Any = None
        try:
            stream = self._engine.open_stream(self._audio)
            while not self._stop_flag.is_set():
                if not self._play_flag.wait(timeout=0.05):
                    continue
                if self._stop_flag.is_set():
                    break
                chunk = self._next_chunk()
                if not chunk:
                    self._engine.emit(EngineEvent(EngineEventKind.FINISHED, self))
                    break
                stream.write(_scale_volume(chunk, self._volume, self._audio.sample_width))
        except Exception as e:
            logger.warning(f"Playback stream failed: {e}")
            self._mark_worker_done()
            self._engine.emit(
                EngineEvent(EngineEventKind.DECODE_ERROR, self, AudioDecodeError(str(e)))
            )
        finally:
            if stream is not None:
                stream.stop_stream()
                stream.close()


class PyAudioEngine:
    """Audio engine using PyAudio for output.

    Implements the AudioEngine protocol.
    """

    def __init__(self, output_device_index: int | None = None) -> None:
        """Initialize PyAudio engine.

        Args:
            output_device_index: PortAudio device index, or None for default

        Raises:
            RuntimeError: If PyAudio is not available
        """
        if not PYAUDIO_AVAILABLE:
            raise RuntimeError("PyAudio not available. Install with: pip install pyaudio")

        self._device_index = output_device_index
        self._listener: EngineListener | None = None
        self._pa = pyaudio.PyAudio()

    def set_listener(self, listener: EngineListener) -> None:
        self._listener = listener

    def load(self, data: bytes, audio_format: OutputFormat) -> PyAudioPlayer:
        audio = decode_audio(data, audio_format)
        if audio.num_frames == 0:
            raise AudioDecodeError("Audio decode error: no audio frames")
        logger.debug(
            f"Decoded {audio_format.extension} audio: {audio.duration:.2f}s, "
            f"{audio.sample_rate}Hz, {audio.channels}ch"
        )
        return PyAudioPlayer(self, audio)

    def open_stream(self, audio: DecodedAudio) -> Any:
        return self._pa.open(
            format=self._pa.get_format_from_width(audio.sample_width),
            channels=audio.channels,
            rate=audio.sample_rate,
            output=True,
            output_device_index=self._device_index,
        )

    def emit(self, event: EngineEvent) -> None:
        if self._listener is not None:
            self._listener(event)

    def close(self) -> None:
        """Terminate PortAudio. Safe to call twice."""
        if self._pa is not None:
            self._pa.terminate()
            self._pa = None
            logger.debug("PortAudio terminated")


__all__ = [
    "DecodedAudio",
    "PYAUDIO_AVAILABLE",
    "PYDUB_AVAILABLE",
    "PyAudioEngine",
    "PyAudioPlayer",
    "decode_audio",
]
