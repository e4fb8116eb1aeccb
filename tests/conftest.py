"""Shared fixtures for voicecast tests."""

from typing import Any

import httpx
import pytest

from voicecast.credentials import Credentials

BASE_URL = "https://api.elevenlabs.io/v1"

VOICE_OBJECTS: list[dict[str, Any]] = [
    {
        "voice_id": "21m00Tcm4TlvDq8ikWAM",
        "name": "Rachel",
        "category": "premade",
        "labels": {"accent": "american", "gender": "female"},
        "settings": {"stability": 0.5, "similarity_boost": 0.75},
    },
    {
        "voice_id": "TxGEqnHWrfWFTfGW9XjX",
        "name": "Josh",
        "category": "premade",
        "description": "Deep, professional",
    },
    {
        "voice_id": "custom-clone-1",
        "name": "My Clone",
        "category": "cloned",
        "samples": [{"sample_id": "s1", "file_name": "a.mp3"}, {"broken": True}],
        "sharing": "not-an-object",
        "voice_verification": None,
    },
]


class FakeElevenLabsAPI:
    """httpx MockTransport handler that mimics the two endpoints.

    Every request is recorded so tests can assert on call counts.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.voices_status = 200
        self.voices_body: Any = {"voices": VOICE_OBJECTS}
        self.tts_status = 200
        self.tts_body: bytes = b"ID3\x04\x00fake-mp3-audio"
        self.error: type[httpx.TransportError] | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("simulated network failure", request=request)

        path = request.url.path
        if request.method == "GET" and path.endswith("/voices"):
            if isinstance(self.voices_body, (bytes, str)):
                return httpx.Response(self.voices_status, content=self.voices_body)
            return httpx.Response(self.voices_status, json=self.voices_body)
        if request.method == "POST" and "/text-to-speech/" in path:
            return httpx.Response(self.tts_status, content=self.tts_body)
        return httpx.Response(404, text="not found")

    def count(self, fragment: str) -> int:
        """Number of recorded requests whose path contains ``fragment``."""
        return sum(1 for r in self.requests if fragment in r.url.path)

    @property
    def synthesis_calls(self) -> int:
        return self.count("/text-to-speech/")

    @property
    def catalog_calls(self) -> int:
        return self.count("/voices")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_api() -> FakeElevenLabsAPI:
    return FakeElevenLabsAPI()


@pytest.fixture
def http_client(fake_api: FakeElevenLabsAPI) -> httpx.AsyncClient:
    return fake_api.client()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key="sk-test-0123456789abcdef")
