import asyncio
import json
from typing import Dict, List, Optional

import httpx
import pytest

from scriptengine.config_manager import AppConfig, ConfigManager, ScriptingConfig, TranscriptionConfig


class FakeGemini:
    """
    Stands in for the Gemini Files + generateContent endpoints.

    Each uploaded video is identified by a tag contained in its bytes
    (e.g. b"clip-first"), which lets tests give every clip its own latency
    or make a single upload fail.
    """

    def __init__(self, latencies: Optional[Dict[str, float]] = None, fail_upload: Optional[str] = None):
        self.latencies = latencies or {}
        self.fail_upload = fail_upload
        self.requests: List[httpx.Request] = []
        self.prompts: List[dict] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _tag(self, content: bytes) -> str:
        start = content.index(b"clip-") + len(b"clip-")
        end = start
        while end < len(content) and content[end:end + 1].isalnum():
            end += 1
        return content[start:end].decode()

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path.endswith("/upload/v1beta/files"):
            tag = self._tag(request.content)
            if tag == self.fail_upload:
                return httpx.Response(403, json={"error": {"code": 403, "message": "API key not valid"}})
            return httpx.Response(
                200, json={"file": {"uri": f"https://files.example/{tag}", "name": f"files/{tag}"}}
            )

        if request.url.path.endswith(":generateContent"):
            body = json.loads(request.content)
            self.prompts.append(body)
            uri = body["contents"][0]["parts"][1]["fileData"]["fileUri"]
            tag = uri.rsplit("/", 1)[-1]
            await asyncio.sleep(self.latencies.get(tag, 0))
            text = f"Description: video {tag}\nTranscript: words from {tag}"
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})

        return httpx.Response(404, json={"error": {"message": "unknown route"}})


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def fast_config():
    """Config with no post-upload wait and a dummy server-side Anthropic key."""
    config = AppConfig(
        transcription=TranscriptionConfig(processing_delay_seconds=0),
        scripting=ScriptingConfig(llm_provider="anthropic", anthropic_api_key="sk-ant-test"),
    )
    return ConfigManager.from_config(config)
