import asyncio
from types import SimpleNamespace

import httpx
import pytest

from backend.server import app, get_script_generator, get_transcriber
from conftest import FakeGemini
from scriptengine.client.orchestrator import ScriptEngineClient
from scriptengine.client.state import EngineState, set_api_key, set_clip, set_product_link, set_video
from scriptengine.scripting.generator import ScriptGenerator
from scriptengine.scripting.models import ScriptMode
from scriptengine.scripting.prompts import CLIP_ORDER_INSTRUCTIONS
from scriptengine.transcription.gemini import GeminiTranscriber


@pytest.fixture
def wired_app(mocker, fast_config):
    """Backend app with Gemini and Anthropic replaced by in-process fakes."""
    gemini = FakeGemini(latencies={"first": 0.1, "second": 0.0})
    app.dependency_overrides[get_transcriber] = lambda: GeminiTranscriber(fast_config, transport=gemini.transport())

    mock_cls = mocker.patch("scriptengine.scripting.generator.AsyncAnthropic")

    async def create(**kwargs):
        prompt = kwargs["messages"][0]["content"]
        label = "strict" if CLIP_ORDER_INSTRUCTIONS["STRICT"] in prompt else "optimized"
        return SimpleNamespace(content=[SimpleNamespace(text=f"HOOK 1 ... {label} script")])

    mock_cls.return_value.messages.create = mocker.AsyncMock(side_effect=create)
    generator = ScriptGenerator(fast_config)
    app.dependency_overrides[get_script_generator] = lambda: generator

    yield SimpleNamespace(gemini=gemini, create=mock_cls.return_value.messages.create)
    app.dependency_overrides.clear()


def test_two_videos_to_two_variations(wired_app, fast_config, tmp_path):
    client = ScriptEngineClient(fast_config, transport=httpx.ASGITransport(app=app))

    paths = []
    for tag in ("first", "second"):
        path = tmp_path / f"{tag}.mp4"
        path.write_bytes(f"clip-{tag} bytes".encode())
        paths.append(str(path))

    state = set_api_key(EngineState(), "gm-key")
    state = set_video(set_video(state, 0, paths[0]), 1, paths[1])

    state = asyncio.run(client.process_videos(state))

    assert state.error == ""
    assert len(state.clips) == 2
    assert "first" in state.clips[0]
    assert "second" in state.clips[1]

    # Caller edits the transcripts before generating
    state = set_clip(set_clip(state, 0, "hello"), 1, "world")
    state = set_product_link(state, "https://example.com/p")

    state = asyncio.run(client.generate_all_variations(state))

    assert state.error == ""
    assert len(state.scripts) == 2
    assert state.scripts[0].mode == ScriptMode.STRICT
    assert state.scripts[1].mode == ScriptMode.AI_OPTIMIZED
    assert "strict" in state.scripts[0].script
    assert "optimized" in state.scripts[1].script
    assert all(v.script.strip() for v in state.scripts)
    assert state.selected_variation == 0

    prompts = [c.kwargs["messages"][0]["content"] for c in wired_app.create.await_args_list]
    assert all("Clip 1: hello\n\nClip 2: world" in p for p in prompts)
    assert all("PRODUCT: https://example.com/p" in p for p in prompts)


def test_failed_upload_surfaces_to_client(fast_config, tmp_path):
    gemini = FakeGemini(fail_upload="second")
    app.dependency_overrides[get_transcriber] = lambda: GeminiTranscriber(fast_config, transport=gemini.transport())
    try:
        client = ScriptEngineClient(fast_config, transport=httpx.ASGITransport(app=app))
        state = set_api_key(EngineState(), "gm-key")
        for slot, tag in enumerate(("first", "second")):
            path = tmp_path / f"{tag}.mp4"
            path.write_bytes(f"clip-{tag} bytes".encode())
            state = set_video(state, slot, str(path))

        result = asyncio.run(client.process_videos(state))
    finally:
        app.dependency_overrides.clear()

    assert result.error == "Error: API key not valid"
    assert result.clips == ("", "", "")
