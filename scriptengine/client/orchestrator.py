import asyncio
import mimetypes
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import httpx
from loguru import logger

from scriptengine.client.state import EngineState
from scriptengine.config_manager import ClientConfig, ConfigManager
from scriptengine.errors import UpstreamError
from scriptengine.scripting.models import ScriptMode, ScriptVariation

StateListener = Callable[[EngineState], None]

VARIATION_MODES = (ScriptMode.STRICT, ScriptMode.AI_OPTIMIZED)


class ScriptEngineClient:
    """
    Drives the two phases of a run against the HTTP backend.

    Each phase takes an EngineState and returns the next one. `on_change`,
    when given, also receives the intermediate in-flight state.
    """

    def __init__(self, config_manager: ConfigManager, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cfg: ClientConfig = config_manager.client
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.cfg.api_url, timeout=self.cfg.request_timeout, transport=self.transport
        )

    async def health(self) -> dict:
        async with self._client() as client:
            response = await client.get("/api/health")
            response.raise_for_status()
            return response.json()

    async def process_videos(self, state: EngineState, on_change: Optional[StateListener] = None) -> EngineState:
        if not state.gemini_api_key.strip():
            return state.model_copy(update={"error": "Please enter your Gemini API key first"})

        paths = state.selected_videos()
        if not paths:
            return state.model_copy(update={"error": "Please upload at least one video file"})

        try:
            files = [_read_video(path) for path in paths]
        except OSError as e:
            return state.model_copy(update={"error": f"Error: could not read video file ({e})"})

        busy = state.model_copy(update={"processing_videos": True, "error": "", "notice": ""})
        _notify(on_change, busy)

        logger.info(f"Submitting {len(files)} videos for transcription")
        try:
            async with self._client() as client:
                response = await client.post(
                    "/api/process-videos",
                    files=[("videos", f) for f in files],
                    data={"geminiApiKey": state.gemini_api_key},
                )
            data = _json_or_raise(response, "Failed to process videos")
            transcripts = tuple(data["transcripts"])
        except (UpstreamError, httpx.HTTPError, KeyError, TypeError) as e:
            logger.error(f"Video processing failed: {e}")
            return busy.model_copy(update={"processing_videos": False, "error": f"Error: {_describe(e)}"})

        logger.success(f"Received {len(transcripts)} transcripts")
        return busy.model_copy(
            update={
                "processing_videos": False,
                "clips": transcripts,
                "notice": "Videos processed! Review transcripts below.",
            }
        )

    async def generate_all_variations(
        self, state: EngineState, on_change: Optional[StateListener] = None
    ) -> EngineState:
        clips = state.filled_clips()
        if len(clips) < 2:
            return state.model_copy(update={"error": "Please provide at least 2 clip transcripts"})
        if not state.product_link.strip():
            return state.model_copy(update={"error": "Please provide a product link"})

        busy = state.model_copy(update={"loading": True, "error": "", "notice": "", "scripts": None})
        _notify(on_change, busy)

        async with self._client() as client:
            results = await asyncio.gather(
                *(self._generate_variation(client, mode, clips, state.product_link) for mode in VARIATION_MODES),
                return_exceptions=True,
            )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(f"Script generation failed: {failures[0]}")
            return busy.model_copy(update={"loading": False, "error": f"Error: {_describe(failures[0])}"})

        return busy.model_copy(update={"loading": False, "scripts": tuple(results), "selected_variation": 0})

    async def _generate_variation(
        self, client: httpx.AsyncClient, mode: ScriptMode, clips: List[str], product_link: str
    ) -> ScriptVariation:
        response = await client.post(
            "/api/generate-scripts",
            json={"clips": clips, "productLink": product_link, "mode": mode.value},
        )
        data = _json_or_raise(response, "Failed to generate script")
        return ScriptVariation(mode=data["mode"], script=data["script"])


def _read_video(path: str) -> Tuple[str, bytes, str]:
    video = Path(path)
    mime_type = mimetypes.guess_type(video.name)[0] or "video/mp4"
    return video.name, video.read_bytes(), mime_type


def _json_or_raise(response: httpx.Response, fallback: str) -> Any:
    try:
        data = response.json()
    except ValueError:
        data = None
    if response.is_success and data is not None:
        return data
    details = None
    if isinstance(data, dict):
        details = data.get("details") or data.get("error")
    raise UpstreamError(details or fallback, payload=data, status_code=response.status_code)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, UpstreamError):
        return exc.details
    return str(exc) or exc.__class__.__name__


def _notify(listener: Optional[StateListener], state: EngineState) -> None:
    if listener is not None:
        listener(state)
