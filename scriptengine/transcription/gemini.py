import asyncio
from typing import Any, Dict, List, Optional, Sequence

import httpx
from loguru import logger

from scriptengine.config_manager import ConfigManager, TranscriptionConfig
from scriptengine.errors import InputValidationError, UpstreamError, provider_message
from scriptengine.transcription.models import UploadedFile, VideoAsset
from scriptengine.transcription.prompts import VIDEO_ANALYSIS_PROMPT


class GeminiTranscriber:
    """
    Uploads clips to the Gemini Files API and asks Gemini for a description
    plus a verbatim transcript of each one.

    The Gemini key is supplied per call by the caller; nothing is kept on
    the server.
    """

    def __init__(self, config_manager: ConfigManager, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cfg: TranscriptionConfig = config_manager.transcription
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.cfg.request_timeout, transport=self.transport)

    async def transcribe(self, assets: Sequence[VideoAsset], api_key: str) -> List[str]:
        """
        Runs upload -> wait -> generate for every asset concurrently.

        Returns the transcripts in input order. If any asset fails the whole
        batch fails and the remaining work is cancelled.
        """
        if not api_key or not api_key.strip():
            raise InputValidationError("Gemini API key required")
        if not assets:
            raise InputValidationError("Please upload at least one video file")
        if len(assets) > self.cfg.max_videos:
            raise InputValidationError(f"At most {self.cfg.max_videos} videos can be processed at once")

        logger.info(f"Processing {len(assets)} videos...")

        async with self._client() as client:
            tasks = [
                asyncio.ensure_future(self._process(client, asset, api_key, index))
                for index, asset in enumerate(assets)
            ]
            try:
                transcripts = await asyncio.gather(*tasks)
            except Exception:
                for task in tasks:
                    task.cancel()
                raise

        return list(transcripts)

    async def _process(self, client: httpx.AsyncClient, asset: VideoAsset, api_key: str, index: int) -> str:
        logger.info(f"Uploading video {index + 1}: {asset.filename}")
        uploaded = await self.upload(client, asset, api_key)
        logger.info(f"File uploaded: {uploaded.name}, URI: {uploaded.uri}")

        # Gemini ingests the clip asynchronously; there is no readiness check here.
        logger.debug(f"Waiting {self.cfg.processing_delay_seconds}s for video processing...")
        await asyncio.sleep(self.cfg.processing_delay_seconds)

        logger.info(f"Generating transcript for video {index + 1}...")
        text = await self.generate(client, uploaded, api_key)
        logger.success(f"Video {index + 1} processed successfully")
        return text

    async def upload(self, client: httpx.AsyncClient, asset: VideoAsset, api_key: str) -> UploadedFile:
        payload = await self._post(
            client,
            self.cfg.upload_url,
            api_key,
            files={"file": (asset.filename, asset.content, asset.mime_type)},
        )
        try:
            file_info = payload["file"]
            return UploadedFile(uri=file_info["uri"], name=file_info["name"], mime_type=asset.mime_type)
        except (KeyError, TypeError) as e:
            raise UpstreamError("Gemini upload response did not include a file reference", payload=payload) from e

    async def generate(self, client: httpx.AsyncClient, uploaded: UploadedFile, api_key: str) -> str:
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": VIDEO_ANALYSIS_PROMPT},
                        {"fileData": {"mimeType": uploaded.mime_type, "fileUri": uploaded.uri}},
                    ]
                }
            ]
        }
        url = f"{self.cfg.api_base_url}/models/{self.cfg.model_name}:generateContent"
        payload = await self._post(client, url, api_key, json=body)
        try:
            return payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError("Gemini returned no transcript candidate", payload=payload) from e

    async def _post(self, client: httpx.AsyncClient, url: str, api_key: str, **kwargs: Any) -> Dict[str, Any]:
        # Key goes in a header so it never shows up in logged URLs.
        headers = {"x-goog-api-key": api_key}
        try:
            response = await client.post(url, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            payload = _safe_json(e.response)
            details = provider_message(payload) or f"Gemini returned HTTP {e.response.status_code}"
            raise UpstreamError(details, payload=payload, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            raise UpstreamError(str(e) or "Could not reach Gemini") from e

        payload = _safe_json(response)
        if payload is None:
            raise UpstreamError("Gemini returned a non-JSON response")
        return payload


def _safe_json(response: httpx.Response) -> Optional[Any]:
    try:
        return response.json()
    except ValueError:
        return None
