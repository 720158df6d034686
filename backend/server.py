import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from scriptengine.config_manager import AppConfig, ConfigManager
from scriptengine.errors import InputValidationError, UpstreamError
from scriptengine.scripting.generator import ScriptGenerator
from scriptengine.scripting.models import ScriptMode, ScriptRequest
from scriptengine.transcription.gemini import GeminiTranscriber
from scriptengine.transcription.models import TranscriptionResult, VideoAsset
from scriptengine.utils.logger import intercept_std_logging

# Load env vars
load_dotenv()


@lru_cache
def get_config_manager() -> ConfigManager:
    try:
        return ConfigManager()
    except FileNotFoundError as e:
        logger.warning(f"{e}. Falling back to default settings.")
        return ConfigManager.from_config(AppConfig())


def get_transcriber(config: ConfigManager = Depends(get_config_manager)) -> GeminiTranscriber:
    return GeminiTranscriber(config)


@lru_cache
def _script_generator() -> ScriptGenerator:
    return ScriptGenerator(get_config_manager())


def get_script_generator() -> ScriptGenerator:
    return _script_generator()


# uvicorn logs through loguru; HTTP client chatter stays at WARNING
intercept_std_logging("uvicorn", "uvicorn.access", "uvicorn.error")
for name in ("httpx", "httpcore", "anthropic", "openai"):
    logging.getLogger(name).setLevel(logging.WARNING)

# --- App Configuration ---
app = FastAPI(title="Viral Script Engine Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config_manager().server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Data Models ---
class HealthResponse(BaseModel):
    status: str
    version: str


class ScriptResponse(BaseModel):
    script: str
    mode: ScriptMode


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


# --- Routes ---
@app.get("/api/health", response_model=HealthResponse)
async def health_check(config: ConfigManager = Depends(get_config_manager)):
    return HealthResponse(status="ok", version=config.server.version)


@app.post("/api/process-videos", response_model=TranscriptionResult)
async def process_videos(
    videos: List[UploadFile] = File(default=[]),
    gemini_api_key: str = Form(default="", alias="geminiApiKey"),
    transcriber: GeminiTranscriber = Depends(get_transcriber),
):
    if not gemini_api_key.strip():
        return _error(400, "Gemini API key required")

    try:
        assets = [
            VideoAsset(
                content=await video.read(),
                mime_type=video.content_type or "video/mp4",
                filename=video.filename or f"video_{index + 1}.mp4",
            )
            for index, video in enumerate(videos)
        ]
    finally:
        for video in videos:
            await video.close()

    try:
        transcripts = await transcriber.transcribe(assets, gemini_api_key)
    except InputValidationError as e:
        return _error(400, str(e))
    except UpstreamError as e:
        logger.error(f"Video processing error: {e.details} | payload={e.payload}")
        return _error(500, "Failed to process videos", e.details)
    except Exception as e:
        logger.exception(f"Video processing error: {e}")
        return _error(500, "Failed to process videos", str(e))

    return TranscriptionResult(transcripts=transcripts)


@app.post("/api/generate-scripts", response_model=ScriptResponse)
async def generate_scripts(
    script_request: ScriptRequest,
    generator: ScriptGenerator = Depends(get_script_generator),
):
    try:
        variation = await generator.generate(script_request)
    except InputValidationError as e:
        return _error(400, str(e))
    except UpstreamError as e:
        logger.error(f"Script generation error: {e.details} | payload={e.payload}")
        return _error(500, "Failed to generate script", e.details)
    except Exception as e:
        logger.exception(f"Script generation error: {e}")
        return _error(500, "Failed to generate script", str(e))

    return ScriptResponse(script=variation.script, mode=variation.mode)


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import uvicorn

    server_cfg = get_config_manager().server
    host = host or server_cfg.host
    port = port or server_cfg.port
    logger.info(f"Server v{server_cfg.version} running on port {port}")
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()
