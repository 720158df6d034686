import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field


class PathsConfig(BaseModel):
    log_dir: str = Field(default="logs")
    log_name: str = Field(default="scriptengine")
    log_rotation: str = Field(default="10 MB")
    log_retention: str = Field(default="10 days")


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1")
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "3001")))
    version: str = Field(default="1.0.1")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class TranscriptionConfig(BaseModel):
    upload_url: str = Field(default="https://generativelanguage.googleapis.com/upload/v1beta/files")
    api_base_url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    model_name: str = Field(default="gemini-2.5-flash")
    max_videos: int = Field(default=3)
    processing_delay_seconds: float = Field(default=8.0)
    request_timeout: Optional[float] = Field(default=None)


class ScriptingConfig(BaseModel):
    llm_provider: str = Field(default="anthropic")
    model_name: str = Field(default="claude-sonnet-4-20250514")
    max_tokens: int = Field(default=4500)
    request_timeout: Optional[float] = Field(default=None)
    anthropic_api_key: Optional[str] = Field(default_factory=lambda: os.getenv("ANTHROPIC_API_KEY"))
    openai_api_key: Optional[str] = Field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))


class ClientConfig(BaseModel):
    api_url: str = Field(default_factory=lambda: os.getenv("SCRIPT_ENGINE_API_URL", "http://localhost:3001"))
    request_timeout: Optional[float] = Field(default=None)


class AppConfig(BaseModel):
    paths: PathsConfig = Field(default_factory=PathsConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    transcription: TranscriptionConfig = Field(default_factory=TranscriptionConfig)
    scripting: ScriptingConfig = Field(default_factory=ScriptingConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)


class ConfigManager:
    """
    Manages loading and validation of application configuration.
    """

    def __init__(self, config_path: str = "config/settings.yaml"):
        self.config_path = Path(config_path)
        self.config: AppConfig = self._load_config()

    def _load_config(self) -> AppConfig:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found at {self.config_path}")

        with open(self.config_path, "r") as f:
            raw_config = yaml.safe_load(f) or {}

        return AppConfig(**raw_config)

    @classmethod
    def from_config(cls, config: AppConfig) -> "ConfigManager":
        """Wraps an already built AppConfig without touching the disk."""
        manager = cls.__new__(cls)
        manager.config_path = None
        manager.config = config
        return manager

    @property
    def paths(self) -> PathsConfig:
        return self.config.paths

    @property
    def server(self) -> ServerConfig:
        return self.config.server

    @property
    def transcription(self) -> TranscriptionConfig:
        return self.config.transcription

    @property
    def scripting(self) -> ScriptingConfig:
        return self.config.scripting

    @property
    def client(self) -> ClientConfig:
        return self.config.client
