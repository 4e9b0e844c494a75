"""Server configuration via environment variables."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _is_env_placeholder(value: str) -> bool:
    """Return True when *value* looks like an unresolved shell placeholder."""
    if value.startswith("${") and value.endswith("}"):
        inner = value[2:-1].strip()
        if ":-" in inner:
            inner = inner.split(":-", 1)[0].strip()
        return bool(inner) and all(ch.isalnum() or ch == "_" for ch in inner)
    if value.startswith("$"):
        inner = value[1:].strip()
        return bool(inner) and all(ch.isalnum() or ch == "_" for ch in inner)
    return False


def _env(name: str, default: str = "") -> str:
    """Read an env var, treating blanks and unresolved placeholders as unset."""
    value = os.getenv(name, "").strip()
    if not value or _is_env_placeholder(value):
        return default
    return value


def _resolve_tracing_enabled(flag_value: str, tracking_uri: str) -> bool:
    """Derive tracing_enabled from env vars.

    - ``YT_TOOLS_TRACING_ENABLED=false`` → always disabled (explicit opt-out).
    - Otherwise enabled when ``MLFLOW_TRACKING_URI`` is non-empty.
    """
    if flag_value.lower() == "false":
        return False
    return bool(tracking_uri)


class ServerConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    youtube_api_key: str = Field(default="")
    cache_ttl_seconds: int = Field(default=3600)
    api_token: str = Field(default="")
    ytdlp_path: str = Field(default="yt-dlp")
    default_transcript_language: str = Field(default="en")
    http_host: str = Field(default="127.0.0.1")
    http_port: int = Field(default=8000)
    log_level: str = Field(default="INFO")
    tracing_enabled: bool = Field(default=False)
    mlflow_tracking_uri: str = Field(default="")
    mlflow_experiment_name: str = Field(default="youtube-tools-mcp")

    @field_validator("cache_ttl_seconds", "http_port")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Configuration values must be >= 1")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            allowed = ", ".join(sorted(VALID_LOG_LEVELS))
            raise ValueError(f"Invalid log level '{value}'. Allowed: {allowed}")
        return level

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build config from environment variables."""
        tracking_uri = _env("MLFLOW_TRACKING_URI")
        return cls(
            youtube_api_key=_env("YOUTUBE_API_KEY"),
            cache_ttl_seconds=int(_env("YT_TOOLS_CACHE_TTL", "3600")),
            api_token=_env("YT_TOOLS_API_TOKEN"),
            ytdlp_path=_env("YT_DLP_PATH", "yt-dlp"),
            default_transcript_language=_env("YT_TOOLS_TRANSCRIPT_LANGUAGE", "en"),
            http_host=_env("YT_TOOLS_HOST", "127.0.0.1"),
            http_port=int(_env("YT_TOOLS_PORT", "8000")),
            log_level=_env("YT_TOOLS_LOG_LEVEL", "INFO"),
            tracing_enabled=_resolve_tracing_enabled(
                _env("YT_TOOLS_TRACING_ENABLED"),
                tracking_uri,
            ),
            mlflow_tracking_uri=tracking_uri,
            mlflow_experiment_name=_env("MLFLOW_EXPERIMENT_NAME", "youtube-tools-mcp"),
        )


# Singleton, initialised on first access.
_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/youtube-tools-mcp/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        from .dotenv import load_dotenv

        injected = load_dotenv()
        if injected:
            logging.getLogger(__name__).info(
                "Loaded %d var(s) from config: %s",
                len(injected),
                ", ".join(injected.keys()),
            )
        _config = ServerConfig.from_env()
    return _config


def configure_logging() -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=get_config().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
