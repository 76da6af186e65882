"""Runtime settings, read from the environment and an optional ``.env`` file."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from promptcut.instruct import DEFAULT_MODEL

DEFAULT_CORS_ORIGINS = ("http://localhost:5173",)


@dataclass
class Settings:
    upload_dir: Path = Path("uploads")
    output_dir: Path = Path("output")
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_MODEL
    openai_temperature: float = 0.7
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    max_upload_mb: int = 2048
    artifact_ttl_seconds: float = 3600.0
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


def _number(key: str, default, cast):
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {key}: {raw!r}") from None


def _origins(raw: str | None) -> list[str]:
    if raw is None:
        return list(DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load settings; variables already in the environment win over ``.env``."""
    load_dotenv(env_file or find_dotenv(usecwd=True))

    return Settings(
        upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
        output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
        openai_temperature=_number("OPENAI_TEMPERATURE", 0.7, float),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_number("PORT", 3000, int),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_upload_mb=_number("MAX_UPLOAD_MB", 2048, int),
        artifact_ttl_seconds=_number("ARTIFACT_TTL_SECONDS", 3600.0, float),
        cors_origins=_origins(os.getenv("CORS_ORIGINS")),
    )
