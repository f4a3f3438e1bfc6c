from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Mapper settings loaded from ``DOCMAPPER_*`` environment variables."""

    # Document service
    api_base_url: str = "https://api.plexxer.com"
    api_key: str = ""
    api_token: str = ""
    api_version: str | None = None
    dev_mode: bool = False
    request_timeout: float = 30.0

    # Record types compiled at startup (YAML, optional)
    schema_file: str | None = None

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore
    log_level_transport: str = "INFO"        # HttpTransport
    log_level_orm: str = "INFO"              # SaveOrchestrator, RecordRepository

    model_config = {
        "env_prefix": "DOCMAPPER_",
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance; reads .env once."""
    return Settings()
