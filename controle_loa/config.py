from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

# Project root (one level above the package)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Database: a single key/value table holds the persisted dataset
    DATABASE_URL: str = f"sqlite:///{_PROJECT_ROOT / 'controle_loa.db'}"

    # App
    APP_NAME: str = "Controle LOA 2026"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = "/api"
    ANO_FISCAL: int = 2026

    # Storage key of the persisted fichas array
    STORAGE_KEY: str = "controle_loa_2026_data_v2"

    # CORS, overridable with the CORS_ORIGINS env var as a JSON array
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # LLM extraction
    OPENAI_API_KEY: str | None = None
    EXTRACTION_MODEL: str = "gpt-4.1"
    MAX_UPLOAD_MB: int = 25

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
