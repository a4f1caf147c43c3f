import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()  # Load .env file if present

LOG_FORMAT = '[%(asctime)s] [%(name)s] %(levelname)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the web app and the CLI."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime settings resolved from the environment."""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"

    llm_provider: str = "auto"  # 'auto', 'gemini', 'ollama', 'openai'
    enable_openai: bool = False
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama3:8b"

    llm_timeout: int = 30
    llm_max_retries: int = 3

    max_upload_mb: int = 10
    output_folder: str = "output/web_output"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def get_settings() -> Settings:
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        llm_provider=os.getenv("LLM_PROVIDER", "auto").lower(),
        enable_openai=_env_bool("ENABLE_OPENAI"),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        ollama_url=os.getenv("OLLAMA_URL", "http://localhost:11434"),
        ollama_model=os.getenv("OLLAMA_MODEL", "llama3:8b"),
        llm_timeout=_env_int("LLM_TIMEOUT", 30),
        llm_max_retries=_env_int("LLM_MAX_RETRIES", 3),
        max_upload_mb=_env_int("MAX_UPLOAD_MB", 10),
        output_folder=os.getenv("OUTPUT_FOLDER", "output/web_output"),
    )


def load_json(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)

