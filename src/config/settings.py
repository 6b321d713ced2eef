"""
Configuration settings for the radio catalog jobs.

Values come from the process environment, after loading `.env` and then
`.env.local` (the latter wins). Each CLI builds one Settings instance at
start-up and passes the clients derived from it into the pipelines.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from src.errors import ConfigurationError


DEFAULT_DATABASE_URL = "sqlite:///data/radio.db"
DEFAULT_OPENF1_BASE_URL = "https://api.openf1.org/v1"

# Human readable names used in error messages
ENV_NAMES = {
    "database_url": "DATABASE_URL",
    "openai_api_key": "OPENAI_API_KEY",
    "openf1_base_url": "OPENF1_BASE_URL",
}


@dataclass
class Settings:
    """Settings shared by the sync, transcription and tagging jobs"""

    # Storage
    database_url: str = DEFAULT_DATABASE_URL

    # OpenF1 data source
    openf1_base_url: str = DEFAULT_OPENF1_BASE_URL
    openf1_timeout: float = 30.0

    # OpenAI models
    openai_api_key: Optional[str] = None
    transcription_model: str = "whisper-1"
    classification_model: str = "gpt-4o-mini"

    # Local paths
    audio_temp_dir: str = "temp"
    log_dir: str = "logs"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        timeout = os.getenv("OPENF1_TIMEOUT")
        try:
            openf1_timeout = float(timeout) if timeout else 30.0
        except ValueError:
            raise ConfigurationError(f"OPENF1_TIMEOUT must be a number, got: {timeout}")

        return cls(
            database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
            openf1_base_url=os.getenv("OPENF1_BASE_URL") or DEFAULT_OPENF1_BASE_URL,
            openf1_timeout=openf1_timeout,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            transcription_model=os.getenv("TRANSCRIPTION_MODEL") or "whisper-1",
            classification_model=os.getenv("CLASSIFICATION_MODEL") or "gpt-4o-mini",
            audio_temp_dir=os.getenv("AUDIO_TEMP_DIR") or "temp",
            log_dir=os.getenv("LOG_DIR") or "logs",
        )

    def require(self, *fields: str) -> None:
        """
        Fail fast when a setting needed by the current job is missing.

        Args:
            fields: Attribute names that must be non-empty

        Raises:
            ConfigurationError: If any of the fields is empty
        """
        missing = [
            ENV_NAMES.get(field, field.upper())
            for field in fields
            if not getattr(self, field, None)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )


def load_settings() -> Settings:
    """Load `.env` files into the environment and return Settings."""
    load_dotenv()
    load_dotenv(".env.local", override=True)
    return Settings.from_env()
