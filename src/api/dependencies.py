"""
FastAPI dependencies.

Clients are built once per process on first use and shared by every request.
Tests replace them through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import HTTPException

from src.config import Settings, load_settings
from src.db import CatalogStore, create_store
from src.errors import ConfigurationError
from src.llm import init_llm_openai
from src.openf1 import OpenF1Client
from src.transcription import WhisperTranscriber


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def _store(database_url: str) -> CatalogStore:
    return create_store(database_url)


def get_store() -> CatalogStore:
    try:
        return _store(get_settings().database_url)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_openf1_client() -> OpenF1Client:
    settings = get_settings()
    return OpenF1Client(settings.openf1_base_url, timeout=settings.openf1_timeout)


@lru_cache
def _transcriber(api_key: str, model: str, temp_dir: str) -> WhisperTranscriber:
    return WhisperTranscriber(init_llm_openai(api_key), model=model, temp_dir=temp_dir)


def get_transcriber() -> WhisperTranscriber:
    settings = get_settings()
    try:
        settings.require("openai_api_key")
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _transcriber(
        settings.openai_api_key, settings.transcription_model, settings.audio_temp_dir
    )
