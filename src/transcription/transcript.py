#!/usr/bin/env python3
"""
Core transcription functionality using OpenAI Whisper.

A clip is transcribed by downloading its recording to a temporary file,
sending the file to the speech-to-text model and deleting the file whatever
the outcome, so repeated runs never accumulate audio on disk.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import requests
from openai import OpenAI, OpenAIError

from src.errors import AudioDownloadError, TranscriptionServiceError
from src.logger import log_function


logger = logging.getLogger("transcription")

DOWNLOAD_CHUNK_SIZE = 8192


@log_function(logger_name="transcription", log_args=True, log_execution_time=True)
def download_audio(
    url: str,
    dest_dir: Path,
    http: Optional[requests.Session] = None,
    timeout: float = 60.0,
) -> Path:
    """
    Download an audio file into a new temporary file inside dest_dir.

    Args:
        url: Recording URL
        dest_dir: Directory for the temporary file (created if missing)
        http: Optional requests session
        timeout: Request timeout in seconds

    Returns:
        Path of the downloaded file. The caller owns (and must delete) it.

    Raises:
        AudioDownloadError: On network/HTTP errors or an empty payload
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix="audio-", suffix=".mp3", dir=dest_dir)
    filepath = Path(tmp_name)

    try:
        getter = http.get if http is not None else requests.get
        downloaded = 0
        with os.fdopen(fd, "wb") as f:
            response = getter(url, stream=True, timeout=timeout)
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
                    downloaded += len(chunk)

        if downloaded == 0:
            raise AudioDownloadError("Downloaded audio file is empty")

        logger.info(f"Audio downloaded: {downloaded:,} bytes from {url}")
        return filepath

    except requests.RequestException as e:
        filepath.unlink(missing_ok=True)
        raise AudioDownloadError(f"Failed to download audio: {e}") from e
    except Exception:
        filepath.unlink(missing_ok=True)
        raise


class WhisperTranscriber:
    """
    Transcribes remote audio with the OpenAI audio transcription endpoint.

    Args:
        client: OpenAI client
        model: Speech-to-text model name
        temp_dir: Directory for transient audio downloads
        language: Language hint (team radio is in English)
        http: Optional requests session used for downloads
    """

    def __init__(
        self,
        client: OpenAI,
        model: str = "whisper-1",
        temp_dir: str | Path = "temp",
        language: str = "en",
        http: Optional[requests.Session] = None,
    ):
        self.client = client
        self.model = model
        self.temp_dir = Path(temp_dir)
        self.language = language
        self.http = http

    def transcribe_file(self, file_path: Path) -> str:
        """
        Send a local audio file to the model and return the plain-text transcript.

        Raises:
            TranscriptionServiceError: If the model call fails
        """
        try:
            with open(file_path, "rb") as audio_file:
                transcription = self.client.audio.transcriptions.create(
                    model=self.model,
                    file=audio_file,
                    language=self.language,
                    response_format="text",
                )
        except OpenAIError as e:
            raise TranscriptionServiceError(f"Transcription failed: {e}") from e

        # response_format="text" returns a plain string
        text = transcription if isinstance(transcription, str) else transcription.text
        return text.strip()

    def transcribe(self, audio_url: str) -> str:
        """Download, transcribe and always delete the temporary audio file."""
        file_path = download_audio(audio_url, self.temp_dir, http=self.http)
        try:
            return self.transcribe_file(file_path)
        finally:
            file_path.unlink(missing_ok=True)
