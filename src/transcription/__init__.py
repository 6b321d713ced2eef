# Transcription module - speech-to-text for team radio clips

from src.transcription.transcript import WhisperTranscriber, download_audio
from src.transcription.batch import (
    ClipTranscriptionResult,
    TranscriptionSummary,
    select_transcription_candidates,
    transcribe_clip,
    transcribe_clips,
)

__all__ = [
    "WhisperTranscriber",
    "download_audio",
    "ClipTranscriptionResult",
    "TranscriptionSummary",
    "select_transcription_candidates",
    "transcribe_clip",
    "transcribe_clips",
]
