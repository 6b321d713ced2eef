"""HTTP routes triggering the sync and transcription jobs."""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.db import CatalogStore
from src.errors import DataSourceError, NoSessionsFound
from src.ingestion import sync_radio_messages
from src.openf1 import OpenF1Client
from src.transcription import WhisperTranscriber, transcribe_clips

from .dependencies import get_openf1_client, get_store, get_transcriber
from .schemas import SyncRadioRequest, TranscribeRequest


logger = logging.getLogger("api")

router = APIRouter(prefix="/api", tags=["pipeline"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


@router.post("/sync-radio")
def sync_radio(
    request: SyncRadioRequest,
    client: OpenF1Client = Depends(get_openf1_client),
    store: CatalogStore = Depends(get_store),
):
    """Sync OpenF1 radio messages for one session, one season, or everything."""
    try:
        summary = sync_radio_messages(
            client, store, session_key=request.session_key, year=request.year
        )
    except NoSessionsFound:
        return JSONResponse(
            status_code=404, content={"success": False, "message": "No sessions found"}
        )
    except DataSourceError as e:
        logger.error(f"Error syncing radio messages: {e}")
        return _error(502, str(e))
    except Exception as e:
        logger.error(f"Error syncing radio messages: {e}")
        return _error(500, str(e))

    return {
        "success": True,
        "message": (
            f"Successfully synced {summary.new_radio_messages} new radio messages "
            f"out of {summary.total_radio_messages} total"
        ),
        "sessions_processed": summary.sessions_processed,
        "total_radio_messages": summary.total_radio_messages,
        "new_radio_messages": summary.new_radio_messages,
    }


@router.get("/sync-radio")
def list_sessions(
    year: Optional[int] = None,
    client: OpenF1Client = Depends(get_openf1_client),
):
    """List the OpenF1 sessions available for syncing."""
    try:
        sessions = client.fetch_sessions(year=year)
    except DataSourceError as e:
        logger.error(f"Error fetching sessions: {e}")
        return _error(502, str(e))

    return {"success": True, "sessions": [asdict(session) for session in sessions]}


@router.post("/transcribe")
def transcribe(
    request: TranscribeRequest,
    store: CatalogStore = Depends(get_store),
    transcriber: WhisperTranscriber = Depends(get_transcriber),
):
    """
    Transcribe clips lacking a transcript, or one clip by id.

    Per-clip failures still answer 200 with the detail in "results".
    """
    try:
        summary = transcribe_clips(
            store, transcriber, clip_id=request.clip_id, limit=request.limit
        )
    except Exception as e:
        logger.error(f"Error in transcribe API: {e}")
        return _error(500, str(e))

    if summary.total == 0:
        return {
            "success": True,
            "message": "No clips found that need transcription",
            "processed": 0,
        }

    return {
        "success": True,
        "message": f"Transcribed {summary.successful}/{summary.total} clips",
        **summary.to_dict(),
    }
