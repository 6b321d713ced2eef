"""Request bodies of the HTTP API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SyncRadioRequest(BaseModel):
    """Body of POST /api/sync-radio. session_key wins over year."""

    session_key: Optional[int] = None
    year: Optional[int] = None


class TranscribeRequest(BaseModel):
    """Body of POST /api/transcribe."""

    model_config = ConfigDict(populate_by_name=True)

    clip_id: Optional[str] = Field(default=None, alias="clipId")
    limit: int = Field(default=10, gt=0)
