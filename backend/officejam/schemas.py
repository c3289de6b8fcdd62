"""Wire and domain schemas shared by the engine, store and API layers"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

UNKNOWN_DURATION = "Unknown"


class QueueEntry(BaseModel):
    """One queued media reference with display metadata.

    Field names follow Python conventions; aliases are the names clients
    send and receive (``url``, ``videoId``).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    source_url: str = Field(alias="url")
    media_ref: str = Field(alias="videoId")
    title: str = ""
    duration: str = UNKNOWN_DURATION

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class HistoryRecord(BaseModel):
    """An entry that finished playing"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    source_url: str = Field(alias="url")
    media_ref: str = Field(alias="videoId")
    title: str = ""
    duration: str = UNKNOWN_DURATION
    played_at: datetime = Field(alias="playedAt")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class AddVideoPayload(BaseModel):
    """Inbound ``add_video`` data before the reference is validated"""

    model_config = ConfigDict(extra="ignore")

    id: Optional[StrictInt] = None
    url: Optional[str] = None
    videoId: Optional[str] = None
    title: Optional[str] = Field(default=None, max_length=500)
    duration: Optional[str] = Field(default=None, max_length=32)


class VideoMetadata(BaseModel):
    title: str
    duration: str = UNKNOWN_DURATION


class PlaylistVideo(BaseModel):
    videoId: str
    url: str
    title: str = ""


class PlaylistResponse(BaseModel):
    playlistId: str
    videos: List[PlaylistVideo]
