"""Validation of inbound client frames into typed queue commands"""
from dataclasses import dataclass
from typing import Any, List, Optional, Union
import json

from pydantic import StrictInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from officejam.errors import ValidationError
from officejam.schemas import AddVideoPayload
from officejam.utils.media_ref import canonical_video_url, is_valid_video_id, require_video_id

# Client -> server event names
ADD_VIDEO = "add_video"
DELETE_VIDEO = "delete_video"
DELETE_MULTIPLE_VIDEOS = "delete_multiple_videos"
VIDEO_FINISHED = "video_finished"
PLAY_NEXT = "play_next"

_entry_id = TypeAdapter(StrictInt)
_entry_ids = TypeAdapter(List[StrictInt])


@dataclass(frozen=True)
class AddVideo:
    entry_id: Optional[int]
    url: str
    media_ref: str
    title: Optional[str]
    duration: Optional[str]


@dataclass(frozen=True)
class DeleteVideo:
    entry_id: int


@dataclass(frozen=True)
class DeleteVideos:
    entry_ids: List[int]


@dataclass(frozen=True)
class Advance:
    reason: str


Command = Union[AddVideo, DeleteVideo, DeleteVideos, Advance]


def _parse_add(data: Any) -> AddVideo:
    try:
        payload = AddVideoPayload.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "data"
        raise ValidationError(f"Invalid video data ({field}): {first['msg']}") from e

    if payload.url:
        media_ref = require_video_id(payload.url)
        url = payload.url.strip()
    elif payload.videoId and is_valid_video_id(payload.videoId):
        media_ref = payload.videoId
        url = canonical_video_url(media_ref)
    else:
        raise ValidationError("Video data needs a YouTube URL")

    return AddVideo(
        entry_id=payload.id,
        url=url,
        media_ref=media_ref,
        title=payload.title,
        duration=payload.duration,
    )


def _parse_id(data: Any) -> int:
    try:
        return _entry_id.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid video ID: {data!r}") from e


def _parse_ids(data: Any) -> List[int]:
    try:
        return _entry_ids.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid video IDs: {data!r}") from e


def parse_command(raw: str) -> Command:
    """
    Parse one inbound WebSocket frame

    Frames are JSON objects ``{"type": <event>, "data": <payload>}``.

    Args:
        raw: Frame text

    Returns:
        Typed command

    Raises:
        ValidationError: for anything malformed
    """
    try:
        message = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ValidationError("Malformed message: not JSON") from e
    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        raise ValidationError("Malformed message: expected an object with a 'type'")

    kind = message["type"]
    data = message.get("data")
    if kind == ADD_VIDEO:
        return _parse_add(data)
    if kind == DELETE_VIDEO:
        return DeleteVideo(_parse_id(data))
    if kind == DELETE_MULTIPLE_VIDEOS:
        return DeleteVideos(_parse_ids(data))
    if kind == VIDEO_FINISHED:
        return Advance("finished")
    if kind == PLAY_NEXT:
        return Advance("play_next")
    raise ValidationError(f"Unknown command: {kind}")
