"""YouTube reference grammar: validate URLs and extract stable identifiers"""
import re
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from officejam.errors import ValidationError

VIDEO_HOSTS = {"youtube.com", "www.youtube.com", "m.youtube.com", "music.youtube.com", "youtu.be"}

# Video ids are always 11 characters of the URL-safe base64 alphabet
VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
PLAYLIST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{6,64}$")

# Path prefixes that carry the video id as their next segment
_PATH_PREFIXES = ("embed", "shorts", "v", "live")


def _split(url: str):
    url = url.strip()
    if "://" not in url:
        url = f"https://{url}"
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if parts.scheme not in ("http", "https"):
        return None
    return parts


def is_valid_video_id(ref: str) -> bool:
    return bool(ref) and VIDEO_ID_PATTERN.match(ref) is not None


def is_valid_playlist_id(ref: str) -> bool:
    return bool(ref) and PLAYLIST_ID_PATTERN.match(ref) is not None


def extract_video_id(url: str) -> Optional[str]:
    """
    Extract the video id from any supported YouTube URL form
    
    Accepts ``watch?v=``, ``youtu.be/<id>``, ``/embed/<id>``, ``/shorts/<id>``,
    ``/v/<id>`` and ``/live/<id>``, with or without a scheme.
    
    Args:
        url: URL submitted by a client
        
    Returns:
        The 11-character video id, or None if the URL is not a video URL
    """
    if not url or not isinstance(url, str):
        return None
    parts = _split(url)
    if parts is None:
        return None

    host = (parts.hostname or "").lower()
    if host not in VIDEO_HOSTS:
        return None

    segments = [s for s in parts.path.split("/") if s]
    candidate = None
    if host == "youtu.be":
        candidate = segments[0] if segments else None
    elif parts.path == "/watch":
        values = parse_qs(parts.query).get("v")
        candidate = values[0] if values else None
    elif len(segments) >= 2 and segments[0] in _PATH_PREFIXES:
        candidate = segments[1]

    if candidate and is_valid_video_id(candidate):
        return candidate
    return None


def is_valid_video_url(url: str) -> bool:
    return extract_video_id(url) is not None


def require_video_id(url: str) -> str:
    """Like extract_video_id but raises ValidationError on a bad reference."""
    video_id = extract_video_id(url)
    if video_id is None:
        raise ValidationError(f"Invalid YouTube URL: {url!r}")
    return video_id


def canonical_video_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
