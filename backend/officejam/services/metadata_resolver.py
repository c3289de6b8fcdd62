"""Metadata resolver: display title/duration lookups against YouTube"""
import re
from typing import List, Optional
import logging

import requests

from officejam.config import settings
from officejam.errors import MetadataError, NotFoundError, ValidationError
from officejam.schemas import PlaylistVideo, VideoMetadata, UNKNOWN_DURATION
from officejam.utils.media_ref import canonical_video_url, is_valid_playlist_id, is_valid_video_id

logger = logging.getLogger(__name__)

API_BASE = "https://www.googleapis.com/youtube/v3"
OEMBED_URL = "https://www.youtube.com/oembed"

_ISO_DURATION = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def format_duration(iso_duration: str) -> str:
    """
    Format an ISO-8601 duration for display

    Examples: ``PT4M13S`` -> ``4:13``, ``PT1H2M3S`` -> ``1:02:03``.
    Live streams (``P0D``) and unparseable values give ``Unknown``.
    """
    match = _ISO_DURATION.match(iso_duration or "")
    if not match:
        return UNKNOWN_DURATION
    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    hours = parts["days"] * 24 + parts["hours"]
    minutes, seconds = parts["minutes"], parts["seconds"]
    if hours == 0 and minutes == 0 and seconds == 0:
        return UNKNOWN_DURATION
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


class MetadataResolver:
    """Looks up videos and playlists; used by the HTTP layer only"""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize metadata resolver

        Args:
            api_key: YouTube Data API key (defaults to settings; empty means oEmbed only)
            timeout: Per-request timeout in seconds
            session: requests session to reuse
        """
        self.api_key = settings.youtube_api_key if api_key is None else api_key
        self.timeout = timeout or settings.metadata_timeout_seconds
        self.session = session or requests.Session()

    def _get(self, url: str, params: dict) -> dict:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Metadata request to {url} failed: {e}")
            raise MetadataError(f"Metadata lookup failed: {e}") from e
        if response.status_code == 404:
            raise NotFoundError("Not found on YouTube")
        if response.status_code >= 400:
            logger.error(f"Metadata request to {url} returned HTTP {response.status_code}")
            raise MetadataError(f"Metadata lookup returned HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise MetadataError("Metadata lookup returned invalid JSON") from e

    def resolve_video(self, video_id: str) -> VideoMetadata:
        """
        Resolve a video id into title and duration

        Raises:
            ValidationError: malformed id
            NotFoundError: no such video
            MetadataError: lookup failed
        """
        if not is_valid_video_id(video_id):
            raise ValidationError(f"Invalid video ID: {video_id}")

        if not self.api_key:
            data = self._get(OEMBED_URL, {"url": canonical_video_url(video_id), "format": "json"})
            return VideoMetadata(title=data.get("title") or f"Video ({video_id})")

        data = self._get(f"{API_BASE}/videos", {
            "part": "snippet,contentDetails",
            "id": video_id,
            "key": self.api_key,
        })
        items = data.get("items") or []
        if not items:
            raise NotFoundError(f"Video {video_id} not found")
        item = items[0]
        return VideoMetadata(
            title=item.get("snippet", {}).get("title") or f"Video ({video_id})",
            duration=format_duration(item.get("contentDetails", {}).get("duration", "")),
        )

    def resolve_playlist(self, playlist_id: str, max_items: Optional[int] = None) -> List[PlaylistVideo]:
        """
        List the videos of a playlist, following pagination up to ``max_items``

        Raises:
            ValidationError: malformed id
            MetadataError: no API key configured, or lookup failed
        """
        if not is_valid_playlist_id(playlist_id):
            raise ValidationError(f"Invalid playlist ID: {playlist_id}")
        if not self.api_key:
            raise MetadataError("Playlist lookups need a YouTube API key")

        limit = max_items or settings.playlist_max_items
        videos: List[PlaylistVideo] = []
        page_token = None
        while len(videos) < limit:
            params = {
                "part": "snippet",
                "playlistId": playlist_id,
                "maxResults": 50,
                "key": self.api_key,
            }
            if page_token:
                params["pageToken"] = page_token
            data = self._get(f"{API_BASE}/playlistItems", params)
            for item in data.get("items") or []:
                snippet = item.get("snippet", {})
                video_id = snippet.get("resourceId", {}).get("videoId")
                # Deleted and private videos keep their slot but lose a usable id
                if not video_id or not is_valid_video_id(video_id):
                    continue
                videos.append(PlaylistVideo(
                    videoId=video_id,
                    url=canonical_video_url(video_id),
                    title=snippet.get("title", ""),
                ))
                if len(videos) >= limit:
                    break
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"Resolved playlist {playlist_id} to {len(videos)} videos")
        return videos
