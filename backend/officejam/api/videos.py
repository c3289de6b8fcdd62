"""Video and playlist metadata endpoints"""
from fastapi import APIRouter, Depends, HTTPException

from officejam.api.deps import get_resolver
from officejam.errors import MetadataError, NotFoundError, ValidationError
from officejam.schemas import PlaylistResponse, VideoMetadata
from officejam.services.metadata_resolver import MetadataResolver

router = APIRouter(prefix="/api", tags=["videos"])


@router.get("/video/{video_id}", response_model=VideoMetadata)
def get_video(video_id: str, resolver: MetadataResolver = Depends(get_resolver)):
    """Title and duration for a video id"""
    try:
        return resolver.resolve_video(video_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except MetadataError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.get("/playlist/{playlist_id}", response_model=PlaylistResponse)
def get_playlist(playlist_id: str, resolver: MetadataResolver = Depends(get_resolver)):
    """Videos of a playlist, ready to be sent back as add_video commands"""
    if not resolver.api_key:
        raise HTTPException(status_code=503, detail="Playlist lookups are not configured (no YouTube API key)")
    try:
        videos = resolver.resolve_playlist(playlist_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except MetadataError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return {"playlistId": playlist_id, "videos": videos}
