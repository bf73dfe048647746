"""API endpoint returning every video of a playlist with its transcript."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from transcript_service.core.config import settings
from transcript_service.core.errors import PlaylistFetchError
from transcript_service.routers.transcripts import map_transcript
from transcript_service.schema.playlist import PlaylistResponse, PlaylistVideoResponse
from transcript_service.services.aggregator import PlaylistAggregator
from transcript_service.services.dependencies import get_playlist_aggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/playlist", tags=["playlists"])


@router.get("/{playlist_id}", response_model=PlaylistResponse)
async def get_playlist(
    playlist_id: str,
    lang: str | None = Query(None, min_length=1, description="Caption language code, e.g. en, es, fr"),
    aggregator: PlaylistAggregator = Depends(get_playlist_aggregator),
) -> PlaylistResponse:
    playlist_id = playlist_id.strip()
    if not playlist_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Playlist ID is required")

    language = lang or settings.default_language
    logger.info("Fetching playlist %s with transcripts in language %s", playlist_id, language)

    try:
        result = await aggregator.aggregate_playlist(playlist_id, language)
    except PlaylistFetchError as exc:
        logger.warning("Playlist fetch failed for %s: %s", playlist_id, exc)
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    videos = [
        PlaylistVideoResponse(
            video_id=video.video_id,
            title=video.title,
            thumbnail_url=video.thumbnail_url,
            transcript=map_transcript(video.transcript),
            transcript_error=video.transcript_error,
        )
        for video in result.videos
    ]
    return PlaylistResponse(playlist_id=result.playlist_id, total=result.total, videos=videos)
