"""Pydantic models for the playlist endpoint."""

from __future__ import annotations

from pydantic import BaseModel

from transcript_service.schema.transcript import CaptionLineResponse


class PlaylistVideoResponse(BaseModel):
    video_id: str
    title: str
    thumbnail_url: str
    transcript: list[CaptionLineResponse]
    transcript_error: str | None = None


class PlaylistResponse(BaseModel):
    """Every video of a playlist together with its transcript or failure reason."""

    playlist_id: str
    total: int
    videos: list[PlaylistVideoResponse]
