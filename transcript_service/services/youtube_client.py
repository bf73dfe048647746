"""Upstream clients for the YouTube Data API and the caption extraction library."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from youtube_transcript_api import (  # type: ignore[import-not-found]
    NoTranscriptFound,
    YouTubeTranscriptApi,
)

logger = logging.getLogger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
PLAYLIST_PAGE_SIZE = 50  # maximum accepted by playlistItems.list


@dataclass(slots=True, frozen=True)
class RawCaption:
    """A caption item exactly as the extraction library reported it."""

    text: str
    offset_seconds: float
    duration_seconds: float


class CaptionSource(Protocol):
    async def get_captions(self, video_id: str, lang: str | None = None) -> list[RawCaption]:
        """Return the caption items for ``video_id``; ``lang=None`` means any language."""

    async def available_languages(self, video_id: str) -> list[str]:
        """Return the language codes of every caption track, without downloading any."""


class PlaylistPageSource(Protocol):
    async def get_playlist_page(
        self,
        playlist_id: str,
        page_token: str | None = None,
        *,
        api_key: str,
    ) -> dict[str, Any]:
        """Return one raw ``playlistItems`` page."""


class YouTubeCaptionSource:
    """Caption source backed by ``youtube_transcript_api``.

    The library performs blocking HTTP calls, so each request is pushed to the
    event loop's default executor.
    """

    def __init__(self, api: YouTubeTranscriptApi | None = None) -> None:
        self._api = api or YouTubeTranscriptApi()

    async def get_captions(self, video_id: str, lang: str | None = None) -> list[RawCaption]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._blocking_fetch, video_id, lang)

    async def available_languages(self, video_id: str) -> list[str]:
        loop = asyncio.get_running_loop()
        tracks = await loop.run_in_executor(None, self._sorted_tracks, video_id)
        return [track.language_code for track in tracks]

    def _sorted_tracks(self, video_id: str) -> list[Any]:
        # Manually authored tracks first.
        return sorted(self._api.list(video_id), key=lambda transcript: transcript.is_generated)

    def _blocking_fetch(self, video_id: str, lang: str | None) -> list[RawCaption]:
        if lang is None:
            transcripts = self._sorted_tracks(video_id)
            if not transcripts:
                return []
            fetched = transcripts[0].fetch()
        else:
            try:
                fetched = self._api.fetch(video_id, languages=[lang])
            except NoTranscriptFound:
                logger.debug("No %s track for %s", lang, video_id)
                return []

        return [
            RawCaption(text=snippet.text, offset_seconds=snippet.start, duration_seconds=snippet.duration)
            for snippet in fetched
        ]


class YouTubeDataClient:
    """Minimal YouTube Data API v3 client for paging through playlist items."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str = YOUTUBE_API_BASE,
        timeout: float = 15.0,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def get_playlist_page(
        self,
        playlist_id: str,
        page_token: str | None = None,
        *,
        api_key: str,
    ) -> dict[str, Any]:
        params = {
            "part": "snippet,contentDetails",
            "playlistId": playlist_id,
            "maxResults": PLAYLIST_PAGE_SIZE,
            "key": api_key,
        }
        if page_token:
            params["pageToken"] = page_token

        response = await self._client.get(
            f"{self._base_url}/playlistItems",
            params=params,
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()


__all__ = [
    "CaptionSource",
    "PLAYLIST_PAGE_SIZE",
    "PlaylistPageSource",
    "RawCaption",
    "YouTubeCaptionSource",
    "YouTubeDataClient",
]
