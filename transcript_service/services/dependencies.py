"""FastAPI dependency providers that wire settings and upstream clients into the services."""

from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Depends, Request

from transcript_service.core.config import settings
from transcript_service.services.aggregator import PlaylistAggregator
from transcript_service.services.captions import CaptionFetcher
from transcript_service.services.playlist import PlaylistEnumerator
from transcript_service.services.youtube_client import CaptionSource, YouTubeCaptionSource, YouTubeDataClient


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared client created at application startup."""

    return request.app.state.http_client


@lru_cache
def get_caption_source() -> CaptionSource:
    return YouTubeCaptionSource()


def get_caption_fetcher(source: CaptionSource = Depends(get_caption_source)) -> CaptionFetcher:
    return CaptionFetcher(source)


def get_playlist_enumerator(client: httpx.AsyncClient = Depends(get_http_client)) -> PlaylistEnumerator:
    data_client = YouTubeDataClient(
        client,
        base_url=settings.youtube_api_base_url,
        timeout=settings.youtube_request_timeout,
    )
    return PlaylistEnumerator(data_client, api_key=settings.youtube_api_key)


def get_playlist_aggregator(
    enumerator: PlaylistEnumerator = Depends(get_playlist_enumerator),
    fetcher: CaptionFetcher = Depends(get_caption_fetcher),
) -> PlaylistAggregator:
    return PlaylistAggregator(enumerator, fetcher)
