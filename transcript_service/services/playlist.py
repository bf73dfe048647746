"""Enumerate every video of a playlist through the paginated Data API listing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, NamedTuple

import httpx

from transcript_service.core.errors import (
    ConfigurationError,
    PlaylistNotFound,
    QuotaOrAuthError,
    UpstreamFailure,
)
from transcript_service.services.youtube_client import PlaylistPageSource

logger = logging.getLogger(__name__)

FALLBACK_THUMBNAIL_URL = "https://i.ytimg.com/vi/{video_id}/mqdefault.jpg"


@dataclass(slots=True, frozen=True)
class VideoSummary:
    video_id: str
    title: str
    thumbnail_url: str


class PlaylistListing(NamedTuple):
    videos: list[VideoSummary]
    total: int


def _thumbnail(thumbnails: dict[str, Any], quality: str) -> str | None:
    entry = thumbnails.get(quality)
    if isinstance(entry, dict):
        return entry.get("url") or None
    return None


def video_summary_from_item(item: dict[str, Any]) -> VideoSummary | None:
    """Build a summary from one ``playlistItems`` entry.

    Entries without both ``contentDetails.videoId`` and ``snippet`` (private or
    deleted videos show up like this) yield ``None``.
    """

    details = item.get("contentDetails")
    snippet = item.get("snippet")
    if not isinstance(details, dict) or not isinstance(snippet, dict):
        return None

    video_id = details.get("videoId")
    if not video_id:
        return None

    thumbnails = snippet.get("thumbnails") or {}
    thumbnail_url = (
        _thumbnail(thumbnails, "medium")
        or _thumbnail(thumbnails, "default")
        or FALLBACK_THUMBNAIL_URL.format(video_id=video_id)
    )
    return VideoSummary(video_id=video_id, title=snippet.get("title") or "", thumbnail_url=thumbnail_url)


def _reported_total(page: dict[str, Any]) -> int | None:
    page_info = page.get("pageInfo") or {}
    value = page_info.get("totalResults", page.get("totalResults"))
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _api_error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"HTTP {response.status_code}"


class PlaylistEnumerator:
    """Collect the full, ordered membership of a playlist."""

    def __init__(self, source: PlaylistPageSource, *, api_key: str | None) -> None:
        self._source = source
        self._api_key = api_key

    async def list_videos(self, playlist_id: str) -> PlaylistListing:
        if not self._api_key:
            raise ConfigurationError("YOUTUBE_API_KEY is not set; configure APP_YOUTUBE_API_KEY")

        videos: list[VideoSummary] = []
        total: int | None = None
        page_token: str | None = None
        page_number = 0

        while True:
            page = await self._fetch_page(playlist_id, page_token)
            page_number += 1

            if total is None:
                total = _reported_total(page)

            items = page.get("items") or []
            for item in items:
                summary = video_summary_from_item(item) if isinstance(item, dict) else None
                if summary is None:
                    logger.debug("Skipping malformed playlist entry", extra={"playlist_id": playlist_id})
                    continue
                videos.append(summary)

            logger.debug(
                "Fetched playlist page %s (%s items)",
                page_number,
                len(items),
                extra={"playlist_id": playlist_id},
            )

            page_token = page.get("nextPageToken")
            if not page_token:
                break

        logger.info(
            "Enumerated playlist %s: %s videos (reported total %s)",
            playlist_id,
            len(videos),
            total,
        )
        return PlaylistListing(videos=videos, total=total or 0)

    async def _fetch_page(self, playlist_id: str, page_token: str | None) -> dict[str, Any]:
        try:
            page = await self._source.get_playlist_page(playlist_id, page_token, api_key=self._api_key)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 404:
                raise PlaylistNotFound() from exc
            if status == 403:
                raise QuotaOrAuthError() from exc
            raise UpstreamFailure(_api_error_message(exc.response), context="YouTube API error") from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailure(str(exc) or type(exc).__name__, context="Failed to fetch playlist") from exc
        except ValueError as exc:
            raise UpstreamFailure(str(exc), context="Invalid response from YouTube Data API") from exc

        if not isinstance(page, dict):
            raise UpstreamFailure("unexpected payload type", context="Invalid response from YouTube Data API")
        return page


__all__ = [
    "FALLBACK_THUMBNAIL_URL",
    "PlaylistEnumerator",
    "PlaylistListing",
    "VideoSummary",
    "video_summary_from_item",
]
