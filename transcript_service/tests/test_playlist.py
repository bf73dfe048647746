"""Tests for playlist pagination and entry extraction."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from transcript_service.core.errors import (
    ConfigurationError,
    PlaylistNotFound,
    QuotaOrAuthError,
    UpstreamFailure,
)
from transcript_service.services.playlist import (
    PlaylistEnumerator,
    VideoSummary,
    video_summary_from_item,
)

pytest_plugins = ("pytest_asyncio",)


def _item(video_id: str, *, title: str | None = None, thumbnails: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "snippet": {"title": title or f"Video {video_id}", "thumbnails": thumbnails or {}},
        "contentDetails": {"videoId": video_id},
    }


class FakePageSource:
    """Serves pre-built pages keyed by the page token that requests them."""

    def __init__(self, pages: dict[str | None, dict[str, Any]] | None = None, error: Exception | None = None) -> None:
        self.pages = pages or {}
        self.error = error
        self.calls: list[tuple[str, str | None, str]] = []

    async def get_playlist_page(
        self,
        playlist_id: str,
        page_token: str | None = None,
        *,
        api_key: str,
    ) -> dict[str, Any]:
        self.calls.append((playlist_id, page_token, api_key))
        if self.error is not None:
            raise self.error
        return self.pages[page_token]


def _status_error(status: int, payload: dict[str, Any] | None = None) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://www.googleapis.com/youtube/v3/playlistItems")
    response = httpx.Response(status, json=payload or {}, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


@pytest.mark.asyncio
async def test_list_videos_follows_continuation_tokens_in_order():
    pages = {
        None: {
            "items": [_item(f"a{i}") for i in range(50)],
            "nextPageToken": "CDIQAA",
            "pageInfo": {"totalResults": 107, "resultsPerPage": 50},
        },
        "CDIQAA": {
            "items": [_item(f"b{i}") for i in range(50)],
            "nextPageToken": "CGQQAA",
            "pageInfo": {"totalResults": 107, "resultsPerPage": 50},
        },
        "CGQQAA": {
            "items": [_item(f"c{i}") for i in range(7)],
            "pageInfo": {"totalResults": 107, "resultsPerPage": 50},
        },
    }
    source = FakePageSource(pages)

    videos, total = await PlaylistEnumerator(source, api_key="key").list_videos("PL1")

    assert total == 107
    assert len(videos) == 107
    expected = [f"a{i}" for i in range(50)] + [f"b{i}" for i in range(50)] + [f"c{i}" for i in range(7)]
    assert [video.video_id for video in videos] == expected
    assert [call[1] for call in source.calls] == [None, "CDIQAA", "CGQQAA"]
    assert all(call[2] == "key" for call in source.calls)


@pytest.mark.asyncio
async def test_list_videos_skips_malformed_entries():
    missing_snippet = {"contentDetails": {"videoId": "x"}}
    missing_details = {"snippet": {"title": "Private video"}}
    missing_video_id = {"snippet": {"title": "Odd"}, "contentDetails": {}}
    pages = {
        None: {
            "items": [_item("v1"), missing_details, missing_snippet, missing_video_id, _item("v2")],
            "pageInfo": {"totalResults": 5},
        }
    }

    listing = await PlaylistEnumerator(FakePageSource(pages), api_key="key").list_videos("PL1")

    assert [video.video_id for video in listing.videos] == ["v1", "v2"]
    assert listing.total == 5


@pytest.mark.asyncio
async def test_total_comes_from_first_page_reporting_it():
    pages = {
        None: {"items": [_item("v1")], "nextPageToken": "next"},
        "next": {"items": [_item("v2")], "pageInfo": {"totalResults": 2}},
    }

    listing = await PlaylistEnumerator(FakePageSource(pages), api_key="key").list_videos("PL1")

    assert listing.total == 2


@pytest.mark.asyncio
async def test_empty_playlist_reports_zero_total():
    listing = await PlaylistEnumerator(FakePageSource({None: {}}), api_key="key").list_videos("PL1")

    assert listing.videos == []
    assert listing.total == 0


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_request():
    source = FakePageSource({None: {"items": []}})

    with pytest.raises(ConfigurationError, match="YOUTUBE_API_KEY"):
        await PlaylistEnumerator(source, api_key=None).list_videos("PL1")

    assert source.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "expected"),
    [(404, PlaylistNotFound), (403, QuotaOrAuthError), (500, UpstreamFailure), (400, UpstreamFailure)],
)
async def test_http_errors_are_classified(status: int, expected: type):
    source = FakePageSource(error=_status_error(status))

    with pytest.raises(expected):
        await PlaylistEnumerator(source, api_key="key").list_videos("PL1")


@pytest.mark.asyncio
async def test_upstream_failure_carries_api_message():
    source = FakePageSource(error=_status_error(500, {"error": {"code": 500, "message": "Backend Error"}}))

    with pytest.raises(UpstreamFailure) as info:
        await PlaylistEnumerator(source, api_key="key").list_videos("PL1")

    assert info.value.detail == "Backend Error"
    assert str(info.value) == "YouTube API error: Backend Error"


@pytest.mark.asyncio
async def test_transport_errors_become_upstream_failure():
    request = httpx.Request("GET", "https://www.googleapis.com/youtube/v3/playlistItems")
    source = FakePageSource(error=httpx.ConnectError("boom", request=request))

    with pytest.raises(UpstreamFailure, match="Failed to fetch playlist: boom"):
        await PlaylistEnumerator(source, api_key="key").list_videos("PL1")


def test_thumbnail_resolution_order():
    medium = {"medium": {"url": "https://img/m.jpg"}, "default": {"url": "https://img/d.jpg"}}
    default_only = {"default": {"url": "https://img/d.jpg"}}

    assert video_summary_from_item(_item("v1", thumbnails=medium)).thumbnail_url == "https://img/m.jpg"
    assert video_summary_from_item(_item("v1", thumbnails=default_only)).thumbnail_url == "https://img/d.jpg"
    assert video_summary_from_item(_item("v1")) == VideoSummary(
        video_id="v1",
        title="Video v1",
        thumbnail_url="https://i.ytimg.com/vi/v1/mqdefault.jpg",
    )
