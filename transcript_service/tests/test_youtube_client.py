"""Tests for the upstream Data API client and caption source adapter."""

from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest
from youtube_transcript_api import NoTranscriptFound

from transcript_service.services.youtube_client import RawCaption, YouTubeCaptionSource, YouTubeDataClient

pytest_plugins = ("pytest_asyncio",)


@pytest.mark.asyncio
async def test_data_client_requests_largest_page():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"items": [], "nextPageToken": "abc"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        data_client = YouTubeDataClient(client, base_url="https://api.test/youtube/v3/")
        first = await data_client.get_playlist_page("PL1", api_key="secret")
        await data_client.get_playlist_page("PL1", "abc", api_key="secret")

    assert first == {"items": [], "nextPageToken": "abc"}
    assert seen[0].url.path == "/youtube/v3/playlistItems"
    params = seen[0].url.params
    assert params["part"] == "snippet,contentDetails"
    assert params["playlistId"] == "PL1"
    assert params["maxResults"] == "50"
    assert params["key"] == "secret"
    assert "pageToken" not in params
    assert seen[1].url.params["pageToken"] == "abc"


@pytest.mark.asyncio
async def test_data_client_raises_for_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"message": "playlistNotFound"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.HTTPStatusError) as info:
            await YouTubeDataClient(client).get_playlist_page("PL1", api_key="secret")

    assert info.value.response.status_code == 404


def _snippet(text: str, start: float, duration: float) -> SimpleNamespace:
    return SimpleNamespace(text=text, start=start, duration=duration)


class FakeTranscript:
    def __init__(self, language_code: str, is_generated: bool) -> None:
        self.language_code = language_code
        self.is_generated = is_generated
        self.fetched = False

    def fetch(self) -> list[SimpleNamespace]:
        self.fetched = True
        return [_snippet(f"{self.language_code} line", 0.0, 2.0)]


class FakeTranscriptApi:
    def __init__(self, tracks: list[FakeTranscript]) -> None:
        self.tracks = tracks

    def fetch(self, video_id: str, languages: list[str]) -> list[SimpleNamespace]:
        for track in self.tracks:
            if track.language_code in languages:
                return track.fetch()
        raise NoTranscriptFound(video_id, languages, None)

    def list(self, video_id: str) -> list[FakeTranscript]:
        return list(self.tracks)


@pytest.mark.asyncio
async def test_caption_source_fetches_requested_language():
    source = YouTubeCaptionSource(FakeTranscriptApi([FakeTranscript("fr", False)]))

    assert await source.get_captions("vid", "fr") == [RawCaption("fr line", 0.0, 2.0)]
    assert await source.get_captions("vid", "en") == []


@pytest.mark.asyncio
async def test_caption_source_prefers_manual_track_without_language():
    api = FakeTranscriptApi([FakeTranscript("de", True), FakeTranscript("es", False)])

    captions = await YouTubeCaptionSource(api).get_captions("vid")

    assert captions == [RawCaption("es line", 0.0, 2.0)]


@pytest.mark.asyncio
async def test_caption_source_reports_empty_when_no_tracks():
    assert await YouTubeCaptionSource(FakeTranscriptApi([])).get_captions("vid") == []


@pytest.mark.asyncio
async def test_available_languages_lists_tracks_without_downloading():
    tracks = [FakeTranscript("de", True), FakeTranscript("es", False)]

    languages = await YouTubeCaptionSource(FakeTranscriptApi(tracks)).available_languages("vid")

    assert languages == ["es", "de"]
    assert not any(track.fetched for track in tracks)
