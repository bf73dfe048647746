"""Combine playlist enumeration with per-video caption fetches."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Iterable, TypeVar

from transcript_service.services.captions import DEFAULT_LANGUAGE, CaptionFetcher, Transcript
from transcript_service.services.playlist import PlaylistEnumerator, VideoSummary

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Outcome(Generic[R]):
    """Either the value a task produced or the exception it raised."""

    value: R | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def gather_outcomes(items: Iterable[T], func: Callable[[T], Awaitable[R]]) -> list[Outcome[R]]:
    """Run ``func`` over ``items`` concurrently, returning outcomes in input order.

    An ``Exception`` raised by one call becomes a failed outcome and never
    affects the others. Cancellation is not captured.
    """

    async def _run(item: T) -> Outcome[R]:
        try:
            return Outcome(value=await func(item))
        except Exception as exc:
            return Outcome(error=exc)

    return list(await asyncio.gather(*(_run(item) for item in items)))


@dataclass(slots=True)
class PlaylistVideoResult:
    video_id: str
    title: str
    thumbnail_url: str
    transcript: Transcript = field(default_factory=list)
    transcript_error: str | None = None


@dataclass(slots=True)
class PlaylistResult:
    playlist_id: str
    total: int
    videos: list[PlaylistVideoResult]


def _video_result(video: VideoSummary, outcome: Outcome[Transcript]) -> PlaylistVideoResult:
    result = PlaylistVideoResult(video_id=video.video_id, title=video.title, thumbnail_url=video.thumbnail_url)
    if outcome.ok:
        result.transcript = outcome.value or []
    else:
        result.transcript_error = str(outcome.error) or type(outcome.error).__name__
    return result


class PlaylistAggregator:
    """Fetch a playlist and the captions of every video it contains."""

    def __init__(self, enumerator: PlaylistEnumerator, fetcher: CaptionFetcher) -> None:
        self._enumerator = enumerator
        self._fetcher = fetcher

    async def aggregate_playlist(self, playlist_id: str, lang: str = DEFAULT_LANGUAGE) -> PlaylistResult:
        videos, total = await self._enumerator.list_videos(playlist_id)

        outcomes = await gather_outcomes(
            videos,
            lambda video: self._fetcher.fetch_captions(video.video_id, lang),
        )

        results = [_video_result(video, outcome) for video, outcome in zip(videos, outcomes)]
        for result in results:
            if result.transcript_error is not None:
                logger.warning(
                    "Transcript unavailable for playlist video: %s",
                    result.transcript_error,
                    extra={"video_id": result.video_id, "playlist_id": playlist_id},
                )

        return PlaylistResult(playlist_id=playlist_id, total=total, videos=results)


__all__ = [
    "Outcome",
    "PlaylistAggregator",
    "PlaylistResult",
    "PlaylistVideoResult",
    "gather_outcomes",
]
