"""Caption retrieval with language fallback detection and error classification."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from transcript_service.core.errors import (
    CaptionFetchError,
    CaptionsUnavailable,
    LanguageUnavailable,
    RateLimited,
    UpstreamFailure,
    VideoUnavailable,
)
from transcript_service.services.text_normalizer import normalize
from transcript_service.services.youtube_client import CaptionSource, RawCaption

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@dataclass(slots=True, frozen=True)
class CaptionLine:
    """One timed line of a caption track; times are in seconds."""

    text: str
    start: float
    duration: float


Transcript = list[CaptionLine]


@dataclass(slots=True, frozen=True)
class CaptionErrorRule:
    pattern: re.Pattern[str]
    error: type[CaptionFetchError]


def _rule(pattern: str, error: type[CaptionFetchError]) -> CaptionErrorRule:
    return CaptionErrorRule(re.compile(pattern, re.IGNORECASE), error)


# Upstream exception names and messages are not a stable contract, so this
# table is best effort. Rows are matched in order against
# "<ExceptionClassName>: <message>"; bump the version when rows change.
CLASSIFICATION_TABLE_VERSION = 1
CAPTION_ERROR_RULES: tuple[CaptionErrorRule, ...] = (
    _rule(r"\b(TooManyRequests|RequestBlocked|IpBlocked)\b", RateLimited),
    _rule(r"too many requests", RateLimited),
    _rule(r"\b(VideoUnavailable|VideoUnplayable|InvalidVideoId)\b", VideoUnavailable),
    _rule(r"video is (unavailable|no longer available)|does not exist", VideoUnavailable),
    _rule(r"\b(TranscriptsDisabled|NoTranscriptFound)\b", CaptionsUnavailable),
    _rule(r"(transcript|subtitles) (is|are) disabled|not available for this video", CaptionsUnavailable),
)


def classify_caption_error(exc: BaseException) -> CaptionFetchError:
    """Map an upstream caption failure onto the error taxonomy."""

    if isinstance(exc, CaptionFetchError):
        return exc

    description = f"{type(exc).__name__}: {exc}"
    for rule in CAPTION_ERROR_RULES:
        if rule.pattern.search(description):
            return rule.error()
    return UpstreamFailure(str(exc) or type(exc).__name__, context="Failed to fetch transcript")


class CaptionFetcher:
    """Fetch the caption track of a single video in one language."""

    def __init__(self, source: CaptionSource) -> None:
        self._source = source

    async def fetch_captions(self, video_id: str, lang: str = DEFAULT_LANGUAGE) -> Transcript:
        logger.debug("Fetching captions", extra={"video_id": video_id, "lang": lang})

        try:
            items = await self._source.get_captions(video_id, lang)
        except CaptionFetchError:
            raise
        except Exception as exc:
            error = classify_caption_error(exc)
            if isinstance(error, UpstreamFailure):
                logger.exception("Unexpected caption error", extra={"video_id": video_id})
            else:
                logger.info("Caption fetch failed: %s", error.kind, extra={"video_id": video_id})
            raise error from exc

        if not items:
            if await self._has_any_captions(video_id):
                raise LanguageUnavailable(lang)
            raise CaptionsUnavailable()

        return [_to_line(item) for item in items]

    async def _has_any_captions(self, video_id: str) -> bool:
        """List the tracks of any language to tell 'wrong language' from 'no captions'."""

        logger.info("No captions in requested language; listing other tracks", extra={"video_id": video_id})
        try:
            languages = await self._source.available_languages(video_id)
        except Exception as exc:
            logger.debug("Caption track listing failed: %s", exc, extra={"video_id": video_id})
            return False
        return bool(languages)


def _to_line(item: RawCaption) -> CaptionLine:
    return CaptionLine(
        text=normalize(item.text),
        start=item.offset_seconds,
        duration=item.duration_seconds,
    )


__all__ = [
    "CAPTION_ERROR_RULES",
    "CLASSIFICATION_TABLE_VERSION",
    "CaptionErrorRule",
    "CaptionFetcher",
    "CaptionLine",
    "DEFAULT_LANGUAGE",
    "Transcript",
    "classify_caption_error",
]
