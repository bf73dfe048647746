"""API endpoint returning the transcript of a single video."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from transcript_service.core.config import settings
from transcript_service.core.errors import CaptionFetchError
from transcript_service.schema.transcript import CaptionLineResponse, TranscriptResponse
from transcript_service.services.captions import CaptionFetcher, Transcript
from transcript_service.services.dependencies import get_caption_fetcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transcript", tags=["transcripts"])


def map_transcript(transcript: Transcript) -> list[CaptionLineResponse]:
    return [CaptionLineResponse(text=line.text, start=line.start, duration=line.duration) for line in transcript]


@router.get("/{video_id}", response_model=TranscriptResponse)
async def get_transcript(
    video_id: str,
    lang: str | None = Query(None, min_length=1, description="Caption language code, e.g. en, es, fr"),
    fetcher: CaptionFetcher = Depends(get_caption_fetcher),
) -> TranscriptResponse:
    video_id = video_id.strip()
    if not video_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Video ID is required")

    language = lang or settings.default_language
    logger.info("Fetching transcript for video %s, language %s", video_id, language)

    try:
        transcript = await fetcher.fetch_captions(video_id, language)
    except CaptionFetchError as exc:
        logger.warning("Transcript fetch failed for %s: %s", video_id, exc)
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    return TranscriptResponse(video_id=video_id, language=language, transcript=map_transcript(transcript))
