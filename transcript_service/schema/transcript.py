"""Pydantic models for the transcript endpoint."""

from __future__ import annotations

from pydantic import BaseModel


class CaptionLineResponse(BaseModel):
    text: str
    start: float
    duration: float


class TranscriptResponse(BaseModel):
    """Caption track of one video in one language."""

    video_id: str
    language: str
    transcript: list[CaptionLineResponse]
