"""FastAPI app entry point."""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from transcript_service.core.config import settings
from transcript_service.routers import playlists, transcripts

USER_AGENT = "yt-transcript-service/0.1"


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    """Build FastAPI application."""

    app = FastAPI(title="YouTube Transcript API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(transcripts.router)
    app.include_router(playlists.router)

    @app.on_event("startup")
    async def _startup() -> None:
        configure_logging()
        app.state.http_client = httpx.AsyncClient(headers={"User-Agent": USER_AGENT})

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        client = getattr(app.state, "http_client", None)
        if client is not None:
            await client.aclose()

    @app.get("/", tags=["health"])
    async def index() -> dict[str, object]:
        return {
            "message": "YouTube Transcription API",
            "docs": {
                "transcript": "GET /api/transcript/{video_id}?lang=en",
                "playlist": "GET /api/playlist/{playlist_id}?lang=en",
            },
            "status": "running",
        }

    @app.get("/healthz", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
