"""Error taxonomy shared by the caption, playlist and aggregation services."""

from __future__ import annotations


class TranscriptServiceError(RuntimeError):
    """Base class for every classified failure raised by the services."""

    kind = "error"
    status_code = 500


class CaptionFetchError(TranscriptServiceError):
    """Raised when the caption track of a single video cannot be retrieved."""


class PlaylistFetchError(TranscriptServiceError):
    """Raised when a playlist cannot be enumerated."""


class CaptionsUnavailable(CaptionFetchError):
    """The video has no captions at all, or they are disabled."""

    kind = "captions_unavailable"
    status_code = 404

    def __init__(self, message: str = "Transcript is not available for this video") -> None:
        super().__init__(message)


class LanguageUnavailable(CaptionFetchError):
    """Captions exist for the video, but not in the requested language."""

    kind = "language_unavailable"
    status_code = 404

    def __init__(self, lang: str) -> None:
        self.lang = lang
        super().__init__(
            f"Transcript not available in language '{lang}'. The video has transcripts in other languages."
        )


class VideoUnavailable(CaptionFetchError):
    kind = "video_unavailable"
    status_code = 404

    def __init__(self, message: str = "Video is unavailable or does not exist") -> None:
        super().__init__(message)


class RateLimited(CaptionFetchError):
    kind = "rate_limited"
    status_code = 429

    def __init__(self, message: str = "Too many requests. Please try again later") -> None:
        super().__init__(message)


class PlaylistNotFound(PlaylistFetchError):
    kind = "playlist_not_found"
    status_code = 404

    def __init__(self, message: str = "Playlist not found") -> None:
        super().__init__(message)


class QuotaOrAuthError(PlaylistFetchError):
    kind = "quota_or_auth"
    status_code = 403

    def __init__(self, message: str = "API key is invalid or quota exceeded") -> None:
        super().__init__(message)


class ConfigurationError(PlaylistFetchError):
    """Raised before any upstream request when required settings are missing."""

    kind = "configuration"
    status_code = 500


class UpstreamFailure(CaptionFetchError, PlaylistFetchError):
    """Any upstream failure that does not fit a more specific kind.

    ``detail`` keeps the raw upstream description for diagnostics.
    """

    kind = "upstream_failure"
    status_code = 502

    def __init__(self, detail: str, *, context: str = "Upstream request failed") -> None:
        self.detail = detail
        super().__init__(f"{context}: {detail}")


__all__ = [
    "CaptionFetchError",
    "CaptionsUnavailable",
    "ConfigurationError",
    "LanguageUnavailable",
    "PlaylistFetchError",
    "PlaylistNotFound",
    "QuotaOrAuthError",
    "RateLimited",
    "TranscriptServiceError",
    "UpstreamFailure",
    "VideoUnavailable",
]
