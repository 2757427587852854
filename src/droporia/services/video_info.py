"""Resolve a submitted video URL into a ``VideoSummary``."""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlparse

from droporia.core.config import Settings
from droporia.core.errors import ExtractionError, ExtractionErrorKind
from droporia.domain.summary import VideoSummary
from droporia.services.extractor import ExtractorClient
from droporia.services.normalizer import build_summary

logger = logging.getLogger(__name__)


def _validate_url(url: Optional[str]) -> str:
    """Validate URL has a supported scheme and netloc.

    Notes
    -----
    - Accepts only ``http`` and ``https`` schemes with a non-empty host.
    - Raises ``ExtractionError(INVALID_URL)`` early to avoid invoking yt-dlp on
      malformed input.
    """

    if url is None or not url.strip():
        raise ExtractionError(ExtractionErrorKind.INVALID_URL, "Video URL is required")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ExtractionError(ExtractionErrorKind.INVALID_URL, "Invalid URL: only http(s) URLs are supported")
    return url


def summarize(url: Optional[str], extractor: Optional[ExtractorClient], settings: Settings) -> VideoSummary:
    """Resolve ``url`` through the extractor and normalize the result.

    Parameters
    ----------
    url: Optional[str]
        The video page URL submitted by the user.
    extractor: Optional[ExtractorClient]
        The process-wide extraction client; ``None`` when it could not be set up.
    settings: Settings
        Application settings.

    Returns
    -------
    VideoSummary
        Normalized metadata and ranked formats.

    Raises
    ------
    ExtractionError
        ``INVALID_URL`` for a missing or malformed URL, ``UNAVAILABLE`` without an
        extractor, ``NOT_FOUND`` for an empty format list when
        ``settings.reject_empty_formats`` is set, and whatever the extractor raises.
    """

    video_url: str = _validate_url(url)
    if extractor is None:
        raise ExtractionError(ExtractionErrorKind.UNAVAILABLE, "yt-dlp extractor is not configured")

    logger.info("Resolving video", extra={"url": video_url})
    metadata: dict[str, Any] = extractor.extract(video_url)
    summary: VideoSummary = build_summary(metadata, video_url)

    if not summary.formats and settings.reject_empty_formats:
        raise ExtractionError(ExtractionErrorKind.NOT_FOUND, "No video formats found")

    logger.info("Resolved video", extra={"url": video_url, "formats": len(summary.formats)})
    return summary
