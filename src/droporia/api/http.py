"""HTTP API routes for the Droporia service."""
from __future__ import annotations

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from droporia.core.config import Settings, get_settings
from droporia.core.errors import ExtractionError, ExtractionErrorKind
from droporia.domain.summary import ErrorResponse, VideoInfoRequest, VideoInfoResponse, VideoSummary
from droporia.services.extractor import ExtractorClient
from droporia.services.video_info import summarize

logger = logging.getLogger(__name__)

router: APIRouter = APIRouter(prefix="/api", tags=["api"])

# Status code and client-facing message per failure kind
ERROR_RESPONSES: dict[ExtractionErrorKind, tuple[int, str]] = {
    ExtractionErrorKind.INVALID_URL: (400, "Invalid URL format provided."),
    ExtractionErrorKind.UNSUPPORTED: (
        400,
        "Unsupported URL. Please provide a valid video link from a supported platform.",
    ),
    ExtractionErrorKind.NOT_FOUND: (
        404,
        "Could not find video data or formats for the provided URL. "
        "It might be private, deleted, or from an unsupported source.",
    ),
    ExtractionErrorKind.UNAVAILABLE: (
        500,
        "Server configuration error: yt-dlp is not available. "
        "Please ensure it is installed and importable by the service.",
    ),
    ExtractionErrorKind.INTERNAL: (
        503,
        "The video processing service (yt-dlp) failed. Please try again later.",
    ),
}
MISSING_URL_MESSAGE: str = "Video URL is required in the request body."
UNEXPECTED_MESSAGE: str = "An unexpected error occurred while fetching video information."


def error_response(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    """Build the ``{"success": false, ...}`` envelope shared by every error path."""

    body: ErrorResponse = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def extraction_error_response(err: ExtractionError) -> JSONResponse:
    status_code, message = ERROR_RESPONSES[err.kind]
    return error_response(status_code, message, err.detail or None)


def get_extractor(request: Request) -> Optional[ExtractorClient]:
    """Return the extraction client owned by the application, if any."""

    return getattr(request.app.state, "extractor", None)


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""

    settings: Optional[Settings] = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


@router.post(
    "/video-info",
    response_model=VideoInfoResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 500, 503)},
)
def post_video_info(
    payload: VideoInfoRequest,
    extractor: Optional[ExtractorClient] = Depends(get_extractor),
    settings: Settings = Depends(get_app_settings),
) -> Union[VideoInfoResponse, JSONResponse]:
    """Resolve a video URL and return its downloadable formats.

    Parameters
    ----------
    payload: VideoInfoRequest
        The request payload containing the video URL.

    Returns
    -------
    VideoInfoResponse
        ``{"success": true, "data": VideoSummary}``.

    Notes
    -----
    - Declared sync so FastAPI runs the blocking yt-dlp call in its threadpool.
    - Every failure is returned as ``{"success": false, "error": ..., "details": ...}``;
      stack traces never reach the client.
    """

    if not payload.url or not payload.url.strip():
        return error_response(400, MISSING_URL_MESSAGE)

    logger.info("Received video-info request", extra={"url": payload.url})
    try:
        summary: VideoSummary = summarize(payload.url, extractor, settings)
    except ExtractionError as err:
        logger.error(
            "Video-info request failed",
            extra={"url": payload.url, "kind": err.kind.value, "detail": err.detail},
        )
        return extraction_error_response(err)
    except Exception as ex:  # noqa: BLE001 - surface a simple message to clients
        logger.exception("Unexpected failure resolving video", extra={"url": payload.url})
        return error_response(500, UNEXPECTED_MESSAGE, str(ex) or type(ex).__name__)

    return VideoInfoResponse(data=summary)
