"""Structured error kinds for the extraction boundary.

yt-dlp reports most failures as ``DownloadError`` wrapping the original
``ExtractorError``. They are translated into an ``ExtractionError`` carrying an
``ExtractionErrorKind`` right where the extractor is called, so nothing above the
extraction client inspects error text.
"""
from __future__ import annotations

from enum import Enum

from yt_dlp.utils import DownloadError, ExtractorError, GeoRestrictedError, UnsupportedError


class ExtractionErrorKind(str, Enum):
    """Failure categories surfaced to clients."""

    INVALID_URL = "invalid_url"
    UNSUPPORTED = "unsupported"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


class ExtractionError(Exception):
    """Resolving a video URL failed.

    Attributes
    ----------
    kind: ExtractionErrorKind
        The failure category.
    detail: str
        Raw underlying message kept for diagnostics.
    """

    def __init__(self, kind: ExtractionErrorKind, detail: str = "") -> None:
        super().__init__(detail or kind.value)
        self.kind: ExtractionErrorKind = kind
        self.detail: str = detail


_UNSUPPORTED_MARKERS: tuple[str, ...] = ("unsupported url",)
_UNAVAILABLE_MARKERS: tuple[str, ...] = ("no such file or directory", "command not found")
_NOT_FOUND_MARKERS: tuple[str, ...] = (
    "private video",
    "video unavailable",
    "unable to extract video data",
    "no video formats found",
)


def _underlying(exc: BaseException) -> BaseException:
    """Return the extractor exception wrapped by a ``DownloadError`` when present."""

    if isinstance(exc, DownloadError) and exc.exc_info and exc.exc_info[1] is not None:
        return exc.exc_info[1]
    return exc


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def classify_failure(exc: BaseException) -> ExtractionError:
    """Translate an exception raised while extracting into an ``ExtractionError``.

    Parameters
    ----------
    exc: BaseException
        The exception raised by yt-dlp or the surrounding call.

    Returns
    -------
    ExtractionError
        The structured error. ``detail`` keeps the raw message.

    Notes
    -----
    - Exception types are preferred over text; message markers only cover failures
      yt-dlp reports without a dedicated type (e.g. private or removed videos).
    - Unclassified failures become ``INTERNAL`` with the first line of the message.
    """

    cause: BaseException = _underlying(exc)
    message: str = str(exc)
    lowered: str = message.lower()

    if isinstance(cause, UnsupportedError) or any(m in lowered for m in _UNSUPPORTED_MARKERS):
        return ExtractionError(ExtractionErrorKind.UNSUPPORTED, message)
    if isinstance(cause, FileNotFoundError) or any(m in lowered for m in _UNAVAILABLE_MARKERS):
        return ExtractionError(ExtractionErrorKind.UNAVAILABLE, message)
    if isinstance(cause, GeoRestrictedError) or any(m in lowered for m in _NOT_FOUND_MARKERS):
        return ExtractionError(ExtractionErrorKind.NOT_FOUND, message)
    if isinstance(cause, ExtractorError) and cause.expected:
        return ExtractionError(ExtractionErrorKind.NOT_FOUND, message)
    return ExtractionError(ExtractionErrorKind.INTERNAL, _first_line(message) or type(exc).__name__)
