"""Extraction client using yt-dlp to fetch a video's metadata document."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError, ExtractorError

from droporia.core.config import Settings
from droporia.core.errors import ExtractionError, ExtractionErrorKind, classify_failure

logger = logging.getLogger(__name__)

YoutubeDLFactory = Callable[[dict[str, Any]], Any]


class ExtractorClient:
    """Resolve video page URLs into yt-dlp metadata documents.

    Notes
    -----
    - Built once by the application factory and handed to request handlers; it holds
      only options, so one instance serves concurrent requests.
    - A fresh ``YoutubeDL`` is opened per call. ``ydl_factory`` exists so tests can
      substitute a fake.
    - Every failure leaves this class as an ``ExtractionError``.
    """

    def __init__(
        self,
        options: Optional[dict[str, Any]] = None,
        ydl_factory: YoutubeDLFactory = YoutubeDL,
    ) -> None:
        self._options: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "skip_download": True,
        }
        if options:
            self._options.update(options)
        self._ydl_factory: YoutubeDLFactory = ydl_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractorClient":
        """Build a client from application settings."""

        options: dict[str, Any] = {"noplaylist": settings.extractor_noplaylist}
        if settings.extractor_socket_timeout is not None:
            options["socket_timeout"] = settings.extractor_socket_timeout
        return cls(options)

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    def extract(self, url: str) -> dict[str, Any]:
        """Fetch the metadata document for ``url`` without downloading media.

        Parameters
        ----------
        url: str
            The video page URL.

        Returns
        -------
        dict[str, Any]
            The yt-dlp info dict. For a playlist envelope without formats of its own,
            the first resolved entry is returned instead.

        Raises
        ------
        ExtractionError
            ``UNAVAILABLE`` when yt-dlp or a tool it shells out to is missing;
            otherwise the kind chosen by ``classify_failure``.
        """

        logger.debug("Invoking yt-dlp", extra={"url": url})
        try:
            with self._ydl_factory(self._options) as ydl:
                info: Any = ydl.extract_info(url, download=False)
        except (DownloadError, ExtractorError) as ex:
            raise classify_failure(ex) from ex
        except FileNotFoundError as ex:
            raise ExtractionError(ExtractionErrorKind.UNAVAILABLE, str(ex)) from ex
        except Exception as ex:  # noqa: BLE001 - anything else from yt-dlp is a process failure
            raise classify_failure(ex) from ex

        info = _first_entry(info)
        if not isinstance(info, dict):
            raise ExtractionError(ExtractionErrorKind.NOT_FOUND, "yt-dlp returned no video data")
        return info


def _first_entry(info: Any) -> Any:
    """Pick the first video out of a playlist envelope that has no formats itself."""

    if not isinstance(info, dict) or info.get("formats") or "entries" not in info:
        return info
    for entry in info.get("entries") or []:
        if isinstance(entry, dict):
            return entry
    return None
