"""Format normalization and ranking.

Turns yt-dlp's raw metadata document into a ``VideoSummary``: drops formats
without a direct URL, derives display fields, and orders the result so combined
audio+video formats come first, then video-only, then audio-only, with higher
resolutions first inside the first two groups.

Everything here is pure and deterministic; nothing raises for sparse input.
"""
from __future__ import annotations

import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Mapping, Optional, Sequence

from yt_dlp.utils import formatSeconds

from droporia.domain.summary import NormalizedFormat, RawFormat, RawVideoInfo, VideoSummary

logger = logging.getLogger(__name__)

NONE_CODEC: str = "none"
NOT_AVAILABLE: str = "N/A"
AUDIO_ONLY_LABEL: str = "audio only"
APPROX_SUFFIX: str = " (approx)"

_SIZE_UNITS: tuple[str, ...] = ("Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")
_KILO: int = 1024
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

TIER_COMBINED: int = 0
TIER_VIDEO_ONLY: int = 1
TIER_AUDIO_ONLY: int = 2


def format_bytes(num_bytes: Optional[float], decimals: int = 2) -> str:
    """Render a byte count like ``"1.5 KB"``.

    Parameters
    ----------
    num_bytes: Optional[float]
        Byte count; ``None``, zero and negative values render as ``"0 Bytes"``.
    decimals: int
        Digits kept after the decimal point before trailing zeros are dropped.

    Returns
    -------
    str
        The value scaled to the largest 1024-based unit not exceeding it.

    Notes
    -----
    - The unit tier is ``floor(log(b) / log(1024))`` clamped to the unit table, so
      fractional inputs stay in bytes and absurdly large ones stay in YB. Exact powers
      of 1024 always land on their own unit (``1073741824`` is ``"1 GB"``).
    - Rounding is half away from zero on the exact binary value (``1.125`` becomes
      ``1.13``), then trailing zeros are dropped (``1.50`` becomes ``1.5``).
    """

    if not num_bytes or num_bytes < 0:
        return "0 Bytes"

    tier: int = math.floor(math.log(num_bytes) / math.log(_KILO))
    tier = min(max(tier, 0), len(_SIZE_UNITS) - 1)
    # log() can land a hair under an exact power of 1024
    if tier < len(_SIZE_UNITS) - 1 and num_bytes >= _KILO ** (tier + 1):
        tier += 1
    places: Decimal = Decimal(1).scaleb(-max(decimals, 0))
    with localcontext() as ctx:
        # dividing by a power of two terminates, so this precision keeps the quotient exact
        ctx.prec = int(num_bytes).bit_length() // 3 + 200
        quotient: Decimal = Decimal(num_bytes) / Decimal(_KILO) ** tier
        value: Decimal = quotient.quantize(places, rounding=ROUND_HALF_UP)
    text: str = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[tier]}"


def _describe_resolution(fmt: RawFormat) -> str:
    if fmt.resolution:
        return fmt.resolution
    if fmt.height:
        width: Any = _display_number(fmt.width) if fmt.width else "?"
        return f"{width}x{_display_number(fmt.height)}"
    return AUDIO_ONLY_LABEL


def _display_number(value: float) -> Any:
    if isinstance(value, int):
        return value
    return int(value) if value.is_integer() else value


def _describe_filesize(fmt: RawFormat) -> str:
    if fmt.filesize:
        return format_bytes(fmt.filesize)
    if fmt.filesize_approx:
        return f"{format_bytes(fmt.filesize_approx)}{APPROX_SUFFIX}"
    return NOT_AVAILABLE


def normalize_format(fmt: RawFormat) -> Optional[NormalizedFormat]:
    """Normalize one raw descriptor, or return ``None`` when it has no URL.

    Notes
    -----
    - Preserves yt-dlp semantics for codecs: the literal string ``"none"`` means
      the stream lacks that track. A missing codec is not ``"none"``.
    """

    if not fmt.url:
        return None

    return NormalizedFormat(
        format_id=fmt.format_id,
        ext=fmt.ext,
        url=fmt.url,
        protocol=fmt.protocol,
        vcodec=fmt.vcodec,
        acodec=fmt.acodec,
        width=fmt.width,
        height=fmt.height,
        fps=fmt.fps,
        filesize=fmt.filesize,
        filesize_approx=fmt.filesize_approx,
        resolution=_describe_resolution(fmt),
        quality_note=fmt.format_note or NOT_AVAILABLE,
        filesize_string=_describe_filesize(fmt),
        is_audio_only=fmt.vcodec == NONE_CODEC and fmt.acodec != NONE_CODEC,
        is_video_only=fmt.vcodec != NONE_CODEC and fmt.acodec == NONE_CODEC,
    )


def parse_height(resolution: Optional[str]) -> int:
    """Return the signed integer following the first ``x`` in a resolution string, else 0."""

    if not resolution:
        return 0
    parts: list[str] = resolution.split("x")
    if len(parts) < 2:
        return 0
    match = _LEADING_INT.match(parts[1])
    return int(match.group(1)) if match else 0


def format_tier(fmt: NormalizedFormat) -> int:
    """Ranking group: combined first, then video-only, then audio-only."""

    if fmt.is_audio_only:
        return TIER_AUDIO_ONLY
    if fmt.is_video_only:
        return TIER_VIDEO_ONLY
    return TIER_COMBINED


def rank_formats(formats: Sequence[NormalizedFormat]) -> list[NormalizedFormat]:
    """Order formats for presentation.

    Notes
    -----
    - Stable sort on ``(tier, -height)``; audio-only formats use a constant secondary
      key so they keep their input order.
    """

    def sort_key(fmt: NormalizedFormat) -> tuple[int, int]:
        tier: int = format_tier(fmt)
        height: int = 0 if tier == TIER_AUDIO_ONLY else parse_height(fmt.resolution)
        return (tier, -height)

    return sorted(formats, key=sort_key)


def _duration_string(info: RawVideoInfo) -> str:
    if info.duration_string:
        return info.duration_string
    if info.duration:
        return formatSeconds(info.duration)
    return NOT_AVAILABLE


def build_summary(metadata: Mapping[str, Any] | RawVideoInfo, source_url: str) -> VideoSummary:
    """Build a ``VideoSummary`` from an extractor metadata document.

    Parameters
    ----------
    metadata: Mapping[str, Any] | RawVideoInfo
        The document returned by yt-dlp, raw or already validated.
    source_url: str
        The URL the user submitted; used when the document lacks ``webpage_url``.

    Returns
    -------
    VideoSummary
        Metadata with defaults applied and the filtered, ranked format list. The list
        may be empty; deciding whether that is a failure is left to the caller.
    """

    info: RawVideoInfo = (
        metadata if isinstance(metadata, RawVideoInfo) else RawVideoInfo.model_validate(dict(metadata))
    )

    normalized: list[NormalizedFormat] = []
    for raw in info.formats:
        fmt: Optional[NormalizedFormat] = normalize_format(raw)
        if fmt is not None:
            normalized.append(fmt)

    if not normalized and info.formats:
        logger.warning(
            "No formats with direct URLs after filtering",
            extra={"url": source_url, "raw_formats": len(info.formats)},
        )
    elif not normalized:
        logger.warning("No downloadable formats found", extra={"url": source_url})

    return VideoSummary(
        title=info.title or NOT_AVAILABLE,
        thumbnail_url=info.thumbnail or None,
        uploader=info.uploader or NOT_AVAILABLE,
        duration=info.duration or 0,
        duration_string=_duration_string(info),
        view_count=info.view_count or 0,
        original_url=info.webpage_url or source_url,
        formats=tuple(rank_formats(normalized)),
    )
