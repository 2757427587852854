"""Domain models for resolving a video URL into a ranked list of formats.

The ``Raw*`` models describe the extractor's metadata document. Every field is
optional and validation is lenient: a value of the wrong type is dropped to
``None`` rather than rejected, so a sparse or odd document still yields a summary.
The output models are frozen once built.
"""
from __future__ import annotations

import math
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def _as_number(value: Any) -> Optional[Number]:
    # bool is an int subclass; the extractor never means a size or height by it
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if (isinstance(value, float) and not math.isfinite(value)) or value < 0:
        return None
    return value


class RawFormat(BaseModel):
    """One format descriptor as emitted by yt-dlp (untrusted, partial)."""

    model_config = ConfigDict(extra="ignore")

    format_id: Optional[str] = None
    ext: Optional[str] = None
    url: Optional[str] = None
    protocol: Optional[str] = None
    vcodec: Optional[str] = None
    acodec: Optional[str] = None
    width: Optional[Number] = None
    height: Optional[Number] = None
    resolution: Optional[str] = None
    format_note: Optional[str] = None
    fps: Optional[Number] = None
    filesize: Optional[Number] = None
    filesize_approx: Optional[Number] = None

    @field_validator("format_id", mode="before")
    @classmethod
    def _coerce_format_id(cls, value: Any) -> Optional[str]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return _as_text(value)

    @field_validator(
        "ext", "url", "protocol", "vcodec", "acodec", "resolution", "format_note", mode="before"
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator("width", "height", "fps", "filesize", "filesize_approx", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[Number]:
        return _as_number(value)


class RawVideoInfo(BaseModel):
    """The metadata document yt-dlp returns for one URL."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    thumbnail: Optional[str] = None
    uploader: Optional[str] = None
    duration: Optional[Number] = None
    duration_string: Optional[str] = None
    view_count: Optional[int] = None
    webpage_url: Optional[str] = None
    formats: list[RawFormat] = Field(default_factory=list)

    @field_validator("title", "thumbnail", "uploader", "duration_string", "webpage_url", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, value: Any) -> Optional[Number]:
        return _as_number(value)

    @field_validator("view_count", mode="before")
    @classmethod
    def _coerce_view_count(cls, value: Any) -> Optional[int]:
        number: Optional[Number] = _as_number(value)
        return int(number) if number is not None else None

    @field_validator("formats", mode="before")
    @classmethod
    def _coerce_formats(cls, value: Any) -> list[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        return [entry for entry in value if isinstance(entry, dict)]


class NormalizedFormat(BaseModel):
    """A downloadable format ready for presentation."""

    model_config = ConfigDict(frozen=True)

    format_id: Optional[str] = Field(default=None, description="yt-dlp format identifier")
    ext: Optional[str] = Field(default=None, description="Container/extension")
    url: str = Field(description="Direct resource locator")
    protocol: Optional[str] = Field(default=None, description="Transfer protocol reported by yt-dlp")
    vcodec: Optional[str] = Field(default=None, description="Video codec or 'none'")
    acodec: Optional[str] = Field(default=None, description="Audio codec or 'none'")
    width: Optional[Number] = None
    height: Optional[Number] = None
    fps: Optional[Number] = Field(default=None, description="Frames per second (may be fractional)")
    filesize: Optional[Number] = Field(default=None, description="Exact size in bytes")
    filesize_approx: Optional[Number] = Field(default=None, description="Estimated size in bytes")
    resolution: str = Field(description="e.g. 1920x1080, or 'audio only'")
    quality_note: str = Field(default="N/A", description="Human label such as 1080p")
    filesize_string: str = Field(default="N/A", description="Human-readable size")
    is_audio_only: bool = False
    is_video_only: bool = False


class VideoSummary(BaseModel):
    """Normalized metadata and ranked formats for one video."""

    model_config = ConfigDict(frozen=True)

    title: str = "N/A"
    thumbnail_url: Optional[str] = None
    uploader: str = "N/A"
    duration: Number = Field(default=0, description="Duration in seconds")
    duration_string: str = "N/A"
    view_count: int = 0
    original_url: str = Field(description="Canonical page URL")
    formats: tuple[NormalizedFormat, ...] = ()


class VideoInfoRequest(BaseModel):
    """Request payload to resolve a video URL."""

    url: Optional[str] = Field(default=None, description="Video page URL")


class VideoInfoResponse(BaseModel):
    """Successful response envelope."""

    success: bool = True
    data: VideoSummary


class ErrorResponse(BaseModel):
    """Error response envelope."""

    success: bool = False
    error: str = Field(description="Short human-readable message")
    details: Optional[str] = Field(default=None, description="Underlying detail for diagnostics")
