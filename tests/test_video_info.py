"""Unit tests for the summarize service."""
from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from droporia.core.config import Settings
from droporia.core.errors import ExtractionError, ExtractionErrorKind
from droporia.services.extractor import ExtractorClient
from droporia.services.video_info import summarize


class TestSummarize(unittest.TestCase):
    """Tests for URL validation, extractor wiring, and empty-result policy."""

    def setUp(self) -> None:
        self.extractor: MagicMock = MagicMock(spec=ExtractorClient)
        self.extractor.extract.return_value = {
            "title": "Clip",
            "formats": [
                {"format_id": "140", "url": "https://a", "vcodec": "none", "acodec": "mp4a"},
                {"format_id": "18", "url": "https://b", "vcodec": "avc1", "acodec": "mp4a", "height": 360},
            ],
        }
        self.settings: Settings = Settings()

    def test_invalid_urls_never_reach_extractor(self) -> None:
        """Empty, schemeless and non-http URLs are INVALID_URL."""
        for url in (None, "", "   ", "notaurl", "ftp://example.com/video", "https://"):
            with self.assertRaises(ExtractionError) as ctx:
                summarize(url, self.extractor, self.settings)
            self.assertEqual(ctx.exception.kind, ExtractionErrorKind.INVALID_URL, msg=repr(url))
        self.extractor.extract.assert_not_called()

    def test_missing_extractor_is_unavailable(self) -> None:
        """Without a configured client the failure is explicit."""
        with self.assertRaises(ExtractionError) as ctx:
            summarize("https://youtu.be/abc", None, self.settings)
        self.assertEqual(ctx.exception.kind, ExtractionErrorKind.UNAVAILABLE)

    def test_returns_ranked_summary(self) -> None:
        """The extractor result is normalized; the URL is stripped before use."""
        summary = summarize("  https://youtu.be/abc  ", self.extractor, self.settings)
        self.extractor.extract.assert_called_once_with("https://youtu.be/abc")
        self.assertEqual(summary.title, "Clip")
        self.assertEqual(summary.original_url, "https://youtu.be/abc")
        self.assertEqual([f.format_id for f in summary.formats], ["18", "140"])

    def test_empty_formats_allowed_by_default(self) -> None:
        """An empty format list is returned as-is unless configured otherwise."""
        self.extractor.extract.return_value = {"title": "Clip", "formats": [{"ext": "mp4"}]}
        summary = summarize("https://youtu.be/abc", self.extractor, self.settings)
        self.assertEqual(summary.formats, ())

    def test_empty_formats_rejected_when_configured(self) -> None:
        """reject_empty_formats turns an empty list into NOT_FOUND."""
        self.extractor.extract.return_value = {"title": "Clip"}
        with self.assertRaises(ExtractionError) as ctx:
            summarize("https://youtu.be/abc", self.extractor, Settings(reject_empty_formats=True))
        self.assertEqual(ctx.exception.kind, ExtractionErrorKind.NOT_FOUND)

    def test_extractor_errors_propagate(self) -> None:
        """Structured extractor errors pass through unchanged."""
        self.extractor.extract.side_effect = ExtractionError(ExtractionErrorKind.INTERNAL, "boom")
        with self.assertRaises(ExtractionError) as ctx:
            summarize("https://youtu.be/abc", self.extractor, self.settings)
        self.assertEqual(ctx.exception.detail, "boom")


if __name__ == "__main__":
    unittest.main()
