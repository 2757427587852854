"""Unit tests for the lenient extractor input schema."""
from __future__ import annotations

import unittest

from droporia.domain.summary import RawFormat, RawVideoInfo


class TestRawFormat(unittest.TestCase):
    """Wrong-typed values become None instead of failing validation."""

    def test_numbers_are_checked(self) -> None:
        """Strings, booleans, negatives and non-finite values are dropped."""
        fmt = RawFormat.model_validate(
            {"height": "1080", "width": True, "filesize": -5, "filesize_approx": float("nan"), "fps": 29.97}
        )
        self.assertIsNone(fmt.height)
        self.assertIsNone(fmt.width)
        self.assertIsNone(fmt.filesize)
        self.assertIsNone(fmt.filesize_approx)
        self.assertEqual(fmt.fps, 29.97)

    def test_integers_stay_integers(self) -> None:
        """Integral sizes are not widened to floats."""
        fmt = RawFormat.model_validate({"filesize": 1024, "height": 720})
        self.assertIsInstance(fmt.filesize, int)
        self.assertIsInstance(fmt.height, int)

    def test_format_id_coerced_to_text(self) -> None:
        """Numeric format ids are kept as strings."""
        self.assertEqual(RawFormat.model_validate({"format_id": 18}).format_id, "18")
        self.assertIsNone(RawFormat.model_validate({"format_id": ["18"]}).format_id)

    def test_text_fields_reject_other_types(self) -> None:
        """Non-string text fields and unknown keys are ignored."""
        fmt = RawFormat.model_validate({"url": 123, "vcodec": None, "ext": "mp4", "tbr": 1000.5})
        self.assertIsNone(fmt.url)
        self.assertIsNone(fmt.vcodec)
        self.assertEqual(fmt.ext, "mp4")


class TestRawVideoInfo(unittest.TestCase):
    """Envelope-level leniency."""

    def test_formats_must_be_a_list_of_mappings(self) -> None:
        """A non-list formats value is empty; non-mapping entries are dropped."""
        self.assertEqual(RawVideoInfo.model_validate({"formats": "nope"}).formats, [])
        self.assertEqual(RawVideoInfo.model_validate({"formats": None}).formats, [])
        info = RawVideoInfo.model_validate({"formats": [None, "x", {"url": "https://a"}]})
        self.assertEqual(len(info.formats), 1)
        self.assertEqual(info.formats[0].url, "https://a")

    def test_metadata_fields(self) -> None:
        """View counts are integral; wrong-typed metadata is dropped."""
        info = RawVideoInfo.model_validate({"title": 5, "view_count": 12.0, "duration": "long"})
        self.assertIsNone(info.title)
        self.assertEqual(info.view_count, 12)
        self.assertIsNone(info.duration)


if __name__ == "__main__":
    unittest.main()
