"""test_plain_text_extractor.py
Comprehensive test suite for:
  - TextExtractor
  - PlainTextExtractor
"""
import pytest

from cv_autofill.models import ExtractedText
from cv_autofill.parse_classes.text_extractor.text_extractor import TextExtractor
from cv_autofill.parse_classes.text_extractor.plain_text_extractor import PlainTextExtractor


class TestTextExtractor:
    """Tests for the abstract TextExtractor."""

    def test_cannot_instantiate_directly(self):
        """TextExtractor is abstract."""
        with pytest.raises(TypeError):
            TextExtractor()

    def test_base_class_declares_no_formats(self):
        """Only concrete extractors declare the formats they handle."""
        assert TextExtractor.SUPPORTED_FORMATS == []
        assert PlainTextExtractor.SUPPORTED_FORMATS == ["txt"]


class TestPlainTextExtractor:
    """Tests for the PlainTextExtractor class."""

    def test_utf8_text_is_returned_verbatim(self):
        """Text is decoded as UTF-8 without any normalization."""
        raw = "Jane Doe\r\n8001 Zürich\n\n\nSkills:  Python".encode("utf-8")
        result = PlainTextExtractor().extract(raw)

        assert isinstance(result, ExtractedText)
        assert result.text == "Jane Doe\r\n8001 Zürich\n\n\nSkills:  Python"
        assert result.page_count == 1
        assert result.method == "text"
        assert result.confidence is None

    def test_bom_is_dropped(self):
        """A leading UTF-8 BOM is not part of the text."""
        result = PlainTextExtractor().extract(b"\xef\xbb\xbfJane Doe")
        assert result.text == "Jane Doe"

    def test_undecodable_bytes_are_replaced(self):
        """Invalid UTF-8 never raises."""
        result = PlainTextExtractor().extract(b"caf\xff")
        assert result.text == "caf�"

    def test_empty_document(self):
        """Empty bytes give empty text."""
        result = PlainTextExtractor().extract(b"")
        assert result.text == ""
        assert result.page_count == 1
