"""text_extractor.py

Holds abstract TextExtractor class inherited by format-specific extractors.
"""
from typing import List
from abc import ABC, abstractmethod

from cv_autofill.models import ExtractedText, EXTRACTION_METHOD


class TextExtractor(ABC):
    """
    Abstract base class representing a generic text extractor.

    All concrete extractors work on the raw bytes of an already validated
    document and must implement the `extract` method. Which extractor is used
    for a document is decided by the caller from a declared format.
    """
    # Formats handled by a concrete class (to be overwritten by children)
    SUPPORTED_FORMATS: List[str] = []

    # Pipeline recorded on the ExtractedText (to be overwritten by children)
    METHOD: EXTRACTION_METHOD = "text"

    def _build_result(
        self,
        text: str,
        page_count: int,
        confidence: float | None = None
    ) -> ExtractedText:
        """Wrap extracted text into an immutable ExtractedText."""
        return ExtractedText(
            text=text,
            page_count=page_count,
            method=self.METHOD,
            confidence=confidence,
        )

    @abstractmethod
    def extract(self, document_bytes: bytes) -> ExtractedText:
        """
        Extract the text of the document held in `document_bytes`.

        Returns:
            ExtractedText: text, page count, extraction method and optional
            OCR confidence.

        Raises:
            MalformedDocumentError: If the container cannot be read (where applicable).
        """
        pass
