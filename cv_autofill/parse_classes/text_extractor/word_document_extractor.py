"""word_document_extractor.py

Holds WordDocumentExtractor class using docx2txt for text extraction.
"""
import io

import docx2txt

from cv_autofill.models import ExtractedText
from cv_autofill.exceptions import MalformedDocumentError
from cv_autofill.parse_classes.text_extractor.text_extractor import TextExtractor


class WordDocumentExtractor(TextExtractor):
    """
    Concrete extractor for Microsoft Word documents (.docx).

    This class extends the abstract ``TextExtractor`` and uses ``docx2txt`` to
    unpack the document's text-bearing parts (including textboxes, headers and
    footers) and return paragraph text in document order.

    DOCX packaging does not carry reliable pagination, so ``page_count`` is
    always 1.

    Attributes:
        SUPPORTED_FORMATS (List[str]): Formats supported by this extractor
            (only ``docx``).
    """

    SUPPORTED_FORMATS = ["docx"]

    def extract(self, document_bytes: bytes) -> ExtractedText:
        """
        Extract the text of a Word document.

        Returns:
            ExtractedText: The document text with ``page_count=1``.

        Raises:
            MalformedDocumentError: If the archive is malformed or unreadable.
        """
        full_text = self._get_docx_contents(document_bytes)
        return self._build_result(text=full_text, page_count=1)

    def _get_docx_contents(self, document_bytes: bytes) -> str:
        """
        Opens the Word document from memory using docx2txt and extracts all text content.

        Returns:
            str: The raw extracted text from the document.

        Raises:
            MalformedDocumentError: If the Word document cannot be opened or read.
        """
        try:
            full_text = docx2txt.process(io.BytesIO(document_bytes))
        except Exception as e:
            raise MalformedDocumentError("docx", str(e))

        return (full_text or "").strip()
