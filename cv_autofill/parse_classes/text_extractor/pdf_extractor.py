"""pdf_extractor.py

Holds PDFExtractor class.
"""
from typing import List

import pymupdf

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.exceptions import MalformedDocumentError
from cv_autofill.models import ExtractedText
from cv_autofill.parse_classes.text_extractor.text_extractor import TextExtractor


class PDFExtractor(TextExtractor):
    """
    Concrete extractor for PDF documents (.pdf).

    This class extends the abstract ``TextExtractor`` and uses PyMuPDF to read
    the text layer of every page. Scanned PDFs usually come back with an empty
    or garbage text layer; for those ``render_pages`` produces PNG images of the
    first pages that can be sent through OCR.

    Args:
        zoom (float, optional): Zoom factor for page renderings. Higher values
            give OCR more pixels to work with.

    Attributes:
        SUPPORTED_FORMATS (List[str]): Formats supported by this extractor
            (only ``pdf``).
    """
    SUPPORTED_FORMATS = ["pdf"]

    def __init__(self, zoom: float = EXTRACTION_DEFAULTS.PDF_RENDER_ZOOM):
        self.zoom = zoom

    def extract(self, document_bytes: bytes) -> ExtractedText:
        """
        Extract the text layer of the PDF.

        Returns:
            ExtractedText: Text of all pages in order, with ``page_count`` set
            to the number of pages in the document.

        Raises:
            MalformedDocumentError: If the file cannot be opened or read by PyMuPDF.
        """
        doc = self._open(document_bytes)
        try:
            page_texts = [
                doc.load_page(page_number).get_text("text")
                for page_number in range(doc.page_count)
            ]
            page_count = doc.page_count
        except Exception as e:
            raise MalformedDocumentError("pdf", str(e))
        finally:
            doc.close()

        return self._build_result(text="\n".join(page_texts), page_count=page_count)

    def render_pages(
        self,
        document_bytes: bytes,
        max_pages: int = EXTRACTION_DEFAULTS.OCR_MAX_PAGES
    ) -> List[bytes]:
        """
        Render the first `max_pages` pages of the PDF to PNG images.

        Returns:
            List[bytes]: PNG bytes per page, in page order.

        Raises:
            MalformedDocumentError: If the PDF cannot be opened or rendered.
        """
        doc = self._open(document_bytes)
        matrix = pymupdf.Matrix(self.zoom, self.zoom)
        try:
            return [
                doc.load_page(page_number).get_pixmap(matrix=matrix).tobytes("png")
                for page_number in range(min(max_pages, doc.page_count))
            ]
        except Exception as e:
            raise MalformedDocumentError("pdf", str(e))
        finally:
            doc.close()

    def _open(self, document_bytes: bytes) -> "pymupdf.Document":
        """
        Opens the PDF from memory using PyMuPDF.

        Raises:
            MalformedDocumentError: If the PDF cannot be opened.
        """
        try:
            return pymupdf.open(stream=bytes(document_bytes), filetype="pdf")
        except Exception as e:
            raise MalformedDocumentError("pdf", str(e))
