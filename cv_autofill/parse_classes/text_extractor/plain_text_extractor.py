"""plain_text_extractor.py

Holds PlainTextExtractor class.
"""
from cv_autofill.models import ExtractedText
from cv_autofill.parse_classes.text_extractor.text_extractor import TextExtractor


class PlainTextExtractor(TextExtractor):
    """
    Concrete extractor for plain text documents (.txt).

    Bytes are decoded as UTF-8 verbatim (a leading BOM is dropped). Callers are
    responsible for not passing binary data; undecodable bytes are replaced
    rather than raising.
    """
    SUPPORTED_FORMATS = ["txt"]

    def extract(self, document_bytes: bytes) -> ExtractedText:
        text = bytes(document_bytes).decode("utf-8-sig", errors="replace")
        return self._build_result(text=text, page_count=1)
