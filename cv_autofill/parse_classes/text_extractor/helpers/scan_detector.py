"""scan_detector.py
Heuristics that decide whether extracted text looks like a failed text-layer
read (e.g. a scanned PDF) that should be retried through OCR.
"""
import re

from cv_autofill.config import EXTRACTION_DEFAULTS

WORD_TOKEN_REGEX = re.compile(r"[A-Za-z]{2,}")


def word_density(text: str) -> float:
    """Ratio of `[A-Za-z]{2,}` word tokens to total characters. 0.0 for empty text."""
    if not text:
        return 0.0
    return len(WORD_TOKEN_REGEX.findall(text)) / len(text)


def looks_scanned(
    text: str,
    min_text_length: int = EXTRACTION_DEFAULTS.SCAN_MIN_TEXT_LENGTH,
    min_word_density: float = EXTRACTION_DEFAULTS.SCAN_MIN_WORD_DENSITY,
) -> bool:
    """
    Return True if `text` looks like an empty or garbled text layer.

    The checks are applied in order and any match returns True:
        1. The text is shorter than `min_text_length` characters.
        2. Fewer than `min_word_density` of the characters start a word token,
           which is typical of noise left behind by a failed text-layer read.

    The result is advisory. It only decides whether OCR is worth trying.
    """
    if len(text) < min_text_length:
        return True

    if word_density(text) < min_word_density:
        return True

    return False


def validate_page_count(
    page_count: int,
    max_pages: int = EXTRACTION_DEFAULTS.MAX_PAGE_COUNT
) -> bool:
    """Return True if a document with `page_count` pages may be processed."""
    return 0 <= page_count <= max_pages
