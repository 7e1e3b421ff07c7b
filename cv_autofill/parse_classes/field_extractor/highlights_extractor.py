"""highlights_extractor.py
Extracts key achievements listed in the highlights section of CV text.
"""
from typing import List

from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE
from cv_autofill.parse_classes.field_extractor.helper_functions.entry_parser import BULLET_REGEX
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    SECTION_HEADERS,
    find_section,
)

MIN_HIGHLIGHT_LENGTH = 3


class HighlightsExtractor(FieldExtractor):
    """
    Extracts highlights: every bullet or line of a "Highlights" / "Key
    achievements" section becomes one item.

    Supports:
        - 'rule': Section detection.
    """

    SUPPORTED_EXTRACTION_METHODS = ["rule"]
    DEFAULT_EXTRACTION_METHOD = "rule"
    FIELD_NAME = "highlights"

    def extract(self) -> List[str]:
        if self.extraction_method != "rule":
            raise NotImplementedError(
                f"Extraction method '{self.extraction_method}' is not implemented for HighlightsExtractor."
            )

        section = find_section(self.text, SECTION_HEADERS["highlights"])
        if section is None:
            return []

        highlights = []
        for line in section.lines:
            bullet = BULLET_REGEX.match(line.text)
            offset = bullet.end() if bullet else 0
            highlight = line.text[offset:].strip()
            if len(highlight) < MIN_HIGHLIGHT_LENGTH:
                continue
            highlights.append(highlight)
            self._record(highlight, start=line.start + offset, end=line.end, confidence=CONFIDENCE["high"])
        return highlights


def extract_highlights(text: str) -> List[str]:
    """Extract highlight items from `text`. Pure; never raises on content."""
    return HighlightsExtractor(text=text).extract()
