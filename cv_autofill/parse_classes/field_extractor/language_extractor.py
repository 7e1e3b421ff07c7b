"""language_extractor.py
Extracts spoken languages and their levels from the languages section of CV text.
"""
import re
from typing import List, Optional, Tuple

from cv_autofill.models import LanguageEntry
from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE
from cv_autofill.parse_classes.field_extractor.helper_functions.entry_parser import strip_bullet
from cv_autofill.parse_classes.field_extractor.helper_functions.field_normalizers import (
    normalize_language_level,
    normalize_language_name,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    SECTION_HEADERS,
    find_section,
)

# Several languages may share a line: "German (native), English C1; French B2"
ITEM_SEPARATOR_REGEX = re.compile(r"\s*[,;|•·]\s*")

# "Language: level", "Language - level", "Language (level)"
LANGUAGE_ITEM_REGEX = re.compile(r"^(?P<name>[^:\-–(]+?)\s*(?:[:\-–(]\s*(?P<level>.*?)\)?)?\s*$")

# Level used when a language is listed without a recognizable level
DEFAULT_LEVEL = "B1"


class LanguageExtractor(FieldExtractor):
    """
    Extracts languages from the languages section.

    Language names are normalized to their English names ("Deutsch" ->
    "German"), levels to CEFR or "Native". A language listed without a
    recognizable level gets B1 and a low provenance confidence, so the
    reviewer can tell it was not read from the document.

    Supports:
        - 'rule': Section detection and keyword matching.
    """

    SUPPORTED_EXTRACTION_METHODS = ["rule"]
    DEFAULT_EXTRACTION_METHOD = "rule"
    FIELD_NAME = "languages"

    def extract(self) -> List[LanguageEntry]:
        if self.extraction_method != "rule":
            raise NotImplementedError(
                f"Extraction method '{self.extraction_method}' is not implemented for LanguageExtractor."
            )

        section = find_section(self.text, SECTION_HEADERS["languages"])
        if section is None:
            return []

        languages: List[LanguageEntry] = []
        seen = set()
        for line in section.lines:
            position = 0
            content = line.text
            for item in ITEM_SEPARATOR_REGEX.split(content):
                item_start = content.index(item, position) if item else position
                position = item_start + len(item)

                parsed = self._parse_item(strip_bullet(item))
                if parsed is None:
                    continue
                language, level, confidence = parsed

                self._record(
                    LanguageEntry(language=language, level=level),
                    start=line.start + item_start,
                    end=line.start + item_start + len(item),
                    confidence=confidence,
                )
                if language in seen:
                    continue
                seen.add(language)
                languages.append(LanguageEntry(language=language, level=level))
        return languages

    @staticmethod
    def _parse_item(item: str) -> Optional[Tuple[str, str, float]]:
        """Return (language, level, confidence) for one list item, or None if it names no language."""
        match = LANGUAGE_ITEM_REGEX.match(item)
        if not match:
            return None
        name = match.group("name").strip()
        level_text = match.group("level") or ""

        language = normalize_language_name(name)
        if language is None:
            # "English C1", "Deutsch Muttersprache"
            words = name.split(" ")
            language = normalize_language_name(words[0])
            level_text = " ".join(words[1:] + [level_text])
        if language is None:
            return None

        level = normalize_language_level(level_text)
        if level is None:
            return language, DEFAULT_LEVEL, CONFIDENCE["low"]
        return language, level, CONFIDENCE["high"]


def extract_languages(text: str) -> List[LanguageEntry]:
    """Extract languages and levels from `text`. Pure; never raises on content."""
    return LanguageExtractor(text=text).extract()
