"""education_extractor.py
Extracts education entries from the education section of CV text.
"""
from typing import List

from cv_autofill.models import EducationEntry
from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE
from cv_autofill.parse_classes.field_extractor.helper_functions.entry_parser import (
    group_dated_entries,
    split_heading,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    SECTION_HEADERS,
    find_section,
)


class EducationExtractor(FieldExtractor):
    """
    Extracts education entries (degree, institution, dates).

    Works like ExperienceExtractor: a dated line opens an entry and is split
    into degree and institution; following lines fill whichever is missing.
    Further lines are ignored.

    Supports:
        - 'rule': Section and layout heuristics.
    """

    SUPPORTED_EXTRACTION_METHODS = ["rule"]
    DEFAULT_EXTRACTION_METHOD = "rule"
    FIELD_NAME = "education"

    def extract(self) -> List[EducationEntry]:
        if self.extraction_method != "rule":
            raise NotImplementedError(
                f"Extraction method '{self.extraction_method}' is not implemented for EducationExtractor."
            )

        section = find_section(self.text, SECTION_HEADERS["education"])
        if section is None:
            return []

        education = []
        for dated_entry in group_dated_entries(section.lines):
            degree, institution = split_heading(dated_entry.heading)
            for line in dated_entry.lines:
                if degree is None and institution is None:
                    degree, institution = split_heading(line.text)
                elif degree is None:
                    degree = line.text
                elif institution is None:
                    institution = line.text

            if not degree or not institution:
                continue

            entry = EducationEntry(
                degree=degree,
                institution=institution,
                start_date=dated_entry.start_date,
                end_date=dated_entry.end_date,
            )
            education.append(entry)
            self._record(
                entry,
                start=dated_entry.start,
                end=dated_entry.end,
                confidence=CONFIDENCE["high"] if entry.start_date else CONFIDENCE["medium"],
            )
        return education


def extract_education(text: str) -> List[EducationEntry]:
    """Extract education entries from `text`. Pure; never raises on content."""
    return EducationExtractor(text=text).extract()
