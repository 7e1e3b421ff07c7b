"""experience_extractor.py
Extracts work experience entries from the experience section of CV text.
"""
import re
from typing import List, Optional

from cv_autofill.models import ExperienceEntry
from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE
from cv_autofill.parse_classes.field_extractor.helper_functions.entry_parser import (
    DatedEntry,
    group_dated_entries,
    split_heading,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.field_normalizers import (
    KNOWN_SKILLS,
    dedupe_case_insensitive,
    skill_pattern,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    SECTION_HEADERS,
    find_section,
)

# "Technologies: Python, Docker" lines inside an entry
TECHNOLOGIES_LABEL_REGEX = re.compile(
    r"^(?:technologies|technologien|tech stack|stack|tools|technologies utilisées|tecnologie)\s*:\s*(?P<items>.+)$",
    re.IGNORECASE,
)
LIST_SEPARATOR_REGEX = re.compile(r"\s*[,;/|]\s*")


class ExperienceExtractor(FieldExtractor):
    """
    Extracts work experience entries.

    The experience section is located by its multilingual header. Every line
    carrying a date range opens an entry; the rest of that line is split into
    role and company (" - ", " | ", " at ", " bei ", ...). Following lines fill
    role, then company, then the description. Entries without both role and
    company are dropped.

    Supports:
        - 'rule': Section and layout heuristics.
    """

    SUPPORTED_EXTRACTION_METHODS = ["rule"]
    DEFAULT_EXTRACTION_METHOD = "rule"
    FIELD_NAME = "experience"

    def extract(self) -> List[ExperienceEntry]:
        """
        Extract experience entries from `self.text`, in document order.

        Raises:
            NotImplementedError: If extraction method is unsupported.
        """
        if self.extraction_method != "rule":
            raise NotImplementedError(
                f"Extraction method '{self.extraction_method}' is not implemented for ExperienceExtractor."
            )

        section = find_section(self.text, SECTION_HEADERS["experience"])
        if section is None:
            return []

        experiences = []
        for dated_entry in group_dated_entries(section.lines):
            experience = self._build_entry(dated_entry)
            if experience is None:
                continue
            experiences.append(experience)
            self._record(
                experience,
                start=dated_entry.start,
                end=dated_entry.end,
                confidence=CONFIDENCE["high"] if experience.start_date else CONFIDENCE["medium"],
            )
        return experiences

    def _build_entry(self, dated_entry: DatedEntry) -> Optional[ExperienceEntry]:
        role, company = split_heading(dated_entry.heading)
        description_lines = []
        technologies = []

        for line in dated_entry.lines:
            technologies_match = TECHNOLOGIES_LABEL_REGEX.match(line.text)
            if technologies_match:
                technologies.extend(
                    item for item in LIST_SEPARATOR_REGEX.split(technologies_match.group("items")) if item
                )
                continue

            if role is None and company is None:
                role, company = split_heading(line.text)
            elif role is None:
                role = line.text
            elif company is None:
                company = line.text
            else:
                description_lines.append(line.text)

        if not role or not company:
            return None

        description = " ".join(description_lines) or None
        searchable = " ".join([role, description or ""])
        technologies.extend(
            skill for skill in KNOWN_SKILLS if skill_pattern(skill).search(searchable)
        )

        return ExperienceEntry(
            role=role,
            company=company,
            start_date=dated_entry.start_date,
            end_date=dated_entry.end_date,
            description=description,
            technologies=dedupe_case_insensitive(technologies),
        )


def extract_experiences(text: str) -> List[ExperienceEntry]:
    """Extract work experience entries from `text`. Pure; never raises on content."""
    return ExperienceExtractor(text=text).extract()
