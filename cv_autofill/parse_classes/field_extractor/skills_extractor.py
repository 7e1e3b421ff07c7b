"""skills_extractor.py
Extracts skills from CV text: items of the skills section plus known
vocabulary matches.
"""
import re
from typing import List, Optional, Tuple

from cv_autofill.exceptions import FieldExtractionConfigError
from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE, EXTRACTION_METHODS
from cv_autofill.parse_classes.field_extractor.helper_functions.entry_parser import strip_bullet
from cv_autofill.parse_classes.field_extractor.helper_functions.field_normalizers import (
    KNOWN_SKILLS,
    dedupe_case_insensitive,
    skill_pattern,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    SECTION_HEADERS,
    Section,
    TextLine,
    find_section,
    split_lines,
)

SKILL_SEPARATOR_REGEX = re.compile(r"\s*(?:[,;|•·]|\s/\s)\s*")

# "Programming: Python, Java" -> the category label is dropped
CATEGORY_LABEL_REGEX = re.compile(r"^[^:]{1,30}:\s*")

# Longer items are sentences, not skills
MAX_SKILL_WORDS = 4


class SkillsExtractor(FieldExtractor):
    """
    Extracts the candidate's skills.

    Supports:
        - 'rule': Items listed in the skills section, plus known vocabulary
          found in that section (or in the whole text when there is none).
        - 'regex': Known vocabulary found anywhere in the text.

    Skills are de-duplicated case-insensitively; first-seen order is kept.
    """

    SUPPORTED_EXTRACTION_METHODS = ["rule", "regex"]
    DEFAULT_EXTRACTION_METHOD = "rule"
    FIELD_NAME = "skills"

    def __init__(
        self,
        text: Optional[str] = None,
        extraction_method: Optional[EXTRACTION_METHODS] = None,
        known_skills: Optional[List[str]] = None,
    ):
        """
        Args:
            known_skills (List[str] | None): Skill vocabulary to recognize.
                Defaults to KNOWN_SKILLS.
        """
        super().__init__(text=text, extraction_method=extraction_method)
        if known_skills is not None and (
            not isinstance(known_skills, list)
            or not all(isinstance(skill, str) and skill.strip() for skill in known_skills)
        ):
            raise FieldExtractionConfigError(
                field_name=self.FIELD_NAME,
                message="known_skills must be a list of non-empty strings",
            )
        self.known_skills = KNOWN_SKILLS if known_skills is None else known_skills

    def extract(self) -> List[str]:
        """
        Extract skills from `self.text` using the chosen extraction method.

        Raises:
            NotImplementedError: If extraction method is unsupported.
        """
        if self.extraction_method == "rule":
            section = find_section(self.text, SECTION_HEADERS["skills"])
            candidates = self._section_items(section) if section else []
            candidates += self._vocabulary_matches(section.lines if section else split_lines(self.text))
        elif self.extraction_method == "regex":
            candidates = self._vocabulary_matches(split_lines(self.text))
        else:
            raise NotImplementedError(
                f"Extraction method '{self.extraction_method}' is not implemented for SkillsExtractor."
            )

        for skill, start, end, confidence in candidates:
            self._record(skill, start=start, end=end, confidence=confidence)
        return dedupe_case_insensitive([candidate[0] for candidate in candidates])

    def _section_items(self, section: Section) -> List[Tuple[str, int, int, float]]:
        """Split section lines into list items, keeping their offsets."""
        items = []
        for line in section.lines:
            content = line.text
            label = CATEGORY_LABEL_REGEX.match(strip_bullet(content))
            position = content.index(strip_bullet(content)) + (label.end() if label else 0)

            for item in SKILL_SEPARATOR_REGEX.split(content[position:]):
                item_start = content.index(item, position) if item else position
                position = item_start + len(item)

                skill = strip_bullet(item).strip(" .")
                if not skill or len(skill.split(" ")) > MAX_SKILL_WORDS:
                    continue
                items.append((skill, line.start + item_start, line.start + item_start + len(item), CONFIDENCE["medium"]))
        return items

    def _vocabulary_matches(self, lines: List[TextLine]) -> List[Tuple[str, int, int, float]]:
        """First occurrence of every known skill in `lines`, in text order."""
        matches = []
        for skill in self.known_skills:
            pattern = skill_pattern(skill)
            for line in lines:
                match = pattern.search(line.text)
                if match:
                    matches.append((skill, line.start + match.start(), line.start + match.end(), CONFIDENCE["high"]))
                    break
        return sorted(matches, key=lambda candidate: candidate[1])


def extract_skills(text: str, known_skills: Optional[List[str]] = None) -> List[str]:
    """Extract skills from `text`. Pure; never raises on content."""
    return SkillsExtractor(text=text, known_skills=known_skills).extract()
