"""extractor_map.py
Builds and verifies the "extractor_map" dictionary used by ProfileExtractor
to determine which extraction steps are run.
"""
from dataclasses import fields
from typing import Dict, List, Optional

from cv_autofill.exceptions import ExtractorMapConfigError
from cv_autofill.models import CandidateProfileDraft

from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor
from cv_autofill.parse_classes.field_extractor.personal_info_extractor import PersonalInfoExtractor
from cv_autofill.parse_classes.field_extractor.experience_extractor import ExperienceExtractor
from cv_autofill.parse_classes.field_extractor.education_extractor import EducationExtractor
from cv_autofill.parse_classes.field_extractor.skills_extractor import SkillsExtractor
from cv_autofill.parse_classes.field_extractor.language_extractor import LanguageExtractor
from cv_autofill.parse_classes.field_extractor.certificate_extractor import CertificateExtractor
from cv_autofill.parse_classes.field_extractor.highlights_extractor import HighlightsExtractor

# Draft sections an extractor_map may target, in output order
DRAFT_FIELDS = [draft_field.name for draft_field in fields(CandidateProfileDraft)]


def build_default_extractor_map(
    known_skills: Optional[List[str]] = None,
) -> Dict[str, List[FieldExtractor]]:
    """
    Builds the default extractor map used by ProfileExtractor.

    Each draft section maps to a list of extractor instances; later entries
    are fallbacks tried when an earlier extractor raises.

    Args:
        known_skills (Optional[List[str]]): Skill vocabulary passed to the
            skills extractors. Defaults to the built-in vocabulary.

    Returns:
        dict: Mapping of draft section names -> list of extractor instances.

    Example:
        {
            "personal": [PersonalInfoExtractor()],
            "skills": [
                SkillsExtractor(extraction_method="rule"),
                SkillsExtractor(extraction_method="regex")
            ],
            ...
        }
    """
    default_extractor_classes_map = {
        "personal": [
            {"model": PersonalInfoExtractor, "extraction_method": None},
        ],
        "experience": [
            {"model": ExperienceExtractor, "extraction_method": None},
        ],
        "education": [
            {"model": EducationExtractor, "extraction_method": None},
        ],
        "skills": [
            {"model": SkillsExtractor, "extraction_method": "rule", "known_skills": known_skills},
            {"model": SkillsExtractor, "extraction_method": "regex", "known_skills": known_skills},
        ],
        "languages": [
            {"model": LanguageExtractor, "extraction_method": None},
        ],
        "certificates": [
            {"model": CertificateExtractor, "extraction_method": None},
        ],
        "highlights": [
            {"model": HighlightsExtractor, "extraction_method": None},
        ],
    }

    # Instantiate extractors
    extractor_map = {}
    for field_name, entries in default_extractor_classes_map.items():
        extractor_map[field_name] = []
        for entry in entries:
            entry = dict(entry)
            model_cls = entry.pop("model")
            extraction_method = entry.pop("extraction_method") or model_cls.DEFAULT_EXTRACTION_METHOD
            extractor_map[field_name].append(model_cls(extraction_method=extraction_method, **entry))

    # Verify
    verify_extractor_map(extractor_map)

    return extractor_map


def verify_extractor_map(
    extractor_map: Optional[Dict[str, List[FieldExtractor]]]
) -> None:
    """
    Verifies the format and content of the extractor map.

    Checks that:
    1. The extractor_map is a dictionary
    2. All keys are CandidateProfileDraft section names
    3. All values are lists
    4. All items in the lists are FieldExtractor instances

    Raises:
        ExtractorMapConfigError: If any of the conditions above is not met.
    """
    if not isinstance(extractor_map, dict):
        raise ExtractorMapConfigError(
            f"extractor_map must be a dictionary, got {type(extractor_map).__name__}"
        )
    for field_name, extractors in extractor_map.items():
        if not isinstance(field_name, str):
            raise ExtractorMapConfigError(
                f"Field names in extractor_map must be strings, got {type(field_name).__name__}"
            )
        if field_name not in DRAFT_FIELDS:
            raise ExtractorMapConfigError(
                f"Unknown field '{field_name}'. Expected one of {DRAFT_FIELDS}"
            )
        if not isinstance(extractors, list):
            raise ExtractorMapConfigError(
                f"Value for field '{field_name}' must be a list, got {type(extractors).__name__}"
            )
        for extractor in extractors:
            if not isinstance(extractor, FieldExtractor):
                raise ExtractorMapConfigError(
                    f"All items in extractor list for field '{field_name}' must be "
                    f"FieldExtractor instances, got {type(extractor).__name__}"
                )
