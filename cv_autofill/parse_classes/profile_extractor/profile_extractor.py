"""profile_extractor.py
Utilizes FieldExtractor subclasses to turn CV text into a CandidateProfileDraft
plus its provenance trail.
"""
import copy
import multiprocessing
import sys
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.logging import LoggerFactory
from cv_autofill.models import CandidateProfileDraft, FieldProvenanceEntry, ProfileExtraction

from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor
from cv_autofill.parse_classes.field_extractor.helper_functions.normalize_text import normalize_text
from cv_autofill.parse_classes.profile_extractor.helpers.extractor_map import (
    DRAFT_FIELDS,
    build_default_extractor_map,
    verify_extractor_map,
)

# Field extraction failures are logged per draft section
logger_factory = LoggerFactory()


class ProfileExtractor:
    """
    Orchestrates extraction of draft sections using configurable field extractors.

    The extractor_map allows multiple "backup" extractors per section. If one
    extractor raises, the failure is logged and the next in the list is
    attempted. If all fail, the section keeps its empty default.

    Extractors in the map are templates: every run works on shallow copies,
    so one ProfileExtractor can serve concurrent calls and the same text
    always yields the same output.

    Supports parallel extraction using threads. By default, extraction runs
    sequentially. max_threads specifies how many sections can be extracted
    concurrently (cannot exceed available cores on current machine). Output
    is assembled in section order regardless of completion order.

    Attributes:
        extractor_map (Dict[str, List[FieldExtractor]]): Maps draft section
            names to a list of extractor instances to try in order.
        max_threads (int): Maximum threads to use for parallel extraction.
    """
    def __init__(
        self,
        extractor_map: Optional[Dict[str, List[FieldExtractor]]] = None,
        max_threads: int = EXTRACTION_DEFAULTS.MAX_THREADS,
    ):
        """
        Args:
            extractor_map (Optional[Dict[str, List[FieldExtractor]]]):
                Map of draft section names to lists of extractor instances.
                If None, `build_default_extractor_map()` is used.

                Example:
                    {
                        "personal": [PersonalInfoExtractor()],
                        "skills": [SkillsExtractor(), SkillsExtractor(extraction_method="regex")]
                    }
            max_threads (int): Maximum parallel extraction threads. Defaults to 1.

        Raises:
            ExtractorMapConfigError: If `extractor_map` is malformed.
        """
        if extractor_map is None:
            extractor_map = build_default_extractor_map()
        verify_extractor_map(extractor_map)
        self.extractor_map = extractor_map

        # Determine and set max available threads (to parallelize extraction methods)
        self._determine_max_threads(max_threads)

    def _determine_max_threads(self, max_threads: int) -> None:
        """
        Validate and set `self.max_threads` for parallel extraction.

        Ensures that the requested `max_threads` does not exceed the number of
        available CPU cores or the number of sections in `self.extractor_map`.

        Warnings:
            - Issues a warning if `max_threads` is not positive.
            - Issues a warning if `max_threads` exceeds the available CPU cores.
            - Issues a warning if `max_threads` exceeds the number of sections.
        """
        available_cores = multiprocessing.cpu_count()
        num_fields = max(len(self.extractor_map), 1)

        if max_threads <= 0:
            warnings.warn(f"Requested max_threads={max_threads} is invalid. Defaulting to 1 thread.")
            max_threads = 1

        # Don't exceed available core amount
        if max_threads > available_cores:
            warnings.warn(
                f"Requested max_threads={max_threads} exceeds available cores "
                f"({available_cores}). Using {available_cores} instead."
            )
            max_threads = available_cores

        # Don't exceed number of sections we're running extractors for
        if max_threads > num_fields:
            warnings.warn(
                f"Requested max_threads={max_threads} exceeds the number of extraction fields "
                f"({num_fields}). Using {num_fields} instead."
            )
            max_threads = num_fields

        self.max_threads = max_threads

    def _extract_field_with_fallback(
        self,
        field_name: str,
        text: str,
    ) -> Tuple[Any, List[FieldProvenanceEntry]]:
        """
        Extract a single draft section using all configured extractors in order.

        Returns:
            Tuple[Any, List[FieldProvenanceEntry]]: The value of the first
            extractor that did not raise and its provenance, or the section's
            CandidateProfileDraft default and no provenance if all failed.
        """
        for template in self.extractor_map.get(field_name, []):
            extractor = copy.copy(template)
            try:
                extractor.text = text
                value = extractor.extract()
                return value, list(extractor.provenance)
            except Exception as e:
                if not any("pytest" in arg for arg in sys.argv):
                    logger_factory.get_field_logger(field_name).warning(
                        f"Field '{field_name}' failed in extractor '{type(extractor).__name__}': {str(e)}"
                    )
                # Continue to next extractor

        # If all extraction attempts failed for this section then return the draft default
        return getattr(CandidateProfileDraft(), field_name), []

    def extract(self, text: str) -> ProfileExtraction:
        """
        Extract every section in `self.extractor_map` from `text`.

        Sections can be extracted sequentially (max_threads=1) or in parallel
        (max_threads>1) using ThreadPoolExecutor.

        Returns:
            ProfileExtraction: The draft and the provenance of all sections,
            ordered by draft section.
        """
        text = normalize_text(text)
        field_names = [name for name in DRAFT_FIELDS if name in self.extractor_map]

        if self.max_threads == 1:
            # Sequential extraction
            results = [self._extract_field_with_fallback(name, text) for name in field_names]
        else:
            # Parallel extraction; map() keeps submission order
            with ThreadPoolExecutor(max_workers=self.max_threads) as executor:
                results = list(executor.map(
                    lambda name: self._extract_field_with_fallback(name, text),
                    field_names,
                ))

        extraction = ProfileExtraction()
        for field_name, (value, provenance) in zip(field_names, results):
            setattr(extraction.draft, field_name, value)
            extraction.provenance.extend(provenance)
        return extraction


def extract_profile(text: str, profile_extractor: Optional[ProfileExtractor] = None) -> ProfileExtraction:
    """
    Extract a CandidateProfileDraft and its provenance from `text`.

    Pure: the same text always yields an identical result.
    """
    return (profile_extractor or ProfileExtractor()).extract(text)
