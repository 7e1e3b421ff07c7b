"""field_extractor.py
Holds abstract FieldExtractor class inherited by the CV section extractors.
"""
import functools
import re
from abc import ABC, abstractmethod
from typing import Any, List, Literal, Optional

from cv_autofill.exceptions import FieldExtractionConfigError
from cv_autofill.models import FieldProvenanceEntry, SourceSpan

from cv_autofill.parse_classes.field_extractor.helper_functions.normalize_text import normalize_text

# Define allowed extraction methods (if implemented)
EXTRACTION_METHODS = Literal[
    "regex",
    "rule"
]

# Provenance confidence per kind of evidence
CONFIDENCE = {
    "high": 0.9,    # labelled value or unambiguous pattern
    "medium": 0.6,  # positional / layout heuristic
    "low": 0.3,     # value inferred or defaulted
}


class FieldExtractor(ABC):
    """
    Abstract base class for extracting one part of a CandidateProfileDraft
    from CV text. Concrete extractors must implement the `extract` method.

    Every extractor works on normalized text (see `normalize_text`), never
    raises on content, and records a FieldProvenanceEntry for every candidate
    value it sees in `self.provenance`. `extract` resets the provenance trail
    on every call, so an instance holds the trail of its latest run only.

    Extraction Methods:
        - regex: Uses regular expressions to identify patterns in text.
        - rule: Uses section detection, keyword matching and layout heuristics.
    """
    # Define supported methods and a default method in each subclass (define in each child)
    SUPPORTED_EXTRACTION_METHODS: List[str] = []
    DEFAULT_EXTRACTION_METHOD = None

    # Draft path used for provenance entries, e.g. "experience" (define in each child)
    FIELD_NAME: str = ""

    # Define common regex queries that might be used in different subclasses
    COMMON_REGEX: dict = {
        # Email address: Covers standardized email format
        "email_address": r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b",
        # Phone Number: Covers common North American formats:
        # -> `+1 123-456-7890`, `(123) 456-7890`, `123-456-7890`, `123.456.7890`
        "phone_number": (
            r"(?<![\d+])(\+?\d{1,3}[\s.-]?)?"  # Optional country code
            r"(\(?\d{3}\)?[\s.-]?)"            # Area code with optional parentheses
            r"\d{3}[\s.-]?\d{4}(?!\d)"         # Local number
        ),
        # International: `+41 79 123 45 67`, `+49 (0)30 1234 5678`
        "international_phone_number": (
            r"(?<![\w+])\+\d{1,3}[\s.-]?(?:\(0\)[\s.-]?)?\d{1,4}(?:[\s.-]?\d{2,4}){2,4}(?!\d)"
        ),
        # Swiss national format: `079 123 45 67`, `044 123 45 67`
        "swiss_phone_number": r"(?<!\d)0\d{2}[\s.-]?\d{3}[\s.-]?\d{2}[\s.-]?\d{2}(?!\d)",
    }

    def __init__(
        self,
        text: Optional[str] = None,
        extraction_method: Optional[EXTRACTION_METHODS] = None,
    ):
        """
        Args:
            text (str | None): CV text to extract from. Normalized on assignment.
            extraction_method (EXTRACTION_METHODS | None): Which extraction strategy to use.
                Defaults to the subclass's default method.
        """
        self.text = text
        self.extraction_method = extraction_method
        self.provenance: List[FieldProvenanceEntry] = []

        # Check that the current extraction method is valid (for subclass)
        self._validate_extraction_method()

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: Optional[str]) -> None:
        self._text = normalize_text(value) if value else ""

    @staticmethod
    def _requires_text(func):
        """Decorator resetting provenance and short-circuiting to the empty value on blank text."""
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            self.provenance = []
            if not self.text:
                return self.empty_value()
            return func(self, *args, **kwargs)
        return wrapper

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "extract" in cls.__dict__:
            cls.extract = cls._requires_text(cls.extract)

    def _validate_extraction_method(self) -> None:
        """
        Validate and set the extraction method for the FieldExtractor instance.

        If no method is provided, it defaults to the class's `DEFAULT_EXTRACTION_METHOD`.

        Raises:
            NotImplementedError: If `extraction_method` is not in
                `SUPPORTED_EXTRACTION_METHODS`.
            FieldExtractionConfigError: If no `SUPPORTED_EXTRACTION_METHODS` are
                defined in the subclass.
        """
        if not self.SUPPORTED_EXTRACTION_METHODS:
            raise FieldExtractionConfigError(
                field_name=self.FIELD_NAME or None,
                message=f"{self.__class__.__name__} must define SUPPORTED_EXTRACTION_METHODS",
            )

        if self.extraction_method:
            # Non acceptable extracted method for specific FieldExtractor Subclass
            if self.extraction_method not in self.SUPPORTED_EXTRACTION_METHODS:
                raise NotImplementedError(
                    f"Unsupported extraction_method '{self.extraction_method}' for {self.__class__.__name__}"
                )
        else:
            self.extraction_method = self.DEFAULT_EXTRACTION_METHOD

    def empty_value(self) -> Any:
        """Value returned when nothing can be extracted. Lists by default."""
        return []

    @abstractmethod
    def extract(self) -> Any:
        """
        Extract the field from `self.text` using the chosen `extraction_method`.

        Never raises on content: absence of a match returns `empty_value()`.

        Returns:
            Any: The extracted fragment of the draft.

        Raises:
            NotImplementedError: If the extraction method is not implemented.
        """
        pass

    # ----------------------
    # PROVENANCE
    # ----------------------
    def _record(
        self,
        value: Any,
        start: Optional[int] = None,
        end: Optional[int] = None,
        confidence: Optional[float] = None,
        target_field: Optional[str] = None,
    ) -> None:
        """Append a provenance entry for `value` found at text[start:end]."""
        span = None
        if start is not None and end is not None:
            span = SourceSpan(start=start, end=end, text=self.text[start:end])
        self.provenance.append(
            FieldProvenanceEntry(
                target_field=target_field or self.FIELD_NAME,
                extracted_value=value,
                source_span=span,
                confidence=confidence,
            )
        )

    # ----------------------
    # REGEX HANDLING
    # ----------------------
    def _regex_find_all(
        self,
        pattern: str,
        ignore_case: bool = True,
        text: Optional[str] = None,
    ) -> List[re.Match]:
        """
        Return every match of `pattern`, in order of appearance.

        Args:
            pattern (str): Regex to search for.
            ignore_case (bool): Whether to ignore case in matching. Defaults to True.
            text (str | None): Search this text instead of `self.text`.
        """
        flags = re.IGNORECASE if ignore_case else 0
        return list(re.finditer(pattern, self.text if text is None else text, flags=flags))
