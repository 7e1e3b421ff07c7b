"""models.py
Holds standardized data models used across various functions.
"""
from typing import List, Optional, Dict, Literal, Any
from dataclasses import dataclass, field

# Which pipeline produced a piece of text
EXTRACTION_METHOD = Literal["text", "ocr"]

# CEFR levels plus native speaker
LANGUAGE_LEVEL = Literal["A1", "A2", "B1", "B2", "C1", "C2", "Native"]

# Sentinel used for ongoing experience / education entries
PRESENT = "present"


@dataclass(frozen=True)
class ExtractedText:
    """
    Result of raw text acquisition from a single document.

    Attributes:
        text (str): Extracted textual content. May be empty.
        page_count (int): Number of pages the text was taken from.
        method (EXTRACTION_METHOD): "text" for text-layer reads, "ocr" for OCR.
        confidence (Optional[float]): OCR engine confidence (0-100). Only
            meaningful when `method` is "ocr".
    """
    text: str
    page_count: int
    method: EXTRACTION_METHOD
    confidence: Optional[float] = None


@dataclass(frozen=True)
class OcrPage:
    """Raw output of one OCR engine call."""
    text: str
    confidence: Optional[float] = None


# --------------------------------------------------------------
# CANDIDATE PROFILE DRAFT
# --------------------------------------------------------------
@dataclass
class PersonalInfo:
    """
    Personal and contact details of the candidate. Any field that could not be
    found in the source text stays None.
    """
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    canton: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    target_role: Optional[str] = None
    photo_url: Optional[str] = None
    nationality: Optional[str] = None


@dataclass
class ExperienceEntry:
    """
    A single work experience entry.

    Attributes:
        end_date (Optional[str]): Normalized date, the literal "present" for an
            ongoing position, or None if unknown.
    """
    role: str
    company: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None
    technologies: List[str] = field(default_factory=list)


@dataclass
class EducationEntry:
    degree: str
    institution: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass
class LanguageEntry:
    language: str
    level: LANGUAGE_LEVEL


@dataclass
class CertificateEntry:
    name: str
    issuer: Optional[str] = None
    date: Optional[str] = None


@dataclass
class CandidateProfileDraft:
    """
    Stores structured information extracted from a CV.

    The draft is a best-effort extraction. Nothing in it is validated as
    factually correct and every populated value has at least one matching
    FieldProvenanceEntry.

    Attributes:
        skills (List[str]): Skills with set semantics (no case-insensitive
            duplicates), kept in first-seen order.
    """
    personal: PersonalInfo = field(default_factory=PersonalInfo)
    experience: List[ExperienceEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    languages: List[LanguageEntry] = field(default_factory=list)
    certificates: List[CertificateEntry] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)


# --------------------------------------------------------------
# PROVENANCE
# --------------------------------------------------------------
@dataclass(frozen=True)
class SourceSpan:
    """
    Location of a match inside the normalized text.

    Attributes:
        start (int): Offset of the first matched character.
        end (int): Offset one past the last matched character.
        text (str): The matched text itself.
    """
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class FieldProvenanceEntry:
    """
    Links an extracted value back to where it was found.

    Several entries may exist for the same `target_field` when more than one
    candidate matched; resolving them is up to the consumer.

    Attributes:
        target_field (str): Dotted draft path, e.g. "personal.email" or "experience".
        extracted_value (Any): The value as extracted.
        source_span (Optional[SourceSpan]): Where the value was found.
        confidence (Optional[float]): Heuristic confidence in [0, 1].
    """
    target_field: str
    extracted_value: Any
    source_span: Optional[SourceSpan] = None
    confidence: Optional[float] = None


@dataclass
class ProfileExtraction:
    """Output of ProfileExtractor: the draft plus its provenance trail."""
    draft: CandidateProfileDraft = field(default_factory=CandidateProfileDraft)
    provenance: List[FieldProvenanceEntry] = field(default_factory=list)


# --------------------------------------------------------------
# METADATA AND FULL RESULT
# --------------------------------------------------------------
@dataclass
class ExtractionMetadata:
    """
    Envelope returned alongside a draft for the caller to surface.

    Attributes:
        field_counts (Dict[str, int]): Number of populated values per draft section.
        timestamp (str): ISO-8601 UTC time the extraction finished.
        cached (bool): True when the result was served from the ResultCache.
    """
    file_format: str
    file_size: int
    page_count: int
    extraction_method: EXTRACTION_METHOD
    processing_time_ms: int
    timestamp: str
    fingerprint: str
    file_name: Optional[str] = None
    ocr_confidence: Optional[float] = None
    cached: bool = False
    field_counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class ExtractionResult:
    """Complete output of CVExtractionFramework.process_document()."""
    draft: CandidateProfileDraft
    provenance: List[FieldProvenanceEntry]
    metadata: ExtractionMetadata


# --------------------------------------------------------------
# RESULT CACHE
# --------------------------------------------------------------
@dataclass
class CacheEntry:
    """
    A cached extraction result. Timestamps are in milliseconds of the cache clock.
    """
    result: Any
    created_at: float
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    size: int
    oldest_entry_age_ms: float
