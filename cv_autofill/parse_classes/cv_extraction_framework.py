"""cv_extraction_framework.py
Holds framework to orchestrate TextExtractor, OcrOrchestrator, ProfileExtractor
and ResultCache and return an ExtractionResult.
"""
import copy
import dataclasses
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Type

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.exceptions import (
    DocumentTooManyPagesError,
    NoExtractableContentError,
    OcrError,
)
from cv_autofill.logging import LoggerFactory
from cv_autofill.models import (
    CandidateProfileDraft,
    ExtractedText,
    ExtractionMetadata,
    ExtractionResult,
    ProfileExtraction,
)

from cv_autofill.parse_classes.ocr.ocr_orchestrator import OcrOrchestrator
from cv_autofill.parse_classes.profile_extractor.profile_extractor import ProfileExtractor
from cv_autofill.parse_classes.result_cache.fingerprint import fingerprint
from cv_autofill.parse_classes.result_cache.result_cache import ResultCache
from cv_autofill.parse_classes.text_extractor.helpers.check_document_format import check_document_format
from cv_autofill.parse_classes.text_extractor.helpers.scan_detector import looks_scanned, validate_page_count
from cv_autofill.parse_classes.text_extractor.image_extractor import ImageExtractor
from cv_autofill.parse_classes.text_extractor.pdf_extractor import PDFExtractor
from cv_autofill.parse_classes.text_extractor.plain_text_extractor import PlainTextExtractor
from cv_autofill.parse_classes.text_extractor.text_extractor import TextExtractor
from cv_autofill.parse_classes.text_extractor.word_document_extractor import WordDocumentExtractor

framework_logger = LoggerFactory().get_logger(
    name="cv_extraction_framework",
    logger_type="default",
    console=False
)


# Concrete extractors, each declaring the formats it handles
TEXT_EXTRACTORS: List[Type[TextExtractor]] = [
    PDFExtractor,
    WordDocumentExtractor,
    PlainTextExtractor,
    ImageExtractor,
]


def build_format_extractor_map(
    extractors: List[Type[TextExtractor]]
) -> Dict[str, Type[TextExtractor]]:
    """
    Map every canonical format to the extractor declaring it in
    ``SUPPORTED_FORMATS``.

    Raises:
        ValueError: If two extractors declare the same format.
    """
    format_map: Dict[str, Type[TextExtractor]] = {}
    for extractor_class in extractors:
        for document_format in extractor_class.SUPPORTED_FORMATS:
            if document_format in format_map:
                raise ValueError(
                    f"Format '{document_format}' is declared by both "
                    f"{format_map[document_format].__name__} and {extractor_class.__name__}"
                )
            format_map[document_format] = extractor_class
    return format_map


def count_populated_fields(draft: CandidateProfileDraft) -> Dict[str, int]:
    """
    Number of populated values per draft section. For ``personal`` this is
    the number of attributes that are not None.
    """
    counts = {}
    for draft_field in dataclasses.fields(draft):
        value = getattr(draft, draft_field.name)
        if dataclasses.is_dataclass(value):
            counts[draft_field.name] = sum(
                1 for attr in dataclasses.fields(value)
                if getattr(value, attr.name) is not None
            )
        else:
            counts[draft_field.name] = len(value)
    return counts


class CVExtractionFramework:
    """
    Orchestrates the complete CV extraction process, from raw bytes to a
    CandidateProfileDraft with provenance and metadata.

    Combines:
        - ``TextExtractor`` (e.g., :class:`PDFExtractor`, :class:`WordDocumentExtractor`)
        - ``OcrOrchestrator`` for scanned images and scanned PDFs
        - ``ProfileExtractor`` (e.g., :class:`PersonalInfoExtractor`, :class:`SkillsExtractor`)
        - ``ResultCache`` keyed by requester and document fingerprint

    Collaborators can be injected, which is how tests swap in fake OCR
    engines and clocks. The cache is never shared implicitly: pass the same
    ``ResultCache`` to several frameworks to share results between them.

    Parameters
    ----------
    result_cache : ResultCache, optional
        Cache of finished results. A private one is created if not provided.
    ocr_orchestrator : OcrOrchestrator, optional
        Orchestrator used for image documents and the scanned-PDF rescue.
    profile_extractor : ProfileExtractor, optional
        Field extraction orchestrator. Defaults to the default extractor map.
    ocr_timeout_ms : int, optional
        Time budget per OCR'd page.
    ocr_max_pages : int, optional
        Number of PDF pages rendered and sent through OCR during a rescue.
    max_page_count : int, optional
        PDFs with more pages are rejected before any OCR is attempted.
    min_content_length : int, optional
        Minimum stripped text length for a document to be extractable.

    Example
    -------
    >>> framework = CVExtractionFramework()
    >>> with open("path/to/cv.pdf", "rb") as f:
    ...     result = framework.process_document(f.read(), "pdf", requester_id="user-1")
    >>> result.draft.personal.email
    'jane.doe@example.com'
    """

    FORMAT_EXTRACTOR_MAP: Dict[str, Type[TextExtractor]] = build_format_extractor_map(TEXT_EXTRACTORS)

    def __init__(
        self,
        result_cache: Optional[ResultCache] = None,
        ocr_orchestrator: Optional[OcrOrchestrator] = None,
        profile_extractor: Optional[ProfileExtractor] = None,
        ocr_timeout_ms: int = EXTRACTION_DEFAULTS.OCR_TIMEOUT_MS,
        ocr_max_pages: int = EXTRACTION_DEFAULTS.OCR_MAX_PAGES,
        max_page_count: int = EXTRACTION_DEFAULTS.MAX_PAGE_COUNT,
        min_content_length: int = EXTRACTION_DEFAULTS.MIN_CONTENT_LENGTH,
    ):
        self.result_cache = result_cache if result_cache is not None else ResultCache()
        self.ocr_orchestrator = ocr_orchestrator or OcrOrchestrator()
        self.profile_extractor = profile_extractor or ProfileExtractor()

        self.ocr_timeout_ms = ocr_timeout_ms
        self.ocr_max_pages = ocr_max_pages
        self.max_page_count = max_page_count
        self.min_content_length = min_content_length

    def _build_text_extractor(self, document_format: str) -> TextExtractor:
        """Instantiate the TextExtractor registered for a canonical format."""
        extractor_class = self.FORMAT_EXTRACTOR_MAP[document_format]
        if extractor_class is ImageExtractor:
            return ImageExtractor(
                ocr_orchestrator=self.ocr_orchestrator,
                timeout_ms=self.ocr_timeout_ms
            )
        return extractor_class()

    # --------------------------------------------------------------
    # TEXT ACQUISITION
    # --------------------------------------------------------------
    def acquire_text(self, document_bytes: bytes, declared_format: str) -> ExtractedText:
        """
        Select the extractor for `declared_format` and read the document.

        The bytes are never sniffed; the declared format alone decides which
        extractor is used.

        Raises:
            UnsupportedFormatError: If no extractor handles `declared_format`.
            MalformedDocumentError: If the container cannot be read.
            OcrError: If an image document cannot be recognized.
        """
        document_format = check_document_format(
            declared_format=declared_format,
            supported_formats=self.FORMAT_EXTRACTOR_MAP.keys()
        )
        return self._build_text_extractor(document_format).extract(document_bytes)

    def maybe_rescue_via_ocr(
        self,
        extracted_text: ExtractedText,
        image_renderings: List[bytes],
    ) -> ExtractedText:
        """
        Replace a text-layer read that looks scanned with the OCR of its page
        renderings.

        Text that was already produced by OCR, or that does not look scanned,
        is returned unchanged, as is text without any rendering to OCR. If
        OCR fails the raw text is kept as long as it is not blank.

        Raises:
            OcrError: If OCR failed and the raw text is blank.
        """
        if extracted_text.method == "ocr" or not image_renderings:
            return extracted_text
        if not looks_scanned(extracted_text.text):
            return extracted_text

        framework_logger.info("Text layer looks scanned, attempting OCR")
        try:
            return self.ocr_orchestrator.recognize_images(
                image_renderings,
                max_pages=self.ocr_max_pages,
                timeout_ms=self.ocr_timeout_ms,
            )
        except OcrError as e:
            if not extracted_text.text.strip():
                raise
            framework_logger.error(f"OCR fallback failed, keeping raw text: {e}")
            return extracted_text

    # --------------------------------------------------------------
    # FIELD EXTRACTION
    # --------------------------------------------------------------
    def extract_profile(self, text: str) -> ProfileExtraction:
        """Run the ProfileExtractor over `text`. Never raises on content."""
        return self.profile_extractor.extract(text)

    # --------------------------------------------------------------
    # RESULT CACHE
    # --------------------------------------------------------------
    def cache_lookup(self, requester_id: str, document_bytes: bytes) -> Optional[ExtractionResult]:
        """
        Return the cached result of this requester for these bytes, or None.

        Cache failures are logged and reported as a miss.
        """
        try:
            return self.result_cache.get(fingerprint(document_bytes), requester_id)
        except Exception as e:
            framework_logger.error(f"Cache lookup failed, treating as miss: {e}")
            return None

    def cache_store(self, requester_id: str, document_bytes: bytes, result: ExtractionResult) -> None:
        """
        Store a deep copy of `result` for this requester and these bytes. The
        cached entry is never shared with callers. Failures are logged only.
        """
        try:
            self.result_cache.put(fingerprint(document_bytes), requester_id, copy.deepcopy(result))
        except Exception as e:
            framework_logger.error(f"Cache store failed: {e}")

    def cache_invalidate(self, requester_id: str, document_bytes: bytes) -> None:
        """Drop the cached result of this requester for these bytes. Failures are logged only."""
        try:
            self.result_cache.invalidate(fingerprint(document_bytes), requester_id)
        except Exception as e:
            framework_logger.error(f"Cache invalidation failed: {e}")

    # --------------------------------------------------------------
    # FULL PIPELINE
    # --------------------------------------------------------------
    def process_document(
        self,
        document_bytes: bytes,
        declared_format: str,
        requester_id: str,
        file_name: Optional[str] = None,
    ) -> ExtractionResult:
        """
        Full pipeline: cache lookup → text acquisition → optional OCR rescue →
        field extraction → cache store.

        A cache hit short-circuits everything and is returned with
        ``metadata.cached`` set to True.

        Returns:
            ExtractionResult: Draft, provenance and metadata.

        Raises:
            UnsupportedFormatError: If no extractor handles `declared_format`.
            MalformedDocumentError: If the container cannot be read.
            DocumentTooManyPagesError: If a PDF has more than `max_page_count` pages.
            OcrError: If OCR fails and there is no raw text to fall back to.
            NoExtractableContentError: If the final text is shorter than
                `min_content_length` after all fallbacks.
        """
        started = time.perf_counter()

        cached_result = self.cache_lookup(requester_id, document_bytes)
        if cached_result is not None:
            framework_logger.info(f"Cache hit for requester '{requester_id}'")
            hit = copy.deepcopy(cached_result)
            hit.metadata.cached = True
            return hit

        document_format = check_document_format(
            declared_format=declared_format,
            supported_formats=self.FORMAT_EXTRACTOR_MAP.keys()
        )
        extractor = self._build_text_extractor(document_format)
        acquired = extractor.extract(document_bytes)

        extracted = acquired
        if isinstance(extractor, PDFExtractor):
            if not validate_page_count(acquired.page_count, self.max_page_count):
                raise DocumentTooManyPagesError(acquired.page_count, self.max_page_count)
            if looks_scanned(acquired.text):
                renderings = extractor.render_pages(document_bytes, max_pages=self.ocr_max_pages)
                extracted = self.maybe_rescue_via_ocr(acquired, renderings)

        text_length = len(extracted.text.strip())
        if text_length < self.min_content_length:
            raise NoExtractableContentError(text_length, self.min_content_length)

        profile = self.extract_profile(extracted.text)

        metadata = ExtractionMetadata(
            file_format=document_format,
            file_size=len(document_bytes),
            page_count=acquired.page_count,
            extraction_method=extracted.method,
            processing_time_ms=int((time.perf_counter() - started) * 1000),
            timestamp=datetime.now(timezone.utc).isoformat(),
            fingerprint=fingerprint(document_bytes),
            file_name=file_name,
            ocr_confidence=extracted.confidence if extracted.method == "ocr" else None,
            field_counts=count_populated_fields(profile.draft),
        )
        result = ExtractionResult(
            draft=profile.draft,
            provenance=profile.provenance,
            metadata=metadata,
        )

        self.cache_store(requester_id, document_bytes, result)
        return result
