"""config.py
Holds various defaults for different CV extraction settings.
"""

from dataclasses import dataclass, field

# --------------------------------------------------------------
# SETUP DEFAULT VALUES
# --------------------------------------------------------------
@dataclass
class ExtractionDefaults:
    """
    Default settings for parameters used across the cv_autofill package.
    """
    # ---- ScanDetector settings ----
    SCAN_MIN_TEXT_LENGTH: int = field(
        default = 100,
        metadata = {
            "description": "Texts shorter than this are treated as a failed text-layer read"
    })
    SCAN_MIN_WORD_DENSITY: float = field(
        default = 0.1,
        metadata = {
            "description": "Minimum ratio of word tokens to characters before text looks garbled"
    })
    MAX_PAGE_COUNT: int = field(
        default = 20,
        metadata = {
            "description": "Documents with more pages are rejected before OCR"
    })
    MIN_CONTENT_LENGTH: int = field(
        default = 10,
        metadata = {
            "description": "Minimum stripped text length for a document to count as extractable"
    })

    # ---- OcrOrchestrator settings ----
    OCR_TIMEOUT_MS: int = field(
        default = 60_000,
        metadata = {
            "description": "Time budget per recognized page in milliseconds"
    })
    OCR_MAX_PAGES: int = field(
        default = 2,
        metadata = {
            "description": "Only this many page images are sent through OCR per batch"
    })
    OCR_LANGUAGES: str = field(
        default = "eng+deu+fra+ita",
        metadata = {
            "description": "Tesseract language models loaded for every OCR engine"
    })
    PDF_RENDER_ZOOM: float = field(
        default = 2.0,
        metadata = {
            "description": "Zoom factor used when rendering PDF pages to images for OCR"
    })

    # ---- ProfileExtractor settings ----
    MAX_THREADS: int = field(
        default = 1,
        metadata = {
            "description": "Maximum number of threads to use for field extraction"
    })

    # ---- ResultCache settings ----
    CACHE_TTL_MS: int = field(
        default = 3_600_000,
        metadata = {
            "description": "Lifetime of a cached extraction result in milliseconds"
    })
    CACHE_SWEEP_INTERVAL_MS: int = field(
        default = 300_000,
        metadata = {
            "description": "Minimum time between two full sweeps of expired cache entries"
    })


# Import this where needed
EXTRACTION_DEFAULTS = ExtractionDefaults()
