"""exceptions.py
Defines custom exceptions for this project.
"""
from typing import Optional, List, Iterable

# ------------------------ Text Acquisition Errors ------------------------
class ExtractionError(Exception):
    """Base exception for text acquisition and OCR errors."""
    pass

class UnsupportedFormatError(ExtractionError):
    """Raised when the declared document format has no matching extractor."""
    def __init__(
        self,
        declared_format: str,
        supported_formats: Iterable[str],
        context: Optional[str] = None
    ):
        self.declared_format = declared_format
        self.supported_formats = list(supported_formats)
        message = (
            f"Document format '{declared_format}' is not supported. "
            f"Supported formats: {self.supported_formats}"
        )
        if context:
            message += f" Context: {context}"
        super().__init__(message)


class MalformedDocumentError(ExtractionError):
    """Raised when a document container cannot be opened or read."""
    def __init__(self, document_format: str, original_error: str):
        super().__init__(
            f"Failed to open or read {document_format} document. Original error: {original_error}"
        )
        self.document_format = document_format
        self.original_error = original_error


class NoExtractableContentError(ExtractionError):
    """Raised when text acquisition succeeded but yielded (almost) no text after all fallbacks."""
    def __init__(self, text_length: int, min_length: int, message: str | None = None):
        self.text_length = text_length
        self.min_length = min_length
        if message is None:
            message = (
                f"Document contains no extractable text "
                f"({text_length} characters, at least {min_length} required)."
            )
        super().__init__(message)


class DocumentTooManyPagesError(ExtractionError):
    """Raised when a document exceeds the allowed page count."""
    def __init__(self, page_count: int, max_pages: int):
        super().__init__(
            f"Document has {page_count} pages, which exceeds the max allowed {max_pages} pages."
        )
        self.page_count = page_count
        self.max_pages = max_pages

# ------------------------ OCR Errors ------------------------
class OcrError(ExtractionError):
    """Base exception for OCR errors."""
    pass

class OcrTimeoutError(OcrError):
    """Raised when recognizing a single image exceeds its time budget."""
    def __init__(self, timeout_ms: int):
        super().__init__(f"OCR did not finish within {timeout_ms} ms.")
        self.timeout_ms = timeout_ms


class OcrEngineError(OcrError):
    """Raised when the OCR engine fails to recognize an image."""
    def __init__(self, original_error: str, page_number: Optional[int] = None):
        message = f"OCR engine failed: {original_error}"
        if page_number is not None:
            message = f"OCR engine failed on page {page_number}: {original_error}"
        super().__init__(message)
        self.original_error = original_error
        self.page_number = page_number


class OcrBatchFailedError(OcrError):
    """
    Raised when every page of a multi-page OCR batch failed.

    Attributes:
        page_errors (list[OcrError]): The error of each attempted page, in page order.
    """
    def __init__(self, page_errors: List[OcrError]):
        self.page_errors = page_errors
        details = "; ".join(
            f"page {i}: {err}" for i, err in enumerate(page_errors, start=1)
        )
        message = f"Failed to extract text from any of {len(page_errors)} page(s) via OCR"
        if details:
            message += f" ({details})"
        super().__init__(message)

# ------------------------ Field Extraction Errors ------------------------
class FieldExtractionConfigError(Exception):
    """
    Raised when a FieldExtractor instance is configured incorrectly.

    Attributes:
        field_name (str | None): The name of the field being extracted (optional).
        message (str): Human-readable description of the error.
    """
    def __init__(self, field_name: str | None = None, message: str = "Invalid field extractor configuration"):
        self.field_name = field_name
        self.message = message
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.field_name:
            return f"{self.message}: {self.field_name}"
        return self.message

# ------------------------ Extractor Map Errors ------------------------
class ExtractorMapConfigError(Exception):
    """
    Raised when the extractor_map configuration is invalid.
    Provides a clear message about what went wrong.
    """
    def __init__(self, message: str):
        super().__init__(f"ExtractorMapConfigError: {message}")
