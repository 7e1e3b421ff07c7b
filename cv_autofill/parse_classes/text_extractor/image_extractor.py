"""image_extractor.py

Holds ImageExtractor class which reads scanned images through OCR.
"""
from typing import Optional

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.models import ExtractedText
from cv_autofill.parse_classes.ocr.ocr_orchestrator import OcrOrchestrator
from cv_autofill.parse_classes.text_extractor.text_extractor import TextExtractor


class ImageExtractor(TextExtractor):
    """
    Concrete extractor for scanned images (.png, .jpg, .tiff, ...).

    Delegates to ``OcrOrchestrator.recognize_image`` so the image is read under
    the orchestrator's time budget and engine lifecycle rules.

    Args:
        ocr_orchestrator (OcrOrchestrator | None): Orchestrator to use. A
            default one is created if not provided.
        timeout_ms (int): Time budget for recognizing the image.
    """
    SUPPORTED_FORMATS = ["png", "jpg", "jpeg", "tif", "tiff", "bmp"]

    def __init__(
        self,
        ocr_orchestrator: Optional[OcrOrchestrator] = None,
        timeout_ms: int = EXTRACTION_DEFAULTS.OCR_TIMEOUT_MS
    ):
        self.ocr_orchestrator = ocr_orchestrator or OcrOrchestrator()
        self.timeout_ms = timeout_ms

    def extract(self, document_bytes: bytes) -> ExtractedText:
        """
        Raises:
            OcrTimeoutError: If recognition exceeds ``self.timeout_ms``.
            OcrEngineError: If the OCR engine cannot read the image.
        """
        return self.ocr_orchestrator.recognize_image(
            document_bytes,
            timeout_ms=self.timeout_ms
        )
