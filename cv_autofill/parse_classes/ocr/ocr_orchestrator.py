"""ocr_orchestrator.py
Runs OCR engines under a time budget, one engine per attempt, and batches
multi-page documents with per-page failure tolerance.
"""
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from enum import Enum
from typing import Callable, List, Sequence

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.exceptions import (
    OcrError,
    OcrTimeoutError,
    OcrEngineError,
    OcrBatchFailedError,
)
from cv_autofill.logging import LoggerFactory
from cv_autofill.models import ExtractedText, OcrPage
from cv_autofill.parse_classes.ocr.ocr_engine import TesseractEngine

ocr_logger = LoggerFactory().get_logger(
    name="ocr",
    logger_type="ocr",
    console=False
)


class OcrState(Enum):
    """Lifecycle of a single recognition attempt."""
    INIT = "init"
    RECOGNIZING = "recognizing"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


class OcrOrchestrator:
    """
    Orchestrates OCR engine calls for single images and page batches.

    Every call to ``recognize_image`` creates a fresh engine, runs recognition
    on a worker thread and waits at most ``timeout_ms`` for it. The engine is
    terminated on every exit path. After a timeout the engine is discarded and
    the worker is abandoned, so a late result can never leak into another
    call. Nothing is retried here; retry policy belongs to the caller.

    Args:
        engine_factory (Callable[[str], engine]): Builds an engine for a
            language string. The engine must provide
            ``recognize(image_bytes, timeout_s) -> OcrPage`` and ``terminate()``.
            Defaults to ``TesseractEngine``.
        languages (str): Language models loaded by every engine (at minimum
            English, German, French and Italian).

    Example
    -------
    >>> orchestrator = OcrOrchestrator()
    >>> extracted = orchestrator.recognize_images(page_pngs, max_pages=2)
    """

    def __init__(
        self,
        engine_factory: Callable[[str], "TesseractEngine"] = TesseractEngine,
        languages: str = EXTRACTION_DEFAULTS.OCR_LANGUAGES,
    ):
        self.engine_factory = engine_factory
        self.languages = languages

    def recognize_image(
        self,
        image_bytes: bytes,
        timeout_ms: int = EXTRACTION_DEFAULTS.OCR_TIMEOUT_MS
    ) -> ExtractedText:
        """
        Recognize a single image within `timeout_ms`.

        Returns:
            ExtractedText: ``method="ocr"``, ``page_count=1`` and the engine's
            confidence.

        Raises:
            OcrTimeoutError: If the engine did not finish in time.
            OcrEngineError: If the engine could not be created or failed.
        """
        state = OcrState.INIT
        timeout_s = timeout_ms / 1000

        try:
            engine = self.engine_factory(self.languages)
        except Exception as e:
            ocr_logger.error(f"OCR state {state.value} -> {OcrState.FAILED.value}: {e}")
            raise OcrEngineError(str(e)) from e

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ocr")
        try:
            state = OcrState.RECOGNIZING
            future = executor.submit(engine.recognize, image_bytes, timeout_s)
            try:
                page: OcrPage = future.result(timeout=timeout_s)
            except FuturesTimeoutError:
                state = OcrState.TIMED_OUT
                future.cancel()
                raise OcrTimeoutError(timeout_ms)
            except OcrTimeoutError:
                state = OcrState.TIMED_OUT
                raise
            except Exception as e:
                state = OcrState.FAILED
                raise OcrEngineError(str(e)) from e

            state = OcrState.COMPLETED
        finally:
            engine.terminate()
            executor.shutdown(wait=False, cancel_futures=True)
            ocr_logger.debug(f"OCR attempt finished in state `{state.value}`")

        return ExtractedText(
            text=page.text,
            page_count=1,
            method="ocr",
            confidence=page.confidence,
        )

    def recognize_images(
        self,
        buffers: Sequence[bytes],
        max_pages: int = EXTRACTION_DEFAULTS.OCR_MAX_PAGES,
        timeout_ms: int = EXTRACTION_DEFAULTS.OCR_TIMEOUT_MS
    ) -> ExtractedText:
        """
        Recognize the first `max_pages` images of a multi-page document.

        Pages beyond `max_pages` are ignored; callers needing more pages must
        call again. Each page gets its own `timeout_ms` budget. A page that
        fails is logged and skipped.

        Returns:
            ExtractedText: Text of the successful pages joined by a blank line in
            input order, ``page_count`` equal to the number of successful pages
            and ``confidence`` the mean of their confidences (missing ones
            count as 0).

        Raises:
            OcrBatchFailedError: If every processed page failed (or there was no page).
        """
        pages_to_process = list(buffers)[:max_pages]
        texts: List[str] = []
        total_confidence = 0.0
        page_errors: List[OcrError] = []

        for page_number, image_bytes in enumerate(pages_to_process, start=1):
            try:
                result = self.recognize_image(image_bytes, timeout_ms=timeout_ms)
            except OcrError as e:
                ocr_logger.warning(f"Failed to OCR page {page_number}: {e}")
                page_errors.append(e)
                continue

            texts.append(result.text)
            total_confidence += result.confidence or 0

        if not texts:
            raise OcrBatchFailedError(page_errors)

        return ExtractedText(
            text="\n\n".join(texts),
            page_count=len(texts),
            method="ocr",
            confidence=total_confidence / len(texts),
        )
