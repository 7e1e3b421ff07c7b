"""test_ocr_orchestrator.py
Run tests on OcrOrchestrator with fake OCR engines
"""
import pytest

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.exceptions import (
    OcrError,
    OcrTimeoutError,
    OcrEngineError,
    OcrBatchFailedError,
)
from cv_autofill.models import ExtractedText

from cv_autofill.parse_classes.ocr.ocr_orchestrator import OcrOrchestrator

from cv_autofill.test_helpers.dummy_classes import FAIL_IMAGE, SLOW_IMAGE, TIMEOUT_IMAGE, FakeOcrEngineFactory


# ---------------------------------------------------------------------------
# Single image
# ---------------------------------------------------------------------------
class TestRecognizeImage:
    """Tests for OcrOrchestrator.recognize_image."""

    def test_successful_recognition(self, fake_engine_factory, fake_ocr_orchestrator):
        """Text and confidence of the engine are wrapped in an ExtractedText."""
        result = fake_ocr_orchestrator.recognize_image(b"Jane Doe")

        assert isinstance(result, ExtractedText)
        assert result.text == "Jane Doe"
        assert result.page_count == 1
        assert result.method == "ocr"
        assert result.confidence == 90.0

    def test_engine_is_configured_with_languages(self, fake_engine_factory, fake_ocr_orchestrator):
        """Engines load the multi-language model set."""
        fake_ocr_orchestrator.recognize_image(b"text")
        assert fake_engine_factory.engines[0].languages == EXTRACTION_DEFAULTS.OCR_LANGUAGES
        for language in ["eng", "deu", "fra", "ita"]:
            assert language in fake_engine_factory.engines[0].languages

    def test_fresh_engine_per_call_and_released(self, fake_engine_factory, fake_ocr_orchestrator):
        """Every call gets its own engine, and every engine is terminated afterwards."""
        fake_ocr_orchestrator.recognize_image(b"first")
        fake_ocr_orchestrator.recognize_image(b"second")

        assert len(fake_engine_factory.engines) == 2
        assert fake_engine_factory.engines[0] is not fake_engine_factory.engines[1]
        assert all(engine.terminated for engine in fake_engine_factory.engines)
        assert all(engine.calls == 1 for engine in fake_engine_factory.engines)

    def test_timeout_raises_and_discards_engine(self):
        """A slow engine is abandoned after timeout_ms and never reused."""
        factory = FakeOcrEngineFactory(delay_s=0.5)
        orchestrator = OcrOrchestrator(engine_factory=factory)

        with pytest.raises(OcrTimeoutError) as exc_info:
            orchestrator.recognize_image(SLOW_IMAGE, timeout_ms=20)

        assert exc_info.value.timeout_ms == 20
        assert isinstance(exc_info.value, OcrError)
        assert factory.engines[0].terminated is True

        # The next call works with a new engine
        result = orchestrator.recognize_image(b"after timeout", timeout_ms=1000)
        assert result.text == "after timeout"
        assert len(factory.engines) == 2

    def test_engine_side_timeout_stays_a_timeout(self, fake_engine_factory, fake_ocr_orchestrator):
        """A timeout raised by the engine itself is not turned into OcrEngineError."""
        with pytest.raises(OcrTimeoutError) as exc_info:
            fake_ocr_orchestrator.recognize_image(TIMEOUT_IMAGE, timeout_ms=1000)

        assert not isinstance(exc_info.value, OcrEngineError)
        assert exc_info.value.timeout_ms == 1000
        assert fake_engine_factory.engines[0].terminated is True

    def test_engine_failure_raises_engine_error(self, fake_engine_factory, fake_ocr_orchestrator):
        """An exception inside the engine becomes OcrEngineError and the engine is still released."""
        with pytest.raises(OcrEngineError) as exc_info:
            fake_ocr_orchestrator.recognize_image(FAIL_IMAGE)

        assert "unreadable image" in str(exc_info.value)
        assert fake_engine_factory.engines[0].terminated is True

    def test_engine_creation_failure_raises_engine_error(self):
        """Failing to build an engine (e.g. missing models) is an OcrEngineError."""
        orchestrator = OcrOrchestrator(engine_factory=FakeOcrEngineFactory(fail_on_create=True))
        with pytest.raises(OcrEngineError):
            orchestrator.recognize_image(b"text")


# ---------------------------------------------------------------------------
# Page batches
# ---------------------------------------------------------------------------
class TestRecognizeImages:
    """Tests for OcrOrchestrator.recognize_images."""

    def test_partial_failure_keeps_successful_pages(self, fake_ocr_orchestrator):
        """Page 2 fails: pages 1 and 3 are joined in order and page_count is 2."""
        result = fake_ocr_orchestrator.recognize_images(
            [b"page one", FAIL_IMAGE, b"page three"],
            max_pages=3,
        )

        assert result.text == "page one\n\npage three"
        assert result.page_count == 2
        assert result.method == "ocr"
        assert result.confidence == 90.0

    def test_total_failure_raises_batch_failed(self, fake_ocr_orchestrator):
        """If every page fails the per-page errors are carried by OcrBatchFailedError."""
        with pytest.raises(OcrBatchFailedError) as exc_info:
            fake_ocr_orchestrator.recognize_images([FAIL_IMAGE, FAIL_IMAGE])

        page_errors = exc_info.value.page_errors
        assert len(page_errors) == 2
        assert all(isinstance(err, OcrEngineError) for err in page_errors)

    def test_no_pages_raises_batch_failed(self, fake_ocr_orchestrator):
        """An empty batch has nothing to return."""
        with pytest.raises(OcrBatchFailedError) as exc_info:
            fake_ocr_orchestrator.recognize_images([])
        assert exc_info.value.page_errors == []

    def test_only_first_max_pages_are_processed(self, fake_engine_factory, fake_ocr_orchestrator):
        """Pages beyond max_pages are ignored (default is 2)."""
        result = fake_ocr_orchestrator.recognize_images([b"a", b"b", b"c"])

        assert result.text == "a\n\nb"
        assert result.page_count == 2
        assert len(fake_engine_factory.engines) == 2

    def test_timed_out_page_is_skipped(self):
        """A page that exceeds its own budget is skipped like any failed page."""
        orchestrator = OcrOrchestrator(engine_factory=FakeOcrEngineFactory(delay_s=0.5))
        result = orchestrator.recognize_images([SLOW_IMAGE, b"fast page"], timeout_ms=20)

        assert result.text == "fast page"
        assert result.page_count == 1

    def test_missing_confidence_counts_as_zero(self):
        """Pages without a confidence pull the mean towards 0."""
        orchestrator = OcrOrchestrator(engine_factory=FakeOcrEngineFactory(confidence=None))
        result = orchestrator.recognize_images([b"a", b"b"])
        assert result.confidence == 0.0
