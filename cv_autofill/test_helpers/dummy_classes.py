"""dummy_classes.py
Holds dummy classes for abstract classes and fakes for slow or external
collaborators (OCR engines, clocks) to test with
"""
import time
from typing import List, Optional

from cv_autofill.exceptions import OcrTimeoutError
from cv_autofill.models import OcrPage
from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE


# Dummy subclass for testing where needed
class DummyExtractor(FieldExtractor):
    """A dummy FieldExtractor subclass for testing."""
    SUPPORTED_EXTRACTION_METHODS = ["regex", "rule"]
    DEFAULT_EXTRACTION_METHOD = "regex"
    FIELD_NAME = "highlights"

    def extract(self) -> List[str]:
        # Minimal implementation for testing
        self._record("dummy", start=0, end=min(5, len(self.text)), confidence=CONFIDENCE["low"])
        return ["dummy"]


class FailingExtractor(FieldExtractor):
    """A FieldExtractor that always raises, to exercise fallbacks."""
    SUPPORTED_EXTRACTION_METHODS = ["rule"]
    DEFAULT_EXTRACTION_METHOD = "rule"
    FIELD_NAME = "highlights"

    def extract(self) -> List[str]:
        raise RuntimeError("extractor exploded")


# --------------------------------------------------------------
# OCR
# --------------------------------------------------------------
# Image payloads that make a FakeOcrEngine misbehave
FAIL_IMAGE = b"FAIL"
SLOW_IMAGE = b"SLOW"
TIMEOUT_IMAGE = b"TIMEOUT"


class FakeOcrEngine:
    """
    Stand-in for TesseractEngine.

    Returns `text` for every image (or the image bytes decoded as UTF-8 when
    `text` is None). Images starting with FAIL_IMAGE raise, images starting
    with SLOW_IMAGE sleep `delay_s` first, images starting with TIMEOUT_IMAGE
    fail the way TesseractEngine does when tesseract itself is killed.
    """

    def __init__(
        self,
        languages: str,
        text: Optional[str] = None,
        confidence: Optional[float] = 90.0,
        delay_s: float = 0.0,
    ):
        self.languages = languages
        self.text = text
        self.confidence = confidence
        self.delay_s = delay_s
        self.terminated = False
        self.calls = 0

    def recognize(self, image_bytes: bytes, timeout_s: Optional[float] = None) -> OcrPage:
        if self.terminated:
            raise RuntimeError("engine has been terminated")
        self.calls += 1

        if image_bytes.startswith(FAIL_IMAGE):
            raise RuntimeError("unreadable image")
        if image_bytes.startswith(SLOW_IMAGE):
            time.sleep(self.delay_s)
        if image_bytes.startswith(TIMEOUT_IMAGE):
            raise OcrTimeoutError(int((timeout_s or 0) * 1000))

        text = self.text if self.text is not None else image_bytes.decode("utf-8", errors="replace")
        return OcrPage(text=text, confidence=self.confidence)

    def terminate(self) -> None:
        self.terminated = True


class FakeOcrEngineFactory:
    """
    Engine factory for OcrOrchestrator that keeps every engine it created,
    so tests can check that each attempt got a fresh, terminated engine.
    """

    def __init__(
        self,
        text: Optional[str] = None,
        confidence: Optional[float] = 90.0,
        delay_s: float = 0.0,
        fail_on_create: bool = False,
    ):
        self.text = text
        self.confidence = confidence
        self.delay_s = delay_s
        self.fail_on_create = fail_on_create
        self.engines: List[FakeOcrEngine] = []

    def __call__(self, languages: str) -> FakeOcrEngine:
        if self.fail_on_create:
            raise RuntimeError("language models missing")
        engine = FakeOcrEngine(
            languages,
            text=self.text,
            confidence=self.confidence,
            delay_s=self.delay_s,
        )
        self.engines.append(engine)
        return engine


# --------------------------------------------------------------
# CLOCK
# --------------------------------------------------------------
class FakeClock:
    """Millisecond clock for ResultCache that only moves when told to."""

    def __init__(self, now_ms: float = 1_000_000.0):
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


class BrokenResultCache:
    """ResultCache stand-in whose every operation fails."""

    def get(self, fingerprint, requester_id):
        raise RuntimeError("cache backend unavailable")

    def put(self, fingerprint, requester_id, result, ttl_ms=None):
        raise RuntimeError("cache backend unavailable")

    def invalidate(self, fingerprint, requester_id):
        raise RuntimeError("cache backend unavailable")
