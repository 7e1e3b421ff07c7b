"""conftest.py
Integrate logging with pytest and provide shared fixtures.
"""

import pytest
from cv_autofill.logging import LoggerFactory
from cv_autofill.parse_classes.ocr.ocr_orchestrator import OcrOrchestrator
from cv_autofill.parse_classes.result_cache.result_cache import ResultCache
from cv_autofill.test_helpers.dummy_classes import FakeClock, FakeOcrEngineFactory

# --------------------------------------------------------------
# SETUP TEST LOGGING
# --------------------------------------------------------------

# Integrate logger with pytest
logger = LoggerFactory().get_logger(
    name="pytest_logger",
    logger_type="pytest",
    console=True
)
current_class = None

@pytest.hookimpl(tryfirst=True)
def pytest_sessionstart(session):
    """Session start header."""
    logger.info("==== PYTEST SESSION START ====")

@pytest.hookimpl(tryfirst=True)
def pytest_runtest_logstart(nodeid, location):
    """Called at the start of each test."""
    global current_class
    class_name = location[0]
    if class_name != current_class:
        current_class = class_name
        logger.info(f"\n---- TestClass: {current_class} ----")

@pytest.hookimpl(tryfirst=True)
def pytest_runtest_logreport(report):
    """Called at the end of each test phase (setup/call/teardown)."""
    if report.when != "call":
        return  # only care about the main call, not setup/teardown

    status = report.outcome.upper()  # PASSED / FAILED / SKIPPED
    if status == "PASSED":
        logger.info(f"PASSED: {report.nodeid}")
    elif status == "FAILED":
        logger.error(f"FAILED: {report.nodeid}\n{report.longreprtext}")
    elif status == "SKIPPED":
        logger.warning(f"SKIPPED: {report.nodeid}\n{report.longreprtext}")

@pytest.hookimpl(tryfirst=True)
def pytest_sessionfinish(session, exitstatus):
    """Session finish footer."""
    logger.info(f"==== PYTEST SESSION END: exitstatus={exitstatus} ====")


# --------------------------------------------------------------
# SHARED FIXTURES
# --------------------------------------------------------------
@pytest.fixture
def fake_clock() -> FakeClock:
    """Millisecond clock that only advances when the test says so."""
    return FakeClock()


@pytest.fixture
def result_cache(fake_clock) -> ResultCache:
    """ResultCache driven by `fake_clock` with default TTL and sweep interval."""
    return ResultCache(clock=fake_clock)


@pytest.fixture
def fake_engine_factory() -> FakeOcrEngineFactory:
    """
    OCR engine factory returning fake engines.

    Usage:
        def test_example(fake_engine_factory):
            orchestrator = OcrOrchestrator(engine_factory=fake_engine_factory)
    """
    return FakeOcrEngineFactory()


@pytest.fixture
def fake_ocr_orchestrator(fake_engine_factory) -> OcrOrchestrator:
    """OcrOrchestrator that never calls tesseract."""
    return OcrOrchestrator(engine_factory=fake_engine_factory)
