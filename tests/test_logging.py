import logging
import os
import uuid

import pytest

from cv_autofill.logging import LoggerFactory, PersonalDataFilter


def unique_name(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class TestPersonalDataFilter:
    @pytest.mark.parametrize("message, expected", [
        ("Contact jane.doe@example.com for details", "Contact <email> for details"),
        ("Call +41 79 123 45 67 now", "Call <phone> now"),
        ("Telefon: 031 123 45 67", "Telefon: <phone>"),
        ("Mobile 0049 30 1234567", "Mobile <phone>"),
        ("Call +41791234567.", "Call <phone>."),
        ("Field 'skills' failed", "Field 'skills' failed"),
        ("Took 42 ms", "Took 42 ms"),
        ("Entry 2019-03 - 2021-05 has no company", "Entry 2019-03 - 2021-05 has no company"),
        ("Dates 03/2019 - 02/2021", "Dates 03/2019 - 02/2021"),
        ("Born 05.07.1988", "Born 05.07.1988"),
        ("Record 123456789012 skipped", "Record 123456789012 skipped"),
        ("Swept 20000000 entries", "Swept 20000000 entries"),
    ])
    def test_redact(self, message, expected):
        """E-mail addresses and phone numbers are masked, everything else is kept."""
        assert PersonalDataFilter.redact(message) == expected

    def test_filter_rewrites_formatted_message(self):
        """Arguments are merged into the message before masking."""
        record = logging.LogRecord(
            "test", logging.WARNING, __file__, 1, "Bad line: %s", ("jane@example.com",), None
        )
        assert PersonalDataFilter().filter(record) is True
        assert record.getMessage() == "Bad line: <email>"

    def test_filter_leaves_clean_records_untouched(self):
        """Records without personal data keep their msg and args."""
        record = logging.LogRecord(
            "test", logging.INFO, __file__, 1, "Cache hit for %s", ("user-1",), None
        )
        PersonalDataFilter().filter(record)
        assert record.msg == "Cache hit for %s"
        assert record.args == ("user-1",)


class TestLoggerFactory:
    def test_development_logger_writes_file_under_tests_folder(self, tmp_path):
        """Under pytest every development logger writes into <base>/tests."""
        name = unique_name("dev")
        logger = LoggerFactory(env="development", base_log_folder=str(tmp_path)).get_logger(
            name, logger_type="ocr", console=False
        )
        logger.info("hello")

        files = os.listdir(tmp_path / "tests")
        assert len(files) == 1
        assert files[0].startswith(name)
        assert not logger.propagate

    def test_handlers_carry_personal_data_filter(self, tmp_path):
        """Every handler masks personal data."""
        logger = LoggerFactory(env="development", base_log_folder=str(tmp_path)).get_logger(
            unique_name("filtered"), console=True
        )
        assert logger.handlers
        for handler in logger.handlers:
            assert any(isinstance(f, PersonalDataFilter) for f in handler.filters)

    def test_masked_output_in_log_file(self, tmp_path):
        """Log files never contain the raw e-mail address."""
        name = unique_name("masked")
        logger = LoggerFactory(env="development", base_log_folder=str(tmp_path)).get_logger(
            name, console=False
        )
        logger.warning("Failed on jane.doe@example.com")
        for handler in logger.handlers:
            handler.flush()

        log_file = tmp_path / "tests" / os.listdir(tmp_path / "tests")[0]
        content = log_file.read_text(encoding="utf-8")
        assert "<email>" in content
        assert "jane.doe@example.com" not in content

    def test_get_logger_does_not_duplicate_handlers(self, tmp_path):
        """Asking twice for the same logger returns it unchanged."""
        factory = LoggerFactory(env="development", base_log_folder=str(tmp_path))
        name = unique_name("dup")
        first = factory.get_logger(name)
        handler_count = len(first.handlers)
        second = factory.get_logger(name)
        assert first is second
        assert len(second.handlers) == handler_count

    def test_unknown_env_falls_back_to_console(self, tmp_path):
        """Without file or cloud logging a console handler is still attached."""
        logger = LoggerFactory(env="unknown", base_log_folder=str(tmp_path)).get_logger(
            unique_name("fallback"), console=False
        )
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert not os.listdir(tmp_path)

    def test_field_logger_uses_subfolder_per_field(self, tmp_path):
        """Each draft section gets its own folder and is cached per factory."""
        factory = LoggerFactory(env="development", base_log_folder=str(tmp_path))
        field_name = unique_name("field")
        logger = factory.get_field_logger(field_name)

        assert logger is factory.get_field_logger(field_name)
        assert logger.name == f"extractor_{field_name}"
        assert os.path.isdir(tmp_path / "tests" / field_name)
        assert all(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_field_logger_outside_development_has_no_files(self, tmp_path):
        """Outside development the field logger writes nowhere on disk."""
        factory = LoggerFactory(env="unknown", base_log_folder=str(tmp_path))
        logger = factory.get_field_logger(unique_name("remote"))
        assert logger.handlers
        assert not os.listdir(tmp_path)
