"""logging.py
Holds configured loggers for the extraction pipeline.
"""
from typing import Literal
import logging
import os
import re
import sys
from datetime import datetime
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()  # load .env

ENV = os.getenv("ENV", "development")  # e.g., development, staging, production
LOG_LEVEL = os.getenv("LOG_LEVEL")  # overrides the per-type level when set
LOG_DIR = os.getenv("CV_AUTOFILL_LOG_DIR", "logs")

LoggerType = Literal["default", "pytest", "ocr", "extractor", "cache"]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class PersonalDataFilter(logging.Filter):
    """
    Mask e-mail addresses and phone numbers in log records.

    CV text ends up in exception messages (a failing extractor may quote the
    line it choked on), so every handler created by LoggerFactory gets this
    filter attached.
    """
    EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
    # International (+41 79 123 45 67, 0049 30 1234567) or national with
    # space separated groups (031 123 45 67). Bare digit runs and dates are kept.
    PHONE_PATTERN = re.compile(
        r"(?<![\w+-])(?:\+|00)\d{1,3}(?:[ ./-]?\(?\d{1,4}\)?){2,6}(?![\w-])"
        r"|(?<![\w-])0\d{1,3}[ /]\d{2,4}(?:[ -]\d{2,4}){1,3}(?![\w-])"
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True

    @classmethod
    def redact(cls, message: str) -> str:
        message = cls.EMAIL_PATTERN.sub("<email>", message)
        return cls.PHONE_PATTERN.sub("<phone>", message)


class LoggerFactory:
    """
    Factory to create configured loggers for different pipeline stages.

    Logging behavior depends on environment (ENV):
      - Console logging is optional.
      - Local file logging in development (separate folders per logger type).
      - Cloud logging (optional) in staging/production using watchtower.
      - Duplicate handlers and propagation are avoided automatically.

    Every handler masks personal data via PersonalDataFilter.
    """

    def __init__(self, env: str = ENV, base_log_folder: str = LOG_DIR):
        self.env = env
        self.base_log_folder = base_log_folder

    def get_logger(
        self,
        name: str,
        logger_type: LoggerType = "default",
        console: bool = True
    ) -> logging.Logger:
        """
        Create and return a configured logger based on type.
        """
        logger = logging.getLogger(name)

        # Prevent duplicate handlers
        if logger.hasHandlers():
            return logger

        logger.propagate = False
        logger.setLevel(self._level_for_type(logger_type))

        formatter = logging.Formatter(LOG_FORMAT)

        if console:
            self._add_handler(logger, logging.StreamHandler(), formatter)

        if self.env in ["development", "local", "test"]:
            log_folder = self._get_log_folder_for_type(logger_type)
            self._add_file_handler(logger, log_folder, name, formatter)

        elif self.env in ["staging", "production"]:
            self._add_cloudwatch_handler(logger, logger_type, formatter)

        # Ensure at least one handler exists
        if not logger.handlers:
            self._add_handler(logger, logging.StreamHandler(), formatter)

        return logger

    @lru_cache(maxsize=None)
    def get_field_logger(self, field_name: str) -> logging.Logger:
        """
        Return a logger for extraction failures of one draft section.

        In development each section writes to its own subfolder, e.g.
            logs/extraction_failures/skills/skills_20251028_103022.log
        Elsewhere it behaves like an "extractor" logger without console output.
        """
        safe_field_name = field_name or "other"
        name = f"extractor_{safe_field_name}"

        if self.env not in ["development", "local", "test"]:
            return self.get_logger(name, logger_type="extractor", console=False)

        logger = logging.getLogger(name)
        if logger.hasHandlers():
            return logger

        logger.propagate = False
        logger.setLevel(self._level_for_type("extractor"))

        log_folder = os.path.join(
            self._get_log_folder_for_type("extractor"), safe_field_name
        )
        self._add_file_handler(logger, log_folder, safe_field_name, logging.Formatter(LOG_FORMAT))
        return logger

    def _level_for_type(self, logger_type: LoggerType) -> int:
        if LOG_LEVEL:
            return getattr(logging, LOG_LEVEL.upper(), logging.INFO)
        return logging.DEBUG if logger_type in ["default", "pytest"] else logging.INFO

    def _add_handler(
        self,
        logger: logging.Logger,
        handler: logging.Handler,
        formatter: logging.Formatter,
    ) -> None:
        handler.setFormatter(formatter)
        handler.addFilter(PersonalDataFilter())
        logger.addHandler(handler)

    def _add_file_handler(
        self,
        logger: logging.Logger,
        log_folder: str,
        file_prefix: str,
        formatter: logging.Formatter,
    ) -> None:
        """Attach a timestamped file handler inside `log_folder`."""
        os.makedirs(log_folder, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file_path = os.path.join(log_folder, f"{file_prefix}_{timestamp}.log")
        self._add_handler(
            logger,
            logging.FileHandler(log_file_path, mode="a", encoding="utf-8"),
            formatter,
        )

    def _get_log_folder_for_type(self, logger_type: LoggerType) -> str:
        """Return folder path based on logger type."""
        if any("pytest" in arg for arg in sys.argv):
            return os.path.join(self.base_log_folder, "tests")

        mapping = {
            "default": self.base_log_folder,
            "pytest": os.path.join(self.base_log_folder, "tests"),
            "ocr": os.path.join(self.base_log_folder, "ocr"),
            "extractor": os.path.join(self.base_log_folder, "extraction_failures"),
            "cache": os.path.join(self.base_log_folder, "cache"),
        }
        return mapping.get(logger_type, self.base_log_folder)

    def _add_cloudwatch_handler(
        self,
        logger: logging.Logger,
        logger_type: LoggerType,
        formatter: logging.Formatter,
    ):
        """Optional AWS CloudWatch logging for staging/production."""
        try:
            import watchtower

            log_group = {
                "default": "cv_autofill_logs",
                "ocr": "cv_autofill_ocr_logs",
                "extractor": "cv_autofill_extractor_logs",
                "cache": "cv_autofill_cache_logs",
            }.get(logger_type, "cv_autofill_logs")

            self._add_handler(
                logger, watchtower.CloudWatchLogHandler(log_group=log_group), formatter
            )

        except ImportError:
            logger.warning("watchtower not installed, skipping cloud logging.")
