"""ocr_engine.py
Holds TesseractEngine, a single-use wrapper around pytesseract.
"""
import io
import os
from typing import List, Optional

import pytesseract
from PIL import Image
from dotenv import load_dotenv

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.exceptions import OcrTimeoutError
from cv_autofill.models import OcrPage

load_dotenv()  # load .env

# Point pytesseract at a custom tesseract binary (e.g. on Windows) if configured
TESSERACT_CMD = os.getenv("TESSERACT_CMD")
if TESSERACT_CMD:
    pytesseract.pytesseract.tesseract_cmd = TESSERACT_CMD

# Message of the RuntimeError pytesseract raises once its timeout kills tesseract
TESSERACT_TIMEOUT_MESSAGE = "Tesseract process timeout"


class TesseractEngine:
    """
    OCR engine instance configured for a fixed set of language models.

    An instance serves exactly one recognition attempt. Once ``terminate`` has
    been called it refuses further work, which guarantees a timed-out engine is
    never reused for a later call.

    Args:
        languages (str): Tesseract language string, e.g. "eng+deu+fra+ita".
    """

    def __init__(self, languages: str = EXTRACTION_DEFAULTS.OCR_LANGUAGES):
        self.languages = languages
        self.terminated = False

    def recognize(self, image_bytes: bytes, timeout_s: Optional[float] = None) -> OcrPage:
        """
        Run OCR on a single image.

        Args:
            image_bytes (bytes): Encoded image (PNG, JPEG, TIFF, ...).
            timeout_s (float | None): Passed to tesseract so the subprocess is
                killed once the budget is spent.

        Returns:
            OcrPage: Recognized text (lines in reading order) and the mean word
            confidence (0-100), or None if no words were found.

        Raises:
            OcrTimeoutError: If tesseract was killed after `timeout_s`.
            RuntimeError: If the engine was already terminated.
            PIL.UnidentifiedImageError: If the bytes are not a readable image.
        """
        if self.terminated:
            raise RuntimeError("TesseractEngine has been terminated and cannot be reused.")

        with Image.open(io.BytesIO(image_bytes)) as image:
            image.load()
            try:
                data = pytesseract.image_to_data(
                    image,
                    lang=self.languages,
                    output_type=pytesseract.Output.DICT,
                    timeout=timeout_s or 0,
                )
            except RuntimeError as e:
                # pytesseract kills the subprocess and raises a bare RuntimeError
                if TESSERACT_TIMEOUT_MESSAGE in str(e):
                    raise OcrTimeoutError(int((timeout_s or 0) * 1000)) from e
                raise

        return OcrPage(
            text=self._join_lines(data),
            confidence=self._mean_confidence(data),
        )

    def terminate(self) -> None:
        """Release the engine. Safe to call more than once."""
        self.terminated = True

    @staticmethod
    def _join_lines(data: dict) -> str:
        """Rebuild text from image_to_data output, one line per tesseract line."""
        lines: List[str] = []
        current_key = None
        current_words: List[str] = []

        for i, word in enumerate(data.get("text", [])):
            word = (word or "").strip()
            if not word:
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            if key != current_key and current_words:
                lines.append(" ".join(current_words))
                current_words = []
            current_key = key
            current_words.append(word)

        if current_words:
            lines.append(" ".join(current_words))

        return "\n".join(lines)

    @staticmethod
    def _mean_confidence(data: dict) -> Optional[float]:
        """Average of word confidences, ignoring tesseract's -1 for non-words."""
        confidences = []
        for word, conf in zip(data.get("text", []), data.get("conf", [])):
            try:
                conf = float(conf)
            except (TypeError, ValueError):
                continue
            if conf >= 0 and (word or "").strip():
                confidences.append(conf)

        if not confidences:
            return None
        return sum(confidences) / len(confidences)
