"""normalize_text.py
Normalizes raw document text before field extraction.
"""
import re
import unicodedata

HORIZONTAL_WHITESPACE_REGEX = re.compile(r"[^\S\n]+")
BLANK_LINES_REGEX = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """
    Normalize text so extraction rules see a stable representation.

    Steps:
        1. Unicode NFC (so "Zürich" and "Zürich" compare equal).
        2. Windows / old Mac line endings become "\\n".
        3. Runs of horizontal whitespace (tabs, NBSP, ...) collapse to one space
           and every line is stripped.
        4. Three or more consecutive newlines collapse to one blank line.

    Line structure is kept since section and entry detection work per line.
    The function is idempotent.
    """
    text = unicodedata.normalize("NFC", text or "")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [
        HORIZONTAL_WHITESPACE_REGEX.sub(" ", line).strip()
        for line in text.split("\n")
    ]
    return BLANK_LINES_REGEX.sub("\n\n", "\n".join(lines)).strip()
