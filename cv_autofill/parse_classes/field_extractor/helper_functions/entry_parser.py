"""entry_parser.py
Groups the lines of a dated CV section (experience, education) into entries.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from cv_autofill.parse_classes.field_extractor.helper_functions.date_normalizer import (
    EDGE_SEPARATORS,
    find_date_tokens,
    parse_date_range,
    strip_date_tokens,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import TextLine

# Tried in order; the first separator present splits "Role - Company"
HEADING_SEPARATORS = [" - ", " – ", " — ", " | ", " at ", " bei ", " chez ", " presso ", ", "]

BULLET_REGEX = re.compile(r"^[-•*·▪◦–]\s*")


@dataclass
class DatedEntry:
    """
    A dated entry of a section: the line carrying the dates plus the lines
    that follow it up to the next dated line.

    Attributes:
        heading (str): Text of the date line with the dates removed.
        lines (List[TextLine]): Continuation lines, bullets stripped.
    """
    date_line: TextLine
    start_date: Optional[str]
    end_date: Optional[str]
    heading: str
    lines: List[TextLine] = field(default_factory=list)

    @property
    def start(self) -> int:
        return self.date_line.start

    @property
    def end(self) -> int:
        return self.lines[-1].end if self.lines else self.date_line.end


def strip_bullet(text: str) -> str:
    return BULLET_REGEX.sub("", text).strip()


def starts_entry(line_text: str) -> bool:
    """
    True if a line opens a new dated entry.

    The line must carry a concrete year, must not be a bullet point, and its
    dates must open or close the line ("2019 - 2021 Engineer", "Engineer (2019 - 2021)").
    Dates in the middle of a sentence are description, not a new entry.
    """
    if BULLET_REGEX.match(line_text):
        return False
    tokens = find_date_tokens(line_text)
    if not any(not token.is_present for token in tokens):
        return False
    opens_line = not line_text[:tokens[0].start].strip(EDGE_SEPARATORS)
    closes_line = not line_text[tokens[-1].end:].strip(EDGE_SEPARATORS)
    return opens_line or closes_line


def split_heading(text: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split an entry heading into its two parts.

    Example
    -------
    >>> split_heading("Senior Engineer at Acme AG")
    ('Senior Engineer', 'Acme AG')
    """
    text = text.strip()
    if not text:
        return None, None
    lowered = text.lower()
    for separator in HEADING_SEPARATORS:
        index = lowered.find(separator)
        if index > 0:
            left = text[:index].strip(EDGE_SEPARATORS)
            right = text[index + len(separator):].strip(EDGE_SEPARATORS)
            return left or None, right or None
    return text, None


def group_dated_entries(lines: List[TextLine]) -> List[DatedEntry]:
    """
    Group section lines into DatedEntry objects. Lines before the first dated
    line belong to no entry and are dropped.
    """
    entries: List[DatedEntry] = []
    for line in lines:
        if starts_entry(line.text):
            start_date, end_date = parse_date_range(line.text)
            entries.append(DatedEntry(
                date_line=line,
                start_date=start_date,
                end_date=end_date,
                heading=strip_date_tokens(line.text),
            ))
            continue

        if entries:
            content = strip_bullet(line.text)
            if content:
                offset = len(line.text) - len(BULLET_REGEX.sub("", line.text))
                entries[-1].lines.append(TextLine(text=content, start=line.start + offset))
    return entries
