"""date_normalizer.py
Finds date tokens in CV lines and normalizes them to `YYYY-MM` / `YYYY-MM-DD`.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple, Union

from cv_autofill.models import PRESENT

# Month names and abbreviations (EN / DE / FR / IT), lowercase
MONTH_NAMES = {
    "january": 1, "januar": 1, "janvier": 1, "gennaio": 1, "jan": 1, "jän": 1, "janv": 1, "gen": 1,
    "february": 2, "februar": 2, "février": 2, "fevrier": 2, "febbraio": 2, "feb": 2, "févr": 2,
    "march": 3, "märz": 3, "maerz": 3, "mars": 3, "marzo": 3, "mar": 3, "mär": 3,
    "april": 4, "avril": 4, "aprile": 4, "apr": 4, "avr": 4,
    "may": 5, "mai": 5, "maggio": 5, "mag": 5,
    "june": 6, "juni": 6, "juin": 6, "giugno": 6, "jun": 6, "giu": 6,
    "july": 7, "juli": 7, "juillet": 7, "luglio": 7, "jul": 7, "juil": 7, "lug": 7,
    "august": 8, "août": 8, "aout": 8, "agosto": 8, "aug": 8, "ago": 8,
    "september": 9, "septembre": 9, "settembre": 9, "sep": 9, "sept": 9, "set": 9,
    "october": 10, "oktober": 10, "octobre": 10, "ottobre": 10, "oct": 10, "okt": 10, "ott": 10,
    "november": 11, "novembre": 11, "nov": 11,
    "december": 12, "dezember": 12, "décembre": 12, "decembre": 12, "dicembre": 12,
    "dec": 12, "dez": 12, "déc": 12, "dic": 12,
}

# Keywords marking an ongoing entry
PRESENT_KEYWORDS = [
    "bis heute", "aujourd'hui", "in corso", "present", "current", "currently",
    "today", "now", "heute", "aktuell", "ongoing", "actuel", "actuellement", "oggi",
]


def _alternation(words: List[str]) -> str:
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


_YEAR = r"(?:19|20)\d{2}"

# Alternatives are tried left to right at each position, most specific first
DATE_TOKEN_REGEX = re.compile(
    rf"(?<!\d)(?P<num_month>\d{{1,2}})\s?[./]\s?(?P<num_month_year>{_YEAR})(?!\d)"
    rf"|(?<!\d)(?P<iso_year>{_YEAR})-(?P<iso_month>\d{{1,2}})(?!\d)"
    rf"|\b(?P<month_name>{_alternation(list(MONTH_NAMES))})\.?\s+(?P<month_name_year>{_YEAR})(?!\d)"
    rf"|(?<!\w)(?P<year>{_YEAR})(?!\w)"
    rf"|(?<!\w)(?P<present>{_alternation(PRESENT_KEYWORDS)})(?!\w)",
    re.IGNORECASE,
)

# Day-precision dates used for birth dates
FULL_DATE_REGEXES = [
    # 12.03.1990, 12/03/1990, 12-03-1990
    re.compile(r"(?<!\d)(?P<day>\d{1,2})[./-](?P<month>\d{1,2})[./-](?P<year>(?:19|20)\d{2})(?!\d)"),
    # 1990-03-12
    re.compile(r"(?<!\d)(?P<year>(?:19|20)\d{2})-(?P<month>\d{1,2})-(?P<day>\d{1,2})(?!\d)"),
    # 12 March 1990, 12. März 1990
    re.compile(
        rf"(?<!\d)(?P<day>\d{{1,2}})\.?\s+(?P<month_name>{_alternation(list(MONTH_NAMES))})\.?\s+"
        r"(?P<year>(?:19|20)\d{2})(?!\d)",
        re.IGNORECASE,
    ),
    # March 12, 1990
    re.compile(
        rf"\b(?P<month_name>{_alternation(list(MONTH_NAMES))})\.?\s+(?P<day>\d{{1,2}}),?\s+"
        r"(?P<year>(?:19|20)\d{2})(?!\d)",
        re.IGNORECASE,
    ),
]

# Text allowed between the first and last token of a range ("2019 - 2021", "Jan 2019 to Mar 2020")
RANGE_FILLER_REGEX = re.compile(
    r"^[\s\-–—/]*(?:to|bis|until|till|au|à|al|a|-)?[\s\-–—/]*$",
    re.IGNORECASE,
)

# Characters trimmed from what is left of a line once dates are removed
EDGE_SEPARATORS = " -–—|,:;/()[]"


@dataclass(frozen=True)
class DateToken:
    """
    A date-like token found in a line.

    Attributes:
        year (Optional[int]): Four-digit year, None for present keywords.
        month (Optional[int]): Month 1-12 if the token carried one.
        is_present (bool): True for "present", "heute", ... keywords.
        start (int): Offset of the token in the searched line.
        end (int): Offset one past the token.
    """
    year: Optional[int]
    month: Optional[int]
    is_present: bool
    start: int
    end: int

    @property
    def normalized(self) -> Optional[str]:
        """`YYYY-MM`, the present sentinel, or None for year-only tokens."""
        if self.is_present:
            return PRESENT
        return normalize_date_parts(self.year, self.month)


def find_date_tokens(line: str) -> List[DateToken]:
    """Return every date token of `line` in order of appearance."""
    tokens = []
    for match in DATE_TOKEN_REGEX.finditer(line):
        groups = match.groupdict()
        if groups["present"]:
            tokens.append(DateToken(None, None, True, match.start(), match.end()))
            continue

        if groups["num_month"]:
            year, month = int(groups["num_month_year"]), int(groups["num_month"])
        elif groups["iso_year"]:
            year, month = int(groups["iso_year"]), int(groups["iso_month"])
        elif groups["month_name"]:
            year = int(groups["month_name_year"])
            month = MONTH_NAMES[groups["month_name"].lower()]
        else:
            year, month = int(groups["year"]), None

        if month is not None and not 1 <= month <= 12:
            month = None
        tokens.append(DateToken(year, month, False, match.start(), match.end()))
    return tokens


def has_concrete_date(line: str) -> bool:
    """True if `line` carries at least one year (present keywords alone do not count)."""
    return any(not token.is_present for token in find_date_tokens(line))


def normalize_date_parts(
    year: Union[str, int, None],
    month: Union[str, int, None],
    day: Union[str, int, None] = None,
) -> Optional[str]:
    """
    Build a normalized date from its parts.

    Returns:
        Optional[str]: `YYYY-MM`, or `YYYY-MM-DD` when `day` is given. None when
        the year or month is missing (year-only dates are dropped, not guessed)
        or when the parts do not form a valid date.

    Example
    -------
    >>> normalize_date_parts("2019", "03")
    '2019-03'
    """
    if year in (None, "") or month in (None, ""):
        return None
    try:
        year, month = int(year), int(month)
        day = int(day) if day not in (None, "") else None
    except (TypeError, ValueError):
        return None

    if not 1000 <= year <= 9999 or not 1 <= month <= 12:
        return None

    if day is None:
        return f"{year:04d}-{month:02d}"

    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def build_date_range(
    start_year: Union[str, int, None] = None,
    start_month: Union[str, int, None] = None,
    end_year: Union[str, int, None] = None,
    end_month: Union[str, int, None] = None,
    current: bool = False,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Normalize a (start, end) pair. An ongoing range ends with the literal
    "present", which is distinct from an unknown end (None).
    """
    start = normalize_date_parts(start_year, start_month)
    end = PRESENT if current else normalize_date_parts(end_year, end_month)
    return start, end


def parse_date_range(line: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Parse the date range of a CV entry line.

    The first token is the start, the second (if any) the end. Lines without a
    concrete year yield (None, None).

    Example
    -------
    >>> parse_date_range("03/2019 - heute Senior Engineer")
    ('2019-03', 'present')
    """
    tokens = find_date_tokens(line)
    if not any(not token.is_present for token in tokens):
        return None, None

    start = tokens[0]
    start_date = None if start.is_present else start.normalized
    if len(tokens) < 2:
        return start_date, None

    return start_date, tokens[1].normalized


def strip_date_tokens(line: str) -> str:
    """
    Remove the date range from `line` and return the remaining text with
    dangling separators trimmed.
    """
    tokens = find_date_tokens(line)
    if not tokens:
        return line.strip(EDGE_SEPARATORS)

    first, last = tokens[0], tokens[-1]
    contiguous_range = all(
        RANGE_FILLER_REGEX.match(line[a.end:b.start])
        for a, b in zip(tokens, tokens[1:])
    )

    if contiguous_range:
        remainder = line[:first.start] + " " + line[last.end:]
    else:
        remainder = line
        for token in reversed(tokens):
            remainder = remainder[:token.start] + " " + remainder[token.end:]

    remainder = re.sub(r"\(\s*[-–—/]?\s*\)|\[\s*[-–—/]?\s*\]", " ", remainder)
    remainder = re.sub(r"\s+", " ", remainder)
    return remainder.strip(EDGE_SEPARATORS)


def normalize_full_date(text: str) -> Optional[str]:
    """
    Normalize a day-precision date such as a birth date to `YYYY-MM-DD`.

    Accepts `12.03.1990`, `12/03/1990`, `1990-03-12`, `12 March 1990`,
    `12. März 1990` and `March 12, 1990`. Returns None if no valid date is found.
    """
    if not text:
        return None
    for regex in FULL_DATE_REGEXES:
        match = regex.search(text)
        if not match:
            continue
        groups = match.groupdict()
        month = groups.get("month")
        if groups.get("month_name"):
            month = MONTH_NAMES[groups["month_name"].lower()]
        normalized = normalize_date_parts(groups["year"], month, groups["day"])
        if normalized:
            return normalized
    return None
