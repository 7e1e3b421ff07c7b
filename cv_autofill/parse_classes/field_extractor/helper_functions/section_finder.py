"""section_finder.py
Splits normalized text into lines with offsets and locates CV sections
(experience, education, ...) by their multilingual headers.
"""
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

# Headers per section. Matching is case-insensitive, a trailing ":" is ignored.
SECTION_HEADERS = {
    "experience": [
        "berufserfahrung", "work experience", "professional experience",
        "experience professionnelle", "expérience professionnelle",
        "esperienza professionale", "employment history", "work history",
        "experience", "erfahrung", "career", "beruflicher werdegang",
    ],
    "education": [
        "ausbildung", "bildung", "education", "formation", "academic background",
        "qualifications", "istruzione", "formazione", "studium",
    ],
    "languages": [
        "sprachen", "languages", "langues", "language skills",
        "sprachkenntnisse", "lingue", "conoscenze linguistiche",
    ],
    "skills": [
        "skills", "fähigkeiten", "kompetenzen", "kenntnisse", "compétences",
        "technical skills", "core competencies", "it-kenntnisse", "competenze",
        "tech skills", "it skills", "expertise",
    ],
    "certificates": [
        "zertifikate", "zertifizierungen", "certifications", "certificates",
        "certifications professionnelles", "certificats", "certificazioni",
    ],
    "highlights": [
        "highlights", "key highlights", "key achievements", "achievements",
        "erfolge", "réalisations", "risultati",
    ],
}

# Headers that end a section without being extracted themselves
OTHER_HEADERS = [
    "projects", "projekte", "projets", "progetti", "profile", "profil",
    "summary", "zusammenfassung", "about me", "über mich", "personal data",
    "personal information", "personalien", "persönliche daten", "contact",
    "kontakt", "references", "referenzen", "interests", "interessen",
    "hobbies", "publications", "publikationen", "curriculum vitae",
    "lebenslauf", "resume", "résumé",
]

ALL_HEADERS = sorted(
    {h for headers in SECTION_HEADERS.values() for h in headers} | set(OTHER_HEADERS),
    key=len,
    reverse=True,
)

# Headers are short lines; longer lines are content that happens to start with a header word
MAX_HEADER_LINE_LENGTH = 40


@dataclass(frozen=True)
class TextLine:
    """A line of normalized text and the offset of its first character."""
    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True)
class Section:
    """
    Body of a CV section.

    Attributes:
        header (str): The header line that opened the section.
        lines (List[TextLine]): Non-empty body lines in order. If the header
            line carried content after a colon ("Skills: Python, SQL") that
            content is the first line.
    """
    header: str
    lines: List[TextLine] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)

    @property
    def start(self) -> int:
        return self.lines[0].start if self.lines else 0

    @property
    def end(self) -> int:
        return self.lines[-1].end if self.lines else 0


def split_lines(text: str) -> List[TextLine]:
    """Split text into TextLines, keeping offsets. Empty lines are dropped."""
    lines = []
    offset = 0
    for raw_line in text.split("\n"):
        if raw_line.strip():
            lines.append(TextLine(text=raw_line, start=offset))
        offset += len(raw_line) + 1
    return lines


def match_header(line_text: str, headers: Iterable[str]) -> Optional[str]:
    """
    Return the header `line_text` opens with, or None.

    A line is a header when, ignoring case and a trailing colon, it equals one
    of `headers`, or it starts with one of them followed by a colon, or it is
    short and only followed by punctuation or digits ("Work Experience (2010-2020)").
    """
    lowered = line_text.strip().lower()
    bare = lowered.rstrip(":").strip()
    for header in sorted(headers, key=len, reverse=True):
        if bare == header or lowered.startswith(header + ":"):
            return header
        if (
            len(lowered) <= MAX_HEADER_LINE_LENGTH
            and re.match(rf"{re.escape(header)}\b[^\w]*(?:\d[^a-z]*)?$", lowered)
        ):
            return header
    return None


def is_section_header(line_text: str) -> bool:
    """True if the line opens any known section."""
    return match_header(line_text, ALL_HEADERS) is not None


def find_section(text: str, headers: Iterable[str]) -> Optional[Section]:
    """
    Locate the first section opened by one of `headers`.

    The section runs until the next line that opens any known section.

    Args:
        text (str): Normalized CV text.
        headers (Iterable[str]): Lowercase header variants of the wanted section.

    Returns:
        Section | None: The section body, or None if the header is missing or
        the section is empty.
    """
    headers = list(headers)
    body: List[TextLine] = []
    header_line = None

    for line in split_lines(text):
        if header_line is None:
            if match_header(line.text, headers) is None:
                continue
            header_line = line.text
            # Keep inline content of "Header: content" lines
            if ":" in line.text:
                colon = line.text.index(":")
                remainder = line.text[colon + 1:]
                stripped = remainder.strip()
                if stripped:
                    lead = len(remainder) - len(remainder.lstrip())
                    body.append(TextLine(text=stripped, start=line.start + colon + 1 + lead))
            continue

        if is_section_header(line.text):
            break
        body.append(line)

    if header_line is None or not body:
        return None
    return Section(header=header_line, lines=body)
