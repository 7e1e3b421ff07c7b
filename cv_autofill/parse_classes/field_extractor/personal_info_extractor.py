"""personal_info_extractor.py
Extracts personal and contact details (name, email, phone, address, ...) from CV text.
"""
import re
from typing import Iterator, List, Optional, Tuple

from cv_autofill.models import PersonalInfo
from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE
from cv_autofill.parse_classes.field_extractor.helper_functions.date_normalizer import normalize_full_date
from cv_autofill.parse_classes.field_extractor.helper_functions.field_normalizers import (
    SWISS_CANTONS,
    normalize_canton,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    TextLine,
    is_section_header,
    split_lines,
)

# Label alternatives per field (EN / DE / FR / IT). A label must be followed by ":".
FIELD_LABELS = {
    "first_name": r"vorname|first name|firstname|given name|prénom|prenom|nome",
    "last_name": r"nachname|last name|lastname|surname|family name|familienname|nom de famille|cognome",
    "full_name": r"full name|name|nom|nome e cognome",
    "birth_date": (
        r"geburtsdatum|geboren am|geboren|date of birth|birth date|birthdate|born|dob|"
        r"date de naissance|né le|née le|data di nascita|nato il|nata il"
    ),
    "nationality": (
        r"nationalität|nationality|staatsangehörigkeit|staatsbürgerschaft|citizenship|"
        r"nationalité|nazionalità|cittadinanza"
    ),
    "target_role": (
        r"target role|target position|desired position|desired role|wunschposition|"
        r"gewünschte position|gewünschte stelle|angestrebte position|poste recherché|"
        r"poste souhaité|posizione desiderata|objective"
    ),
    "canton": r"kanton|canton|cantone",
    "address": r"adresse|address|anschrift|wohnort|domicile|indirizzo|ort",
}

# Birth dates are often written without a colon ("Born 12.03.1990")
COLON_OPTIONAL_LABELS = {"birth_date"}

PHONE_LABEL_REGEX = (
    r"\b(?:tel|telefon|telephone|téléphone|phone|mobile|mobil|handy|natel|cell|"
    r"telefono|cellulare|portable)\b\.?\s*:?\s*(?P<value>\+?[\d(][\d ()./-]{6,}\d)"
)
LINKEDIN_REGEX = r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/in/[A-Za-z0-9_%-]+/?"
PHOTO_URL_REGEX = r"https?://[^\s\"'<>]+?\.(?:jpe?g|png|gif|webp)(?:\?[^\s\"'<>]*)?(?!\w)"
POSTAL_CITY_REGEX = (
    r"(?<![\w+./-])(?:CH-|D-|A-|F-|I-)?(?P<postal>\d{4,5})\s+(?P<city>[^\W\d_][^\d,;|()/]*)"
)

# Segments of a line separated by " | ", " · " or " • "
SEGMENT_SEPARATOR_REGEX = re.compile(r"\s[|·•]\s")

MIN_PHONE_DIGITS = 9
MAX_PHONE_DIGITS = 15

# Only the first lines are searched for an unlabelled name
NAME_SEARCH_LINES = 5


class PersonalInfoExtractor(FieldExtractor):
    """
    Extracts the candidate's personal details from CV text.

    Labelled values ("Vorname: Jane", "Date of birth: 12.03.1990") take
    precedence over layout heuristics (a 2-3 word capitalized line near the top
    is taken as the name). Every candidate is recorded in `self.provenance`
    under `personal.<field>`; the first one found fills the draft.

    Supports:
        - 'regex': Label and pattern matching.
    """

    SUPPORTED_EXTRACTION_METHODS = ["regex"]
    DEFAULT_EXTRACTION_METHOD = "regex"
    FIELD_NAME = "personal"

    def empty_value(self) -> PersonalInfo:
        return PersonalInfo()

    def extract(self) -> PersonalInfo:
        """
        Extract personal details from `self.text`.

        Returns:
            PersonalInfo: Fields that could not be found stay None.

        Raises:
            NotImplementedError: If extraction method is unsupported.
        """
        if self.extraction_method != "regex":
            raise NotImplementedError(
                f"Extraction method '{self.extraction_method}' is not implemented for PersonalInfoExtractor."
            )

        info = PersonalInfo()
        lines = split_lines(self.text)

        self._extract_email(info)
        self._extract_phone(info, lines)
        self._extract_linkedin(info)
        self._extract_labelled_fields(info, lines)
        self._extract_unlabelled_name(info, lines)
        self._extract_address(info, lines)
        self._extract_photo_url(info)
        return info

    def _set(
        self,
        info: PersonalInfo,
        attribute: str,
        value: Optional[str],
        start: int,
        end: int,
        confidence: float,
    ) -> None:
        """Record a candidate and keep it if `attribute` is still empty."""
        if not value:
            return
        self._record(
            value,
            start=start,
            end=end,
            confidence=confidence,
            target_field=f"{self.FIELD_NAME}.{attribute}",
        )
        if getattr(info, attribute) is None:
            setattr(info, attribute, value)

    @staticmethod
    def _segments(lines: List[TextLine]) -> Iterator[TextLine]:
        """Split lines like "Zürich | +41 79 ... | jane@..." into their parts, keeping offsets."""
        for line in lines:
            position = 0
            for separator in SEGMENT_SEPARATOR_REGEX.finditer(line.text):
                part = line.text[position:separator.start()]
                if part.strip():
                    yield TextLine(text=part.strip(), start=line.start + position + len(part) - len(part.lstrip()))
                position = separator.end()
            part = line.text[position:]
            if part.strip():
                yield TextLine(text=part.strip(), start=line.start + position + len(part) - len(part.lstrip()))

    # ----------------------
    # CONTACT
    # ----------------------
    def _extract_email(self, info: PersonalInfo) -> None:
        for match in self._regex_find_all(self.COMMON_REGEX["email_address"]):
            self._set(info, "email", match.group(0), match.start(), match.end(), CONFIDENCE["high"])

    def _phone_candidates(self, line: TextLine) -> List[Tuple[str, int, int, float]]:
        """Return (value, start, end, confidence) phone candidates of a line, labelled ones first."""
        candidates = []
        for match in self._regex_find_all(PHONE_LABEL_REGEX, text=line.text):
            candidates.append((
                match.group("value").strip(),
                line.start + match.start("value"),
                line.start + match.end("value"),
                CONFIDENCE["high"],
            ))

        for pattern in ("international_phone_number", "swiss_phone_number", "phone_number"):
            for match in self._regex_find_all(self.COMMON_REGEX[pattern], text=line.text):
                candidates.append((
                    match.group(0).strip(),
                    line.start + match.start(),
                    line.start + match.end(),
                    CONFIDENCE["medium"],
                ))

        return [
            candidate for candidate in candidates
            if MIN_PHONE_DIGITS <= sum(ch.isdigit() for ch in candidate[0]) <= MAX_PHONE_DIGITS
        ]

    def _extract_phone(self, info: PersonalInfo, lines: List[TextLine]) -> None:
        labelled, unlabelled = [], []
        for line in lines:
            for candidate in self._phone_candidates(line):
                (labelled if candidate[3] == CONFIDENCE["high"] else unlabelled).append(candidate)

        seen_spans = set()
        for value, start, end, confidence in labelled + unlabelled:
            if (start, end) in seen_spans:
                continue
            seen_spans.add((start, end))
            self._set(info, "phone", value, start, end, confidence)

    def _extract_linkedin(self, info: PersonalInfo) -> None:
        for match in self._regex_find_all(LINKEDIN_REGEX):
            url = match.group(0).rstrip("/")
            if not url.lower().startswith("http"):
                url = f"https://{url}"
            self._set(info, "linkedin_url", url, match.start(), match.end(), CONFIDENCE["high"])

    def _extract_photo_url(self, info: PersonalInfo) -> None:
        for match in self._regex_find_all(PHOTO_URL_REGEX):
            self._set(info, "photo_url", match.group(0), match.start(), match.end(), CONFIDENCE["medium"])

    # ----------------------
    # LABELLED FIELDS
    # ----------------------
    def _extract_labelled_fields(self, info: PersonalInfo, lines: List[TextLine]) -> None:
        for segment in self._segments(lines):
            for field_name, labels in FIELD_LABELS.items():
                colon = r"\s*:?\s*" if field_name in COLON_OPTIONAL_LABELS else r"\s*:\s*"
                match = re.match(rf"(?:{labels})\b{colon}(?P<value>.+)$", segment.text, re.IGNORECASE)
                if not match:
                    continue
                value = match.group("value").strip()
                start = segment.start + match.start("value")
                end = segment.start + match.end("value")
                self._apply_label(info, field_name, value, start, end)
                break

    def _apply_label(self, info: PersonalInfo, field_name: str, value: str, start: int, end: int) -> None:
        high = CONFIDENCE["high"]
        if field_name in ("first_name", "last_name", "nationality", "target_role"):
            self._set(info, field_name, value, start, end, high)
        elif field_name == "full_name":
            first_name, last_name = self._split_full_name(value)
            self._set(info, "first_name", first_name, start, end, high)
            self._set(info, "last_name", last_name, start, end, high)
        elif field_name == "birth_date":
            self._set(info, "birth_date", normalize_full_date(value), start, end, high)
        elif field_name == "canton":
            canton = normalize_canton(value) or normalize_canton(value.split(" ")[0])
            self._set(info, "canton", canton, start, end, high)
        elif field_name == "address":
            self._extract_postal_city(info, TextLine(text=value, start=start), CONFIDENCE["high"])

    @staticmethod
    def _split_full_name(value: str) -> Tuple[Optional[str], Optional[str]]:
        """'Jane Mary Doe' -> ('Jane Mary', 'Doe'); 'Doe, Jane' -> ('Jane', 'Doe')."""
        if "," in value:
            last_name, _, first_name = value.partition(",")
            return first_name.strip() or None, last_name.strip() or None
        words = value.split()
        if len(words) < 2:
            return None, None
        return " ".join(words[:-1]), words[-1]

    # ----------------------
    # NAME HEURISTIC
    # ----------------------
    @staticmethod
    def _looks_like_name(line_text: str) -> bool:
        """True for lines of 2-3 capitalized words without digits or punctuation."""
        if is_section_header(line_text):
            return False
        words = line_text.split(" ")
        if not 2 <= len(words) <= 3:
            return False
        for word in words:
            # "Jean-Luc", "O'Neil"
            for part in re.split(r"[-']", word):
                if not part.isalpha() or not part[0].isupper():
                    return False
                if len(part) > 1 and not part[1:].islower():
                    return False
        return True

    def _extract_unlabelled_name(self, info: PersonalInfo, lines: List[TextLine]) -> None:
        if info.first_name is not None or info.last_name is not None:
            return
        for line in lines[:NAME_SEARCH_LINES]:
            if not self._looks_like_name(line.text):
                continue
            words = line.text.split(" ")
            medium = CONFIDENCE["medium"]
            self._set(info, "first_name", " ".join(words[:-1]), line.start, line.end, medium)
            self._set(info, "last_name", words[-1], line.start, line.end, medium)
            return

    # ----------------------
    # ADDRESS
    # ----------------------
    def _extract_address(self, info: PersonalInfo, lines: List[TextLine]) -> None:
        """Search postal code + city in the header block (lines before the first section)."""
        header_block = []
        for line in lines:
            if is_section_header(line.text):
                break
            header_block.append(line)

        for segment in self._segments(header_block):
            if "@" in segment.text or self._phone_candidates(segment):
                continue
            self._extract_postal_city(info, segment, CONFIDENCE["medium"])

    def _extract_postal_city(self, info: PersonalInfo, segment: TextLine, confidence: float) -> None:
        for match in self._regex_find_all(POSTAL_CITY_REGEX, ignore_case=False, text=segment.text):
            words = []
            for word in match.group("city").split():
                if not word[0].isupper():
                    break
                words.append(word)

            canton_abbreviation = None
            if len(words) > 1 and words[-1] in SWISS_CANTONS:
                canton_abbreviation = words.pop()
            if not words:
                continue

            city = " ".join(words)
            postal_start = segment.start + match.start("postal")
            city_start = segment.start + match.start("city")
            city_end = city_start + len(city)

            self._set(info, "postal_code", match.group("postal"), postal_start,
                      segment.start + match.end("postal"), confidence)
            self._set(info, "city", city, city_start, city_end, confidence)

            if canton_abbreviation:
                abbreviation_start = segment.text.index(canton_abbreviation, match.start("city") + len(city))
                self._set(info, "canton", canton_abbreviation, segment.start + abbreviation_start,
                          segment.start + abbreviation_start + 2, CONFIDENCE["high"])
            else:
                self._set(info, "canton", normalize_canton(city), city_start, city_end, CONFIDENCE["medium"])


def extract_personal_info(text: str) -> PersonalInfo:
    """Extract personal details from `text`. Pure; never raises on content."""
    return PersonalInfoExtractor(text=text).extract()
