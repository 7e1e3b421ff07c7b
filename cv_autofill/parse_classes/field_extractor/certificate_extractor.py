"""certificate_extractor.py
Extracts certificates (name, issuer, date) from the certificates section of CV text.
"""
from typing import List, Optional, Tuple

from cv_autofill.models import CertificateEntry
from cv_autofill.parse_classes.field_extractor.field_extractor import FieldExtractor, CONFIDENCE
from cv_autofill.parse_classes.field_extractor.helper_functions.date_normalizer import (
    EDGE_SEPARATORS,
    find_date_tokens,
    strip_date_tokens,
)
from cv_autofill.parse_classes.field_extractor.helper_functions.entry_parser import strip_bullet
from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    SECTION_HEADERS,
    find_section,
)

ISSUER_SEPARATORS = [" - ", " – ", " — ", " | ", " by ", " von ", " par ", " di "]

MIN_CERTIFICATE_NAME_LENGTH = 3


def split_issuer(text: str) -> Tuple[str, Optional[str]]:
    """'AWS Solutions Architect - Amazon' -> ('AWS Solutions Architect', 'Amazon')."""
    lowered = text.lower()
    for separator in ISSUER_SEPARATORS:
        index = lowered.find(separator)
        if index > 0:
            issuer = text[index + len(separator):].strip(EDGE_SEPARATORS)
            return text[:index].strip(EDGE_SEPARATORS), issuer or None
    return text.strip(EDGE_SEPARATORS), None


class CertificateExtractor(FieldExtractor):
    """
    Extracts certificates, one per line of the certificates section.

    A `MM/YYYY` (or month-name) date becomes `YYYY-MM`; year-only dates are
    dropped. Missing issuers and dates stay None.

    Supports:
        - 'rule': Section detection and line splitting.
    """

    SUPPORTED_EXTRACTION_METHODS = ["rule"]
    DEFAULT_EXTRACTION_METHOD = "rule"
    FIELD_NAME = "certificates"

    def extract(self) -> List[CertificateEntry]:
        if self.extraction_method != "rule":
            raise NotImplementedError(
                f"Extraction method '{self.extraction_method}' is not implemented for CertificateExtractor."
            )

        section = find_section(self.text, SECTION_HEADERS["certificates"])
        if section is None:
            return []

        certificates = []
        for line in section.lines:
            content = strip_bullet(line.text)
            tokens = [token for token in find_date_tokens(content) if not token.is_present]
            certificate_date = tokens[0].normalized if tokens else None

            name, issuer = split_issuer(strip_date_tokens(content))
            if len(name) < MIN_CERTIFICATE_NAME_LENGTH:
                continue

            certificate = CertificateEntry(name=name, issuer=issuer, date=certificate_date)
            certificates.append(certificate)
            self._record(
                certificate,
                start=line.start,
                end=line.end,
                confidence=CONFIDENCE["high"] if issuer else CONFIDENCE["medium"],
            )
        return certificates


def extract_certificates(text: str) -> List[CertificateEntry]:
    """Extract certificates from `text`. Pure; never raises on content."""
    return CertificateExtractor(text=text).extract()
