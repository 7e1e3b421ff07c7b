"""test_certificate_extractor.py
Test CertificateExtractor
"""
import pytest

from cv_autofill.models import CertificateEntry
from cv_autofill.parse_classes.field_extractor.certificate_extractor import (
    CertificateExtractor,
    extract_certificates,
    split_issuer,
)
from cv_autofill.parse_classes.field_extractor.field_extractor import CONFIDENCE
from cv_autofill.test_helpers.dummy_documents import SAMPLE_CV_TEXT


class TestCertificateExtractor:
    """Tests for CertificateExtractor."""

    def test_english_cv(self):
        extractor = CertificateExtractor(SAMPLE_CV_TEXT)

        assert extractor.extract() == [
            CertificateEntry(name="AWS Solutions Architect", issuer="Amazon", date="2021-05"),
            CertificateEntry(name="Scrum Master", issuer=None, date=None),
        ]
        assert [e.confidence for e in extractor.provenance] == [CONFIDENCE["high"], CONFIDENCE["medium"]]

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("- ITIL Foundation von Axelos", CertificateEntry("ITIL Foundation", "Axelos")),
            ("PMP by PMI, March 2020", CertificateEntry("PMP", "PMI", "2020-03")),
            ("CCNA", CertificateEntry("CCNA")),
        ],
    )
    def test_line_formats(self, line, expected):
        assert extract_certificates(f"Zertifikate\n{line}") == [expected]

    def test_short_lines_are_skipped(self):
        assert extract_certificates("Certificates\nAB\nCCNA") == [CertificateEntry("CCNA")]

    def test_split_issuer(self):
        assert split_issuer("AWS Solutions Architect - Amazon") == ("AWS Solutions Architect", "Amazon")
        assert split_issuer("Scrum Master") == ("Scrum Master", None)

    @pytest.mark.parametrize("text", ["", "Jane Doe\nSkills\nPython"])
    def test_no_section(self, text):
        assert CertificateExtractor(text).extract() == []
