"""test_education_extractor.py
Test EducationExtractor
"""
import pytest

from cv_autofill.models import EducationEntry
from cv_autofill.parse_classes.field_extractor.education_extractor import (
    EducationExtractor,
    extract_education,
)
from cv_autofill.parse_classes.field_extractor.field_extractor import CONFIDENCE
from cv_autofill.test_helpers.dummy_documents import GERMAN_CV_TEXT, SAMPLE_CV_TEXT


class TestEducationExtractor:
    """Tests for EducationExtractor."""

    def test_english_cv(self):
        assert EducationExtractor(SAMPLE_CV_TEXT).extract() == [
            EducationEntry(
                degree="BSc Computer Science",
                institution="ETH Zürich",
                start_date="2010-09",
                end_date="2014-06",
            )
        ]

    def test_year_only_dates_are_dropped(self):
        """Year-only ranges keep the entry but leave its dates unknown."""
        extractor = EducationExtractor(GERMAN_CV_TEXT)
        education = extractor.extract()

        assert education == [
            EducationEntry(degree="Bachelor Informatik", institution="Universität Bern")
        ]
        assert extractor.provenance[0].confidence == CONFIDENCE["medium"]

    def test_institution_on_next_line(self):
        text = "Education\n09/2006 - 07/2009 Master of Science\nUniversity of Zurich\nThesis on graphs"
        assert extract_education(text) == [
            EducationEntry(
                degree="Master of Science",
                institution="University of Zurich",
                start_date="2006-09",
                end_date="2009-07",
            )
        ]

    @pytest.mark.parametrize("text", ["", "Jane Doe", "Ausbildung\n2010 - 2012 Lehre"])
    def test_no_entries(self, text):
        assert EducationExtractor(text).extract() == []

    def test_unsupported_method(self):
        with pytest.raises(NotImplementedError):
            EducationExtractor("text", extraction_method="regex")
