"""test_personal_info_extractor.py
Test PersonalInfoExtractor
"""
import pytest

from cv_autofill.models import PersonalInfo
from cv_autofill.parse_classes.field_extractor.field_extractor import CONFIDENCE
from cv_autofill.parse_classes.field_extractor.personal_info_extractor import (
    PersonalInfoExtractor,
    extract_personal_info,
)
from cv_autofill.test_helpers.dummy_documents import GERMAN_CV_TEXT, SAMPLE_CV_TEXT


def provenance_for(extractor, target_field):
    return [entry for entry in extractor.provenance if entry.target_field == target_field]


class TestPersonalInfoExtractor:
    """Tests for PersonalInfoExtractor."""

    def test_english_cv(self):
        """Header block, labelled lines and contact patterns of an English CV."""
        info = PersonalInfoExtractor(SAMPLE_CV_TEXT).extract()

        assert info.first_name == "Jane"
        assert info.last_name == "Doe"
        assert info.email == "jane.doe@example.com"
        assert info.phone == "+41 79 123 45 67"
        assert info.linkedin_url == "https://linkedin.com/in/janedoe"
        assert info.birth_date == "1990-03-12"
        assert info.nationality == "Swiss"
        assert info.target_role == "Lead Engineer"
        assert info.postal_code == "8001"
        assert info.city == "Zürich"
        assert info.canton == "ZH"
        assert info.photo_url is None

    def test_german_cv_with_labels(self):
        """German labels (Vorname, Nachname, Geburtsdatum, Adresse, Telefon)."""
        info = PersonalInfoExtractor(GERMAN_CV_TEXT).extract()

        assert info.first_name == "Lukas"
        assert info.last_name == "Müller"
        assert info.birth_date == "1988-07-05"
        assert info.postal_code == "3011"
        assert info.city == "Bern"
        assert info.canton == "BE"
        assert info.phone == "031 123 45 67"
        assert info.email == "lukas.mueller@example.ch"

    def test_name_confidence(self):
        """Labelled names are high confidence, the layout heuristic medium."""
        labelled = PersonalInfoExtractor(GERMAN_CV_TEXT)
        labelled.extract()
        assert provenance_for(labelled, "personal.first_name")[0].confidence == CONFIDENCE["high"]

        heuristic = PersonalInfoExtractor(SAMPLE_CV_TEXT)
        heuristic.extract()
        entry = provenance_for(heuristic, "personal.first_name")[0]
        assert entry.confidence == CONFIDENCE["medium"]
        assert entry.source_span.text == "Jane Doe"

    def test_full_name_label_with_comma(self):
        info = PersonalInfoExtractor("Name: Doe, Jane\nEmail: jane@example.com").extract()
        assert (info.first_name, info.last_name) == ("Jane", "Doe")

    def test_headers_are_not_names(self):
        """Section headers near the top never become the candidate's name."""
        info = PersonalInfoExtractor("Curriculum Vitae\nSkills\nPython").extract()
        assert info.first_name is None
        assert info.last_name is None

    def test_canton_abbreviation_after_city(self):
        info = PersonalInfoExtractor("Max Muster\n8000 Zürich ZH\nSkills\nPython").extract()
        assert (info.first_name, info.last_name) == ("Max", "Muster")
        assert info.postal_code == "8000"
        assert info.city == "Zürich"
        assert info.canton == "ZH"

    def test_canton_label(self):
        info = PersonalInfoExtractor("Kanton: Zürich").extract()
        assert info.canton == "ZH"

    def test_postal_code_outside_header_is_ignored(self):
        """Addresses inside experience entries are not the candidate's address."""
        text = "Jane Doe\nWork Experience\n2019 - 2020 Engineer - Acme, 8001 Zürich"
        info = PersonalInfoExtractor(text).extract()
        assert info.postal_code is None
        assert info.city is None

    def test_labelled_phone_wins(self):
        """A labelled phone number is preferred over an unlabelled one found earlier."""
        info = PersonalInfoExtractor("+41 44 000 00 00 | Mobile: +41 79 555 66 77").extract()
        assert info.phone == "+41 79 555 66 77"

    def test_birth_date_without_colon(self):
        info = PersonalInfoExtractor("Born 12 March 1990").extract()
        assert info.birth_date == "1990-03-12"

    def test_photo_url(self):
        info = PersonalInfoExtractor("Photo: https://cdn.example.com/jane.jpg").extract()
        assert info.photo_url == "https://cdn.example.com/jane.jpg"

    def test_first_candidate_fills_draft(self):
        """Every candidate is recorded, the first one fills the field."""
        extractor = PersonalInfoExtractor("a.one@example.com\nb.two@example.com")
        info = extractor.extract()

        assert info.email == "a.one@example.com"
        entries = provenance_for(extractor, "personal.email")
        assert [entry.extracted_value for entry in entries] == ["a.one@example.com", "b.two@example.com"]
        assert entries[1].source_span.text == "b.two@example.com"

    @pytest.mark.parametrize("text", ["", None, "   "])
    def test_blank_text(self, text):
        assert PersonalInfoExtractor(text).extract() == PersonalInfo()

    def test_unsupported_method(self):
        with pytest.raises(NotImplementedError):
            PersonalInfoExtractor("text", extraction_method="rule")

    def test_extract_personal_info(self):
        assert extract_personal_info(SAMPLE_CV_TEXT).email == "jane.doe@example.com"
