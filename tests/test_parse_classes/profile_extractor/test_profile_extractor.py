"""test_profile_extractor.py
Tests for ProfileExtractor
"""
import warnings

import pytest

from cv_autofill.exceptions import ExtractorMapConfigError
from cv_autofill.models import CandidateProfileDraft, PersonalInfo, ProfileExtraction

from cv_autofill.parse_classes.field_extractor.personal_info_extractor import PersonalInfoExtractor
from cv_autofill.parse_classes.profile_extractor.profile_extractor import ProfileExtractor, extract_profile
from cv_autofill.test_helpers.dummy_classes import DummyExtractor, FailingExtractor
from cv_autofill.test_helpers.dummy_documents import GERMAN_CV_TEXT, MINIMAL_CV_TEXT, SAMPLE_CV_TEXT


class TestProfileExtractorInit:

    def test_default_map(self):
        extractor = ProfileExtractor()
        assert "skills" in extractor.extractor_map
        assert extractor.max_threads == 1

    def test_invalid_map_raises(self):
        with pytest.raises(ExtractorMapConfigError):
            ProfileExtractor(extractor_map={"name": [DummyExtractor()]})

    @pytest.mark.parametrize("max_threads", [0, -3])
    def test_non_positive_threads_warn(self, max_threads):
        with pytest.warns(UserWarning):
            extractor = ProfileExtractor(max_threads=max_threads)
        assert extractor.max_threads == 1

    def test_threads_capped_by_sections(self):
        """More threads than sections is never useful."""
        with pytest.warns(UserWarning):
            extractor = ProfileExtractor(extractor_map={"highlights": [DummyExtractor()]}, max_threads=64)
        assert extractor.max_threads == 1


class TestProfileExtractorExtract:

    def test_sample_cv(self):
        extraction = ProfileExtractor().extract(SAMPLE_CV_TEXT)
        draft = extraction.draft

        assert isinstance(extraction, ProfileExtraction)
        assert (draft.personal.first_name, draft.personal.last_name) == ("Jane", "Doe")
        assert draft.personal.canton == "ZH"
        assert [e.company for e in draft.experience] == ["Acme AG", "Beta GmbH"]
        assert [e.institution for e in draft.education] == ["ETH Zürich"]
        assert draft.skills == ["Python", "SQL", "Java", "Docker", "Kubernetes"]
        assert [l.language for l in draft.languages] == ["German", "English", "French", "Italian"]
        assert [c.name for c in draft.certificates] == ["AWS Solutions Architect", "Scrum Master"]
        assert draft.highlights == ["Reduced cloud costs by 30%", "Led a team of 5 engineers"]

    def test_provenance_follows_section_order(self):
        """Provenance is grouped by draft section, personal first, highlights last."""
        provenance = ProfileExtractor().extract(SAMPLE_CV_TEXT).provenance

        sections = [entry.target_field.split(".")[0] for entry in provenance]
        order = ["personal", "experience", "education", "skills", "languages", "certificates", "highlights"]
        first_seen = [section for i, section in enumerate(sections) if section not in sections[:i]]
        assert first_seen == order
        assert sections == sorted(sections, key=order.index)

    def test_spans_point_into_normalized_text(self):
        """Source spans index the normalized text, even for messy input."""
        messy = SAMPLE_CV_TEXT.replace("\n", "\r\n").replace("Jane Doe", "Jane \t Doe", 1)
        provenance = ProfileExtractor().extract(messy).provenance
        name_entry = [e for e in provenance if e.target_field == "personal.first_name"][0]
        assert name_entry.source_span.text == "Jane Doe"
        assert name_entry.source_span.start == 0

    def test_idempotent(self):
        """The same text always yields an identical extraction."""
        extractor = ProfileExtractor()
        assert extractor.extract(SAMPLE_CV_TEXT) == extractor.extract(SAMPLE_CV_TEXT)
        assert extract_profile(GERMAN_CV_TEXT) == extract_profile(GERMAN_CV_TEXT)

    def test_templates_are_not_mutated(self):
        """Extractors in the map are templates; runs work on copies."""
        template = PersonalInfoExtractor()
        extractor = ProfileExtractor(extractor_map={"personal": [template]})
        extractor.extract(MINIMAL_CV_TEXT)

        assert template.text == ""
        assert template.provenance == []

    def test_fallback_after_failure(self):
        """A raising extractor falls back to the next one in the list."""
        extractor = ProfileExtractor(extractor_map={"highlights": [FailingExtractor(), DummyExtractor()]})
        extraction = extractor.extract("Some CV text")

        assert extraction.draft.highlights == ["dummy"]
        assert len(extraction.provenance) == 1

    def test_all_extractors_fail(self):
        """If every extractor fails the section keeps its empty default."""
        extractor = ProfileExtractor(extractor_map={"highlights": [FailingExtractor()]})
        extraction = extractor.extract(SAMPLE_CV_TEXT)

        assert extraction.draft == CandidateProfileDraft()
        assert extraction.provenance == []

    def test_empty_text(self):
        extraction = ProfileExtractor().extract("")
        assert extraction.draft == CandidateProfileDraft()
        assert extraction.draft.personal == PersonalInfo()
        assert extraction.provenance == []

    def test_parallel_matches_sequential(self):
        """Parallel extraction assembles the same output as sequential extraction."""
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            parallel = ProfileExtractor(max_threads=4)
        sequential = ProfileExtractor(max_threads=1)

        assert parallel.extract(SAMPLE_CV_TEXT) == sequential.extract(SAMPLE_CV_TEXT)

    def test_extract_profile(self):
        draft = extract_profile(MINIMAL_CV_TEXT).draft
        assert (draft.personal.first_name, draft.personal.last_name) == ("Jane", "Doe")
        assert draft.personal.email == "jane.doe@example.com"
        assert draft.skills == []
