"""test_section_finder.py
Test line splitting and section detection.
"""
import pytest

from cv_autofill.parse_classes.field_extractor.helper_functions.section_finder import (
    SECTION_HEADERS,
    Section,
    TextLine,
    find_section,
    is_section_header,
    match_header,
    split_lines,
)


class TestSplitLines:
    """Tests for split_lines."""

    def test_offsets_and_empty_lines(self):
        text = "Jane\n\nDoe\nZürich"
        lines = split_lines(text)
        assert [line.text for line in lines] == ["Jane", "Doe", "Zürich"]
        for line in lines:
            assert text[line.start:line.end] == line.text

    def test_empty_text(self):
        assert split_lines("") == []


class TestMatchHeader:
    """Tests for match_header and is_section_header."""

    @pytest.mark.parametrize(
        "line, section, expected",
        [
            ("Work Experience", "experience", "work experience"),
            ("BERUFSERFAHRUNG:", "experience", "berufserfahrung"),
            ("Work Experience (2010-2020)", "experience", "work experience"),
            ("Expérience professionnelle", "experience", "expérience professionnelle"),
            ("Skills: Python, SQL", "skills", "skills"),
            ("Sprachen", "languages", "sprachen"),
            ("Key Achievements", "highlights", "key achievements"),
        ],
    )
    def test_headers(self, line, section, expected):
        assert match_header(line, SECTION_HEADERS[section]) == expected

    @pytest.mark.parametrize(
        "line, section",
        [
            ("Experience in leading teams of engineers", "experience"),
            ("Technologies: Docker, Kubernetes", "skills"),
            ("Jane Doe", "experience"),
            ("Education", "skills"),
        ],
    )
    def test_content_lines_are_not_headers(self, line, section):
        assert match_header(line, SECTION_HEADERS[section]) is None

    def test_is_section_header(self):
        assert is_section_header("Languages") is True
        assert is_section_header("Lebenslauf") is True  # ends sections without being extracted
        assert is_section_header("Jane Doe") is False


class TestFindSection:
    """Tests for find_section."""

    TEXT = "Jane Doe\nSkills: Python, SQL\nDocker\nLanguages\nGerman"

    def test_section_runs_until_next_header(self):
        section = find_section(self.TEXT, SECTION_HEADERS["skills"])

        assert isinstance(section, Section)
        assert section.header == "Skills: Python, SQL"
        assert [line.text for line in section.lines] == ["Python, SQL", "Docker"]
        assert section.text == "Python, SQL\nDocker"

    def test_inline_content_offsets(self):
        """Inline content after the colon keeps its offset in the text."""
        section = find_section(self.TEXT, SECTION_HEADERS["skills"])
        first = section.lines[0]
        assert isinstance(first, TextLine)
        assert self.TEXT[first.start:first.end] == "Python, SQL"
        assert self.TEXT[section.start:section.end] == "Python, SQL\nDocker"

    def test_last_section_runs_to_end(self):
        section = find_section(self.TEXT, SECTION_HEADERS["languages"])
        assert [line.text for line in section.lines] == ["German"]

    def test_missing_section(self):
        assert find_section(self.TEXT, SECTION_HEADERS["education"]) is None

    def test_empty_section(self):
        assert find_section("Skills\nLanguages\nGerman", SECTION_HEADERS["skills"]) is None
