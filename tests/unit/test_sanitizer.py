"""
Unit tests for the research text sanitizer.

The sanitizer is a pure function, so these tests are plain input/output
checks with no setup.
"""

import pytest

from saif.core.sanitizer import ANNOTATION_PATTERNS, first_sentence, sanitize


# ---------------------------------------------------------------------------
# sanitize
# ---------------------------------------------------------------------------

class TestSanitize:
    """Tests for annotation removal and whitespace cleanup."""

    def test_removes_citation_with_index(self):
        """A citation marker followed by its index body disappears entirely."""
        text = "Effective exercise.contentReference[oai_citation:1]{index=1} Good."
        assert sanitize(text) == "Effective exercise. Good."

    def test_removes_citation_without_braces(self):
        """Bare citation markers are removed too."""
        assert sanitize("Strong lats.contentReference[oai_citation:2]") == "Strong lats."

    def test_removes_image_placeholders(self):
        text = "Quad dominant. [image leg press foot placement diagram] Low spinal load."
        assert sanitize(text) == "Quad dominant. Low spinal load."

    def test_removes_standalone_index_markers(self):
        assert sanitize("Comparable activation {index=3}.") == "Comparable activation ."

    def test_braced_form_leaves_no_orphaned_fragment(self):
        """The braces belong to the citation and must go with it."""
        result = sanitize("A contentReference[x]{index=12} B")
        assert "{" not in result
        assert "index" not in result
        assert result == "A B"

    def test_citation_spanning_lines_is_removed(self):
        """Citation bodies can wrap; the patterns match across newlines."""
        text = "Before contentReference[oai\ncitation]{index=4} after"
        assert sanitize(text) == "Before after"

    def test_collapses_repeated_spaces(self):
        assert sanitize("too    many   spaces") == "too many spaces"

    def test_trims_surrounding_whitespace(self):
        assert sanitize("  \n padded text \t ") == "padded text"

    def test_keeps_newlines_inside_text(self):
        """Only runs of spaces collapse; line structure survives."""
        assert sanitize("line one\nline two") == "line one\nline two"

    def test_plain_text_is_unchanged(self):
        text = "High pectoralis major activation."
        assert sanitize(text) == text

    def test_empty_string(self):
        assert sanitize("") == ""

    def test_marker_exposed_by_removal_is_also_removed(self):
        """Removing an inner marker can splice a new one together."""
        text = "x {ind{index=1}ex=2} y"
        assert sanitize(text) == "x y"

    @pytest.mark.parametrize("text", [
        "Effective exercise.contentReference[oai_citation:1]{index=1} Good.",
        "contentRefcontentReference[a]erence[b]{index=2}",
        "  [image a]  [image b]  ",
        "x {ind{index=1}ex=2} y",
        "a  .  b   .",
        "",
    ])
    def test_is_idempotent(self, text):
        """Sanitizing twice gives the same result as sanitizing once."""
        once = sanitize(text)
        assert sanitize(once) == once


class TestAnnotationPatterns:
    """The pattern list order is part of the contract."""

    def test_braced_citation_precedes_bare_citation(self):
        patterns = [pattern for pattern, _ in ANNOTATION_PATTERNS]
        braced = patterns.index(r"contentReference\[.*?\]\{.*?\}")
        bare = patterns.index(r"contentReference\[.*?\]")
        assert braced < bare

    def test_every_pattern_deletes_its_match(self):
        assert all(replacement == "" for _, replacement in ANNOTATION_PATTERNS)


# ---------------------------------------------------------------------------
# first_sentence
# ---------------------------------------------------------------------------

class TestFirstSentence:
    """Tests for first-sentence extraction."""

    def test_returns_text_before_first_period(self):
        assert first_sentence("A. B. C.") == "A"

    def test_without_period_returns_whole_text(self):
        assert first_sentence("No period here") == "No period here"

    def test_sanitizes_before_splitting(self):
        text = "Lat dominant contentReference[oai_citation:5]{index=5}. Biceps assist."
        assert first_sentence(text) == "Lat dominant "

    def test_empty_string(self):
        assert first_sentence("") == ""
