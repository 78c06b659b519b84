"""Tests for the quick-add shorthand markers."""

import pytest

from quickadd.quick_syntax import (
    extract_description,
    extract_effort,
    extract_folder,
    extract_tags,
)


class TestDescription:
    """Test trailing description separators."""

    @pytest.mark.parametrize("separator", ["//", "--", "|"])
    def test_separators(self, separator):
        found = extract_description(f"Write report {separator} include Q3 numbers")
        assert found.value == "include Q3 numbers"
        assert found.matched == f" {separator} include Q3 numbers"

    def test_url_is_not_a_description(self):
        assert extract_description("Read http://example.com") is None


class TestEffort:
    """Test effort estimates."""

    @pytest.mark.parametrize("text, hours", [
        ("Deck ~2h", 2.0),
        ("Deck ~1.5h", 1.5),
        ("Deck ~1h30m", 1.5),
        ("Deck ~45m", 0.75),
        ("Deck est:2h", 2.0),
        ("Deck effort:30m", 0.5),
    ])
    def test_estimates(self, text, hours):
        assert extract_effort(text).value == pytest.approx(hours)

    def test_matched_span(self):
        assert extract_effort("Deck ~1h30m today").matched == "~1h30m"

    def test_no_estimate(self):
        assert extract_effort("Deck review") is None


class TestTags:
    """Test tag collection."""

    def test_simple_tags(self):
        found = extract_tags("Buy milk #errands #home")
        assert found.value == ("errands", "home")
        assert found.matched == ("#errands", "#home")

    def test_quoted_tags_first_and_deduplicated(self):
        found = extract_tags('Plan trip #travel #"summer 2024" #travel')
        assert found.value == ("summer 2024", "travel")
        assert found.matched == ('#"summer 2024"', "#travel", "#travel")

    def test_no_tags(self):
        assert extract_tags("Buy milk") is None


class TestFolder:
    """Test folder references."""

    def test_simple_folder(self):
        found = extract_folder("Buy milk @Home")
        assert found.value == "Home"
        assert found.matched == "@Home"

    def test_quoted_folder(self):
        assert extract_folder('Fix bug @"Side Projects"').value == "Side Projects"

    def test_first_folder_wins(self):
        assert extract_folder("Sort @work and @home").value == "work"
