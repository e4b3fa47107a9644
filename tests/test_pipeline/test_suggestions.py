"""Tests for typo suggestions and similarity."""

import pytest

from mailsense.pipeline.suggestions import (
    find_similar,
    get_common_mistakes,
    similarity,
    suggest,
)
from mailsense.schemas import Mistake


class TestSuggest:
    """Tests for suggest()."""

    def test_known_domain_typo(self):
        """gmial.com should suggest gmail.com first."""
        suggestions = suggest("john@gmial.com")
        assert suggestions[0] == "john@gmail.com"

    def test_suggestions_are_unique(self):
        suggestions = suggest("john@gmial.com")
        assert len(suggestions) == len(set(suggestions))

    def test_tld_typo(self):
        assert "user@example.com" in suggest("user@example.con")

    def test_keeps_local_part_case(self):
        """Only the domain is lowercased."""
        assert suggest("John.Doe@GMIAL.com")[0] == "John.Doe@gmail.com"

    def test_no_suggestions_for_unrelated_domain(self):
        assert suggest("user@example.org") == []

    def test_missing_at_sign(self):
        assert suggest("not-an-email") == []

    def test_exact_provider_domain_not_suggested(self):
        """A domain is never suggested as a correction of itself."""
        assert "user@gmail.com" not in suggest("user@gmail.com")

    @pytest.mark.parametrize("email", ["bob@yahoo.com", "bob@gmail.com", "bob@hotmail.com"])
    def test_known_provider_domain_has_no_suggestions(self, email):
        """Sibling provider domains are not offered as corrections."""
        assert suggest(email) == []


class TestSimilarity:
    """Tests for similarity() and find_similar()."""

    def test_identical_strings(self):
        assert similarity("abc", "abc") == 100.0

    def test_empty_strings(self):
        assert similarity("", "") == 0.0

    def test_symmetric_range(self):
        score = similarity("john@gmail.com", "jon@gmail.com")
        assert 0 < score < 100

    def test_find_similar(self):
        emails = ["john@gmail.com", "jon@gmail.com", "zzz@yahoo.com"]
        similar = find_similar("john@gmail.com", emails)

        assert [s.email for s in similar] == ["jon@gmail.com"]
        assert similar[0].similarity >= 80

    def test_find_similar_sorted_descending(self):
        emails = ["jon@gmail.com", "john@gmail.co", "johnny@gmail.com"]
        similar = find_similar("john@gmail.com", emails, threshold=50)
        scores = [s.similarity for s in similar]
        assert scores == sorted(scores, reverse=True)


class TestCommonMistakes:
    """Tests for get_common_mistakes()."""

    def test_missing_at(self):
        assert get_common_mistakes("not-an-email") == [Mistake.MISSING_AT]
        assert Mistake.MISSING_AT.value == "Missing @ symbol"

    def test_multiple_at(self):
        assert get_common_mistakes("a@@example.com") == [Mistake.MULTIPLE_AT]

    def test_at_position(self):
        assert Mistake.INVALID_AT_POSITION in get_common_mistakes("@example.com")

    def test_spaces_and_invalid_characters(self):
        mistakes = get_common_mistakes("john doe@example.com")
        assert Mistake.CONTAINS_SPACES in mistakes
        assert Mistake.INVALID_CHARACTERS in mistakes

    def test_consecutive_dots(self):
        assert get_common_mistakes("a..b@example.com") == [Mistake.CONSECUTIVE_DOTS]

    def test_clean_address(self):
        assert get_common_mistakes("john@example.com") == []
