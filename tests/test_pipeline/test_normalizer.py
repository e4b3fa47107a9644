"""Tests for address normalization and canonicalization."""

import pytest

from mailsense.pipeline.normalizer import (
    EmailAddress,
    are_equal,
    canonicalize,
    find_local_part_rule,
    normalize,
)


class TestNormalize:
    """Tests for normalize()."""

    @pytest.mark.parametrize(
        "email,expected",
        [
            ("John.Doe+news@Gmail.com", "johndoe@gmail.com"),
            ("j.o.h.n@googlemail.com", "john@googlemail.com"),
            ("user.name+tag@outlook.com", "user.name@outlook.com"),
            ("user+tag@hotmail.com", "user@hotmail.com"),
            ("jane-list@yahoo.co.uk", "jane@yahoo.co.uk"),
            ("jane+list@yahoo.com", "jane+list@yahoo.com"),
            ("tim+apps@icloud.com", "tim@icloud.com"),
            ("first.last+tag@example.com", "first.last+tag@example.com"),
        ],
    )
    def test_provider_rules(self, email, expected):
        """Should apply the rule of the matching provider only."""
        assert normalize(email) == expected

    def test_lowercases_and_strips_whitespace(self):
        assert normalize("  User@Example.COM ") == "user@example.com"

    def test_encodes_idn_domain(self):
        assert normalize("user@münchen.de") == "user@xn--mnchen-3ya.de"

    def test_idn_domain_without_idna_support(self):
        """Unicode domains cannot be normalized without IDN support."""
        assert normalize("user@münchen.de", use_idna=False) is None

    def test_keeps_ip_literal(self):
        assert normalize("User@[192.168.0.1]") == "user@[192.168.0.1]"

    def test_invalid_returns_none(self):
        assert normalize("not-an-email") is None
        assert normalize("") is None

    def test_rule_matched_on_mapped_domain(self):
        """A domain that maps to gmail.com gets the gmail rule on the first pass."""
        assert normalize("a.b+x@ｇmail.com") == "ab@gmail.com"

    def test_skips_rewrite_that_empties_local_part(self):
        """A bare tag is kept rather than producing an empty local part."""
        assert normalize("+tag@gmail.com") == "+tag@gmail.com"

    @pytest.mark.parametrize(
        "email",
        [
            "John.Doe+news@Gmail.com",
            "jane-list@yahoo.fr",
            "user@münchen.de",
            "Someone@Example.org",
            "a.b+x@ｇmail.com",
        ],
    )
    def test_idempotent(self, email):
        """normalize(normalize(x)) == normalize(x)."""
        once = normalize(email)
        assert once is not None
        assert normalize(once) == once


class TestLocalPartRules:
    """Tests for provider rule lookup."""

    def test_yahoo_matches_any_tld(self):
        rule = find_local_part_rule("yahoo.com.br")
        assert rule is not None
        assert rule.name == "yahoo"
        assert rule.tag_separator == "-"

    def test_unknown_domain(self):
        assert find_local_part_rule("example.com") is None


class TestCanonicalize:
    """Tests for canonicalize()."""

    def test_strips_dots_for_any_provider(self):
        assert canonicalize("first.last@example.com") == "firstlast@example.com"

    def test_strips_trailing_digits(self):
        assert canonicalize("j.o.h.n123@example.com") == "john@example.com"

    def test_keeps_all_digit_local_part(self):
        """Digits are kept when nothing else would remain."""
        assert canonicalize("123@example.com") == "123@example.com"

    def test_invalid_returns_none(self):
        assert canonicalize("nope") is None

    def test_idempotent_for_mapped_provider_domain(self):
        once = canonicalize("a.b+x@ｇmail.com")
        assert once == "ab@gmail.com"
        assert canonicalize(once) == once


class TestAreEqual:
    """Tests for alias-insensitive comparison."""

    def test_aliases_are_equal(self):
        assert are_equal("John.Doe+x@gmail.com", "johndoe@GMAIL.com") is True

    def test_trailing_digits_are_ignored(self):
        assert are_equal("alice1@example.com", "alice@example.com") is True

    def test_mapped_provider_domain_is_equal(self):
        assert are_equal("a+b@ｇmail.com", "a@gmail.com") is True

    def test_different_domains_are_not_equal(self):
        assert are_equal("john@gmail.com", "john@googlemail.com") is False

    def test_invalid_addresses_never_equal(self):
        assert are_equal("bad", "bad") is False


class TestEmailAddress:
    """Tests for the EmailAddress value object."""

    def test_derived_parts(self):
        address = EmailAddress("John.Doe+news@Gmail.com")
        assert address.is_valid is True
        assert address.normalized == "johndoe@gmail.com"
        assert address.local_part == "johndoe"
        assert address.domain == "gmail.com"
        assert str(address) == "John.Doe+news@Gmail.com"

    def test_invalid_address(self):
        address = EmailAddress("not-an-email")
        assert address.is_valid is False
        assert address.local_part is None
        assert address.domain is None
        assert address.canonical is None
