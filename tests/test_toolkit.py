"""Tests for the EmailToolkit facade."""

from unittest.mock import AsyncMock

import pytest

import mailsense
from mailsense.config import AppConfig, Settings, get_config, get_settings
from mailsense.schemas import EmailType, Mistake, ValidationOptions
from mailsense.services.resolvers import CachedResolver
from mailsense.toolkit import EmailToolkit


class TestToolkitConstruction:
    """Tests for wiring state and resolvers."""

    def test_dns_disabled_by_default(self, toolkit):
        assert isinstance(toolkit.resolver, CachedResolver)
        assert toolkit.resolver.enabled is False

    def test_plain_backend_is_wrapped(self, app_config, state, mock_backend):
        toolkit = EmailToolkit(config=app_config, state=state, resolver=mock_backend)
        assert isinstance(toolkit.resolver, CachedResolver)
        assert toolkit.resolver.cache is state.dns_cache

    def test_shared_state_is_visible_to_both(self, app_config, state):
        first = EmailToolkit(config=app_config, state=state)
        second = EmailToolkit(config=app_config, state=state)

        first.add_blocked_domain("spam.biz")

        assert second.is_domain_blocked("spam.biz") is True
        assert second.is_disposable("someone@spam.biz") is True

    def test_singleton(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MAILSENSE_CONFIG_PATH", str(tmp_path / "missing.yml"))
        get_settings.cache_clear()
        get_config.cache_clear()
        mailsense.reset_toolkit()
        try:
            assert mailsense.get_toolkit() is mailsense.get_toolkit()
        finally:
            mailsense.reset_toolkit()
            get_settings.cache_clear()
            get_config.cache_clear()


class TestToolkitOperations:
    """Tests for the synchronous operations."""

    def test_normalization(self, toolkit):
        assert toolkit.normalize("John.Doe+x@Gmail.com") == "johndoe@gmail.com"
        assert toolkit.canonicalize("jane.doe42@example.com") == "janedoe@example.com"
        assert toolkit.get_domain("a@Example.com") == "example.com"
        assert toolkit.get_local_part("A.B@gmail.com") == "ab"
        assert toolkit.are_equal("j.doe@gmail.com", "jdoe+z@gmail.com") is True
        assert toolkit.normalize_bulk(["a@b.co", "x"]) == ["a@b.co", None]

    def test_classification(self, toolkit):
        assert toolkit.get_provider("x@hotmail.com") == "outlook"
        assert toolkit.get_tld("x@example.co.uk") == "uk"
        assert toolkit.get_sld("x@example.co.uk") == "co"
        assert toolkit.get_tld_category("x@example.org") == "generic"
        assert toolkit.is_role_based("admin@company.com") is True
        assert toolkit.is_corporate("admin@company.com") is True
        assert toolkit.is_free_provider("x@yahoo.com") is True
        assert toolkit.get_type("x@yopmail.com") == EmailType.DISPOSABLE

    def test_invalid_address_classification(self, toolkit):
        assert toolkit.get_provider("nope") is None
        assert toolkit.get_type("nope") is None
        assert toolkit.is_disposable("nope") is False
        assert toolkit.classify("nope") is None

    def test_validation(self, toolkit):
        assert toolkit.is_valid_syntax('"a b"@example.com') is False
        assert toolkit.is_valid_syntax('"a b"@example.com', strict=True) is True
        assert toolkit.is_valid("user@example.com") is True
        assert toolkit.filter_valid(["user@example.com", "bad"]) == ["user@example.com"]
        assert toolkit.filter_invalid(["user@example.com", "bad"]) == ["bad"]
        assert toolkit.validate_list("a@example.com\nbad")["total"] == 2

    def test_suggestions(self, toolkit):
        assert toolkit.suggest("john@gmial.com")[0] == "john@gmail.com"
        assert toolkit.get_common_mistakes("nope") == [Mistake.MISSING_AT]
        assert toolkit.similarity("abc", "abc") == 100.0
        assert toolkit.find_similar("john@gmail.com", ["jon@gmail.com"])[0].email == "jon@gmail.com"

    def test_batch_helpers(self, toolkit):
        emails = ["a.b@gmail.com", "ab@gmail.com", "c@corp.com"]
        assert toolkit.remove_duplicates(emails) == ["a.b@gmail.com", "c@corp.com"]
        assert list(toolkit.group_by_provider(emails)) == ["gmail", "other"]
        assert list(toolkit.group_by_domain(emails)) == ["gmail.com", "corp.com"]

    def test_domain_lists(self, toolkit):
        toolkit.add_allowed_domain("partner.com")
        toolkit.add_blocked_domain("spam.biz")

        assert toolkit.is_domain_allowed("partner.com") is True
        assert "partner.com" in toolkit.get_allowed_domains()
        assert "spam.biz" in toolkit.get_blocked_domains()

        exported = toolkit.export_config()
        toolkit.remove_allowed_domain("partner.com")
        toolkit.remove_blocked_domain("spam.biz")
        assert toolkit.is_domain_blocked("spam.biz") is False

        toolkit.import_config(exported)
        assert toolkit.is_domain_blocked("spam.biz") is True

    def test_formatting_and_generation(self, toolkit):
        assert toolkit.mask("johndoe@example.com") == "joh*doe@e******.com"
        assert toolkit.obfuscate("a@b.co", "reverse") == "oc.b@a"
        assert toolkit.create_mailto_link("a@b.co", subject="Hi") == "mailto:a@b.co?subject=Hi"
        assert toolkit.get_gravatar_url("a@b.co").startswith("https://www.gravatar.com/avatar/")
        assert toolkit.parse_with_name("Jane <jane@example.com>").name == "Jane"
        assert toolkit.format_with_name("jane@example.com", "Jane") == "Jane <jane@example.com>"
        assert toolkit.extract_from_text("mail jane@example.com now") == ["jane@example.com"]
        assert toolkit.generate_alias("jane@gmail.com", "x") == "jane+x@gmail.com"
        assert toolkit.generate_variations("ab@example.com") == ["ab@example.com"]
        assert len(toolkit.generate_from_name("Jane", "Doe", "acme.com")) == 12
        assert toolkit.generate("example.com", 5, include_numbers=False).endswith("@example.com")

    def test_formatting_uses_block_list(self, toolkit):
        toolkit.add_blocked_domain("acme.io")

        assert toolkit.extract_from_text("a@acme.io or b@example.com") == ["b@example.com"]
        assert toolkit.parse_with_name("Jane <jane@acme.io>").valid is False

    def test_formatting_uses_idn_setting(self, tmp_path, state):
        """Unicode domains are left alone when IDN support is off."""
        settings = Settings(config_path=str(tmp_path / "missing.yml"), idn_enabled=False)
        toolkit = EmailToolkit(config=AppConfig(settings), state=state)

        assert toolkit.mask("user@münchen.de") == "user@münchen.de"
        assert toolkit.create_mailto_link("user@münchen.de") == ""
        assert toolkit.get_gravatar_url("user@münchen.de") == ""
        assert toolkit.generate_alias("user@münchen.de", "x") is None
        assert toolkit.parse_with_name("user@münchen.de").valid is False


class TestToolkitDns:
    """Tests for the DNS-backed operations."""

    @pytest.mark.asyncio
    async def test_records(self, dns_toolkit, mock_backend):
        assert await dns_toolkit.has_mx_record("example.com") is True
        assert await dns_toolkit.has_dns_record("example.com") is True

    @pytest.mark.asyncio
    async def test_deliverable_falls_back_to_any_record(self, dns_toolkit, mock_backend):
        mock_backend.has_mx_record.return_value = False
        assert await dns_toolkit.is_deliverable("user@example.com") is True

        mock_backend.has_any_record.return_value = False
        dns_toolkit.clear_dns_cache()
        assert await dns_toolkit.is_deliverable("user@example.com") is False

    @pytest.mark.asyncio
    async def test_deliverable_invalid_address(self, dns_toolkit, mock_backend):
        assert await dns_toolkit.is_deliverable("nope") is False
        mock_backend.has_mx_record.assert_not_called()

    @pytest.mark.asyncio
    async def test_validate_with_mx(self, dns_toolkit, mock_backend):
        mock_backend.has_mx_record.return_value = False
        options = ValidationOptions(check_mx=True)

        assert await dns_toolkit.validate("user@example.com", options) is False
        assert await dns_toolkit.validate_bulk(["user@example.com"]) == {"user@example.com": True}

    @pytest.mark.asyncio
    async def test_analyze_and_statistics(self, dns_toolkit):
        report = await dns_toolkit.analyze("user@example.com")
        assert report.dns_checked is True
        assert report.has_mx is True

        stats = await dns_toolkit.get_statistics(["user@example.com", "bad"])
        assert stats.valid == 1
        assert stats.invalid == 1

    @pytest.mark.asyncio
    async def test_dns_cache_is_shared_state(self, dns_toolkit, mock_backend, state):
        await dns_toolkit.has_mx_record("example.com")
        assert "example.com" in state.dns_cache

        dns_toolkit.clear_dns_cache()
        assert len(state.dns_cache) == 0


@pytest.mark.asyncio
async def test_backend_errors_do_not_escape(app_config, state):
    """A failing backend degrades to "no record" instead of raising."""
    backend = AsyncMock()
    backend.resolver_name = "broken"
    backend.enabled = True
    backend.has_mx_record.side_effect = RuntimeError("boom")
    toolkit = EmailToolkit(config=app_config, state=state, resolver=backend)

    assert await toolkit.has_mx_record("example.com") is False
