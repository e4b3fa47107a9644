"""One object exposing every operation, bound to shared state and a resolver."""

from typing import Any

from mailsense.config import AppConfig, Settings, get_config
from mailsense.core.logging import get_logger
from mailsense.core.state import ToolkitState
from mailsense.pipeline import analyzer, classifier, formatting, generation, suggestions, validation
from mailsense.pipeline.normalizer import EmailAddress, are_equal
from mailsense.pipeline.syntax import is_valid_syntax
from mailsense.schemas import (
    AnalysisReport,
    DomainClassification,
    EmailType,
    Mistake,
    ParsedAddress,
    SimilarEmail,
    Statistics,
    ValidationOptions,
)
from mailsense.services.resolvers import BaseDnsResolver, CachedResolver, create_dns_resolver

logger = get_logger(__name__)


class EmailToolkit:
    """
    Email analysis toolkit.

    Pure operations only read the static tables and the block list. The
    state (allow/block lists, DNS cache) is shared by reference, so two
    toolkits built on the same ToolkitState see each other's changes.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        state: ToolkitState | None = None,
        resolver: BaseDnsResolver | None = None,
    ) -> None:
        """
        Initialize toolkit.

        Args:
            config: App configuration; seeds the domain lists of a new state
            state: Shared state to use instead of a fresh one
            resolver: DNS backend; defaults to the one configured in settings
        """
        self.config = config or get_config()
        self.settings: Settings = self.config.settings
        self.state = state or ToolkitState.from_config(self.config)

        if resolver is None:
            self.resolver = create_dns_resolver(self.settings, self.state.dns_cache)
        elif isinstance(resolver, CachedResolver):
            self.resolver = resolver
        else:
            self.resolver = CachedResolver(
                resolver, self.state.dns_cache, timeout_seconds=self.settings.dns_timeout
            )

        logger.bind(resolver=self.resolver.resolver_name).debug("toolkit_initialized")

    @property
    def _use_idna(self) -> bool:
        return self.settings.idn_enabled

    def _address(self, email: str) -> EmailAddress:
        return EmailAddress(email, use_idna=self._use_idna)

    def _classify(self, email: str) -> DomainClassification | None:
        return classifier.classify(self._address(email), self.state.domains)

    # -------------------------------------------------------------------------
    # Normalization
    # -------------------------------------------------------------------------

    def normalize(self, email: str) -> str | None:
        return self._address(email).normalized

    def canonicalize(self, email: str) -> str | None:
        return self._address(email).canonical

    def normalize_bulk(self, emails: list[str]) -> list[str | None]:
        return validation.normalize_bulk(emails, use_idna=self._use_idna)

    def get_domain(self, email: str) -> str | None:
        return self._address(email).domain

    def get_local_part(self, email: str) -> str | None:
        return self._address(email).local_part

    def are_equal(self, email1: str, email2: str) -> bool:
        return are_equal(email1, email2, use_idna=self._use_idna)

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def classify(self, email: str) -> DomainClassification | None:
        return self._classify(email)

    def get_provider(self, email: str) -> str | None:
        classification = self._classify(email)
        return classification.provider if classification else None

    def get_tld(self, email: str) -> str | None:
        classification = self._classify(email)
        return classification.tld if classification else None

    def get_sld(self, email: str) -> str | None:
        classification = self._classify(email)
        return classification.sld if classification else None

    def get_tld_category(self, email: str) -> str | None:
        domain = self.get_domain(email)
        return classifier.get_tld_category(domain) if domain else None

    def is_disposable(self, email: str) -> bool:
        classification = self._classify(email)
        return classification is not None and classification.is_disposable

    def is_role_based(self, email: str) -> bool:
        classification = self._classify(email)
        return classification is not None and classification.is_role_based

    def is_free_provider(self, email: str) -> bool:
        classification = self._classify(email)
        return classification is not None and classification.is_free_provider

    def is_corporate(self, email: str) -> bool:
        classification = self._classify(email)
        return classification is not None and classification.is_corporate

    def get_type(self, email: str) -> EmailType | None:
        classification = self._classify(email)
        return classification.type if classification else None

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def is_valid_syntax(self, email: str, strict: bool | None = None) -> bool:
        return is_valid_syntax(email, self.settings.strict_syntax if strict is None else strict)

    def is_valid(self, email: str) -> bool:
        return validation.is_valid(email, self.state.domains, use_idna=self._use_idna)

    async def validate(self, email: str, options: ValidationOptions | None = None) -> bool:
        return await validation.validate(
            email, options, self.state.domains, self.resolver, use_idna=self._use_idna
        )

    async def validate_bulk(
        self, emails: list[str], options: ValidationOptions | None = None
    ) -> dict[str, bool]:
        return await validation.validate_bulk(
            emails, options, self.state.domains, self.resolver, use_idna=self._use_idna
        )

    def filter_valid(self, emails: list[str]) -> list[str]:
        return validation.filter_valid(emails, self.state.domains, use_idna=self._use_idna)

    def filter_invalid(self, emails: list[str]) -> list[str]:
        return validation.filter_invalid(emails, self.state.domains, use_idna=self._use_idna)

    def validate_list(self, text: str) -> dict[str, list[str] | int]:
        return validation.validate_list(text, self.state.domains, use_idna=self._use_idna)

    # -------------------------------------------------------------------------
    # DNS
    # -------------------------------------------------------------------------

    async def has_dns_record(self, domain: str) -> bool:
        return await self.resolver.has_any_record(domain)

    async def has_mx_record(self, domain: str) -> bool:
        return await self.resolver.has_mx_record(domain)

    async def is_deliverable(self, email: str) -> bool:
        """MX record present, or at least some DNS record as a fallback."""
        domain = self.get_domain(email)
        if domain is None:
            return False
        return await self.has_mx_record(domain) or await self.has_dns_record(domain)

    def clear_dns_cache(self) -> None:
        self.state.dns_cache.clear()

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    async def analyze(self, email: str) -> AnalysisReport:
        return await analyzer.analyze(
            email, registry=self.state.domains, resolver=self.resolver, settings=self.settings
        )

    async def get_statistics(self, emails: list[str]) -> Statistics:
        return await analyzer.get_statistics(
            emails, registry=self.state.domains, resolver=self.resolver, settings=self.settings
        )

    def remove_duplicates(self, emails: list[str]) -> list[str]:
        return analyzer.remove_duplicates(emails, use_idna=self._use_idna)

    def group_by_provider(self, emails: list[str]) -> dict[str, list[str]]:
        return analyzer.group_by_provider(emails, use_idna=self._use_idna)

    def group_by_domain(self, emails: list[str]) -> dict[str, list[str]]:
        return analyzer.group_by_domain(emails, use_idna=self._use_idna)

    # -------------------------------------------------------------------------
    # Suggestions and similarity
    # -------------------------------------------------------------------------

    def suggest(self, email: str) -> list[str]:
        return suggestions.suggest(email, threshold=self.settings.similarity_threshold)

    def get_common_mistakes(self, email: str) -> list[Mistake]:
        return suggestions.get_common_mistakes(email)

    def similarity(self, email1: str, email2: str) -> float:
        return suggestions.similarity(email1, email2)

    def find_similar(
        self, email: str, emails: list[str], threshold: float | None = None
    ) -> list[SimilarEmail]:
        threshold = self.settings.similarity_threshold if threshold is None else threshold
        return suggestions.find_similar(email, emails, threshold)

    # -------------------------------------------------------------------------
    # Domain lists
    # -------------------------------------------------------------------------

    def add_allowed_domain(self, domain: str) -> None:
        self.state.domains.add_allowed(domain)

    def remove_allowed_domain(self, domain: str) -> None:
        self.state.domains.remove_allowed(domain)

    def add_blocked_domain(self, domain: str) -> None:
        self.state.domains.add_blocked(domain)

    def remove_blocked_domain(self, domain: str) -> None:
        self.state.domains.remove_blocked(domain)

    def get_allowed_domains(self) -> list[str]:
        return self.state.domains.allowed_domains()

    def get_blocked_domains(self) -> list[str]:
        return self.state.domains.blocked_domains()

    def is_domain_allowed(self, domain: str) -> bool:
        return self.state.domains.is_allowed(domain)

    def is_domain_blocked(self, domain: str) -> bool:
        return self.state.domains.is_blocked(domain)

    def export_config(self) -> dict[str, Any]:
        return self.state.domains.export_config()

    def import_config(self, data: dict[str, Any]) -> None:
        self.state.domains.import_config(data)

    # -------------------------------------------------------------------------
    # Formatting and generation
    # -------------------------------------------------------------------------

    def mask(self, email: str, visible_chars: int = 3, mask_char: str = "*") -> str:
        return formatting.mask(email, visible_chars, mask_char, use_idna=self._use_idna)

    def obfuscate(self, email: str, method: str = "html") -> str:
        return formatting.obfuscate(email, method)

    def create_mailto_link(self, email: str, **params: str) -> str:
        return formatting.create_mailto_link(email, use_idna=self._use_idna, **params)

    def get_gravatar_url(
        self, email: str, size: int = 80, default: str = "mp", rating: str = "g"
    ) -> str:
        return formatting.get_gravatar_url(
            email, size, default, rating, use_idna=self._use_idna
        )

    def parse_with_name(self, text: str) -> ParsedAddress:
        return formatting.parse_with_name(text, self.state.domains, use_idna=self._use_idna)

    def format_with_name(self, email: str, name: str | None = None) -> str:
        return formatting.format_with_name(email, name)

    def extract_from_text(self, text: str) -> list[str]:
        return formatting.extract_from_text(text, self.state.domains, use_idna=self._use_idna)

    def generate_alias(self, email: str, alias: str) -> str | None:
        return generation.generate_alias(email, alias, use_idna=self._use_idna)

    def generate_variations(self, email: str) -> list[str]:
        return generation.generate_variations(email, use_idna=self._use_idna)

    def generate_from_name(self, first_name: str, last_name: str, domain: str) -> list[str]:
        return generation.generate_from_name(first_name, last_name, domain)

    def generate(self, domain: str = "gmail.com", length: int = 10, **options: Any) -> str:
        return generation.generate(domain, length, **options)
