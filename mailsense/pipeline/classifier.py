"""Provider, TLD and category classification of normalized addresses."""

import re
from collections.abc import Callable
from typing import NamedTuple

from mailsense.core.state import DomainRegistry
from mailsense.pipeline.domain_codec import is_idn, is_ip_literal
from mailsense.pipeline.normalizer import EmailAddress
from mailsense.pipeline.tables import (
    DISPOSABLE_DOMAINS,
    FREE_PROVIDERS,
    PROVIDERS,
    ROLE_BASED,
    TLD_CATEGORIES,
)
from mailsense.schemas import DomainClassification, EmailType

# Domain heuristics for throwaway mailboxes
DISPOSABLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(temp|tmp|disposable|throwaway|trash|fake|dummy)", re.IGNORECASE),
    re.compile(r"\d{5,}"),  # Many numbers
    re.compile(r"mailinator\d*", re.IGNORECASE),
)


def get_provider(domain: str) -> str | None:
    """Look up the provider id owning a domain."""
    domain = domain.lower()
    for provider, domains in PROVIDERS.items():
        if domain in domains:
            return provider
    return None


def get_tld(domain: str) -> str | None:
    if is_ip_literal(domain):
        return None
    return domain.rsplit(".", 1)[-1]


def get_sld(domain: str) -> str | None:
    if is_ip_literal(domain):
        return None
    parts = domain.split(".")
    if len(parts) < 2:
        return None
    return parts[-2]


def get_tld_category(domain: str) -> str | None:
    """Return generic / sponsored / country / new for known TLDs."""
    tld = get_tld(domain)
    if tld is None:
        return None
    for category, tlds in TLD_CATEGORIES.items():
        if tld in tlds:
            return category
    return None


def is_disposable_domain(domain: str, registry: DomainRegistry | None = None) -> bool:
    """
    Check a domain against the disposable list, the block list and the
    throwaway-name heuristics.
    """
    domain = domain.lower()

    if domain in DISPOSABLE_DOMAINS:
        return True

    if registry is not None and domain in registry.custom_blocked:
        return True

    return any(pattern.search(domain) for pattern in DISPOSABLE_PATTERNS)


def is_role_local_part(local: str) -> bool:
    return local in ROLE_BASED


def is_free_provider(provider: str | None) -> bool:
    return provider in FREE_PROVIDERS


class TypeRule(NamedTuple):
    """Maps a classification flag to a resolved type."""

    type: EmailType
    applies: Callable[[DomainClassification], bool]


# Evaluated top to bottom, first match wins; corporate is the fallback
TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule(EmailType.DISPOSABLE, lambda c: c.is_disposable),
    TypeRule(EmailType.ROLE_BASED, lambda c: c.is_role_based),
    TypeRule(EmailType.FREE, lambda c: c.is_free_provider),
)


def resolve_type(classification: DomainClassification) -> EmailType:
    for rule in TYPE_RULES:
        if rule.applies(classification):
            return rule.type
    return EmailType.CORPORATE


def classify(
    address: EmailAddress,
    registry: DomainRegistry | None = None,
) -> DomainClassification | None:
    """
    Classify a parsed address.

    Args:
        address: The address to classify
        registry: Runtime block list to treat as disposable

    Returns:
        DomainClassification, or None if the address does not normalize
    """
    local, domain = address.local_part, address.domain
    if local is None or domain is None:
        return None

    provider = get_provider(domain)
    disposable = is_disposable_domain(domain, registry)
    free = is_free_provider(provider)

    classification = DomainClassification(
        provider=provider,
        tld=get_tld(domain),
        sld=get_sld(domain),
        is_disposable=disposable,
        is_role_based=is_role_local_part(local),
        is_free_provider=free,
        is_corporate=not free and not disposable,
        is_ip_literal=is_ip_literal(domain),
        # Any ACE label makes the domain an IDN, not only the first one
        is_idn=any(is_idn(label) for label in domain.split(".")),
    )
    return classification.model_copy(update={"type": resolve_type(classification)})
