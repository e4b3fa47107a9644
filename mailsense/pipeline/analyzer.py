"""Single-address reports and batch aggregation."""

import asyncio
from collections import Counter
from collections.abc import Iterable

from mailsense.config import Settings, get_settings
from mailsense.core.logging import get_logger
from mailsense.core.state import DomainRegistry
from mailsense.pipeline.classifier import classify, get_provider
from mailsense.pipeline.domain_codec import is_ip_literal
from mailsense.pipeline.normalizer import EmailAddress, canonicalize
from mailsense.pipeline.scoring import MAX_RISK, compute_risk_score, risk_bucket
from mailsense.pipeline.suggestions import get_common_mistakes, suggest
from mailsense.pipeline.syntax import is_valid_syntax
from mailsense.schemas import (
    AnalysisError,
    AnalysisReport,
    DnsResult,
    RiskBucket,
    RiskDistribution,
    Statistics,
)
from mailsense.services.resolvers import CachedResolver

logger = get_logger(__name__)


def _invalid_report(email: str, error: AnalysisError, settings: Settings) -> AnalysisReport:
    """Report for an address that failed syntax or domain encoding."""
    return AnalysisReport(
        email=email,
        valid=False,
        mistakes=get_common_mistakes(email),
        suggestions=suggest(email, threshold=settings.similarity_threshold),
        risk_score=MAX_RISK,
        error=error,
    )


def build_report(
    email: str,
    registry: DomainRegistry | None = None,
    dns: DnsResult | None = None,
    settings: Settings | None = None,
) -> AnalysisReport:
    """
    Analyze one address without touching the network.

    Args:
        email: Raw address
        registry: Runtime block list used by the disposable check
        dns: DNS results to score, or None if DNS was not checked
        settings: Settings to use instead of the cached ones

    Returns:
        Frozen AnalysisReport. Invalid input yields valid=False, risk 100
        and populated mistakes/suggestions, with every other field at its
        default. Suggestions are only offered for invalid input.
    """
    settings = settings or get_settings()

    if not is_valid_syntax(email.strip(), strict=settings.strict_syntax):
        return _invalid_report(email, AnalysisError.SYNTAX_INVALID, settings)

    address = EmailAddress(email, use_idna=settings.idn_enabled)
    classification = classify(address, registry)
    if classification is None:
        # strict-only addresses (quoted local parts, dotless hosts) fail normalize on syntax
        if not is_valid_syntax(email.strip()):
            return _invalid_report(email, AnalysisError.SYNTAX_INVALID, settings)
        return _invalid_report(email, AnalysisError.DOMAIN_ENCODING_FAILED, settings)

    return AnalysisReport(
        email=email,
        valid=True,
        normalized=address.normalized,
        canonical=address.canonical,
        local_part=address.local_part,
        domain=address.domain,
        provider=classification.provider,
        type=classification.type,
        disposable=classification.is_disposable,
        role_based=classification.is_role_based,
        free_provider=classification.is_free_provider,
        corporate=classification.is_corporate,
        ip_literal=classification.is_ip_literal,
        idn=classification.is_idn,
        tld=classification.tld,
        sld=classification.sld,
        dns_checked=dns is not None,
        has_dns=dns.has_dns if dns else False,
        has_mx=dns.has_mx if dns else False,
        mistakes=get_common_mistakes(email),
        risk_score=compute_risk_score(True, classification, dns),
        error=dns.error if dns else None,
    )


async def check_dns(address: EmailAddress, resolver: CachedResolver | None) -> DnsResult | None:
    """
    Look up DNS and MX records for an address domain.

    Returns None when there is nothing to check: no resolver, a disabled
    resolver, an unparseable address, or an IP-literal domain (scored as
    having neither record).
    """
    if resolver is None or not resolver.enabled or address.domain is None:
        return None

    if is_ip_literal(address.domain):
        return DnsResult(has_dns=False, has_mx=False)

    return await resolver.check(address.domain)


async def analyze(
    email: str,
    registry: DomainRegistry | None = None,
    resolver: CachedResolver | None = None,
    settings: Settings | None = None,
) -> AnalysisReport:
    """Analyze one address, including DNS checks when a resolver is enabled."""
    settings = settings or get_settings()

    dns = None
    if is_valid_syntax(email.strip(), strict=settings.strict_syntax):
        address = EmailAddress(email, use_idna=settings.idn_enabled)
        dns = await check_dns(address, resolver)

    return build_report(email, registry=registry, dns=dns, settings=settings)


def summarize(reports: Iterable[AnalysisReport]) -> Statistics:
    """Aggregate reports into category, provider, TLD and risk counts."""
    total = valid = disposable = role_based = free = corporate = 0
    providers: Counter[str] = Counter()
    tlds: Counter[str] = Counter()
    buckets: Counter[RiskBucket] = Counter()

    for report in reports:
        total += 1
        if not report.valid:
            continue

        valid += 1
        disposable += report.disposable
        role_based += report.role_based
        free += report.free_provider
        corporate += report.corporate

        if report.provider:
            providers[report.provider] += 1
        if report.tld:
            tlds[report.tld] += 1
        buckets[risk_bucket(report.risk_score)] += 1

    return Statistics(
        total=total,
        valid=valid,
        invalid=total - valid,
        disposable=disposable,
        role_based=role_based,
        free=free,
        corporate=corporate,
        # most_common() sorts by count descending, ties in first-seen order
        providers=dict(providers.most_common()),
        tlds=dict(tlds.most_common()),
        risk_distribution=RiskDistribution(
            low=buckets[RiskBucket.LOW],
            medium=buckets[RiskBucket.MEDIUM],
            high=buckets[RiskBucket.HIGH],
        ),
    )


async def get_statistics(
    emails: list[str],
    registry: DomainRegistry | None = None,
    resolver: CachedResolver | None = None,
    settings: Settings | None = None,
) -> Statistics:
    """Analyze every address independently and aggregate the results."""
    settings = settings or get_settings()
    semaphore = asyncio.Semaphore(max(1, settings.dns_concurrency))

    async def _analyze(email: str) -> AnalysisReport:
        async with semaphore:
            return await analyze(email, registry=registry, resolver=resolver, settings=settings)

    reports = await asyncio.gather(*(_analyze(email) for email in emails))
    stats = summarize(reports)
    logger.bind(total=stats.total, valid=stats.valid).info("statistics_computed")
    return stats


def remove_duplicates(emails: Iterable[str], use_idna: bool = True) -> list[str]:
    """
    Drop alias duplicates, keeping the first occurrence as written.

    Addresses that cannot be canonicalized are dropped too.
    """
    unique = []
    seen: set[str] = set()

    for email in emails:
        canonical = canonicalize(email, use_idna=use_idna)
        if canonical and canonical not in seen:
            unique.append(email)
            seen.add(canonical)

    return unique


def group_by_provider(emails: Iterable[str], use_idna: bool = True) -> dict[str, list[str]]:
    """Group addresses by provider id; unknown providers go under "other"."""
    grouped: dict[str, list[str]] = {}

    for email in emails:
        domain = EmailAddress(email, use_idna=use_idna).domain
        provider = (get_provider(domain) if domain else None) or "other"
        grouped.setdefault(provider, []).append(email)

    return grouped


def group_by_domain(emails: Iterable[str], use_idna: bool = True) -> dict[str, list[str]]:
    """Group addresses by normalized domain; invalid addresses are dropped."""
    grouped: dict[str, list[str]] = {}

    for email in emails:
        domain = EmailAddress(email, use_idna=use_idna).domain
        if domain:
            grouped.setdefault(domain, []).append(email)

    return grouped
