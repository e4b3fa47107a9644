from mailsense.pipeline.tables import TRUSTED_PROVIDERS
from mailsense.schemas import DnsResult, DomainClassification, RiskBucket

MAX_RISK = 100

DISPOSABLE_PENALTY = 40
ROLE_BASED_PENALTY = 20
NO_MX_PENALTY = 30
NO_DNS_PENALTY = 10
TRUSTED_PROVIDER_BONUS = 10


def compute_risk_score(
    valid: bool,
    classification: DomainClassification | None,
    dns: DnsResult | None = None,
) -> int:
    """
    Compute the risk score (0-100) of an address.

    Score formula:
    risk = (
        40 * disposable +
        20 * role_based +
        30 * no_mx +       (only when DNS was checked)
        10 * no_dns        (only when DNS was checked)
    )
    then -10 (floored at 0) for gmail/outlook/yahoo/apple.

    Invalid addresses score 100.
    """
    if not valid or classification is None:
        return MAX_RISK

    score = 0

    if classification.is_disposable:
        score += DISPOSABLE_PENALTY

    if classification.is_role_based:
        score += ROLE_BASED_PENALTY

    if dns is not None:
        if not dns.has_mx:
            score += NO_MX_PENALTY
        if not dns.has_dns:
            score += NO_DNS_PENALTY

    # Reduce score for known good providers
    if classification.provider in TRUSTED_PROVIDERS:
        score = max(0, score - TRUSTED_PROVIDER_BONUS)

    return max(0, min(MAX_RISK, score))


def risk_bucket(score: int) -> RiskBucket:
    """Bucket a score: low 0-30, medium 31-60, high 61-100."""
    if score <= 30:
        return RiskBucket.LOW
    if score <= 60:
        return RiskBucket.MEDIUM
    return RiskBucket.HIGH
