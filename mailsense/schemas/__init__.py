from mailsense.schemas.email import (
    AnalysisError,
    AnalysisReport,
    DnsResult,
    DomainClassification,
    EmailType,
    Mistake,
    ParsedAddress,
    RiskBucket,
    RiskDistribution,
    SimilarEmail,
    Statistics,
    ValidationOptions,
)

__all__ = [
    "AnalysisError",
    "AnalysisReport",
    "DnsResult",
    "DomainClassification",
    "EmailType",
    "Mistake",
    "ParsedAddress",
    "RiskBucket",
    "RiskDistribution",
    "SimilarEmail",
    "Statistics",
    "ValidationOptions",
]
