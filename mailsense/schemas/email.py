"""Email analysis models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class EmailType(str, Enum):
    """Resolved category of an address (first match wins, in this order)."""

    DISPOSABLE = "disposable"
    ROLE_BASED = "role-based"
    FREE = "free"
    CORPORATE = "corporate"


class AnalysisError(str, Enum):
    """Why an analysis degraded to a negative result."""

    SYNTAX_INVALID = "syntax_invalid"  # Malformed address
    DOMAIN_ENCODING_FAILED = "domain_encoding_failed"  # IDN conversion impossible
    RESOLVER_UNAVAILABLE = "resolver_unavailable"  # DNS error or timeout


class Mistake(str, Enum):
    """Common typing mistakes detected in a raw address."""

    MISSING_AT = "Missing @ symbol"
    MULTIPLE_AT = "Multiple @ symbols"
    INVALID_AT_POSITION = "Invalid @ position"
    CONTAINS_SPACES = "Contains spaces"
    CONSECUTIVE_DOTS = "Contains consecutive dots"
    INVALID_CHARACTERS = "Contains invalid characters"


class RiskBucket(str, Enum):
    """Risk histogram buckets."""

    LOW = "low"  # 0-30
    MEDIUM = "medium"  # 31-60
    HIGH = "high"  # 61-100


class DomainClassification(BaseModel):
    """Snapshot of everything derived from an address and the static tables."""

    model_config = ConfigDict(frozen=True)

    provider: str | None = None
    tld: str | None = None
    sld: str | None = None
    is_disposable: bool = False
    is_role_based: bool = False
    is_free_provider: bool = False
    is_corporate: bool = False
    is_ip_literal: bool = False
    is_idn: bool = False
    type: EmailType = EmailType.CORPORATE


class DnsResult(BaseModel):
    """Outcome of the DNS checks for one domain."""

    model_config = ConfigDict(frozen=True)

    has_dns: bool = False
    has_mx: bool = False
    error: AnalysisError | None = None


class AnalysisReport(BaseModel):
    """Full analysis of one raw address."""

    model_config = ConfigDict(frozen=True)

    email: str
    valid: bool = False
    normalized: str | None = None
    canonical: str | None = None
    local_part: str | None = None
    domain: str | None = None
    provider: str | None = None
    type: EmailType | None = None
    disposable: bool = False
    role_based: bool = False
    free_provider: bool = False
    corporate: bool = False
    ip_literal: bool = False
    idn: bool = False
    tld: str | None = None
    sld: str | None = None
    dns_checked: bool = False
    has_dns: bool = False
    has_mx: bool = False
    suggestions: list[str] = Field(default_factory=list)
    mistakes: list[Mistake] = Field(default_factory=list)
    risk_score: int = 0
    error: AnalysisError | None = None


class RiskDistribution(BaseModel):
    """Three-bucket risk histogram."""

    low: int = 0
    medium: int = 0
    high: int = 0


class Statistics(BaseModel):
    """Aggregate counts over a batch of addresses."""

    total: int = 0
    valid: int = 0
    invalid: int = 0
    disposable: int = 0
    role_based: int = 0
    free: int = 0
    corporate: int = 0
    providers: dict[str, int] = Field(default_factory=dict)
    tlds: dict[str, int] = Field(default_factory=dict)
    risk_distribution: RiskDistribution = Field(default_factory=RiskDistribution)


class ValidationOptions(BaseModel):
    """Checks applied by validate()."""

    check_dns: bool = False
    check_mx: bool = False
    check_disposable: bool = True
    check_role: bool = False
    allow_idn: bool = True
    allow_ip: bool = False
    strict: bool = False


class SimilarEmail(BaseModel):
    """An address and its similarity percentage to a reference address."""

    email: str
    similarity: float


class ParsedAddress(BaseModel):
    """A single address parsed out of a display-name form."""

    name: str | None = None
    email: str | None = None
    valid: bool = False
