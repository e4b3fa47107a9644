import re
from dataclasses import dataclass
from functools import cached_property

from mailsense.core.logging import get_logger
from mailsense.pipeline.domain_codec import DomainEncodingError, is_ip_literal, to_ascii
from mailsense.pipeline.syntax import is_valid_syntax

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_TRAILING_DIGITS = re.compile(r"\d+$")


@dataclass(frozen=True)
class LocalPartRule:
    """
    A provider-specific local-part rewrite.

    Matches on exact domain membership, or on a domain prefix for provider
    families spread over many TLDs (yahoo.*).
    """

    name: str
    domains: frozenset[str] = frozenset()
    domain_prefix: str | None = None
    strip_dots: bool = False
    tag_separator: str | None = None

    def matches(self, domain: str) -> bool:
        domain = domain.lower()
        if domain in self.domains:
            return True
        return self.domain_prefix is not None and domain.startswith(self.domain_prefix)

    def apply(self, local: str) -> str:
        if self.strip_dots:
            local = local.replace(".", "")
        if self.tag_separator:
            local = local.split(self.tag_separator, 1)[0]
        return local


# Evaluated top to bottom, first match wins
LOCAL_PART_RULES: tuple[LocalPartRule, ...] = (
    LocalPartRule(
        name="gmail",
        domains=frozenset({"gmail.com", "googlemail.com"}),
        strip_dots=True,
        tag_separator="+",
    ),
    LocalPartRule(
        name="outlook",
        domains=frozenset({"outlook.com", "hotmail.com", "live.com"}),
        tag_separator="+",
    ),
    LocalPartRule(name="yahoo", domain_prefix="yahoo.", tag_separator="-"),
    LocalPartRule(
        name="apple",
        domains=frozenset({"icloud.com", "me.com", "mac.com"}),
        tag_separator="+",
    ),
)


def find_local_part_rule(domain: str) -> LocalPartRule | None:
    """Return the first provider rule matching a domain."""
    for rule in LOCAL_PART_RULES:
        if rule.matches(domain):
            return rule
    return None


def normalize_local_part(local: str, domain: str) -> str:
    """
    Apply the provider rule for a domain to a local part.

    A rewrite that would leave the local part empty (e.g. "+tag@gmail.com")
    is not applied.
    """
    rule = find_local_part_rule(domain)
    if rule is None:
        return local
    rewritten = rule.apply(local)
    return rewritten or local


def normalize(email: str, use_idna: bool = True) -> str | None:
    """
    Normalize an email address.

    - Lowercase and remove all whitespace
    - Require permissive syntax
    - Convert the domain to ASCII (Punycode)
    - Apply the provider local-part rule (gmail dots, +tags, yahoo -tags),
      matched against the encoded domain

    Returns:
        The normalized address, or None if the syntax is invalid or the
        domain cannot be encoded
    """
    email = _WHITESPACE.sub("", email.lower())

    if not is_valid_syntax(email):
        return None

    local, _, domain = email.partition("@")

    if not is_ip_literal(domain):
        try:
            domain = to_ascii(domain, use_idna=use_idna)
        except DomainEncodingError as e:
            logger.bind(domain=domain, reason=e.reason).debug("domain_encoding_failed")
            return None

    local = normalize_local_part(local, domain)

    return f"{local}@{domain}"


def canonicalize(email: str, use_idna: bool = True) -> str | None:
    """
    Canonicalize an email for alias-insensitive comparison.

    Runs normalize(), then removes every dot from the local part (for any
    provider) and a trailing run of digits. Never use the result for
    delivery or display.
    """
    normalized = normalize(email, use_idna=use_idna)
    if normalized is None:
        return None

    local, _, domain = normalized.partition("@")
    local = local.replace(".", "")
    local = _TRAILING_DIGITS.sub("", local) or local

    return f"{local}@{domain}"


def are_equal(email1: str, email2: str, use_idna: bool = True) -> bool:
    """Compare two emails ignoring aliases. Unparseable emails are never equal."""
    canonical1 = canonicalize(email1, use_idna=use_idna)
    canonical2 = canonicalize(email2, use_idna=use_idna)
    return canonical1 is not None and canonical1 == canonical2


@dataclass(frozen=True)
class EmailAddress:
    """
    A raw address plus its lazily derived forms.

    Derived values are computed on first access; the instance itself is
    never mutated.
    """

    raw: str
    use_idna: bool = True

    @cached_property
    def normalized(self) -> str | None:
        return normalize(self.raw, use_idna=self.use_idna)

    @cached_property
    def canonical(self) -> str | None:
        return canonicalize(self.raw, use_idna=self.use_idna)

    @property
    def is_valid(self) -> bool:
        return self.normalized is not None

    @property
    def local_part(self) -> str | None:
        if self.normalized is None:
            return None
        return self.normalized.partition("@")[0]

    @property
    def domain(self) -> str | None:
        if self.normalized is None:
            return None
        return self.normalized.rpartition("@")[2]

    def __str__(self) -> str:
        return self.raw
