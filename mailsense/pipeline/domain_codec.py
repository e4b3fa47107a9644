"""Conversions between Unicode (IDN) and ASCII (Punycode) domain forms."""

import ipaddress
import re

import idna

from mailsense.core.logging import get_logger

logger = get_logger(__name__)

ACE_PREFIX = "xn--"

_NON_PRINTABLE_ASCII = re.compile(r"[^\x20-\x7e]")


class DomainEncodingError(ValueError):
    """Raised when a domain cannot be converted to its ASCII form."""

    def __init__(self, domain: str, reason: str) -> None:
        super().__init__(f"Cannot encode domain {domain!r}: {reason}")
        self.domain = domain
        self.reason = reason


def to_ascii(domain: str, use_idna: bool = True) -> str:
    """
    Convert a domain to its ASCII (Punycode) form.

    With use_idna, applies IDNA 2008 with UTS-46 mapping. Without it, only
    domains made entirely of printable ASCII are accepted, unchanged.

    Raises:
        DomainEncodingError: If the domain cannot be represented in ASCII
    """
    if not use_idna:
        if _NON_PRINTABLE_ASCII.search(domain):
            raise DomainEncodingError(domain, "non-ASCII domain and IDN support disabled")
        return domain

    try:
        return idna.encode(domain, uts46=True).decode("ascii")
    except (idna.IDNAError, UnicodeError) as e:
        raise DomainEncodingError(domain, str(e)) from e


def to_unicode(domain: str, use_idna: bool = True) -> str:
    """Convert an ASCII domain to Unicode. Undecodable domains are returned unchanged."""
    if not use_idna:
        return domain

    try:
        return idna.decode(domain, uts46=True)
    except (idna.IDNAError, UnicodeError) as e:
        logger.bind(domain=domain, error=str(e)).debug("idn_decode_failed")
        return domain


def is_idn(domain: str) -> bool:
    """Check if a domain is internationalized (non-ASCII or ACE-prefixed)."""
    return bool(_NON_PRINTABLE_ASCII.search(domain)) or domain.lower().startswith(ACE_PREFIX)


def strip_literal(domain: str) -> str:
    """Strip surrounding brackets and an IPv6: tag from a domain literal."""
    if domain.startswith("[") and domain.endswith("]"):
        domain = domain[1:-1]
    if domain[:5].lower() == "ipv6:":
        domain = domain[5:]
    return domain


def is_ip_literal(domain: str) -> bool:
    """Check if a domain is an IPv4 or IPv6 address, optionally in [brackets]."""
    try:
        ipaddress.ip_address(strip_literal(domain))
    except ValueError:
        return False
    return True
