"""Syntax checks for raw email addresses.

Two grammars:
- permissive: RFC-light dot-atom local part and a multi-label hostname,
  with non-ASCII letters allowed so IDN addresses reach the normalizer
- strict: the RFC 5322 addr-spec (ASCII), including quoted local parts and
  bracketed IP domain literals
"""

import re
import unicodedata

from mailsense.pipeline.domain_codec import is_ip_literal

MAX_LOCAL_LENGTH = 64
MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63
MAX_ADDRESS_LENGTH = 254

_ATEXT = r"A-Za-z0-9!#$%&'*+/=?^_`{|}~\-"
_UNICODE = "\u0080-\U0010ffff"

_LOCAL_CHAR = "[" + _ATEXT + _UNICODE + "]"
_LABEL_EDGE = "[A-Za-z0-9" + _UNICODE + "]"
_LABEL_INNER = "[A-Za-z0-9\\-" + _UNICODE + "]"
_LABEL = _LABEL_EDGE + "(?:" + _LABEL_INNER + "*" + _LABEL_EDGE + ")?"
_DOMAIN_LITERAL = r"\[[^\[\]\\\s]+\]"

PERMISSIVE_PATTERN = re.compile(
    "(?P<local>" + _LOCAL_CHAR + "+(?:\\." + _LOCAL_CHAR + "+)*)"
    "@"
    "(?P<domain>" + _LABEL + "(?:\\." + _LABEL + ")+|" + _DOMAIN_LITERAL + ")"
)

_STRICT_ATEXT = r"[a-z0-9!#$%&'*+/=?^_`{|}~-]"
_QUOTED_STRING = (
    r'"(?:[\x01-\x08\x0b\x0c\x0e-\x21\x23-\x5b\x5d-\x7f]'
    r'|\\[\x01-\x09\x0b\x0c\x0e-\x7f])*"'
)
_HOSTNAME = r"(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)*[a-z0-9](?:[a-z0-9-]*[a-z0-9])?"
_STRICT_LITERAL = r"\[[\x21-\x5a\x5e-\x7e]+\]"

STRICT_PATTERN = re.compile(
    "(?P<local>" + _STRICT_ATEXT + "+(?:\\." + _STRICT_ATEXT + "+)*|" + _QUOTED_STRING + ")"
    "@"
    "(?P<domain>" + _HOSTNAME + "|" + _STRICT_LITERAL + ")",
    re.IGNORECASE,
)


def _has_forbidden_chars(value: str) -> bool:
    """Whitespace and control characters are never allowed unescaped."""
    return any(ch.isspace() or unicodedata.category(ch) == "Cc" for ch in value)


def _lengths_ok(local: str, domain: str) -> bool:
    if len(local) > MAX_LOCAL_LENGTH or len(domain) > MAX_DOMAIN_LENGTH:
        return False
    if len(local) + 1 + len(domain) > MAX_ADDRESS_LENGTH:
        return False
    if domain.startswith("["):
        return True
    return all(len(label) <= MAX_LABEL_LENGTH for label in domain.split("."))


def _domain_ok(domain: str) -> bool:
    if domain.startswith("["):
        return is_ip_literal(domain)
    return True


def is_valid_syntax(email: str, strict: bool = False) -> bool:
    """
    Check whether a raw string is a syntactically valid address.

    Args:
        email: Raw address, not normalized
        strict: Use the full RFC 5322 grammar instead of the permissive one

    Returns:
        True if the address matches the selected grammar
    """
    if not email:
        return False

    if strict:
        match = STRICT_PATTERN.fullmatch(email)
        if not match:
            return False
    else:
        if _has_forbidden_chars(email):
            return False
        match = PERMISSIVE_PATTERN.fullmatch(email)
        if not match:
            return False

    local, domain = match.group("local"), match.group("domain")
    return _lengths_ok(local, domain) and _domain_ok(domain)
