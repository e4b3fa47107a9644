"""Display helpers: masking, obfuscation, links and display names."""

import codecs
import hashlib
import random
import re
from urllib.parse import quote

from mailsense.core.state import DomainRegistry
from mailsense.pipeline.normalizer import normalize
from mailsense.pipeline.validation import is_valid
from mailsense.schemas import ParsedAddress

GRAVATAR_URL = "https://www.gravatar.com/avatar/{hash}?s={size}&d={default}&r={rating}"

MAILTO_PARAMS = ("subject", "body", "cc", "bcc")

# Latin letters swapped for look-alike Cyrillic ones
HOMOGLYPHS = str.maketrans(
    {
        "a": "а",
        "e": "е",
        "o": "о",
        "p": "р",
        "c": "с",
        "x": "х",
    }
)

_TEXT_OBFUSCATION = str.maketrans({"@": " [at] ", ".": " [dot] "})

# Loose match used to pull candidates out of free text
EXTRACT_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_QUOTED_NAME = re.compile(r'^"?([^"<>]+)"?\s*<([^<>]+)>$')
_BARE_NAME = re.compile(r"^([^<>]+)<([^<>]+)>$")
_TRAILING_COMMENT = re.compile(r"^(\S+)\s*\(([^)]+)\)$")
_NEEDS_QUOTES = re.compile(r"[,;<>@]")


def mask(
    email: str, visible_chars: int = 3, mask_char: str = "*", use_idna: bool = True
) -> str:
    """
    Mask an address for display, e.g. joh****doe@e******.com.

    Unparseable input is returned unchanged.
    """
    normalized = normalize(email, use_idna=use_idna)
    if normalized is None:
        return email

    local, _, domain = normalized.partition("@")

    if len(local) <= visible_chars * 2:
        # Too short, keep only the first and last character
        hidden = max(0, len(local) - 2)
        masked = local[0] + mask_char * hidden + (local[-1] if len(local) > 1 else "")
    else:
        hidden = len(local) - visible_chars * 2
        masked = local[:visible_chars] + mask_char * hidden + local[-visible_chars:]

    labels = domain.split(".")
    if len(labels) > 1:
        labels[0] = labels[0][:1] + mask_char * (len(labels[0]) - 1)
        domain = ".".join(labels)

    return f"{masked}@{domain}"


def _obfuscate_html(email: str, rng: random.Random) -> str:
    # Mix decimal and hex entities
    return "".join(
        f"&#{ord(ch)};" if rng.randint(0, 1) else f"&#x{ord(ch):x};" for ch in email
    )


def obfuscate(email: str, method: str = "html", rng: random.Random | None = None) -> str:
    """
    Obfuscate an address against naive scrapers.

    Methods: html, unicode, text, reverse, rot13. Unknown methods return the
    address unchanged.
    """
    match method:
        case "html":
            return _obfuscate_html(email, rng or random.Random())
        case "unicode":
            return email.translate(HOMOGLYPHS)
        case "text":
            return email.translate(_TEXT_OBFUSCATION)
        case "reverse":
            return email[::-1]
        case "rot13":
            return codecs.encode(email, "rot13")
        case _:
            return email


def create_mailto_link(email: str, use_idna: bool = True, **params: str) -> str:
    """Build a mailto: link; only subject, body, cc and bcc are kept."""
    normalized = normalize(email, use_idna=use_idna)
    if normalized is None:
        return ""

    link = f"mailto:{normalized}"
    query = [
        f"{name}={quote(params[name], safe='')}" for name in MAILTO_PARAMS if params.get(name)
    ]
    if query:
        link += "?" + "&".join(query)
    return link


def get_gravatar_url(
    email: str,
    size: int = 80,
    default: str = "mp",
    rating: str = "g",
    use_idna: bool = True,
) -> str:
    normalized = normalize(email, use_idna=use_idna)
    if normalized is None:
        return ""

    digest = hashlib.md5(normalized.encode("utf-8")).hexdigest()
    return GRAVATAR_URL.format(hash=digest, size=size, default=default, rating=rating)


def parse_with_name(
    text: str, registry: DomainRegistry | None = None, use_idna: bool = True
) -> ParsedAddress:
    """
    Parse a single address with an optional display name.

    Supports "Name" <addr>, Name <addr>, addr (Name) and a bare address.
    The address is checked with is_valid() against the given block list.
    """
    text = text.strip()
    name: str | None = None

    if match := _QUOTED_NAME.match(text):
        name, email = match.group(1).strip(' "'), match.group(2)
    elif match := _BARE_NAME.match(text):
        name, email = match.group(1).strip(), match.group(2)
    elif match := _TRAILING_COMMENT.match(text):
        email, name = match.group(1), match.group(2)
    else:
        email = text

    valid = bool(email) and is_valid(email, registry, use_idna=use_idna)
    return ParsedAddress(name=name, email=email or None, valid=valid)


def format_with_name(email: str, name: str | None = None) -> str:
    """Render "Name <addr>", quoting the name when it has special characters."""
    if not name:
        return email

    if _NEEDS_QUOTES.search(name):
        escaped = name.replace('"', '\\"')
        name = f'"{escaped}"'

    return f"{name} <{email}>"


def extract_from_text(
    text: str, registry: DomainRegistry | None = None, use_idna: bool = True
) -> list[str]:
    """Pull valid addresses out of free text, first occurrence order."""
    found = EXTRACT_PATTERN.findall(text)
    return [
        email
        for email in dict.fromkeys(found)
        if is_valid(email, registry, use_idna=use_idna)
    ]
