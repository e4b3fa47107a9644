"""Address synthesis: aliases, variations, name permutations and random addresses."""

import random
import re
import string

from mailsense.pipeline.normalizer import find_local_part_rule, normalize

_NON_LETTERS = re.compile(r"[^a-zA-Z]")

GOOGLE_DOMAINS = ("gmail.com", "googlemail.com")


def generate_alias(email: str, alias: str, use_idna: bool = True) -> str | None:
    """
    Build a sub-address the provider will deliver to the same mailbox.

    Yahoo uses "-", everyone else "+".
    """
    normalized = normalize(email, use_idna=use_idna)
    if normalized is None:
        return None

    local, _, domain = normalized.partition("@")
    rule = find_local_part_rule(domain)
    separator = rule.tag_separator if rule and rule.tag_separator else "+"
    return f"{local}{separator}{alias}@{domain}"


def generate_variations(email: str, use_idna: bool = True) -> list[str]:
    """
    List equivalent spellings of an address, starting with the input.

    Only Gmail has variations: dotted forms of the local part and the
    gmail.com/googlemail.com twin.
    """
    normalized = normalize(email, use_idna=use_idna)
    if normalized is None:
        return []

    local, _, domain = normalized.partition("@")
    variations = [email]

    if domain in GOOGLE_DOMAINS:
        for i in range(1, min(4, len(local))):
            variations.append(f"{local[:i]}.{local[i:]}@{domain}")

        twin = GOOGLE_DOMAINS[1] if domain == GOOGLE_DOMAINS[0] else GOOGLE_DOMAINS[0]
        variations.append(f"{local}@{twin}")

    return list(dict.fromkeys(variations))


def generate_from_name(first_name: str, last_name: str, domain: str) -> list[str]:
    """Common corporate address patterns for a person, e.g. john.doe@, jdoe@."""
    first = _NON_LETTERS.sub("", first_name).lower()
    last = _NON_LETTERS.sub("", last_name).lower()

    if not first or not last:
        return []

    patterns = [
        first,
        last,
        f"{first}.{last}",
        f"{first}_{last}",
        f"{first}-{last}",
        f"{first}{last}",
        f"{first[0]}{last}",
        f"{first}{last[0]}",
        f"{first[0]}.{last}",
        f"{last}.{first}",
        f"{last}{first}",
        f"{first[0]}{last[0]}",
    ]
    return list(dict.fromkeys(f"{local}@{domain}" for local in patterns))


def generate(
    domain: str = "gmail.com",
    length: int = 10,
    include_numbers: bool = True,
    include_dots: bool = False,
    prefix: str = "",
    suffix: str = "",
    rng: random.Random | None = None,
) -> str:
    """
    Generate a random address.

    Dots are only placed between characters, never first or last.
    """
    rng = rng or random.Random()
    chars = string.ascii_lowercase + (string.digits if include_numbers else "")

    local = prefix
    for i in range(length):
        if include_dots and 0 < i < length - 1 and rng.randint(0, 4) == 0:
            local += "."
        local += rng.choice(chars)

    return f"{local}{suffix}@{domain}"
