"""Typo corrections, similarity matching and common-mistake detection."""

import re
from difflib import SequenceMatcher

from mailsense.pipeline.tables import DOMAIN_TYPOS, PROVIDER_DOMAINS, TLD_TYPOS
from mailsense.schemas import Mistake, SimilarEmail

DEFAULT_SIMILARITY_THRESHOLD = 80.0

_INVALID_CHARS = re.compile(r"[<>()\[\]\\,;:\s]")


def similarity(first: str, second: str) -> float:
    """
    Percentage similarity of two strings, rounded to 2 decimals.

    Ratcliff/Obershelp matching: twice the number of matched characters over
    the combined length.
    """
    if not first and not second:
        return 0.0
    ratio = SequenceMatcher(None, first, second, autojunk=False).ratio()
    return round(ratio * 100, 2)


def find_similar(
    email: str,
    emails: list[str],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[SimilarEmail]:
    """Find addresses at least `threshold` percent similar, most similar first."""
    similar = []
    for candidate in emails:
        if candidate == email:
            continue
        score = similarity(email, candidate)
        if score >= threshold:
            similar.append(SimilarEmail(email=candidate, similarity=score))

    # sorted() is stable, so ties keep input order
    return sorted(similar, key=lambda s: s.similarity, reverse=True)


def _domain_typo_fixes(domain: str) -> list[str]:
    fixed = DOMAIN_TYPOS.get(domain)
    return [fixed] if fixed else []


def _tld_typo_fixes(domain: str) -> list[str]:
    return [domain[: -len(typo)] + correct for typo, correct in TLD_TYPOS if domain.endswith(typo)]


def _similar_provider_domains(domain: str, threshold: float) -> list[str]:
    # a known provider domain is never a typo of its siblings
    if domain in PROVIDER_DOMAINS:
        return []
    return [
        candidate
        for candidate in PROVIDER_DOMAINS
        if threshold <= similarity(domain, candidate) < 100
    ]


def suggest(email: str, threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> list[str]:
    """
    Suggest corrected addresses for likely domain typos.

    Order: known domain misspellings, then TLD corrections, then provider
    domains with similarity in [threshold, 100). The local part is never
    changed. Duplicates are dropped, keeping the first occurrence.
    """
    if "@" not in email:
        return []

    local, _, domain = email.strip().partition("@")
    domain = domain.lower()

    candidates = [
        *_domain_typo_fixes(domain),
        *_tld_typo_fixes(domain),
        *_similar_provider_domains(domain, threshold),
    ]

    # dict.fromkeys keeps insertion order
    return list(dict.fromkeys(f"{local}@{candidate}" for candidate in candidates))


def get_common_mistakes(email: str) -> list[Mistake]:
    """Report every common mistake found in a raw address. Checks are independent."""
    mistakes = []

    if "@" not in email:
        mistakes.append(Mistake.MISSING_AT)

    if email.count("@") > 1:
        mistakes.append(Mistake.MULTIPLE_AT)

    if email.startswith("@") or email.endswith("@"):
        mistakes.append(Mistake.INVALID_AT_POSITION)

    if any(ch.isspace() for ch in email):
        mistakes.append(Mistake.CONTAINS_SPACES)

    if ".." in email:
        mistakes.append(Mistake.CONSECUTIVE_DOTS)

    if _INVALID_CHARS.search(email):
        mistakes.append(Mistake.INVALID_CHARACTERS)

    return mistakes
