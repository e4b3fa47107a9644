"""Yes/no validation with configurable checks."""

import re
from collections.abc import Iterable

from mailsense.core.state import DomainRegistry
from mailsense.pipeline.classifier import is_disposable_domain, is_role_local_part
from mailsense.pipeline.domain_codec import is_idn, is_ip_literal
from mailsense.pipeline.normalizer import EmailAddress
from mailsense.pipeline.syntax import is_valid_syntax
from mailsense.schemas import ValidationOptions
from mailsense.services.resolvers import CachedResolver

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _passes_offline_checks(
    email: str,
    options: ValidationOptions,
    registry: DomainRegistry | None,
    use_idna: bool,
) -> EmailAddress | None:
    """Run every check that needs no network. Returns the parsed address on success."""
    if not is_valid_syntax(email, strict=options.strict):
        return None

    address = EmailAddress(email, use_idna=use_idna)
    local, domain = address.local_part, address.domain
    if local is None or domain is None:
        return None

    if is_ip_literal(domain) and not options.allow_ip:
        return None

    # The normalized domain is ASCII, so look at what the caller wrote
    raw_domain = email.rpartition("@")[2]
    if not options.allow_idn and any(is_idn(label) for label in raw_domain.split(".")):
        return None

    if options.check_disposable and is_disposable_domain(domain, registry):
        return None

    if options.check_role and is_role_local_part(local):
        return None

    return address


def is_valid(
    email: str,
    registry: DomainRegistry | None = None,
    options: ValidationOptions | None = None,
    use_idna: bool = True,
) -> bool:
    """
    Validate without DNS: syntax, normalization, IP domains and disposable
    domains by default.

    DNS and MX options are ignored here; use validate() for those.
    """
    options = options or ValidationOptions()
    return _passes_offline_checks(email, options, registry, use_idna) is not None


async def validate(
    email: str,
    options: ValidationOptions | None = None,
    registry: DomainRegistry | None = None,
    resolver: CachedResolver | None = None,
    use_idna: bool = True,
) -> bool:
    """
    Validate an address with the selected checks.

    DNS/MX checks need an enabled resolver; without one they are skipped.
    A failed lookup counts as a missing record.
    """
    options = options or ValidationOptions()

    address = _passes_offline_checks(email, options, registry, use_idna)
    if address is None:
        return False

    domain = address.domain
    if resolver is None or not resolver.enabled or domain is None or is_ip_literal(domain):
        return True

    if options.check_dns and not await resolver.has_any_record(domain):
        return False

    if options.check_mx and not await resolver.has_mx_record(domain):
        return False

    return True


async def validate_bulk(
    emails: Iterable[str],
    options: ValidationOptions | None = None,
    registry: DomainRegistry | None = None,
    resolver: CachedResolver | None = None,
    use_idna: bool = True,
) -> dict[str, bool]:
    """Validate each address; the result maps input string to outcome."""
    results = {}
    for email in emails:
        results[email] = await validate(email, options, registry, resolver, use_idna)
    return results


def normalize_bulk(emails: Iterable[str], use_idna: bool = True) -> list[str | None]:
    return [EmailAddress(email, use_idna=use_idna).normalized for email in emails]


def filter_valid(
    emails: Iterable[str],
    registry: DomainRegistry | None = None,
    use_idna: bool = True,
) -> list[str]:
    return [email for email in emails if is_valid(email, registry, use_idna=use_idna)]


def filter_invalid(
    emails: Iterable[str],
    registry: DomainRegistry | None = None,
    use_idna: bool = True,
) -> list[str]:
    return [email for email in emails if not is_valid(email, registry, use_idna=use_idna)]


def validate_list(
    text: str,
    registry: DomainRegistry | None = None,
    use_idna: bool = True,
) -> dict[str, list[str] | int]:
    """
    Split newline-separated addresses into valid and invalid lists.

    Blank lines are skipped but still counted in "total".
    """
    lines = _LINE_BREAK.split(text.strip())
    valid: list[str] = []
    invalid: list[str] = []

    for line in lines:
        email = line.strip()
        if not email:
            continue
        if is_valid(email, registry, use_idna=use_idna):
            valid.append(email)
        else:
            invalid.append(email)

    return {"valid": valid, "invalid": invalid, "total": len(lines)}
