"""Cached, fail-closed resolver decorator."""

import asyncio
from typing import Literal

from mailsense.core.logging import get_logger
from mailsense.core.state import DnsCache
from mailsense.schemas import AnalysisError, DnsResult

from .base import BaseDnsResolver

logger = get_logger(__name__)

LookupKind = Literal["any", "mx"]


class CachedResolver(BaseDnsResolver):
    """
    Decorator that memoizes lookups in the shared DnsCache.

    Each lookup is bounded by a timeout. Errors and timeouts count as "no
    record" for that call and are not cached, so a later call retries.
    Cancellation from the caller propagates.
    """

    def __init__(
        self,
        resolver: BaseDnsResolver,
        cache: DnsCache,
        timeout_seconds: float = 5.0,
    ) -> None:
        """
        Initialize cached resolver.

        Args:
            resolver: The underlying resolver to wrap
            cache: Shared per-domain cache
            timeout_seconds: Upper bound for a single lookup
        """
        self._resolver = resolver
        self._cache = cache
        self._timeout = timeout_seconds

    @property
    def resolver_name(self) -> str:  # type: ignore[override]
        """Return combined resolver name."""
        return f"cached:{self._resolver.resolver_name}"

    @property
    def enabled(self) -> bool:  # type: ignore[override]
        return self._resolver.enabled

    @property
    def cache(self) -> DnsCache:
        return self._cache

    async def has_any_record(self, domain: str) -> bool:
        """Check for any DNS record, using the cache if available."""
        return bool(await self._lookup(domain, "any"))

    async def has_mx_record(self, domain: str) -> bool:
        """Check for MX records, using the cache if available."""
        return bool(await self._lookup(domain, "mx"))

    async def check(self, domain: str) -> DnsResult:
        """Run both lookups and report whether any of them failed."""
        has_dns, has_mx = await asyncio.gather(
            self._lookup(domain, "any"),
            self._lookup(domain, "mx"),
        )
        failed = has_dns is None or has_mx is None
        return DnsResult(
            has_dns=bool(has_dns),
            has_mx=bool(has_mx),
            error=AnalysisError.RESOLVER_UNAVAILABLE if failed else None,
        )

    async def _lookup(self, domain: str, kind: LookupKind) -> bool | None:
        """Return the lookup result, or None if the resolver failed."""
        entry = self._cache.get(domain)
        if entry is not None:
            cached = entry.has_any_record if kind == "any" else entry.has_mx
            if cached is not None:
                return cached

        call = self._resolver.has_any_record if kind == "any" else self._resolver.has_mx_record
        try:
            result = await asyncio.wait_for(call(domain), timeout=self._timeout)
        except TimeoutError:
            logger.bind(domain=domain, kind=kind, timeout=self._timeout).warning("dns_lookup_timeout")
            return None
        except Exception as e:
            logger.bind(domain=domain, kind=kind, error=str(e)).warning("dns_lookup_failed")
            return None

        if kind == "any":
            self._cache.set_any_record(domain, result)
        else:
            self._cache.set_mx(domain, result)
        return result

    def clear_cache(self) -> None:
        """Clear all cached results."""
        self._cache.clear()

    def cache_size(self) -> int:
        """Return current cache size."""
        return len(self._cache)
