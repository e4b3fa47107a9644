"""Null resolver - used when DNS checks are disabled."""

from .base import BaseDnsResolver


class NullResolver(BaseDnsResolver):
    """
    Resolver that performs no lookups.

    Reports every domain as resolvable. The analyzer skips DNS scoring
    entirely for disabled resolvers, so these answers only matter to
    direct callers.
    """

    resolver_name = "null"
    enabled = False

    async def has_any_record(self, domain: str) -> bool:
        """Always return True."""
        return True

    async def has_mx_record(self, domain: str) -> bool:
        """Always return True."""
        return True
