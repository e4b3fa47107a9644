"""DNS resolver backed by dnspython's asyncio resolver."""

import dns.asyncresolver
import dns.resolver

from mailsense.core.logging import get_logger

from .base import BaseDnsResolver

logger = get_logger(__name__)


class DnspythonResolver(BaseDnsResolver):
    """
    Live DNS lookups with dnspython.

    NXDOMAIN and empty answers are negative results. Timeouts and server
    failures propagate so callers can tell them apart from a real "no".
    """

    resolver_name = "dnspython"

    # Record types that count as "the domain exists", checked in order
    ANY_RECORD_TYPES = ("MX", "A", "AAAA")

    def __init__(
        self,
        nameservers: list[str] | None = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            nameservers: Nameserver IPs to query instead of the system config
            timeout_seconds: Lifetime of a single query
        """
        self.timeout = timeout_seconds
        self._resolver = dns.asyncresolver.Resolver(configure=not nameservers)
        if nameservers:
            self._resolver.nameservers = list(nameservers)

    async def _has_record(self, domain: str, rdtype: str) -> bool:
        try:
            answer = await self._resolver.resolve(domain, rdtype, lifetime=self.timeout)
        except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
            return False
        return len(answer) > 0

    async def has_any_record(self, domain: str) -> bool:
        for rdtype in self.ANY_RECORD_TYPES:
            if await self._has_record(domain, rdtype):
                return True
        return False

    async def has_mx_record(self, domain: str) -> bool:
        found = await self._has_record(domain, "MX")
        logger.bind(domain=domain, found=found).debug("mx_lookup")
        return found
