"""DNS resolver services with a pluggable backend."""

from mailsense.config import Settings
from mailsense.core.state import DnsCache

from .base import BaseDnsResolver
from .cached import CachedResolver
from .dnspython import DnspythonResolver
from .null import NullResolver

__all__ = [
    "BaseDnsResolver",
    "CachedResolver",
    "DnspythonResolver",
    "NullResolver",
    "create_dns_resolver",
]


def create_dns_resolver(settings: Settings, cache: DnsCache) -> CachedResolver:
    """
    Build the configured resolver around a shared cache.

    Falls back to NullResolver if DNS checks are disabled.
    """
    if not settings.dns_enabled:
        # DNS disabled - use passthrough
        backend: BaseDnsResolver = NullResolver()
    else:
        backend = DnspythonResolver(
            nameservers=settings.dns_nameservers or None,
            timeout_seconds=settings.dns_timeout,
        )

    return CachedResolver(backend, cache, timeout_seconds=settings.dns_timeout)
