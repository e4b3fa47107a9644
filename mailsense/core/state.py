"""Process-wide mutable state: allow/block lists and the DNS cache.

Reads return immutable snapshots and never block. Every mutation happens
under a lock and swaps in a new snapshot, so each add/remove/clear/import
is atomic.
"""

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from mailsense.config import AppConfig
from mailsense.core.logging import get_logger
from mailsense.pipeline.tables import DISPOSABLE_DOMAINS, PROVIDER_DOMAINS, PROVIDERS, ROLE_BASED

logger = get_logger(__name__)


def _clean_domain(domain: str) -> str:
    return domain.strip().lower()


class DomainRegistry:
    """Caller-maintained allow and block lists."""

    def __init__(
        self,
        allowed: Iterable[str] = (),
        blocked: Iterable[str] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._allowed: frozenset[str] = frozenset(_clean_domain(d) for d in allowed if d)
        self._blocked: frozenset[str] = frozenset(_clean_domain(d) for d in blocked if d)

    @classmethod
    def from_config(cls, config: AppConfig) -> "DomainRegistry":
        """Seed the lists from the YAML config."""
        return cls(allowed=config.domains.allowed, blocked=config.domains.blocked)

    @property
    def custom_allowed(self) -> frozenset[str]:
        """Domains added at runtime to the allow list."""
        return self._allowed

    @property
    def custom_blocked(self) -> frozenset[str]:
        """Domains added at runtime to the block list."""
        return self._blocked

    def add_allowed(self, domain: str) -> None:
        with self._lock:
            self._allowed = self._allowed | {_clean_domain(domain)}

    def remove_allowed(self, domain: str) -> None:
        with self._lock:
            self._allowed = self._allowed - {_clean_domain(domain)}

    def add_blocked(self, domain: str) -> None:
        with self._lock:
            self._blocked = self._blocked | {_clean_domain(domain)}

    def remove_blocked(self, domain: str) -> None:
        with self._lock:
            self._blocked = self._blocked - {_clean_domain(domain)}

    def allowed_domains(self) -> list[str]:
        """All provider domains plus the custom allow list."""
        custom = sorted(self._allowed - set(PROVIDER_DOMAINS))
        return [*PROVIDER_DOMAINS, *custom]

    def blocked_domains(self) -> list[str]:
        """All known disposable domains plus the custom block list."""
        return sorted(DISPOSABLE_DOMAINS | self._blocked)

    def is_allowed(self, domain: str) -> bool:
        domain = _clean_domain(domain)
        return domain in self._allowed or domain in PROVIDER_DOMAINS

    def is_blocked(self, domain: str) -> bool:
        domain = _clean_domain(domain)
        return domain in self._blocked or domain in DISPOSABLE_DOMAINS

    def export_config(self) -> dict[str, Any]:
        """Serialize the mutable lists plus static tables to plain data."""
        return {
            "allowed_domains": sorted(self._allowed),
            "blocked_domains": sorted(self._blocked),
            "providers": {provider: list(domains) for provider, domains in PROVIDERS.items()},
            "disposable_domains": sorted(DISPOSABLE_DOMAINS),
            "role_based": sorted(ROLE_BASED),
        }

    def import_config(self, data: dict[str, Any]) -> None:
        """Replace the custom lists with those present in an exported config."""
        with self._lock:
            if "allowed_domains" in data:
                self._allowed = frozenset(_clean_domain(d) for d in data["allowed_domains"] if d)
            if "blocked_domains" in data:
                self._blocked = frozenset(_clean_domain(d) for d in data["blocked_domains"] if d)
        logger.bind(
            allowed=len(self._allowed),
            blocked=len(self._blocked),
        ).info("domain_lists_imported")


@dataclass(frozen=True)
class DnsCacheEntry:
    """Memoized lookups for one domain. None means not looked up yet."""

    has_any_record: bool | None = None
    has_mx: bool | None = None


class DnsCache:
    """Per-domain memo of resolver results. Entries never expire."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, DnsCacheEntry] = {}

    def get(self, domain: str) -> DnsCacheEntry | None:
        return self._entries.get(domain)

    def set_any_record(self, domain: str, value: bool) -> None:
        with self._lock:
            entry = self._entries.get(domain, DnsCacheEntry())
            self._entries[domain] = DnsCacheEntry(has_any_record=value, has_mx=entry.has_mx)

    def set_mx(self, domain: str, value: bool) -> None:
        with self._lock:
            entry = self._entries.get(domain, DnsCacheEntry())
            self._entries[domain] = DnsCacheEntry(has_any_record=entry.has_any_record, has_mx=value)

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, domain: object) -> bool:
        return domain in self._entries


@dataclass
class ToolkitState:
    """Shared state handle. Construct one per process, or one per test."""

    domains: DomainRegistry = field(default_factory=DomainRegistry)
    dns_cache: DnsCache = field(default_factory=DnsCache)

    @classmethod
    def from_config(cls, config: AppConfig) -> "ToolkitState":
        return cls(domains=DomainRegistry.from_config(config))
