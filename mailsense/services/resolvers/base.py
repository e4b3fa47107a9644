"""Abstract base class for DNS resolvers."""

from abc import ABC, abstractmethod


class BaseDnsResolver(ABC):
    """
    Abstract DNS lookup capability.

    Implementations may raise on network errors or timeouts; callers treat
    any failure as "no record found".
    """

    resolver_name: str = "unknown"

    # False for resolvers that do not actually look anything up
    enabled: bool = True

    @abstractmethod
    async def has_any_record(self, domain: str) -> bool:
        """
        Check whether a domain has any DNS record.

        Args:
            domain: ASCII domain name

        Returns:
            True if at least one record exists
        """
        pass

    @abstractmethod
    async def has_mx_record(self, domain: str) -> bool:
        """
        Check whether a domain publishes MX records.

        Args:
            domain: ASCII domain name

        Returns:
            True if at least one MX record exists
        """
        pass
