"""Email address analysis: normalization, classification, risk scoring and suggestions."""

from mailsense.toolkit import EmailToolkit

__version__ = "0.1.0"

__all__ = [
    "EmailToolkit",
    "get_toolkit",
    "reset_toolkit",
]

_toolkit_instance: EmailToolkit | None = None


def get_toolkit() -> EmailToolkit:
    """
    Get the process-wide toolkit instance.

    Built from the cached config on first use, so every caller shares the
    same allow/block lists and DNS cache.
    """
    global _toolkit_instance
    if _toolkit_instance is None:
        _toolkit_instance = EmailToolkit()
    return _toolkit_instance


def reset_toolkit() -> None:
    """Reset the toolkit instance. Useful for testing."""
    global _toolkit_instance
    _toolkit_instance = None
