"""Version information for :mod:`urns`."""

__all__ = [
    "VERSION",
    "get_version",
]

VERSION = "0.1.0.dev0"


def get_version() -> str:
    """Get the :mod:`urns` version string."""
    return VERSION
