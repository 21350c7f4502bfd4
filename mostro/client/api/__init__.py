"""Public client API."""

from .client import MostroClient

__all__ = ["MostroClient"]
