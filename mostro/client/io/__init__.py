"""I/O layer: relay connections."""

from .ws import RelayConnection, RelayTransport, open_relay

__all__ = ["RelayConnection", "RelayTransport", "open_relay"]
