"""Websocket relay transport."""

from .transport import RelayConnection, RelayTransport, open_relay

__all__ = ["RelayConnection", "RelayTransport", "open_relay"]
