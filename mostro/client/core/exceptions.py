"""Custom exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models.events import RawEvent


class MostroError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigError(MostroError):
    """Invalid configuration or caller contract violation.

    This is the only failure a discovery run surfaces to its caller, e.g. when
    no relays are configured at all.
    """

    pass


class RelayError(MostroError):
    """Failure scoped to a single relay endpoint."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class TransportError(RelayError):
    """Relay unreachable, connection lost, or a frame could not be sent."""

    pass


class RelayTimeoutError(RelayError, TimeoutError):
    """No terminal notification arrived within the session deadline.

    Carries whatever events had been collected before the deadline; callers
    are free to discard them.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        subscription_id: str | None = None,
        timeout: float | None = None,
        partial_events: list[RawEvent] | None = None,
    ) -> None:
        super().__init__(message, url=url)
        self.subscription_id = subscription_id
        self.timeout = timeout
        self.partial_events = partial_events or []


class DecodeError(MostroError):
    """Event payload does not match the expected order structure."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


class InvalidInvoiceError(MostroError):
    """Input is neither a Lightning address nor a valid BOLT11 invoice."""

    def __init__(self, message: str, value: str | None = None) -> None:
        super().__init__(message)
        self.value = value
