"""Single subscribe -> collect -> unsubscribe exchange with one relay."""

from __future__ import annotations

import asyncio
import logging
import uuid
from time import perf_counter

from ..core.enums import NotificationKind
from ..core.exceptions import RelayTimeoutError, TransportError
from ..io.ws.transport import RelayTransport
from ..models.events import RawEvent, SubscriptionFilter, close_frame, req_frame
from .telemetry import (
    log_close_failed,
    log_session_completed,
    log_session_started,
    log_session_timeout,
)

logger = logging.getLogger(__name__)

DEFAULT_CLOSE_TIMEOUT = 1.0


def new_subscription_id() -> str:
    """Random 128-bit correlation id."""
    return uuid.uuid4().hex


class RelaySession:
    """Collects the stored events matching a filter from one relay.

    Every REQ the session sends is followed by exactly one CLOSE for the same
    subscription id, whether collection ends at end-of-stored-events, at the
    deadline, on a transport error, or because the caller was cancelled.
    """

    def __init__(
        self,
        transport: RelayTransport,
        *,
        close_timeout: float = DEFAULT_CLOSE_TIMEOUT,
    ) -> None:
        self._transport = transport
        self._close_timeout = close_timeout

    @property
    def relay_url(self) -> str:
        return self._transport.url

    async def collect(
        self,
        filters: list[SubscriptionFilter],
        timeout: float,
    ) -> list[RawEvent]:
        """Subscribe, gather events until end-of-stored-events, unsubscribe.

        Args:
            filters: Filter descriptions for the REQ frame
            timeout: Deadline in seconds for the whole exchange

        Returns:
            Events in the order the relay delivered them (possibly empty)

        Raises:
            RelayTimeoutError: If end-of-stored-events did not arrive in time
            TransportError: If the connection failed
        """
        subscription_id = new_subscription_id()
        events: list[RawEvent] = []
        requested = False

        async def run() -> None:
            nonlocal requested
            async with self._transport.listen() as notifications:
                log_session_started(
                    relay_url=self.relay_url,
                    subscription_id=subscription_id,
                    filters=[f.to_wire() for f in filters],
                )
                requested = True
                await self._transport.send(req_frame(subscription_id, filters))

                async for notification in notifications:
                    # The connection is shared; skip other subscriptions
                    if notification.subscription_id != subscription_id:
                        continue
                    if notification.kind == NotificationKind.EVENT:
                        events.append(
                            RawEvent(
                                relay_url=self.relay_url,
                                subscription_id=subscription_id,
                                event=notification.event or {},
                            )
                        )
                    elif notification.kind == NotificationKind.EOSE:
                        return
                    else:
                        logger.debug(
                            f"Ignoring {notification.kind.value} for {subscription_id} "
                            f"from {self.relay_url}: {notification.message}"
                        )
            raise TransportError(
                f"Notification stream from {self.relay_url} ended before end of stored events",
                url=self.relay_url,
            )

        started = perf_counter()
        try:
            await asyncio.wait_for(run(), timeout=timeout)
        except asyncio.TimeoutError as e:
            log_session_timeout(
                relay_url=self.relay_url,
                subscription_id=subscription_id,
                timeout=timeout,
                partial_events=len(events),
            )
            raise RelayTimeoutError(
                f"Timeout on request from {self.relay_url} after {timeout}s",
                url=self.relay_url,
                subscription_id=subscription_id,
                timeout=timeout,
                partial_events=list(events),
            ) from e
        finally:
            if requested:
                await self._unsubscribe(subscription_id)

        log_session_completed(
            relay_url=self.relay_url,
            subscription_id=subscription_id,
            events=len(events),
            latency_ms=(perf_counter() - started) * 1000.0,
        )
        return events

    async def _unsubscribe(self, subscription_id: str) -> None:
        try:
            await asyncio.wait_for(
                self._transport.send(close_frame(subscription_id)),
                timeout=self._close_timeout,
            )
        except (TransportError, asyncio.TimeoutError) as e:
            log_close_failed(relay_url=self.relay_url, subscription_id=subscription_id, error=e)
