"""Turn relay event batches into a filtered list of orders."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..core.exceptions import DecodeError
from ..models.events import RawEvent
from ..models.order import DiscoveryCriteria, Order
from .telemetry import log_decode_failed

logger = logging.getLogger(__name__)


def extract_orders(
    batches: Iterable[Sequence[RawEvent]],
    criteria: DiscoveryCriteria | None = None,
) -> list[Order]:
    """Decode, deduplicate and filter orders.

    Events are visited batch by batch, in delivery order within a batch.
    Undecodable events are logged and skipped.

    Deduplication by order id only applies when ``criteria.status`` is set:
    without a status predicate, an order delivered by two relays is returned
    twice.

    Args:
        batches: Event batches, one per relay
        criteria: Optional status/currency/kind predicates

    Returns:
        Matching orders in visit order
    """
    criteria = criteria or DiscoveryCriteria()
    orders: list[Order] = []
    seen: set[int] = set()

    for batch in batches:
        for event in batch:
            try:
                order = Order.from_event(event)
            except DecodeError as e:
                log_decode_failed(relay_url=event.relay_url, event_id=event.event_id, error=e)
                continue

            logger.debug(f"Found order id {order.id} on {event.relay_url}")

            # TODO: confirm with the broker maintainers whether dedup should run without a status filter
            if criteria.status is not None:
                if order.id in seen or order.status != criteria.status:
                    logger.debug(f"Skipping order {order.id}: already seen or status {order.status}")
                    continue

            if criteria.currency is not None and criteria.currency != order.fiat_code:
                logger.debug(f"Skipping order {order.id}: currency {order.fiat_code}")
                continue

            if criteria.kind is not None and criteria.kind != order.kind:
                logger.debug(f"Skipping order {order.id}: kind {order.kind}")
                continue

            seen.add(order.id)
            orders.append(order)

    return orders
