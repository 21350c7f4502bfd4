"""Structured logging for relay sessions and discovery runs.

Each helper emits one record whose message is a stable event name and whose
``extra`` carries the fields, so a JSON log formatter can index them.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_session_started(*, relay_url: str, subscription_id: str, filters: list[dict]) -> None:
    """Log a subscription request sent to a relay."""
    logger.info(
        "relay_session_started",
        extra={
            "relay_url": relay_url,
            "subscription_id": subscription_id,
            "filters": filters,
        },
    )


def log_session_completed(
    *,
    relay_url: str,
    subscription_id: str,
    events: int,
    latency_ms: float,
) -> None:
    """Log a subscription that reached end-of-stored-events.

    Args:
        relay_url: Relay the session ran against
        subscription_id: Correlation id of the subscription
        events: Number of events collected
        latency_ms: Time from REQ to EOSE in milliseconds
    """
    logger.info(
        "relay_session_completed",
        extra={
            "relay_url": relay_url,
            "subscription_id": subscription_id,
            "events": events,
            "latency_ms": latency_ms,
        },
    )


def log_session_timeout(
    *,
    relay_url: str,
    subscription_id: str,
    timeout: float,
    partial_events: int,
) -> None:
    """Log a subscription abandoned at its deadline."""
    logger.warning(
        "relay_session_timeout",
        extra={
            "relay_url": relay_url,
            "subscription_id": subscription_id,
            "timeout": timeout,
            "partial_events": partial_events,
        },
    )


def log_close_failed(*, relay_url: str, subscription_id: str, error: BaseException) -> None:
    """Log a CLOSE frame that could not be delivered."""
    logger.warning(
        "relay_close_failed",
        extra={
            "relay_url": relay_url,
            "subscription_id": subscription_id,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def log_relay_failed(*, relay_url: str, error: BaseException) -> None:
    """Log a relay whose batch is dropped from the run."""
    logger.warning(
        "relay_query_failed",
        extra={
            "relay_url": relay_url,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def log_decode_failed(*, relay_url: str, event_id: str | None, error: BaseException) -> None:
    """Log an event whose content is not an order."""
    logger.error(
        "order_decode_failed",
        extra={
            "relay_url": relay_url,
            "event_id": event_id,
            "error_message": str(error),
        },
    )


def log_discovery_completed(
    *,
    relays: int,
    batches: int,
    events: int,
    latency_ms: float,
) -> None:
    """Log the end of a discovery run across all relays."""
    logger.info(
        "discovery_completed",
        extra={
            "relays": relays,
            "batches": batches,
            "events": events,
            "latency_ms": latency_ms,
        },
    )
