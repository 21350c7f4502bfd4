#!/usr/bin/env python3
"""List the broker's orders published across the configured relays.

Usage:
    MOSTRO_PUBKEY=<hex or npub> python examples/list_orders.py --status Pending --currency USD
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging

from rich.console import Console

from mostro.client import DiscoveryConfig, DiscoveryCriteria, MostroClient, build_orders_table
from mostro.client.core import OrderKind, OrderStatus


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="List Mostro orders from Nostr relays")
    p.add_argument("--pubkey", help="Broker public key (defaults to $MOSTRO_PUBKEY)")
    p.add_argument("--status", default="Pending", choices=[s.value for s in OrderStatus])
    p.add_argument("--currency", help="Fiat currency code, e.g. USD")
    p.add_argument("--kind", choices=[k.value for k in OrderKind])
    p.add_argument("--timeout", type=float, help="Per-relay timeout in seconds")
    p.add_argument("--relay", action="append", dest="relays", help="Relay URL (repeatable)")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    config = DiscoveryConfig.from_env()
    if args.relays:
        config = config.with_relays(args.relays)
    if args.timeout:
        config = dataclasses.replace(config, relay_timeout=args.timeout)

    criteria = DiscoveryCriteria(status=args.status, currency=args.currency, kind=args.kind)

    async with MostroClient(config) as client:
        orders = await client.discover_orders(args.pubkey, criteria)
    Console().print(build_orders_table(orders))


if __name__ == "__main__":
    asyncio.run(main())
