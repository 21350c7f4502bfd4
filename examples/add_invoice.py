#!/usr/bin/env python3
"""Validate an invoice and print the "add invoice" message for an order.

Signing and publishing the message is left to the caller.

Usage:
    python examples/add_invoice.py 42 alice@example.com
    python examples/add_invoice.py 42 lnbc2500u1p...
"""

from __future__ import annotations

import argparse
import sys

from mostro.client import InvalidInvoiceError, MostroClient


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build an add-invoice message for an order")
    p.add_argument("order_id", help="Order identifier")
    p.add_argument("invoice", help="Lightning address or BOLT11 invoice")
    return p.parse_args()


def main() -> int:
    args = parse_args()
    client = MostroClient()
    print(f"Sending a lightning invoice for order {args.order_id}")
    try:
        message = client.add_invoice_message(args.order_id, args.invoice)
    except InvalidInvoiceError as e:
        print(e, file=sys.stderr)
        return 1
    print(message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
