"""Rich rendering of discovered orders."""

from __future__ import annotations

import io
from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.enums import OrderKind
from ..models.order import Order

HEADERS = (
    "Buy/Sell",
    "Order Id",
    "Status",
    "Amount",
    "Fiat Code",
    "Fiat Amount",
    "Payment method",
    "Created",
)
EMPTY_TITLE = "Sorry..."
EMPTY_MESSAGE = "No offers found with requested parameters..."

KIND_STYLES = {OrderKind.BUY: "green", OrderKind.SELL: "red"}


def build_orders_table(orders: Sequence[Order]) -> Table:
    """Table of orders, or a single apology row when there are none."""
    if not orders:
        table = Table(box=box.ROUNDED)
        table.add_column(EMPTY_TITLE, justify="center")
        table.add_row(Text(EMPTY_MESSAGE, style="red"))
        return table

    table = Table(box=box.ROUNDED)
    for header in HEADERS:
        table.add_column(header, justify="center", no_wrap=True)

    for order in orders:
        created = order.created.strftime("%Y-%m-%d %H:%M:%S") if order.created else "-"
        table.add_row(
            Text(order.kind.value, style=KIND_STYLES[order.kind]),
            str(order.id),
            order.status.value,
            str(order.amount),
            order.fiat_code,
            str(order.fiat_amount),
            order.payment_method,
            created,
        )
    return table


def format_orders_table(orders: Sequence[Order], width: int = 140) -> str:
    """Render the orders table as plain text."""
    console = Console(file=io.StringIO(), record=True, width=width)
    console.print(build_orders_table(orders))
    return console.export_text()
