"""Order listing and discovery criteria models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.enums import OrderKind, OrderStatus
from ..core.exceptions import DecodeError
from .events import RawEvent


def _coerce_enum(enum_cls: type[OrderKind] | type[OrderStatus], value: Any) -> Any:
    if isinstance(value, str):
        member = enum_cls.from_str(value)
        if member is not None:
            return member
    return value


class Order(BaseModel):
    """Marketplace order published by the broker.

    Identity (``id``) is unique across the whole marketplace, so the same
    order delivered by several relays decodes to equal ``id`` values.
    """

    id: int
    kind: OrderKind
    status: OrderStatus
    amount: int = Field(..., ge=0)  # sats
    fiat_code: str = Field(..., min_length=1)
    fiat_amount: int = Field(..., ge=0)
    payment_method: str
    prime: int = 0
    payment_request: str | None = None
    created_at: int | None = None  # unix seconds

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v: Any) -> Any:
        """Accept PascalCase and kebab-case spellings."""
        return _coerce_enum(OrderKind, v)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> Any:
        """Accept PascalCase and kebab-case spellings."""
        return _coerce_enum(OrderStatus, v)

    @property
    def created(self) -> datetime | None:
        """Creation time as an aware UTC datetime."""
        if self.created_at is None:
            return None
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc)

    @classmethod
    def from_json(cls, content: str | bytes | dict[str, Any]) -> Order:
        """Decode an order from event content.

        Raises:
            DecodeError: If the content is not JSON or misses required fields
        """
        try:
            if isinstance(content, (str, bytes)):
                return cls.model_validate_json(content)
            return cls.model_validate(content)
        except ValidationError as e:
            raise DecodeError(f"Invalid order payload: {e}", payload=content) from e

    @classmethod
    def from_event(cls, event: RawEvent) -> Order:
        """Decode the order carried in a relay event's content."""
        content = event.content
        if content is None:
            raise DecodeError(
                f"Event {event.event_id} from {event.relay_url} has no content",
                payload=event.event,
            )
        return cls.from_json(content)

    def to_json(self) -> str:
        return self.model_dump_json()


class DiscoveryCriteria(BaseModel):
    """Optional predicates narrowing a discovery result set.

    All supplied predicates must hold (conjunction). ``currency`` is compared
    exactly against ``Order.fiat_code``.
    """

    status: OrderStatus | None = None
    currency: str | None = None
    kind: OrderKind | None = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("kind", mode="before")
    @classmethod
    def parse_kind(cls, v: Any) -> Any:
        return _coerce_enum(OrderKind, v)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> Any:
        return _coerce_enum(OrderStatus, v)
