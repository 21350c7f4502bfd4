"""Lightning addresses (LUD-16) and their LNURL-pay lookup."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import InvalidInvoiceError, TransportError
from ..utils.http import HTTPClient

logger = logging.getLogger(__name__)

_USERNAME = re.compile(r"^[a-z0-9\-_.+]+$")
_DOMAIN = re.compile(
    r"^(?=.{1,253}$)(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$"
)


@dataclass(frozen=True)
class LightningAddress:
    """Human-readable payment address of the form ``user@domain``."""

    username: str
    domain: str

    @classmethod
    def parse(cls, value: str) -> LightningAddress:
        """Parse a Lightning address.

        Raises:
            InvalidInvoiceError: If ``value`` is not ``user@domain``
        """
        text = value.strip().lower()
        username, sep, domain = text.rpartition("@")
        if not sep or not _USERNAME.match(username) or not _DOMAIN.match(domain):
            raise InvalidInvoiceError(f"Not a lightning address: {value!r}", value=value)
        return cls(username=username, domain=domain)

    @property
    def lnurlp_url(self) -> str:
        """Well-known LNURL-pay endpoint that resolves this address."""
        scheme = "http" if self.domain.endswith(".onion") else "https"
        return f"{scheme}://{self.domain}/.well-known/lnurlp/{self.username}"

    def __str__(self) -> str:
        return f"{self.username}@{self.domain}"


class PayRequestInfo(BaseModel):
    """LNURL-pay parameters returned by the address's domain."""

    callback: str
    min_sendable: int = Field(..., alias="minSendable", ge=0)  # msat
    max_sendable: int = Field(..., alias="maxSendable", ge=0)  # msat
    metadata: str
    tag: str
    comment_allowed: int = Field(0, alias="commentAllowed")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


async def resolve_lightning_address(
    address: LightningAddress | str,
    http: HTTPClient | None = None,
) -> PayRequestInfo:
    """Fetch the LNURL-pay parameters behind a Lightning address.

    Args:
        address: Parsed address or its string form
        http: Optional shared HTTP client (a temporary one is used otherwise)

    Raises:
        InvalidInvoiceError: If the address is malformed or the service
            answers with an error or an unexpected document
        TransportError: If the service cannot be reached
    """
    if not isinstance(address, LightningAddress):
        address = LightningAddress.parse(address)

    url = address.lnurlp_url
    client = http or HTTPClient()
    try:
        data: Any = await client.get(url)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransportError(f"Failed to resolve {address}: {e}", url=url) from e
    except ValueError as e:
        raise InvalidInvoiceError(f"Unexpected LNURL response for {address}", value=str(address)) from e
    finally:
        if http is None:
            await client.close()

    if not isinstance(data, dict):
        raise InvalidInvoiceError(f"Unexpected LNURL response for {address}", value=str(address))
    if str(data.get("status", "")).upper() == "ERROR":
        raise InvalidInvoiceError(
            f"LNURL service refused {address}: {data.get('reason', 'unknown reason')}",
            value=str(address),
        )
    if data.get("tag") != "payRequest":
        raise InvalidInvoiceError(f"{address} does not resolve to a pay request", value=str(address))

    try:
        info = PayRequestInfo.model_validate(data)
    except ValidationError as e:
        raise InvalidInvoiceError(f"Malformed LNURL pay request for {address}: {e}", value=str(address)) from e

    logger.debug(f"Resolved {address} -> {info.callback}")
    return info
