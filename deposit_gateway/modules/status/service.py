"""Service status aggregation."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from deposit_gateway.core.crypto import Account
from deposit_gateway.core.exceptions import FeatureNotImplementedError
from deposit_gateway.modules.chain.client import ChainClient
from deposit_gateway.modules.invoices.exceptions import StoreError
from deposit_gateway.modules.invoices.store import InvoiceStore

from .models import ServerStatus

logger = logging.getLogger(__name__)


class StatusAggregator:
    """Builds a fresh status snapshot on every call; nothing is cached."""

    def __init__(
        self,
        store: InvoiceStore,
        chain: ChainClient,
        *,
        version: str,
        recipient: Account,
        rpc: str = "",
        decimals: int = 0,
        currencies: Iterable[str] = (),
        timeout: float = 10.0,
    ) -> None:
        self._store = store
        self._chain = chain
        self._version = version
        self._recipient = recipient
        self._rpc = rpc
        self._decimals = decimals
        self._currencies = tuple(currencies)
        self._timeout = timeout

    async def server_status(self) -> ServerStatus:
        store_reachable = True
        pending_count = paid_count = None
        try:
            async with self._store.begin_read() as txn:
                counts = await txn.count_by_status()
            pending_count = counts.get("unpaid", 0)
            paid_count = counts.get("paid", 0)
        except StoreError:
            logger.exception("Invoice store is unreachable")
            store_reachable = False

        return ServerStatus(
            version=self._version,
            recipient=str(self._recipient),
            rpc=self._rpc,
            decimals=self._decimals,
            store_reachable=store_reachable,
            chain_connected=await self._chain_connected(),
            pending_count=pending_count,
            paid_count=paid_count,
            supported_currencies=self._currencies,
        )

    async def health(self) -> None:
        raise FeatureNotImplementedError("health")

    async def audit(self) -> None:
        raise FeatureNotImplementedError("audit")

    async def _chain_connected(self) -> bool:
        try:
            return bool(await asyncio.wait_for(self._chain.is_connected(), timeout=self._timeout))
        except asyncio.TimeoutError:
            logger.warning("Chain connectivity probe timed out after %ss", self._timeout)
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Chain connectivity probe failed: %s", exc)
        return False
