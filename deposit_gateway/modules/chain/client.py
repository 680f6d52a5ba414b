"""Contract for the external chain capability.

The gateway never scans the chain itself. A deployment supplies an object
implementing :class:`ChainClient`; it reports connectivity, reads deposit
balances and submits withdrawal transfers signed with the deposit account's
signer. Payment observation is the same collaborator's job: it calls
``OrderEngine.mark_paid`` when funds arrive.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Protocol, runtime_checkable

from deposit_gateway.core.crypto import Account, Signer
from deposit_gateway.core.exceptions import GatewayError

logger = logging.getLogger(__name__)


class ChainClientError(GatewayError):
    """Raised by chain clients when the node cannot serve a request."""


@runtime_checkable
class ChainClient(Protocol):
    async def is_connected(self) -> bool:
        ...

    async def balance(self, account: Account) -> Decimal:
        ...

    async def transfer_all(self, *, source: Account, destination: Account, signer: Signer) -> str:
        """Move the whole balance of ``source`` to ``destination``; returns the transaction id.

        Raises :class:`ChainClientError` only when the transfer was not
        submitted. Any other failure leaves the outcome unknown.
        """
        ...


class OfflineChainClient:
    """Default client used when no chain connection has been configured."""

    def __init__(self, rpc: str = "") -> None:
        self.rpc = rpc

    async def is_connected(self) -> bool:
        return False

    async def balance(self, account: Account) -> Decimal:
        raise ChainClientError(f"no chain connection configured (rpc={self.rpc or 'unset'})")

    async def transfer_all(self, *, source: Account, destination: Account, signer: Signer) -> str:
        logger.warning("Refusing transfer from %s: chain client is offline", source)
        raise ChainClientError(f"no chain connection configured (rpc={self.rpc or 'unset'})")


__all__ = ["ChainClient", "ChainClientError", "OfflineChainClient"]
