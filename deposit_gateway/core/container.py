"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from deposit_gateway import __version__
from deposit_gateway.core.config import Settings
from deposit_gateway.core.crypto import Account, AddressDeriver, parse_account
from deposit_gateway.infrastructure.database.session import build_engine, build_session_factory, init_db
from deposit_gateway.modules.chain.client import ChainClient, OfflineChainClient
from deposit_gateway.modules.invoices.store import InvoiceStore
from deposit_gateway.modules.orders.service import OrderEngine
from deposit_gateway.modules.status.service import StatusAggregator
from deposit_gateway.modules.withdrawals.service import WithdrawalCoordinator


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: AsyncEngine
    store: InvoiceStore
    recipient: Account
    chain: ChainClient
    orders: OrderEngine
    withdrawals: WithdrawalCoordinator
    status: StatusAggregator

    @classmethod
    def build(cls, settings: Settings, chain: Optional[ChainClient] = None) -> "ApplicationContainer":
        payment = settings.payment
        if payment.master_seed is None:
            raise RuntimeError("payment.master_seed is not configured")
        if not payment.recipient:
            raise RuntimeError("payment.recipient is not configured")

        deriver = AddressDeriver.from_hex(payment.master_seed.get_secret_value())
        recipient = parse_account(payment.recipient)
        chain = chain or OfflineChainClient(settings.chain.rpc)

        engine = build_engine(settings)
        store = InvoiceStore(build_session_factory(engine))
        return cls(
            settings=settings,
            engine=engine,
            store=store,
            recipient=recipient,
            chain=chain,
            orders=OrderEngine(
                store,
                deriver,
                minimum_amount=payment.minimum_amount,
                currencies=payment.currencies,
            ),
            withdrawals=WithdrawalCoordinator(
                store,
                deriver,
                chain,
                minimum_withdrawal=payment.minimum_withdrawal,
                timeout=settings.chain_timeout,
            ),
            status=StatusAggregator(
                store,
                chain,
                version=__version__,
                recipient=recipient,
                rpc=settings.chain.rpc,
                decimals=settings.chain.decimals,
                currencies=payment.currencies,
                timeout=settings.chain_timeout,
            ),
        )

    async def startup(self) -> None:
        """Ensure infrastructure (database schema) is initialised."""
        await init_db(self.engine)

    async def shutdown(self) -> None:
        await self.engine.dispose()


__all__ = ["ApplicationContainer"]
