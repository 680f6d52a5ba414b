"""Withdrawal coordinator.

A withdrawal is reserved in the store before the chain is touched: the
invoice gets a ``pending`` marker inside a write transaction, so a concurrent
or repeated request sees the marker and is refused instead of submitting a
second transfer. The marker is cleared again only when the transfer was
certainly not submitted (balance checks, a transfer the client rejected). A
transfer that timed out or was cancelled may already be on the node, so its
marker stays ``pending`` for an operator to reconcile. Once the transfer call
returns, the marker becomes ``completed`` and stays.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, TypeVar

from deposit_gateway.core.crypto import Account, AddressDeriver, Signer
from deposit_gateway.modules.chain.client import ChainClient, ChainClientError
from deposit_gateway.modules.invoices.models import Invoice, Withdrawal, utcnow
from deposit_gateway.modules.invoices.store import InvoiceStore

from .exceptions import (
    AlreadyWithdrawnError,
    ChainUnreachableError,
    InsufficientBalanceError,
    NotPayableError,
    WithdrawalUnconfirmedError,
)
from .models import WithdrawalReceipt

logger = logging.getLogger(__name__)

T = TypeVar("T")


class WithdrawalCoordinator:
    def __init__(
        self,
        store: InvoiceStore,
        deriver: AddressDeriver,
        chain: ChainClient,
        *,
        minimum_withdrawal: Decimal = Decimal("0"),
        timeout: float = 10.0,
    ) -> None:
        self._store = store
        self._deriver = deriver
        self._chain = chain
        self._minimum_withdrawal = minimum_withdrawal
        self._timeout = timeout

    async def force_withdrawal(self, recipient: Account, order: str) -> WithdrawalReceipt:
        account = self._deriver.derive_deposit_account(recipient, order)
        await self._reserve(account, order)
        logger.info("Withdrawal of order %r reserved on %s", order, account)

        try:
            balance = await self._call(self._chain.balance(account), order)
            if balance <= 0 or balance < self._minimum_withdrawal:
                raise InsufficientBalanceError(
                    order,
                    f"balance {balance} of {account} is below the withdrawal minimum {self._minimum_withdrawal}",
                )
            signer = self._deriver.signer_for(recipient, order)
        except BaseException:
            await self._release(account, order)
            raise

        transaction_id = await self._submit(account, recipient, signer, order)

        submitted_at = utcnow()
        await self._complete(account, balance, transaction_id, submitted_at)
        logger.info("Withdrew %s from %s to %s in %s", balance, account, recipient, transaction_id)
        return WithdrawalReceipt(
            order=order,
            payment_account=account,
            recipient=recipient,
            amount=balance,
            transaction_id=transaction_id,
            submitted_at=submitted_at,
        )

    async def _submit(self, account: Account, recipient: Account, signer: Signer, order: str) -> str:
        """Submit the transfer; keeps the reservation when the outcome is unknown."""
        transfer = self._chain.transfer_all(
            source=account,
            destination=recipient,
            signer=signer,
        )
        try:
            return await asyncio.wait_for(transfer, timeout=self._timeout)
        except ChainClientError as exc:
            # The client refused the transfer, nothing reached the node.
            logger.warning("Transfer for order %r was rejected: %s", order, exc)
            await self._release(account, order)
            raise ChainUnreachableError(order, str(exc)) from exc
        except asyncio.TimeoutError as exc:
            logger.error(
                "Transfer for order %r timed out after %ss; %s stays pending until reconciled",
                order,
                self._timeout,
                account,
            )
            raise WithdrawalUnconfirmedError(order, f"transfer of order {order} was not confirmed") from exc
        except asyncio.CancelledError:
            logger.error("Transfer for order %r was cancelled; %s stays pending until reconciled", order, account)
            raise
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Chain client raised during transfer for order %r; %s stays pending", order, account)
            raise WithdrawalUnconfirmedError(order, f"transfer of order {order} was not confirmed") from exc

    async def _reserve(self, account: Account, order: str) -> Invoice:
        async with self._store.begin_write() as txn:
            invoice = await txn.get(account)
            if invoice is None:
                raise NotPayableError(order, f"order {order} does not exist")
            if not invoice.is_paid:
                raise NotPayableError(order, f"order {order} is not paid")
            if invoice.withdrawal is not None:
                raise AlreadyWithdrawnError(order, f"order {order} was already withdrawn")

            reserved = invoice.with_withdrawal(Withdrawal(state="pending", updated_at=utcnow()))
            await txn.put(account, reserved)
            await txn.commit()
        return reserved

    async def _release(self, account: Account, order: str) -> None:
        async with self._store.begin_write() as txn:
            invoice = await txn.get(account)
            if invoice is None or invoice.withdrawal is None or invoice.withdrawal.is_completed:
                return
            await txn.put(account, invoice.with_withdrawal(None))
            await txn.commit()
        logger.info("Withdrawal reservation of order %r released", order)

    async def _complete(self, account: Account, amount: Decimal, transaction_id: str, submitted_at: datetime) -> None:
        async with self._store.begin_write() as txn:
            invoice = await txn.get(account)
            if invoice is None:
                return
            withdrawal = Withdrawal(
                state="completed",
                updated_at=submitted_at,
                amount=amount,
                transaction_id=transaction_id,
            )
            await txn.put(account, invoice.with_withdrawal(withdrawal))
            await txn.commit()

    async def _call(self, awaitable: Awaitable[T], order: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Chain call for order %r timed out after %ss", order, self._timeout)
            raise ChainUnreachableError(order, "chain did not respond in time") from exc
        except ChainClientError as exc:
            logger.warning("Chain call for order %r failed: %s", order, exc)
            raise ChainUnreachableError(order, str(exc)) from exc
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Chain client raised unexpectedly for order %r", order)
            raise ChainUnreachableError(order, "chain client failed") from exc
