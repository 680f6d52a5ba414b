"""Order engine: invoice creation, price reconciliation and payment status."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional

from deposit_gateway.core.crypto import Account, AddressDeriver
from deposit_gateway.core.exceptions import InvalidParameterError
from deposit_gateway.modules.invoices.models import Invoice, Paid, Unpaid, utcnow
from deposit_gateway.modules.invoices.store import InvoiceStore

from .exceptions import (
    AmountTooLowError,
    OrderAlreadyPaidError,
    UnknownCurrencyError,
    UnknownInvoiceError,
    UnknownOrderError,
)
from .models import OrderKind, OrderOutcome

logger = logging.getLogger(__name__)


class OrderEngine:
    """Encapsulates the invoice state machine (NonExistent -> Unpaid -> Paid)."""

    def __init__(
        self,
        store: InvoiceStore,
        deriver: AddressDeriver,
        *,
        minimum_amount: Decimal,
        currencies: Optional[Iterable[str]] = None,
    ) -> None:
        self._store = store
        self._deriver = deriver
        self._minimum_amount = minimum_amount
        self._currencies = frozenset(currencies) if currencies is not None else None

    def derive_account(self, recipient: Account, order: str) -> Account:
        return self._deriver.derive_deposit_account(recipient, order)

    async def create_or_get_order(
        self,
        recipient: Account,
        order: str,
        amount: Decimal,
        currency: str | None = None,
        callback: str | None = None,
    ) -> OrderOutcome:
        self._validate(amount, currency)
        account = self.derive_account(recipient, order)

        async with self._store.begin_read() as txn:
            existing = await txn.get(account)
        if existing is not None:
            return self._classify(account, existing, amount)

        async with self._store.begin_write() as txn:
            # Another writer may have created the invoice since the read above.
            existing = await txn.get(account)
            if existing is not None:
                return self._classify(account, existing, amount)

            invoice = Invoice(
                recipient=recipient,
                order=order,
                status=Unpaid(amount),
                currency=currency,
                callback=callback,
                created_at=utcnow(),
            )
            await txn.put(account, invoice)
            await txn.commit()

        logger.info("Created order %r with deposit account %s for %s", order, account, amount)
        return OrderOutcome(OrderKind.NEW, account, invoice)

    async def modify_order(
        self,
        recipient: Account,
        order: str,
        amount: Decimal,
        currency: str | None = None,
        callback: str | None = None,
    ) -> OrderOutcome:
        """Explicitly change the price of an unpaid order."""
        self._validate(amount, currency)
        account = self.derive_account(recipient, order)

        async with self._store.begin_write() as txn:
            existing = await txn.get(account)
            if existing is None:
                raise UnknownOrderError(order)
            if existing.is_paid:
                raise OrderAlreadyPaidError(order)

            invoice = replace(
                existing.with_amount(amount),
                currency=currency if currency is not None else existing.currency,
                callback=callback if callback is not None else existing.callback,
            )
            await txn.put(account, invoice)
            await txn.commit()

        logger.info("Modified order %r: %s -> %s", order, existing.amount, amount)
        return OrderOutcome(OrderKind.MODIFIED, account, invoice)

    async def get_order(self, recipient: Account, order: str) -> tuple[Account, Invoice | None]:
        account = self.derive_account(recipient, order)
        async with self._store.begin_read() as txn:
            return account, await txn.get(account)

    async def mark_paid(self, account: Account, amount: Decimal) -> Invoice:
        """Record an observed payment; duplicate notifications are no-ops."""
        if not amount.is_finite() or amount <= 0:
            raise InvalidParameterError("amount", f"received amount must be a positive number, got {amount}")
        async with self._store.begin_write() as txn:
            existing = await txn.get(account)
            if existing is None:
                logger.error("Payment of %s reported for unknown account %s", amount, account)
                raise UnknownInvoiceError(str(account))
            if existing.is_paid:
                logger.info("Ignoring repeated payment notification for %s", account)
                return existing

            invoice = existing.mark_paid(amount)
            await txn.put(account, invoice)
            await txn.commit()

        logger.info(
            "Order %r paid: requested %s, received %s on %s",
            invoice.order,
            existing.amount,
            amount,
            account,
        )
        return invoice

    def _validate(self, amount: Decimal, currency: str | None) -> None:
        if amount < self._minimum_amount:
            raise AmountTooLowError(self._minimum_amount)
        if currency is not None and self._currencies is not None and currency not in self._currencies:
            raise UnknownCurrencyError(currency)

    @staticmethod
    def _classify(account: Account, invoice: Invoice, amount: Decimal) -> OrderOutcome:
        status = invoice.status
        if isinstance(status, Paid) or status.amount == amount:
            return OrderOutcome(OrderKind.FOUND, account, invoice)

        logger.warning(
            "Order %r collided: saved amount %s, requested %s",
            invoice.order,
            status.amount,
            amount,
        )
        return OrderOutcome(OrderKind.COLLIDED, account, invoice)
