"""Domain models for invoices."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Union

from deposit_gateway.core.crypto import Account


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Unpaid:
    amount: Decimal


@dataclass(frozen=True, slots=True)
class Paid:
    amount: Decimal


InvoiceStatus = Union[Unpaid, Paid]


@dataclass(frozen=True, slots=True)
class Withdrawal:
    state: str  # pending, completed
    updated_at: datetime
    amount: Optional[Decimal] = None
    transaction_id: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.state == "completed"


@dataclass(frozen=True, slots=True)
class Invoice:
    recipient: Account
    order: str
    status: InvoiceStatus
    currency: Optional[str] = None
    callback: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    paid_at: Optional[datetime] = None
    withdrawal: Optional[Withdrawal] = None

    @property
    def is_paid(self) -> bool:
        return isinstance(self.status, Paid)

    @property
    def amount(self) -> Decimal:
        """Requested amount while unpaid, received amount once paid."""
        return self.status.amount

    def mark_paid(self, amount: Decimal, paid_at: datetime | None = None) -> "Invoice":
        if self.is_paid:
            raise ValueError("invoice is already paid")
        return replace(self, status=Paid(amount), paid_at=paid_at or utcnow())

    def with_amount(self, amount: Decimal) -> "Invoice":
        if self.is_paid:
            raise ValueError("paid invoices are immutable")
        return replace(self, status=Unpaid(amount))

    def with_withdrawal(self, withdrawal: Withdrawal | None) -> "Invoice":
        if withdrawal is not None and not self.is_paid:
            raise ValueError("only paid invoices can be withdrawn")
        return replace(self, withdrawal=withdrawal)


__all__ = [
    "Invoice",
    "InvoiceStatus",
    "Paid",
    "Unpaid",
    "Withdrawal",
    "utcnow",
]
