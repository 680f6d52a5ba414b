"""Domain models for withdrawals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from deposit_gateway.core.crypto import Account


@dataclass(frozen=True, slots=True)
class WithdrawalReceipt:
    order: str
    payment_account: Account
    recipient: Account
    amount: Decimal
    transaction_id: str
    submitted_at: datetime
