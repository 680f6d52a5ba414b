"""Domain models for order creation outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from deposit_gateway.core.crypto import Account
from deposit_gateway.modules.invoices.models import Invoice


class OrderKind(str, Enum):
    NEW = "new"
    FOUND = "found"
    MODIFIED = "modified"
    COLLIDED = "collided"


@dataclass(frozen=True, slots=True)
class OrderOutcome:
    kind: OrderKind
    account: Account
    invoice: Invoice
