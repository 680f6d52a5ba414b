"""Repository protocol for invoices."""

from __future__ import annotations

from typing import Protocol

from deposit_gateway.core.crypto import Account

from .models import Invoice


class InvoiceRepository(Protocol):
    """Persistence operations available inside a store transaction."""

    async def get(self, account: Account) -> Invoice | None:
        ...

    async def save(self, account: Account, invoice: Invoice) -> None:
        ...

    async def count_by_status(self) -> dict[str, int]:
        ...
