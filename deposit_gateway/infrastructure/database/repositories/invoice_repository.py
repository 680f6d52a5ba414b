"""SQLAlchemy implementation of the invoice repository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from deposit_gateway.core.crypto import Account, parse_account
from deposit_gateway.db.models import InvoiceModel
from deposit_gateway.modules.invoices.models import Invoice, Paid, Unpaid, Withdrawal
from deposit_gateway.modules.invoices.repository import InvoiceRepository


class SqlInvoiceRepository(InvoiceRepository):
    """Invoice repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, account: Account) -> Invoice | None:
        stmt = select(InvoiceModel).where(InvoiceModel.account == str(account))
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def save(self, account: Account, invoice: Invoice) -> None:
        model = await self._session.get(InvoiceModel, str(account))
        if model is None:
            model = InvoiceModel(account=str(account))
            self._session.add(model)

        model.recipient = str(invoice.recipient)
        model.order_id = invoice.order
        model.currency = invoice.currency
        model.callback = invoice.callback
        model.created_at = invoice.created_at
        model.paid_at = invoice.paid_at
        if isinstance(invoice.status, Paid):
            model.status = "paid"
            model.paid_amount = str(invoice.status.amount)
            if model.amount is None:
                model.amount = model.paid_amount
        else:
            model.status = "unpaid"
            model.amount = str(invoice.status.amount)
            model.paid_amount = None

        withdrawal = invoice.withdrawal
        model.withdrawal_status = withdrawal.state if withdrawal else None
        model.withdrawal_amount = str(withdrawal.amount) if withdrawal and withdrawal.amount is not None else None
        model.withdrawal_tx = withdrawal.transaction_id if withdrawal else None
        model.withdrawal_updated_at = withdrawal.updated_at if withdrawal else None

        await self._session.flush()

    async def count_by_status(self) -> dict[str, int]:
        stmt = select(InvoiceModel.status, func.count()).group_by(InvoiceModel.status)
        result = await self._session.execute(stmt)
        counts = {"unpaid": 0, "paid": 0}
        for status, total in result.all():
            counts[status] = int(total)
        return counts

    @staticmethod
    def _to_domain(model: InvoiceModel | None) -> Invoice | None:
        if model is None:
            return None
        if model.status == "paid":
            status = Paid(Decimal(model.paid_amount))
        else:
            status = Unpaid(Decimal(model.amount))

        withdrawal = None
        if model.withdrawal_status:
            withdrawal = Withdrawal(
                state=model.withdrawal_status,
                updated_at=_as_utc(model.withdrawal_updated_at),
                amount=Decimal(model.withdrawal_amount) if model.withdrawal_amount is not None else None,
                transaction_id=model.withdrawal_tx,
            )

        return Invoice(
            recipient=parse_account(model.recipient),
            order=model.order_id,
            status=status,
            currency=model.currency,
            callback=model.callback,
            created_at=_as_utc(model.created_at),
            paid_at=_as_utc(model.paid_at) if model.paid_at else None,
            withdrawal=withdrawal,
        )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
