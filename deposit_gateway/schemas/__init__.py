"""Pydantic schemas used across the project."""
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from deposit_gateway.modules.invoices.models import Invoice
from deposit_gateway.modules.orders.models import OrderOutcome
from deposit_gateway.modules.status.models import ServerStatus
from deposit_gateway.modules.withdrawals.models import WithdrawalReceipt


class OrderRequest(BaseModel):
    amount: Decimal = Field(..., description="Requested amount in whole currency units")
    currency: Optional[str] = Field(default=None, max_length=16)
    callback: Optional[str] = Field(default=None, max_length=2048)


class OrderResponse(BaseModel):
    order: str
    payment_account: str
    recipient: str
    amount: Decimal
    currency: Optional[str] = None
    callback: Optional[str] = None
    payment_status: Literal["pending", "paid"]
    withdrawal_status: Literal["waiting", "pending", "completed"]
    created_at: datetime
    paid_at: Optional[datetime] = None

    @classmethod
    def from_invoice(cls, account, invoice: Invoice) -> "OrderResponse":
        withdrawal = invoice.withdrawal
        return cls(
            order=invoice.order,
            payment_account=str(account),
            recipient=str(invoice.recipient),
            amount=invoice.amount,
            currency=invoice.currency,
            callback=invoice.callback,
            payment_status="paid" if invoice.is_paid else "pending",
            withdrawal_status=withdrawal.state if withdrawal else "waiting",
            created_at=invoice.created_at,
            paid_at=invoice.paid_at,
        )

    @classmethod
    def from_outcome(cls, outcome: OrderOutcome) -> "OrderResponse":
        return cls.from_invoice(outcome.account, outcome.invoice)


class WithdrawalReceiptResponse(BaseModel):
    order: str
    payment_account: str
    recipient: str
    amount: Decimal
    transaction_id: str
    submitted_at: datetime

    @classmethod
    def from_receipt(cls, receipt: WithdrawalReceipt) -> "WithdrawalReceiptResponse":
        return cls(
            order=receipt.order,
            payment_account=str(receipt.payment_account),
            recipient=str(receipt.recipient),
            amount=receipt.amount,
            transaction_id=receipt.transaction_id,
            submitted_at=receipt.submitted_at,
        )


class ServerStatusResponse(BaseModel):
    version: str
    recipient: str
    rpc: str = Field(..., description="Chain endpoint clients should watch for deposits")
    decimals: int = Field(..., description="Number of decimals of the chain's base unit")
    supported_currencies: list[str]
    pending_count: Optional[int] = None
    paid_count: Optional[int] = None
    store_reachable: bool
    chain_connected: bool

    @classmethod
    def from_status(cls, status: ServerStatus) -> "ServerStatusResponse":
        return cls(
            version=status.version,
            recipient=status.recipient,
            rpc=status.rpc,
            decimals=status.decimals,
            supported_currencies=list(status.supported_currencies),
            pending_count=status.pending_count,
            paid_count=status.paid_count,
            store_reachable=status.store_reachable,
            chain_connected=status.chain_connected,
        )


class ParameterError(BaseModel):
    parameter: Optional[str] = None
    message: str
