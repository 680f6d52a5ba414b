"""Invoice domain exports"""

from .exceptions import StoreError, TransactionClosedError
from .models import Invoice, InvoiceStatus, Paid, Unpaid, Withdrawal

__all__ = [
    "Invoice",
    "InvoiceStatus",
    "Paid",
    "StoreError",
    "TransactionClosedError",
    "Unpaid",
    "Withdrawal",
]
