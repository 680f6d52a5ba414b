"""Order domain exports"""

from .exceptions import (
    AmountTooLowError,
    OrderAlreadyPaidError,
    OrderError,
    UnknownCurrencyError,
    UnknownInvoiceError,
    UnknownOrderError,
)
from .models import OrderKind, OrderOutcome

__all__ = [
    "AmountTooLowError",
    "OrderAlreadyPaidError",
    "OrderError",
    "OrderKind",
    "OrderOutcome",
    "UnknownCurrencyError",
    "UnknownInvoiceError",
    "UnknownOrderError",
]
