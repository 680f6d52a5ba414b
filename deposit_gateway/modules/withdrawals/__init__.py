"""Withdrawal domain exports"""

from .exceptions import (
    AlreadyWithdrawnError,
    ChainUnreachableError,
    InsufficientBalanceError,
    NotPayableError,
    WithdrawalError,
    WithdrawalUnconfirmedError,
)
from .models import WithdrawalReceipt

__all__ = [
    "AlreadyWithdrawnError",
    "ChainUnreachableError",
    "InsufficientBalanceError",
    "NotPayableError",
    "WithdrawalError",
    "WithdrawalUnconfirmedError",
    "WithdrawalReceipt",
]
