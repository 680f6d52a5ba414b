"""Withdrawal errors.

``retriable`` tells the caller whether repeating the same request may succeed
later (chain trouble, balance not yet settled) or is pointless.
"""

from deposit_gateway.core.exceptions import GatewayError


class WithdrawalError(GatewayError):
    retriable = False

    def __init__(self, order: str, message: str) -> None:
        super().__init__(message)
        self.order = order
        self.message = message


class NotPayableError(WithdrawalError):
    """The invoice does not exist or has not been paid."""


class AlreadyWithdrawnError(WithdrawalError):
    """A withdrawal for this invoice was already submitted or is in flight."""


class InsufficientBalanceError(WithdrawalError):
    retriable = True


class ChainUnreachableError(WithdrawalError):
    retriable = True


class WithdrawalUnconfirmedError(ChainUnreachableError):
    """The transfer may have been submitted; the reservation is kept."""

    retriable = False
