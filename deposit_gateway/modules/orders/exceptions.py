"""Order domain specific exceptions."""

from decimal import Decimal

from deposit_gateway.core.exceptions import GatewayError, InvalidParameterError


class AmountTooLowError(InvalidParameterError):
    """Raised when the requested amount is below the existential deposit."""

    def __init__(self, minimum: Decimal) -> None:
        super().__init__("amount", f"amount must be at least {minimum}")
        self.minimum = minimum


class UnknownCurrencyError(InvalidParameterError):
    def __init__(self, currency: str) -> None:
        super().__init__("currency", f"unsupported currency: {currency}")


class OrderError(GatewayError):
    """Base class for order domain errors."""


class UnknownOrderError(OrderError):
    """Raised when the referenced order has never been created."""


class OrderAlreadyPaidError(OrderError):
    """Raised when attempting to change an order that has been paid."""


class UnknownInvoiceError(OrderError):
    """Raised when a payment is reported for an account without an invoice."""
