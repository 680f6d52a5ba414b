"""Invoice storage errors."""

from deposit_gateway.core.exceptions import GatewayError


class StoreError(GatewayError):
    """Raised when the invoice store fails to read or persist data."""


class TransactionClosedError(StoreError):
    """Raised when a finished transaction is used again."""
