"""
Apply a payment notification by hand.

The chain watcher normally calls ``OrderEngine.mark_paid`` in-process; this
script does the same for an operator who has confirmed a transfer manually.

    python mark_paid.py <payment_account> <amount>
"""
import argparse
import asyncio
from decimal import Decimal, InvalidOperation

from deposit_gateway.core.config import get_settings
from deposit_gateway.core.container import ApplicationContainer
from deposit_gateway.core.crypto import parse_account
from deposit_gateway.core.logging import configure_logging
from deposit_gateway.modules.orders.exceptions import UnknownInvoiceError


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"invalid amount: {value}") from exc
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError(f"amount must be positive: {value}")
    return amount


async def mark_paid(payment_account: str, amount: Decimal) -> int:
    settings = get_settings()
    configure_logging(settings)
    container = ApplicationContainer.build(settings)
    await container.startup()
    try:
        account = parse_account(payment_account, parameter="paymentAccount")
        try:
            invoice = await container.orders.mark_paid(account, amount)
        except UnknownInvoiceError:
            print(f"No invoice exists for {payment_account}")
            return 1
        print(f"Order {invoice.order}: paid {invoice.amount} (paid at {invoice.paid_at:%Y-%m-%d %H:%M:%S})")
        return 0
    finally:
        await container.shutdown()


def main() -> int:
    parser = argparse.ArgumentParser(description="Mark a deposit account as paid")
    parser.add_argument("payment_account", help="deposit account (base58 or hex)")
    parser.add_argument("amount", type=_amount, help="received amount")
    args = parser.parse_args()
    return asyncio.run(mark_paid(args.payment_account, args.amount))


if __name__ == "__main__":
    raise SystemExit(main())
