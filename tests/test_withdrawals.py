import asyncio
from decimal import Decimal

import pytest
from solders.signature import Signature

from deposit_gateway.modules.chain.client import OfflineChainClient
from deposit_gateway.modules.withdrawals import (
    AlreadyWithdrawnError,
    ChainUnreachableError,
    InsufficientBalanceError,
    NotPayableError,
    WithdrawalUnconfirmedError,
)
from deposit_gateway.modules.withdrawals.service import WithdrawalCoordinator


async def _paid_order(orders, chain, recipient, order="inv-42", amount=Decimal("0.071")):
    created = await orders.create_or_get_order(recipient, order, Decimal("0.07"))
    chain.fund(created.account, amount)
    await orders.mark_paid(created.account, amount)
    return created.account


async def test_withdrawal_moves_balance_to_recipient(orders, withdrawals, chain, recipient, store):
    account = await _paid_order(orders, chain, recipient)

    receipt = await withdrawals.force_withdrawal(recipient, "inv-42")

    assert receipt.order == "inv-42"
    assert receipt.payment_account == account
    assert receipt.recipient == recipient
    assert receipt.amount == Decimal("0.071")
    assert len(chain.transfers) == 1

    transfer = chain.transfers[0]
    assert transfer.source == account
    assert transfer.destination == recipient
    assert Signature.from_bytes(transfer.signature).verify(account, transfer.message)

    stored = await store.get(account)
    assert stored.withdrawal.is_completed
    assert stored.withdrawal.transaction_id == receipt.transaction_id
    assert stored.withdrawal.amount == Decimal("0.071")


async def test_second_withdrawal_is_refused(orders, withdrawals, chain, recipient):
    await _paid_order(orders, chain, recipient)
    await withdrawals.force_withdrawal(recipient, "inv-42")

    with pytest.raises(AlreadyWithdrawnError) as excinfo:
        await withdrawals.force_withdrawal(recipient, "inv-42")

    assert not excinfo.value.retriable
    assert len(chain.transfers) == 1


async def test_concurrent_withdrawals_submit_once(orders, withdrawals, chain, recipient):
    await _paid_order(orders, chain, recipient)
    chain.delay = 0.05

    results = await asyncio.gather(
        withdrawals.force_withdrawal(recipient, "inv-42"),
        withdrawals.force_withdrawal(recipient, "inv-42"),
        return_exceptions=True,
    )

    errors = [result for result in results if isinstance(result, Exception)]
    assert len(errors) == 1
    assert isinstance(errors[0], AlreadyWithdrawnError)
    assert len(chain.transfers) == 1


async def test_unpaid_order_is_not_payable(orders, withdrawals, chain, recipient):
    await orders.create_or_get_order(recipient, "inv-42", Decimal("0.07"))

    with pytest.raises(NotPayableError):
        await withdrawals.force_withdrawal(recipient, "inv-42")
    assert chain.transfers == []


async def test_unknown_order_is_not_payable(withdrawals, recipient):
    with pytest.raises(NotPayableError):
        await withdrawals.force_withdrawal(recipient, "missing")


async def test_insufficient_balance_releases_reservation(orders, withdrawals, chain, recipient, store):
    account = await _paid_order(orders, chain, recipient, amount=Decimal("0.005"))

    with pytest.raises(InsufficientBalanceError) as excinfo:
        await withdrawals.force_withdrawal(recipient, "inv-42")
    assert excinfo.value.retriable
    assert (await store.get(account)).withdrawal is None

    chain.fund(account, Decimal("1"))
    receipt = await withdrawals.force_withdrawal(recipient, "inv-42")
    assert receipt.amount == Decimal("1.005")


async def test_chain_failure_is_retriable(orders, withdrawals, chain, recipient, store):
    account = await _paid_order(orders, chain, recipient)
    chain.fail = True

    with pytest.raises(ChainUnreachableError) as excinfo:
        await withdrawals.force_withdrawal(recipient, "inv-42")
    assert excinfo.value.retriable
    assert (await store.get(account)).withdrawal is None

    chain.fail = False
    await withdrawals.force_withdrawal(recipient, "inv-42")
    assert len(chain.transfers) == 1


async def test_chain_timeout_maps_to_unreachable(orders, withdrawals, chain, recipient, store):
    account = await _paid_order(orders, chain, recipient)
    chain.delay = 1.0

    with pytest.raises(ChainUnreachableError):
        await withdrawals.force_withdrawal(recipient, "inv-42")

    assert chain.transfers == []
    assert (await store.get(account)).withdrawal is None


async def test_unconfirmed_transfer_keeps_reservation(orders, withdrawals, chain, recipient, store):
    account = await _paid_order(orders, chain, recipient)
    chain.transfer_delay = 1.0

    with pytest.raises(WithdrawalUnconfirmedError) as excinfo:
        await withdrawals.force_withdrawal(recipient, "inv-42")
    assert not excinfo.value.retriable
    assert len(chain.transfers) == 1

    with pytest.raises(AlreadyWithdrawnError):
        await withdrawals.force_withdrawal(recipient, "inv-42")

    assert len(chain.transfers) == 1
    stored = await store.get(account)
    assert stored.withdrawal.state == "pending"
    assert chain.balances[str(account)] == Decimal("0.071")


async def test_rejected_transfer_releases_reservation(orders, withdrawals, chain, recipient, store):
    account = await _paid_order(orders, chain, recipient)
    chain.reject_transfers = True

    with pytest.raises(ChainUnreachableError) as excinfo:
        await withdrawals.force_withdrawal(recipient, "inv-42")
    assert excinfo.value.retriable
    assert (await store.get(account)).withdrawal is None

    chain.reject_transfers = False
    receipt = await withdrawals.force_withdrawal(recipient, "inv-42")
    assert receipt.amount == Decimal("0.071")
    assert len(chain.transfers) == 1


async def test_offline_chain_client(orders, chain, store, deriver, recipient):
    await _paid_order(orders, chain, recipient)
    coordinator = WithdrawalCoordinator(store, deriver, OfflineChainClient("wss://nowhere"), timeout=0.2)

    with pytest.raises(ChainUnreachableError):
        await coordinator.force_withdrawal(recipient, "inv-42")
