import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import text

from deposit_gateway.modules.invoices import Invoice, Paid, StoreError, TransactionClosedError, Unpaid


@pytest.fixture
def account(deriver, recipient):
    return deriver.derive_deposit_account(recipient, "inv-1")


@pytest.fixture
def invoice(recipient):
    return Invoice(recipient=recipient, order="inv-1", status=Unpaid(Decimal("1.5")), currency="DOT")


async def test_committed_write_is_visible_to_readers(store, account, invoice):
    async with store.begin_write() as txn:
        await txn.put(account, invoice)
        await txn.commit()

    async with store.begin_read() as txn:
        stored = await txn.get(account)

    assert stored == invoice
    assert stored.status == Unpaid(Decimal("1.5"))


async def test_read_transaction_keeps_one_snapshot(store, account, invoice):
    async with store.begin_read() as reader:
        assert await reader.get(account) is None

        async with store.begin_write() as txn:
            await txn.put(account, invoice)
            await txn.commit()

        assert await reader.get(account) is None
        assert (await reader.count_by_status())["unpaid"] == 0

    assert await store.get(account) == invoice


async def test_abort_discards_pending_writes(store, account, invoice):
    async with store.begin_write() as txn:
        await txn.put(account, invoice)
        await txn.abort()

    assert await store.get(account) is None


async def test_leaving_without_commit_rolls_back(store, account, invoice):
    async with store.begin_write() as txn:
        await txn.put(account, invoice)

    assert await store.get(account) is None


async def test_error_inside_transaction_rolls_back(store, account, invoice):
    with pytest.raises(RuntimeError):
        async with store.begin_write() as txn:
            await txn.put(account, invoice)
            raise RuntimeError("caller went away")

    assert await store.get(account) is None


async def test_finished_transaction_cannot_be_reused(store, account, invoice):
    async with store.begin_write() as txn:
        await txn.put(account, invoice)
        await txn.commit()
        with pytest.raises(TransactionClosedError):
            await txn.commit()
        with pytest.raises(TransactionClosedError):
            await txn.put(account, invoice)


async def test_readers_never_see_uncommitted_writes(store, account, invoice):
    async with store.begin_write() as txn:
        await txn.put(account, invoice)
        async with store.begin_read() as reader:
            assert await reader.get(account) is None
        await txn.commit()

    assert await store.get(account) == invoice


async def test_writers_are_serialised(store, account, invoice):
    events = []
    first_holds_lock = asyncio.Event()

    async def first():
        async with store.begin_write() as txn:
            first_holds_lock.set()
            events.append("first:start")
            await asyncio.sleep(0.05)
            await txn.put(account, invoice)
            await txn.commit()
            events.append("first:end")

    async def second():
        await first_holds_lock.wait()
        async with store.begin_write() as txn:
            events.append("second:start")
            assert await txn.get(account) == invoice
            await txn.abort()

    await asyncio.gather(first(), second())

    assert events == ["first:start", "first:end", "second:start"]


async def test_paid_status_and_withdrawal_round_trip(store, account, invoice):
    paid = invoice.mark_paid(Decimal("1.6"))
    async with store.begin_write() as txn:
        await txn.put(account, paid)
        await txn.commit()

    stored = await store.get(account)
    assert stored.status == Paid(Decimal("1.6"))
    assert stored.paid_at is not None
    assert stored.withdrawal is None


async def test_count_by_status(store, deriver, recipient):
    async with store.begin_write() as txn:
        for index in range(3):
            order = f"count-{index}"
            invoice = Invoice(recipient=recipient, order=order, status=Unpaid(Decimal("1")))
            if index == 0:
                invoice = invoice.mark_paid(Decimal("1"))
            await txn.put(deriver.derive_deposit_account(recipient, order), invoice)
        await txn.commit()

    async with store.begin_read() as txn:
        assert await txn.count_by_status() == {"unpaid": 2, "paid": 1}


async def test_database_failure_surfaces_as_store_error(container, store, account):
    async with container.engine.begin() as conn:
        await conn.execute(text("DROP TABLE invoices"))

    with pytest.raises(StoreError):
        await store.get(account)

    with pytest.raises(StoreError):
        async with store.begin_read() as txn:
            await txn.count_by_status()
