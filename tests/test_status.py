from decimal import Decimal

import pytest
from sqlalchemy import text

from deposit_gateway import __version__
from deposit_gateway.core.exceptions import FeatureNotImplementedError


async def test_status_counts_reflect_current_state(container, orders, recipient):
    status = await container.status.server_status()
    assert (status.pending_count, status.paid_count) == (0, 0)

    created = await orders.create_or_get_order(recipient, "inv-1", Decimal("1"))
    await orders.create_or_get_order(recipient, "inv-2", Decimal("1"))
    await orders.mark_paid(created.account, Decimal("1"))

    status = await container.status.server_status()
    assert status.pending_count == 1
    assert status.paid_count == 1
    assert status.store_reachable
    assert status.chain_connected
    assert status.version == __version__
    assert status.recipient == str(recipient)
    assert status.supported_currencies == ("DOT", "USDC")
    assert status.rpc == "wss://node.test"
    assert status.decimals == 12


async def test_chain_flag_follows_client(container, chain):
    chain.connected = False
    assert not (await container.status.server_status()).chain_connected

    chain.connected = True
    chain.delay = 1.0
    assert not (await container.status.server_status()).chain_connected


async def test_store_failure_is_reported_not_raised(container):
    async with container.engine.begin() as conn:
        await conn.execute(text("DROP TABLE invoices"))

    status = await container.status.server_status()

    assert not status.store_reachable
    assert status.pending_count is None
    assert status.paid_count is None


@pytest.mark.parametrize("operation", ["health", "audit"])
async def test_placeholders_report_not_implemented(container, operation):
    with pytest.raises(FeatureNotImplementedError):
        await getattr(container.status, operation)()
