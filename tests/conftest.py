import asyncio
from dataclasses import dataclass
from decimal import Decimal

import pytest

from deposit_gateway.core.config import ChainSettings, DatabaseSettings, PaymentSettings, Settings
from deposit_gateway.core.container import ApplicationContainer
from deposit_gateway.core.crypto import Account, AddressDeriver, Signer, parse_account
from deposit_gateway.modules.chain.client import ChainClientError

MASTER_SEED = "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
RECIPIENT_HEX = "d43593c715fdd31c61141abd04a99fd6822c8558854ccde39a5684e7a56da27d"


@dataclass
class Transfer:
    source: Account
    destination: Account
    amount: Decimal
    message: bytes
    signature: bytes


class FakeChain:
    """In-memory chain: balances per account, records submitted transfers."""

    def __init__(self) -> None:
        self.connected = True
        self.fail = False
        self.delay = 0.0
        self.reject_transfers = False
        self.transfer_delay = 0.0
        self.balances: dict[str, Decimal] = {}
        self.transfers: list[Transfer] = []

    def fund(self, account: Account, amount: Decimal) -> None:
        self.balances[str(account)] = self.balances.get(str(account), Decimal("0")) + amount

    async def is_connected(self) -> bool:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.connected

    async def balance(self, account: Account) -> Decimal:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ChainClientError("node unavailable")
        return self.balances.get(str(account), Decimal("0"))

    async def transfer_all(self, *, source: Account, destination: Account, signer: Signer) -> str:
        if self.fail or self.reject_transfers:
            raise ChainClientError("node unavailable")
        amount = self.balances.get(str(source), Decimal("0"))
        message = bytes(source) + bytes(destination) + str(amount).encode()
        self.transfers.append(Transfer(source, destination, amount, message, signer(message)))
        if self.transfer_delay:
            # Submitted, but the node has not settled it yet.
            await asyncio.sleep(self.transfer_delay)
        self.balances[str(source)] = Decimal("0")
        self.fund(destination, amount)
        return f"0x{len(self.transfers):064x}"


@pytest.fixture
def recipient() -> Account:
    return parse_account(RECIPIENT_HEX)


@pytest.fixture
def deriver() -> AddressDeriver:
    return AddressDeriver.from_hex(MASTER_SEED)


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}"),
        payment=PaymentSettings(
            recipient=RECIPIENT_HEX,
            master_seed=MASTER_SEED,
            minimum_amount=Decimal("0.07"),
            minimum_withdrawal=Decimal("0.01"),
            currencies=["DOT", "USDC"],
        ),
        chain=ChainSettings(rpc="wss://node.test", decimals=12, timeout=0.2),
    )


@pytest.fixture
async def container(settings, chain):
    container = ApplicationContainer.build(settings, chain=chain)
    await container.startup()
    try:
        yield container
    finally:
        await container.shutdown()


@pytest.fixture
def store(container):
    return container.store


@pytest.fixture
def orders(container):
    return container.orders


@pytest.fixture
def withdrawals(container):
    return container.withdrawals
