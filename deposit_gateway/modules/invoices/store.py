"""Transactional invoice store.

Reads run on their own session, see one snapshot for their whole lifetime
and never wait for the writer. Writes are serialised through a single
``asyncio.Lock`` held for the whole life of the write transaction, so every
mutation (create, modify, mark paid, withdrawal markers) is totally ordered.
A write transaction that is left without ``commit()`` (error, cancellation,
explicit ``abort()``) is rolled back.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from deposit_gateway.core.crypto import Account
from deposit_gateway.core.exceptions import InvalidParameterError
from deposit_gateway.infrastructure.database.repositories.invoice_repository import SqlInvoiceRepository

from .exceptions import StoreError, TransactionClosedError
from .models import Invoice

logger = logging.getLogger(__name__)

_CORRUPTION_ERRORS = (ArithmeticError, InvalidParameterError)


class ReadTransaction:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = SqlInvoiceRepository(session)

    async def get(self, account: Account) -> Invoice | None:
        try:
            return await self._repository.get(account)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to read invoice {account}") from exc
        except _CORRUPTION_ERRORS as exc:
            raise StoreError(f"stored invoice {account} is corrupted") from exc

    async def count_by_status(self) -> dict[str, int]:
        try:
            return await self._repository.count_by_status()
        except SQLAlchemyError as exc:
            raise StoreError("failed to count invoices") from exc


class WriteTransaction(ReadTransaction):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def get(self, account: Account) -> Invoice | None:
        self._ensure_open()
        return await super().get(account)

    async def put(self, account: Account, invoice: Invoice) -> None:
        self._ensure_open()
        try:
            await self._repository.save(account, invoice)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to stage invoice {account}") from exc

    async def commit(self) -> None:
        """Persist staged writes; returns once the database has committed."""
        self._ensure_open()
        self._closed = True
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._rollback()
            raise StoreError("failed to commit invoice transaction") from exc

    async def abort(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._rollback()

    async def _rollback(self) -> None:
        try:
            await self._session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback of invoice transaction failed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransactionClosedError("write transaction is already finished")


class InvoiceStore:
    """Account -> Invoice mapping with snapshot reads and a single writer."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._write_lock = asyncio.Lock()

    @asynccontextmanager
    async def begin_read(self) -> AsyncIterator[ReadTransaction]:
        async with self._session_factory() as session:
            yield ReadTransaction(session)

    @asynccontextmanager
    async def begin_write(self) -> AsyncIterator[WriteTransaction]:
        async with self._write_lock:
            async with self._session_factory() as session:
                txn = WriteTransaction(session)
                try:
                    yield txn
                finally:
                    if not txn.closed:
                        await txn.abort()

    async def get(self, account: Account) -> Invoice | None:
        async with self.begin_read() as txn:
            return await txn.get(account)


__all__ = ["InvoiceStore", "ReadTransaction", "WriteTransaction"]
