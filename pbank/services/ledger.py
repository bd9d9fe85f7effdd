"""
Share-count ledger.

Holdings are never stored: the net quantity for a (user, stock) pair is the
sum of its buy quantities minus the sum of its sell quantities. A sell is only
appended when the resulting holding stays non-negative. The check and the
append run inside one unit of work:

* an in-process ``asyncio.Lock`` per (user, stock) pair, which serialises
  concurrent requests handled by the same worker;
* a single database transaction that first locks the acting user's row
  (``SELECT ... FOR UPDATE``), which serialises workers sharing a PostgreSQL
  database. SQLite ignores ``FOR UPDATE``; there the in-process lock is the
  only guard, which is enough for a single-process deployment.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List, Tuple
from uuid import UUID, uuid4

from dateutil.tz import tzutc
from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pbank.errors import InsufficientHoldings, InvalidQuantity, PbankError, StorageError
from pbank.models import TransactionType
from pbank.models_DB.stocks import Stock_db
from pbank.models_DB.transactions import Transaction_db
from pbank.models_DB.users import User_db
from pbank.services.stocks import StockLookup
from pbank.services.transaction_log import TransactionLog

logger = logging.getLogger(__name__)

_signed_quantity = case(
    (Transaction_db.transaction_type == TransactionType.BUY.value, Transaction_db.quantity),
    else_=-Transaction_db.quantity,
)


# transactions.quantity is a 32-bit INTEGER column
MAX_QUANTITY = 2**31 - 1


def _validate_quantity(quantity) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(f"Invalid quantity {quantity!r}")
    if quantity <= 0 or quantity > MAX_QUANTITY:
        raise InvalidQuantity(f"Invalid quantity {quantity!r}")
    return quantity


class PositionLedger:
    def __init__(
            self,
            session_factory: async_sessionmaker,
            transaction_log: TransactionLog,
            stocks: StockLookup,
    ):
        self._session_factory = session_factory
        self._log = transaction_log
        self._stocks = stocks
        # (user_id, stock_id) -> [lock, number of tasks holding or waiting]
        self._locks = {}

    @asynccontextmanager
    async def _pair_lock(self, user_id: UUID, stock_id: UUID):
        key = (user_id, stock_id)
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @asynccontextmanager
    async def unit_of_work(self, user_id: UUID, stock_id: UUID) -> AsyncIterator[AsyncSession]:
        """
        Yield a session inside one transaction scoped to the (user, stock) pair.

        Commits when the block exits normally; any exception rolls back.
        """
        async with self._pair_lock(user_id, stock_id):
            try:
                async with self._session_factory() as session:
                    async with session.begin():
                        await session.execute(
                            select(User_db.id).where(User_db.id == user_id).with_for_update()
                        )
                        yield session
            except PbankError:
                raise
            except SQLAlchemyError as exc:
                logger.error("Unit of work for user %s, stock %s failed: %s", user_id, stock_id, exc)
                raise StorageError("Ledger transaction failed") from exc

    async def _holding(self, session: AsyncSession, user_id: UUID, stock_id: UUID) -> int:
        total = await session.scalar(
            select(func.coalesce(func.sum(_signed_quantity), 0)).where(
                Transaction_db.user_id == user_id,
                Transaction_db.stock_id == stock_id,
            )
        )
        return int(total)

    async def buy(self, user_id: UUID, stock_id: UUID, quantity: int) -> Transaction_db:
        quantity = _validate_quantity(quantity)
        async with self.unit_of_work(user_id, stock_id) as session:
            await self._stocks.get(stock_id, session=session)
            transaction = await self._log.append(session, self._new_transaction(
                user_id, stock_id, quantity, TransactionType.BUY
            ))

        logger.info("User %s bought %d of stock %s", user_id, quantity, stock_id)
        return transaction

    async def sell(self, user_id: UUID, stock_id: UUID, quantity: int) -> Transaction_db:
        quantity = _validate_quantity(quantity)
        async with self.unit_of_work(user_id, stock_id) as session:
            await self._stocks.get(stock_id, session=session)
            available = await self._holding(session, user_id, stock_id)
            if quantity > available:
                logger.warning(
                    "Rejected sell of %d of stock %s for user %s: holding %d",
                    quantity, stock_id, user_id, available,
                )
                raise InsufficientHoldings(requested=quantity, available=available)

            transaction = await self._log.append(session, self._new_transaction(
                user_id, stock_id, quantity, TransactionType.SELL
            ))

        logger.info("User %s sold %d of stock %s", user_id, quantity, stock_id)
        return transaction

    async def get_holding(self, user_id: UUID, stock_id: UUID) -> int:
        try:
            async with self._session_factory() as session:
                return await self._holding(session, user_id, stock_id)
        except SQLAlchemyError as exc:
            raise StorageError("Holding lookup failed") from exc

    async def holdings(self, user_id: UUID) -> List[Tuple[Stock_db, int]]:
        """Every stock the user currently holds, with its net quantity."""
        net = func.sum(_signed_quantity).label("net")
        query = (
            select(Stock_db, net)
            .join(Transaction_db, Transaction_db.stock_id == Stock_db.id)
            .where(Transaction_db.user_id == user_id)
            .group_by(Stock_db.id)
            .having(net > 0)
            .order_by(Stock_db.symbol)
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(query)).all()
        except SQLAlchemyError as exc:
            raise StorageError("Holdings lookup failed") from exc
        return [(stock, int(quantity)) for stock, quantity in rows]

    @staticmethod
    def _new_transaction(user_id, stock_id, quantity, transaction_type) -> Transaction_db:
        return Transaction_db(
            id=uuid4(),
            user_id=user_id,
            stock_id=stock_id,
            quantity=quantity,
            transaction_type=transaction_type.value,
            created_at=datetime.now(tzutc()),
        )
