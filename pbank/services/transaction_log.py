import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pbank.errors import StorageError
from pbank.models_DB.transactions import Transaction_db

logger = logging.getLogger(__name__)


class TransactionLog:
    """Append-only history of buy/sell events."""

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def append(self, session: AsyncSession, transaction: Transaction_db) -> Transaction_db:
        """
        Insert within the caller's transaction.

        The row becomes visible to other readers only when the caller commits.
        """
        try:
            session.add(transaction)
            await session.flush()
        except SQLAlchemyError as exc:
            logger.error("Failed to append transaction %s: %s", transaction.id, exc)
            raise StorageError("Failed to append transaction") from exc
        return transaction

    async def list(self, user_id: UUID) -> List[Transaction_db]:
        history_query = (
            select(Transaction_db)
            .where(Transaction_db.user_id == user_id)
            .order_by(Transaction_db.created_at.asc())
        )
        try:
            async with self._session_factory() as session:
                return list((await session.scalars(history_query)).all())
        except SQLAlchemyError as exc:
            logger.error("Failed to list transactions for user %s: %s", user_id, exc)
            raise StorageError("Failed to list transactions") from exc
