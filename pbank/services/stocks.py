import logging
from decimal import Decimal, InvalidOperation
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pbank.errors import InvalidPrice, StockNotFound, StorageError, SymbolTaken
from pbank.models_DB.stocks import Stock_db

logger = logging.getLogger(__name__)


class StockLookup:
    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def get_by_symbol(self, symbol: str) -> Stock_db:
        """Exact, case-sensitive match on the symbol."""
        try:
            async with self._session_factory() as session:
                stock = await session.scalar(
                    select(Stock_db).where(Stock_db.symbol == symbol)
                )
        except SQLAlchemyError as exc:
            raise StorageError("Stock lookup failed") from exc

        if stock is None:
            raise StockNotFound(f"No stock with symbol {symbol!r}")
        return stock

    async def get(self, stock_id: UUID, session: AsyncSession | None = None) -> Stock_db:
        try:
            if session is not None:
                stock = await session.get(Stock_db, stock_id)
            else:
                async with self._session_factory() as own_session:
                    stock = await own_session.get(Stock_db, stock_id)
        except SQLAlchemyError as exc:
            raise StorageError("Stock lookup failed") from exc

        if stock is None:
            raise StockNotFound(f"No stock with id {stock_id}")
        return stock

    async def create(self, symbol: str, price) -> Stock_db:
        try:
            price = Decimal(str(price))
        except InvalidOperation as exc:
            raise InvalidPrice(f"Invalid price {price!r}") from exc
        if not price.is_finite() or price <= 0:
            raise InvalidPrice(f"Invalid price {price}")

        stock = Stock_db(id=uuid4(), symbol=symbol, price=price)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(stock)
        except IntegrityError as exc:
            raise SymbolTaken(f"Symbol {symbol!r} already exists") from exc
        except SQLAlchemyError as exc:
            logger.exception("Failed to create stock")
            raise StorageError("Failed to create stock") from exc

        logger.info("Created stock %s @ %s (%s)", symbol, price, stock.id)
        return stock
