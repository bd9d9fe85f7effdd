from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import async_sessionmaker

from pbank.config import Settings
from .credentials import CredentialStore
from .ledger import PositionLedger
from .stocks import StockLookup
from .tokens import TokenIssuer
from .transaction_log import TransactionLog


@dataclass
class Services:
    credentials: CredentialStore
    tokens: TokenIssuer
    stocks: StockLookup
    transactions: TransactionLog
    ledger: PositionLedger


def build_services(settings: Settings, session_factory: async_sessionmaker) -> Services:
    stocks = StockLookup(session_factory)
    transactions = TransactionLog(session_factory)
    return Services(
        credentials=CredentialStore(session_factory, rounds=settings.BCRYPT_ROUNDS),
        tokens=TokenIssuer(
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        ),
        stocks=stocks,
        transactions=transactions,
        ledger=PositionLedger(session_factory, transactions, stocks),
    )


__all__ = [
    'Services',
    'build_services',
    'CredentialStore',
    'PositionLedger',
    'StockLookup',
    'TokenIssuer',
    'TransactionLog'
]
