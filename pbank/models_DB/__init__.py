from .users import User_db as User
from .stocks import Stock_db as Stock
from .transactions import Transaction_db as Transaction

__all__ = [
    'User',
    'Stock',
    'Transaction'
]
