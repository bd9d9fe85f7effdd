from pydantic import BaseModel, ConfigDict
from datetime import datetime
from enum import Enum
from uuid import UUID

class Ok(BaseModel):
    status: bool = True

class ErrorBody(BaseModel):
    code: str
    detail: str

class LoginRequest(BaseModel):
    username: str
    password: str

class LoginResponse(BaseModel):
    token: str

class Stock(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    symbol: str
    price: float

class TransactionType(str, Enum):
    BUY = "buy"
    SELL = "sell"

class TransactionRequest(BaseModel):
    stock_id: UUID
    quantity: int

class Transaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    stock_id: UUID
    quantity: int
    transaction_type: TransactionType
    created_at: datetime

class Holding(BaseModel):
    stock_id: UUID
    symbol: str
    quantity: int
