from sqlalchemy import Column, DateTime, Integer, ForeignKey, Uuid, CheckConstraint, Index
from sqlalchemy.sql import func
from pbank.db_manager import Base
from pbank.models_DB.enums import transaction_type_enum

class Transaction_db(Base):
    __tablename__ = "transactions"
    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    stock_id = Column(Uuid, ForeignKey("stocks.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    transaction_type = Column(transaction_type_enum, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="transaction_quantity_positive"),
        Index("ix_transactions_user_stock", "user_id", "stock_id"),
        Index("ix_transactions_user_created", "user_id", "created_at"),
    )
