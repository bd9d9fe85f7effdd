from sqlalchemy import Column, String, Numeric, Uuid, CheckConstraint
from pbank.db_manager import Base

class Stock_db(Base):
    __tablename__ = "stocks"
    id = Column(Uuid, primary_key=True)
    symbol = Column(String(10), nullable=False, unique=True)
    price = Column(Numeric(12, 4), nullable=False)

    __table_args__ = (
        CheckConstraint("price > 0", name="stock_price_positive"),
    )
