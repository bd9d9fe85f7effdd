from sqlalchemy import Column, String, Uuid
from pbank.db_manager import Base

class User_db(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True)
    username = Column(String(255), nullable=False, unique=True)

    hashed_password = Column(String(255), nullable=False)
