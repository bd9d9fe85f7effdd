from sqlalchemy import Enum

transaction_type_enum = Enum(
    "buy", "sell",
    name="transaction_type",
    native_enum=False,
    create_constraint=True,
)
