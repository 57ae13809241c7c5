from sqlalchemy import Column, ForeignKey, Integer, String, Table, text
from sqlalchemy.orm import registry

from fastuow.orm import SessionMaker
from tests import Order

mapper_registry = registry()
metadata = mapper_registry.metadata

orders = Table(
    "orders",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("sku", String(255), nullable=False),
    Column("qty", Integer, nullable=False),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", ForeignKey("orders.id")),
    Column("amount", Integer, nullable=False),
)


class Payment:
    def __init__(self, order_id: str, amount: int):
        self.order_id = order_id
        self.amount = amount


mapper_registry.map_imperatively(Order, orders)
mapper_registry.map_imperatively(Payment, payments)


def count_rows(get_session: SessionMaker, table: str) -> int:
    session = get_session()
    try:
        return session.execute(text(f"SELECT count(*) FROM {table}")).scalar()
    finally:
        session.close()
