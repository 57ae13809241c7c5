import uuid


def random_suffix() -> str:
    """랜덤 ID뒤에 붙일 UUID 기반의 6자리 임의의 ID를 생성합니다."""
    return uuid.uuid4().hex[:6]


def random_orderid(name: str = "") -> str:
    """임의의 order_id 를 생성합니다."""
    return f"order-{name}-{random_suffix()}"


class Order:
    """테스트용 주문 엔티티."""

    def __init__(self, id: str, sku: str, qty: int):
        self.id = id
        self.sku = sku
        self.qty = qty

    def __repr__(self) -> str:
        return f"<Order {self.id}>"
