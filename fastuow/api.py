"""FastAPI 연동 모듈.

요청마다 새로운 :class:`UnitOfWork` 를 주입하는 의존성을 제공합니다.

Example: ::

    get_uow = uow_dependency(source, {"orders": OrderRepository})

    @app.post("/orders")
    def place_order(order: OrderIn, uow: UnitOfWork = Depends(get_uow)):
        return uow.do(None, lambda uow: uow.get_repository(None, "orders").add(order))
"""
from typing import Any, Callable, Generator, Optional

from fastapi import Depends

from fastuow.core import AbstractDataSource, RepositoryFactory
from fastuow.logging import get_logger
from fastuow.uow import UnitOfWork

logger = get_logger("fastuow.api")

UowDependency = Callable[[], Generator[UnitOfWork, None, None]]


def uow_dependency(
    source: AbstractDataSource,
    repositories: Optional[dict[str, RepositoryFactory]] = None,
) -> UowDependency:
    """요청 단위 UoW 를 만드는 FastAPI 의존성 함수를 리턴합니다.

    요청이 끝났는데 트랜잭션이 남아 있으면(:meth:`UnitOfWork.get_repository`
    로 시작만 하고 끝내지 않은 경우) 롤백합니다. 요청 처리 중 발생한 에러와
    롤백 에러가 함께 발생하면 :class:`CombinedFailure` 가 됩니다.
    """

    def get_uow() -> Generator[UnitOfWork, None, None]:
        uow = UnitOfWork(source, repositories)
        with uow:
            yield uow
            if uow.is_active:
                logger.warning("request left an open transaction, rolling back")

    return get_uow


def depends_uow(
    source: AbstractDataSource,
    repositories: Optional[dict[str, RepositoryFactory]] = None,
) -> Any:
    """:func:`uow_dependency` 를 ``Depends(...)`` 로 감싸서 리턴합니다.

    Example: ::

        OrdersUoW = depends_uow(source, {"orders": OrderRepository})

        @app.get("/orders")
        def list_orders(uow: UnitOfWork = OrdersUoW):
            ...
    """
    return Depends(uow_dependency(source, repositories))
