"""UnitOfWork 패턴 모듈.

여러 레포지터리 작업을 하나의 트랜잭션으로 묶어 모두 커밋되거나 모두 롤백되도록
조율합니다. 레포지터리는 이름으로 등록된 팩토리를 통해 현재 트랜잭션에 묶인 채로
만들어집니다.

Example: ::

    uow = UnitOfWork(source)
    uow.register("orders", OrderRepository)

    def place_order(uow):
        orders = uow.get_repository(ctx, "orders")
        orders.add(order)

    uow.do(ctx, place_order)

주의:

    UoW 객체는 하나의 작업 흐름(예: 하나의 요청)에서만 사용해야 합니다.
    내부적으로 동기화하지 않으므로 여러 스레드에서 동시에 호출하면 안 됩니다.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional, TypeVar

from fastuow.core import (
    AbstractDataSource,
    AbstractTransaction,
    AbstractUnitOfWork,
    CommitFailed,
    Context,
    NoActiveTransaction,
    RepositoryFactory,
    RollbackFailed,
    TransactionAlreadyActive,
    TransactionStartFailed,
    UnknownRepository,
    background,
)
from fastuow.logging import get_logger

T = TypeVar("T")

logger = get_logger("fastuow.uow")


class UnitOfWork(AbstractUnitOfWork):
    """트랜잭션 하나를 여러 레포지터리가 공유하도록 조율하는 UoW 구현입니다.

    상태:
        - ``IDLE``: ``tx`` 가 ``None``.
        - ``TX_ACTIVE``: ``tx`` 가 설정됨.
        - ``TX_UNCERTAIN``: 롤백이 실패해서 ``tx`` 가 그대로 남아있는 상태.
          결과를 알 수 없는 트랜잭션은 버리지 않고 호출자의 처리를 기다립니다.
    """

    def __init__(
        self,
        source: AbstractDataSource,
        repositories: Optional[dict[str, RepositoryFactory]] = None,
    ) -> None:
        self.source = source
        self.repositories = dict(repositories or {})
        self._tx: Optional[AbstractTransaction] = None

    def __repr__(self):
        return f"UnitOfWork[{list(self.repositories)}, active={self.is_active}]"

    @classmethod
    def from_config(cls, config=None, **kwargs: Any) -> UnitOfWork:
        """설정 정보로 SqlAlchemy 기반의 UoW 를 만듭니다."""
        from fastuow.datasource import SqlAlchemyDataSource  # noqa
        from fastuow.orm import init_sessionmaker  # noqa

        return cls(SqlAlchemyDataSource(init_sessionmaker(config)), **kwargs)

    @property
    def tx(self) -> Optional[AbstractTransaction]:
        """현재 진행 중인 트랜잭션 핸들."""
        return self._tx

    @property
    def is_active(self) -> bool:
        return self._tx is not None

    def register(self, name: str, factory: RepositoryFactory) -> None:
        """``name`` 으로 레포지터리 팩토리를 등록합니다.

        같은 이름이 있으면 덮어씁니다. 트랜잭션 진행 중에도 등록할 수 있으며
        이후의 :meth:`get_repository` 호출부터 적용됩니다.
        """
        self.repositories[name] = factory

    def unregister(self, name: str) -> None:
        """등록된 팩토리를 삭제합니다. 없는 이름이면 아무 일도 하지 않습니다."""
        self.repositories.pop(name, None)

    def get_repository(self, ctx: Optional[Context], name: str) -> Any:
        """현재 트랜잭션에 묶인 레포지터리를 만들어 리턴합니다.

        진행 중인 트랜잭션이 없으면 새로 시작합니다. 이 경우 트랜잭션을
        끝내는 것(:meth:`commit_or_rollback`, :meth:`rollback`)은 호출자의
        몫입니다. 팩토리는 호출할 때마다 새로 실행됩니다.

        Raises:
            UnknownRepository: 등록되지 않은 이름일 때.
            TransactionStartFailed: 트랜잭션을 시작하지 못했을 때.
        """
        factory = self.repositories.get(name)
        if factory is None:
            raise UnknownRepository(name)

        if self._tx is None:
            self._begin(ctx)

        return factory(self._tx)

    def do(self, ctx: Optional[Context], fn: Callable[[UnitOfWork], T]) -> T:
        """``fn`` 을 하나의 트랜잭션 안에서 실행합니다.

        ``fn`` 이 성공하면 커밋하고 ``fn`` 의 리턴값을 돌려줍니다. ``fn`` 이
        에러를 발생시키면 롤백한 뒤 그 에러를 그대로 다시 발생시킵니다.
        롤백까지 실패하면 두 에러를 모두 담은 :class:`CombinedFailure` 를
        발생시킵니다.
        """
        with self.transaction(ctx):
            return fn(self)

    @contextmanager
    def transaction(
        self, ctx: Optional[Context] = None
    ) -> Generator[UnitOfWork, None, None]:
        """:meth:`do` 와 같은 규칙으로 동작하는 ``with`` 블록 버전입니다.

        Example: ::

            with uow.transaction(ctx):
                uow.get_repository(ctx, "orders").add(order)
        """
        if self._tx is not None:
            raise TransactionAlreadyActive()

        self._begin(ctx)

        try:
            yield self
        except BaseException as error:
            if self._tx is not None:
                self._recover(error)
            raise

        # 블록 안에서 이미 트랜잭션을 끝낸 경우는 커밋하지 않습니다.
        if self._tx is not None:
            self.commit_or_rollback()

    def commit_or_rollback(self) -> None:
        """트랜잭션을 커밋합니다.

        커밋이 실패하면 한 번 롤백을 시도합니다. 롤백이 성공하면
        :class:`CommitFailed` 를, 롤백도 실패하면 :class:`CombinedFailure` 를
        발생시킵니다.
        """
        if self._tx is None:
            raise NoActiveTransaction("no transaction to commit")

        try:
            self._tx.commit()
        except Exception as e:
            error = CommitFailed(e)
            logger.debug("commit failed: %s", e)
            self._recover(error)
            raise error from e

        logger.debug("transaction committed: %r", self._tx)
        self._tx = None

    def rollback(self) -> None:
        """트랜잭션을 롤백합니다.

        롤백이 실패하면 트랜잭션의 최종 상태를 알 수 없으므로 핸들을 지우지
        않고 :class:`RollbackFailed` 를 발생시킵니다.
        """
        if self._tx is None:
            raise NoActiveTransaction("no transactions to rollback")

        try:
            self._tx.rollback()
        except Exception as e:
            logger.warning("rollback failed, keeping transaction %r: %s", self._tx, e)
            raise RollbackFailed(e) from e

        logger.debug("transaction rolled back: %r", self._tx)
        self._tx = None

    def _begin(self, ctx: Optional[Context]) -> None:
        try:
            tx = self.source.begin(ctx or background())
        except Exception as e:
            raise TransactionStartFailed(e) from e

        logger.debug("transaction started: %r", tx)
        self._tx = tx
