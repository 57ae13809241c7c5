from __future__ import annotations

import abc
from contextlib import AbstractContextManager
from typing import (
    Any,
    Callable,
    Generic,
    List,
    Optional,
    Protocol,
    Type,
    TypeVar,
)

from fastuow.core.context import Context
from fastuow.core.errors import CombinedFailure, RollbackFailed
from fastuow.logging import get_logger

logger = get_logger("fastuow.core")


class Entity(Protocol):
    """Entity 프로토콜 명세."""

    id: Any  # PK 컬럼으로 id 라는 필드를 제공해야 합니다.


E = TypeVar("E", bound=Entity)
T = TypeVar("T")
R = TypeVar("R")


class AbstractTransaction(Protocol):
    """데이터 소스에서 시작된, 아직 커밋되지 않은 트랜잭션 핸들."""

    def commit(self) -> None:
        """트랜잭션을 커밋합니다. 실패하면 에러를 발생시킵니다."""
        ...

    def rollback(self) -> None:
        """트랜잭션을 롤백합니다. 실패하면 에러를 발생시킵니다."""
        ...


class AbstractDataSource(Protocol):
    """트랜잭션을 지원하는 데이터 소스."""

    def begin(self, ctx: Context) -> AbstractTransaction:
        """``ctx`` 범위의 트랜잭션을 시작합니다.

        컨텍스트가 취소되었거나 자원이 부족하면 에러를 발생시킬 수 있습니다.
        """
        ...


RepositoryFactory = Callable[[Any], R]
"""트랜잭션 핸들을 받아 레포지터리 객체를 만드는 팩토리 타입."""


class AbstractRepository(Generic[E], abc.ABC):
    """트랜잭션에 묶인 Repository 패턴의 추상 인터페이스 입니다."""

    entity_class: Type[E]

    def __init__(self, tx: Optional[AbstractTransaction] = None):
        self.tx = tx
        self.seen = set[E]()

    def add(self, item: E) -> None:
        """레포지터리에 :class:`E` 객체를 추가합니다."""
        self._add(item)
        self.seen.add(item)

    @abc.abstractmethod
    def _add(self, item: E) -> None:
        raise NotImplementedError

    def get(self, id: Any = "", **kwargs: Any) -> Optional[E]:
        """주어진 id 나 필드 값에 해당하는 :class:`E` 객체를 조회합니다.

        객체를 찾았을 경우 `seen` 컬렉션에 추가합니다.
        못 찾을 경우 ``None`` 을 리턴합니다.
        """
        item = self._get(id, **kwargs)
        if item:
            self.seen.add(item)

        return item

    @abc.abstractmethod
    def _get(self, id: Any = "", **kwargs: Any) -> Optional[E]:
        raise NotImplementedError

    @abc.abstractmethod
    def all(self) -> List[E]:
        """모든 엔티티 리스트를 조회합니다."""
        raise NotImplementedError

    @abc.abstractmethod
    def delete(self, item: E) -> None:
        """레포지터리에서 :class:`E` 객체를 삭제합니다."""
        raise NotImplementedError


class AbstractUnitOfWork(AbstractContextManager["AbstractUnitOfWork"]):
    """UnitOfWork 패턴의 추상 인터페이스입니다.

    UnitOfWork(UoW)는 여러 레포지터리 작업을 하나의 트랜잭션으로 묶어
    모두 커밋되거나 모두 롤백되도록 보장합니다.
    """

    repositories: dict[str, RepositoryFactory]

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, exc_type: Any, exc: Optional[BaseException], tb: Any) -> None:
        """``with`` 블록에서 빠져나갈 때 남아있는 트랜잭션을 롤백합니다.

        블록에서 발생한 에러가 있으면 :meth:`_recover` 와 같은 규칙을 따릅니다.
        """
        if not self.is_active:
            return

        if exc is None:
            self.rollback()
        else:
            self._recover(exc)

    def _recover(self, error: BaseException) -> None:
        """``error`` 에 대한 복구 롤백을 한 번 시도합니다.

        롤백이 실패하면 두 에러를 담은 :class:`CombinedFailure` 를 발생시킵니다.
        ``KeyboardInterrupt`` 처럼 ``Exception`` 이 아닌 에러는 바꾸지 않고
        롤백 실패만 기록합니다.
        """
        try:
            self.rollback()
        except RollbackFailed as rollback_error:
            if not isinstance(error, Exception):
                logger.error("rollback after %r failed: %s", error, rollback_error)
                return
            logger.error("rollback after error failed: %s", rollback_error)
            raise CombinedFailure(error, rollback_error) from error

    def __getitem__(self, name: str) -> Any:
        return self.get_repository(None, name)

    @property
    @abc.abstractmethod
    def is_active(self) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def register(self, name: str, factory: RepositoryFactory) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def unregister(self, name: str) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def get_repository(self, ctx: Optional[Context], name: str) -> Any:
        raise NotImplementedError

    @abc.abstractmethod
    def do(self, ctx: Optional[Context], fn: Callable[[Any], T]) -> T:
        raise NotImplementedError

    @abc.abstractmethod
    def commit_or_rollback(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError
