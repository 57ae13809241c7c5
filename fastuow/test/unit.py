"""Test 헬퍼를 제공하는 모듈.

- FakeDataSource 나 FakeTransaction, FakeRepository 를 기본 제공합니다.
"""
from __future__ import annotations

from typing import Any, Optional, TypeVar

from fastuow.core import AbstractRepository, Context, Entity

E = TypeVar("E", bound=Entity)


class FakeTransaction:
    """단위 테스트를 위한 Fake 트랜잭션.

    Params:
        - commit_error: 주어지면 ``commit()`` 호출시 이 에러를 발생시킵니다.
        - rollback_error: 주어지면 ``rollback()`` 호출시 이 에러를 발생시킵니다.
    """

    def __init__(
        self,
        source: FakeDataSource,
        commit_error: Optional[Exception] = None,
        rollback_error: Optional[Exception] = None,
    ):
        self.source = source
        self.commit_error = commit_error
        self.rollback_error = rollback_error
        self.operations: list[Any] = []
        self.committed = False
        self.rolled_back = False
        self.rollback_attempts = 0

    def __repr__(self) -> str:
        return f"FakeTransaction[{len(self.operations)} ops]"

    def commit(self) -> None:
        if self.commit_error:
            raise self.commit_error
        self.committed = True
        self.source.committed.append(self)

    def rollback(self) -> None:
        self.rollback_attempts += 1
        if self.rollback_error:
            raise self.rollback_error
        self.rolled_back = True
        self.source.rolled_back.append(self)


class FakeDataSource:
    """단위 테스트를 위한 Fake 데이터 소스.

    시작/커밋/롤백된 트랜잭션을 기록합니다. ``begin_error`` 가 주어지면
    트랜잭션 시작을 거부합니다.
    """

    def __init__(
        self,
        begin_error: Optional[Exception] = None,
        commit_error: Optional[Exception] = None,
        rollback_error: Optional[Exception] = None,
    ):
        self.begin_error = begin_error
        self.commit_error = commit_error
        self.rollback_error = rollback_error
        self.started = list[FakeTransaction]()
        self.committed = list[FakeTransaction]()
        self.rolled_back = list[FakeTransaction]()

    def begin(self, ctx: Context) -> FakeTransaction:
        ctx.raise_if_cancelled()
        if self.begin_error:
            raise self.begin_error

        tx = FakeTransaction(self, self.commit_error, self.rollback_error)
        self.started.append(tx)
        return tx


class FakeRepository(AbstractRepository[E]):
    """단위 테스트를 위한 Fake 레포지터리.

    모든 변경은 트랜잭션의 ``operations`` 에 기록됩니다.
    """

    def __init__(self, tx: FakeTransaction, id_field: str = "id"):
        super().__init__(tx)
        self.tx: FakeTransaction = tx
        self.id_field = id_field
        self._items = dict[Any, E]()

    def _add(self, item: E) -> None:
        self._items[getattr(item, self.id_field)] = item
        self.tx.operations.append(("add", item))

    def _get(self, id: Any = "", **kwargs: Any) -> Optional[E]:
        if not kwargs:
            return self._items.get(id)

        check = lambda it: all(getattr(it, k) == v for k, v in kwargs.items())
        return next((it for it in self._items.values() if check(it)), None)

    def delete(self, item: E) -> None:
        self._items.pop(getattr(item, self.id_field), None)
        self.tx.operations.append(("delete", item))

    def all(self) -> list[E]:
        return list(self._items.values())
