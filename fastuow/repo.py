"""레포지터리 패턴 구현."""
from __future__ import annotations

from typing import Any, Callable, List, Optional, Type, TypeVar

from sqlalchemy import select

from fastuow.core import AbstractRepository, Entity
from fastuow.datasource import SqlAlchemyTransaction

E = TypeVar("E", bound=Entity)


class SqlAlchemyRepository(AbstractRepository[E]):
    """트랜잭션의 ``Session`` 을 저장소로 하는 :class:`AbstractRepository` 구현입니다."""

    def __init__(self, entity_class: Type[E], tx: SqlAlchemyTransaction):
        """임의의 엔티티 E 를 받아 E 에 대한 Repository 를 초기화합니다."""
        super().__init__(tx)
        self.entity_class = entity_class
        self.session = tx.session

    def __repr__(self) -> str:
        return f"SqlAlchemyRepository[{self.entity_class}]"

    @classmethod
    def factory(
        cls, entity_class: Type[E]
    ) -> Callable[[SqlAlchemyTransaction], SqlAlchemyRepository[E]]:
        """:meth:`UnitOfWork.register` 에 넘길 수 있는 팩토리를 만듭니다."""

        def make_repository(tx: SqlAlchemyTransaction) -> SqlAlchemyRepository[E]:
            return cls(entity_class, tx)

        return make_repository

    def _add(self, item: E) -> None:
        self.session.add(item)

    def _get(self, id: Any = "", **kwargs: Any) -> Optional[E]:
        if id:
            return self.session.get(self.entity_class, id)

        filter_by = {k: v for k, v in kwargs.items() if v is not None}
        stmt = select(self.entity_class).filter_by(**filter_by)
        return self.session.scalars(stmt).first()

    def delete(self, item: E) -> None:
        self.session.delete(item)

    def all(self) -> List[E]:
        return list(self.session.scalars(select(self.entity_class)))
