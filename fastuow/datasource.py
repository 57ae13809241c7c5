"""SqlAlchemy 를 이용한 트랜잭션 데이터 소스."""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from fastuow.core import Context
from fastuow.logging import get_logger
from fastuow.orm import SessionMaker

logger = get_logger("fastuow.datasource")


class SqlAlchemyTransaction:
    """``Session`` 하나의 트랜잭션을 감싼 트랜잭션 핸들입니다.

    레포지터리 팩토리는 ``session`` 속성을 통해 같은 트랜잭션에서 작업합니다.
    커밋이나 롤백이 성공하면 세션을 close 합니다.
    """

    def __init__(self, session: Session, ctx: Optional[Context] = None):
        self.session = session
        self.ctx = ctx

    def __repr__(self) -> str:
        return f"SqlAlchemyTransaction[{id(self.session):#x}]"

    def commit(self) -> None:
        if self.ctx:
            self.ctx.raise_if_cancelled()
        self.session.commit()
        self.session.close()

    def rollback(self) -> None:
        self.session.rollback()
        self.session.close()


class SqlAlchemyDataSource:
    """``sessionmaker`` 로 세션을 만들어 트랜잭션을 시작하는 데이터 소스입니다."""

    def __init__(self, get_session: SessionMaker):
        self.get_session = get_session

    def __repr__(self) -> str:
        return f"SqlAlchemyDataSource[{self.get_session}]"

    def begin(self, ctx: Context) -> SqlAlchemyTransaction:
        """컨텍스트를 확인한 뒤 새 세션에서 트랜잭션을 시작합니다."""
        ctx.raise_if_cancelled()
        session = self.get_session()
        try:
            session.begin()
            # DB 커넥션까지 얻어야 트랜잭션이 시작된 것으로 봅니다.
            session.connection()
        except Exception:
            session.close()
            raise

        tx = SqlAlchemyTransaction(session, ctx)
        logger.debug("session transaction begun: %r", tx)
        return tx
