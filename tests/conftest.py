# pylint: disable=redefined-outer-name
"""pytest 에서 사용될 전역 Fixture들을 정의합니다."""
from __future__ import annotations

import pytest

from fastuow.config import FastUoW
from fastuow.core import Context
from fastuow.orm import SessionMaker, init_sessionmaker
from fastuow.test.unit import FakeDataSource, FakeRepository
from fastuow.uow import UnitOfWork
from tests.integration import metadata


@pytest.fixture
def ctx() -> Context:
    return Context()


@pytest.fixture
def source() -> FakeDataSource:
    return FakeDataSource()


@pytest.fixture
def uow(source: FakeDataSource) -> UnitOfWork:
    """``orders`` 레포지터리가 등록된 UoW 픽스처."""
    uow = UnitOfWork(source)
    uow.register("orders", FakeRepository)
    return uow


@pytest.fixture
def get_session() -> SessionMaker:
    """테이블이 생성된 메모리 SQLite DB 의 :class:`.Session` 팩토리를 리턴합니다.

    호출시마다 새로운 엔진을 만들기 때문에 테스트간 데이터가 공유되지 않습니다.
    """
    return init_sessionmaker(FastUoW(db_url="sqlite://"), metadata=metadata)
