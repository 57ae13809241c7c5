"""ORM 어댑터 모듈"""
from __future__ import annotations

import io
import logging
import re
from typing import Any, Callable, Optional, Type, Union, cast

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session
from sqlalchemy.pool import Pool

from fastuow.config import FastUoW

SessionMaker = Callable[[], Session]
"""Session 팩토리 타입."""


def init_sessionmaker(
    config: Optional[FastUoW] = None,
    metadata: Optional[MetaData] = None,
    drop_all: bool = False,
) -> SessionMaker:
    """설정 정보로 엔진을 초기화하고 Session 팩토리를 만듭니다."""
    config = config or FastUoW()
    engine = init_engine(
        config.get_db_url(),
        meta=metadata,
        connect_args=config.get_db_connect_args(),
        poolclass=config.get_db_poolclass(),
        show_log=config.echo,
        isolation_level=config.isolation_level,
        drop_all=drop_all,
    )
    return cast(SessionMaker, sessionmaker(engine))


def init_engine(
    url: str,
    meta: Optional[MetaData] = None,
    connect_args: Optional[dict[str, Any]] = None,
    poolclass: Optional[Type[Pool]] = None,
    show_log: Union[bool, dict[str, Any]] = False,
    isolation_level: Optional[str] = None,
    drop_all: bool = False,
) -> Engine:
    """ORM Engine을 초기화 합니다.

    ``meta`` 가 주어지면 테이블을 생성합니다. ``show_log`` 가 ``True`` 이면
    생성된 DDL 만 출력하고 ``{"all": True}`` 이면 엔진 로그 전체를 출력합니다.
    """
    logger = logging.getLogger("sqlalchemy.engine.Engine")
    out = io.StringIO()
    handler = logging.StreamHandler(out)
    logger.addHandler(handler)

    kwargs: dict[str, Any] = {}
    if poolclass:
        kwargs["poolclass"] = poolclass
    if isolation_level:
        kwargs["isolation_level"] = isolation_level

    engine = create_engine(
        url,
        connect_args=connect_args or {},
        echo=bool(show_log),
        **kwargs,
    )

    if meta is not None:
        if drop_all:
            meta.drop_all(engine)
        meta.create_all(engine)

    logger.removeHandler(handler)

    if show_log:
        log_txt = out.getvalue()
        if show_log is True:
            print("".join(re.findall("CREATE.*?\n\n", log_txt, re.DOTALL | re.I)))
        elif isinstance(show_log, dict):
            if show_log.get("all"):
                print(log_txt)

    return engine
