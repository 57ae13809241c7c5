"""취소 가능한 실행 컨텍스트.

트랜잭션 시작/종료처럼 오래 걸릴 수 있는 작업을 외부에서 중단할 수 있도록
데이터 소스에 전달되는 컨텍스트입니다. UoW 자체는 타임아웃 정책을 가지지 않고
모든 타임아웃은 컨텍스트에 위임합니다.

Example: ::

    ctx = Context(timeout=3.0)
    uow.do(ctx, place_order)
"""
from __future__ import annotations

import threading
import time
from typing import Optional

from fastuow.core.errors import ContextCancelled, DeadlineExceeded


class Context:
    """취소 신호와 deadline 을 전달하는 컨텍스트.

    부모 컨텍스트가 취소되면 자식 컨텍스트도 취소된 것으로 간주합니다.
    """

    def __init__(
        self, timeout: Optional[float] = None, parent: Optional[Context] = None
    ):
        self.parent = parent
        self._cancelled = threading.Event()
        self._deadline: Optional[float] = None

        if timeout is not None:
            self._deadline = time.monotonic() + timeout

    def __repr__(self) -> str:
        return f"Context[cancelled={self.cancelled}, remaining={self.remaining()}]"

    @property
    def deadline(self) -> Optional[float]:
        """``time.monotonic()`` 기준의 deadline. 부모와 자신 중 빠른 값."""
        deadlines = [self._deadline]
        if self.parent:
            deadlines.append(self.parent.deadline)
        found = [it for it in deadlines if it is not None]
        return min(found) if found else None

    def remaining(self) -> Optional[float]:
        """deadline 까지 남은 시간(초). deadline 이 없으면 ``None``."""
        deadline = self.deadline
        if deadline is None:
            return None
        return max(0.0, deadline - time.monotonic())

    def cancel(self) -> None:
        self._cancelled.set()

    def _cancel_requested(self) -> bool:
        if self._cancelled.is_set():
            return True
        return bool(self.parent and self.parent._cancel_requested())

    @property
    def cancelled(self) -> bool:
        return self._cancel_requested() or self.remaining() == 0.0

    def raise_if_cancelled(self) -> None:
        """취소되었거나 deadline 이 지났으면 에러를 발생시킵니다."""
        if self._cancel_requested():
            raise ContextCancelled()
        if self.remaining() == 0.0:
            raise DeadlineExceeded()

    def with_timeout(self, timeout: float) -> Context:
        """이 컨텍스트를 부모로 하는 타임아웃 컨텍스트를 만듭니다."""
        return Context(timeout=timeout, parent=self)


def background() -> Context:
    """취소되지 않는 기본 컨텍스트를 리턴합니다."""
    return Context()
