"""FastUoW 에러 정의."""
from __future__ import annotations

from typing import Optional


class FastUoWError(Exception):
    """``FastUoW`` 와 관련된 모든 에러의 기본 클래스."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    ...


class TransactionAlreadyActive(FastUoWError):
    """이미 트랜잭션이 진행 중인 UoW 에서 새 트랜잭션을 시작하려 할 때."""

    def __init__(self, message: str = "transaction already started"):
        super().__init__(message)


class NoActiveTransaction(FastUoWError):
    """진행 중인 트랜잭션이 없는데 커밋/롤백을 요청했을 때."""

    def __init__(self, message: str = "no active transaction"):
        super().__init__(message)


class _CausedError(FastUoWError):
    """하위 저장소에서 발생한 원인 에러를 감싸는 에러."""

    prefix = ""

    def __init__(self, cause: BaseException, message: Optional[str] = None):
        super().__init__(message or f"{self.prefix}: {cause}")
        self.cause = cause


class TransactionStartFailed(_CausedError):
    """데이터 소스가 트랜잭션 시작을 거부했을 때."""

    prefix = "failed to begin transaction"


class CommitFailed(_CausedError):
    """트랜잭션 커밋 실패."""

    prefix = "failed to commit transaction"


class RollbackFailed(_CausedError):
    """트랜잭션 롤백 실패.

    롤백 결과를 확인할 수 없으므로 트랜잭션은 UoW 에 그대로 남습니다.
    """

    prefix = "failed to rollback transaction"


class CombinedFailure(FastUoWError):
    """원래 작업의 에러와 복구용 롤백의 에러가 모두 발생했을 때.

    두 에러는 각각 ``error``, ``rollback_error`` 속성으로 조회할 수 있습니다.
    """

    def __init__(self, error: BaseException, rollback_error: BaseException):
        super().__init__(f"error: {error}, error rollback: {rollback_error}")
        self.error = error
        self.rollback_error = rollback_error

    @property
    def errors(self) -> tuple[BaseException, BaseException]:
        return (self.error, self.rollback_error)


class UnknownRepository(FastUoWError, KeyError):
    """등록되지 않은 이름으로 레포지터리를 요청했을 때."""

    def __init__(self, name: str):
        super().__init__(f"repository not registered: {name!r}")
        self.name = name

    def __str__(self) -> str:
        return self.message


class ContextCancelled(FastUoWError):
    """컨텍스트가 취소되었을 때."""

    def __init__(self, message: str = "context cancelled"):
        super().__init__(message)


class DeadlineExceeded(ContextCancelled):
    """컨텍스트의 deadline 이 지났을 때."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)
