from fastuow.core import (  # noqa
    CombinedFailure,
    CommitFailed,
    Context,
    FastUoWError,
    NoActiveTransaction,
    RollbackFailed,
    TransactionAlreadyActive,
    TransactionStartFailed,
    UnknownRepository,
    background,
)
from fastuow.uow import UnitOfWork  # noqa
