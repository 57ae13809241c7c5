from .context import Context, background  # noqa
from .errors import (  # noqa
    CombinedFailure,
    CommitFailed,
    ContextCancelled,
    DeadlineExceeded,
    FastUoWError,
    NoActiveTransaction,
    RollbackFailed,
    TransactionAlreadyActive,
    TransactionStartFailed,
    UnknownRepository,
)
from .models import (  # noqa
    AbstractDataSource,
    AbstractRepository,
    AbstractTransaction,
    AbstractUnitOfWork,
    Entity,
    RepositoryFactory,
)
