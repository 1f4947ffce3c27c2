from ._engine import NamespaceEngine, NamespaceLimits, walk_subtree
from ._exceptions import (
    AFSArenaMismatchError,
    AFSCapacityExceededError,
    AFSCycleError,
    AFSDirectoryExistsError,
    AFSFileExistsError,
    AFSPathError,
    AFSPathNotFoundError,
    AFSRenamePathMismatchError,
    AFSRootOperationError,
    AFSStringTooLongError,
    AFSTooManyTagsError,
    AFSUnauthorizedError,
)
from ._fs import ArenaFileSystem
from ._host import Transaction, TransactionalHost, TransactionState
from ._store import NamespaceState
from ._typing import AFSDirExport, AFSEvent, AFSListing, AFSStats

__all__ = [
    "ArenaFileSystem",
    "NamespaceEngine",
    "NamespaceLimits",
    "NamespaceState",
    "TransactionalHost",
    "Transaction",
    "TransactionState",
    "walk_subtree",
    "AFSArenaMismatchError",
    "AFSCapacityExceededError",
    "AFSCycleError",
    "AFSDirectoryExistsError",
    "AFSFileExistsError",
    "AFSPathError",
    "AFSPathNotFoundError",
    "AFSRenamePathMismatchError",
    "AFSRootOperationError",
    "AFSStringTooLongError",
    "AFSTooManyTagsError",
    "AFSUnauthorizedError",
    "AFSDirExport",
    "AFSEvent",
    "AFSListing",
    "AFSStats",
]
__version__ = "0.1.0"
