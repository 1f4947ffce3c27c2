"""All-or-nothing commit boundary for namespace operations.

Each mutating call runs inside a :class:`Transaction` against a private
working copy of the committed :class:`NamespaceState`. The copy replaces
the committed state only when the call returns; any exception aborts the
transaction and the working copy is dropped, so a failed operation leaves
the namespace exactly as it was, including the id counter.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from ._store import NamespaceState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionState(str, Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass
class Transaction:
    txn_id: int
    label: str
    state: TransactionState = TransactionState.ACTIVE
    error: BaseException | None = None


class TransactionalHost:
    def __init__(self, state: NamespaceState | None = None) -> None:
        self._state: NamespaceState = state if state is not None else NamespaceState()
        self._next_txn_id: int = 0
        self._last: Transaction | None = None

    @property
    def state(self) -> NamespaceState:
        """The committed state. Treat as read-only."""
        return self._state

    @property
    def last_transaction(self) -> Transaction | None:
        return self._last

    def _begin(self, label: str) -> Transaction:
        txn = Transaction(txn_id=self._next_txn_id, label=label)
        self._next_txn_id += 1
        self._last = txn
        return txn

    def run(self, fn: Callable[[NamespaceState], T], label: str = "op") -> T:
        """Apply *fn* to a working copy and commit it only if *fn* returns."""
        txn = self._begin(label)
        working = self._state.clone()
        try:
            result = fn(working)
        except BaseException as exc:
            txn.state = TransactionState.ABORTED
            txn.error = exc
            logger.debug("txn %d (%s) aborted: %r", txn.txn_id, label, exc)
            raise
        self._state = working
        txn.state = TransactionState.COMMITTED
        logger.debug("txn %d (%s) committed", txn.txn_id, label)
        return result

    def read(self, fn: Callable[[NamespaceState], T]) -> T:
        """Run a read-only *fn* against the committed state, without a copy."""
        return fn(self._state)
