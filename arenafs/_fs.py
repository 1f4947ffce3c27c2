from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from ._auth import OwnerCheck
from ._engine import NamespaceEngine, NamespaceLimits, check_u64
from ._exceptions import (
    AFSDirectoryExistsError,
    AFSFileExistsError,
    AFSPathNotFoundError,
)
from ._host import TransactionalHost
from ._path import MAX_STRING_LEN, MAX_TAGS, ensure_trailing_slash, remove_trailing_slash
from ._store import NamespaceState
from ._typing import (
    AFSDeleteEvent,
    AFSDirEvent,
    AFSDirExport,
    AFSEpochEvent,
    AFSEvent,
    AFSFileEvent,
    AFSListing,
    AFSStats,
)

T = TypeVar("T")


class ArenaFileSystem:
    """A hierarchical namespace of file and directory records.

    Files carry metadata only (size, tags, an opaque content reference and
    an expiry marker); their bytes live elsewhere. Every mutating method is
    applied atomically: it either fully succeeds or leaves the namespace
    untouched.
    """

    def __init__(
        self,
        owner: str | None = None,
        capacity: int | None = None,
        max_string_len: int = MAX_STRING_LEN,
        max_tags: int = MAX_TAGS,
        max_path_len: int | None = None,
        clock: Callable[[], int] | None = None,
        lock_timeout: float | None = None,
        listener: Callable[[AFSEvent], None] | None = None,
    ) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError(f"Invalid capacity: {capacity!r}. Expected None or >= 0.")
        if lock_timeout is not None and lock_timeout < 0:
            raise ValueError(f"Invalid lock_timeout: {lock_timeout!r}.")
        self._limits = NamespaceLimits(
            max_string_len=max_string_len, max_tags=max_tags, max_path_len=max_path_len
        )
        self._capacity: int | None = capacity
        self._clock = clock
        self._lock_timeout: float | None = lock_timeout
        self._listener = listener
        self._auth = OwnerCheck(owner)
        self._host = TransactionalHost(NamespaceState(capacity))
        self._global_lock = threading.RLock()

    # -- plumbing --

    @contextmanager
    def _locked(self) -> Iterator[None]:
        timeout = -1 if self._lock_timeout is None else self._lock_timeout
        if not self._global_lock.acquire(timeout=timeout):
            raise BlockingIOError("Could not acquire namespace lock within timeout.")
        try:
            yield
        finally:
            self._global_lock.release()

    def _engine(self, state: NamespaceState) -> NamespaceEngine:
        return NamespaceEngine(state, self._limits, self._clock)

    def _mutate(
        self, label: str, caller: str | None, fn: Callable[[NamespaceEngine], T]
    ) -> T:
        with self._locked():
            self._auth.check(caller)
            return self._host.run(lambda state: fn(self._engine(state)), label)

    def _read(self, fn: Callable[[NamespaceEngine], T]) -> T:
        with self._locked():
            return self._host.read(lambda state: fn(self._engine(state)))

    def _emit(self, event: AFSEvent) -> None:
        if self._listener is not None:
            self._listener(event)

    @property
    def owner(self) -> str | None:
        return self._auth.owner

    @property
    def host(self) -> TransactionalHost:
        return self._host

    # -- mutations --
    #
    # Events are built and emitted while the namespace lock is still held so
    # listeners observe them in commit order.

    def create_file(
        self,
        path: str,
        tags: Iterable[str] = (),
        size: int = 0,
        content_ref: str = "",
        expiry: int = 0,
        overwrite: bool = False,
        *,
        caller: str | None = None,
    ) -> int:
        with self._locked():
            try:
                file_id = self._mutate(
                    "create_file",
                    caller,
                    lambda eng: eng.create_file(
                        path, tags, size, content_ref, expiry, overwrite
                    ),
                )
            except AFSFileExistsError as exc:
                if exc.existing is not None:
                    self._emit(AFSFileEvent(
                        kind="file_exists",
                        path=path,
                        create_ts=exc.existing["create_ts"],
                        tags=list(exc.existing["tags"]),
                        size=exc.existing["size"],
                        content_ref=exc.existing["content_ref"],
                        expiry=exc.existing["expiry"],
                    ))
                raise
            if self._listener is not None:
                record = self._host.state.files.require(file_id)
                self._emit(AFSFileEvent(
                    kind="file_added",
                    path=path,
                    create_ts=record.create_ts,
                    tags=list(record.tags),
                    size=record.size,
                    content_ref=record.content_ref,
                    expiry=record.expiry,
                ))
            return file_id

    def create_dir(
        self, path: str, tags: Iterable[str] = (), *, caller: str | None = None
    ) -> int:
        with self._locked():
            try:
                dir_id = self._mutate(
                    "create_dir", caller, lambda eng: eng.create_dir(path, tags)
                )
            except AFSDirectoryExistsError as exc:
                if exc.existing is not None:
                    self._emit(AFSDirEvent(
                        kind="dir_exists",
                        path=path,
                        create_ts=exc.existing["create_ts"],
                        tags=list(exc.existing["tags"]),
                    ))
                raise
            if self._listener is not None:
                record = self._host.state.dirs.require(dir_id)
                self._emit(AFSDirEvent(
                    kind="dir_added",
                    path=path,
                    create_ts=record.create_ts,
                    tags=list(record.tags),
                ))
            return dir_id

    def rename_file(self, src: str, dst: str, *, caller: str | None = None) -> None:
        self._mutate("rename_file", caller, lambda eng: eng.rename_file(src, dst))

    def rename_dir(self, src: str, dst: str, *, caller: str | None = None) -> None:
        self._mutate("rename_dir", caller, lambda eng: eng.rename_dir(src, dst))

    def delete_file(self, path: str, *, caller: str | None = None) -> None:
        with self._locked():
            self._mutate("delete_file", caller, lambda eng: eng.delete_file(path))
            self._emit(AFSDeleteEvent(kind="deleted", path=path))

    def delete_dir(self, path: str, *, caller: str | None = None) -> None:
        with self._locked():
            self._mutate("delete_dir", caller, lambda eng: eng.delete_dir(path))
            self._emit(AFSDeleteEvent(kind="deleted", path=path))

    def update_epoch(self, epoch: int, *, caller: str | None = None) -> None:
        check_u64(epoch, "epoch")

        def apply(eng: NamespaceEngine) -> None:
            eng.state.current_epoch = epoch

        with self._locked():
            self._mutate("update_epoch", caller, apply)
            self._emit(AFSEpochEvent(kind="epoch_updated", epoch=epoch))

    # -- reads --

    def stat(self, path: str) -> AFSListing:
        return self._read(lambda eng: eng.stat(path))

    def list_dir(self, path: str) -> list[AFSListing]:
        return self._read(lambda eng: eng.list_dir(path))

    def get_dir_all(self, path: str) -> AFSDirExport:
        return self._read(lambda eng: eng.get_dir_all(path))

    def exists(self, path: str) -> bool:
        if remove_trailing_slash(path) == "/":
            return True
        try:
            self.stat(path)
        except (AFSPathNotFoundError, ValueError):
            return False
        return True

    def is_dir(self, path: str) -> bool:
        if remove_trailing_slash(path) == "/":
            return True
        try:
            return self.stat(path)["is_dir"]
        except (AFSPathNotFoundError, ValueError):
            return False

    def is_file(self, path: str) -> bool:
        if remove_trailing_slash(path) == "/":
            return False
        try:
            return not self.stat(path)["is_dir"]
        except (AFSPathNotFoundError, ValueError):
            return False

    @property
    def current_epoch(self) -> int:
        with self._locked():
            return self._host.state.current_epoch

    def stats(self) -> AFSStats:
        with self._locked():
            state = self._host.state
            return AFSStats(
                file_count=len(state.files),
                dir_count=len(state.dirs),
                last_id=state.ids.current,
                current_epoch=state.current_epoch,
                capacity=self._capacity,
            )

    def check_consistency(self) -> list[int]:
        return self._read(lambda eng: eng.check_consistency())

    def walk(self, path: str = "/") -> Iterator[tuple[str, list[str], list[str]]]:
        """Walk the directory tree top-down from *path*.

        Yields ``(dir_path, dir_names, file_names)`` tuples. The whole walk is
        computed under the namespace lock before the first tuple is yielded.
        """
        yield from self._read(lambda eng: self._collect_walk(eng, path))

    def _collect_walk(
        self, eng: NamespaceEngine, path: str
    ) -> list[tuple[str, list[str], list[str]]]:
        start = remove_trailing_slash(path) or "/"
        eng.list_dir(start)  # validates and raises for a missing directory
        result: list[tuple[str, list[str], list[str]]] = []
        pending = [start]
        while pending:
            dir_path = pending.pop(0)
            files, dirs = eng.resolver.resolve_children(ensure_trailing_slash(dir_path))
            dir_names = dirs.names()
            result.append((dir_path, dir_names, files.names()))
            pending[0:0] = [dir_path.rstrip("/") + "/" + name for name in dir_names]
        return result
