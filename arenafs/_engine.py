from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ._exceptions import (
    AFSArenaMismatchError,
    AFSCycleError,
    AFSDirectoryExistsError,
    AFSFileExistsError,
    AFSPathNotFoundError,
    AFSRenamePathMismatchError,
)
from ._path import (
    MAX_STRING_LEN,
    MAX_TAGS,
    ensure_trailing_slash,
    remove_trailing_slash,
    validate_path,
    validate_string_len,
    validate_tags,
)
from ._resolver import PathResolver
from ._store import DirRecord, FileRecord, NameIndex, NamespaceState
from ._typing import AFSDirExport, AFSDirExportEntry, AFSFileExport, AFSListing

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class NamespaceLimits:
    max_string_len: int = MAX_STRING_LEN
    max_tags: int = MAX_TAGS
    max_path_len: int | None = None

    def __post_init__(self) -> None:
        if self.max_string_len <= 0:
            raise ValueError(f"max_string_len must be positive, got {self.max_string_len}")
        if self.max_tags < 0:
            raise ValueError(f"max_tags cannot be negative, got {self.max_tags}")
        if self.max_path_len is not None and self.max_path_len <= 0:
            raise ValueError(f"max_path_len must be positive, got {self.max_path_len}")

    @property
    def path_len(self) -> int:
        if self.max_path_len is not None:
            return self.max_path_len
        return self.max_string_len * 5


def now_ms() -> int:
    return int(time.time()) * 1000


def check_u64(value: int, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field} must be an int, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{field} out of range: {value}")


def file_listing(name: str, record: FileRecord) -> AFSListing:
    return AFSListing(
        name=name,
        create_ts=record.create_ts,
        is_dir=False,
        tags=list(record.tags),
        size=record.size,
        content_ref=record.content_ref,
        expiry=record.expiry,
    )


def dir_listing(name: str, record: DirRecord) -> AFSListing:
    return AFSListing(
        name=name,
        create_ts=record.create_ts,
        is_dir=True,
        tags=list(record.tags),
        size=0,
        content_ref="",
        expiry=0,
    )


def walk_subtree(state: NamespaceState, start_id: int) -> tuple[set[int], set[int]]:
    """Collect every file id and directory id below directory *start_id*.

    The starting directory itself is not part of the returned directory set.
    Reaching any directory twice (an edge back to *start_id*, any other
    cycle, or a directory shared by two parents) raises :class:`AFSCycleError`.
    """
    file_ids: set[int] = set()
    dir_ids: set[int] = set()
    visited: set[int] = {start_id}
    work: list[int] = [start_id]
    while work:
        record = state.dirs.require(work.pop())
        file_ids.update(record.children_files.ids())
        for child_id in record.children_dirs.ids():
            if child_id in visited:
                raise AFSCycleError(child_id)
            visited.add(child_id)
            dir_ids.add(child_id)
            work.append(child_id)
    return file_ids, dir_ids


class NamespaceEngine:
    """CRUD operations over one :class:`NamespaceState`.

    The engine performs no rollback of its own: a failing call may leave
    *state* partially modified, and the caller (normally
    :class:`~arenafs._host.TransactionalHost`) is expected to discard it.
    Every operation still validates its inputs and checks for collisions
    before its first write.
    """

    def __init__(
        self,
        state: NamespaceState,
        limits: NamespaceLimits | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._state = state
        self._limits = limits if limits is not None else NamespaceLimits()
        self._clock = clock if clock is not None else now_ms
        self._resolver = PathResolver(state, self._limits.max_string_len)

    @property
    def state(self) -> NamespaceState:
        return self._state

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    # -- validation helpers --

    def _validate_path(self, path: str) -> None:
        validate_path(path, self._limits.path_len)

    def _validate_tags(self, tags: Iterable[str]) -> tuple[str, ...]:
        if isinstance(tags, str):
            validate_tags(tags)
        tag_tuple = tuple(tags)
        validate_tags(tag_tuple, self._limits.max_tags, self._limits.max_string_len)
        return tag_tuple

    # -- create --

    def create_file(
        self,
        path: str,
        tags: Iterable[str] = (),
        size: int = 0,
        content_ref: str = "",
        expiry: int = 0,
        overwrite: bool = False,
    ) -> int:
        """Bind a new file record at *path* and return its id.

        Overwriting drops the old record and binds the name to a fresh id.
        """
        self._validate_path(path)
        tag_tuple = self._validate_tags(tags)
        validate_string_len(content_ref, "content_ref", self._limits.max_string_len)
        check_u64(size, "size")
        check_u64(expiry, "expiry")

        state = self._state
        parent_id, leaf = self._resolver.resolve_parent_and_leaf(path)
        files, _ = self._resolver.child_indexes(parent_id)

        existing_id = files.get(leaf)
        if existing_id is not None:
            if not overwrite:
                existing = state.files.require(existing_id)
                raise AFSFileExistsError(path, file_listing(leaf, existing))
            # The binding itself is overwritten below, never removed.
            if state.files.remove(existing_id) is None:
                raise AFSArenaMismatchError(existing_id, "file")

        new_id = state.ids.next()
        record = FileRecord(self._clock(), tag_tuple, size, content_ref, expiry)
        state.files.insert(new_id, record)
        files.insert(leaf, new_id)
        return new_id

    def create_dir(self, path: str, tags: Iterable[str] = ()) -> int:
        npath = remove_trailing_slash(path)
        self._validate_path(npath)
        tag_tuple = self._validate_tags(tags)

        state = self._state
        parent_id, leaf = self._resolver.resolve_parent_and_leaf(npath)
        _, dirs = self._resolver.child_indexes(parent_id)

        existing_id = dirs.get(leaf)
        if existing_id is not None:
            existing = state.dirs.require(existing_id)
            raise AFSDirectoryExistsError(path, dir_listing(leaf, existing))

        new_id = state.ids.next()
        state.dirs.insert(new_id, DirRecord(self._clock(), tag_tuple, state.capacity))
        dirs.insert(leaf, new_id)
        return new_id

    # -- read --

    def stat(self, path: str) -> AFSListing:
        npath = remove_trailing_slash(path)
        self._validate_path(npath)
        parent_id, leaf = self._resolver.resolve_parent_and_leaf(npath)
        files, dirs = self._resolver.child_indexes(parent_id)

        file_id = files.get(leaf)
        if file_id is not None:
            return file_listing(leaf, self._state.files.require(file_id))
        dir_id = dirs.get(leaf)
        if dir_id is not None:
            return dir_listing(leaf, self._state.dirs.require(dir_id))
        raise AFSPathNotFoundError(path)

    def list_dir(self, path: str) -> list[AFSListing]:
        npath = ensure_trailing_slash(path)
        self._validate_path(npath)
        files, dirs = self._resolver.resolve_children(npath)
        return self._listings(files, dirs)

    def _listings(self, files: NameIndex, dirs: NameIndex) -> list[AFSListing]:
        result: list[AFSListing] = []
        for name, dir_id in dirs.items():
            result.append(dir_listing(name, self._state.dirs.require(dir_id)))
        for name, file_id in files.items():
            result.append(file_listing(name, self._state.files.require(file_id)))
        return result

    # -- rename --

    def _resolve_rename(self, src: str, dst: str) -> tuple[int | None, str, str]:
        nsrc = remove_trailing_slash(src)
        ndst = remove_trailing_slash(dst)
        self._validate_path(nsrc)
        self._validate_path(ndst)
        src_parent, src_leaf = self._resolver.resolve_parent_and_leaf(nsrc)
        dst_parent, dst_leaf = self._resolver.resolve_parent_and_leaf(ndst)
        if src_parent != dst_parent:
            raise AFSRenamePathMismatchError(src, dst)
        return src_parent, src_leaf, dst_leaf

    def rename_file(self, src: str, dst: str) -> None:
        parent_id, src_leaf, dst_leaf = self._resolve_rename(src, dst)
        files, _ = self._resolver.child_indexes(parent_id)
        if src_leaf not in files:
            raise AFSPathNotFoundError(src)
        existing_id = files.get(dst_leaf)
        if existing_id is not None:
            existing = self._state.files.require(existing_id)
            raise AFSFileExistsError(dst, file_listing(dst_leaf, existing))
        file_id = files.remove(src_leaf)
        assert file_id is not None
        files.insert(dst_leaf, file_id)

    def rename_dir(self, src: str, dst: str) -> None:
        parent_id, src_leaf, dst_leaf = self._resolve_rename(src, dst)
        _, dirs = self._resolver.child_indexes(parent_id)
        if src_leaf not in dirs:
            raise AFSPathNotFoundError(src)
        existing_id = dirs.get(dst_leaf)
        if existing_id is not None:
            existing = self._state.dirs.require(existing_id)
            raise AFSDirectoryExistsError(dst, dir_listing(dst_leaf, existing))
        dir_id = dirs.remove(src_leaf)
        assert dir_id is not None
        dirs.insert(dst_leaf, dir_id)

    # -- delete --

    def delete_file(self, path: str) -> int:
        """Unbind and drop the file at *path*; return the removed id."""
        npath = remove_trailing_slash(path)
        self._validate_path(npath)
        parent_id, leaf = self._resolver.resolve_parent_and_leaf(npath)
        files, _ = self._resolver.child_indexes(parent_id)
        file_id = files.remove(leaf)
        if file_id is None:
            raise AFSPathNotFoundError(path)
        if self._state.files.remove(file_id) is None:
            raise AFSArenaMismatchError(file_id, "file")
        return file_id

    def delete_dir(self, path: str) -> tuple[set[int], set[int]]:
        """Remove the directory at *path* with its whole subtree.

        Returns the removed ``(file_ids, dir_ids)``; ``dir_ids`` includes the
        directory itself.
        """
        npath = remove_trailing_slash(path)
        self._validate_path(npath)
        state = self._state
        parent_id, leaf = self._resolver.resolve_parent_and_leaf(npath)
        _, dirs = self._resolver.child_indexes(parent_id)
        dir_id = dirs.remove(leaf)
        if dir_id is None:
            raise AFSPathNotFoundError(path)

        file_ids, sub_dir_ids = walk_subtree(state, dir_id)
        for file_id in file_ids:
            if state.files.remove(file_id) is None:
                raise AFSArenaMismatchError(file_id, "file")
        for sub_id in sub_dir_ids:
            if state.dirs.remove(sub_id) is None:
                raise AFSArenaMismatchError(sub_id, "dir")
        state.dirs.remove(dir_id)
        logger.debug(
            "delete_dir %s removed %d files and %d directories",
            path, len(file_ids), len(sub_dir_ids) + 1,
        )
        return file_ids, sub_dir_ids | {dir_id}

    # -- export --

    def get_dir_all(self, path: str) -> AFSDirExport:
        npath = remove_trailing_slash(path)
        self._validate_path(npath)
        state = self._state
        parent_id, leaf = self._resolver.resolve_parent_and_leaf(npath)
        _, dirs = self._resolver.child_indexes(parent_id)
        target_id = dirs.get(leaf)
        if target_id is None:
            raise AFSPathNotFoundError(path)
        state.dirs.require(target_id)

        file_ids, dir_ids = walk_subtree(state, target_id)
        files: list[AFSFileExport] = []
        for file_id in sorted(file_ids):
            record = state.files.require(file_id)
            files.append(
                AFSFileExport(
                    id=file_id,
                    create_ts=record.create_ts,
                    tags=list(record.tags),
                    size=record.size,
                    content_ref=record.content_ref,
                    expiry=record.expiry,
                )
            )
        entries: list[AFSDirExportEntry] = []
        for dir_id in sorted(dir_ids | {target_id}):
            record = state.dirs.require(dir_id)
            entries.append(
                AFSDirExportEntry(
                    id=dir_id,
                    create_ts=record.create_ts,
                    tags=list(record.tags),
                    child_file_names=record.children_files.names(),
                    child_file_ids=record.children_files.ids(),
                    child_dir_names=record.children_dirs.names(),
                    child_dir_ids=record.children_dirs.ids(),
                )
            )
        return AFSDirExport(dir_id=target_id, files=files, dirs=entries)

    # -- invariants --

    def check_consistency(self) -> list[int]:
        """Verify that every bound id has a record and the tree is acyclic.

        Raises :class:`AFSArenaMismatchError` for a dangling binding and
        :class:`AFSCycleError` for a directory reachable twice. Returns the
        sorted ids of records no name index refers to.
        """
        state = self._state
        reachable_files: set[int] = set()
        reachable_dirs: set[int] = set()
        work: list[tuple[NameIndex, NameIndex]] = [(state.root_files, state.root_dirs)]
        while work:
            files, dirs = work.pop()
            for file_id in files.ids():
                state.files.require(file_id)
                reachable_files.add(file_id)
            for dir_id in dirs.ids():
                if dir_id in reachable_dirs:
                    raise AFSCycleError(dir_id)
                record = state.dirs.require(dir_id)
                reachable_dirs.add(dir_id)
                work.append((record.children_files, record.children_dirs))

        orphans = sorted(
            {obj_id for obj_id, _ in state.files.items()} - reachable_files
            | {obj_id for obj_id, _ in state.dirs.items()} - reachable_dirs
        )
        if orphans:
            logger.warning("Unreferenced records in namespace: %s", orphans)
        return orphans
