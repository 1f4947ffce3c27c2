from __future__ import annotations

from ._exceptions import AFSPathError, AFSPathNotFoundError, AFSRootOperationError
from ._path import MAX_STRING_LEN, remove_trailing_slash, split_components, validate_string_len
from ._store import NameIndex, NamespaceState


class PathResolver:
    """Walks paths through the chain of name indexes starting at the root.

    Callers normalize first: point operations pass the path through
    ``remove_trailing_slash`` and enumeration through ``ensure_trailing_slash``.
    """

    def __init__(self, state: NamespaceState, max_component_len: int = MAX_STRING_LEN) -> None:
        self._state = state
        self._max_component_len = max_component_len

    def _check_components(self, parts: list[str]) -> None:
        for part in parts:
            validate_string_len(part, "path component", self._max_component_len)

    def _walk_dirs(self, parts: list[str], path: str) -> int | None:
        state = self._state
        current_id: int | None = None
        current_dirs = state.root_dirs
        for part in parts:
            child_id = current_dirs.get(part)
            if child_id is None:
                raise AFSPathNotFoundError(path)
            current_id = child_id
            current_dirs = state.dirs.require(child_id).children_dirs
        return current_id

    def resolve_parent_and_leaf(self, path: str) -> tuple[int | None, str]:
        """Return ``(parent_id, leaf)``; ``parent_id`` is ``None`` under the root."""
        npath = remove_trailing_slash(path)
        if npath == "/":
            raise AFSRootOperationError(path)
        parts = split_components(npath)
        if not parts:
            raise AFSPathError(path, "no components")
        self._check_components(parts)
        leaf = parts.pop()
        return self._walk_dirs(parts, path), leaf

    def resolve_dir_id(self, path: str) -> int | None:
        """Return the id of the directory at *path*, ``None`` for the root."""
        parts = split_components(path)
        self._check_components(parts)
        return self._walk_dirs(parts, path)

    def resolve_children(self, path: str) -> tuple[NameIndex, NameIndex]:
        """Return snapshots of ``(files, dirs)`` under the directory at *path*."""
        if path == "/":
            return self._state.root_files.snapshot(), self._state.root_dirs.snapshot()
        dir_id = self.resolve_dir_id(path)
        if dir_id is None:
            raise AFSPathNotFoundError(path)
        record = self._state.dirs.require(dir_id)
        return record.children_files.snapshot(), record.children_dirs.snapshot()

    def child_indexes(self, parent_id: int | None) -> tuple[NameIndex, NameIndex]:
        """Return the live ``(files, dirs)`` indexes owned by *parent_id*."""
        if parent_id is None:
            return self._state.root_files, self._state.root_dirs
        record = self._state.dirs.require(parent_id)
        return record.children_files, record.children_dirs
