from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from ._exceptions import AFSArenaMismatchError, AFSCapacityExceededError

# ---------------------------------------------------------------------------
#  Records
# ---------------------------------------------------------------------------


class FileRecord:
    __slots__ = ("create_ts", "tags", "size", "content_ref", "expiry")

    def __init__(
        self,
        create_ts: int,
        tags: tuple[str, ...],
        size: int,
        content_ref: str,
        expiry: int,
    ) -> None:
        self.create_ts: int = create_ts
        self.tags: tuple[str, ...] = tuple(tags)
        self.size: int = size
        self.content_ref: str = content_ref
        self.expiry: int = expiry

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileRecord):
            return NotImplemented
        return (
            self.create_ts == other.create_ts
            and self.tags == other.tags
            and self.size == other.size
            and self.content_ref == other.content_ref
            and self.expiry == other.expiry
        )

    def __repr__(self) -> str:
        return (
            f"FileRecord(create_ts={self.create_ts}, tags={self.tags!r}, "
            f"size={self.size}, content_ref={self.content_ref!r}, expiry={self.expiry})"
        )


class DirRecord:
    __slots__ = ("create_ts", "tags", "children_files", "children_dirs")

    def __init__(
        self,
        create_ts: int,
        tags: tuple[str, ...],
        capacity: int | None = None,
    ) -> None:
        self.create_ts: int = create_ts
        self.tags: tuple[str, ...] = tuple(tags)
        self.children_files: NameIndex = NameIndex("children_files", capacity)
        self.children_dirs: NameIndex = NameIndex("children_dirs", capacity)

    def copy(self) -> DirRecord:
        clone = DirRecord.__new__(DirRecord)
        clone.create_ts = self.create_ts
        clone.tags = self.tags
        clone.children_files = self.children_files.snapshot()
        clone.children_dirs = self.children_dirs.snapshot()
        return clone

    def __repr__(self) -> str:
        return (
            f"DirRecord(create_ts={self.create_ts}, tags={self.tags!r}, "
            f"files={len(self.children_files)}, dirs={len(self.children_dirs)})"
        )


# ---------------------------------------------------------------------------
#  Containers
# ---------------------------------------------------------------------------


class IdAllocator:
    """Monotonic id source shared by files and directories.

    Ids start at 1 and are never handed out twice, even after the object
    they named has been deleted.
    """

    __slots__ = ("_counter",)

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"Id counter cannot start below zero: {start}")
        self._counter: int = start

    def next(self) -> int:
        self._counter += 1
        return self._counter

    @property
    def current(self) -> int:
        return self._counter


class NameIndex:
    """Child bindings of one directory (or the root): name -> object id."""

    __slots__ = ("label", "capacity", "_entries")

    def __init__(self, label: str, capacity: int | None = None) -> None:
        self.label: str = label
        self.capacity: int | None = capacity
        self._entries: dict[str, int] = {}

    def get(self, name: str) -> int | None:
        return self._entries.get(name)

    def contains(self, name: str) -> bool:
        return name in self._entries

    __contains__ = contains

    def insert(self, name: str, obj_id: int) -> int | None:
        previous = self._entries.get(name)
        if (
            previous is None
            and self.capacity is not None
            and len(self._entries) >= self.capacity
        ):
            raise AFSCapacityExceededError(self.label, len(self._entries), self.capacity)
        self._entries[name] = obj_id
        return previous

    def remove(self, name: str) -> int | None:
        return self._entries.pop(name, None)

    def names(self) -> list[str]:
        return list(self._entries)

    def ids(self) -> list[int]:
        return list(self._entries.values())

    def items(self) -> list[tuple[str, int]]:
        return list(self._entries.items())

    def snapshot(self) -> NameIndex:
        clone = NameIndex(self.label, self.capacity)
        clone._entries = dict(self._entries)
        return clone

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"NameIndex({self.label!r}, {self._entries!r})"


R = TypeVar("R", FileRecord, DirRecord)


class Arena(Generic[R]):
    """Sole owner of records of one kind, keyed by object id."""

    __slots__ = ("kind", "capacity", "_records")

    def __init__(self, kind: str, capacity: int | None = None) -> None:
        self.kind: str = kind
        self.capacity: int | None = capacity
        self._records: dict[int, R] = {}

    def get(self, obj_id: int) -> R | None:
        return self._records.get(obj_id)

    def require(self, obj_id: int) -> R:
        record = self._records.get(obj_id)
        if record is None:
            raise AFSArenaMismatchError(obj_id, self.kind)
        return record

    def insert(self, obj_id: int, record: R) -> R | None:
        previous = self._records.get(obj_id)
        if (
            previous is None
            and self.capacity is not None
            and len(self._records) >= self.capacity
        ):
            raise AFSCapacityExceededError(
                f"{self.kind} arena", len(self._records), self.capacity
            )
        self._records[obj_id] = record
        return previous

    def remove(self, obj_id: int) -> R | None:
        return self._records.pop(obj_id, None)

    def items(self) -> list[tuple[int, R]]:
        return list(self._records.items())

    def __contains__(self, obj_id: object) -> bool:
        return obj_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class NamespaceState:
    """Everything one namespace instance persists.

    Four independently addressable containers plus the id counter and the
    current epoch. The root has no :class:`DirRecord`; its child listings
    live directly in ``root_files`` and ``root_dirs``.
    """

    __slots__ = ("root_files", "root_dirs", "files", "dirs", "ids", "current_epoch", "capacity")

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity: int | None = capacity
        self.root_files: NameIndex = NameIndex("root_files", capacity)
        self.root_dirs: NameIndex = NameIndex("root_dirs", capacity)
        self.files: Arena[FileRecord] = Arena("file", capacity)
        self.dirs: Arena[DirRecord] = Arena("dir", capacity)
        self.ids: IdAllocator = IdAllocator()
        self.current_epoch: int = 0

    def clone(self) -> NamespaceState:
        # FileRecords are never mutated in place, so they can be shared.
        clone = NamespaceState(self.capacity)
        clone.root_files = self.root_files.snapshot()
        clone.root_dirs = self.root_dirs.snapshot()
        clone.files._records = dict(self.files._records)
        clone.dirs._records = {k: v.copy() for k, v in self.dirs._records.items()}
        clone.ids = IdAllocator(self.ids.current)
        clone.current_epoch = self.current_epoch
        return clone
