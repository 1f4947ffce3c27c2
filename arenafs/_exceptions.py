from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._typing import AFSListing


class AFSPathError(ValueError):
    """Raised for a malformed path (empty, too long, relative, or with ``//``)."""
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}.")


class AFSRootOperationError(AFSPathError):
    """Raised when a point operation targets the namespace root."""
    def __init__(self, path: str = "/") -> None:
        super().__init__(path, "operation not permitted on the root")


class AFSPathNotFoundError(FileNotFoundError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path not found: '{path}'")


class AFSFileExistsError(FileExistsError):
    """Raised on a create/rename collision with an existing file.

    ``existing`` carries the listing of the object already bound to the name
    (``None`` when the collision was detected without reading its record).
    """
    def __init__(self, path: str, existing: AFSListing | None = None) -> None:
        self.path = path
        self.existing = existing
        super().__init__(f"File already exists: '{path}'")


class AFSDirectoryExistsError(FileExistsError):
    """Directory counterpart of :class:`AFSFileExistsError`."""
    def __init__(self, path: str, existing: AFSListing | None = None) -> None:
        self.path = path
        self.existing = existing
        super().__init__(f"Directory already exists: '{path}'")


class AFSArenaMismatchError(RuntimeError):
    """An id bound in a name index has no record in its arena.

    This is an internal-consistency fault and signals a defect, not a user
    error.
    """
    def __init__(self, obj_id: int, arena: str) -> None:
        self.obj_id = obj_id
        self.arena = arena
        super().__init__(f"Arena mismatch: id {obj_id} is not present in the {arena} arena.")


class AFSCycleError(AFSArenaMismatchError):
    """A directory was reached more than once while walking a subtree.

    Raised for a true cycle and for a directory bound under two parents.
    """
    def __init__(self, obj_id: int) -> None:
        super().__init__(obj_id, "dir")
        self.args = (f"Directory id {obj_id} reached more than once (cycle or shared child).",)


class AFSTooManyTagsError(ValueError):
    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(f"Too many tags: {count} given, at most {limit} allowed.")


class AFSStringTooLongError(ValueError):
    def __init__(self, field: str, length: int, limit: int) -> None:
        self.field = field
        self.length = length
        self.limit = limit
        super().__init__(
            f"String too long for field {field!r}: {length} bytes, max {limit}."
        )


class AFSRenamePathMismatchError(ValueError):
    """Raised when rename source and destination have different parents."""
    def __init__(self, src: str, dst: str) -> None:
        self.src = src
        self.dst = dst
        super().__init__(
            f"Rename paths must share a parent directory: '{src}' -> '{dst}'"
        )


class AFSUnauthorizedError(PermissionError):
    def __init__(self, caller: str | None) -> None:
        self.caller = caller
        super().__init__(f"Unauthorized operation for caller {caller!r}.")


class AFSCapacityExceededError(OSError):
    """Raised when a backing container would grow past its capacity. Subclass of OSError."""
    def __init__(self, container: str, current: int, limit: int) -> None:
        self.container = container
        self.current = current
        self.limit = limit
        super().__init__(
            f"AFS capacity exceeded for {container}: current {current} entries, "
            f"limit is {limit}."
        )
