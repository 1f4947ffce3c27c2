from typing import Literal, TypedDict, Union


class AFSListing(TypedDict):
    name: str
    create_ts: int
    is_dir: bool
    tags: list[str]
    size: int
    content_ref: str
    expiry: int


class AFSFileExport(TypedDict):
    id: int
    create_ts: int
    tags: list[str]
    size: int
    content_ref: str
    expiry: int


class AFSDirExportEntry(TypedDict):
    id: int
    create_ts: int
    tags: list[str]
    child_file_names: list[str]
    child_file_ids: list[int]
    child_dir_names: list[str]
    child_dir_ids: list[int]


class AFSDirExport(TypedDict):
    dir_id: int
    files: list[AFSFileExport]
    dirs: list[AFSDirExportEntry]


class AFSStats(TypedDict):
    file_count: int
    dir_count: int
    last_id: int
    current_epoch: int
    capacity: int | None


# ---------------------------------------------------------------------------
#  Events
# ---------------------------------------------------------------------------


class AFSFileEvent(TypedDict):
    kind: Literal["file_added", "file_exists"]
    path: str
    create_ts: int
    tags: list[str]
    size: int
    content_ref: str
    expiry: int


class AFSDirEvent(TypedDict):
    kind: Literal["dir_added", "dir_exists"]
    path: str
    create_ts: int
    tags: list[str]


class AFSDeleteEvent(TypedDict):
    kind: Literal["deleted"]
    path: str


class AFSEpochEvent(TypedDict):
    kind: Literal["epoch_updated"]
    epoch: int


AFSEvent = Union[AFSFileEvent, AFSDirEvent, AFSDeleteEvent, AFSEpochEvent]
