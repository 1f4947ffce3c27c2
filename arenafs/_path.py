from collections.abc import Sequence

from ._exceptions import (
    AFSPathError,
    AFSStringTooLongError,
    AFSTooManyTagsError,
)

MAX_STRING_LEN = 64
MAX_TAGS = 5
MAX_PATH_LEN = MAX_STRING_LEN * 5


def remove_trailing_slash(path: str) -> str:
    if path != "/" and path.endswith("/"):
        return path[:-1]
    return path


def ensure_trailing_slash(path: str) -> str:
    if path == "/" or path.endswith("/"):
        return path
    return path + "/"


def split_components(path: str) -> list[str]:
    return [p for p in path.split("/") if p]


def byte_len(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_path(path: str, max_len: int = MAX_PATH_LEN) -> None:
    if not path:
        raise AFSPathError(path, "empty path")
    if byte_len(path) > max_len:
        raise AFSPathError(path, f"longer than {max_len} bytes")
    if not path.startswith("/"):
        raise AFSPathError(path, "must start with '/'")
    if "//" in path:
        raise AFSPathError(path, "contains an empty component")


def validate_string_len(value: str, field: str, max_len: int = MAX_STRING_LEN) -> None:
    length = byte_len(value)
    if length > max_len:
        raise AFSStringTooLongError(field, length, max_len)


def validate_tags(
    tags: Sequence[str], max_tags: int = MAX_TAGS, max_len: int = MAX_STRING_LEN
) -> None:
    if isinstance(tags, str):
        raise TypeError(f"tags must be a collection of str, not a bare str: {tags!r}")
    if len(tags) > max_tags:
        raise AFSTooManyTagsError(len(tags), max_tags)
    for tag in tags:
        if not isinstance(tag, str):
            raise TypeError(f"tag must be str, not {type(tag).__name__}")
        validate_string_len(tag, "tag", max_len)
