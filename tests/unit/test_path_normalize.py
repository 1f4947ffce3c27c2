import pytest
from arenafs._exceptions import AFSPathError, AFSStringTooLongError, AFSTooManyTagsError
from arenafs._path import (
    MAX_PATH_LEN,
    ensure_trailing_slash,
    remove_trailing_slash,
    split_components,
    validate_path,
    validate_string_len,
    validate_tags,
)


def test_remove_trailing_slash():
    assert remove_trailing_slash("/a/b/") == "/a/b"


def test_remove_trailing_slash_without_slash_unchanged():
    assert remove_trailing_slash("/a/b") == "/a/b"


def test_ensure_trailing_slash():
    assert ensure_trailing_slash("/a/b") == "/a/b/"


def test_ensure_trailing_slash_already_present():
    assert ensure_trailing_slash("/a/b/") == "/a/b/"


def test_root_invariant_under_both():
    assert remove_trailing_slash("/") == "/"
    assert ensure_trailing_slash("/") == "/"


def test_split_components_drops_empty():
    assert split_components("/a/b/") == ["a", "b"]
    assert split_components("/") == []


def test_validate_path_accepts_absolute():
    validate_path("/a/b.txt")


def test_validate_path_empty_raises():
    with pytest.raises(AFSPathError, match="empty"):
        validate_path("")


def test_validate_path_relative_raises():
    with pytest.raises(AFSPathError, match="start with"):
        validate_path("a/b")


def test_validate_path_double_slash_raises():
    with pytest.raises(AFSPathError):
        validate_path("/a//b")


def test_validate_path_too_long_raises():
    with pytest.raises(AFSPathError, match="longer"):
        validate_path("/" + "a" * MAX_PATH_LEN)


def test_validate_path_length_is_in_bytes():
    # 2 bytes per character in UTF-8
    path = "/" + "é" * 160
    with pytest.raises(AFSPathError):
        validate_path(path)


def test_path_error_is_value_error():
    with pytest.raises(ValueError):
        validate_path("relative")


def test_validate_string_len_at_limit_ok():
    validate_string_len("x" * 64, "content_ref")


def test_validate_string_len_over_limit_raises():
    with pytest.raises(AFSStringTooLongError) as exc_info:
        validate_string_len("x" * 65, "content_ref")
    assert exc_info.value.field == "content_ref"
    assert exc_info.value.length == 65
    assert exc_info.value.limit == 64


def test_validate_tags_too_many_raises():
    with pytest.raises(AFSTooManyTagsError) as exc_info:
        validate_tags(["t"] * 6)
    assert exc_info.value.count == 6


def test_validate_tags_long_tag_raises():
    with pytest.raises(AFSStringTooLongError):
        validate_tags(["ok", "x" * 65])


def test_validate_tags_max_count_ok():
    validate_tags(["a", "b", "c", "d", "e"])


def test_validate_tags_bare_string_raises():
    with pytest.raises(TypeError, match="bare str"):
        validate_tags("photo")


def test_validate_tags_non_string_element_raises():
    with pytest.raises(TypeError, match="int"):
        validate_tags(["ok", 7])
