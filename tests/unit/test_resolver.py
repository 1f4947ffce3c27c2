import pytest
from arenafs._exceptions import (
    AFSArenaMismatchError,
    AFSPathError,
    AFSPathNotFoundError,
    AFSRootOperationError,
    AFSStringTooLongError,
)
from arenafs._resolver import PathResolver
from arenafs._store import DirRecord, IdAllocator, NamespaceState


@pytest.fixture
def state():
    """/a (id 1) -> /a/b (id 2), plus /a/f.txt bound to id 3."""
    st = NamespaceState()
    a = DirRecord(0, ())
    b = DirRecord(0, ())
    st.dirs.insert(1, a)
    st.dirs.insert(2, b)
    st.root_dirs.insert("a", 1)
    a.children_dirs.insert("b", 2)
    a.children_files.insert("f.txt", 3)
    st.ids = IdAllocator(3)
    return st


def test_leaf_under_root_has_no_parent(state):
    assert PathResolver(state).resolve_parent_and_leaf("/x") == (None, "x")


def test_nested_leaf_resolves_parent(state):
    assert PathResolver(state).resolve_parent_and_leaf("/a/b/c") == (2, "c")


def test_trailing_slash_ignored(state):
    assert PathResolver(state).resolve_parent_and_leaf("/a/b/") == (1, "b")


def test_root_raises(state):
    with pytest.raises(AFSRootOperationError):
        PathResolver(state).resolve_parent_and_leaf("/")


def test_root_error_is_path_error(state):
    with pytest.raises(AFSPathError):
        PathResolver(state).resolve_parent_and_leaf("/")


def test_missing_intermediate_raises(state):
    with pytest.raises(AFSPathNotFoundError):
        PathResolver(state).resolve_parent_and_leaf("/a/nope/c")


def test_file_is_not_walked_as_directory(state):
    with pytest.raises(AFSPathNotFoundError):
        PathResolver(state).resolve_parent_and_leaf("/a/f.txt/c")


def test_dangling_directory_id_is_arena_fault(state):
    state.dirs.remove(2)
    with pytest.raises(AFSArenaMismatchError):
        PathResolver(state).resolve_parent_and_leaf("/a/b/c")


def test_long_component_raises(state):
    with pytest.raises(AFSStringTooLongError):
        PathResolver(state).resolve_parent_and_leaf("/" + "n" * 65)


def test_resolve_children_root(state):
    files, dirs = PathResolver(state).resolve_children("/")
    assert dirs.names() == ["a"]
    assert files.names() == []


def test_resolve_children_nested(state):
    files, dirs = PathResolver(state).resolve_children("/a/")
    assert files.names() == ["f.txt"]
    assert dirs.names() == ["b"]


def test_resolve_children_returns_snapshots(state):
    files, _ = PathResolver(state).resolve_children("/a/")
    files.insert("other", 99)
    assert "other" not in state.dirs.require(1).children_files


def test_resolve_children_missing_raises(state):
    with pytest.raises(AFSPathNotFoundError):
        PathResolver(state).resolve_children("/a/zzz/")


def test_child_indexes_root_are_live(state):
    files, dirs = PathResolver(state).child_indexes(None)
    assert files is state.root_files
    assert dirs is state.root_dirs


def test_child_indexes_dangling_parent_raises(state):
    with pytest.raises(AFSArenaMismatchError):
        PathResolver(state).child_indexes(42)
