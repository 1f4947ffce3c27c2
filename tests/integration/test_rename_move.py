import pytest
from arenafs import (
    AFSDirectoryExistsError,
    AFSFileExistsError,
    AFSPathNotFoundError,
    AFSRenamePathMismatchError,
    AFSRootOperationError,
)


def test_rename_file(afs):
    fid = afs.create_file("/a.bin", size=4, content_ref="data")
    before = afs.host.state.files.require(fid)
    afs.rename_file("/a.bin", "/b.bin")
    assert not afs.exists("/a.bin")
    assert afs.stat("/b.bin")["content_ref"] == "data"
    state = afs.host.state
    assert state.root_files.get("b.bin") == fid
    assert state.files.require(fid) == before


def test_rename_file_in_subdirectory(afs):
    afs.create_dir("/d")
    fid = afs.create_file("/d/old")
    afs.rename_file("/d/old", "/d/new")
    assert [e["name"] for e in afs.list_dir("/d")] == ["new"]
    assert afs.host.state.dirs.require(1).children_files.get("new") == fid


def test_rename_directory_keeps_subtree(afs):
    did = afs.create_dir("/src")
    afs.create_dir("/src/sub")
    afs.create_file("/src/sub/f.bin", size=7)
    afs.rename_dir("/src", "/dst")
    assert not afs.exists("/src")
    assert afs.is_dir("/dst")
    assert afs.stat("/dst/sub/f.bin")["size"] == 7
    assert afs.host.state.root_dirs.get("dst") == did


def test_rename_file_nonexistent_raises(afs):
    with pytest.raises(AFSPathNotFoundError):
        afs.rename_file("/nope.bin", "/other.bin")


def test_rename_file_does_not_see_directories(afs):
    afs.create_dir("/d")
    with pytest.raises(AFSPathNotFoundError):
        afs.rename_file("/d", "/e")


def test_rename_dir_does_not_see_files(afs):
    afs.create_file("/f")
    with pytest.raises(AFSPathNotFoundError):
        afs.rename_dir("/f", "/g")


def test_rename_file_destination_exists_raises(afs):
    afs.create_file("/a.bin", size=1)
    afs.create_file("/b.bin", size=2)
    with pytest.raises(AFSFileExistsError) as exc_info:
        afs.rename_file("/a.bin", "/b.bin")
    assert exc_info.value.existing["size"] == 2
    assert afs.stat("/a.bin")["size"] == 1


def test_rename_dir_destination_exists_raises(afs):
    afs.create_dir("/a")
    afs.create_dir("/b")
    with pytest.raises(AFSDirectoryExistsError):
        afs.rename_dir("/a", "/b")


def test_rename_to_same_name_raises(afs):
    afs.create_file("/a")
    with pytest.raises(AFSFileExistsError):
        afs.rename_file("/a", "/a")


def test_rename_across_directories_rejected(afs):
    afs.create_dir("/a")
    afs.create_dir("/b")
    afs.create_file("/a/f", size=3)
    with pytest.raises(AFSRenamePathMismatchError):
        afs.rename_file("/a/f", "/b/f")
    assert afs.stat("/a/f")["size"] == 3
    assert not afs.exists("/b/f")


def test_rename_dir_across_directories_rejected(afs):
    afs.create_dir("/a")
    afs.create_dir("/a/inner")
    with pytest.raises(AFSRenamePathMismatchError):
        afs.rename_dir("/a/inner", "/inner")
    assert afs.is_dir("/a/inner")


def test_rename_destination_parent_missing_raises(afs):
    afs.create_file("/a.bin")
    with pytest.raises(AFSPathNotFoundError):
        afs.rename_file("/a.bin", "/nonexistent_dir/b.bin")


def test_rename_root_raises(afs):
    with pytest.raises(AFSRootOperationError):
        afs.rename_dir("/", "/newroot")


def test_rename_mismatch_is_value_error(afs):
    afs.create_dir("/a")
    afs.create_dir("/b")
    afs.create_file("/a/f")
    with pytest.raises(ValueError):
        afs.rename_file("/a/f", "/b/g")
