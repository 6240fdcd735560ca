import pytest

from blockscan.multifile import Multifile, SingleFileInfo


def test_add_file_records_ranges(tmp_path):
    mf = Multifile()
    mf.add_file(0, 10, str(tmp_path / "a"))
    mf.add_file(10, 30, str(tmp_path / "b"))
    assert mf.files_info == [
        SingleFileInfo(0, 10, str(tmp_path / "a")),
        SingleFileInfo(10, 30, str(tmp_path / "b")),
    ]


def test_delete_files_removes_from_disk(tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    a.write_bytes(b"\x00")
    b.write_bytes(b"\x00")
    mf = Multifile()
    mf.add_file(0, 8, str(a))
    mf.add_file(8, 16, str(b))
    mf.delete_files()
    assert not a.exists() and not b.exists()
    assert mf.files_info == []


def test_context_manager_deletes(tmp_path):
    a = tmp_path / "a"
    a.write_bytes(b"\x00")
    with Multifile() as mf:
        mf.add_file(0, 8, str(a))
        assert a.exists()
    assert not a.exists()


def test_delete_missing_file_raises(tmp_path):
    mf = Multifile()
    mf.add_file(0, 8, str(tmp_path / "missing"))
    with pytest.raises(FileNotFoundError):
        mf.delete_files()