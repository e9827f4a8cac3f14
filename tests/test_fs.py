import pytest

from ginweb.fs import (
    DirFileSystem,
    NeutralizedReaddirFile,
    OnlyFilesFS,
    TemplateFileSystem,
    dir_fs,
)


class MockFileSystem:
    def __init__(self, opener):
        self._opener = opener

    def open(self, name):
        return self._opener(name)


class MockError(Exception):
    pass


def _failing(_name):
    raise MockError("mock")


def test_only_files_fs_open():
    sentinel = object()
    fs = OnlyFilesFS(MockFileSystem(lambda name: sentinel))
    file = fs.open("foo")
    assert isinstance(file, NeutralizedReaddirFile)
    assert file.file is sentinel


def test_only_files_fs_open_error():
    fs = OnlyFilesFS(MockFileSystem(_failing))
    with pytest.raises(MockError, match="mock"):
        fs.open("foo")


def test_neutralized_readdir():
    assert NeutralizedReaddirFile(None).readdir(0) == []


def test_dir_list_directory():
    assert dir_fs("foo", True) == DirFileSystem("foo")


def test_dir():
    assert dir_fs("foo", False) == OnlyFilesFS(DirFileSystem("foo"))


def test_template_file_system_open():
    sentinel = object()
    fs = TemplateFileSystem(MockFileSystem(lambda name: sentinel))
    assert fs.open("foo") is sentinel


def test_template_file_system_open_error():
    fs = TemplateFileSystem(MockFileSystem(_failing))
    with pytest.raises(MockError):
        fs.open("foo")


def test_dir_file_system_reads_files(tmp_path):
    (tmp_path / "hello.txt").write_bytes(b"hello")
    fs = DirFileSystem(str(tmp_path))
    with fs.open("hello.txt") as f:
        assert f.read() == b"hello"
    with fs.open("/../../hello.txt") as f:
        assert f.read() == b"hello"


def test_dir_file_system_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        DirFileSystem(str(tmp_path)).open("missing.txt")


def test_dir_file_system_lists_directory(tmp_path):
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "a.txt").write_text("a")
    with DirFileSystem(str(tmp_path)).open("/") as d:
        assert [entry.name for entry in d.readdir(0)] == ["a.txt", "b.txt"]
        assert [entry.name for entry in d.readdir(1)] == ["a.txt"]


def test_only_files_hides_listing(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    with dir_fs(str(tmp_path), False).open("/") as d:
        assert d.readdir(0) == []
    with dir_fs(str(tmp_path), False).open("a.txt") as f:
        assert f.read() == b"a"


def test_readdir_on_file_fails(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    with DirFileSystem(str(tmp_path)).open("a.txt") as f:
        with pytest.raises(NotADirectoryError):
            f.readdir()