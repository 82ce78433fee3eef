import io

import pytest

from subcast.features.temp_files.data.scratch_dir import ScratchDirManager
from subcast.features.temp_files.service.api import TempScope


def test_directory_created_on_first_allocation(tmp_path):
    root = tmp_path / "scratch"
    manager = ScratchDirManager(root)
    assert not root.exists()

    path = manager.allocate("mp4")

    assert root.exists()
    assert path.parent == root.resolve()
    assert path.suffix == ".mp4"
    assert not path.exists()


def test_allocated_paths_are_unique(scratch):
    paths = {scratch.allocate("mp3") for _ in range(200)}
    assert len(paths) == 200


def test_suffix_is_part_of_the_name(scratch):
    path = scratch.allocate(".jpg", suffix="thumb")
    assert path.name.endswith("-thumb.jpg")


def test_release_is_idempotent(scratch):
    path = scratch.allocate("txt")
    path.write_text("data")

    assert scratch.release(path) is True
    assert not path.exists()
    assert scratch.release(path) is False


def test_release_refuses_paths_outside_scratch(scratch, tmp_path):
    outside = tmp_path / "keep_me.txt"
    outside.write_text("important")

    assert scratch.release(outside) is False
    assert outside.exists()

    # Traversal out of the root is caught too
    scratch.allocate("txt")
    sneaky = scratch.root / ".." / "keep_me.txt"
    assert scratch.release(sneaky) is False
    assert outside.exists()


def test_save_stream_from_file_object(scratch):
    payload = b"x" * 200_000
    path = scratch.save_stream(io.BytesIO(payload), "bin")

    assert path.read_bytes() == payload
    assert scratch.contains(path)


def test_save_stream_from_chunks(scratch):
    path = scratch.save_stream([b"abc", b"def"], "txt")
    assert path.read_bytes() == b"abcdef"


def test_save_stream_removes_partial_file_on_failure(scratch):
    def broken_stream():
        yield b"partial"
        raise IOError("connection reset")

    with pytest.raises(IOError):
        scratch.save_stream(broken_stream(), "mp4")

    assert list(scratch.root.iterdir()) == []


def test_scope_releases_everything_on_success(scratch):
    with TempScope(scratch) as scope:
        a = scope.allocate("mp4")
        b = scope.allocate("mp3")
        a.write_bytes(b"a")
        b.write_bytes(b"b")

    assert not a.exists()
    assert not b.exists()


def test_scope_releases_everything_on_error(scratch):
    with pytest.raises(RuntimeError):
        with TempScope(scratch) as scope:
            a = scope.allocate("mp4")
            a.write_bytes(b"a")
            adopted = scope.adopt(scratch.save_stream([b"b"], "jpg"))
            raise RuntimeError("step failed")

    assert not a.exists()
    assert not adopted.exists()
    assert list(scratch.root.iterdir()) == []


def test_scope_adopts_each_path_once(scratch):
    scope = TempScope(scratch)
    path = scratch.save_stream([b"x"], "txt")

    scope.adopt(path)
    scope.adopt(path)

    assert scope.release_all() == 1
