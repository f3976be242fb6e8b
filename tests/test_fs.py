import pytest

from foxengine.fs import FileLoadMode, LoadedFile, StageFileSystem, to_full_stage_path


@pytest.fixture
def stage_root(tmp_path):
    init = tmp_path / "stage" / "init"
    init.mkdir(parents=True)
    (init / "data.cnf").write_bytes(b".cache\nfile.dar\n")
    other = tmp_path / "stage" / "s04a"
    other.mkdir(parents=True)
    (other / "scenerio.gcx").write_bytes(b"\x00\x01\x02\x03\x04")
    return tmp_path


def test_full_stage_path():
    assert to_full_stage_path("init", "data.cnf") == "stage/init/data.cnf"


@pytest.mark.parametrize(
    "mode_value, expected_name",
    [
        (1, "Cache"),
        (0, "NoCache"),
        (2, "Resident"),
        (3, "Sound"),
    ],
)
def test_mode_names(stage_root, mode_value, expected_name):
    fs = StageFileSystem(stage_root)
    loaded = fs.load_request("data.cnf", mode_value)
    assert str(loaded.mode) == expected_name


def test_load_request_then_read(stage_root):
    fs = StageFileSystem(stage_root)
    loaded = fs.load_request("data.cnf", FileLoadMode.CACHE)
    assert loaded.size == len(b".cache\nfile.dar\n")
    assert loaded.data is None
    read = fs.read_pending()
    assert read is loaded
    assert read.data == b".cache\nfile.dar\n"


def test_read_pending_only_once(stage_root):
    fs = StageFileSystem(stage_root)
    fs.load_request("data.cnf", FileLoadMode.NO_CACHE)
    assert fs.read_pending() is not None
    assert fs.read_pending() is None


def test_nothing_pending_initially(stage_root):
    assert StageFileSystem(stage_root).read_pending() is None


def test_asterisk_is_stripped(stage_root):
    fs = StageFileSystem(stage_root)
    loaded = fs.load_request("*data.cnf", FileLoadMode.CACHE)
    assert loaded.name == "data.cnf"
    assert loaded.path == stage_root / "stage" / "init" / "data.cnf"


def test_set_stage_changes_folder(stage_root):
    fs = StageFileSystem(stage_root)
    fs.set_stage("s04a")
    loaded = fs.load_request("scenerio.gcx", FileLoadMode.CACHE)
    assert fs.read_pending().data == b"\x00\x01\x02\x03\x04"
    assert loaded.path.parent.name == "s04a"


def test_missing_file_raises(stage_root):
    fs = StageFileSystem(stage_root)
    with pytest.raises(FileNotFoundError):
        fs.load_request("absent.bin", FileLoadMode.CACHE)


def test_new_request_replaces_pending(stage_root):
    fs = StageFileSystem(stage_root, "s04a")
    fs.load_request("scenerio.gcx", FileLoadMode.CACHE)
    fs.set_stage("init")
    second = fs.load_request("data.cnf", FileLoadMode.CACHE)
    assert fs.read_pending() is second
    assert fs.read_pending() is None


def test_resident_memory_is_aligned(stage_root):
    fs = StageFileSystem(stage_root, "s04a")
    fs.load_request("scenerio.gcx", FileLoadMode.RESIDENT)
    assert fs.resident_used % 4 == 0
    assert fs.resident_used >= 5 + 1
    fs.load_request("scenerio.gcx", FileLoadMode.CACHE)
    fs.load_request("scenerio.gcx", FileLoadMode.SOUND)
    assert fs.resident_used == 8


def test_unknown_mode_is_kept(stage_root):
    fs = StageFileSystem(stage_root)
    loaded = fs.load_request("data.cnf", 9)
    assert loaded.mode == 9
    assert fs.resident_used == 0
    assert fs.read_pending().data.startswith(b".cache")


def test_int_mode_becomes_enum(stage_root):
    fs = StageFileSystem(stage_root)
    loaded = fs.load_request("data.cnf", 2)
    assert loaded.mode is FileLoadMode.RESIDENT
    assert isinstance(loaded, LoadedFile) and loaded.size > 0