"""Stage file requests: a file is sized on request and read in afterwards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class FileLoadMode(IntEnum):
    """How a requested file is held once it has been read."""

    NO_CACHE = 0
    CACHE = 1
    RESIDENT = 2
    SOUND = 3

    def __str__(self) -> str:
        return _MODE_NAMES[self]


_MODE_NAMES = {
    FileLoadMode.CACHE: "Cache",
    FileLoadMode.NO_CACHE: "NoCache",
    FileLoadMode.RESIDENT: "Resident",
    FileLoadMode.SOUND: "Sound",
}


def _mode_name(mode: Union[FileLoadMode, int]) -> str:
    try:
        return str(FileLoadMode(mode))
    except ValueError:
        return "Unknown"


def _round_up(value: int, alignment: int) -> int:
    return (value + alignment - 1) // alignment * alignment


def to_full_stage_path(stage_name: str, file_name: str) -> str:
    """The path of a stage file, e.g. 'stage/init/data.cnf'."""
    return f"stage/{stage_name}/{file_name}"


@dataclass
class LoadedFile:
    """A requested file; data is filled in when the pending read is done."""

    name: str
    path: Path
    mode: Union[FileLoadMode, int]
    size: int
    data: Optional[bytes] = None


class StageFileSystem:
    """Serves file requests from the folder of the current stage."""

    def __init__(self, root: Union[str, Path], stage_name: str = "init") -> None:
        self.root = Path(root)
        self.stage_name = stage_name
        self.resident_used = 0
        self._pending: Optional[LoadedFile] = None

    def set_stage(self, stage_name: str) -> None:
        """Make later requests read from another stage."""
        self.stage_name = stage_name

    def load_request(self, file_name: str, mode: Union[FileLoadMode, int]) -> LoadedFile:
        """Size a stage file and make it the pending read.

        A leading '*' on the name is dropped. A request replaces any read
        still pending. Resident files are counted against resident memory.
        Raises FileNotFoundError when the file does not exist.
        """
        try:
            mode = FileLoadMode(mode)
        except ValueError:
            pass
        logger.info("FS_LoadRequest: %s %s", file_name, _mode_name(mode))
        name = file_name[1:] if file_name.startswith("*") else file_name
        path = self.root / to_full_stage_path(self.stage_name, name)
        size = path.stat().st_size
        if mode == FileLoadMode.RESIDENT:
            self.resident_used += _round_up(size + 1, 4)
        loaded = LoadedFile(name=name, path=path, mode=mode, size=size)
        self._pending = loaded
        return loaded

    def read_pending(self) -> Optional[LoadedFile]:
        """Read the pending file into its data; None when nothing is pending."""
        pending = self._pending
        if pending is None:
            return None
        self._pending = None
        with pending.path.open("rb") as handle:
            pending.data = handle.read(pending.size)
        return pending