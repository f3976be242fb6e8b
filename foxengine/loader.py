"""Stage loading driven by a stage's data.cnf, DAR archives and hi-res texture names."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Deque, Iterable, Iterator, Optional, Union

from .fs import FileLoadMode, StageFileSystem

logger = logging.getLogger(__name__)

Hasher = Callable[[str], int]
FileHandler = Callable[[bytes, int, FileLoadMode], Optional[int]]

_NEWLINES = "\r\n"
_MODE_DIRECTIVES = {
    "c": FileLoadMode.CACHE,
    "n": FileLoadMode.NO_CACHE,
    "r": FileLoadMode.RESIDENT,
    "s": FileLoadMode.SOUND,
}


def get_line(text: str) -> tuple[str, Optional[str]]:
    """Split the next line off text.

    Leading line breaks are skipped and one line break after the line is
    consumed. Returns the line and the rest, or None as the rest when the
    text is used up.
    """
    start = 0
    while start < len(text) and text[start] in _NEWLINES:
        start += 1
    if start == len(text):
        return "", None
    end = start
    while end < len(text) and text[end] not in _NEWLINES:
        end += 1
    line = text[start:end]
    if end < len(text):
        end += 1
    if end == len(text):
        return line, None
    return line, text[end:]


def is_extension(file_name: str, extension: str) -> bool:
    """True if what follows the first '.' (or the whole name) equals extension."""
    _, dot, after = file_name.partition(".")
    return (after if dot else file_name) == extension


def count_non_dot_lines(text: str) -> int:
    """Count the lines that are not '.' directives; empty text counts as one line."""
    count = 0
    rest: Optional[str] = text
    while True:
        line, rest = get_line(rest)
        if not line.startswith("."):
            count += 1
        if rest is None:
            return count


@dataclass(frozen=True)
class DarEntry:
    """One file held in a DAR archive."""

    name: str
    data: bytes


def _round_up(value: int, alignment: int) -> int:
    return (value + alignment - 1) // alignment * alignment


def iter_dar_entries(data: Union[bytes, bytearray, memoryview]) -> Iterator[DarEntry]:
    """Walk a DAR archive: a count, then per file a name, its size and its bytes.

    Names are NUL-terminated and padded to a multiple of four; numbers are
    little-endian 32-bit; each file's bytes are followed by one extra byte.
    Raises ValueError when the archive is truncated.
    """
    raw = bytes(data)
    if len(raw) < 4:
        raise ValueError("DAR archive is too short to hold its file count")
    count = int.from_bytes(raw[:4], "little", signed=True)
    position = 4
    for _ in range(count):
        name_end = raw.find(b"\x00", position)
        if name_end < 0:
            raise ValueError(f"DAR entry name at offset {position} is not terminated")
        name = raw[position:name_end].decode("latin-1")
        position = _round_up(name_end + 1, 4)
        if position + 4 > len(raw):
            raise ValueError(f"DAR entry {name!r} has no size")
        size = int.from_bytes(raw[position:position + 4], "little")
        start = position + 4
        if start + size > len(raw):
            raise ValueError(f"DAR entry {name!r} runs past the end of the archive")
        yield DarEntry(name, raw[start:start + size])
        position = start + size + 1


@dataclass
class _HiTexRecord:
    tex_id: int = 0
    in_use: bool = False
    name: Optional[str] = None


class HiTexRegistry:
    """Names of high resolution textures and which of them the stage uses."""

    def __init__(self, hasher: Hasher) -> None:
        self.hasher = hasher
        self._slots: list[_HiTexRecord] = []
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def names(self) -> tuple[str, ...]:
        """The registered names, in load order."""
        return tuple(record.name or "" for record in self._slots[:self._count])

    def load(self, lines: Iterable[str], reset_usage: bool) -> int:
        """Replace the registered names with those of a hitex.dir listing.

        Reading stops at the first empty line; back slashes become '/'. The
        in-use marks of the slots are kept unless reset_usage is true.
        Returns the number of names registered.
        """
        for record in self._slots[:self._count]:
            record.name = None
            record.tex_id = 0
            if reset_usage:
                record.in_use = False
        self._count = 0
        for raw in lines:
            name = raw.split("\r", 1)[0].split("\n", 1)[0]
            if not name:
                break
            name = name.replace("\\", "/")
            if self._count == len(self._slots):
                self._slots.append(_HiTexRecord())
            record = self._slots[self._count]
            record.name = name
            record.tex_id = self.hasher(name)
            logger.info("HITEX_INIT: Id: %-5d Name: %s", record.tex_id, name)
            self._count += 1
        return self._count

    def name_for(self, tex_id: int) -> Optional[str]:
        """The name of an in-use texture with this id, or None."""
        for record in self._slots[:self._count]:
            if record.in_use and record.tex_id == tex_id:
                logger.info("HITEX_NAME: Id: %-5d Name: %s", tex_id, record.name)
                return record.name
        return None

    def enable(self, pcx_name: str) -> bool:
        """Mark the texture whose file name matches pcx_name but for its extension."""
        for record in self._slots[:self._count]:
            _, slash, tga_name = (record.name or "").partition("/")
            if not slash or not tga_name:
                continue
            if len(tga_name) != len(pcx_name):
                continue
            stem = len(tga_name) - 3
            if tga_name[:stem] == pcx_name[:stem]:
                record.in_use = True
                return True
        return False


class _State(Enum):
    START = auto()
    NEXT_FILE = auto()
    READ_FILE = auto()
    DAR = auto()
    DONE = auto()


class StageLoader:
    """Loads the files a stage's data.cnf lists, one step per frame.

    load_file(data, name_hash, mode) is given each file; for DAR entries it
    returns a positive number when done, 0 to be called again with the same
    entry on the next step, and a negative number on failure.
    """

    def __init__(
        self,
        fs: StageFileSystem,
        data_cnf: str,
        load_file: FileHandler,
        hasher: Hasher,
    ) -> None:
        self.fs = fs
        self.data_cnf = data_cnf
        self.load_file = load_file
        self.hasher = hasher
        self.hitex: Optional[HiTexRegistry] = None
        self.mode = FileLoadMode.CACHE
        self.line_count = 0
        self.loaded_count = -1
        self.resident_seen = False
        self.current_name: Optional[str] = None
        self.failed: Optional[str] = None
        self._cursor: Optional[str] = None
        self._dar: Deque[DarEntry] = deque()
        self._state = _State.START

    @property
    def finished(self) -> bool:
        return self._state is _State.DONE

    def step(self) -> bool:
        """Do one piece of loading; False once loading has ended."""
        state = self._state
        if state is _State.START:
            self.fs.read_pending()
            self._cursor = self.data_cnf
            self.mode = FileLoadMode.CACHE
            self.line_count = count_non_dot_lines(self.data_cnf)
            self.loaded_count = 0
            self._state = _State.NEXT_FILE
            return True
        if state is _State.NEXT_FILE:
            if not self._request_next_file():
                self._state = _State.DONE
                return False
            self._state = _State.READ_FILE
            return True
        if state is _State.READ_FILE:
            self._read_file()
            return True
        if state is _State.DAR:
            return self._load_dar_entries()
        return False

    def run(self) -> bool:
        """Step until loading ends; True unless a DAR entry failed to load."""
        while self.step():
            pass
        return self.failed is None

    def _request_next_file(self) -> bool:
        while self._cursor is not None:
            line, self._cursor = get_line(self._cursor)
            if not line:
                return False
            if line.startswith("."):
                mode = _MODE_DIRECTIVES.get(line[1:2])
                if mode is not None:
                    self.mode = mode
                    if mode is FileLoadMode.RESIDENT:
                        self.resident_seen = True
                continue
            request = self.fs.load_request(line, self.mode)
            self.current_name = request.name
            self.loaded_count += 1
            return True
        return False

    def _read_file(self) -> None:
        loaded = self.fs.read_pending()
        if loaded is None or loaded.data is None:
            raise RuntimeError(f"no file was pending for {self.current_name!r}")
        name = self.current_name or loaded.name
        if is_extension(name, "dar"):
            self._dar = deque(iter_dar_entries(loaded.data))
            self._state = _State.DAR
            return
        if self.mode is not FileLoadMode.SOUND:
            self.load_file(loaded.data, self.hasher(name), self.mode)
        self._state = _State.NEXT_FILE

    def _load_dar_entries(self) -> bool:
        while self._dar:
            entry = self._dar[0]
            logger.info("Processing DAR item: %s", entry.name)
            if self.hitex is not None and "pcx" in entry.name:
                self.hitex.enable(entry.name)
            result = self.load_file(entry.data, self.hasher(entry.name), self.mode)
            if not result:
                return True
            if result < 0:
                logger.error("INIT_ERROR in %s !!", entry.name)
                self.failed = entry.name
                self._state = _State.DONE
                return False
            self._dar.popleft()
        self._state = _State.NEXT_FILE
        return True