"""Disassembler for compiled GCL script procs.

Numbers in GCL byte code are big-endian. The disassembly is returned as
text, one statement per line, with every number written in lower-case
hexadecimal.
"""

from __future__ import annotations

from typing import Optional, Union

Bytes = Union[bytes, bytearray, memoryview]

OP_END = 0x00
OP_READ_S16 = 0x01
OP_READ_U8 = (0x02, 0x03, 0x04)
OP_READ_U16 = (0x06, 0x08)
OP_READ_STRING = 0x07
OP_READ_U32 = (0x09, 0x0A)
OP_READ_STACK = 0x20
OP_BLOCK = 0x30
OP_BLOCK_END = 0x31
OP_VAR_WRITE = 0x14
OP_JUMP = 0x40
OP_PARAM = 0x50
OP_COMMAND = 0x60
OP_CALL = 0x70

BUILTIN_COMMANDS: dict[int, str] = {
    0x0D86: "IF",
    0xC8BB: "LOAD",
    0x9906: "CHARA",
    0x64C0: "EVAL",
}


class GclError(ValueError):
    """Raised when GCL byte code cannot be walked."""


def read_word(data: Bytes, offset: int) -> int:
    """Read a big-endian 16-bit value."""
    if offset < 0 or offset + 2 > len(data):
        raise GclError(f"16-bit read at offset {offset} is outside the script")
    return int.from_bytes(bytes(data[offset:offset + 2]), "big")


def read_dword(data: Bytes, offset: int) -> int:
    """Read a big-endian 32-bit value."""
    if offset < 0 or offset + 4 > len(data):
        raise GclError(f"32-bit read at offset {offset} is outside the script")
    return int.from_bytes(bytes(data[offset:offset + 4]), "big")


class _Disassembler:
    def __init__(self, data: Bytes) -> None:
        self.data = bytes(data)
        self.parts: list[str] = []

    def emit(self, text: str) -> None:
        self.parts.append(text)

    def text(self) -> str:
        return "".join(self.parts)

    def byte(self, offset: int) -> int:
        if offset < 0 or offset >= len(self.data):
            raise GclError(f"byte read at offset {offset} is outside the script")
        return self.data[offset]

    def proc(self, offset: int) -> None:
        while True:
            code = self.byte(offset)
            if code == OP_END:
                self.emit("END\n")
                return
            if code == OP_CALL:
                offset = self.call(offset)
            elif code == OP_COMMAND:
                offset = self.command(offset)
            elif code == OP_JUMP:
                offset = self.jump(offset)
            else:
                self.emit(f"Unknown code 0x{code:x}\n")
                return

    def call(self, offset: int) -> int:
        length = self.byte(offset + 1)
        proc_id = read_word(self.data, offset + 2)
        self.emit(f"CALL({proc_id:x})\n")
        return offset + 1 + length

    def jump(self, offset: int) -> int:
        distance = read_word(self.data, offset + 1)
        self.emit(f"JUMP_BY(0x{distance:x})\n")
        return offset + 3

    def command(self, offset: int) -> int:
        length = read_word(self.data, offset + 1)
        command_id = read_word(self.data, offset + 3)
        end = self.builtin(offset + 5, command_id, length - 4)
        return end if end is not None else offset + length + 1

    def builtin(self, offset: int, command_id: int, length: int) -> Optional[int]:
        name = BUILTIN_COMMANDS.get(command_id)
        if name is None:
            self.emit(f"CMD_UNKNOWN(0x{command_id:x})\n")
            return None
        self.emit(f"{name}(")
        end = offset + length
        position = offset + 1
        while True:
            following = self.expression(position, length)
            if following == position:
                raise GclError(f"expression at offset {position} cannot be read")
            position = following
            if position == end:
                break
            if position > end:
                raise GclError(
                    f"command {name} runs past its end at offset {end}"
                )
        self.emit(")\n")
        return position

    def block(self, offset: int, length: int) -> None:
        if self.byte(offset) == OP_END:
            self.emit("UNKNOWN6_END_1()\n")
            return
        while True:
            while self.byte(offset) != OP_BLOCK_END:
                following = self.expression(offset, length)
                if following == offset:
                    raise GclError(f"expression at offset {offset} cannot be read")
                offset = following
            offset += 1
            code = self.byte(offset)
            if code == OP_END:
                self.emit("UNKNOWN6_END_2()\n")
                return
            self.emit("VAR_WRITE()\n" if code == OP_VAR_WRITE else "LOGIC_OP()\n")
            offset += 1

    def string_at(self, offset: int) -> str:
        end = self.data.find(b"\x00", offset)
        if offset > len(self.data) or end < 0:
            raise GclError(f"string at offset {offset} is not terminated")
        return self.data[offset:end].decode("latin-1")

    def expression(self, offset: int, length: int) -> int:
        code = self.byte(offset)
        if code & 0xF0 == 0x10:
            return offset + 4
        if code == OP_CALL:
            return self.call(offset)
        if code == OP_COMMAND:
            return self.command(offset)
        if code == OP_READ_STACK:
            self.emit(f"READ_STACK({self.byte(offset + 1):x})\n")
            return offset + 2
        if code == OP_BLOCK:
            block_length = self.byte(offset + 1)
            self.block(offset + 2, block_length)
            return offset + block_length
        if code == OP_JUMP:
            return self.jump(offset)
        if code == OP_PARAM:
            self.emit(f"PARAM({chr(self.byte(offset + 1))})\n")
            return offset + 3
        if code == OP_END:
            return offset + 1
        if code == OP_READ_S16:
            self.emit(f"READ_S16(0x{read_word(self.data, offset + 1):x})\n")
            return offset + 3
        if code in OP_READ_U8:
            self.emit(f"READ_U8(0x{self.byte(offset + 1):x})\n")
            return offset + 2
        if code == OP_READ_STRING:
            size = self.byte(offset + 1)
            self.emit(f"READ_STRING({self.string_at(offset + 2)})\n")
            return offset + size + 2
        if code in OP_READ_U16:
            self.emit(f"READ_U16(0x{read_word(self.data, offset + 1):x})\n")
            return offset + 3
        if code in OP_READ_U32:
            self.emit(f"READ_U32(0x{read_dword(self.data, offset + 1):x})\n")
            return offset + 5
        self.emit(f"Unknown sub code 0x{code:x}\n")
        return offset


def disassemble_proc(data: Bytes, offset: int = 0) -> str:
    """Disassemble the top-level statements of one proc, up to its END."""
    disassembler = _Disassembler(data)
    disassembler.proc(offset)
    return disassembler.text()


def disassemble_expression(data: Bytes, offset: int, length: int) -> tuple[str, int]:
    """Disassemble one expression item.

    Returns the text and the offset after the item; an unknown code leaves
    the offset where it was. The length is that of the enclosing block and
    is handed on to nested blocks.
    """
    disassembler = _Disassembler(data)
    following = disassembler.expression(offset, length)
    return disassembler.text(), following