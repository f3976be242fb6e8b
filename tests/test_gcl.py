import pytest

from foxengine.gcl import (
    GclError,
    disassemble_expression,
    disassemble_proc,
    read_dword,
    read_word,
)

EVAL_READ_U8 = bytes.fromhex(
    "60 00 12 64 C0 0D 30 0B 14 02 00 2D 02 00 31 14 31 00 00".replace(" ", "")
)
EVAL_READ_U16 = bytes.fromhex(
    "60 00 13 64 C0 0E 30 0C 16 00 00 40 06 AD BF 31 14 31 00 00".replace(" ", "")
)
CALLS = bytes.fromhex(
    (
        "40 00 22 60 00 0F 9A 1F 01 50 73 01 50 66 01 50 6D 01 00 "
        "70 04 65 D5 00 70 04 D0 BB 00 70 04 DF 2A 00 00"
    ).replace(" ", "")
)


def test_read_word_is_big_endian():
    assert read_word(b"\x00\x12", 0) == 0x12
    assert read_word(b"\xff\x64\xc0", 1) == 0x64C0


@pytest.mark.parametrize("value", [0, 1, 0x01020304, 0xFFFFFFFF])
def test_read_dword_round_trip(value):
    data = b"\xaa" + value.to_bytes(4, "big")
    assert read_dword(data, 1) == value


def test_reads_outside_data_raise():
    with pytest.raises(GclError):
        read_word(b"\x01", 0)
    with pytest.raises(GclError):
        read_dword(b"\x01\x02\x03", 0)


def test_eval_with_u8_block():
    text = disassemble_proc(EVAL_READ_U8 + b"\x00")
    assert text == "EVAL(READ_U8(0x0)\nVAR_WRITE()\nUNKNOWN6_END_2()\n)\nEND\n"


def test_eval_with_u16_block():
    text = disassemble_proc(EVAL_READ_U16 + b"\x00")
    assert text == "EVAL(READ_U16(0xadbf)\nVAR_WRITE()\nUNKNOWN6_END_2()\n)\nEND\n"


def test_commands_follow_each_other():
    text = disassemble_proc(EVAL_READ_U16 + EVAL_READ_U8 + b"\x00")
    assert text.count("EVAL(") == 2
    assert text.endswith("END\n")


def test_jump_unknown_command_and_calls():
    text = disassemble_proc(CALLS)
    assert text.splitlines() == [
        "JUMP_BY(0x22)",
        "CMD_UNKNOWN(0x9a1f)",
        "CALL(65d5)",
        "CALL(d0bb)",
        "CALL(df2a)",
        "END",
    ]


def test_unknown_top_level_code_stops():
    assert disassemble_proc(b"\xee\x00") == "Unknown code 0xee\n"


def test_proc_without_end_raises():
    with pytest.raises(GclError):
        disassemble_proc(b"\x40\x00\x01")


def test_proc_offset_is_honoured():
    assert disassemble_proc(b"\xee\x00", 1) == "END\n"


@pytest.mark.parametrize(
    "data, expected_text, expected_offset",
    [
        (b"\x07\x04abc\x00", "READ_STRING(abc)\n", 6),
        (b"\x50\x61\x00", "PARAM(a)\n", 3),
        (b"\x12\x00\x00\x00", "", 4),
        (b"\x00", "", 1),
    ],
)
def test_expression_items(data, expected_text, expected_offset):
    assert disassemble_expression(data, 0, len(data)) == (expected_text, expected_offset)


@pytest.mark.parametrize("code", [2, 3, 4])
def test_u8_codes_share_a_form(code):
    text, following = disassemble_expression(bytes([code, 0x7F]), 0, 2)
    assert text == "READ_U8(0x7f)\n"
    assert following == 2


@pytest.mark.parametrize("code", [6, 8])
def test_u16_codes_share_a_form(code):
    data = bytes([code]) + (0xADBF).to_bytes(2, "big")
    text, following = disassemble_expression(data, 0, len(data))
    assert text == "READ_U16(0xadbf)\n"
    assert following == len(data)


@pytest.mark.parametrize("code", [9, 10])
def test_u32_codes_share_a_form(code):
    data = bytes([code]) + (0xADBF).to_bytes(4, "big")
    text, following = disassemble_expression(data, 0, len(data))
    assert text == "READ_U32(0xadbf)\n"
    assert following == len(data)


def test_s16_and_stack_reads():
    assert disassemble_expression(b"\x01\x00\x12", 0, 3) == ("READ_S16(0x12)\n", 3)
    assert disassemble_expression(b"\x20\x05", 0, 2) == ("READ_STACK(5)\n", 2)


def test_unknown_sub_code_does_not_advance():
    assert disassemble_expression(b"\xff", 0, 1) == ("Unknown sub code 0xff\n", 0)


def test_expression_can_hold_a_command():
    text, following = disassemble_expression(EVAL_READ_U8, 0, len(EVAL_READ_U8))
    assert following == len(EVAL_READ_U8)
    assert text.startswith("EVAL(") and text.endswith(")\n")


def test_block_that_starts_with_end():
    text, following = disassemble_expression(b"\x30\x03\x00", 0, 3)
    assert text == "UNKNOWN6_END_1()\n"
    assert following == 3


def test_command_with_unreadable_item_raises():
    with pytest.raises(GclError):
        disassemble_proc(b"\x60\x00\x06\x64\xc0\x02\xff\x00")


def test_unterminated_string_raises():
    with pytest.raises(GclError):
        disassemble_expression(b"\x07\x03abc", 0, 5)