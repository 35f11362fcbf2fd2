import pytest

from memedit.common import OpType, ScanType
from memedit.subcommand import (
    Command,
    SubCommand,
    extract_number,
    extract_string,
    get_cmd_string,
    parse_cmd,
    scan_type_for,
    strip_command,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1", Command.NOOP),
        ("s:'1'", Command.STR),
        ("w:10", Command.WILDCARD),
        ("i8:5", Command.INT8),
        ("f64:1.5", Command.FLOAT64),
    ],
)
def test_parse_cmd(text, expected):
    assert parse_cmd(text) is expected


def test_get_operands():
    sub = SubCommand("2")
    assert sub.operands.first() == bytes([2, 0, 0, 0])


def test_get_cmd_with_string():
    sub = SubCommand("s:'20'")
    assert sub.operands.first_size() == 2
    assert sub.operands.first() == bytes([0x32, 0x30])


def test_get_wildcard_steps():
    sub = SubCommand("w:20")
    assert sub.wildcard_steps == 20
    assert sub.size() == 20


def test_initialize():
    assert SubCommand("i8:1").op is OpType.EQ
    assert SubCommand("i8: ~ 2").op is OpType.AROUND


def test_around_operands_for_int8():
    sub = SubCommand("i8: ~ 2")
    assert sub.operands.first() == bytes([1])
    assert sub.operands.second() == bytes([3])


def test_custom_falls_back_to_int32():
    sub = SubCommand("7", ScanType.CUSTOM)
    assert sub.size() == 4
    assert sub.operands.first() == bytes([7, 0, 0, 0])


def test_extract_helpers():
    assert extract_string("s:'testing'") == "testing"
    assert extract_string("12") == ""
    assert extract_number("w: 15") == 15
    assert extract_number("12") == 0


def test_cmd_string_and_strip():
    assert get_cmd_string("i16: 3") == "i16:"
    assert get_cmd_string("3") == ""
    assert strip_command("s:'testing'") == "'testing'"


def test_scan_type_for():
    assert scan_type_for("w:3", "int32") == ScanType.INT8
    assert scan_type_for("s:'a'", "int32") == ScanType.STRING
    assert scan_type_for("5", "custom") == ScanType.INT32
    assert scan_type_for("5", "float64") == "float64"


def test_match():
    sub = SubCommand("100")
    data = (100).to_bytes(4, "little") + (7).to_bytes(4, "little")
    assert sub.match(data) == (True, 4)
    assert sub.match(data, 4) == (False, 4)
    assert sub.match(data, 6) == (False, 4)


def test_match_greater():
    sub = SubCommand("i16: > 5")
    assert sub.match(bytes([6, 0])) == (True, 2)
    assert sub.match(bytes([5, 0])) == (False, 2)


def test_wildcard_always_matches():
    assert SubCommand("w:3").match(b"") == (True, 3)