import pytest

from memedit.common import OpType, ScanType
from memedit.scancommand import ScanCommand, get_scan_command


@pytest.mark.parametrize(
    "text, expected",
    [("1", 4), ("s:'20'", 2), ("w:5", 5), ("s:'2', w:5, s:'3'", 7)],
)
def test_get_size(text, expected):
    assert ScanCommand(text).size() == expected


def test_multi_arounds():
    command = ScanCommand("~ 1, ~ 2", ScanType.FLOAT64)
    assert command.size() == 16
    assert command.first_scan_type() == ScanType.FLOAT64

    subs = command.sub_commands
    assert subs[0].size() == 8
    assert subs[0].op is OpType.AROUND
    assert subs[1].size() == 8
    assert subs[1].op is OpType.AROUND


def test_get_scan_command():
    assert len(get_scan_command("1").sub_commands) == 1


def test_first_scan_type_from_prefix():
    assert ScanCommand("i16:3, w:2", "int32").first_scan_type() == ScanType.INT16


def test_match_sequence():
    command = ScanCommand("s:'ab', w:2, s:'cd'")
    assert command.match(b"abXXcd") is True
    assert command.match(b"abXXce") is False
    assert command.match(b"__abYYcd", 2) is True


def test_match_numeric_array():
    command = ScanCommand("i16:1, i16:2")
    assert command.match(bytes([1, 0, 2, 0])) is True
    assert command.match(bytes([2, 0, 1, 0])) is False