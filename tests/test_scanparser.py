import pytest

from memedit import scanparser
from memedit.common import MedError, OpType, ScanType
from memedit.stringutil import trim


def test_trim():
    assert trim(" foo bar   ") == "foo bar"


@pytest.mark.parametrize("op", [">", "<", "!", "=", "?"])
def test_snapshot_get_op(op):
    assert scanparser.get_op(op) == op


@pytest.mark.parametrize(
    "text, expected",
    [
        ("<", OpType.LT),
        (">", OpType.GT),
        ("!", OpType.NEQ),
        ("=", OpType.EQ),
        ("", OpType.EQ),
        ("?", OpType.SNAPSHOT_SAVE),
        (">=", OpType.GE),
        ("<=", OpType.LE),
        ("<>", OpType.WITHIN),
        ("~", OpType.AROUND),
    ],
)
def test_string_to_op_type(text, expected):
    assert scanparser.string_to_op_type(text) is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("=1234", "="),
        ("> 1234", ">"),
        (">=1234", ">="),
        ("!1234", "!"),
        ("<=1234", "<="),
        ("<1234", "<"),
        ("1234", ""),
        (" <> 1234 5432 ", "<>"),
        (" < ", "<"),
    ],
)
def test_get_op(text, expected):
    assert scanparser.get_op(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("<123", "123"),
        ("!4321", "4321"),
        (">=4321", "4321"),
        ("4321", "4321"),
        ("  >=   4321.1234   ", "4321.1234"),
        ("<", ""),
    ],
)
def test_get_value(text, expected):
    assert scanparser.get_value(text) == expected


def test_is_array():
    assert scanparser.is_array("1,2,3") is True
    assert scanparser.is_array("1 2 3") is False
    assert scanparser.is_array("1 2 3", " ") is True


def test_get_values():
    values = scanparser.get_values("<> 1 , 2 , 3  ")
    assert len(values) == 3
    assert values[2] == "3"

    values = scanparser.get_values("  > 10")
    assert values == ["10"]


def test_value_to_operands_to_string():
    result = scanparser.value_to_operands("1", ScanType.STRING)
    assert result.count() == 1
    assert result.first() == bytes([49])

    result = scanparser.value_to_operands("100", ScanType.STRING)
    assert result.count() == 1
    assert result.first() == bytes([49, 48, 48])


def test_value_to_operands_to_numeric():
    result = scanparser.value_to_operands("1", ScanType.INT32)
    assert result.count() == 1
    assert result.first() == bytes([1, 0, 0, 0])

    result = scanparser.value_to_operands("> 10", ScanType.INT32)
    assert result.count() == 1
    assert result.first() == bytes([10, 0, 0, 0])


def test_value_to_operands_within_gives_two():
    result = scanparser.value_to_operands("<> 3 7", "int16", OpType.WITHIN)
    assert result.count() == 2
    assert result.first() == bytes([3, 0])
    assert result.second() == bytes([7, 0])


def test_get_two_operands():
    result = scanparser.get_two_operands("<> 1 200", ScanType.INT32)
    assert result.count() == 2
    assert result.first() == bytes([1, 0, 0, 0])
    assert result.second() == bytes([200, 0, 0, 0])


def test_get_two_operands_needs_two_values():
    with pytest.raises(MedError):
        scanparser.get_two_operands("<> 1", ScanType.INT32)


def test_around():
    result = scanparser.get_two_operands("~ 10", ScanType.INT32, OpType.AROUND)
    assert result.count() == 2
    assert result.first() == bytes([9, 0, 0, 0])
    assert result.second() == bytes([11, 0, 0, 0])

    result = scanparser.get_two_operands("~ 10 2", ScanType.INT32, OpType.AROUND)
    assert result.count() == 2
    assert result.first() == bytes([8, 0, 0, 0])
    assert result.second() == bytes([12, 0, 0, 0])


def test_convert_around_to_within_values():
    assert scanparser.convert_around_to_within_values("~ 10") == ["9.000000", "11.000000"]
    assert scanparser.convert_around_to_within_values("~ 10 2") == ["8.000000", "12.000000"]


def test_convert_around_without_value_raises():
    with pytest.raises(MedError):
        scanparser.convert_around_to_within_values("~")


def test_get_integers():
    assert scanparser.get_integers("9, a") == [9, 10]
    assert scanparser.get_integers("") == []


def test_numeric_to_bytes_array():
    assert scanparser.numeric_to_bytes("1, 2", "int16") == bytes([1, 0, 2, 0])


def test_numeric_to_bytes_empty_raises():
    with pytest.raises(MedError):
        scanparser.numeric_to_bytes("<", "int32")


def test_value_to_bytes_string():
    assert scanparser.value_to_bytes("abc", "string") == b"abc"


def test_string_to_bytes_empty_raises():
    with pytest.raises(MedError):
        scanparser.string_to_bytes("")


def test_is_valid():
    assert scanparser.is_valid("<>1") is False
    assert scanparser.is_valid("<> 1 2") is True
    assert scanparser.is_valid("> 1") is True


def test_has_values():
    assert scanparser.has_values("<") is False
    assert scanparser.has_values("< 3") is True


def test_is_snapshot_operator():
    assert scanparser.is_snapshot_operator(OpType.GT) is True
    assert scanparser.is_snapshot_operator(OpType.SNAPSHOT_SAVE) is True
    assert scanparser.is_snapshot_operator(OpType.GE) is False
    assert scanparser.is_snapshot_operator(OpType.WITHIN) is False