"""Parsing of scan expressions such as ``">= 10"``, ``"<> 1 5"`` or ``"~ 3"``."""

from __future__ import annotations

import re

from memedit.common import (
    MedError,
    OpType,
    ScanType,
    hex_str_to_int,
    scan_type_to_size,
    string_to_memory,
)
from memedit.operands import Operands
from memedit.stringutil import split, trim

_OP_REGEX = re.compile(r"^(<>|<=|>=|<|>|=|!|\?|~)")
_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_OP_TYPES = {
    "?": OpType.SNAPSHOT_SAVE,
    "<": OpType.LT,
    ">": OpType.GT,
    "=": OpType.EQ,
    "!": OpType.NEQ,
    "<=": OpType.LE,
    ">=": OpType.GE,
    "<>": OpType.WITHIN,
    "~": OpType.AROUND,
}

_SNAPSHOT_OPS = frozenset(
    {OpType.SNAPSHOT_SAVE, OpType.GT, OpType.LT, OpType.EQ, OpType.NEQ}
)


def get_op(v: str) -> str:
    """The operator at the start of a scan expression, or ''."""
    match = _OP_REGEX.search(trim(v))
    return match.group(1) if match else ""


def string_to_op_type(s: str) -> OpType:
    """Operator text to its type; anything unrecognised means equality."""
    return _OP_TYPES.get(s, OpType.EQ)


def get_value(v: str) -> str:
    """The expression with its operator removed and spaces trimmed."""
    return trim(_OP_REGEX.sub("", trim(v), count=1))


def is_array(v: str, delimiter: str = ",") -> bool:
    return delimiter in trim(v)


def get_op_type(v: str) -> OpType:
    return string_to_op_type(get_op(v))


def get_values(v: str, delimiter: str = ",") -> list[str]:
    """The value part of the expression split on ``delimiter``."""
    return split(get_value(v), delimiter)


def has_values(v: str) -> bool:
    return bool(get_values(v))


def is_valid(v: str) -> bool:
    """A range expression needs two space-separated values."""
    return not (get_op_type(v) is OpType.WITHIN and not is_array(v, " "))


def value_to_bytes(v: str, scan_type: ScanType | str) -> bytes:
    if scan_type == ScanType.STRING:
        return string_to_bytes(v)
    return numeric_to_bytes(v, scan_type)


def numeric_to_bytes(v: str, scan_type: ScanType | str) -> bytes:
    """Encode every comma-separated value and concatenate the results."""
    values = get_values(v)
    if not values:
        raise MedError("Scan empty string")
    return b"".join(string_to_memory(value, scan_type) for value in values)


def string_to_bytes(v: str) -> bytes:
    """The raw bytes of the whole expression text."""
    if not get_values(v):
        raise MedError("Scan empty string")
    return v.encode("utf-8")


def is_snapshot_operator(op: OpType) -> bool:
    return op in _SNAPSHOT_OPS


def value_to_operands(
    v: str, scan_type: ScanType | str, op: OpType = OpType.EQ
) -> Operands:
    if scan_type == ScanType.STRING:
        return Operands([string_to_bytes(v)])
    if op in (OpType.WITHIN, OpType.AROUND):
        return get_two_operands(v, scan_type, op)
    return Operands([numeric_to_bytes(v, scan_type)])


def get_two_operands(
    v: str, scan_type: ScanType | str, op: OpType = OpType.WITHIN
) -> Operands:
    """Lower and upper bound of a range expression."""
    if op is OpType.AROUND:
        values = convert_around_to_within_values(v)
    else:
        values = get_values(v, " ")
    if len(values) < 2:
        raise MedError("Operands should not be less than 2")
    size = scan_type_to_size(scan_type)
    return Operands(
        string_to_memory(value, scan_type)[:size].ljust(size, b"\0")
        for value in values[:2]
    )


def _to_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if not match:
        raise MedError(f"Error input: {text}")
    return float(match.group())


def convert_around_to_within_values(v: str) -> list[str]:
    """Turn ``"~ x d"`` into the bounds ``x - d`` and ``x + d`` (d defaults to 1)."""
    values = get_values(v, " ")
    if not values:
        raise MedError("Scan empty string")
    first = _to_float(values[0])
    second = _to_float(values[1]) if len(values) >= 2 else 1.0
    return [f"{first - second:f}", f"{first + second:f}"]


def get_integers(v: str, delimiter: str = ",") -> list[int]:
    """Each value read as a single hexadecimal digit (-1 if it is not one)."""
    return [hex_str_to_int(value) for value in get_values(v, delimiter)]