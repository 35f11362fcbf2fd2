"""Comparison and formatting of raw little-endian memory values."""

import struct

from memedit.common import MedError, OpType, ScanType, string_to_scan_type
from memedit.operands import Operands

_RANGE_OPS = (OpType.WITHIN, OpType.AROUND)

_FORMATS = {
    ScanType.INT8: "<B",
    ScanType.INT16: "<H",
    ScanType.INT32: "<I",
    ScanType.INT64: "<Q",
    ScanType.PTR32: "<I",
    ScanType.PTR64: "<Q",
    ScanType.FLOAT32: "<f",
    ScanType.FLOAT64: "<d",
}


def _as_int(data: bytes) -> int:
    return int.from_bytes(bytes(data), "little")


def mem_reverse(data: bytes) -> bytes:
    """Swap the byte order."""
    return bytes(reversed(bytes(data)))


def mem_eq(a: bytes, b: bytes) -> bool:
    return bytes(a) == bytes(b)


def mem_neq(a: bytes, b: bytes) -> bool:
    return not mem_eq(a, b)


def mem_gt(a: bytes, b: bytes) -> bool:
    """Compare as unsigned little-endian numbers."""
    return _as_int(a) > _as_int(b)


def mem_lt(a: bytes, b: bytes) -> bool:
    return _as_int(a) < _as_int(b)


def mem_ge(a: bytes, b: bytes) -> bool:
    return mem_gt(a, b) or mem_eq(a, b)


def mem_le(a: bytes, b: bytes) -> bool:
    return mem_lt(a, b) or mem_eq(a, b)


def mem_within(src: bytes, low: bytes, high: bytes) -> bool:
    return mem_ge(src, low) and mem_le(src, high)


def mem_compare(data: bytes, other: bytes, op: OpType) -> bool:
    """Apply a single-operand comparison; unknown operators mean equality."""
    comparisons = {
        OpType.GT: mem_gt,
        OpType.LT: mem_lt,
        OpType.GE: mem_ge,
        OpType.LE: mem_le,
        OpType.NEQ: mem_neq,
    }
    return comparisons.get(op, mem_eq)(data, other)


def mem_compare_array(data: bytes, values: bytes, op: OpType) -> bool:
    """Compare ``data`` with ``values``, which holds both bounds for range ops."""
    size = len(data)
    if op not in _RANGE_OPS:
        return mem_compare(data, values[:size], op)
    if size == 0 or len(values) // size < 2:
        raise MedError("Scan value is not array")
    return mem_within(data, values[:size], values[size:2 * size])


def mem_compare_operands(data: bytes, operands: Operands, op: OpType) -> bool:
    size = len(data)
    first = operands.first()
    if op not in _RANGE_OPS:
        return mem_compare(data, first[:size], op)
    return mem_within(data, first[:size], operands.second()[:size])


def mem_to_string(data: bytes, scan_type: ScanType | str) -> str:
    """Format raw memory as text according to the scan type."""
    st = scan_type if isinstance(scan_type, ScanType) else string_to_scan_type(scan_type)
    if st is ScanType.UNKNOWN:
        raise MedError("memToString: Error Type")
    if st is ScanType.CUSTOM:
        return ""
    raw = bytes(data)
    if st is ScanType.STRING:
        return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    fmt = _FORMATS[st]
    size = struct.calcsize(fmt)
    if len(raw) < size:
        raise MedError("memToString: not enough data")
    (value,) = struct.unpack(fmt, raw[:size])
    if st in (ScanType.PTR32, ScanType.PTR64):
        return f"0x{value:x}"
    if st in (ScanType.FLOAT32, ScanType.FLOAT64):
        return f"{value:f}"
    return str(value)


def mem_dump(data: bytes) -> str:
    """Hex bytes without padding, each followed by a space."""
    return "".join(f"{byte:x} " for byte in bytes(data))


def address_round_down(address: int) -> int:
    """Round an address down to a multiple of 16."""
    return address - address % 16