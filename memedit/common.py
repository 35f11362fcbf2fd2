"""Shared types, value conversions and process helpers."""

from __future__ import annotations

import os
import re
import signal
import struct
from dataclasses import dataclass
from enum import Enum, auto

from memedit.maps import Maps

MAX_STRING_SIZE = 255
WORD_SIZE = 8


class MedError(Exception):
    """Error raised by the memory editor."""


class EmptyListError(MedError):
    """Raised when an operation needs a non-empty list."""


class ScanType(str, Enum):
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    PTR32 = "ptr32"
    INT64 = "int64"
    PTR64 = "ptr64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    CUSTOM = "custom"
    UNKNOWN = "unknown"


class OpType(Enum):
    SNAPSHOT_SAVE = auto()
    GT = auto()
    LT = auto()
    EQ = auto()
    NEQ = auto()
    GE = auto()
    LE = auto()
    WITHIN = auto()
    AROUND = auto()


@dataclass
class Process:
    pid: str
    cmdline: str


_SIZES = {
    ScanType.INT8: 1,
    ScanType.INT16: 2,
    ScanType.INT32: 4,
    ScanType.PTR32: 4,
    ScanType.INT64: 8,
    ScanType.PTR64: 8,
    ScanType.FLOAT32: 4,
    ScanType.FLOAT64: 8,
    ScanType.STRING: MAX_STRING_SIZE,
    ScanType.CUSTOM: 0,
    ScanType.UNKNOWN: 0,
}

_HEX_DIGITS = "0123456789abcdef"
_DEC_INT = re.compile(r"\s*([+-]?)(\d+)")
_HEX_INT = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")
_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_HEX_STRING = re.compile(r"0x[0-9a-fA-F]+")
_MAPS_LINE = re.compile(
    r"\s*([0-9a-fA-F]+)-([0-9a-fA-F]+)\s*(\S)(.)(.)(.)\s+\S+\s+\S+\s+(\d+)"
)
_PID_STATUS = re.compile(r"\d+ \(.*?\) (\w) \d+")


def hex_str_to_int(s: str) -> int:
    """Value of a single hexadecimal digit, or -1."""
    from memedit.stringutil import to_lower, trim

    digit = to_lower(trim(s))
    if len(digit) == 1 and digit in _HEX_DIGITS:
        return _HEX_DIGITS.index(digit)
    return -1


def _parse_int(text: str, base: int) -> int | None:
    match = (_HEX_INT if base == 16 else _DEC_INT).match(text)
    if not match:
        return None
    sign, digits = match.groups()
    value = int(digits, base)
    return -value if sign == "-" else value


def _parse_float(text: str) -> float | None:
    match = _FLOAT.match(text)
    return float(match.group()) if match else None


def hex_to_int(s: str) -> int:
    """Parse a hexadecimal string (optionally 0x-prefixed) into an integer."""
    value = _parse_int(s, 16)
    if value is None or not -(1 << 63) <= value < (1 << 63):
        raise MedError(f"Error input: {s}")
    return value


def int_to_hex(value: int) -> str:
    """Format an address as a 0x-prefixed lower-case hex string."""
    return f"0x{value & ((1 << 64) - 1):x}"


def string_to_scan_type(name: str) -> ScanType:
    try:
        return ScanType(name)
    except ValueError:
        return ScanType.UNKNOWN


def scan_type_to_string(scan_type: ScanType) -> str:
    return ScanType(scan_type).value


def _coerce(scan_type: ScanType | str) -> ScanType:
    if isinstance(scan_type, ScanType):
        return scan_type
    return string_to_scan_type(scan_type)


def scan_type_to_size(scan_type: ScanType | str) -> int:
    """Size in bytes of a value of the given scan type."""
    return _SIZES[_coerce(scan_type)]


def format_hex(data: bytes) -> str:
    """Two-digit hex bytes, each followed by a space."""
    return "".join(f"{byte:02x} " for byte in data)


def parse_maps(text: str) -> Maps:
    """Readable and writable regions from the text of a process maps file."""
    maps = Maps()
    for line in text.splitlines():
        match = _MAPS_LINE.match(line)
        if not match:
            continue
        start, end = int(match.group(1), 16), int(match.group(2), 16)
        readable, writable = match.group(3), match.group(4)
        if readable == "r" and writable == "w" and end - start > 0:
            maps.push((start, end))
    return maps


def get_maps(pid: int) -> Maps:
    filename = f"/proc/{pid}/maps"
    try:
        with open(filename, encoding="utf-8", errors="replace") as file:
            return parse_maps(file.read())
    except OSError as exc:
        raise MedError(f"Failed open maps: {filename}") from exc


def get_pid_status(stat: str) -> str:
    """State letter from a process stat line, or 'X' if it cannot be found."""
    match = _PID_STATUS.search(stat)
    return match.group(1)[0] if match else "X"


def is_pid_suspended(pid: int) -> bool:
    filename = f"/proc/{pid}/stat"
    try:
        with open(filename, encoding="utf-8", errors="replace") as file:
            line = file.readline()
    except OSError as exc:
        raise MedError(f"Failed open stat: {filename}") from exc
    return get_pid_status(line) in ("T", "t")


def pid_resume(pid: int) -> None:
    os.kill(pid, signal.SIGCONT)


def pid_stop(pid: int) -> None:
    os.kill(pid, signal.SIGSTOP)


def pad_word_size(x: int) -> int:
    """Round ``x`` up to a multiple of the machine word size."""
    remainder = x % WORD_SIZE
    return x + WORD_SIZE - remainder if remainder else x


def pid_name(pid: str) -> str:
    """First line of the command line of a process, or '' if unreadable."""
    try:
        with open(f"/proc/{pid}/cmdline", "rb") as file:
            raw = file.read()
    except OSError:
        return ""
    return raw.split(b"\n", 1)[0].decode("utf-8", errors="replace")


def pid_list() -> list[Process]:
    """Processes that have a readable, non-empty command line."""
    try:
        entries = os.listdir("/proc")
    except OSError:
        return []
    processes = []
    for entry in entries:
        if entry[:1].isdigit():
            cmdline = pid_name(entry)
            if cmdline:
                processes.append(Process(pid=entry, cmdline=cmdline))
    return processes


def is_hex_string(s: str) -> bool:
    return _HEX_STRING.fullmatch(s) is not None


def _pack_unsigned(value: int, size: int, original: str) -> bytes:
    limit = 1 << (size * 8)
    if not -limit < value < limit:
        raise MedError(f"Error input: {original}")
    return (value % limit).to_bytes(size, "little")


def _pack_float(value: float | None, scan_type: ScanType, original: str) -> bytes:
    if value is None:
        raise MedError(f"Error input: {original}")
    try:
        return struct.pack("<f" if scan_type is ScanType.FLOAT32 else "<d", value)
    except OverflowError as exc:
        raise MedError(f"Error input: {original}") from exc


def _to_memory(text: str, scan_type: ScanType, base: int, original: str) -> bytes:
    if scan_type is ScanType.STRING:
        raise MedError("string_to_memory with String type")
    if scan_type in (ScanType.CUSTOM, ScanType.UNKNOWN):
        return b""
    if scan_type in (ScanType.FLOAT32, ScanType.FLOAT64):
        return _pack_float(_parse_float(text), scan_type, original)
    value = _parse_int(text, base)
    if value is None:
        raise MedError(f"Error input: {original}")
    if scan_type is ScanType.INT8:
        if not -(1 << 31) <= value < (1 << 31):
            raise MedError(f"Error input: {original}")
        return bytes([value & 0xFF])
    return _pack_unsigned(value, _SIZES[scan_type], original)


def string_to_memory(s: str, scan_type: ScanType | str) -> bytes:
    """Encode a decimal or 0x-hex value as little-endian bytes of the scan type."""
    st = _coerce(scan_type)
    if is_hex_string(s):
        return hex_string_to_memory(s, st)
    return _to_memory(s, st, 10, s)


def hex_string_to_memory(s: str, scan_type: ScanType | str) -> bytes:
    """Encode a 0x-hex value, keeping only the low digits that fit the type."""
    st = _coerce(scan_type)
    sanitized = re.sub(r"^0x", "", s, count=1)
    length = _SIZES[st] * 2
    sanitized = sanitized[max(len(sanitized) - length, 0):][:length]
    return _to_memory(sanitized, st, 16, s)