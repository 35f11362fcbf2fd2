"""One element of a scan command, such as ``"i16: > 5"`` or ``"w:4"``."""

from __future__ import annotations

import re
from enum import Enum, auto

from memedit import scanparser
from memedit.common import OpType, ScanType
from memedit.memoperator import mem_compare_operands
from memedit.operands import Operands
from memedit.stringutil import replace, trim

_CMD_REGEX = re.compile(r"^(?:s|i8|i16|i32|i64|f32|f64|w):")
_CMD_STRING = re.compile(r"s:\s*'(.*)'")
_NUMBER = re.compile(r":\s*?(\d+)")


class Command(Enum):
    NOOP = auto()
    STR = auto()
    INT8 = auto()
    INT16 = auto()
    INT32 = auto()
    INT64 = auto()
    FLOAT32 = auto()
    FLOAT64 = auto()
    WILDCARD = auto()


_PREFIXES = {
    "s:": Command.STR,
    "i8:": Command.INT8,
    "i16:": Command.INT16,
    "i32:": Command.INT32,
    "i64:": Command.INT64,
    "f32:": Command.FLOAT32,
    "f64:": Command.FLOAT64,
    "w:": Command.WILDCARD,
}

_COMMAND_TYPES = {
    Command.WILDCARD: ScanType.INT8,
    Command.INT8: ScanType.INT8,
    Command.INT16: ScanType.INT16,
    Command.INT32: ScanType.INT32,
    Command.INT64: ScanType.INT64,
    Command.FLOAT32: ScanType.FLOAT32,
    Command.FLOAT64: ScanType.FLOAT64,
    Command.STR: ScanType.STRING,
}


def extract_string(s: str) -> str:
    """The text between quotes of a ``s:'...'`` command, or ''."""
    match = _CMD_STRING.search(trim(s))
    return match.group(1) if match else ""


def extract_number(s: str) -> int:
    """The number after the colon, or 0."""
    match = _NUMBER.search(trim(s))
    return int(match.group(1)) if match else 0


def get_cmd_string(s: str) -> str:
    """The command prefix such as ``"i8:"``, or ''."""
    match = _CMD_REGEX.search(trim(s))
    return match.group() if match else ""


def strip_command(s: str) -> str:
    return replace(s, get_cmd_string(s), "")


def parse_cmd(s: str) -> Command:
    return _PREFIXES.get(get_cmd_string(s), Command.NOOP)


def _fallback(scan_type: ScanType | str) -> ScanType | str:
    return ScanType.INT32 if scan_type == ScanType.CUSTOM else scan_type


def scan_type_for(s: str, scan_type: ScanType | str) -> ScanType | str:
    """The scan type a sub-command string compares as."""
    cmd = parse_cmd(s)
    if cmd is Command.NOOP:
        return _fallback(scan_type)
    return _COMMAND_TYPES[cmd]


class SubCommand:
    """A parsed sub-command with its operator and operands."""

    def __init__(self, s: str, scan_type: ScanType | str = ScanType.INT32) -> None:
        self.cmd = parse_cmd(s)
        self.wildcard_steps = 0
        self.operands = Operands()

        stripped = strip_command(s)
        self.op: OpType = scanparser.get_op_type(stripped)

        if self.cmd is Command.STR:
            self.operands = scanparser.value_to_operands(
                extract_string(s), ScanType.STRING, self.op
            )
        elif self.cmd is Command.WILDCARD:
            self.wildcard_steps = extract_number(s)
        else:
            target = _COMMAND_TYPES.get(self.cmd) or _fallback(scan_type)
            self.operands = scanparser.value_to_operands(stripped, target, self.op)

    def size(self) -> int:
        """Number of bytes this sub-command covers."""
        if self.cmd is Command.WILDCARD:
            return self.wildcard_steps
        return self.operands.first_size()

    def match(self, data: bytes, offset: int = 0) -> tuple[bool, int]:
        """Whether memory at ``offset`` matches, and how many bytes to advance."""
        size = self.size()
        if self.cmd is Command.WILDCARD:
            return True, size
        chunk = bytes(data[offset:offset + size])
        if len(chunk) < size:
            return False, size
        return mem_compare_operands(chunk, self.operands, self.op), size

    def __repr__(self) -> str:
        return f"SubCommand(cmd={self.cmd.name}, op={self.op.name}, size={self.size()})"