"""A comma-separated sequence of sub-commands matched against memory."""

from __future__ import annotations

from memedit.common import ScanType
from memedit.stringutil import split, trim
from memedit.subcommand import SubCommand, scan_type_for


class ScanCommand:
    """A full scan expression such as ``"s:'ab', w:2, i16:5"``."""

    def __init__(self, s: str, scan_type: ScanType | str = ScanType.INT32) -> None:
        self.command_string = s
        self.scan_type = scan_type
        self.sub_commands = [
            SubCommand(trim(value), scan_type) for value in split(s, ",")
        ]
        self._size = sum(sub.size() for sub in self.sub_commands)

    def size(self) -> int:
        """Total number of bytes covered by all sub-commands."""
        return self._size

    def first_scan_type(self) -> ScanType | str:
        return scan_type_for(self.command_string, self.scan_type)

    def match(self, data: bytes, offset: int = 0) -> bool:
        """Whether every sub-command matches in turn starting at ``offset``."""
        position = offset
        for sub in self.sub_commands:
            matched, step = sub.match(data, position)
            if not matched:
                return False
            position += step
        return True

    def __repr__(self) -> str:
        return f"ScanCommand({self.command_string!r}, {self.scan_type!r})"


def get_scan_command(v: str, scan_type: ScanType | str = ScanType.INT32) -> ScanCommand:
    return ScanCommand(v, scan_type)