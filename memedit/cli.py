"""Interactive command line: scan, filter and list values of a process."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO

from memedit.common import MedError, ScanType
from memedit.memed import MemEd
from memedit.stringutil import split

USAGE = "Missing argument\nUsage: med-cli [pid]"


class CliCommand(IntEnum):
    SCAN = 1
    FILTER = 2
    LIST = 3


def interpret_command(command: str) -> CliCommand:
    if command == "s":
        return CliCommand.SCAN
    if command == "f":
        return CliCommand.FILTER
    return CliCommand.LIST


def _show_list(memed: MemEd, out: TextIO) -> None:
    scans = memed.scans()
    for index in range(len(scans)):
        try:
            value = scans.get_value(index)
        except MedError:
            value = "(invalid)"
        out.write(f"{scans.address_as_string(index)}\t{scans.dump(index)}{value}\n")


def interpret_line(memed: MemEd, line: str, out: TextIO) -> None:
    """Run one command line: ``s VALUE``, ``f VALUE`` or anything else to list."""
    parts = split(line, " ")
    if not parts:
        return
    cmd = interpret_command(parts[0])
    if cmd is CliCommand.LIST:
        _show_list(memed, out)
        return
    if len(parts) < 2:
        raise MedError("Missing scan value")
    if cmd is CliCommand.SCAN:
        mems = memed.scan(parts[1], ScanType.INT32)
        out.write(f"Scanned {len(mems)}\n")
    else:
        mems = memed.filter(parts[1], ScanType.INT32)
        out.write(f"Filtered {len(mems)}\n")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE, file=sys.stderr)
        return -1
    try:
        pid = int(args[0])
    except ValueError:
        print(f"Invalid pid: {args[0]}", file=sys.stderr)
        return -1

    with MemEd(pid) as memed:
        print("Med CLI")
        while True:
            try:
                line = input("> ")
            except EOFError:
                break
            try:
                interpret_line(memed, line, sys.stdout)
            except MedError as exc:
                print(f"Error: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())