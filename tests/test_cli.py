import io
import os
import struct

import pytest

from memedit.cli import CliCommand, interpret_command, interpret_line, main
from memedit.common import MedError
from memedit.memed import MemEd
from memedit.memory import LocalMemory

BASE = 0x2000


@pytest.fixture
def memory():
    mem = LocalMemory()
    mem.add_region(BASE, struct.pack("<3i", 100, 200, 100))
    return mem


@pytest.fixture
def memed(memory):
    with MemEd(0, memory) as editor:
        yield editor


def test_interpret_command():
    assert interpret_command("s") is CliCommand.SCAN
    assert interpret_command("f") is CliCommand.FILTER
    assert interpret_command("l") is CliCommand.LIST
    assert interpret_command("anything") is CliCommand.LIST


def test_scan_line(memed):
    out = io.StringIO()
    interpret_line(memed, "s 100", out)
    assert out.getvalue() == "Scanned 2\n"


def test_filter_line(memed, memory):
    out = io.StringIO()
    interpret_line(memed, "s 100", out)
    memory.write(BASE, struct.pack("<i", 120))
    out = io.StringIO()
    interpret_line(memed, "f 120", out)
    assert out.getvalue() == "Filtered 1\n"


def test_list_line(memed):
    interpret_line(memed, "s 100", io.StringIO())
    out = io.StringIO()
    interpret_line(memed, "l", out)
    lines = out.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("0x2000\t")
    assert lines[1].startswith("0x2008\t")
    assert all(line.endswith("100") for line in lines)


def test_empty_line_writes_nothing(memed):
    out = io.StringIO()
    interpret_line(memed, "", out)
    assert out.getvalue() == ""


def test_missing_value_raises(memed):
    with pytest.raises(MedError):
        interpret_line(memed, "s", io.StringIO())


def test_main_without_arguments(capsys):
    assert main([]) == -1
    assert "Usage: med-cli [pid]" in capsys.readouterr().err


def test_main_with_bad_pid(capsys):
    assert main(["abc"]) == -1
    assert "abc" in capsys.readouterr().err


def test_main_exits_on_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([str(os.getpid())]) == 0
    assert "Med CLI" in capsys.readouterr().out