from memedit.common import ScanType
from memedit.memory import Mem
from memedit.namedscans import DEFAULT, NamedScans


def test_defaults():
    scans = NamedScans()
    assert scans.active_name == DEFAULT
    assert scans.scan_type == ScanType.INT32
    assert len(scans.get_mem_list()) == 0


def test_add_new_scan_rejects_blank_and_duplicates():
    scans = NamedScans()
    created = scans.add_new_scan("  extra ")
    assert created is scans.get_mem_list("extra")
    assert scans.add_new_scan("extra") is None
    assert scans.add_new_scan("   ") is None
    assert scans.add_new_scan(DEFAULT) is None


def test_get_mem_list_unknown_or_blank():
    scans = NamedScans()
    assert scans.get_mem_list("missing") is None
    assert scans.get_mem_list("") is None


def test_set_mem_ptrs_on_active_list():
    scans = NamedScans()
    items = [Mem(4, 0x10), Mem(4, 0x20)]
    scans.set_mem_ptrs(items, "int16")
    assert [mem.address for mem in scans.get_mem_list()] == [0x10, 0x20]
    assert scans.scan_type == "int16"


def test_active_name_switch_keeps_lists_apart():
    scans = NamedScans()
    scans.add_new_scan("other")
    scans.active_name = "other"
    scans.set_mem_ptrs([Mem(1, 0x30)], "int8")
    assert scans.active_name == "other"
    assert len(scans.get_mem_list(DEFAULT)) == 0
    assert scans.scan_type == "int8"
    scans.active_name = "   "
    assert scans.active_name == "other"


def test_remove():
    scans = NamedScans()
    assert scans.remove(DEFAULT) is False
    assert scans.remove("") is False
    assert scans.remove("missing") is False
    scans.add_new_scan("other")
    scans.active_name = "other"
    assert scans.remove("other") is True
    assert scans.active_name == DEFAULT
    assert scans.get_mem_list("other") is None
    assert "other" not in scans.names