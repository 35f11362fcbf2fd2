"""Scan result lists kept under user-chosen names."""

from __future__ import annotations

from collections.abc import Iterable

from memedit.common import ScanType
from memedit.memlist import MemList
from memedit.memory import Mem
from memedit.stringutil import trim

DEFAULT = "default"


class NamedScans:
    """Named MemLists with one active list and a scan type per name."""

    def __init__(self) -> None:
        self._data: dict[str, MemList] = {DEFAULT: MemList()}
        self._active = DEFAULT
        self._scan_types: dict[str, ScanType | str] = {DEFAULT: ScanType.INT32}

    @property
    def names(self) -> list[str]:
        return list(self._data)

    def add_new_scan(self, name: str) -> MemList | None:
        """Create an empty list; None if the name is blank or taken."""
        key = trim(name)
        if not key or key in self._data:
            return None
        self._data[key] = MemList()
        return self._data[key]

    def get_mem_list(self, name: str | None = None) -> MemList | None:
        """The list with the given name (the active one by default), or None."""
        key = trim(self._active if name is None else name)
        if not key:
            return None
        return self._data.get(key)

    def set_mem_ptrs(self, items: Iterable[Mem], scan_type: ScanType | str) -> None:
        """Replace the active list's entries and record their scan type."""
        mem_list = self.get_mem_list()
        if mem_list is None:
            mem_list = self._data[self._active] = MemList()
        mem_list.items = list(items)
        self.scan_type = scan_type

    def remove(self, name: str) -> bool:
        """Remove a named list; the default list cannot be removed."""
        key = trim(name)
        if not key or key == DEFAULT or key not in self._data:
            return False
        del self._data[key]
        self._scan_types.pop(key, None)
        self._active = DEFAULT
        return True

    @property
    def active_name(self) -> str:
        return self._active

    @active_name.setter
    def active_name(self, name: str) -> None:
        key = trim(name)
        if key:
            self._active = key

    @property
    def scan_type(self) -> ScanType | str:
        return self._scan_types.get(self._active) or ScanType.INT32

    @scan_type.setter
    def scan_type(self, value: ScanType | str) -> None:
        self._scan_types[self._active] = value