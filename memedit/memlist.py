"""An ordered list of memory entries with index-based editing."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from memedit.common import ScanType, hex_to_int, scan_type_to_size
from memedit.memory import Mem, Pem, Sem


def sort_by_address(items: list[Mem]) -> list[Mem]:
    """Sort ``items`` in place by address and return it."""
    items.sort(key=lambda mem: mem.address)
    return items


def sort_by_description(items: list[Sem]) -> list[Sem]:
    """Sort ``items`` in place by description and return it."""
    items.sort(key=lambda sem: sem.description)
    return items


class MemList:
    """Memory entries addressed by position."""

    def __init__(self, items: Iterable[Mem] = ()) -> None:
        self.items: list[Mem] = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Mem:
        return self.items[index]

    def __iter__(self) -> Iterator[Mem]:
        return iter(list(self.items))

    def address_as_string(self, index: int) -> str:
        return self.items[index].address_as_string()

    def get_value(self, index: int, scan_type: ScanType | str | None = None) -> str:
        """Current value of an entry, or '' past the end of the list."""
        if index >= len(self.items):
            return ""
        pem: Pem = self.items[index]
        return pem.get_value(pem.scan_type if scan_type is None else scan_type)

    def dump(self, index: int) -> str:
        return self.items[index].dump()

    def scan_type(self, index: int) -> str:
        if index >= len(self.items):
            return ""
        return self.items[index].scan_type.value

    def set_value(
        self, index: int, value: str, scan_type: ScanType | str, is_stored: bool = False
    ) -> None:
        """Write a value; a locked stored entry also takes it as its locked value."""
        entry = self.items[index]
        entry.set_value(value, scan_type)
        if is_stored and entry.locked:
            entry.locked_value = value

    def set_scan_type(self, index: int, scan_type: ScanType | str) -> None:
        self.items[index].set_scan_type(scan_type)

    def last_index(self) -> int:
        return len(self.items) - 1

    def sort_by_address(self) -> None:
        sort_by_address(self.items)

    def sort_by_description(self) -> None:
        sort_by_description(self.items)

    def add(self, mem: Mem) -> None:
        self.items.append(mem)

    def clear(self) -> None:
        self.items.clear()

    def set_address(self, index: int, address: str) -> None:
        self.items[index].address = hex_to_int(address)

    def _add_neighbour(self, index: int, direction: int) -> None:
        sem: Sem = self.items[index]
        neighbour = sem.clone()
        neighbour.address = sem.address + direction * scan_type_to_size(sem.scan_type)
        neighbour.description = "No description"
        self.items.append(neighbour)

    def add_next_address(self, index: int) -> None:
        """Append a copy of an entry placed right after it."""
        self._add_neighbour(index, 1)

    def add_prev_address(self, index: int) -> None:
        """Append a copy of an entry placed right before it."""
        self._add_neighbour(index, -1)

    def shift_address(self, index: int, diff: int) -> None:
        self.items[index].address += diff

    def delete_address(self, index: int) -> None:
        del self.items[index]

    def __repr__(self) -> str:
        return f"MemList({self.items!r})"