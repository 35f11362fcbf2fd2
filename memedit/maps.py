"""Collections of readable/writable address ranges."""

from collections.abc import Iterable, Iterator

AddressPair = tuple[int, int]


class Maps:
    """An ordered list of (start, end) address pairs."""

    def __init__(self, pairs: Iterable[AddressPair] | None = None) -> None:
        self._pairs: list[AddressPair] = [
            (int(start), int(end)) for start, end in (pairs or ())
        ]

    @property
    def pairs(self) -> list[AddressPair]:
        return list(self._pairs)

    def push(self, pair: AddressPair) -> None:
        start, end = pair
        self._pairs.append((start, end))

    def has_pair(self, pair: AddressPair) -> bool:
        """True if some stored pair lies inside ``pair``."""
        start, end = pair
        return any(s >= start and e <= end for s, e in self._pairs)

    def clear(self) -> None:
        self._pairs.clear()

    def trim_by_scope(self, scope: AddressPair) -> None:
        """Keep only the parts of the ranges that fall inside ``scope``."""
        start, end = scope
        trimmed: list[AddressPair] = []
        for first, second in self._pairs:
            if end < first or start > second:
                continue
            if start < first:
                trimmed.append((first, min(end, second)))
            elif end < second:
                trimmed.append((start, end))
                break
            else:
                trimmed.append((start, second))
        self._pairs = trimmed

    def __len__(self) -> int:
        return len(self._pairs)

    def __getitem__(self, index: int) -> AddressPair:
        if not 0 <= index < len(self._pairs):
            raise IndexError("Maps out of index")
        return self._pairs[index]

    def __iter__(self) -> Iterator[AddressPair]:
        return iter(list(self._pairs))

    def __repr__(self) -> str:
        return f"Maps({self._pairs!r})"