"""Operands of a scan comparison."""

from collections.abc import Iterable

from memedit.common import MedError


class Operands:
    """One or two byte strings that memory is compared against."""

    def __init__(self, items: Iterable[bytes] = ()) -> None:
        self.items: list[bytes] = [bytes(item) for item in items]

    def count(self) -> int:
        return len(self.items)

    def first(self) -> bytes:
        if not self.items:
            raise MedError("Operands size should not less than 1")
        return self.items[0]

    def second(self) -> bytes:
        if len(self.items) < 2:
            raise MedError("Operands size should not less than 2")
        return self.items[1]

    def first_size(self) -> int:
        return len(self.first())

    def __repr__(self) -> str:
        return f"Operands({self.items!r})"