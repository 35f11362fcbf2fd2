"""Memory blocks and the reader/writer that moves them in and out of a target."""

from __future__ import annotations

import os
import threading
from bisect import bisect_right, insort

from memedit.common import (
    MAX_STRING_SIZE,
    MedError,
    ScanType,
    int_to_hex,
    scan_type_to_size,
    string_to_memory,
    string_to_scan_type,
)
from memedit.maps import Maps
from memedit.memoperator import mem_dump, mem_to_string
from memedit.scanparser import get_values


class LocalMemory:
    """An in-process address space made of separate byte regions."""

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._regions: dict[int, bytearray] = {}

    def add_region(self, address: int, data: bytes) -> None:
        """Map ``data`` at ``address``; regions may not overlap."""
        end = address + len(data)
        index = bisect_right(self._starts, address)
        if index > 0:
            prev = self._starts[index - 1]
            if prev + len(self._regions[prev]) > address:
                raise MedError(f"Region overlaps at {int_to_hex(address)}")
        if index < len(self._starts) and self._starts[index] < end:
            raise MedError(f"Region overlaps at {int_to_hex(address)}")
        insort(self._starts, address)
        self._regions[address] = bytearray(data)

    def _locate(self, address: int, size: int) -> tuple[bytearray, int]:
        index = bisect_right(self._starts, address) - 1
        if index >= 0:
            start = self._starts[index]
            region = self._regions[start]
            if address + size <= start + len(region):
                return region, address - start
        raise MedError(f"Address read fail: {int_to_hex(address)}")

    def read(self, address: int, size: int) -> bytes:
        region, offset = self._locate(address, size)
        return bytes(region[offset:offset + size])

    def write(self, address: int, data: bytes) -> None:
        payload = bytes(data)
        region, offset = self._locate(address, len(payload))
        region[offset:offset + len(payload)] = payload

    def maps(self) -> Maps:
        """The mapped regions as (start, end) pairs."""
        return Maps((start, start + len(self._regions[start])) for start in self._starts)


class Mem:
    """A block of bytes taken from a given address."""

    def __init__(self, size: int = 0, address: int = 0, data: bytes | None = None) -> None:
        self.data = bytearray(size)
        if data is not None:
            chunk = bytes(data)[:size]
            self.data[:len(chunk)] = chunk
        self.address = address

    @property
    def size(self) -> int:
        return len(self.data)

    def dump(self) -> str:
        """Hex bytes, each followed by a space."""
        return mem_dump(self.data)

    def set_value(self, value: int) -> None:
        """Store ``value`` as a little-endian 32-bit int, truncated to the block size."""
        raw = (value & 0xFFFFFFFF).to_bytes(4, "little")
        count = min(self.size, 4)
        self.data[:count] = raw[:count]

    def value_as_int(self) -> int:
        count = min(self.size, 4)
        raw = bytes(self.data[:count]).ljust(4, b"\0")
        return int.from_bytes(raw, "little", signed=True)

    def address_as_string(self) -> str:
        return int_to_hex(self.address)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address_as_string()}, size={self.size})"


class MemIO:
    """Reads and writes memory of a process, or of a local address space when pid is 0."""

    def __init__(self, pid: int = 0, memory: LocalMemory | None = None) -> None:
        self.pid = pid
        self.memory = memory if memory is not None else LocalMemory()
        self._lock = threading.Lock()

    def read(self, address: int, size: int) -> Mem:
        if self.pid:
            raw = self._read_process(address, size)
        else:
            raw = self.memory.read(address, size)
        return Mem(size, address, raw)

    def _read_process(self, address: int, size: int) -> bytes:
        path = f"/proc/{self.pid}/mem"
        with self._lock:
            try:
                fd = os.open(path, os.O_RDONLY)
            except OSError as exc:
                raise MedError(f"Open failed: {path}") from exc
            try:
                return os.pread(fd, size, address)
            except (OSError, OverflowError) as exc:
                raise MedError(f"Address read fail: {int_to_hex(address)}") from exc
            finally:
                os.close(fd)

    def write(self, address: int, data: Mem | bytes, size: int = 0) -> None:
        """Write ``size`` bytes of ``data`` (all of it when size is 0)."""
        raw = bytes(data.data if isinstance(data, Mem) else data)
        raw = raw[:size] if size else raw
        if self.pid:
            self._write_process(address, raw)
        else:
            self.memory.write(address, raw)

    def _write_process(self, address: int, raw: bytes) -> None:
        path = f"/proc/{self.pid}/mem"
        with self._lock:
            try:
                fd = os.open(path, os.O_WRONLY)
            except OSError as exc:
                raise MedError(f"Open failed: {path}") from exc
            try:
                os.pwrite(fd, raw, address)
            except (OSError, OverflowError) as exc:
                raise MedError(f"Address write fail: {int_to_hex(address)}") from exc
            finally:
                os.close(fd)


def _coerce(scan_type: ScanType | str) -> ScanType:
    return scan_type if isinstance(scan_type, ScanType) else string_to_scan_type(scan_type)


class Pem(Mem):
    """A memory block that reads and writes its value through a MemIO."""

    def __init__(self, address: int = 0, size: int = 0, memio: MemIO | None = None) -> None:
        super().__init__(size, address)
        self.memio = memio if memio is not None else MemIO()
        self._scan_type = ScanType.UNKNOWN
        self.remembered = b""

    @property
    def scan_type(self) -> ScanType:
        return self._scan_type

    @staticmethod
    def bytes_to_string(data: bytes, scan_type: ScanType | str) -> str:
        if _coerce(scan_type) is ScanType.CUSTOM:
            return mem_to_string(data, ScanType.INT8)
        return mem_to_string(data, scan_type)

    @staticmethod
    def string_to_bytes(value: str, scan_type: ScanType | str) -> bytes:
        """Encode text as a string, or as comma-separated numbers of the scan type."""
        st = _coerce(scan_type)
        if st is ScanType.STRING:
            text = value.split("\0", 1)[0]
            return text.encode("utf-8")[:MAX_STRING_SIZE - 1]
        return b"".join(string_to_memory(token, st) for token in get_values(value))

    def get_value(self, scan_type: ScanType | str | None = None) -> str:
        st = self._scan_type if scan_type is None else scan_type
        mem = self.memio.read(self.address, self.size)
        return Pem.bytes_to_string(mem.data, st)

    def get_value_bytes(self, n: int = 0) -> bytes:
        size = n if n > 0 else self.size
        return bytes(self.memio.read(self.address, size).data)

    def set_value(self, value: str, scan_type: ScanType | str | None = None) -> None:
        st = self._scan_type if scan_type is None else scan_type
        raw = Pem.string_to_bytes(value, st)
        self.memio.write(self.address, raw, len(raw))

    def set_scan_type(self, scan_type: ScanType | str) -> None:
        """Change the scan type; the block is resized and cleared."""
        self._scan_type = _coerce(scan_type)
        self.data = bytearray(scan_type_to_size(self._scan_type))

    def remember_value(self, value: str, scan_type: ScanType | str) -> None:
        self.remembered = Pem.string_to_bytes(value, scan_type)

    def remember_bytes(self, data: bytes) -> None:
        self.remembered = bytes(data)

    def recall_value(self, scan_type: ScanType | str) -> str:
        if not self.remembered:
            return ""
        return Pem.bytes_to_string(self.remembered, scan_type)

    @classmethod
    def from_mem(cls, mem: Mem, memio: MemIO) -> Pem:
        return cls(mem.address, mem.size, memio)


class Sem(Pem):
    """A stored memory entry with a description and an optional locked value."""

    def __init__(self, address: int = 0, size: int = 0, memio: MemIO | None = None) -> None:
        super().__init__(address, size, memio)
        self._locked = False
        self.locked_value = ""
        self.description = ""

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self, value: bool = True) -> None:
        """Lock or unlock; locking remembers the current value."""
        if value:
            self.locked_value = self.get_value(self.scan_type)
        self._locked = value

    def lock_value(self) -> None:
        """Write the locked value back to memory."""
        self.set_value(self.locked_value, self.scan_type)

    def _copy_from(self, other: Pem) -> None:
        self.data[:] = other.data
        self.set_scan_type(other.scan_type)

    def clone(self) -> Sem:
        copy = Sem(self.address, self.size, self.memio)
        copy._copy_from(self)
        copy.description = self.description
        return copy

    @classmethod
    def from_pem(cls, pem: Pem) -> Sem:
        sem = cls(pem.address, pem.size, pem.memio)
        sem._copy_from(pem)
        sem.description = "No description"
        return sem