"""Scanning and filtering of process memory for values matching a scan."""

from __future__ import annotations

import logging
import mmap
import os
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from functools import partial

from memedit.common import (
    EmptyListError,
    MedError,
    OpType,
    ScanType,
    get_maps,
    scan_type_to_size,
)
from memedit.maps import AddressPair, Maps
from memedit.memlist import sort_by_address
from memedit.memoperator import mem_compare_array, mem_compare_operands
from memedit.memory import Mem, MemIO, Pem
from memedit.operands import Operands
from memedit.scancommand import ScanCommand
from memedit.threadmanager import ThreadManager

STEP = 1
CHUNK_SIZE = 128
ADDRESS_SORTABLE_SIZE = 800
MAX_THREADS = 8

_log = logging.getLogger(__name__)

Reader = Callable[[int, int], "bytes | None"]
PageHandler = Callable[[bytes, int], "list[Pem]"]


def skip_address_by_fast_scan(address: int, size: int, fast_scan: bool) -> bool:
    """With fast scan, skip addresses not aligned to the value size."""
    if not fast_scan or size <= 0:
        return False
    return address % size != 0


def skip_address_by_last_digits(address: int, last_digits: Sequence[int]) -> bool:
    """Skip addresses whose last hex digit is not among ``last_digits``."""
    if not last_digits:
        return False
    return address % 16 not in last_digits


def get_interested_maps(maps: Maps, items: Iterable[Mem]) -> Maps:
    """The regions of ``maps`` that contain at least one of ``items``."""
    interested = Maps()
    for item in items:
        for start, end in maps:
            if start <= item.address <= end:
                if not interested.has_pair((start, end)):
                    interested.push((start, end))
                break
    return interested


def _maybe_sorted(items: list[Pem]) -> list[Pem]:
    if len(items) <= ADDRESS_SORTABLE_SIZE:
        return sort_by_address(items)
    return items


class MemScanner:
    """Finds addresses whose values match a scan and narrows them down."""

    def __init__(self, pid: int = 0, memio: MemIO | None = None) -> None:
        self.memio = memio if memio is not None else MemIO(pid)
        if pid:
            self.memio.pid = pid
        self.thread_manager = ThreadManager(MAX_THREADS)
        self.list_lock = threading.Lock()
        self.snapshot: list[Mem] = []
        self.scope_start = 0
        self.scope_end = 0
        self.page_size = mmap.PAGESIZE

    @property
    def pid(self) -> int:
        return self.memio.pid

    @pid.setter
    def pid(self, value: int) -> None:
        self.memio.pid = value

    # Direct scanning of a single block

    def scan_inner(
        self,
        operands: Operands,
        size: int,
        base: int,
        block_size: int,
        scan_type: ScanType | str,
        op: OpType,
    ) -> list[Pem]:
        """Addresses in ``[base, base + block_size)`` whose value matches."""
        block = bytes(self.memio.read(base, block_size).data)
        found = []
        for offset in range(0, block_size - size + 1, STEP):
            chunk = block[offset:offset + size]
            if mem_compare_operands(chunk, operands, op):
                found.append(self._new_pem(base + offset, size, scan_type, chunk))
        return found

    def scan_unknown_inner(
        self, base: int, block_size: int, scan_type: ScanType | str
    ) -> list[Pem]:
        """Every address of the block, remembering its current value."""
        size = scan_type_to_size(scan_type)
        block = bytes(self.memio.read(base, block_size).data)
        return [
            self._new_pem(base + offset, size, scan_type, block[offset:offset + size])
            for offset in range(0, block_size - size + 1, STEP)
        ]

    def filter_inner(
        self,
        items: Iterable[Mem],
        operands: Operands,
        size: int,
        scan_type: ScanType | str,
        op: OpType,
    ) -> list[Pem]:
        """Entries whose current value matches the operands."""
        found = []
        for item in items:
            mem = self.memio.read(item.address, item.size)
            if mem_compare_operands(bytes(mem.data[:size]), operands, op):
                pem = Pem.from_mem(mem, self.memio)
                pem.set_scan_type(scan_type)
                found.append(pem)
        return found

    def filter_unknown_inner(
        self, items: Iterable[Pem], scan_type: ScanType | str, op: OpType
    ) -> list[Pem]:
        """Entries whose current value compares with their remembered one."""
        size = scan_type_to_size(scan_type)
        found = []
        for item in items:
            mem = self.memio.read(item.address, item.size)
            current = bytes(mem.data[:size])
            if mem_compare_array(current, item.remembered[:size], op):
                found.append(self._new_pem(mem.address, mem.size, scan_type, current))
        return found

    # Scanning whole maps

    def scan(
        self,
        scan_command: ScanCommand,
        last_digits: Sequence[int] = (),
        fast_scan: bool = False,
    ) -> list[Pem]:
        """Scan every writable region for matches of a scan command."""
        handler = partial(
            self._scan_page_command, scan_command, list(last_digits), fast_scan
        )
        return self._scan_maps(handler)

    def scan_operands(
        self,
        operands: Operands,
        size: int,
        scan_type: ScanType | str,
        op: OpType,
        fast_scan: bool = False,
        last_digits: Sequence[int] = (),
    ) -> list[Pem]:
        """Scan every writable region for values matching the operands."""
        handler = partial(
            self._scan_page_operands,
            operands,
            size,
            scan_type,
            op,
            fast_scan,
            list(last_digits),
        )
        return self._scan_maps(handler)

    def save_snapshot(self, base_list: Sequence[Mem]) -> list[Mem]:
        """Copy memory of the scope, or of the regions holding ``base_list``."""
        self.snapshot.clear()
        if self.has_scope():
            self._snapshot_range(self.scope_start, self.scope_end)
        else:
            if not base_list:
                raise EmptyListError("Should not scan unknown with empty list")
            for start, end in get_interested_maps(self._all_maps(), base_list):
                self._snapshot_range(start, end)
        return self.snapshot

    # Filtering

    def filter(self, items: Sequence[Pem], scan_command: ScanCommand) -> list[Pem]:
        """Entries whose current memory matches the scan command."""
        size = scan_command.size()
        scan_type = scan_command.first_scan_type()

        def check(pem: Pem) -> bytes | None:
            data = pem.get_value_bytes(size if size > 1 else 0)
            if scan_command.match(data):
                pem.set_scan_type(scan_type)
                pem.remember_bytes(data[:size])
                return data
            return None

        return self._filter_chunks(items, check)

    def filter_operands(
        self,
        items: Sequence[Pem],
        operands: Operands,
        size: int,
        scan_type: ScanType | str,
        op: OpType,
    ) -> list[Pem]:
        """Entries whose current value matches the operands."""

        def check(pem: Pem) -> bytes | None:
            data = pem.get_value_bytes(size if size > 1 else 0)[:size]
            if mem_compare_operands(data, operands, op):
                pem.set_scan_type(scan_type)
                pem.remember_bytes(data)
                return data
            return None

        return self._filter_chunks(items, check)

    def filter_unknown(
        self,
        items: Sequence[Pem],
        scan_type: ScanType | str,
        op: OpType,
        fast_scan: bool = False,
    ) -> list[Pem]:
        """Compare against the snapshot if there is one, else remembered values."""
        if self.snapshot:
            return self.filter_snapshot(scan_type, op, fast_scan)
        size = scan_type_to_size(scan_type)

        def check(pem: Pem) -> bytes | None:
            data = pem.get_value_bytes()[:size]
            if not pem.remembered:
                return None
            if mem_compare_array(data, pem.remembered[:size], op):
                pem.set_scan_type(scan_type)
                pem.remember_bytes(data)
                return data
            return None

        return self._filter_chunks(items, check)

    def filter_snapshot(
        self, scan_type: ScanType | str, op: OpType, fast_scan: bool = False
    ) -> list[Pem]:
        """Addresses whose value changed against the snapshot as ``op`` says."""
        found: list[Pem] = []
        for old in self.snapshot:
            try:
                new = self.memio.read(old.address, old.size)
            except MedError as exc:
                _log.warning("%s", exc)
                continue
            found.extend(self._compare_blocks(old, new, scan_type, op, fast_scan))
        self.snapshot.clear()
        return found

    # Scope

    @property
    def scope(self) -> AddressPair:
        return self.scope_start, self.scope_end

    def set_scope_start(self, address: int) -> None:
        self.scope_start = address

    def set_scope_end(self, address: int) -> None:
        self.scope_end = address

    def has_scope(self) -> bool:
        return bool(self.scope_start and self.scope_end)

    # Internals

    def _new_pem(
        self, address: int, size: int, scan_type: ScanType | str, value: bytes
    ) -> Pem:
        pem = Pem(address, size, self.memio)
        pem.set_scan_type(scan_type)
        pem.remember_bytes(value)
        return pem

    def _all_maps(self) -> Maps:
        if self.pid:
            return get_maps(self.pid)
        return self.memio.memory.maps()

    def _scoped_maps(self) -> Maps:
        maps = self._all_maps()
        if self.has_scope():
            maps.trim_by_scope(self.scope)
        return maps

    @contextmanager
    def _reader(self) -> Iterator[Reader]:
        if not self.pid:
            memory = self.memio.memory

            def read_local(address: int, size: int) -> bytes | None:
                try:
                    return memory.read(address, size)
                except MedError:
                    return None

            yield read_local
            return

        path = f"/proc/{self.pid}/mem"
        try:
            fd = os.open(path, os.O_RDONLY)
        except OSError as exc:
            raise MedError(f"Open failed: {path}") from exc

        def read_process(address: int, size: int) -> bytes | None:
            try:
                return os.pread(fd, size, address)
            except (OSError, OverflowError):
                return None

        try:
            yield read_process
        finally:
            os.close(fd)

    def _run_tasks(self, tasks: Iterable[Callable[[], object]]) -> None:
        try:
            for task in tasks:
                self.thread_manager.queue_task(task)
            self.thread_manager.start()
        finally:
            self.thread_manager.clear()

    def _scan_maps(self, handler: PageHandler) -> list[Pem]:
        maps = self._scoped_maps()
        found: list[Pem] = []
        with self._reader() as read:
            self._run_tasks(
                partial(self._scan_region, pair, read, handler, found) for pair in maps
            )
        return _maybe_sorted(found)

    def _scan_region(
        self, pair: AddressPair, read: Reader, handler: PageHandler, found: list[Pem]
    ) -> None:
        start, end = pair
        for page_start in range(start, end, self.page_size):
            page = read(page_start, min(self.page_size, end - page_start))
            if not page:
                continue
            matches = handler(page, page_start)
            if matches:
                with self.list_lock:
                    found.extend(matches)

    def _scan_page_command(
        self,
        scan_command: ScanCommand,
        last_digits: list[int],
        fast_scan: bool,
        page: bytes,
        start: int,
    ) -> list[Pem]:
        size = scan_command.size()
        scan_type = scan_command.first_scan_type()
        type_size = scan_type_to_size(scan_type)
        found = []
        for offset in range(0, len(page) - size + 1, STEP):
            address = start + offset
            if scan_type != ScanType.STRING and skip_address_by_fast_scan(
                address, type_size, fast_scan
            ):
                continue
            if skip_address_by_last_digits(address, last_digits):
                continue
            try:
                if scan_command.match(page, offset):
                    found.append(
                        self._new_pem(address, size, scan_type, page[offset:offset + size])
                    )
            except MedError as exc:
                _log.warning("%s", exc)
        return found

    def _scan_page_operands(
        self,
        operands: Operands,
        size: int,
        scan_type: ScanType | str,
        op: OpType,
        fast_scan: bool,
        last_digits: list[int],
        page: bytes,
        start: int,
    ) -> list[Pem]:
        type_size = scan_type_to_size(scan_type)
        found = []
        for offset in range(0, len(page) - size + 1, STEP):
            address = start + offset
            if scan_type != ScanType.STRING and skip_address_by_fast_scan(
                address, type_size, fast_scan
            ):
                continue
            if skip_address_by_last_digits(address, last_digits):
                continue
            chunk = page[offset:offset + size]
            try:
                if mem_compare_operands(chunk, operands, op):
                    found.append(self._new_pem(address, size, scan_type, chunk))
            except MedError as exc:
                _log.warning("%s", exc)
        return found

    def _snapshot_range(self, start: int, end: int) -> None:
        for address in range(start, end, self.page_size):
            try:
                mem = self.memio.read(address, min(self.page_size, end - address))
            except MedError as exc:
                _log.warning("%s", exc)
                continue
            self.snapshot.append(mem)

    def _filter_chunks(
        self, items: Sequence[Pem], check: Callable[[Pem], "bytes | None"]
    ) -> list[Pem]:
        found: list[Pem] = []

        def run_chunk(chunk: Sequence[Pem]) -> None:
            for pem in chunk:
                try:
                    matched = check(pem)
                except MedError:
                    continue
                if matched is not None:
                    with self.list_lock:
                        found.append(pem)

        self._run_tasks(
            partial(run_chunk, items[index:index + CHUNK_SIZE])
            for index in range(0, len(items), CHUNK_SIZE)
        )
        return _maybe_sorted(found)

    def _compare_blocks(
        self,
        old: Mem,
        new: Mem,
        scan_type: ScanType | str,
        op: OpType,
        fast_scan: bool,
    ) -> list[Pem]:
        size = scan_type_to_size(scan_type)
        old_data = bytes(old.data)
        new_data = bytes(new.data)
        found = []
        for offset in range(0, len(old_data) - size + 1, STEP):
            address = old.address + offset
            if scan_type != ScanType.STRING and skip_address_by_fast_scan(
                address, size, fast_scan
            ):
                continue
            current = new_data[offset:offset + size]
            if mem_compare_array(current, old_data[offset:offset + size], op):
                found.append(self._new_pem(address, size, scan_type, current))
        return found