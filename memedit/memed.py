"""The memory editor: scans, filters, a store of watched addresses and value locking."""

from __future__ import annotations

import json
import logging
import threading

from memedit.common import (
    MedError,
    OpType,
    Process,
    ScanType,
    hex_to_int,
    is_pid_suspended,
    pid_list,
    pid_resume,
    pid_stop,
    scan_type_to_size,
)
from memedit.memlist import MemList
from memedit.memory import LocalMemory, Mem, MemIO, Pem, Sem
from memedit.memscanner import MemScanner
from memedit.namedscans import NamedScans
from memedit import scanparser
from memedit.scancommand import get_scan_command

LOCK_REFRESH_RATE = 0.8

_log = logging.getLogger(__name__)


class MemEd:
    """Scans a target's memory and keeps a store of addresses, some locked to a value."""

    def __init__(self, pid: int = 0, memory: LocalMemory | None = None) -> None:
        self.memio = MemIO(pid, memory)
        self.scanner = MemScanner(pid, self.memio)
        self._pid = pid
        self.store = MemList()
        self.named_scans = NamedScans()
        self.processes: list[Process] = []
        self.selected_process: Process | None = None
        self.notes = ""
        self.can_resume_process = True
        self.is_process_paused = False
        self.store_lock = threading.Lock()
        self._stop = threading.Event()
        self._lock_thread = threading.Thread(
            target=self._lock_loop, name="memedit-lock", daemon=True
        )
        self._lock_thread.start()

    @property
    def pid(self) -> int:
        return self._pid

    @pid.setter
    def pid(self, value: int) -> None:
        self._pid = value
        self.scanner.pid = value

    @property
    def scan_list_lock(self) -> threading.Lock:
        return self.scanner.list_lock

    def scan(
        self,
        value: str,
        scan_type: ScanType | str = ScanType.INT32,
        fast_scan: bool = False,
        last_digit: str = "",
    ) -> list[Pem]:
        """Start a new scan; ``"?"`` saves a snapshot for a later unknown-value filter."""
        if not scanparser.is_valid(value):
            raise MedError("Invalid scan string")
        op = scanparser.get_op_type(value)
        last_digits = scanparser.get_integers(last_digit)

        mems: list[Pem] = []
        if op is OpType.SNAPSHOT_SAVE:
            self.scanner.save_snapshot(self.store.items)
        else:
            command = get_scan_command(value, scan_type)
            mems = self.scanner.scan(command, last_digits, fast_scan)
        self.named_scans.set_mem_ptrs(mems, scan_type)
        return mems

    def filter(
        self, value: str, scan_type: ScanType | str = ScanType.INT32, fast_scan: bool = False
    ) -> list[Pem]:
        """Narrow the active scan list by a value or by a change since the last scan."""
        if not scanparser.is_valid(value):
            raise MedError("Invalid scan string")
        op = scanparser.get_op_type(value)
        current = self._active_items()
        if scanparser.is_snapshot_operator(op) and not scanparser.has_values(value):
            mems = self.scanner.filter_unknown(current, scan_type, op, fast_scan)
        else:
            command = get_scan_command(value, scan_type)
            mems = self.scanner.filter(current, command)
        self.named_scans.set_mem_ptrs(mems, scan_type)
        return mems

    def _active_items(self) -> list[Pem]:
        mem_list = self.named_scans.get_mem_list()
        return list(mem_list.items) if mem_list is not None else []

    def scans(self) -> MemList:
        """A copy of the active scan list."""
        return MemList(self._active_items())

    def list_processes(self) -> list[Process]:
        self.processes = pid_list()
        return self.processes

    def select_process_by_index(self, index: int) -> Process:
        self.selected_process = self.processes[index]
        self.pid = int(self.selected_process.pid)
        return self.selected_process

    def clear_scans(self) -> None:
        mem_list = self.named_scans.get_mem_list()
        if mem_list is not None:
            mem_list.clear()

    def add_to_store_by_index(self, index: int) -> Sem:
        """Copy a scan result into the store."""
        sem = Sem.from_pem(self.scans()[index])
        self.store.add(sem)
        return sem

    def lock_values(self) -> None:
        """Write every locked entry's value back to memory."""
        with self.store_lock:
            for sem in self.store:
                if sem.locked:
                    sem.lock_value()

    def has_lock_value(self) -> bool:
        return any(sem.locked for sem in self.store)

    def _lock_loop(self) -> None:
        while not self._stop.wait(LOCK_REFRESH_RATE):
            try:
                if self.has_lock_value():
                    self.lock_values()
                    if not self.is_process_paused and self.can_resume_process:
                        self.resume_process()
            except (MedError, OSError) as exc:
                _log.warning("%s", exc)

    def save_file(self, filename: str) -> None:
        """Save the store and notes as JSON."""
        addresses = []
        for sem in self.store:
            try:
                value = sem.get_value()
            except MedError:
                value = ""
            addresses.append(
                {
                    "description": sem.description,
                    "address": sem.address_as_string(),
                    "type": sem.scan_type.value,
                    "value": value,
                    "lock": sem.locked,
                }
            )
        root = {"addresses": addresses, "notes": self.notes}
        try:
            with open(filename, "w", encoding="utf-8") as file:
                json.dump(root, file, indent=3)
                file.write("\n")
        except OSError as exc:
            raise MedError(f"Save JSON: Fail to open file {filename}") from exc

    def open_file(self, filename: str) -> None:
        """Replace the store with the entries of a saved JSON file."""
        try:
            with open(filename, encoding="utf-8") as file:
                root = json.load(file)
        except OSError as exc:
            raise MedError(f"Open JSON: Fail to open file {filename}") from exc
        except json.JSONDecodeError as exc:
            raise MedError(f"Open JSON: Invalid file {filename}") from exc

        with self.store_lock:
            self.store.clear()
            if isinstance(root, list):
                self._load_entries(root)
            else:
                self._load_entries(root.get("addresses") or [])
                notes = root.get("notes")
                self.notes = notes if isinstance(notes, str) else ""

    def _load_entries(self, entries: list[dict]) -> None:
        for entry in entries:
            scan_type = str(entry.get("type") or "")
            size = scan_type_to_size(scan_type)
            sem = Sem(hex_to_int(str(entry.get("address") or "")), size, self.memio)
            sem.set_scan_type(scan_type)
            sem.description = str(entry.get("description") or "")
            sem.lock(False)  # never restore a lock, so memory is not overwritten on load
            self.store.add(sem)

    def add_new_address(self) -> Sem:
        sem = Sem(0, scan_type_to_size(ScanType.INT32), self.memio)
        sem.set_scan_type(ScanType.INT32)
        sem.description = "No description"
        self.store.add(sem)
        return sem

    def read_memory(self, address: int, size: int) -> Mem:
        return self.memio.read(address, size)

    def set_value_by_address(
        self, address: int, value: str, scan_type: ScanType | str
    ) -> None:
        pem = Pem(address, scan_type_to_size(scan_type), self.memio)
        pem.set_value(value, scan_type)

    def set_scope_start(self, address: int) -> None:
        self.scanner.set_scope_start(address)

    def set_scope_end(self, address: int) -> None:
        self.scanner.set_scope_end(address)

    def resume_process(self) -> None:
        self.is_process_paused = False
        if self.pid and is_pid_suspended(self.pid):
            pid_resume(self.pid)

    def pause_process(self) -> None:
        if not self.pid:
            return
        self.is_process_paused = True
        pid_stop(self.pid)

    def close(self) -> None:
        """Stop the value-locking thread."""
        self._stop.set()
        if self._lock_thread.is_alive():
            self._lock_thread.join()

    def __enter__(self) -> MemEd:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()