"""Run queued tasks with a bounded number of worker threads."""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

Task = Callable[[], object]


class ThreadManager:
    """Queue callables and run them at most ``max_threads`` at a time."""

    def __init__(self, max_threads: int = 8) -> None:
        self.max_threads = max_threads
        self._tasks: list[Task] = []

    @property
    def max_threads(self) -> int:
        return self._max_threads

    @max_threads.setter
    def max_threads(self, value: int) -> None:
        if value < 1:
            raise ValueError("max_threads must be at least 1")
        self._max_threads = value

    def queue_task(self, fn: Task) -> None:
        self._tasks.append(fn)

    def clear(self) -> None:
        self._tasks.clear()

    def __len__(self) -> int:
        return len(self._tasks)

    def start(self) -> None:
        """Run all queued tasks and wait for them; re-raise the first failure."""
        with ThreadPoolExecutor(max_workers=self._max_threads) as executor:
            futures = [executor.submit(task) for task in self._tasks]
        for future in futures:
            future.result()