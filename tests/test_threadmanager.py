import threading
import time

import pytest

from memedit.threadmanager import ThreadManager


def _tracking_task(state, lock, name, steps, delay):
    def run():
        with lock:
            state["running"] += 1
            state["peak"] = max(state["peak"], state["running"])
        for _ in range(steps):
            time.sleep(delay)
        with lock:
            state["running"] -= 1
            state["done"].append(name)

    return run


def test_runs_all_tasks_with_bounded_concurrency():
    state = {"running": 0, "peak": 0, "done": []}
    lock = threading.Lock()
    manager = ThreadManager(2)
    for name, steps, delay in [
        ("thread1", 4, 0.003),
        ("thread2", 8, 0.002),
        ("thread3", 10, 0.001),
        ("thread4", 20, 0.002),
        ("thread5", 10, 0.003),
    ]:
        manager.queue_task(_tracking_task(state, lock, name, steps, delay))
    manager.start()

    assert sorted(state["done"]) == ["thread1", "thread2", "thread3", "thread4", "thread5"]
    assert 1 <= state["peak"] <= 2
    assert state["running"] == 0


def test_clear_removes_queued_tasks():
    calls = []
    manager = ThreadManager(4)
    manager.queue_task(lambda: calls.append(1))
    assert len(manager) == 1
    manager.clear()
    assert len(manager) == 0
    manager.start()
    assert calls == []


def test_start_waits_for_completion():
    results = []
    manager = ThreadManager(3)
    for value in range(6):
        manager.queue_task(lambda value=value: results.append(value * value))
    manager.start()
    assert sorted(results) == [0, 1, 4, 9, 16, 25]


def test_failure_is_raised_after_all_tasks_ran():
    calls = []

    def fail():
        raise RuntimeError("boom")

    manager = ThreadManager(1)
    manager.queue_task(fail)
    manager.queue_task(lambda: calls.append("after"))
    with pytest.raises(RuntimeError, match="boom"):
        manager.start()
    assert calls == ["after"]


def test_invalid_max_threads():
    with pytest.raises(ValueError):
        ThreadManager(0)
    manager = ThreadManager()
    assert manager.max_threads == 8
    with pytest.raises(ValueError):
        manager.max_threads = -1