"""Tests for the single-worker task executor."""
import threading
import time

import pytest
from htmltox.core.exceptions import (
    ConversionError,
    ExecutionStateError,
    LibraryLoadError,
)
from htmltox.core.executor import TaskExecutor, get_task_executor


class TestTaskExecutorRun:
    def test_returns_task_result(self, executor, bindings):
        result = executor.run(lambda b: (b is bindings, 42))
        assert result == (True, 42)

    def test_runs_tasks_on_single_worker_thread(self, executor):
        caller = threading.get_ident()
        idents = [executor.run(lambda b: threading.get_ident()) for _ in range(5)]

        assert len(set(idents)) == 1
        assert idents[0] != caller

    def test_worker_is_daemon(self, executor):
        thread = executor.run(lambda b: threading.current_thread())
        assert thread.daemon is True
        assert executor.is_running

    def test_worker_starts_lazily(self, bindings):
        executor = TaskExecutor(bindings_factory=lambda: bindings)
        assert not executor.is_running
        executor.run(lambda b: None)
        assert executor.is_running
        executor.shutdown()

    def test_core_error_keeps_identity(self, executor):
        error = ConversionError("native failure")

        def task(b):
            raise error

        with pytest.raises(ConversionError) as exc_info:
            executor.run(task)
        assert exc_info.value is error

    def test_other_errors_are_wrapped(self, executor):
        def task(b):
            raise RuntimeError("boom")

        with pytest.raises(ExecutionStateError) as exc_info:
            executor.run(task)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_worker_survives_failed_task(self, executor):
        def task(b):
            raise RuntimeError("boom")

        with pytest.raises(ExecutionStateError):
            executor.run(task)
        assert executor.run(lambda b: "still alive") == "still alive"

    def test_interrupt_while_waiting_is_wrapped(self, executor, monkeypatch):
        from concurrent.futures import Future

        def interrupted(self, timeout=None):
            raise KeyboardInterrupt

        monkeypatch.setattr(Future, "result", interrupted)
        with pytest.raises(ExecutionStateError, match="Interrupted"):
            executor.run(lambda b: None)


class TestTaskExecutorOrdering:
    def test_tasks_run_in_submission_order(self, executor):
        order = []
        futures = [
            executor.submit(lambda b, i=i: order.append(i)) for i in range(20)
        ]
        for future in futures:
            future.result()

        assert order == list(range(20))

    def test_tasks_never_overlap(self, executor):
        active = []
        overlaps = []
        lock = threading.Lock()

        def task(b):
            with lock:
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
            time.sleep(0.01)
            with lock:
                active.pop()

        threads = [threading.Thread(target=executor.run, args=(task,)) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []


class TestTaskExecutorBindings:
    def test_factory_called_once_on_worker(self, bindings):
        calls = []

        def factory():
            calls.append(threading.get_ident())
            return bindings

        executor = TaskExecutor(bindings_factory=factory)
        worker = executor.run(lambda b: threading.get_ident())
        executor.run(lambda b: None)
        executor.shutdown()

        assert calls == [worker]

    def test_factory_failure_reaches_caller(self):
        def factory():
            raise LibraryLoadError("no library")

        executor = TaskExecutor(bindings_factory=factory)
        with pytest.raises(LibraryLoadError, match="no library"):
            executor.run(lambda b: None)
        executor.shutdown()


class TestTaskExecutorShutdown:
    def test_rejects_tasks_after_shutdown(self, bindings):
        executor = TaskExecutor(bindings_factory=lambda: bindings)
        executor.run(lambda b: None)
        executor.shutdown()

        assert not executor.is_running
        with pytest.raises(ExecutionStateError, match="shut down"):
            executor.run(lambda b: None)

    def test_shutdown_is_idempotent(self, bindings):
        executor = TaskExecutor(bindings_factory=lambda: bindings)
        executor.shutdown()
        executor.shutdown()


class TestGetTaskExecutor:
    def test_returns_singleton(self):
        assert get_task_executor() is get_task_executor()
