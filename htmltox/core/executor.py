"""
Single-worker task executor.

wkhtmltox keeps thread-affine state and must never be entered from two
threads, so every native call runs on one daemon worker thread. Callers on
any thread submit a task and block until the worker has run it; tasks run
strictly one at a time in submission order, with no cancellation or timeout.

Usage:
    executor = get_task_executor()
    version = executor.run(lambda bindings: bindings.pdf.version())
"""
import logging
import queue
import threading
import time
from concurrent.futures import Future
from typing import Callable, Optional, Tuple, TypeVar

from prometheus_client import Gauge, Histogram

from htmltox.config import settings
from htmltox.core.exceptions import CoreError, ExecutionStateError
from htmltox.core.lifecycle import NativeBindings

logger = logging.getLogger(__name__)

T = TypeVar("T")
Task = Callable[[NativeBindings], T]

# Prometheus metrics
QUEUE_DEPTH = Gauge(
    "htmltox_executor_queue_depth", "Native tasks waiting for the worker thread"
)
TASK_DURATION = Histogram(
    "htmltox_executor_task_duration_seconds", "Time spent running one native task"
)


def _default_bindings() -> NativeBindings:
    """Load the native library and declare its entry points."""
    from htmltox.adapters.native import create_bindings, load_library

    return create_bindings(load_library(), use_graphics=settings.USE_GRAPHICS)


class TaskExecutor:
    """Funnels tasks onto one dedicated daemon thread.

    Args:
        bindings_factory: Produces the NativeBindings handed to every task.
            Called once, on the worker thread, before the first task runs.
    """

    def __init__(self, bindings_factory: Optional[Callable[[], NativeBindings]] = None):
        self._bindings_factory = bindings_factory or _default_bindings
        self._bindings: Optional[NativeBindings] = None
        self._queue: "queue.Queue[Optional[Tuple[Task, Future]]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._closed = False

    def run(self, task: Task) -> T:
        """Run ``task`` on the worker thread and return its result.

        Core errors raised by the task are re-raised unchanged. Anything else,
        including an interrupt while waiting, is wrapped in ExecutionStateError.
        An interrupted caller does not stop the task already in flight.
        """
        future = self.submit(task)
        try:
            return future.result()
        except CoreError:
            raise
        except KeyboardInterrupt as e:
            raise ExecutionStateError("Interrupted while waiting for the native worker") from e
        except BaseException as e:
            raise ExecutionStateError(f"Native task failed: {e!r}") from e

    def submit(self, task: Task) -> Future:
        """Queue ``task`` and return a future for its result."""
        with self._lock:
            if self._closed:
                raise ExecutionStateError("Task executor has been shut down")
            self._start_worker()
            future: Future = Future()
            self._queue.put((task, future))
            QUEUE_DEPTH.inc()
        return future

    def queue_depth(self) -> int:
        """Number of tasks waiting behind the one in flight."""
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks; the worker exits after draining the queue."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._thread
            if thread is not None:
                self._queue.put(None)
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join()

    def _start_worker(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._work, name="htmltox-native-worker", daemon=True
        )
        self._thread.start()
        logger.debug("Started native worker thread")

    def _work(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                logger.debug("Native worker thread stopping")
                return
            task, future = item
            QUEUE_DEPTH.dec()
            if not future.set_running_or_notify_cancel():
                continue
            start = time.monotonic()
            try:
                result = task(self._get_bindings())
            except BaseException as e:
                logger.debug(f"Native task failed: {e!r}")
                future.set_exception(e)
            else:
                future.set_result(result)
            finally:
                TASK_DURATION.observe(time.monotonic() - start)

    def _get_bindings(self) -> NativeBindings:
        if self._bindings is None:
            self._bindings = self._bindings_factory()
        return self._bindings


# Singleton instance
_executor: Optional[TaskExecutor] = None
_executor_lock = threading.Lock()


def get_task_executor() -> TaskExecutor:
    """Get or create the process-wide task executor."""
    global _executor
    if _executor is None:
        with _executor_lock:
            if _executor is None:
                _executor = TaskExecutor()
    return _executor
