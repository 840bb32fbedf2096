"""Best-effort background tasks (notification e-mails) run after commit."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional

from luna_ops.utils.logger import get_logger

logger = get_logger("luna_ops.services.notifier")


class Notifier:
    """Bounded worker pool for fire-and-forget tasks.

    Task failures are logged and never reach the caller that submitted them.
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="notifier")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def _run(self, name: str, fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        try:
            fn(*args, **kwargs)
            logger.debug("notifier.task.done", task=name)
        except Exception as e:
            logger.error("notifier.task.failed", task=name, error=str(e), error_type=type(e).__name__)

    def submit(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        future = self._executor.submit(self._run, name, fn, args, kwargs)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._discard)
        return future

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def drain(self, timeout: Optional[float] = 10.0) -> None:
        """Block until every submitted task has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
