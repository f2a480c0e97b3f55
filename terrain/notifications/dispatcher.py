from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

logger = logging.getLogger(__name__)


class NotificationDispatcher(ABC):
    @abstractmethod
    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Schedule ``func`` to run later. Callers never wait on it."""
        ...


class ThreadPoolDispatcher(NotificationDispatcher):
    """Runs notifications on a worker thread. Used outside the web app."""

    def __init__(self, max_workers: int = 2) -> None:
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        future = self.executor.submit(func, *args, **kwargs)
        future.add_done_callback(_log_unhandled)

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)


def _log_unhandled(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Notification task raised: %r", exc)
