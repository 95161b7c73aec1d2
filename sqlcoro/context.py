import logging
import threading
from typing import Callable, List, Optional

from sqlcoro.exceptions import (ContextCanceledException,
                                DeadlineExceededException)

logger = logging.getLogger(__name__)


class Context:
    """
    Cancellation signal that can be shared between a consumer and the coroutines
    it drives. A context is done once it has been cancelled or its deadline has
    passed; callbacks registered with `on_done` are then called exactly once.

    >>> context = Context(timeout=5)
    >>> next_row = iterate_rows(row_source, kill_on_context_done(context))
    >>> ...
    >>> context.cancel()
    """
    def __init__(self, timeout: Optional[float] = None):
        """
        :param timeout: number of seconds after which the context is done.
        Never expires if left undefined.
        """
        self.timeout = timeout
        self.error: Optional[ContextCanceledException] = None
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []
        self._timer: Optional[threading.Timer] = None
        if timeout is not None:
            self._timer = threading.Timer(timeout, self._expire)
            self._timer.daemon = True
            self._timer.start()

    @property
    def done(self) -> bool:
        return self.error is not None

    def cancel(self) -> None:
        self._finish(ContextCanceledException("context canceled"))

    def on_done(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register a callback to be called when the context is done. If the context
        is already done the callback is called immediately.

        :param callback: function without arguments.
        :return: function that unregisters the callback. Does nothing once the
        callback has been called.
        """
        with self._lock:
            if self.error is None:
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)
        callback()
        return lambda: None

    def _remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def _expire(self) -> None:
        logger.debug(f"Context deadline of {self.timeout}s exceeded")
        self._finish(
            DeadlineExceededException(f"deadline of {self.timeout}s exceeded")
        )

    def _finish(self, error: ContextCanceledException) -> None:
        with self._lock:
            if self.error is not None:
                return
            self.error = error
            callbacks, self._callbacks = self._callbacks, []
        if self._timer is not None:
            self._timer.cancel()
        for callback in callbacks:
            callback()
