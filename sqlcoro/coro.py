"""
Suspend/resume primitive. A producer function is run on a dedicated worker
thread that only ever runs while the consumer is blocked in `resume`, so the two
sides strictly alternate:

>>> def producer(yield_):
>>>     for value in values:
>>>         shared.value = value
>>>         yield_()
>>>
>>> resume = new(producer)
>>> while resume():
>>>     print(shared.value)

Hand-over between the two threads goes through a single condition variable,
which also orders every write made by one side before the other side resumes.
"""
import logging
import threading
from typing import Any, Callable, List, Optional

from sqlcoro.context import Context
from sqlcoro.exceptions import CoroutineKilledException

logger = logging.getLogger(__name__)

YieldFunc = Callable[[], None]
ProducerFunc = Callable[[YieldFunc], None]
ResumeFunc = Callable[[], bool]


class Options:
    def __init__(self):
        self.contexts: List[Context] = []
        self.name: Optional[str] = None


SetOption = Callable[[Options], None]


def kill_on_context_done(context: Context) -> SetOption:
    """
    Kill the coroutine when the context is done. A producer suspended in
    `yield_` is woken up and `yield_` raises `CoroutineKilledException`, so any
    `finally` block in the producer runs on the worker thread.

    :param context: context whose cancellation kills the coroutine.
    """
    def set_option(options: Options) -> None:
        options.contexts.append(context)
    return set_option


def with_name(name: str) -> SetOption:
    """
    :param name: name of the worker thread running the producer.
    """
    def set_option(options: Options) -> None:
        options.name = name
    return set_option


class Coroutine:
    def __init__(self, func: ProducerFunc, options: Options):
        self._func = func
        self._name = options.name
        self._cond = threading.Condition()
        self._started = False
        self._done = False
        self._killed = False
        self._kill_reason: Optional[Any] = None
        self._producer_turn = False
        self._failure: Optional[BaseException] = None
        self._unwatch: List[Callable[[], None]] = []
        for context in options.contexts:
            self._unwatch.append(context.on_done(self._kill_callback(context)))

    @property
    def alive(self) -> bool:
        with self._cond:
            return not self._done

    def resume(self) -> bool:
        """
        Run the producer until it yields or returns.

        :return: True if the producer yielded, False if it has returned or was
        killed. Exceptions raised by the producer are re-raised here.
        """
        with self._cond:
            if self._done:
                return False
            if not self._started:
                self._started = True
                if self._killed:
                    logger.debug(f"Coroutine `{self}` killed before start")
                    self._stop_watching()
                    self._done = True
                    return False
                self._producer_turn = True
                thread = threading.Thread(
                    target=self._run, name=self._name, daemon=True
                )
                thread.start()
            else:
                self._producer_turn = True
                self._cond.notify_all()
            while self._producer_turn:
                self._cond.wait()
            if self._failure is not None:
                failure, self._failure = self._failure, None
                raise failure
            return not self._done

    def kill(self, reason: Optional[Any] = None) -> None:
        """
        Kill the coroutine. Has no effect on a coroutine that has already
        returned or been killed.

        :param reason: reason for killing, exposed on the raised
        `CoroutineKilledException`.
        """
        with self._cond:
            if self._done or self._killed:
                return
            logger.debug(f"Killing coroutine `{self}`: {reason}")
            self._killed = True
            self._kill_reason = reason
            self._cond.notify_all()

    def _stop_watching(self) -> None:
        unwatch, self._unwatch = self._unwatch, []
        for remove_callback in unwatch:
            remove_callback()

    def _kill_callback(self, context: Context) -> Callable[[], None]:
        return lambda: self.kill(context.error)

    def _yield(self) -> None:
        with self._cond:
            if self._killed:
                raise CoroutineKilledException(self._kill_reason)
            self._producer_turn = False
            self._cond.notify_all()
            while not self._producer_turn and not self._killed:
                self._cond.wait()
            if self._killed:
                raise CoroutineKilledException(self._kill_reason)

    def _run(self) -> None:
        try:
            self._func(self._yield)
        except CoroutineKilledException as ex:
            logger.debug(f"Coroutine `{self}` unwound after kill: {ex.reason}")
        except BaseException as ex:
            self._failure = ex
        finally:
            self._stop_watching()
            with self._cond:
                self._done = True
                self._producer_turn = False
                self._cond.notify_all()

    def __repr__(self):
        return self._name or "<unnamed>"


def new(func: ProducerFunc, *options: SetOption) -> ResumeFunc:
    """
    Create a coroutine from a producer function.

    :param func: producer receiving a `yield_` function. Each call to `yield_`
    suspends the producer and hands control back to the caller of `resume`.
    :param options: option setters, each applied once to a fresh `Options`.
    :return: the `resume` function driving the producer.
    """
    coro_options = Options()
    for set_option in options:
        set_option(coro_options)
    return Coroutine(func, coro_options).resume
