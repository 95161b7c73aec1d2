import logging
from typing import TYPE_CHECKING, Any, Generic, Optional, Protocol, TypeVar

from sqlcoro import coro
from sqlcoro.context import Context
from sqlcoro.utils.config import is_developer_mode

if TYPE_CHECKING:
    from sqlcoro.base.row_source import BaseRowSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Slot(Generic[T]):
    """
    Mutable box that the advancing function writes its results into.
    """
    def __init__(self, value: Optional[T] = None):
        self.value = value

    def __repr__(self):
        return f"Slot({self.value!r})"


class NextFunc(Protocol):
    def __call__(self, into: Slot, err: Optional[Slot] = None) -> bool:
        ...


def _release(row_source: "BaseRowSource") -> Optional[Exception]:
    try:
        return row_source.release()
    except Exception as ex:
        return ex


def iterate_rows(row_source: "BaseRowSource", *options: coro.SetOption) -> NextFunc:
    """
    Turn a row source into an advancing function. Each call moves the source to
    the next row and writes its row handle into `into`. Once the source is
    exhausted the function returns False, and the error from the source, if any,
    is written into `err`:

    >>> next_row = iterate_rows(row_source)
    >>> row, err = Slot(), Slot()
    >>> while next_row(row, err):
    >>>     print(row.value)
    >>> if err.value is not None:
    >>>     handle(err.value)

    `release` is called on the source exactly once, after `advance` has returned
    False or after the coroutine has been killed. An error from `last_error`
    takes precedence over an error from `release`.
    Exceptions that are not `Exception` subclasses, e.g. `KeyboardInterrupt`, are
    re-raised from the advancing function after the source has been released.

    :param row_source: row source to iterate over. Can only be iterated once.
    :param options: options passed on to the underlying coroutine, e.g.
    `kill_on_context_done(context)`.
    :return: advancing function
    """
    yielded: Any = None
    returned: Optional[Exception] = None
    developer_mode = is_developer_mode()

    def produce(yield_: coro.YieldFunc) -> None:
        nonlocal yielded, returned
        row_count = 0
        error: Optional[Exception] = None
        try:
            while row_source.advance():
                yielded = row_source.row
                row_count += 1
                if developer_mode:
                    logger.debug(f"Row {row_count} from `{row_source!r}`: {yielded!r}")
                yield_()
            error = row_source.last_error()
        except Exception as ex:
            error = ex
        finally:
            release_error = _release(row_source)
            if error is None:
                error = release_error
            elif release_error is not None:
                logger.warning(
                    f"Discarding error from releasing `{row_source!r}`, already "
                    f"failed with `{error}`: {release_error}"
                )
            logger.debug(f"Row source `{row_source!r}` done after {row_count} rows")
            returned = error

    resume = coro.new(produce, *options)

    def next_row(into: Slot, err: Optional[Slot] = None) -> bool:
        alive = resume()
        if alive:
            into.value = yielded
        if returned is not None and err is not None:
            err.value = returned
        return alive

    return next_row


class RowIterator:
    """
    Iterator over the row handles of a row source. Raises the terminal error of
    the source, if any, once the rows are exhausted.

    >>> with RowIterator(row_source, timeout=30) as rows:
    >>>     for row in rows:
    >>>         print(row)
    """
    def __init__(self,
                 row_source: "BaseRowSource",
                 *options: coro.SetOption,
                 timeout: Optional[float] = None,
                 ):
        """
        :param row_source: row source to iterate over.
        :param options: additional options passed on to the underlying coroutine.
        :param timeout: seconds after which iteration is aborted and
        `CoroutineKilledException` is raised.
        """
        self.row_source = row_source
        self.row_count = 0
        self._context = Context(timeout=timeout)
        self._next_row = iterate_rows(
            row_source, coro.kill_on_context_done(self._context), *options
        )
        self._row: Slot = Slot()
        self._error: Slot = Slot()
        self._finished = False

    def __iter__(self) -> "RowIterator":
        return self

    def __next__(self) -> Any:
        if not self._finished:
            if self._next_row(self._row, self._error):
                self.row_count += 1
                return self._row.value
            self._finished = True
            self._context.cancel()
            if self._error.value is not None:
                raise self._error.value
        raise StopIteration

    def close(self) -> None:
        """
        Stop iterating and wait until the row source has been released.
        """
        if self._finished:
            return
        self._context.cancel()
        self._finished = True
        self._next_row(self._row, self._error)

    def __enter__(self) -> "RowIterator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
