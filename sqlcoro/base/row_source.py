from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from sqlcoro.iterator import RowIterator


class BaseRowSource:
    """
    Base class for cursor-like data sources. A row source is advanced one row at
    a time; the current row is exposed by `row` until the next call to `advance`:
    >>> while row_source.advance():
    >>>     print(row_source.row)
    >>> error = row_source.last_error()
    >>> release_error = row_source.release()

    Errors are returned by `last_error` and `release` rather than raised. A row
    source is not reusable: once `release` has been called it is spent.
    """
    def __init__(self, name: Optional[str] = None):
        self.name = name

    def advance(self) -> bool:
        """
        Move to the next row.

        :return: True if a new row is available, False if the source is exhausted
        or failed. Use `last_error` to tell the two apart.
        """
        raise NotImplementedError("`advance` not implemented")

    def last_error(self) -> Optional[Exception]:
        """
        Only valid after `advance` has returned False, and before `release`.

        :return: The error that ended iteration, or None if the source was
        exhausted cleanly.
        """
        raise NotImplementedError("`last_error` not implemented")

    def release(self) -> Optional[Exception]:
        """
        Free any resources held by the source. Called exactly once, normally
        after `advance` has returned False.

        :return: The error raised while releasing, if any.
        """
        raise NotImplementedError("`release` not implemented")

    @property
    def row(self) -> Any:
        """
        Handle of the current row. Only valid until the next call to `advance`.
        Defaults to the row source itself.
        """
        return self

    def __iter__(self) -> "RowIterator":
        from sqlcoro.iterator import RowIterator
        return RowIterator(self)

    def __repr__(self):
        return self.name or "<undefined>"
