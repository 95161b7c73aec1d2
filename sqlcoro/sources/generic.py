from typing import Any, Dict, Optional, Sequence

from sqlcoro.base.row_source import BaseRowSource
from sqlcoro.exceptions import RowSourceException


class SequenceRowSource(BaseRowSource):
    """
    Row source over an in-memory sequence. Enforces the row source contract:
    `last_error` and `release` are only allowed once the source is exhausted,
    and `release` only once.
    """
    def __init__(self, rows: Sequence[Any], name: Optional[str] = None):
        super().__init__(name)
        self.rows = rows
        self._index = -1
        self._exhausted = False
        self._released = False

    def _get_row(self, index: int) -> Any:
        return self.rows[index]

    def advance(self) -> bool:
        if self._exhausted:
            return False
        self._index += 1
        if self._index >= len(self.rows):
            self._exhausted = True
            return False
        return True

    def last_error(self) -> Optional[Exception]:
        if not self._exhausted:
            raise RowSourceException(
                f"`last_error` called on `{self!r}` before rows were exhausted")
        return None

    def release(self) -> Optional[Exception]:
        if self._released:
            raise RowSourceException(f"Row source `{self!r}` already released")
        self._released = True
        return None

    @property
    def row(self) -> Any:
        if self._exhausted or self._index < 0:
            raise RowSourceException(f"No current row in `{self!r}`")
        return self._get_row(self._index)


class DictRowSource(SequenceRowSource):
    def __init__(self,
                 rows: Sequence[Dict[str, Any]],
                 name: Optional[str] = None,
                 ):
        super().__init__(rows, name)


class ListRowSource(SequenceRowSource):
    def __init__(self,
                 column_names: Sequence[str],
                 rows: Sequence[Sequence[Any]],
                 name: Optional[str] = None,
                 ):
        super().__init__(rows, name)
        self.column_names = column_names

    def _get_row(self, index: int) -> Dict[str, Any]:
        row = self.rows[index]
        return {self.column_names[i]: row[i] for i in range(len(self.column_names))}
