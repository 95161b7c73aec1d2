import logging
from typing import Any, Dict, Optional

from sqlalchemy.engine import Connection, CursorResult, Engine, Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import text

from sqlcoro.base.row_source import BaseRowSource

logger = logging.getLogger(__name__)


class SqlRowSource(BaseRowSource):
    """
    Row source backed by a SQLAlchemy query. The query is executed on the first
    call to `advance`, so the connection is opened and used on the thread that
    iterates over the rows.
    """
    def __init__(
            self,
            sql: str,
            params: Optional[Dict[str, Any]],
            engine: Engine,
            name: Optional[str] = None,
            stream_results: bool = True,
    ):
        """
        :param sql: sql query with parameter values prefixed with a colon, e.g.
        `WHERE dt <= :batch_date`
        :param params: mapping between parameter keys and values, e.g.
        `{"batch_date": date(2010, 1, 1)}`
        :param engine: engine used to execute the query.
        :param name: name of data source
        :param stream_results: fetch rows from the server as they are consumed
        instead of buffering the whole result, where the driver supports it.
        """
        super().__init__(name)
        self.sql = sql
        self.params = params or {}
        self.engine = engine
        self.stream_results = stream_results
        self.row_count = 0
        self._connection: Optional[Connection] = None
        self._result: Optional[CursorResult] = None
        self._current: Optional[Row] = None
        self._error: Optional[Exception] = None
        self._exhausted = False

    def __repr__(self):
        return self.name or "<undefined>"

    def _execute(self) -> CursorResult:
        logger.debug(f"Executing query for SQL row source: {self}")
        self._connection = self.engine.connect()
        if self.stream_results:
            self._connection = self._connection.execution_options(stream_results=True)
        return self._connection.execute(text(self.sql), self.params)

    def advance(self) -> bool:
        if self._exhausted:
            return False
        try:
            if self._result is None:
                self._result = self._execute()
            self._current = self._result.fetchone()
        except SQLAlchemyError as ex:
            logger.debug(f"Query for SQL row source `{self}` failed: {ex}")
            self._error = ex
            self._current = None
            self._exhausted = True
            return False

        if self._current is None:
            self._exhausted = True
            logger.debug(
                f"Finished reading {self.row_count} rows from SQL row source: {self}"
            )
            return False
        self.row_count += 1
        return True

    def last_error(self) -> Optional[Exception]:
        return self._error

    def release(self) -> Optional[Exception]:
        error: Optional[Exception] = None
        try:
            if self._result is not None:
                self._result.close()
        except SQLAlchemyError as ex:
            error = ex
        finally:
            self._result = None
        try:
            if self._connection is not None:
                self._connection.close()
        except SQLAlchemyError as ex:
            error = error or ex
        finally:
            self._connection = None
        return error

    @property
    def row(self) -> Optional[Row]:
        return self._current
