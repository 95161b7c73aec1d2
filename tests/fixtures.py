from typing import List, Optional, Sequence, Tuple

from sqlalchemy.engine import Engine, create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import text

from sqlcoro.base.row_source import BaseRowSource
from sqlcoro.exceptions import RowSourceException


class FakeRowSource(BaseRowSource):
    """
    Row source producing `rows` rows that records how it is called and fails
    loudly if `last_error` is called before exhaustion or `release` twice.
    """
    def __init__(self,
                 rows: int = 0,
                 err: Optional[Exception] = None,
                 release_err: Optional[Exception] = None,
                 ):
        super().__init__("fake")
        self.rows = rows
        self.err = err
        self.release_err = release_err
        self.consumed = 0
        self.advance_calls = 0
        self.last_error_calls = 0
        self.release_calls = 0
        self.calls: List[str] = []

    def _check_exhausted(self, method: str) -> None:
        if self.consumed <= self.rows:
            raise RowSourceException(f"called {method} before advance returned False")

    def advance(self) -> bool:
        self.calls.append("advance")
        self.advance_calls += 1
        self.consumed += 1
        return self.consumed <= self.rows

    def last_error(self) -> Optional[Exception]:
        self.calls.append("last_error")
        self._check_exhausted("last_error")
        self.last_error_calls += 1
        return self.err

    def release(self) -> Optional[Exception]:
        self.calls.append("release")
        if self.release_calls:
            raise RowSourceException("release called twice")
        self.release_calls += 1
        return self.release_err


class RaisingRowSource(FakeRowSource):
    """
    Row source whose `advance` raises after `rows` rows.
    """
    def __init__(self, rows: int, exception: Exception):
        super().__init__(rows=rows)
        self.exception = exception

    def advance(self) -> bool:
        if self.consumed >= self.rows:
            self.consumed += 1
            raise self.exception
        return super().advance()


CUSTOMERS: Sequence[Tuple[int, str]] = ((13, "foo"), (42, "bar"))


def get_engine(customers: Sequence[Tuple[int, str]] = CUSTOMERS) -> Engine:
    """
    In-memory SQLite engine that can be shared between threads, with a
    `customer` table populated with `customers`.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE customer (id INTEGER, name VARCHAR(20))"))
        for customer_id, name in customers:
            conn.execute(
                text("INSERT INTO customer (id, name) VALUES (:id, :name)"),
                {"id": customer_id, "name": name},
            )
    return engine
