import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.sql import text

from sqlcoro import Context, Slot, iterate_rows, kill_on_context_done
from sqlcoro.sources.sql import SqlRowSource


def init_source(url: str) -> None:
    engine = create_engine(url)
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE IF EXISTS customer"))
        conn.execute(text("CREATE TABLE customer (id INTEGER, name VARCHAR(20))"))
        conn.execute(text("INSERT INTO customer (id, name) VALUES (13, 'foo'), (42, 'bar')"))
    engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    source_url = os.getenv("SQLCORO_SOURCE", "sqlite:///source.db")
    init_source(source_url)

    rows = SqlRowSource(
        sql="SELECT id, name FROM customer ORDER BY id",
        params={},
        engine=create_engine(source_url),
        name="customers",
    )

    # tie the iterator's lifetime to this block; cancelling releases the rows
    # even if we stop early
    context = Context(timeout=30)
    next_row = iterate_rows(rows, kill_on_context_done(context))

    row, err = Slot(), Slot()
    try:
        while next_row(row, err):
            print("ID:", row.value.id, "Name:", row.value.name)
    finally:
        context.cancel()
    if err.value is not None:
        raise err.value
