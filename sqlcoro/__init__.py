import logging

from sqlcoro.base.row_source import BaseRowSource
from sqlcoro.context import Context
from sqlcoro.coro import kill_on_context_done, with_name
from sqlcoro.iterator import NextFunc, RowIterator, Slot, iterate_rows

__version__ = "0.1.0"

# initialize logging
logger = logging.getLogger(__name__)

__all__ = [
    "BaseRowSource",
    "Context",
    "NextFunc",
    "RowIterator",
    "Slot",
    "iterate_rows",
    "kill_on_context_done",
    "with_name",
]
