from typing import Any, Optional


class SqlCoroException(Exception):
    pass


class RowSourceException(SqlCoroException):
    pass


class ContextCanceledException(SqlCoroException):
    pass


class DeadlineExceededException(ContextCanceledException):
    pass


class CoroutineKilledException(SqlCoroException):
    def __init__(self, reason: Optional[Any] = None):
        super().__init__(f"coroutine killed: {reason or 'no reason given'}")
        self.reason = reason
