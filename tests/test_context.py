import threading
from unittest import TestCase

from sqlcoro.context import Context
from sqlcoro.exceptions import (ContextCanceledException,
                                DeadlineExceededException)


class ContextTestCase(TestCase):
    def test_cancel(self):
        context = Context()
        calls = []
        context.on_done(lambda: calls.append("first"))
        self.assertFalse(context.done)
        self.assertIsNone(context.error)

        context.cancel()
        context.cancel()
        self.assertTrue(context.done)
        self.assertIsInstance(context.error, ContextCanceledException)
        self.assertNotIsInstance(context.error, DeadlineExceededException)
        self.assertListEqual(["first"], calls)

    def test_on_done_after_cancel(self):
        context = Context()
        context.cancel()
        calls = []
        context.on_done(lambda: calls.append("late"))
        self.assertListEqual(["late"], calls)

    def test_timeout(self):
        context = Context(timeout=0.01)
        expired = threading.Event()
        context.on_done(expired.set)
        self.assertTrue(expired.wait(5))
        self.assertIsInstance(context.error, DeadlineExceededException)

    def test_cancel_before_timeout(self):
        context = Context(timeout=60)
        context.cancel()
        self.assertNotIsInstance(context.error, DeadlineExceededException)

    def test_unregister_callback(self):
        context = Context()
        calls = []
        unregister = context.on_done(lambda: calls.append("removed"))
        context.on_done(lambda: calls.append("kept"))
        unregister()
        unregister()
        context.cancel()
        self.assertListEqual(["kept"], calls)

    def test_unregister_after_done(self):
        context = Context()
        context.cancel()
        unregister = context.on_done(lambda: None)
        unregister()
        self.assertListEqual([], context._callbacks)
