from unittest import TestCase

from sqlcoro.exceptions import RowSourceException
from sqlcoro.iterator import Slot, iterate_rows
from sqlcoro.sources.generic import DictRowSource, ListRowSource


class DictSourceTestCase(TestCase):
    def test_row_source(self):
        input_rows = (
            {"a": 1, "b": "txt"},
            {"a": 2, "c": "xyz"},
        )
        row_source = DictRowSource(rows=input_rows)
        output_rows = []
        for row in row_source:
            output_rows.append(row)
        self.assertListEqual(output_rows, list(input_rows))

    def test_contract(self):
        row_source = DictRowSource(rows=({"a": 1},), name="dicts")
        self.assertRaises(RowSourceException, row_source.last_error)
        self.assertRaises(RowSourceException, lambda: row_source.row)
        self.assertTrue(row_source.advance())
        self.assertDictEqual({"a": 1}, row_source.row)
        self.assertRaises(RowSourceException, row_source.last_error)
        self.assertFalse(row_source.advance())
        self.assertFalse(row_source.advance())
        self.assertIsNone(row_source.last_error())
        self.assertIsNone(row_source.release())
        self.assertRaises(RowSourceException, row_source.release)
        self.assertEqual("dicts", repr(row_source))

    def test_empty(self):
        next_row = iterate_rows(DictRowSource(rows=()))
        err = Slot()
        self.assertFalse(next_row(Slot(), err))
        self.assertIsNone(err.value)


class ListSourceTestCase(TestCase):
    def test_row_source(self):
        input_rows = (
            (1, "txt"),
            (2, "xyz"),
        )
        row_source = ListRowSource(column_names=("a", "b"), rows=input_rows)

        expected_rows = [
            {"a": 1, "b": "txt"},
            {"a": 2, "b": "xyz"},
        ]
        output_rows = []
        for row in row_source:
            output_rows.append(row)
        self.assertListEqual(expected_rows, output_rows)

    def test_advancing_function(self):
        row_source = ListRowSource(column_names=("id", "name"),
                                   rows=((13, "foo"), (42, "bar")))
        next_row = iterate_rows(row_source)
        row, err = Slot(), Slot()
        ids = []
        while next_row(row, err):
            ids.append(row.value["id"])
        self.assertListEqual([13, 42], ids)
        self.assertIsNone(err.value)
