import csv
import logging
from typing import IO, Any, Dict, Iterator, List, Optional

from sqlcoro.base.row_source import BaseRowSource
from sqlcoro.exceptions import RowSourceException
from sqlcoro.utils.file import detect_encoding

logger = logging.getLogger(__name__)


class CsvRowSource(BaseRowSource):
    """
    Row source that reads from a CSV file. Expects the first row to contain column
    names, with subsequent rows containing column values in the same order. The
    file is opened on the first call to `advance` and closed by `release`.
    """

    def __init__(self,
                 file_path: str,
                 name: Optional[str] = None,
                 delimiter: str = ",",
                 encoding: Optional[str] = None,
                 encoding_sample_lines: Optional[int] = 10000):
        """
        :param file_path: path to the csv file.
        :param name: name of data source.
        :param delimiter: csv file delimiter.
        :param encoding: Character encoding of csv file. Autodetected on first
        read if left undefined.
        :param encoding_sample_lines: number of lines read when autodetecting the
        encoding. Reads the whole file if set to None.
        """
        super().__init__(name)
        self.file_path = file_path
        self.delimiter = delimiter
        self.encoding = encoding
        self.encoding_sample_lines = encoding_sample_lines
        self.columns: List[str] = []
        self.row_number = 0
        self._file: Optional[IO[str]] = None
        self._reader: Optional[Iterator[List[str]]] = None
        self._current: Optional[Dict[str, Any]] = None
        self._error: Optional[Exception] = None
        self._exhausted = False

    def __repr__(self):
        return self.name or self.file_path or '<undefined>'

    def _open(self) -> Iterator[List[str]]:
        if self.encoding is None:
            logger.debug(f"Autodetecting encoding for CSV row source: {self}")
            self.encoding = detect_encoding(
                self.file_path, max_lines=self.encoding_sample_lines
            )["encoding"] or "utf-8"
            logger.debug(f"Detected file encoding: {self.encoding}")
        logger.debug(f"Start reading CSV row source: {self}")
        self._file = open(self.file_path, newline="", encoding=self.encoding)
        reader = csv.reader(self._file, delimiter=self.delimiter)
        self.columns = next(reader, [])
        self.row_number = 1
        return reader

    def advance(self) -> bool:
        if self._exhausted:
            return False
        try:
            if self._reader is None:
                self._reader = self._open()
            in_row = next(self._reader, None)
        except (OSError, UnicodeDecodeError, csv.Error) as ex:
            return self._fail(ex)

        if in_row is None:
            self._exhausted = True
            self._current = None
            logger.info(
                f"Finished reading {max(self.row_number - 1, 0)} rows for CSV row "
                f"source: {self}"
            )
            return False

        self.row_number += 1
        if len(in_row) != len(self.columns):
            return self._fail(RowSourceException(
                f"Error reading row {self.row_number} of CSV file {self}: "
                f"Expected {len(self.columns)} columns, found {len(in_row)}"))
        self._current = {self.columns[i]: col for i, col in enumerate(in_row)}
        return True

    def _fail(self, error: Exception) -> bool:
        self._error = error
        self._exhausted = True
        self._current = None
        return False

    def last_error(self) -> Optional[Exception]:
        return self._error

    def release(self) -> Optional[Exception]:
        if self._file is None:
            return None
        try:
            self._file.close()
        except OSError as ex:
            return ex
        finally:
            self._file = None
        return None

    @property
    def row(self) -> Optional[Dict[str, Any]]:
        return self._current
