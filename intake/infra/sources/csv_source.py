from __future__ import annotations

import csv
from pathlib import Path
from typing import IO

from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import TabularSourceError
from intake.infra.sources.csv_utils import CsvFormatError, hasUndecodable, isBlankRow


class CsvTabularSource:
    """
    Назначение/ответственность:
        TabularSource поверх CSV-файла. Индекс 0: заголовок, пустые строки
        не считаются и не адресуются.

    Взаимодействия:
        Держит один прямой csv.reader; файл переоткрывается только при
        обращении назад. Повторное чтение той же строки берётся из памяти.

    Ограничения:
        Открывает/закрывает вызывающая сторона (open()/close() или with).
        Файл читается с errors="surrogateescape": недекодируемые байты
        остаются в ячейках как суррогаты U+DC80..U+DCFF, и DECODE_ERROR
        получает только строка, в которой они есть.
    """

    def __init__(
        self,
        path: str | Path,
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
        strict_columns: bool = False,
    ) -> None:
        self.path = str(path)
        self.delimiter = delimiter
        self.encoding = encoding
        self.strict_columns = strict_columns
        self._file: IO[str] | None = None
        self._reader = None
        self._next_index = 0
        self._row_count: int | None = None
        self._expected_len: int | None = None
        self._last: tuple[int, list[str]] | None = None

    def open(self) -> "CsvTabularSource":
        self._row_count = self._countRows()
        self._rewind()
        return self

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._reader = None

    def __enter__(self) -> "CsvTabularSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def total_row_count(self) -> int:
        if self._row_count is None:
            self._row_count = self._countRows()
        return self._row_count

    def field_delimiter(self) -> str:
        return self.delimiter

    def fetch_row(self, index: int) -> list[str]:
        count = self.total_row_count()
        if index < 0 or index >= count:
            raise TabularSourceError(
                code=ErrorCode.ROW_OUT_OF_RANGE,
                message=f"Row index {index} is out of range (rows: {count})",
                details={"index": index, "rows": count},
            )
        if self._last is not None and self._last[0] == index:
            return list(self._last[1])
        if self._reader is None or index < self._next_index:
            self._rewind()

        while True:
            current = self._next_index
            try:
                row = self._readNonBlank()
            except csv.Error as exc:
                self._next_index += 1
                if current == index:
                    raise CsvFormatError(f"Malformed CSV row at index {index}: {exc}", line_no=index) from exc
                continue

            if row is None:
                raise TabularSourceError(
                    code=ErrorCode.SOURCE_ERROR,
                    message=f"Unexpected end of CSV at index {current} (expected {count} rows)",
                    details={"index": index},
                )
            self._next_index += 1
            if current == 0:
                self._expected_len = len(row)
            if current == index:
                if hasUndecodable(row):
                    raise self._decodeError(index)
                self._checkColumns(index, row)
                self._last = (index, row)
                return list(row)

    def _readNonBlank(self) -> list[str] | None:
        for row in self._reader:
            if isBlankRow(row):
                continue
            return row
        return None

    def _checkColumns(self, index: int, row: list[str]) -> None:
        if not self.strict_columns or index == 0 or self._expected_len is None:
            return
        if len(row) != self._expected_len:
            raise CsvFormatError(
                f"Invalid column count at index {index}: expected {self._expected_len}, got {len(row)}",
                line_no=index,
            )

    def _rewind(self) -> None:
        self.close()
        try:
            self._file = open(self.path, "r", encoding=self.encoding, errors="surrogateescape", newline="")
        except OSError as exc:
            raise TabularSourceError(
                code=ErrorCode.SOURCE_ERROR,
                message=f"CSV read error: {exc}",
                details={"path": self.path},
            ) from exc
        self._reader = csv.reader(self._file, delimiter=self.delimiter)
        self._next_index = 0

    def _countRows(self) -> int:
        count = 0
        with open(self.path, "r", encoding=self.encoding, errors="surrogateescape", newline="") as f:
            reader = csv.reader(f, delimiter=self.delimiter)
            while True:
                try:
                    row = next(reader)
                except StopIteration:
                    break
                except csv.Error:
                    count += 1
                    continue
                if not isBlankRow(row):
                    count += 1
        return count

    def _decodeError(self, index: int) -> TabularSourceError:
        return TabularSourceError(
            code=ErrorCode.DECODE_ERROR,
            message=f"Cannot decode CSV row at index {index} as {self.encoding}",
            details={"index": index, "encoding": self.encoding},
        )
