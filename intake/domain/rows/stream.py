from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from intake.domain.exceptions import IntakeError, TabularSourceError
from intake.domain.headers.adapter import adapt_header
from intake.domain.headers.classifier import HeaderValidationResult, validate_header
from intake.domain.headers.pattern import CompiledPattern, HeaderPattern, compile_pattern
from intake.domain.ports.sources import TabularSource
from intake.domain.rows.dump import DiagnosticDump


@dataclass(frozen=True)
class FetchResult:
    """
    Назначение:
        Явный результат одного чтения строки.

    Поля:
        line_no: 1-based номер строки (позиция курсора в момент чтения)
        row: значения ячеек или None при ошибке/конце потока
        error: ошибка источника, если чтение не удалось
        origin_line: восстановленный текст строки (None в конце потока)
    """

    line_no: int
    row: list[str] | None
    error: TabularSourceError | None = None
    origin_line: str | None = None

    @property
    def ok(self) -> bool:
        return self.row is not None


def build_origin_line(row: list[str], delimiter: str) -> str:
    """
    Назначение:
        Склеивает ячейки разделителем источника и срезает ровно один
        завершающий разделитель.
    """
    line = delimiter.join(row)
    if delimiter and line.endswith(delimiter):
        line = line[: -len(delimiter)]
    return line


class RowStream:
    """
    Назначение/ответственность:
        Курсорный последовательный доступ к табличному источнику.
        Строка 0 читается как заголовок один раз; адаптированный заголовок
        строится один раз в конструкторе.

    Инварианты/гарантии:
        - Курсор растёт только через next() и итерацию; никогда не уменьшается.
        - eof() == (cursor + 1 > count()).
        - Ошибки источника не выбрасываются из next()/current(): попадают
          в FetchResult.error и в слот error (перезаписывается каждым вызовом).
        - Каждое успешное чтение не в конце потока добавляет "Line #<n>" в dump.

    Ограничения:
        Однопоточный. Источник открывает и закрывает вызывающая сторона.
    """

    def __init__(
        self,
        source: TabularSource,
        pattern: HeaderPattern | CompiledPattern,
        headers_count: int = 1,
    ) -> None:
        if headers_count < 1:
            raise ValueError(f"headers_count must be >= 1, got {headers_count}")
        self.source = source
        self.pattern = compile_pattern(pattern)
        self.headers_count = headers_count
        self.header: list[str] = list(source.fetch_row(0))
        self.adapted_header: dict[str, str] = adapt_header(self.header, self.pattern)
        self._row_number = headers_count
        self._error: IntakeError | None = None
        self._origin_line: str | None = None
        self._dump = DiagnosticDump()
        self._record_row_number: int | None = None
        self._origin_record: Any = None

    @property
    def row_number(self) -> int:
        return self._row_number

    @property
    def error(self) -> IntakeError | None:
        return self._error

    @property
    def origin_line(self) -> str | None:
        if self.eof():
            return None
        return self._origin_line

    @property
    def dump(self) -> DiagnosticDump:
        return self._dump

    def count(self) -> int:
        return self.source.total_row_count()

    def __len__(self) -> int:
        return self.count()

    def eof(self) -> bool:
        return self._row_number + 1 > self.count()

    def fetch_next(self) -> FetchResult:
        self._row_number += 1
        return self.fetch_current()

    def fetch_current(self) -> FetchResult:
        line_no = self._row_number
        try:
            row = list(self.source.fetch_row(line_no))
        except TabularSourceError as exc:
            self._error = exc
            return FetchResult(line_no=line_no, row=None, error=exc)
        self._error = None
        if self.eof():
            return FetchResult(line_no=line_no, row=row)
        self._origin_line = build_origin_line(row, self.source.field_delimiter())
        self._dump.record(line_no, self._origin_line)
        return FetchResult(line_no=line_no, row=row, origin_line=self._origin_line)

    def next(self) -> list[str] | None:
        return self.fetch_next().row

    def current(self) -> list[str] | None:
        return self.fetch_current().row

    def __iter__(self) -> Iterator[FetchResult]:
        """
        Отдаёт по одному FetchResult на каждую оставшуюся строку данных,
        начиная с текущей позиции курсора.
        """
        while not self.eof():
            yield self.fetch_current()
            self._row_number += 1

    def validate_header(self, comparison_pattern: HeaderPattern | CompiledPattern | None = None) -> HeaderValidationResult:
        result = validate_header(self.header, comparison_pattern if comparison_pattern is not None else self.pattern)
        self._error = result.error
        return result

    # Группировка нескольких физических строк в одну бизнес-запись.

    def begin_record(self) -> None:
        self._record_row_number = self._row_number

    @property
    def record_row_number(self) -> int | None:
        return self._record_row_number

    @property
    def origin_record(self) -> Any:
        return self._origin_record

    def set_origin_record(self, payload: Any) -> None:
        self._origin_record = payload
