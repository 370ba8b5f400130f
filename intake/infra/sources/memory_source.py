from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import TabularSourceError


class MemoryTabularSource:
    """
    Назначение/ответственность:
        TabularSource над строками, уже находящимися в памяти
        (строка 0: заголовок). failures задаёт ошибки чтения по индексам.
    """

    def __init__(
        self,
        rows: Iterable[Sequence[str]],
        delimiter: str = ",",
        failures: Mapping[int, TabularSourceError] | None = None,
    ) -> None:
        self.rows = [list(row) for row in rows]
        self.delimiter = delimiter
        self.failures = dict(failures or {})
        self.fetched: list[int] = []

    def fetch_row(self, index: int) -> list[str]:
        self.fetched.append(index)
        if index < 0 or index >= len(self.rows):
            raise TabularSourceError(
                code=ErrorCode.ROW_OUT_OF_RANGE,
                message=f"Row index {index} is out of range (rows: {len(self.rows)})",
                details={"index": index, "rows": len(self.rows)},
            )
        if index in self.failures:
            raise self.failures[index]
        return list(self.rows[index])

    def total_row_count(self) -> int:
        return len(self.rows)

    def field_delimiter(self) -> str:
        return self.delimiter
