from __future__ import annotations

from typing import Iterator


def dump_key(line_no: int) -> str:
    return f"Line #{line_no}"


class DiagnosticDump:
    """
    Назначение/ответственность:
        Журнал исходного текста обработанных строк для отчёта об ошибках.
        Ключ: "Line #<n>", порядок: порядок чтения. Удаления нет.
    """

    def __init__(self) -> None:
        self._lines: dict[str, str] = {}

    def record(self, line_no: int, origin_line: str) -> None:
        self._lines[dump_key(line_no)] = origin_line

    def get(self, line_no: int) -> str | None:
        return self._lines.get(dump_key(line_no))

    def as_dict(self) -> dict[str, str]:
        return dict(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __contains__(self, key: object) -> bool:
        return key in self._lines
