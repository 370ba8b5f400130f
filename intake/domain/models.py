from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiagnosticStage(str, Enum):
    """
    Назначение:
        Этап, на котором возникло диагностическое событие.
    """

    HEADER = "HEADER"
    FETCH = "FETCH"
    PROJECT = "PROJECT"


@dataclass
class DiagnosticItem:
    """
    Назначение:
        Диагностическое сообщение (ошибка/предупреждение) по строке или заголовку.
    """
    stage: DiagnosticStage
    code: str
    field: str | None
    message: str


@dataclass(frozen=True)
class RowRef:
    """
    Назначение:
        Ссылка на строку входного файла для отчётов.
    """
    line_no: int
    row_id: str

    @classmethod
    def for_line(cls, line_no: int) -> "RowRef":
        return cls(line_no=line_no, row_id=f"line:{line_no}")
