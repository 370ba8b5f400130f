from __future__ import annotations

from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import TabularSourceError


class CsvFormatError(TabularSourceError):
    """
    Назначение:
        Ошибка формата CSV-строки (битые кавычки, количество колонок и т.п.).
    """

    def __init__(self, message: str, line_no: int | None = None) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_ROW,
            message=message,
            details={"line_no": line_no} if line_no is not None else {},
        )
        self.line_no = line_no


def isBlankRow(row: list[str]) -> bool:
    """
    Назначение:
        Пустая физическая строка CSV (csv.reader отдаёт [] или [""]).
    """
    return len(row) == 0 or (len(row) == 1 and row[0].strip() == "")


def parseDelimiter(value: str) -> str:
    """
    Назначение:
        Разбирает разделитель из настроек: один символ или имя ("tab", "semicolon").
    """
    aliases = {
        "tab": "\t",
        "\\t": "\t",
        "comma": ",",
        "semicolon": ";",
        "pipe": "|",
    }
    delimiter = aliases.get(value.strip().lower(), value) if value.strip() else value
    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got: {value!r}")
    return delimiter


_SURROGATE_LOW = "\udc80"
_SURROGATE_HIGH = "\udcff"


def hasUndecodable(row: list[str]) -> bool:
    """
    Назначение:
        Есть ли в строке байты, не декодированные кодировкой файла
        (при чтении с errors="surrogateescape").
    """
    return any(_SURROGATE_LOW <= char <= _SURROGATE_HIGH for cell in row for char in cell)
