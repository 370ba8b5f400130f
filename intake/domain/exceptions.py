from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from intake.domain.error_codes import ErrorCode


@dataclass(eq=False)
class IntakeError(Exception):
    """
    Назначение:
        Унифицированная ошибка ядра. Хранится в слоте ошибки и в отчёте,
        через границу ядра не выбрасывается.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details or {},
        }


class TabularSourceError(IntakeError):
    """
    Назначение:
        Ошибка табличного источника: битая строка, индекс вне диапазона,
        ошибка декодирования. Единственный тип, который RowStream перехватывает.
    """


class HeaderRejectedError(IntakeError):
    """
    Назначение:
        Заголовок содержит колонки, не покрытые ни одним разрешённым алиасом.
    """

    def __init__(self, message: str, invalid_fields: Sequence[str]) -> None:
        super().__init__(
            code=ErrorCode.INVALID_HEADER,
            message=message,
            details={"invalid_fields": list(invalid_fields)},
        )
        self.invalid_fields = list(invalid_fields)


__all__ = ["IntakeError", "TabularSourceError", "HeaderRejectedError"]
