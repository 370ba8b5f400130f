from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Sequence

from intake.domain.exceptions import HeaderRejectedError
from intake.domain.headers.normalizer import field_keys
from intake.domain.headers.pattern import CompiledPattern, HeaderPattern, compile_pattern


@dataclass(frozen=True)
class HeaderValidationResult:
    """
    Назначение:
        Явный результат проверки заголовка.

    Поля:
        invalid_fields: исходные имена колонок, не покрытые ни одним алиасом
        error: HeaderRejectedError при отказе, иначе None
    """

    invalid_fields: list[str] = field(default_factory=list)
    error: HeaderRejectedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_covered(raw_field: str, tokens: frozenset[str]) -> bool:
    return any(token in tokens for token in field_keys(raw_field))


def find_uncovered_fields(raw_header: Sequence[str], pattern: HeaderPattern | CompiledPattern) -> list[str]:
    tokens = compile_pattern(pattern).tokens
    return [raw_field for raw_field in raw_header if not _is_covered(raw_field, tokens)]


def classify_header(raw_header: Sequence[str], pattern: HeaderPattern | CompiledPattern) -> bool:
    """
    Назначение:
        Подходит ли заголовок под вариант схемы.
        True, если каждое поле заголовка покрыто каким-либо алиасом шаблона;
        несопоставленные канонические ключи не мешают.
    """
    tokens = compile_pattern(pattern).tokens
    return all(_is_covered(raw_field, tokens) for raw_field in raw_header)


def validate_header(
    raw_header: Sequence[str],
    comparison_pattern: HeaderPattern | CompiledPattern,
) -> HeaderValidationResult:
    """
    Назначение:
        Та же проверка покрытия, но с перечнем нарушителей: для отказа
        в обработке файла до чтения строк данных.
    """
    invalid = find_uncovered_fields(raw_header, comparison_pattern)
    if not invalid:
        return HeaderValidationResult()
    error = HeaderRejectedError(
        message=f"Invalid Names In Header: {json.dumps(invalid, ensure_ascii=False)}",
        invalid_fields=list(invalid),
    )
    return HeaderValidationResult(invalid_fields=list(invalid), error=error)
