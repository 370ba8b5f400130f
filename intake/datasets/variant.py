from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from intake.domain.headers.classifier import classify_header
from intake.domain.headers.pattern import CompiledPattern, HeaderPattern, compile_pattern
from intake.domain.rows.projector import resolve_field_key


class SchemaVariant(Protocol):
    """
    Назначение:
        Контракт варианта формата файла: схема заголовка и классификатор.
    Взаимодействия:
        Регистрируется в VariantRegistry; порядок регистрации = приоритет.
    """

    name: str

    def schema(self) -> CompiledPattern: ...
    def classify(self, raw_header: Sequence[str]) -> bool: ...


@dataclass(frozen=True)
class PatternVariant:
    """
    Назначение/ответственность:
        Вариант схемы, заданный конфигурацией: шаблон заголовка,
        шаблон сравнения (ключи итоговой записи) и число ячеек-индикаторов.
    """

    name: str
    pattern: CompiledPattern
    comparison: CompiledPattern
    header_rows: int = 0
    description: str | None = field(default=None, compare=False)

    @classmethod
    def from_patterns(
        cls,
        name: str,
        pattern: HeaderPattern | CompiledPattern,
        comparison: HeaderPattern | CompiledPattern | None = None,
        header_rows: int = 0,
        description: str | None = None,
    ) -> "PatternVariant":
        compiled = compile_pattern(pattern)
        return cls(
            name=name,
            pattern=compiled,
            comparison=compile_pattern(comparison) if comparison is not None else compiled,
            header_rows=header_rows,
            description=description,
        )

    def schema(self) -> CompiledPattern:
        return self.pattern

    def classify(self, raw_header: Sequence[str]) -> bool:
        return classify_header(raw_header, self.pattern)

    def unresolved_keys(self) -> list[str]:
        """
        Канонические ключи, которые не переводятся в ключ шаблона сравнения
        и потому никогда не попадут в итоговую запись.
        """
        return [key for key in self.pattern.keys() if resolve_field_key(key, self.comparison) is None]
