from __future__ import annotations

from typing import Sequence

from intake.datasets.variant import SchemaVariant
from intake.domain.ports.sources import TabularSource


class VariantRegistry:
    """
    Назначение/ответственность:
        Реестр вариантов схем. Определение варианта файла: первый
        по приоритету (порядку регистрации) вариант, чей классификатор вернул True.
    """

    def __init__(self) -> None:
        self._variants: dict[str, SchemaVariant] = {}

    def register(self, variant: SchemaVariant) -> None:
        if variant.name in self._variants:
            raise ValueError(f"Duplicate schema variant: {variant.name}")
        self._variants[variant.name] = variant

    def get(self, name: str) -> SchemaVariant:
        if name not in self._variants:
            raise ValueError(f"Unsupported schema variant: {name}")
        return self._variants[name]

    def list(self) -> list[SchemaVariant]:
        return list(self._variants.values())

    def names(self) -> list[str]:
        return list(self._variants)

    def __len__(self) -> int:
        return len(self._variants)

    def detect(self, raw_header: Sequence[str]) -> SchemaVariant | None:
        for variant in self._variants.values():
            if variant.classify(raw_header):
                return variant
        return None

    def detect_source(self, source: TabularSource) -> SchemaVariant | None:
        """
        Читает строку 0 источника и определяет вариант.
        TabularSourceError при чтении заголовка пробрасывается.
        """
        return self.detect(source.fetch_row(0))
