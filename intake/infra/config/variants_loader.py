from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from intake.datasets.registry import VariantRegistry
from intake.datasets.variant import PatternVariant
from intake.domain.headers.pattern import AliasSpec, to_alias_spec


class VariantConfigError(RuntimeError):
    """
    Назначение:
        Конфигурация вариантов схем не найдена или некорректна.
    """


def _parsePattern(raw: Any, variant: str, section: str) -> dict[str, AliasSpec]:
    if not isinstance(raw, Mapping) or not raw:
        raise VariantConfigError(f"Variant '{variant}': '{section}' must be a non-empty mapping")
    pattern: dict[str, AliasSpec] = {}
    for key, value in raw.items():
        if not isinstance(value, (str, list)):
            raise VariantConfigError(
                f"Variant '{variant}': alias spec for '{key}' must be a string or a list, got {type(value).__name__}"
            )
        try:
            pattern[str(key)] = to_alias_spec(value)
        except TypeError as exc:
            raise VariantConfigError(f"Variant '{variant}': invalid alias spec for '{key}': {exc}") from exc
    return pattern


def parseVariant(raw: Any) -> PatternVariant:
    """
    Назначение:
        Строит PatternVariant из одной записи списка variants.
    """
    if not isinstance(raw, Mapping):
        raise VariantConfigError(f"Variant definition must be a mapping, got {raw!r}")
    name = str(raw.get("name") or "").strip()
    if not name:
        raise VariantConfigError("Variant name cannot be empty")

    fields = _parsePattern(raw.get("fields"), name, "fields")
    comparison = None
    if raw.get("comparison") is not None:
        comparison = _parsePattern(raw.get("comparison"), name, "comparison")

    header_rows = raw.get("header_rows", 0)
    if isinstance(header_rows, bool) or not isinstance(header_rows, int) or header_rows < 0:
        raise VariantConfigError(f"Variant '{name}': header_rows must be a non-negative integer")

    description = raw.get("description")
    return PatternVariant.from_patterns(
        name=name,
        pattern=fields,
        comparison=comparison,
        header_rows=header_rows,
        description=str(description) if description is not None else None,
    )


def buildRegistry(data: Any) -> VariantRegistry:
    """
    Назначение:
        Реестр из уже разобранного YAML. Порядок списка variants = приоритет.
    """
    if not isinstance(data, Mapping):
        raise VariantConfigError("Variants config must be a mapping with a 'variants' list")
    variants = data.get("variants")
    if not isinstance(variants, list) or not variants:
        raise VariantConfigError("Variants config must contain a non-empty 'variants' list")
    registry = VariantRegistry()
    for entry in variants:
        variant = parseVariant(entry)
        try:
            registry.register(variant)
        except ValueError as exc:
            raise VariantConfigError(str(exc)) from exc
    return registry


def loadVariants(path: str | Path) -> VariantRegistry:
    """
    Назначение:
        Загружает варианты схем из YAML-файла.

    Выходные данные:
        VariantRegistry

    Ошибки:
        VariantConfigError: файла нет, YAML не разбирается, структура неверна.
    """
    path = Path(path)
    if not path.exists() or not path.is_file():
        raise VariantConfigError(f"Variants file not found at {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise VariantConfigError(f"Failed to parse variants YAML at {path}: {exc}") from exc
    return buildRegistry(data)
