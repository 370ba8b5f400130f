from __future__ import annotations

from typing import Sequence

from intake.domain.headers.normalizer import field_keys
from intake.domain.headers.pattern import CompiledPattern, HeaderPattern, compile_pattern


def adapt_header(raw_header: Sequence[str], pattern: HeaderPattern | CompiledPattern) -> dict[str, str]:
    """
    Назначение:
        Для каждого канонического ключа находит физическую колонку сырого заголовка.

    Алгоритм:
        - поля заголовка нормализуются один раз;
        - для ключа (в порядке шаблона) берётся пересечение его алиасов с заголовком
          в порядке колонок слева направо;
        - побеждает первое совпадение, ключ без совпадений в результат не попадает.

    Выходные данные:
        dict[str, str]
            Канонический ключ -> исходное (ненормализованное) имя колонки.
    """
    compiled = compile_pattern(pattern)
    normalized = [field_keys(raw_field) for raw_field in raw_header]
    adapted: dict[str, str] = {}
    for key, alias_set in compiled.aliases.items():
        for raw_field, keys in zip(raw_header, normalized):
            if any(token in alias_set for token in keys):
                adapted[key] = raw_field
                break
    return adapted
