from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Union

from intake.domain.headers.normalizer import normalize_field

ALIAS_DELIMITER = "|"


@dataclass(frozen=True)
class SingleAlias:
    """
    Назначение:
        Спецификация алиасов одной строкой: "order no|orderid".
    """

    text: str

    def candidates(self) -> list[str]:
        return self.text.split(ALIAS_DELIMITER)


@dataclass(frozen=True)
class AliasList:
    """
    Назначение:
        Спецификация алиасов явным списком альтернатив.
    """

    items: tuple[str, ...]

    def candidates(self) -> list[str]:
        return list(self.items)


AliasSpec = Union[SingleAlias, AliasList]

# Шаблон заголовка в том виде, в каком он приходит из конфигурации.
HeaderPattern = Mapping[str, Union[AliasSpec, str, Iterable[str]]]


def to_alias_spec(value: AliasSpec | str | Iterable[str]) -> AliasSpec:
    """
    Назначение:
        Приводит значение из конфигурации (str | list) к AliasSpec.
        Единственное место, где различается форма спецификации.
    """
    if isinstance(value, (SingleAlias, AliasList)):
        return value
    if isinstance(value, str):
        return SingleAlias(value)
    items = tuple(value)
    for item in items:
        if not isinstance(item, str):
            raise TypeError(f"Alias must be a string, got {type(item).__name__}: {item!r}")
    return AliasList(items)


@dataclass(frozen=True)
class CompiledPattern:
    """
    Назначение/ответственность:
        Скомпилированный шаблон: канонический ключ -> множество нормализованных алиасов.

    Инварианты:
        - Порядок канонических ключей совпадает с исходным шаблоном
          (он же порядок сопоставления и порядок полей на выходе).
        - tokens: объединение всех алиасов, считается один раз.
    """

    aliases: dict[str, frozenset[str]]
    tokens: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        tokens: set[str] = set()
        for alias_set in self.aliases.values():
            tokens.update(alias_set)
        object.__setattr__(self, "tokens", frozenset(tokens))

    def keys(self) -> list[str]:
        return list(self.aliases)

    def __contains__(self, key: object) -> bool:
        return key in self.aliases

    def __len__(self) -> int:
        return len(self.aliases)


def compile_pattern(pattern: HeaderPattern | CompiledPattern) -> CompiledPattern:
    """
    Назначение:
        Компилирует шаблон заголовка один раз на шаблон (не на строку).

    Алгоритм:
        - строка делится по "|", список берётся как есть;
        - каждый кандидат нормализуется, пустые ключи отбрасываются;
        - порядок канонических ключей сохраняется.
    """
    if isinstance(pattern, CompiledPattern):
        return pattern
    aliases: dict[str, frozenset[str]] = {}
    for key, value in pattern.items():
        spec = to_alias_spec(value)
        normalized = (normalize_field(candidate) for candidate in spec.candidates())
        aliases[key] = frozenset(token for token in normalized if token)
    return CompiledPattern(aliases=aliases)
