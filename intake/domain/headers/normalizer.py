from __future__ import annotations

import re
from typing import Iterable

_STRIPPED_CHARS = (" ", "-")
_TRAILING_ANNOTATION_RE = re.compile(r"\s*[(\[][^()\[\]]*[)\]]\s*$")


def normalize_field(field: str) -> str:
    """
    Назначение:
        Ключ сравнения для имени колонки: нижний регистр, без пробелов и дефисов.

    Инварианты:
        - Идемпотентна: normalize_field(normalize_field(x)) == normalize_field(x).
        - Одинаково применяется к алиасам шаблона и к полям сырого заголовка.
    """
    key = field.lower()
    for char in _STRIPPED_CHARS:
        key = key.replace(char, "")
    return key


def normalize_fields(fields: Iterable[str]) -> list[str]:
    return [normalize_field(field) for field in fields]


def strip_annotation(field: str) -> str:
    """
    "Weight (kg)" -> "Weight", "Qty [pcs]" -> "Qty". Прочее без изменений.
    """
    return _TRAILING_ANNOTATION_RE.sub("", field)


def field_keys(field: str) -> tuple[str, ...]:
    """
    Назначение:
        Ключи сравнения поля сырого заголовка: нормализованное имя и,
        если у колонки есть завершающая пометка в скобках (единицы измерения),
        нормализованное имя без неё. Совпадение по любому ключу: совпадение поля.
    """
    key = normalize_field(field)
    bare = normalize_field(strip_annotation(field))
    if bare and bare != key:
        return key, bare
    return (key,)
