from __future__ import annotations

from typing import Mapping, Sequence

from intake.domain.headers.normalizer import field_keys
from intake.domain.headers.pattern import CompiledPattern, HeaderPattern, compile_pattern
from intake.domain.rows.stream import FetchResult, RowStream


def row_by_name(raw_header: Sequence[str], raw_row: Sequence[str]) -> dict[str, str]:
    """
    Назначение:
        Сопоставляет ячейки строки именам колонок сырого заголовка.
        При повторе имени побеждает первая колонка; недостающие ячейки: "".
    """
    named: dict[str, str] = {}
    for index, name in enumerate(raw_header):
        if name in named:
            continue
        named[name] = raw_row[index] if index < len(raw_row) else ""
    return named


def resolve_field_key(field: str, header_pattern: HeaderPattern | CompiledPattern) -> str | None:
    """
    Назначение:
        Ищет ключ шаблона, среди алиасов которого есть нормализованное field.

    Выходные данные:
        str | None
            Ключ шаблона; None: поле в записи отсутствует (это не ошибка).
    """
    keys = field_keys(field)
    for key, alias_set in compile_pattern(header_pattern).aliases.items():
        if any(token in alias_set for token in keys):
            return key
    return None


def project_row(
    named_row: Mapping[str, str | None],
    adapted_header: Mapping[str, str],
    comparison_pattern: HeaderPattern | CompiledPattern,
    header_row_count: int = 0,
) -> dict[str, str | None]:
    """
    Назначение:
        Превращает одну строку данных в запись с ключами шаблона сравнения.

    Алгоритм:
        - adapted_header инвертируется (имя колонки -> канонический ключ);
        - значения выбираются по имени колонки в порядке канонических ключей;
        - первые header_row_count значений отбрасываются (ячейка-индикатор заголовка);
        - канонический ключ переводится в ключ шаблона через resolve_field_key,
          ненайденные ключи в запись не попадают.
    """
    if header_row_count < 0:
        raise ValueError(f"header_row_count must be >= 0, got {header_row_count}")
    compiled = compile_pattern(comparison_pattern)
    by_raw_name = {raw_name: key for key, raw_name in adapted_header.items()}
    selected = [(key, named_row.get(raw_name)) for raw_name, key in by_raw_name.items()]

    record: dict[str, str | None] = {}
    for key, value in selected[header_row_count:]:
        pattern_key = resolve_field_key(key, compiled)
        if pattern_key is None:
            continue
        record[pattern_key] = value
    return record


class RowProjector:
    """
    Назначение/ответственность:
        Применяет адаптированный заголовок потока к его строкам.
    """

    def __init__(
        self,
        stream: RowStream,
        comparison_pattern: HeaderPattern | CompiledPattern | None = None,
        header_row_count: int = 0,
    ) -> None:
        self.stream = stream
        self.comparison_pattern = compile_pattern(
            comparison_pattern if comparison_pattern is not None else stream.pattern
        )
        self.header_row_count = header_row_count

    def project(self, raw_row: Sequence[str]) -> dict[str, str | None]:
        return project_row(
            row_by_name(self.stream.header, raw_row),
            self.stream.adapted_header,
            self.comparison_pattern,
            self.header_row_count,
        )

    def project_result(self, result: FetchResult) -> dict[str, str | None] | None:
        if result.row is None:
            return None
        return self.project(result.row)

    def project_current(self) -> dict[str, str | None] | None:
        """
        Читает строку под курсором потока и проецирует её.
        None, если чтение не удалось (ошибка остаётся в stream.error).
        """
        return self.project_result(self.stream.fetch_current())
