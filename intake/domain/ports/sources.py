from __future__ import annotations

from typing import Protocol


class TabularSource(Protocol):
    """
    Назначение/ответственность:
        Индексно-адресуемый табличный источник (строка 0: заголовок).

    Ограничения:
        Основной сценарий доступа: последовательный проход вперёд;
        реализации оптимизируются под него, а не под произвольный доступ.
        Открывает и закрывает источник вызывающая сторона.
    """

    def fetch_row(self, index: int) -> list[str]:
        """
        Контракт:
            Вход: физический индекс строки (0-based, заголовок включён).
            Выход: значения ячеек.
            Ошибки: TabularSourceError (битая строка, индекс вне диапазона,
            ошибка декодирования). Иные исключения: ошибки программы.
        """
        ...

    def total_row_count(self) -> int:
        """
        Контракт:
            Число физических строк, включая заголовок.
        """
        ...

    def field_delimiter(self) -> str:
        ...
