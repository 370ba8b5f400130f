from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from intake.domain.models import DiagnosticStage, RowRef


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные запуска команды.
    """

    run_id: str
    command: str
    started_at: str
    variant: str | None = None
    source_path: str | None = None
    finished_at: str | None = None
    duration_ms: int | None = None
    items_limit: int | None = None
    items_truncated: bool = False


@dataclass
class ReportSummary:
    """
    Назначение:
        Счётчики выполнения.
    """

    rows_total: int = 0
    rows_projected: int = 0
    rows_failed: int = 0
    errors_total: int = 0
    warnings_total: int = 0
    by_stage: dict[str, dict[str, int]] = field(default_factory=dict)


@dataclass(frozen=True)
class ReportDiagnostic:
    severity: str
    stage: DiagnosticStage
    code: str
    field: str | None
    message: str


@dataclass
class ReportItem:
    """
    Назначение:
        Элемент отчёта по одной строке: статус, ссылка, запись, диагностика.
    """

    status: str
    row_ref: RowRef | None
    payload: Mapping[str, Any] | None
    diagnostics: list[ReportDiagnostic] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReportEnvelope:
    status: str
    meta: ReportMeta
    summary: ReportSummary
    items: list[ReportItem]
    context: dict[str, Any]
