from __future__ import annotations

from dataclasses import asdict
from typing import Any, Iterable, Mapping

from intake.common.time import getNowIso
from intake.domain.models import DiagnosticItem, DiagnosticStage, RowRef
from intake.domain.reporting.models import (
    ReportDiagnostic,
    ReportEnvelope,
    ReportItem,
    ReportMeta,
    ReportSummary,
)


class ReportCollector:
    """
    Назначение/ответственность:
        Единый сборщик отчётов для команд CLI.
    """

    def __init__(self, run_id: str, command: str, started_at: str | None = None) -> None:
        self.meta = ReportMeta(
            run_id=run_id,
            command=command,
            started_at=started_at or getNowIso(),
        )
        self.summary = ReportSummary()
        self.items: list[ReportItem] = []
        self.context: dict[str, Any] = {}
        self.status: str | None = None

    def set_meta(
        self,
        *,
        variant: str | None = None,
        source_path: str | None = None,
        items_limit: int | None = None,
    ) -> None:
        if variant is not None:
            self.meta.variant = variant
        if source_path is not None:
            self.meta.source_path = source_path
        if items_limit is not None:
            self.meta.items_limit = items_limit

    def set_context(self, name: str, value: Any) -> None:
        self.context[name] = value

    def add_diagnostics(
        self,
        errors: Iterable[DiagnosticItem] | None = None,
        warnings: Iterable[DiagnosticItem] | None = None,
    ) -> list[ReportDiagnostic]:
        """
        Учитывает диагностику вне строк данных (например, отказ по заголовку).
        """
        error_list = list(errors or [])
        warning_list = list(warnings or [])
        self._count_diagnostics(error_list, warning_list)
        diagnostics = self._build_diagnostics(error_list, warning_list)
        self.set_context("diagnostics", [asdict(diag) for diag in diagnostics])
        return diagnostics

    def add_item(
        self,
        *,
        status: str,
        row_ref: RowRef | None = None,
        payload: Mapping[str, Any] | None = None,
        errors: Iterable[DiagnosticItem] | None = None,
        warnings: Iterable[DiagnosticItem] | None = None,
        meta: dict[str, Any] | None = None,
        store: bool = True,
    ) -> None:
        error_list = list(errors or [])
        warning_list = list(warnings or [])

        self.summary.rows_total += 1
        if status == "FAILED":
            self.summary.rows_failed += 1
        elif status == "OK":
            self.summary.rows_projected += 1

        self._count_diagnostics(error_list, warning_list)

        if not store:
            return
        if self._should_store_item():
            self.items.append(
                ReportItem(
                    status=status,
                    row_ref=row_ref,
                    payload=payload,
                    diagnostics=self._build_diagnostics(error_list, warning_list),
                    meta=meta or {},
                )
            )
        else:
            self.meta.items_truncated = True

    def finish(self, finished_at: str | None = None, duration_ms: int | None = None) -> None:
        self.meta.finished_at = finished_at or getNowIso()
        self.meta.duration_ms = duration_ms
        if self.status is None:
            self.status = self._derive_status()

    def build(self) -> ReportEnvelope:
        return ReportEnvelope(
            status=self.status or self._derive_status(),
            meta=self.meta,
            summary=self.summary,
            items=self.items,
            context=self.context,
        )

    def _should_store_item(self) -> bool:
        limit = self.meta.items_limit
        if limit is None:
            return True
        return len(self.items) < limit

    def _derive_status(self) -> str:
        if self.summary.errors_total == 0:
            return "SUCCESS"
        if self.summary.rows_projected > 0:
            return "PARTIAL"
        return "FAILED"

    def _count_diagnostics(
        self,
        errors: list[DiagnosticItem],
        warnings: list[DiagnosticItem],
    ) -> None:
        self.summary.errors_total += len(errors)
        self.summary.warnings_total += len(warnings)
        for error in errors:
            self._count_stage(error.stage, "errors_total")
        for warning in warnings:
            self._count_stage(warning.stage, "warnings_total")

    def _count_stage(self, stage: DiagnosticStage, field: str) -> None:
        key = stage.value if isinstance(stage, DiagnosticStage) else str(stage)
        entry = self.summary.by_stage.setdefault(key, {"errors_total": 0, "warnings_total": 0})
        entry[field] += 1

    def _build_diagnostics(
        self,
        errors: list[DiagnosticItem],
        warnings: list[DiagnosticItem],
    ) -> list[ReportDiagnostic]:
        diagnostics = [self._from_item(err, severity="error") for err in errors]
        diagnostics.extend(self._from_item(warn, severity="warning") for warn in warnings)
        return diagnostics

    @staticmethod
    def _from_item(item: DiagnosticItem, severity: str) -> ReportDiagnostic:
        return ReportDiagnostic(
            severity=severity,
            stage=item.stage,
            code=item.code,
            field=item.field,
            message=item.message,
        )


def asdict_report(envelope: ReportEnvelope) -> dict[str, Any]:
    """
    Назначение:
        Сериализация отчёта в JSON-совместимый dict.
    """
    return {
        "status": envelope.status,
        "meta": asdict(envelope.meta),
        "summary": asdict(envelope.summary),
        "items": [
            {
                "status": item.status,
                "row_ref": asdict(item.row_ref) if item.row_ref else None,
                "payload": dict(item.payload) if item.payload is not None else None,
                "diagnostics": [_diagnostic_dict(diag) for diag in item.diagnostics],
                "meta": item.meta,
            }
            for item in envelope.items
        ],
        "context": envelope.context,
    }


def _diagnostic_dict(diag: ReportDiagnostic) -> dict[str, Any]:
    data = asdict(diag)
    data["stage"] = diag.stage.value if isinstance(diag.stage, DiagnosticStage) else str(diag.stage)
    return data
