from __future__ import annotations

import logging
from typing import Iterator

from intake.common.sanitize import truncateText
from intake.datasets.variant import PatternVariant
from intake.domain.models import DiagnosticItem, DiagnosticStage, RowRef
from intake.domain.rows.projector import RowProjector
from intake.domain.rows.stream import FetchResult, RowStream
from intake.infra.logging.setup import logEvent


def headerDiagnostic(stream: RowStream) -> DiagnosticItem | None:
    error = stream.error
    if error is None:
        return None
    return DiagnosticItem(
        stage=DiagnosticStage.HEADER,
        code=error.code.value,
        field=None,
        message=error.message,
    )


class ProjectUseCase:
    """
    Назначение/ответственность:
        Use-case проекции файла: проверка заголовка, проход по строкам,
        проекция в записи варианта, отчёт с дампом исходных строк.
    """

    def __init__(self, report_items_limit: int, include_records: bool) -> None:
        self.report_items_limit = report_items_limit
        self.include_records = include_records

    def iter_projected(
        self,
        stream: RowStream,
        projector: RowProjector,
    ) -> Iterator[tuple[FetchResult, dict[str, str | None] | None]]:
        """
        Назначение:
            Итератор (результат чтения, запись) без формирования отчёта.
            Строка, которую не удалось прочитать, отдаётся с записью None.
        """
        for result in stream:
            yield result, projector.project_result(result)

    def run(
        self,
        stream: RowStream,
        variant: PatternVariant,
        logger: logging.Logger,
        run_id: str,
        report,
    ) -> int:
        report.set_meta(variant=variant.name, items_limit=self.report_items_limit)
        report.set_context(
            "header",
            {"raw": list(stream.header), "adapted": dict(stream.adapted_header)},
        )

        validation = stream.validate_header(variant.schema())
        if not validation.ok:
            report.add_diagnostics(errors=[headerDiagnostic(stream)])
            logEvent(logger, logging.ERROR, run_id, "header", validation.error.message)
            return 2

        unresolved = variant.unresolved_keys()
        if unresolved:
            logEvent(
                logger,
                logging.WARNING,
                run_id,
                "header",
                f"Canonical keys without a comparison key are dropped from records: {unresolved}",
            )

        projector = RowProjector(stream, variant.comparison, variant.header_rows)
        failed_rows = 0
        for result, record in self.iter_projected(stream, projector):
            row_ref = RowRef.for_line(result.line_no)
            if result.error is not None:
                failed_rows += 1
                logEvent(
                    logger,
                    logging.WARNING,
                    run_id,
                    "fetch",
                    f"line={result.line_no} code={result.error.code.value} {result.error.message}",
                )
                report.add_item(
                    status="FAILED",
                    row_ref=row_ref,
                    errors=[
                        DiagnosticItem(
                            stage=DiagnosticStage.FETCH,
                            code=result.error.code.value,
                            field=None,
                            message=result.error.message,
                        )
                    ],
                )
                continue

            logEvent(
                logger,
                logging.DEBUG,
                run_id,
                "project",
                f"line={result.line_no} origin={truncateText(result.origin_line, 200)}",
            )
            report.add_item(
                status="OK",
                row_ref=row_ref,
                payload=record,
                store=self.include_records,
            )

        report.set_context("dump", stream.dump.as_dict())
        logEvent(
            logger,
            logging.INFO,
            run_id,
            "project",
            f"Rows processed: {report.summary.rows_total}, failed: {failed_rows}",
        )
        return 1 if failed_rows > 0 else 0
