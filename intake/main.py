from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import typer

from intake.common.run_id import generate_run_id
from intake.common.time import getDurationMs
from intake.config.settings import Settings, loadSettings
from intake.datasets.registry import VariantRegistry
from intake.datasets.variant import PatternVariant
from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import TabularSourceError
from intake.domain.headers.classifier import find_uncovered_fields
from intake.domain.models import DiagnosticItem, DiagnosticStage
from intake.domain.rows.stream import RowStream
from intake.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson
from intake.infra.config.variants_loader import VariantConfigError, loadVariants
from intake.infra.logging.setup import (
    StdStreamToLogger,
    TeeStream,
    closeCommandLogger,
    createCommandLogger,
    logEvent,
)
from intake.infra.sources.csv_source import CsvTabularSource
from intake.infra.sources.csv_utils import parseDelimiter
from intake.usecases.detect_usecase import DetectUseCase
from intake.usecases.project_usecase import ProjectUseCase

app = typer.Typer(no_args_is_help=True, add_completion=False)


def ensureDir(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def requireCsv(csvPath: str | None) -> None:
    """
    Назначение:
        Проверка наличия входного CSV.

    Поведение:
        - Если csvPath не задан или файл не существует: exit code 2.
    """
    if not csvPath:
        typer.echo("ERROR: --csv is required", err=True)
        raise typer.Exit(code=2)

    p = Path(csvPath)
    if not p.exists() or not p.is_file():
        typer.echo(f"ERROR: CSV file not found: {csvPath}", err=True)
        raise typer.Exit(code=2)


def requireVariants(settings: Settings) -> VariantRegistry:
    """
    Назначение:
        Загружает реестр вариантов схем из settings.variants_path.

    Поведение:
        - Путь не задан или конфигурация некорректна: exit code 2.
    """
    if not settings.variants_path:
        typer.echo("ERROR: variants config is required (--variants or INTAKE_VARIANTS_PATH)", err=True)
        raise typer.Exit(code=2)
    try:
        return loadVariants(settings.variants_path)
    except VariantConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)


def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    typer.echo(
        f"run_id={runId} command={command} "
        f"variants={settings.variants_path} delimiter={settings.csv_delimiter!r} "
        f"encoding={settings.csv_encoding} sources={sources} log_level={settings.log_level}"
    )


def openSource(csvPath: str, settings: Settings) -> CsvTabularSource:
    return CsvTabularSource(
        csvPath,
        delimiter=parseDelimiter(settings.csv_delimiter),
        encoding=settings.csv_encoding,
        strict_columns=settings.strict_columns,
    )


def runWithReport(
    ctx: typer.Context,
    commandName: str,
    csvPath: str | None,
    runner,
) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер + файл лога
        - создаёт report.json skeleton
        - проверяет входной CSV и конфигурацию вариантов
        - перенаправляет stdout/stderr в лог (tee)
        - гарантирует запись отчёта в finally
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    logger, logFilePath = createCommandLogger(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )

    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)
    report.set_meta(source_path=csvPath)

    originalStdout = sys.stdout
    originalStderr = sys.stderr

    sys.stdout = TeeStream(originalStdout, StdStreamToLogger(logger, logging.INFO, runId, "stdout"))
    sys.stderr = TeeStream(originalStderr, StdStreamToLogger(logger, logging.ERROR, runId, "stderr"))

    exitCode: int | None = None

    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        printRunHeader(runId, commandName, settings, sources)

        try:
            requireCsv(csvPath)
        except typer.Exit:
            logEvent(logger, logging.ERROR, runId, "csv", "CSV is missing or not accessible")
            exitCode = 2
            return

        try:
            registry = requireVariants(settings)
        except typer.Exit:
            logEvent(logger, logging.ERROR, runId, "config", "Variants config is missing or invalid")
            exitCode = 2
            return

        try:
            with openSource(csvPath, settings) as source:
                exitCode = runner(logger, report, registry, source)
        except TabularSourceError as exc:
            logEvent(logger, logging.ERROR, runId, "csv", f"CSV header cannot be read: {exc}")
            typer.echo(f"ERROR: CSV header cannot be read: {exc}", err=True)
            report.add_diagnostics(
                errors=[DiagnosticItem(stage=DiagnosticStage.HEADER, code=exc.code.value, field=None, message=exc.message)]
            )
            report.set_context("error", exc.to_dict())
            exitCode = 2
        except (OSError, ValueError) as exc:
            logEvent(logger, logging.ERROR, runId, "csv", f"CSV read error: {exc}")
            typer.echo(f"ERROR: CSV read error: {exc}", err=True)
            exitCode = 2

    finally:
        durationMs = getDurationMs(startMonotonic, time.monotonic())
        finalizeReport(
            report=report,
            durationMs=durationMs,
            logFile=logFilePath,
            reportDir=settings.report_dir,
        )
        reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
        logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")

        sys.stdout = originalStdout
        sys.stderr = originalStderr
        closeCommandLogger(logger)

        if exitCode is not None:
            raise typer.Exit(code=exitCode)


def resolveVariant(
    registry: VariantRegistry,
    source: CsvTabularSource,
    variantName: str | None,
    logger: logging.Logger,
    runId: str,
    report,
) -> PatternVariant | None:
    if variantName:
        try:
            variant = registry.get(variantName)
        except ValueError as exc:
            logEvent(logger, logging.ERROR, runId, "detect", str(exc))
            typer.echo(f"ERROR: {exc}", err=True)
            report.add_diagnostics(
                errors=[
                    DiagnosticItem(
                        stage=DiagnosticStage.HEADER,
                        code=ErrorCode.UNKNOWN_VARIANT.value,
                        field=None,
                        message=str(exc),
                    )
                ]
            )
            return None
        report.set_meta(variant=variant.name)
        return variant
    variant = DetectUseCase(registry).run(source, logger, runId, report)
    if variant is None:
        typer.echo("ERROR: no schema variant matches the CSV header", err=True)
    return variant


def runDetectCommand(ctx: typer.Context, csvPath: str | None) -> None:
    runId = ctx.obj["runId"]

    def execute(logger, report, registry: VariantRegistry, source: CsvTabularSource) -> int:
        variant = DetectUseCase(registry).run(source, logger, runId, report)
        if variant is None:
            typer.echo("variant=<none>")
            return 1
        typer.echo(f"variant={variant.name}")
        return 0

    runWithReport(ctx=ctx, commandName="detect", csvPath=csvPath, runner=execute)


def runCheckHeaderCommand(ctx: typer.Context, csvPath: str | None, variantName: str | None) -> None:
    runId = ctx.obj["runId"]

    def execute(logger, report, registry: VariantRegistry, source: CsvTabularSource) -> int:
        variant = resolveVariant(registry, source, variantName, logger, runId, report)
        if variant is None:
            if not variantName:
                header = source.fetch_row(0)
                report.set_context(
                    "uncovered",
                    {item.name: find_uncovered_fields(header, item.schema()) for item in registry.list()},
                )
            return 2
        stream = RowStream(source, variant.schema())
        result = stream.validate_header(variant.schema())
        report.set_context("header", {"raw": list(stream.header), "adapted": dict(stream.adapted_header)})
        if not result.ok:
            report.add_diagnostics(
                errors=[
                    DiagnosticItem(
                        stage=DiagnosticStage.HEADER,
                        code=result.error.code.value,
                        field=None,
                        message=result.error.message,
                    )
                ]
            )
            logEvent(logger, logging.ERROR, runId, "header", result.error.message)
            typer.echo(f"header=rejected invalid={result.invalid_fields}")
            return 1
        typer.echo(f"header=ok variant={variant.name}")
        return 0

    runWithReport(ctx=ctx, commandName="check-header", csvPath=csvPath, runner=execute)


def runProjectCommand(
    ctx: typer.Context,
    csvPath: str | None,
    variantName: str | None,
    includeRecords: bool,
) -> None:
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]

    def execute(logger, report, registry: VariantRegistry, source: CsvTabularSource) -> int:
        variant = resolveVariant(registry, source, variantName, logger, runId, report)
        if variant is None:
            return 2
        stream = RowStream(source, variant.schema())
        usecase = ProjectUseCase(
            report_items_limit=settings.report_items_limit,
            include_records=includeRecords,
        )
        exitCode = usecase.run(stream=stream, variant=variant, logger=logger, run_id=runId, report=report)
        typer.echo(
            f"rows_total={report.summary.rows_total} rows_projected={report.summary.rows_projected} "
            f"rows_failed={report.summary.rows_failed}"
        )
        return exitCode

    runWithReport(ctx=ctx, commandName="project", csvPath=csvPath, runner=execute)


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
    variants: str | None = typer.Option(None, "--variants", help="Path to schema variants YAML"),
    delimiter: str | None = typer.Option(None, "--delimiter", help="CSV field delimiter (char, 'tab', 'semicolon', ...)"),
    encoding: str | None = typer.Option(None, "--encoding", help="CSV file encoding"),
    strictColumns: bool | None = typer.Option(None, "--strict-columns", help="Treat column count mismatch as a malformed row"),
    reportItemsLimit: int | None = typer.Option(None, "--report-items-limit", help="Max items stored in report"),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - создаёт каталоги log/report
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "variants_path": variants,
        "csv_delimiter": delimiter,
        "csv_encoding": encoding,
        "strict_columns": strictColumns,
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
        "report_items_limit": reportItemsLimit,
    }
    try:
        loaded = loadSettings(config_path=config, cli_overrides=cliOverrides)
    except ValueError as exc:
        typer.echo(f"ERROR: invalid settings: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }


@app.command()
def detect(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to input CSV"),
):
    runDetectCommand(ctx, csv)


@app.command("check-header")
def checkHeader(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to input CSV"),
    variant: str | None = typer.Option(None, "--variant", help="Schema variant name (auto-detect if omitted)"),
):
    runCheckHeaderCommand(ctx, csv, variant)


@app.command()
def project(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to input CSV"),
    variant: str | None = typer.Option(None, "--variant", help="Schema variant name (auto-detect if omitted)"),
    includeRecords: bool = typer.Option(False, "--include-records", help="Store projected records in report"),
):
    runProjectCommand(ctx, csv, variant, includeRecords)


if __name__ == "__main__":
    app()
