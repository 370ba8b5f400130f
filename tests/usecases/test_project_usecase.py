import logging

from intake.datasets.registry import VariantRegistry
from intake.datasets.variant import PatternVariant
from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import TabularSourceError
from intake.domain.reporting.collector import ReportCollector
from intake.domain.rows.projector import RowProjector
from intake.domain.rows.stream import RowStream
from intake.infra.sources.memory_source import MemoryTabularSource
from intake.usecases.detect_usecase import DetectUseCase
from intake.usecases.project_usecase import ProjectUseCase

logger = logging.getLogger("intake.tests")

VARIANT = PatternVariant.from_patterns(
    "dhl",
    {"orderId": "order id|orderid", "weight": "weight"},
    comparison={"order_ref": "orderId", "weight_kg": "weight"},
)


def run_project(rows, failures=None, include_records=True, variant=VARIANT):
    stream = RowStream(MemoryTabularSource(rows, failures=failures), variant.schema())
    report = ReportCollector(run_id="run-1", command="project")
    code = ProjectUseCase(report_items_limit=100, include_records=include_records).run(
        stream=stream, variant=variant, logger=logger, run_id="run-1", report=report
    )
    report.finish(duration_ms=1)
    return code, report, stream


def test_all_rows_projected():
    code, report, _ = run_project([["Order-ID", "Weight"], ["A100", "2.5"], ["A101", "3.0"]])
    assert code == 0
    assert report.summary.rows_total == 2
    assert report.summary.rows_projected == 2
    assert report.meta.variant == "dhl"
    assert [item.payload for item in report.items] == [
        {"order_ref": "A100", "weight_kg": "2.5"},
        {"order_ref": "A101", "weight_kg": "3.0"},
    ]
    assert [item.row_ref.line_no for item in report.items] == [1, 2]
    assert report.context["dump"] == {"Line #1": "A100,2.5", "Line #2": "A101,3.0"}
    assert report.build().status == "SUCCESS"


def test_records_not_stored_unless_requested():
    code, report, _ = run_project([["order id", "weight"], ["A100", "2.5"]], include_records=False)
    assert code == 0
    assert report.summary.rows_projected == 1
    assert report.items == []


def test_failed_row_is_reported_and_rest_continue():
    failure = TabularSourceError(code=ErrorCode.MALFORMED_ROW, message="broken quotes")
    code, report, stream = run_project(
        [["order id", "weight"], ["A100", "2.5"], ["bad", "row"], ["A102", "1.0"]],
        failures={2: failure},
    )
    assert code == 1
    assert report.summary.rows_total == 3
    assert report.summary.rows_failed == 1
    assert report.summary.rows_projected == 2
    assert report.summary.by_stage["FETCH"]["errors_total"] == 1
    failed = [item for item in report.items if item.status == "FAILED"]
    assert failed[0].row_ref.line_no == 2
    assert failed[0].diagnostics[0].code == "MALFORMED_ROW"
    assert "Line #2" not in report.context["dump"]
    assert report.build().status == "PARTIAL"


def test_rejected_header_stops_before_rows():
    source = MemoryTabularSource([["order id", "tracking"], ["A100", "T1"]])
    stream = RowStream(source, VARIANT.schema())
    report = ReportCollector(run_id="run-1", command="project")
    code = ProjectUseCase(report_items_limit=100, include_records=True).run(
        stream=stream, variant=VARIANT, logger=logger, run_id="run-1", report=report
    )
    assert code == 2
    assert source.fetched == [0]
    assert report.summary.rows_total == 0
    assert report.summary.errors_total == 1
    assert report.context["diagnostics"][0]["code"] == "INVALID_HEADER"
    assert "tracking" in report.context["diagnostics"][0]["message"]


def test_header_indicator_cells_are_dropped():
    variant = PatternVariant.from_patterns(
        "marked",
        {"marker": "h", "orderId": "order id", "weight": "weight"},
        header_rows=1,
    )
    code, report, _ = run_project([["H", "order id", "weight"], ["D", "A100", "2.5"]], variant=variant)
    assert code == 0
    assert report.items[0].payload == {"orderId": "A100", "weight": "2.5"}


def test_iter_projected_yields_none_for_failed_rows():
    failure = TabularSourceError(code=ErrorCode.SOURCE_ERROR, message="gone")
    stream = RowStream(
        MemoryTabularSource([["order id", "weight"], ["A100", "2.5"]], failures={1: failure}),
        VARIANT.schema(),
    )
    pairs = list(ProjectUseCase(10, False).iter_projected(stream, RowProjector(stream, VARIANT.comparison)))
    assert len(pairs) == 1
    assert pairs[0][0].error is failure
    assert pairs[0][1] is None


def test_detect_usecase_sets_context():
    registry = VariantRegistry()
    registry.register(VARIANT)
    report = ReportCollector(run_id="run-1", command="detect")
    source = MemoryTabularSource([["ORDERID", "weight"]])
    variant = DetectUseCase(registry).run(source, logger, "run-1", report)
    assert variant is VARIANT
    assert report.meta.variant == "dhl"
    assert report.context["detection"] == {"tried": ["dhl"], "matched": "dhl"}

    miss = DetectUseCase(registry).run(MemoryTabularSource([["tracking"]]), logger, "run-1", report)
    assert miss is None
    assert report.context["detection"]["matched"] is None
