from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import TabularSourceError
from intake.domain.rows.projector import RowProjector, project_row, resolve_field_key, row_by_name
from intake.domain.rows.stream import FetchResult, RowStream
from intake.infra.sources.memory_source import MemoryTabularSource

PATTERN = {"orderId": "order id|orderid", "weight": "weight"}


def test_end_to_end_projection():
    source = MemoryTabularSource([["order-id", "Weight"], ["A100", "2.5"]])
    stream = RowStream(source, PATTERN)
    projector = RowProjector(stream)
    assert projector.project(stream.current()) == {"orderId": "A100", "weight": "2.5"}


def test_project_row_follows_canonical_order_not_column_order():
    named = {"Weight": "2.5", "Order ID": "A100"}
    adapted = {"orderId": "Order ID", "weight": "Weight"}
    assert list(project_row(named, adapted, PATTERN)) == ["orderId", "weight"]


def test_header_row_count_drops_leading_indicator():
    named = {"H": "H", "order id": "A100", "weight": "2.5"}
    pattern = {"indicator": "h", **PATTERN}
    adapted = {"indicator": "H", "orderId": "order id", "weight": "weight"}
    assert project_row(named, adapted, pattern, header_row_count=1) == {"orderId": "A100", "weight": "2.5"}


def test_comparison_pattern_supplies_output_keys():
    named = {"order-id": "A100", "Weight": "2.5"}
    adapted = {"orderId": "order-id", "weight": "Weight"}
    comparison = {"order_ref": "orderId", "weight_kg": ["weight"]}
    assert project_row(named, adapted, comparison) == {"order_ref": "A100", "weight_kg": "2.5"}


def test_unresolved_keys_are_omitted_not_errors():
    named = {"order-id": "A100", "Weight": "2.5"}
    adapted = {"orderId": "order-id", "weight": "Weight"}
    assert project_row(named, adapted, {"order_ref": "orderId"}) == {"order_ref": "A100"}


def test_resolve_field_key():
    assert resolve_field_key("Order-ID", PATTERN) == "orderId"
    assert resolve_field_key("WEIGHT", PATTERN) == "weight"
    assert resolve_field_key("notes", PATTERN) is None


def test_row_by_name_handles_duplicates_and_short_rows():
    assert row_by_name(["a", "b", "a", "c"], ["1", "2", "3"]) == {"a": "1", "b": "2", "c": ""}


def test_projector_with_missing_column_omits_key():
    source = MemoryTabularSource([["order id"], ["A100"]])
    stream = RowStream(source, {**PATTERN, "carrier": "carrier name"})
    projector = RowProjector(stream, PATTERN)
    assert projector.project(stream.current()) == {"orderId": "A100"}


def test_project_result_skips_failed_fetch():
    source = MemoryTabularSource([["order id", "weight"], ["A100", "2.5"]])
    projector = RowProjector(RowStream(source, PATTERN))
    assert projector.project_result(FetchResult(line_no=5, row=None)) is None
    assert projector.project_result(FetchResult(line_no=1, row=["A100", "2.5"])) == {"orderId": "A100", "weight": "2.5"}


def test_project_current_reads_row_under_cursor():
    source = MemoryTabularSource([["order-id", "Weight"], ["A100", "2.5"], ["A101", "3.0"]])
    stream = RowStream(source, PATTERN)
    projector = RowProjector(stream)
    assert projector.project_current() == {"orderId": "A100", "weight": "2.5"}
    stream.next()
    assert projector.project_current() == {"orderId": "A101", "weight": "3.0"}
    assert stream.dump.as_dict() == {"Line #1": "A100,2.5", "Line #2": "A101,3.0"}


def test_project_current_returns_none_on_failed_fetch():
    failure = TabularSourceError(code=ErrorCode.MALFORMED_ROW, message="broken quotes")
    source = MemoryTabularSource([["order id", "weight"], ["A100", "2.5"]], failures={1: failure})
    stream = RowStream(source, PATTERN)
    assert RowProjector(stream).project_current() is None
    assert stream.error is failure
