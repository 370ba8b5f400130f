import pytest

from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import TabularSourceError
from intake.infra.sources.memory_source import MemoryTabularSource


def test_memory_source_returns_copies():
    rows = [["h"], ["r1"]]
    source = MemoryTabularSource(rows, delimiter="\t")
    row = source.fetch_row(1)
    row.append("x")
    assert source.fetch_row(1) == ["r1"]
    assert source.total_row_count() == 2
    assert source.field_delimiter() == "\t"
    assert source.fetched == [1, 1]


def test_memory_source_failures_and_range():
    failure = TabularSourceError(code=ErrorCode.SOURCE_ERROR, message="gone")
    source = MemoryTabularSource([["h"], ["r1"]], failures={1: failure})
    with pytest.raises(TabularSourceError) as exc:
        source.fetch_row(1)
    assert exc.value is failure
    with pytest.raises(TabularSourceError) as exc:
        source.fetch_row(5)
    assert exc.value.code == ErrorCode.ROW_OUT_OF_RANGE
