import pytest

from intake.datasets.registry import VariantRegistry
from intake.datasets.variant import PatternVariant
from intake.infra.sources.memory_source import MemoryTabularSource


def make_registry():
    registry = VariantRegistry()
    registry.register(PatternVariant.from_patterns("dhl", {"orderId": "order no|orderid", "weight": "weight"}))
    registry.register(PatternVariant.from_patterns("generic", {"orderId": "order id|orderid", "notes": "notes|note"}))
    registry.register(PatternVariant.from_patterns("wide", {"orderId": "orderid", "weight": "weight", "notes": "notes"}))
    return registry


def test_detect_returns_first_matching_variant_by_priority():
    registry = make_registry()
    assert registry.detect(["Order-ID", "Weight"]).name == "dhl"
    assert registry.detect(["order id", "Notes"]).name == "generic"
    assert registry.detect(["orderid", "weight", "notes"]).name == "wide"


def test_detect_returns_none_when_nothing_matches():
    assert make_registry().detect(["tracking", "weight"]) is None


def test_detect_source_reads_header_row():
    source = MemoryTabularSource([["ORDER NO", "weight"], ["A100", "2.5"]])
    assert make_registry().detect_source(source).name == "dhl"
    assert source.fetched == [0]


def test_register_rejects_duplicates_and_get_rejects_unknown():
    registry = make_registry()
    with pytest.raises(ValueError):
        registry.register(PatternVariant.from_patterns("dhl", {"a": "a"}))
    with pytest.raises(ValueError):
        registry.get("ups")
    assert registry.names() == ["dhl", "generic", "wide"]
    assert len(registry) == 3


def test_variant_comparison_defaults_to_header_pattern():
    variant = PatternVariant.from_patterns("dhl", {"orderId": "order no|orderid"})
    assert variant.comparison == variant.schema()
    assert variant.unresolved_keys() == []


def test_unresolved_keys_lists_keys_missing_from_comparison():
    variant = PatternVariant.from_patterns(
        "dhl",
        {"orderId": "order no|orderid", "weight": "weight"},
        comparison={"order_ref": "orderid"},
    )
    assert variant.unresolved_keys() == ["weight"]
