from intake.domain.error_codes import ErrorCode
from intake.domain.exceptions import HeaderRejectedError
from intake.domain.headers.classifier import classify_header, find_uncovered_fields, validate_header

PATTERN = {"orderId": "order id|orderid", "weight": "weight", "carrier": "carrier name"}


def test_classify_is_order_independent():
    assert classify_header(["Order ID", "Weight"], PATTERN)
    assert classify_header(["Weight", "Order ID"], PATTERN)


def test_classify_ignores_unmatched_canonical_keys():
    assert classify_header(["weight"], PATTERN)


def test_classify_fails_on_uncovered_field():
    assert not classify_header(["Order ID", "Weight", "Notes"], PATTERN)


def test_validate_lists_raw_offending_fields():
    result = validate_header(["order id", "Notes"], PATTERN)
    assert not result.ok
    assert result.invalid_fields == ["Notes"]
    assert isinstance(result.error, HeaderRejectedError)
    assert result.error.code == ErrorCode.INVALID_HEADER
    assert result.error.invalid_fields == ["Notes"]
    assert result.error.message == 'Invalid Names In Header: ["Notes"]'


def test_validate_success_has_no_error():
    result = validate_header(["order id", "Carrier-Name"], PATTERN)
    assert result.ok
    assert result.error is None
    assert result.invalid_fields == []


def test_find_uncovered_fields_keeps_header_order():
    assert find_uncovered_fields(["B", "weight", "A"], PATTERN) == ["B", "A"]


def test_classify_accepts_unit_annotated_columns():
    assert classify_header(["Order ID", "Weight (kg)"], PATTERN)


def test_header_differing_only_by_unit_annotation_classifies_true():
    assert classify_header(["Order ID", "Weight (lb)"], PATTERN)
    assert classify_header(["Order ID", "WEIGHT [kg]"], PATTERN)
    assert validate_header(["Order ID", "Weight (lb)"], PATTERN).ok


def test_annotation_does_not_rescue_unknown_base_name():
    assert not classify_header(["Order ID", "Volume (l)"], PATTERN)
    assert validate_header(["Order ID", "Volume (l)"], PATTERN).invalid_fields == ["Volume (l)"]
