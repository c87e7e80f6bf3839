"""Drift Detection: invalid stored values are counted and sorted."""

from app.core.domain_types import OrderStatus, allowed_values
from app.core.drift import find_drift

ALLOWED = allowed_values(OrderStatus)


def test_find_drift_counts_invalid_rows():
    report = find_drift({"paid": 3, "shiped": 2, "PAID": 1}, ALLOWED)
    assert report.total_rows == 6
    assert report.invalid_rows == 3
    assert list(report.invalid_values) == ["PAID", "shiped"]
    assert not report.is_clean


def test_find_drift_empty_table_is_clean():
    report = find_drift({}, ALLOWED)
    assert report.total_rows == 0
    assert report.is_clean


def test_drift_report_to_dict():
    data = find_drift({"pending": 1}, ALLOWED).to_dict()
    assert data == {
        "total_rows": 1,
        "invalid_rows": 0,
        "invalid_values": {},
        "allowed": list(ALLOWED),
        "is_clean": True,
    }
