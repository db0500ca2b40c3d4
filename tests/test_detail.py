"""Tests for detail module"""

import pytest

from http_inspector.config import COLORS
from http_inspector.detail import Selection, build_detail, detail_for
from http_inspector.results import CallRecord


@pytest.fixture
def records():
    """Ten aggregated rows"""
    return [
        CallRecord(method="GET", uri=f"/api/items/{i}", service="api", call_count=i + 1)
        for i in range(10)
    ]


@pytest.fixture
def failing_record():
    return CallRecord(
        method="delete",
        uri="/index.php/api/items/7?force=1",
        service="api",
        call_count=40,
        avg_duration=4.0,
        min_duration=1.0,
        max_duration=9.0,
        error_count=2,
        error_rate=5.0,
        total_bytes_sent=1536,
        total_bytes_received=0,
    )


# Tests for Selection

def test_select_valid_row():
    """Test selecting a row opens the panel"""
    selection = Selection().select(5, 10)
    assert selection.index == 5
    assert selection.open is True


def test_select_out_of_range():
    """Test selecting a row that does not exist selects nothing"""
    assert Selection().select(12, 10) == Selection()
    assert Selection().select(-1, 10) == Selection()


def test_selection_dropped_when_rows_shrink(records):
    """Test a refresh from 10 rows to 3 invalidates a selection on row 7"""
    selection = Selection().select(7, len(records))
    assert selection.record(records) is records[7]

    reconciled = selection.reconciled(3)
    assert reconciled.index is None
    assert reconciled.open is False
    assert detail_for(selection, records[:3]) is None


def test_selection_kept_when_row_still_exists(records):
    """Test the panel follows the new data at the same index"""
    selection = Selection().select(2, len(records))
    assert selection.reconciled(3) == selection

    refreshed = [CallRecord(uri="/new/0"), CallRecord(uri="/new/1"), CallRecord(uri="/new/2")]
    assert selection.record(refreshed).uri == "/new/2"


def test_closed_selection_has_no_record(records):
    """Test a closed panel shows nothing"""
    selection = Selection().select(1, len(records)).closed()
    assert selection.record(records) is None
    assert Selection(index=1, open=False).record(records) is None


# Tests for build_detail

def test_build_detail_header(failing_record):
    """Test the panel header fields"""
    detail = build_detail(failing_record)
    assert detail.method == "DELETE"
    assert detail.method_color == "red"
    assert detail.uri == "/api/items/7"
    assert detail.service == "api"


def test_build_detail_sections(failing_record):
    """Test the metric grouping"""
    detail = build_detail(failing_record)
    assert [section.title for section in detail.sections] == [
        "Request Information",
        "Performance",
        "Reliability",
        "Bandwidth",
    ]

    performance = detail.sections[1].metrics
    assert performance[0].label == "Call Count"
    assert performance[0].value == "40"
    assert performance[1].value == "4.00ms"
    assert performance[1].subtext == "Min: 1.00ms | Max: 9.00ms"

    errors = detail.sections[2].metrics[0]
    assert errors.value == "2"
    assert errors.subtext == "Error Rate: 5.00%"
    assert errors.color == COLORS['error_text']

    bandwidth = detail.sections[3].metrics
    assert bandwidth[0].value == "1.50 KB"
    assert bandwidth[1].value == "0 B"


def test_build_detail_without_errors():
    """Test the error metric is colored as healthy"""
    detail = build_detail(CallRecord(call_count=5))
    assert detail.sections[2].metrics[0].color == COLORS['ok_text']
    assert detail.sections[0].metrics[0].value == "N/A"
    assert detail.sections[0].metrics[1].value == "N/A"
