from datetime import date

import pytest

from compliance_core.coverage_engine import compute_coverage
from compliance_core.errors import InvalidInput
from compliance_core.models import DateRange
from compliance_core.record_mapper import normalize_check_status, periods_from_address_history, vetting_record_from_row


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("received", "received"),
        ("certificate_received", "received"),
        (" Requested ", "requested"),
        ("not-requested", "not_requested"),
        ("EXPIRED", "expired"),
        (None, "not_requested"),
        ("", "not_requested"),
    ],
)
def test_status_spellings_are_normalized(raw, expected):
    assert normalize_check_status(raw) == expected


def test_unknown_status_is_rejected():
    with pytest.raises(InvalidInput):
        normalize_check_status("exempt")


def test_address_history_form_becomes_timeline():
    periods = periods_from_address_history(
        "2021-07-01",
        [
            {"address": {"line1": "1 Old Road"}, "moveIn": "2019-01-01", "moveOut": "2021-06-01"},
            {"address": {"line1": "Half typed"}, "moveIn": "2017-01-01", "moveOut": ""},
        ],
    )

    assert len(periods) == 2
    assert periods[0].is_open
    assert periods[0].start == date(2021, 7, 1)
    assert periods[0].label == "Current address"
    assert periods[1].end == date(2021, 6, 1)
    assert periods[1].label == "Address 1"


def test_mapped_timeline_feeds_coverage_engine():
    periods = periods_from_address_history("2021-07-01", [{"moveIn": "2019-01-01", "moveOut": "2021-06-01"}])

    result = compute_coverage(periods, 5, date(2024, 1, 1))

    assert result.gaps == [DateRange(start=date(2021, 6, 1), end=date(2021, 7, 1))]


def test_missing_home_move_in_yields_history_only():
    assert periods_from_address_history(None, []) == []


def test_row_maps_onto_vetting_record():
    record = vetting_record_from_row(
        {
            "id": "member-1",
            "dbs_status": "received",
            "dbs_certificate_date": "2023-02-01",
            "dbs_certificate_expiry_date": "2026-02-01T00:00:00+00:00",
            "date_of_birth": "1985-09-12",
            "dbs_request_date": None,
        }
    )

    assert record.check_status == "received"
    assert record.certificate_issued_on == date(2023, 2, 1)
    assert record.certificate_expires_on == date(2026, 2, 1)
    assert record.date_of_birth == date(1985, 9, 12)
    assert record.requested_on is None


def test_malformed_date_is_rejected():
    with pytest.raises(InvalidInput):
        vetting_record_from_row({"dbs_status": "requested", "dbs_request_date": "31/12/2020"})
