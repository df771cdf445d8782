# compliance_core/record_mapper.py
from typing import Any, Dict, Iterable, List, Mapping, Optional

from compliance_core.datetools import parse_optional_day
from compliance_core.errors import InvalidInput
from compliance_core.models import CheckStatus, ResidencePeriod, VettingRecord

# Spellings found in the database and older screens, mapped onto the four
# statuses the classifier understands.
STATUS_ALIASES: Dict[str, CheckStatus] = {
    "not_requested": "not_requested",
    "not requested": "not_requested",
    "requested": "requested",
    "received": "received",
    "certificate_received": "received",
    "expired": "expired",
}


def normalize_check_status(raw: Optional[str]) -> CheckStatus:
    """
    The Sanitizer.
    Maps a stored DBS status onto the canonical literal. Unknown values are
    rejected rather than guessed.
    """
    if raw is None or not str(raw).strip():
        return "not_requested"
    clean = str(raw).lower().strip().replace("-", "_")
    if clean not in STATUS_ALIASES:
        raise InvalidInput(f"Unknown DBS status: {raw!r}")
    return STATUS_ALIASES[clean]


def periods_from_address_history(
    home_move_in: Optional[str], address_history: Iterable[Mapping[str, Any]] = ()
) -> List[ResidencePeriod]:
    """
    Build a residence timeline from the application form shape: the current
    home (move-in date only) plus previous addresses with moveIn/moveOut.
    """
    periods: List[ResidencePeriod] = []

    current_start = parse_optional_day(home_move_in)
    if current_start is not None:
        periods.append(ResidencePeriod(start=current_start, end="present", label="Current address"))

    for index, entry in enumerate(address_history, start=1):
        move_in = parse_optional_day(entry.get("moveIn"))
        move_out = parse_optional_day(entry.get("moveOut"))
        # Half-filled rows are still being typed
        if move_in is None or move_out is None:
            continue
        periods.append(ResidencePeriod(start=move_in, end=move_out, label=f"Address {index}"))

    return periods


def vetting_record_from_row(row: Mapping[str, Any]) -> VettingRecord:
    """Map a household member / assistant / employee row onto a VettingRecord."""
    return VettingRecord(
        check_status=normalize_check_status(row.get("dbs_status")),
        certificate_issued_on=parse_optional_day(row.get("dbs_certificate_date")),
        certificate_expires_on=parse_optional_day(row.get("dbs_certificate_expiry_date")),
        date_of_birth=parse_optional_day(row.get("date_of_birth")),
        requested_on=parse_optional_day(row.get("dbs_request_date")),
    )
