# compliance_core/classifier.py
from datetime import date, timedelta
from typing import Iterable, List, Optional

from compliance_core.datetools import add_years, age_on, days_between, normalize_day
from compliance_core.errors import InvalidRecord
from compliance_core.models import ComplianceVerdict, CompliancePolicy, VettingRecord

DEFAULT_POLICY = CompliancePolicy()

MISSING_EXPIRY_WARNING = "Certificate recorded as received but no expiry date captured"


def classify(record: VettingRecord, now: date, policy: CompliancePolicy = DEFAULT_POLICY) -> ComplianceVerdict:
    """
    The Deterministic Classifier.
    Derives compliance state, risk tier and the next date the verdict can change
    from a single snapshot. The rules are evaluated in order and the first match
    wins; nothing is persisted between calls.
    """
    today = normalize_day(now)
    _reject_corrupt(record, today)

    # ==========================================
    # 1. AGE GATE: Not yet subject to vetting
    # ==========================================
    applicable_from = minimum_age_date(record.date_of_birth, policy)
    if today < applicable_from:
        return ComplianceVerdict(
            state="not_applicable_yet",
            risk_tier="low",
            next_review_date=applicable_from,
            reasons=[f"Turns {policy.minimum_age} on {applicable_from.isoformat()}; DBS check required from then"],
        )

    # ==========================================
    # 2. CERTIFICATE ON FILE
    # ==========================================
    if record.check_status == "received" and record.certificate_expires_on:
        expires = record.certificate_expires_on
        days_left = days_between(today, expires)

        if expires < today:
            return ComplianceVerdict(
                state="expired",
                risk_tier="critical",
                next_review_date=None,
                reasons=[f"Certificate expired {-days_left} days ago on {expires.isoformat()}"],
            )
        if days_left <= policy.expiring_soon_days:
            return ComplianceVerdict(
                state="at_risk",
                risk_tier="medium",
                next_review_date=expires,
                reasons=[f"Certificate expires in {days_left} days on {expires.isoformat()}"],
            )
        return ComplianceVerdict(
            state="compliant",
            risk_tier="low",
            next_review_date=expires - timedelta(days=policy.expiring_soon_days),
            reasons=[f"Certificate valid until {expires.isoformat()}"],
        )

    # ==========================================
    # 3. REQUEST IN FLIGHT
    # ==========================================
    if record.check_status == "requested" and record.requested_on and record.requested_on <= today:
        elapsed = days_between(record.requested_on, today)
        if elapsed >= policy.overdue_after_days:
            return ComplianceVerdict(
                state="overdue",
                risk_tier="high",
                next_review_date=None,
                reasons=[f"DBS requested {elapsed} days ago with no certificate recorded"],
            )
        return ComplianceVerdict(
            state="pending_response",
            risk_tier="low",
            next_review_date=record.requested_on + timedelta(days=policy.overdue_after_days),
            reasons=[f"DBS requested {elapsed} days ago; awaiting certificate"],
        )

    # ==========================================
    # 4. NOTHING USABLE ON FILE
    # ==========================================
    reasons: List[str] = []
    warnings: List[str] = []

    if record.check_status == "received":
        warnings.append(MISSING_EXPIRY_WARNING)
    elif record.check_status == "requested" and record.requested_on:
        warnings.append(f"DBS request date {record.requested_on.isoformat()} is in the future")
    elif record.check_status == "requested":
        warnings.append("DBS marked as requested but no request date captured")
    elif record.check_status == "expired":
        reasons.append("DBS check marked as expired; a new check must be requested")
    else:
        reasons.append("DBS check has not been requested")

    return ComplianceVerdict(
        state="overdue",
        risk_tier="high",
        next_review_date=None,
        reasons=reasons + warnings,
        data_quality_warnings=warnings,
    )


def classify_many(
    records: Iterable[VettingRecord], now: date, policy: CompliancePolicy = DEFAULT_POLICY
) -> List[ComplianceVerdict]:
    return [classify(record, now, policy) for record in records]


def _reject_corrupt(record: VettingRecord, today: date) -> None:
    if record.date_of_birth is None:
        raise InvalidRecord("Date of birth is required")
    if record.date_of_birth > today:
        raise InvalidRecord(f"Date of birth {record.date_of_birth.isoformat()} is in the future")
    if (
        record.certificate_issued_on
        and record.certificate_expires_on
        and record.certificate_expires_on < record.certificate_issued_on
    ):
        raise InvalidRecord("Certificate expiry date is before its issue date")


# ==========================================
# AGE & EXPIRY HELPERS
# ==========================================
def minimum_age_date(date_of_birth: date, policy: CompliancePolicy = DEFAULT_POLICY) -> date:
    """The day the person reaches `policy.minimum_age`."""
    return add_years(normalize_day(date_of_birth), policy.minimum_age)


def requires_vetting(date_of_birth: date, now: date, policy: CompliancePolicy = DEFAULT_POLICY) -> bool:
    return normalize_day(now) >= minimum_age_date(date_of_birth, policy)


def is_approaching_minimum_age(date_of_birth: date, now: date, policy: CompliancePolicy = DEFAULT_POLICY) -> bool:
    today = normalize_day(now)
    birthday = minimum_age_date(date_of_birth, policy)
    return today < birthday and days_between(today, birthday) <= policy.turning_age_notice_days


def current_age(date_of_birth: date, now: date) -> int:
    return age_on(normalize_day(date_of_birth), normalize_day(now))


def suggest_expiry_date(issued_on: Optional[date], policy: CompliancePolicy = DEFAULT_POLICY) -> Optional[date]:
    """
    Default expiry offered when a certificate is recorded: issue date plus the
    policy validity. Only a suggestion; a manually entered expiry always wins.
    """
    if issued_on is None:
        return None
    return add_years(normalize_day(issued_on), policy.certificate_validity_years)
