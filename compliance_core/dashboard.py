# compliance_core/dashboard.py
from datetime import date
from typing import Iterable

from compliance_core.classifier import DEFAULT_POLICY, classify, is_approaching_minimum_age
from compliance_core.datetools import normalize_day
from compliance_core.models import ComplianceSummary, CompliancePolicy, VettingRecord

COMPLETE_STATES = ("compliant", "at_risk")


def summarize(
    records: Iterable[VettingRecord], now: date, policy: CompliancePolicy = DEFAULT_POLICY
) -> ComplianceSummary:
    """
    Bucket a population of vetting records for the compliance dashboard.
    Each record is classified independently; one corrupt record fails the
    whole summary with InvalidRecord.
    """
    today = normalize_day(now)
    summary = ComplianceSummary()
    needs_vetting = 0
    complete = 0

    for record in records:
        verdict = classify(record, today, policy)
        summary.total += 1
        summary.by_risk_tier[verdict.risk_tier] += 1
        summary.by_state[verdict.state] += 1

        if verdict.state == "at_risk":
            summary.expiring_soon_count += 1

        if verdict.state == "not_applicable_yet":
            if is_approaching_minimum_age(record.date_of_birth, today, policy):
                summary.turning_minimum_age_soon_count += 1
        else:
            needs_vetting += 1
            if verdict.state in COMPLETE_STATES:
                complete += 1

        if verdict.next_review_date and (
            summary.next_review_date is None or verdict.next_review_date < summary.next_review_date
        ):
            summary.next_review_date = verdict.next_review_date

    if needs_vetting:
        summary.completion_rate = round(complete / needs_vetting * 100)

    return summary
