# compliance_core/compliance_matrix.py
from typing import List, Optional

from compliance_core.datetools import format_date_range
from compliance_core.models import CoverageResult


def evaluate_submission_blockers(coverage: CoverageResult, gap_explanation: Optional[str] = None) -> List[str]:
    """
    The Submission Gate.
    Determines what is still required before the address history step of an
    application can be submitted. An empty list means the step is complete.
    """
    blockers = []

    # Gaps are acceptable only when the applicant has explained them in writing
    if not coverage.is_fully_covered:
        if not (gap_explanation and gap_explanation.strip()):
            blockers.append("EXPLAIN_ADDRESS_GAPS")

    return blockers


def describe_gaps(coverage: CoverageResult) -> List[str]:
    """Human-readable gap lines, e.g. '1 Jun 2021 to 1 Jul 2021 (30 days)'."""
    return [f"{format_date_range(gap.start, gap.end)} ({gap.days} days)" for gap in coverage.gaps]
