from datetime import date

from compliance_core.compliance_matrix import describe_gaps, evaluate_submission_blockers
from compliance_core.coverage_engine import compute_coverage
from compliance_core.models import ResidencePeriod


def test_unexplained_gap_blocks_submission(scenario_a_periods, as_of):
    coverage = compute_coverage(scenario_a_periods, 5, as_of)

    assert evaluate_submission_blockers(coverage) == ["EXPLAIN_ADDRESS_GAPS"]
    assert evaluate_submission_blockers(coverage, "   ") == ["EXPLAIN_ADDRESS_GAPS"]


def test_explained_gap_can_be_submitted(scenario_a_periods, as_of):
    coverage = compute_coverage(scenario_a_periods, 5, as_of)

    assert evaluate_submission_blockers(coverage, "Travelling in June 2021") == []


def test_complete_history_needs_no_explanation(as_of):
    coverage = compute_coverage([ResidencePeriod(start=date(2015, 1, 1), end="present")], 5, as_of)

    assert evaluate_submission_blockers(coverage) == []
    assert describe_gaps(coverage) == []


def test_gap_descriptions(scenario_a_periods, as_of):
    coverage = compute_coverage(scenario_a_periods, 5, as_of)

    assert describe_gaps(coverage) == ["1 Jun 2021 to 1 Jul 2021 (30 days)"]
