# compliance_core/coverage_engine.py
from datetime import date, timedelta
from typing import Iterable, List

from compliance_core.datetools import add_years, days_between, normalize_day
from compliance_core.errors import InvalidInput
from compliance_core.models import CoverageResult, DateRange, ResidencePeriod

# Minimum share of the window that must be accounted for
COVERAGE_TOLERANCE = 0.99

CONTIGUOUS = timedelta(days=1)


def compute_coverage(
    periods: Iterable[ResidencePeriod],
    window_years: int,
    as_of: date,
    tolerance: float = COVERAGE_TOLERANCE,
) -> CoverageResult:
    """
    The Timeline Coverage Engine.
    Merges declared residence periods and decides whether they account for the
    trailing `window_years` up to `as_of`. Pure: the same arguments always
    produce an equal result, the inputs are never mutated.
    """
    if isinstance(window_years, bool) or not isinstance(window_years, int) or window_years <= 0:
        raise InvalidInput(f"window_years must be a positive whole number, got {window_years!r}")
    if not 0 < tolerance <= 1:
        raise InvalidInput(f"tolerance must be within (0, 1], got {tolerance!r}")

    periods = list(periods)
    _validate_timeline(periods)

    today = normalize_day(as_of)
    window_start = add_years(today, -window_years)

    merged = merge_periods(_clamp_to_as_of(periods, today))

    # Anything that ended before the window opened is irrelevant; anything
    # straddling the lower bound is truncated to it.
    window_periods = [
        DateRange(start=max(period.start, window_start), end=period.end)
        for period in merged
        if period.end > window_start
    ]

    gaps = find_gaps(window_periods, window_start, today)
    covered_days = sum(period.days for period in window_periods)
    required_days = days_between(window_start, today)

    return CoverageResult(
        merged_periods=merged,
        window_periods=window_periods,
        gaps=gaps,
        covered_days=covered_days,
        required_days=required_days,
        coverage_percentage=covered_days / required_days * 100,
        window_start=window_start,
        window_end=today,
        is_fully_covered=not gaps and meets_coverage_threshold(covered_days, required_days, tolerance),
    )


def meets_coverage_threshold(covered_days: int, required_days: int, tolerance: float = COVERAGE_TOLERANCE) -> bool:
    if required_days <= 0:
        raise InvalidInput("required_days must be positive")
    return covered_days / required_days >= tolerance


def merge_periods(ranges: Iterable[DateRange]) -> List[DateRange]:
    """Merge overlapping periods, and periods at most one day apart."""
    ordered = sorted(ranges, key=lambda r: (r.start, r.end))
    if not ordered:
        return []

    merged: List[DateRange] = []
    current_start, current_end = ordered[0].start, ordered[0].end

    for period in ordered[1:]:
        if period.start <= current_end + CONTIGUOUS:
            current_end = max(current_end, period.end)
        else:
            merged.append(DateRange(start=current_start, end=current_end))
            current_start, current_end = period.start, period.end

    merged.append(DateRange(start=current_start, end=current_end))
    return merged


def find_gaps(periods: List[DateRange], window_start: date, window_end: date) -> List[DateRange]:
    """Uncovered stretches of [window_start, window_end] given sorted, merged periods."""
    if not periods:
        return [DateRange(start=window_start, end=window_end)]

    gaps: List[DateRange] = []

    if periods[0].start > window_start:
        gaps.append(DateRange(start=window_start, end=periods[0].start))

    for current, following in zip(periods, periods[1:]):
        if following.start - current.end > CONTIGUOUS:
            gaps.append(DateRange(start=current.end, end=following.start))

    if periods[-1].end < window_end:
        gaps.append(DateRange(start=periods[-1].end, end=window_end))

    return gaps


def _validate_timeline(periods: List[ResidencePeriod]) -> None:
    for period in periods:
        if not period.is_open and period.start > period.end:
            raise InvalidInput(f"Residence period ends before it starts: {period.start} > {period.end}")

    open_periods = [period for period in periods if period.is_open]
    if len(open_periods) > 1:
        raise InvalidInput("Only one residence period may run to the present")
    if open_periods:
        current = open_periods[0]
        if any(period.start > current.start for period in periods if not period.is_open):
            raise InvalidInput("The period running to the present must be the most recent")


def _clamp_to_as_of(periods: List[ResidencePeriod], today: date) -> List[DateRange]:
    clamped: List[DateRange] = []
    for period in periods:
        end = today if period.is_open else min(period.end, today)
        start = min(period.start, today)
        # Zero-length periods neither count as cover nor bridge a gap
        if start < end:
            clamped.append(DateRange(start=start, end=end))
    return clamped
