# compliance_core/models.py
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, computed_field, field_validator
from typing import Annotated, Optional, Literal, List, Dict, Union
from datetime import date, datetime

from compliance_core.datetools import days_between, normalize_day
from compliance_core.errors import InvalidInput

CheckStatus = Literal["not_requested", "requested", "received", "expired"]
ComplianceState = Literal["compliant", "pending_response", "at_risk", "overdue", "expired", "not_applicable_yet"]
RiskTier = Literal["low", "medium", "high", "critical"]

PRESENT = "present"

RISK_TIERS: List[str] = ["low", "medium", "high", "critical"]
COMPLIANCE_STATES: List[str] = ["compliant", "pending_response", "at_risk", "overdue", "expired", "not_applicable_yet"]


def as_calendar_day(value):
    """Before-validator: datetimes and ISO timestamp strings collapse to their day."""
    if isinstance(value, (date, datetime, str)):
        try:
            return normalize_day(value)
        except InvalidInput as exc:
            raise ValueError(str(exc))
    return value


CalendarDay = Annotated[date, BeforeValidator(as_calendar_day)]


# ==========================================
# 1. ADDRESS HISTORY (The Timeline)
# ==========================================
class ResidencePeriod(BaseModel):
    start: date
    end: Union[date, Literal["present"]]
    label: Optional[str] = None

    @field_validator("start", mode="before")
    @classmethod
    def _normalize_start(cls, value):
        return as_calendar_day(value)

    @field_validator("end", mode="before")
    @classmethod
    def _normalize_end(cls, value):
        if isinstance(value, str) and value.strip().lower() == PRESENT:
            return PRESENT
        return as_calendar_day(value)

    @property
    def is_open(self) -> bool:
        return self.end == PRESENT


class DateRange(BaseModel):
    start: date
    end: date

    @computed_field
    @property
    def days(self) -> int:
        return days_between(self.start, self.end)


class CoverageResult(BaseModel):
    merged_periods: List[DateRange] = Field(default_factory=list)
    window_periods: List[DateRange] = Field(default_factory=list, description="Merged periods truncated to the window")
    gaps: List[DateRange] = Field(default_factory=list)
    covered_days: int = 0
    required_days: int = 0
    coverage_percentage: float = 0.0
    window_start: date
    window_end: date
    is_fully_covered: bool = False

    @computed_field
    @property
    def has_gaps(self) -> bool:
        return len(self.gaps) > 0


# ==========================================
# 2. DBS VETTING (The Snapshot)
# ==========================================
class VettingRecord(BaseModel):
    check_status: CheckStatus = "not_requested"
    certificate_issued_on: Optional[date] = None
    certificate_expires_on: Optional[date] = None
    date_of_birth: Optional[date] = None
    requested_on: Optional[date] = None

    @field_validator("certificate_issued_on", "certificate_expires_on", "date_of_birth", "requested_on", mode="before")
    @classmethod
    def _normalize_dates(cls, value):
        return as_calendar_day(value)


class CompliancePolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    expiring_soon_days: int = Field(default=90, gt=0)
    overdue_after_days: int = Field(default=28, gt=0)
    minimum_age: int = Field(default=16, gt=0)
    certificate_validity_years: int = Field(default=3, gt=0)
    turning_age_notice_days: int = Field(default=90, gt=0)


class ComplianceVerdict(BaseModel):
    state: ComplianceState
    risk_tier: RiskTier
    next_review_date: Optional[date] = None
    reasons: List[str] = Field(default_factory=list)
    data_quality_warnings: List[str] = Field(default_factory=list)


# ==========================================
# 3. DASHBOARD AGGREGATE
# ==========================================
class ComplianceSummary(BaseModel):
    total: int = 0
    by_risk_tier: Dict[str, int] = Field(default_factory=lambda: {tier: 0 for tier in RISK_TIERS})
    by_state: Dict[str, int] = Field(default_factory=lambda: {state: 0 for state in COMPLIANCE_STATES})
    expiring_soon_count: int = 0
    turning_minimum_age_soon_count: int = 0
    completion_rate: int = 0
    next_review_date: Optional[date] = None
