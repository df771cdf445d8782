# compliance_core/main.py
from datetime import date
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from compliance_core.classifier import classify, suggest_expiry_date
from compliance_core.compliance_matrix import describe_gaps, evaluate_submission_blockers
from compliance_core.config import settings
from compliance_core.coverage_engine import compute_coverage
from compliance_core.dashboard import summarize
from compliance_core.errors import InvalidInput
from compliance_core.models import (
    CalendarDay,
    ComplianceSummary,
    ComplianceVerdict,
    CoverageResult,
    ResidencePeriod,
    VettingRecord,
)
from compliance_core.observability import get_logger, setup_logging
from compliance_core.record_mapper import periods_from_address_history

load_dotenv()
setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(title="Childminder Compliance Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==========================================
# REQUEST / RESPONSE SHAPES
# ==========================================
class CoverageRequest(BaseModel):
    periods: List[ResidencePeriod] = []
    window_years: Optional[int] = None
    as_of: Optional[CalendarDay] = None
    gap_explanation: Optional[str] = None


class LegacyCoverageRequest(BaseModel):
    home_move_in: Optional[str] = None
    address_history: List[Dict[str, Any]] = []
    window_years: Optional[int] = None
    as_of: Optional[CalendarDay] = None
    gap_explanation: Optional[str] = None


class CoverageResponse(BaseModel):
    coverage: CoverageResult
    blockers: List[str] = Field(default_factory=list)
    gap_descriptions: List[str] = Field(default_factory=list)
    can_submit: bool = False


class ClassifyRequest(BaseModel):
    record: VettingRecord
    now: Optional[CalendarDay] = None


class SummaryRequest(BaseModel):
    records: List[VettingRecord] = []
    now: Optional[CalendarDay] = None


class SuggestExpiryRequest(BaseModel):
    issued_on: CalendarDay


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    logger.warning("Rejected input", path=request.url.path, error_type=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=422, content={"error": "invalid_input", "detail": str(exc)})


def _evaluate_coverage(
    periods: List[ResidencePeriod],
    window_years: Optional[int],
    as_of: Optional[date],
    gap_explanation: Optional[str],
) -> CoverageResponse:
    # The core never reads the clock; "today" is decided here at the edge
    coverage = compute_coverage(
        periods,
        settings.ADDRESS_HISTORY_WINDOW_YEARS if window_years is None else window_years,
        as_of or date.today(),
        tolerance=settings.COVERAGE_TOLERANCE,
    )
    blockers = evaluate_submission_blockers(coverage, gap_explanation)

    logger.info(
        "Coverage evaluated",
        event_name="coverage_evaluated",
        periods=len(periods),
        gaps=len(coverage.gaps),
        covered_days=coverage.covered_days,
        required_days=coverage.required_days,
        is_fully_covered=coverage.is_fully_covered,
    )

    return CoverageResponse(
        coverage=coverage,
        blockers=blockers,
        gap_descriptions=describe_gaps(coverage),
        can_submit=not blockers,
    )


@app.post("/api/address-history/coverage", response_model=CoverageResponse)
def address_history_coverage(request: CoverageRequest):
    return _evaluate_coverage(request.periods, request.window_years, request.as_of, request.gap_explanation)


@app.post("/api/address-history/coverage/legacy", response_model=CoverageResponse)
def legacy_address_history_coverage(request: LegacyCoverageRequest):
    periods = periods_from_address_history(request.home_move_in, request.address_history)
    return _evaluate_coverage(periods, request.window_years, request.as_of, request.gap_explanation)


@app.post("/api/vetting/classify", response_model=ComplianceVerdict)
def classify_vetting(request: ClassifyRequest):
    verdict = classify(request.record, request.now or date.today(), settings.compliance_policy())

    logger.info(
        "Vetting classified",
        event_name="vetting_classified",
        state=verdict.state,
        risk_tier=verdict.risk_tier,
        next_review_date=verdict.next_review_date.isoformat() if verdict.next_review_date else None,
    )
    if verdict.data_quality_warnings:
        logger.warning("Vetting record has data quality issues", warnings=verdict.data_quality_warnings)

    return verdict


@app.post("/api/vetting/summary", response_model=ComplianceSummary)
def vetting_summary(request: SummaryRequest):
    summary = summarize(request.records, request.now or date.today(), settings.compliance_policy())

    logger.info(
        "Vetting summary built",
        event_name="vetting_summary_built",
        total=summary.total,
        by_risk_tier=summary.by_risk_tier,
        completion_rate=summary.completion_rate,
    )
    return summary


@app.post("/api/vetting/suggest-expiry")
def suggest_expiry(request: SuggestExpiryRequest):
    policy = settings.compliance_policy()
    return {
        "issued_on": request.issued_on,
        "suggested_expires_on": suggest_expiry_date(request.issued_on, policy),
        "certificate_validity_years": policy.certificate_validity_years,
    }


@app.get("/api/policy")
def current_policy():
    return {
        "policy": settings.compliance_policy().model_dump(),
        "address_history_window_years": settings.ADDRESS_HISTORY_WINDOW_YEARS,
        "coverage_tolerance": settings.COVERAGE_TOLERANCE,
    }
