import os
import math
import logging
import traceback
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from regime_engine import (
    Activity,
    ActivityLine,
    BillingRecord,
    PayrollRecord,
    FinancialSummary,
    TaxComparisonResult,
    WeightedComparisonResult,
    TaxInputs,
    compute_weighted_comparison,
    map_cnae_to_activity,
    check_simples_eligibility,
    summarize_records,
)
from regime_engine.activity import SimplesEligibility, cnae_prefix, normalize_cnae
from regime_engine.core import get_engine

load_dotenv()

logger = logging.getLogger("regime_api")

ISS_RATE_MIN = 0.02
ISS_RATE_MAX = 0.05


def resolve_log_level(name: str) -> int:
    """Numeric level for a LOG_LEVEL name; unknown names fall back to INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def resolve_iss_rate(raw: str) -> float:
    """DEFAULT_ISS_RATE clamped to the municipal range accepted by the request models."""
    try:
        rate = float(raw)
    except ValueError:
        rate = math.nan
    if math.isnan(rate):
        logger.warning("DEFAULT_ISS_RATE %r is not a number, using %s", raw, ISS_RATE_MAX)
        return ISS_RATE_MAX
    clamped = min(max(rate, ISS_RATE_MIN), ISS_RATE_MAX)
    if clamped != rate:
        logger.warning("DEFAULT_ISS_RATE %s outside [0.02, 0.05], using %s", rate, clamped)
    return clamped


CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logging.basicConfig(
    level=resolve_log_level(LOG_LEVEL),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
if resolve_log_level(LOG_LEVEL) == logging.INFO and LOG_LEVEL.strip().upper() != "INFO":
    logger.warning("Unknown LOG_LEVEL %r, using INFO", LOG_LEVEL)

DEFAULT_ISS_RATE = resolve_iss_rate(os.getenv("DEFAULT_ISS_RATE", "0.05"))

API_VERSION = "1.0.0"

app = FastAPI(title="Regime Comparison API", version=API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------------
# Models
# ----------------------------
class TaxComparisonRequest(BaseModel):
    rbt12: float = Field(..., ge=0.0)
    monthly_billing: float = Field(..., ge=0.0)
    monthly_payroll: float = Field(default=0.0, ge=0.0)
    activity: Activity = Field(default=Activity.INTELLECTUAL_SERVICE)
    is_b2b: bool = Field(default=False)
    iss_rate: Optional[float] = Field(default=None, ge=0.02, le=0.05)


class WeightedComparisonRequest(BaseModel):
    rbt12: float = Field(..., ge=0.0)
    monthly_billing: float = Field(..., ge=0.0)
    monthly_payroll: float = Field(default=0.0, ge=0.0)
    lines: List[ActivityLine] = Field(default_factory=list)
    fallback_activity: Activity = Field(default=Activity.INTELLECTUAL_SERVICE)
    is_b2b: bool = Field(default=False)
    iss_rate: Optional[float] = Field(default=None, ge=0.02, le=0.05)


class RecordsSummaryRequest(BaseModel):
    billing: List[BillingRecord] = Field(default_factory=list)
    payroll: List[PayrollRecord] = Field(default_factory=list)


class CnaeActivityOut(BaseModel):
    cnae: str
    prefix: str
    activity: Activity


def _iss(rate: Optional[float]) -> float:
    return DEFAULT_ISS_RATE if rate is None else rate


def _failure(message: str, e: Exception) -> HTTPException:
    logger.exception(message)
    return HTTPException(
        status_code=500,
        detail={
            "error": message,
            "message": str(e),
            "trace": traceback.format_exc(),
        },
    )


# ----------------------------
# Routes
# ----------------------------
@app.get("/api/v1/health")
def health():
    return {"ok": True, "version": API_VERSION, "regimes": get_engine().supported_regimes()}


@app.post("/api/v1/tax/compare", response_model=TaxComparisonResult)
def tax_compare(body: TaxComparisonRequest):
    """Compare Simples Nacional and Lucro Presumido for a single activity."""
    try:
        inputs = TaxInputs(
            rbt12=body.rbt12,
            monthly_billing=body.monthly_billing,
            monthly_payroll=body.monthly_payroll,
            activity=body.activity,
            is_b2b=body.is_b2b,
            iss_rate=_iss(body.iss_rate),
        )
        return get_engine().compare(inputs)
    except HTTPException:
        raise
    except Exception as e:
        raise _failure("Tax comparison failed", e)


@app.post("/api/v1/tax/compare/weighted", response_model=WeightedComparisonResult)
def tax_compare_weighted(body: WeightedComparisonRequest):
    """Split billing and payroll across activity lines and blend the results."""
    try:
        return compute_weighted_comparison(
            rbt12=body.rbt12,
            monthly_billing=body.monthly_billing,
            monthly_payroll=body.monthly_payroll,
            lines=body.lines,
            is_b2b=body.is_b2b,
            iss_rate=_iss(body.iss_rate),
            fallback_activity=body.fallback_activity,
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _failure("Weighted tax comparison failed", e)


@app.post("/api/v1/records/summary", response_model=FinancialSummary)
def records_summary(body: RecordsSummaryRequest):
    """Derive RBT12, monthly averages and Factor R from extracted records."""
    if not body.billing and not body.payroll:
        raise HTTPException(status_code=400, detail="billing or payroll records required")
    try:
        return summarize_records(body.billing, body.payroll)
    except Exception as e:
        raise _failure("Record summary failed", e)


@app.get("/api/v1/activity/cnae/{code}", response_model=CnaeActivityOut)
def activity_for_cnae(code: str):
    prefix = cnae_prefix(code)
    if len(prefix) < 2:
        raise HTTPException(status_code=400, detail="CNAE code must contain at least two digits")
    return CnaeActivityOut(cnae=normalize_cnae(code), prefix=prefix, activity=map_cnae_to_activity(code))


@app.get("/api/v1/activity/legal-nature/{code}", response_model=SimplesEligibility)
def legal_nature_eligibility(code: str):
    return check_simples_eligibility(code)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8002")),
    )
