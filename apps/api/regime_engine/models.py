"""
Regime Engine — Data Models

Comparing Brazilian tax regimes requires understanding:
1. Activity (Commerce, Industry, Services, Hospital)
2. Revenue (RBT12 and the month being simulated)
3. Payroll (drives Factor R for intellectual services)
4. Municipality (ISS rate, services only)
5. Client profile (B2B buyers value tax credits)
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


# ─────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────

class Activity(str, Enum):
    """Business activity category for tax treatment routing."""
    COMMERCE = "commerce"
    INDUSTRY = "industry"
    GENERAL_SERVICE = "general_service"
    INTELLECTUAL_SERVICE = "intellectual_service"
    HOSPITAL_SERVICE = "hospital_service"


class Schedule(str, Enum):
    """Simples Nacional annex (bracket table)."""
    I = "I"
    III = "III"
    V = "V"


class Regime(str, Enum):
    SIMPLES_NACIONAL = "Simples Nacional"
    LUCRO_PRESUMIDO = "Lucro Presumido"


SERVICE_ACTIVITIES = frozenset({
    Activity.GENERAL_SERVICE,
    Activity.INTELLECTUAL_SERVICE,
    Activity.HOSPITAL_SERVICE,
})


# ─────────────────────────────────────────────
# Input Models
# ─────────────────────────────────────────────

class TaxInputs(BaseModel):
    """Engine inputs. Non-negativity is the caller's responsibility."""
    rbt12: float = Field(..., description="Trailing-12-month gross revenue (RBT12)")
    monthly_billing: float = Field(..., description="Revenue for the simulated month")
    monthly_payroll: float = Field(
        default=0.0,
        description="Monthly labour cost: salaries + pro-labore + employer charges"
    )
    activity: Activity = Field(default=Activity.INTELLECTUAL_SERVICE)
    is_b2b: bool = Field(default=False, description="Client profile; affects only the recommendation text")
    iss_rate: float = Field(default=0.05, description="Municipal ISS rate as a fraction (0.02 - 0.05)")


class ActivityLine(BaseModel):
    """One business line contributing a share of total revenue."""
    activity: Activity
    percentage: float = Field(default=100.0, description="Share of revenue, 0-100")
    label: str = Field(default="")
    cnae: Optional[str] = Field(default=None)


# ─────────────────────────────────────────────
# Output Models
# ─────────────────────────────────────────────

class TaxLayer(BaseModel):
    """A single itemised tax (e.g., IRPJ, CSLL, PIS, COFINS, ISS)."""
    name: str = Field(..., description="Tax name: IRPJ, CSLL, PIS, COFINS, ISS")
    rate: float = Field(default=0.0, description="Rate applied to the base, in %")
    amount: float = Field(default=0.0, description="Tax amount in BRL")
    description: str = Field(default="", description="Human-readable explanation")
    applies_to: str = Field(
        default="gross_revenue",
        description="What base: gross_revenue or presumed_profit"
    )


class SimplesResult(BaseModel):
    """Simples Nacional (unified regime) estimate."""
    eligible: bool = Field(default=True, description="RBT12 within the R$ 4.8M ceiling")
    schedule: Schedule = Field(default=Schedule.III)
    effective_rate: float = Field(default=0.0, description="Effective rate in %")
    nominal_rate: float = Field(default=0.0, description="Bracket nominal rate in %")
    deduction: float = Field(default=0.0, description="Bracket fixed deduction (parcela a deduzir)")
    monthly_tax: float = Field(default=0.0, description="Estimated DAS for the month")
    factor_r: float = Field(default=0.0, description="Annualised payroll / RBT12, in %")


class PresumedProfitResult(BaseModel):
    """Lucro Presumido estimate with the five itemised components."""
    eligible: bool = Field(default=True, description="RBT12 within the R$ 78M ceiling")
    irpj: float = 0.0
    csll: float = 0.0
    pis: float = 0.0
    cofins: float = 0.0
    iss: float = 0.0
    total: float = 0.0
    effective_rate: float = Field(default=0.0, description="Total / monthly billing, in %")
    income_presumption_rate: float = Field(default=0.0, description="IRPJ presumption, in %")
    social_presumption_rate: float = Field(default=0.0, description="CSLL presumption, in %")
    surcharge_applied: bool = Field(
        default=False,
        description="True when the +10% presumption surcharge (RBT12 > R$ 5M) was applied"
    )
    layers: List[TaxLayer] = Field(default_factory=list)


class TransitionResult(BaseModel):
    """CBS/IBS levy for the current phase of the tax-reform transition."""
    cbs_ibs: float = 0.0
    reduction_pct: float = Field(default=0.0, description="Reserved for later phases")
    phase: str = Field(default="test phase")


class Recommendation(BaseModel):
    regime: Regime
    label: str
    hybrid_review: bool = Field(
        default=False,
        description="True when Simples wins for a B2B client; buyers cannot take credits"
    )


class TaxComparisonResult(BaseModel):
    """Complete comparison of both regimes for one set of inputs."""
    simples: SimplesResult
    presumed_profit: PresumedProfitResult
    transition: TransitionResult
    recommendation: Recommendation

    warnings: List[str] = Field(default_factory=list)
    summary: str = Field(default="")


class LineComparison(BaseModel):
    """Per-activity-line engine output inside a weighted comparison."""
    line: ActivityLine
    weight: float = Field(..., description="percentage / 100")
    result: TaxComparisonResult


class WeightedComparisonResult(BaseModel):
    """Blended comparison across activity lines (sums of absolutes, rates recomputed)."""
    lines: List[LineComparison] = Field(default_factory=list)

    monthly_billing: float = Field(default=0.0, description="Sum of the scaled line billings")

    simples_eligible: bool = True
    simples_monthly_tax: float = 0.0
    simples_effective_rate: float = 0.0

    presumed_eligible: bool = True
    irpj: float = 0.0
    csll: float = 0.0
    pis: float = 0.0
    cofins: float = 0.0
    iss: float = 0.0
    presumed_total: float = 0.0
    presumed_effective_rate: float = 0.0
    surcharge_applied: bool = False

    cbs_ibs: float = 0.0

    recommendation: Recommendation
    warnings: List[str] = Field(default_factory=list)
