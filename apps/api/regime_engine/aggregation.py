"""
Regime Engine — Weighted Multi-Activity Comparison

A company with several CNAEs is simulated one activity line at a time: each
line gets its share of billing and payroll, runs through the unchanged engine
with the company-wide RBT12, and the absolute amounts are summed.

Presumption rates and annex brackets are not linear in revenue, so blended
effective rates are always recomputed from the summed amounts and never
averaged across lines.
"""

import logging
import math
from typing import List, Optional

from regime_engine.core import get_engine, recommend
from regime_engine.models import (
    Activity,
    ActivityLine,
    LineComparison,
    TaxInputs,
    WeightedComparisonResult,
)

logger = logging.getLogger(__name__)


def _rate(amount: float, base: float) -> float:
    return (amount / base) * 100 if base > 0 else 0.0


def active_lines(
    lines: Optional[List[ActivityLine]],
    fallback_activity: Activity = Activity.INTELLECTUAL_SERVICE,
) -> List[ActivityLine]:
    """Lines with a positive share; a single 100% fallback line when none remain."""
    active = [l for l in (lines or []) if l.percentage > 0]
    if not active:
        return [ActivityLine(activity=fallback_activity, percentage=100.0, label="Geral")]
    return active


def compute_weighted_comparison(
    rbt12: float,
    monthly_billing: float,
    monthly_payroll: float,
    lines: Optional[List[ActivityLine]],
    is_b2b: bool = False,
    iss_rate: float = 0.05,
    fallback_activity: Activity = Activity.INTELLECTUAL_SERVICE,
) -> WeightedComparisonResult:
    engine = get_engine()
    selected = active_lines(lines, fallback_activity)

    per_line: List[LineComparison] = []
    for line in selected:
        weight = line.percentage / 100
        result = engine.compare(TaxInputs(
            rbt12=rbt12,
            monthly_billing=monthly_billing * weight,
            monthly_payroll=monthly_payroll * weight,
            activity=line.activity,
            is_b2b=is_b2b,
            iss_rate=iss_rate,
        ))
        per_line.append(LineComparison(line=line, weight=weight, result=result))

    billing = sum(monthly_billing * lc.weight for lc in per_line)
    simples_tax = sum(lc.result.simples.monthly_tax for lc in per_line)
    irpj = sum(lc.result.presumed_profit.irpj for lc in per_line)
    csll = sum(lc.result.presumed_profit.csll for lc in per_line)
    pis = sum(lc.result.presumed_profit.pis for lc in per_line)
    cofins = sum(lc.result.presumed_profit.cofins for lc in per_line)
    iss = sum(lc.result.presumed_profit.iss for lc in per_line)
    presumed_total = sum(lc.result.presumed_profit.total for lc in per_line)
    cbs_ibs = sum(lc.result.transition.cbs_ibs for lc in per_line)

    warnings: List[str] = []
    share = sum(l.percentage for l in selected)
    if not math.isclose(share, 100.0, abs_tol=1e-6):
        warnings.append(f"Activity shares add up to {share:.2f}%, not 100%.")
        logger.warning("Weighted comparison with activity shares summing to %.2f%%", share)

    # RBT12 is shared by every line, so eligibility is the same for all of them
    first = per_line[0].result
    return WeightedComparisonResult(
        lines=per_line,
        monthly_billing=billing,
        simples_eligible=first.simples.eligible,
        simples_monthly_tax=simples_tax,
        simples_effective_rate=_rate(simples_tax, billing),
        presumed_eligible=first.presumed_profit.eligible,
        irpj=irpj,
        csll=csll,
        pis=pis,
        cofins=cofins,
        iss=iss,
        presumed_total=presumed_total,
        presumed_effective_rate=_rate(presumed_total, billing),
        surcharge_applied=first.presumed_profit.surcharge_applied,
        cbs_ibs=cbs_ibs,
        recommendation=recommend(simples_tax, presumed_total, is_b2b),
        warnings=warnings,
    )
