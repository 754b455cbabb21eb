"""
Regime Engine — Simples Nacional Strategy

LC 123/2006 unified regime (DAS) modeling

Annex selection:
- Commerce: Anexo I
- Intellectual services: Anexo III when Factor R >= 28%, else Anexo V
- Everything else: Anexo III

Effective rate:
- (RBT12 x nominal rate - deduction) / RBT12, on the first bracket whose
  ceiling covers RBT12 (top bracket when RBT12 exceeds every ceiling)
- Eligibility ceiling R$ 4.8M; above it the figure is still computed
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from regime_engine.core import AbstractRegimeStrategy
from regime_engine.models import Activity, Schedule, SimplesResult, TaxInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bracket:
    ceiling: float
    rate: float
    deduction: float


# ─────────────────────────────────────────────
# Annex Tables (LC 155/2016)
# ─────────────────────────────────────────────
SIMPLES_TABLES: Dict[Schedule, Tuple[Bracket, ...]] = {
    Schedule.I: (
        Bracket(180000, 0.04, 0),
        Bracket(360000, 0.073, 5940),
        Bracket(720000, 0.095, 13860),
        Bracket(1800000, 0.107, 22500),
        Bracket(3600000, 0.143, 87300),
        Bracket(4800000, 0.19, 378000),
    ),
    Schedule.III: (
        Bracket(180000, 0.06, 0),
        Bracket(360000, 0.112, 9360),
        Bracket(720000, 0.135, 17640),
        Bracket(1800000, 0.16, 35640),
        Bracket(3600000, 0.21, 125640),
        Bracket(4800000, 0.33, 648000),
    ),
    Schedule.V: (
        Bracket(180000, 0.155, 0),
        Bracket(360000, 0.18, 4500),
        Bracket(720000, 0.195, 9900),
        Bracket(1800000, 0.205, 17100),
        Bracket(3600000, 0.23, 62100),
        Bracket(4800000, 0.305, 540000),
    ),
}

SIMPLES_CEILING = 4_800_000
FATOR_R_THRESHOLD = 0.28


def fator_r(rbt12: float, monthly_payroll: float) -> float:
    """Annualised payroll over RBT12, as a fraction. Zero when there is no revenue."""
    return (monthly_payroll * 12) / rbt12 if rbt12 > 0 else 0.0


def select_schedule(activity: Activity, factor: float) -> Schedule:
    if activity == Activity.COMMERCE:
        return Schedule.I
    if activity == Activity.INTELLECTUAL_SERVICE:
        # 28% is inclusive
        return Schedule.III if factor >= FATOR_R_THRESHOLD else Schedule.V
    return Schedule.III


def find_bracket(schedule: Schedule, rbt12: float) -> Bracket:
    table = SIMPLES_TABLES[schedule]
    for bracket in table:
        if rbt12 <= bracket.ceiling:
            return bracket
    return table[-1]


def effective_rate(bracket: Bracket, rbt12: float) -> float:
    if rbt12 > 0:
        return ((rbt12 * bracket.rate) - bracket.deduction) / rbt12
    return bracket.rate


class SimplesNacionalStrategy(AbstractRegimeStrategy):
    """Simples Nacional strategy: Factor R + annex bracket lookup."""

    REGIME_CODE = "SN"
    REGIME_NAME = "Simples Nacional"

    def calculate(self, inputs: TaxInputs) -> SimplesResult:
        factor = fator_r(inputs.rbt12, inputs.monthly_payroll)
        schedule = select_schedule(inputs.activity, factor)
        bracket = find_bracket(schedule, inputs.rbt12)
        rate = effective_rate(bracket, inputs.rbt12)

        logger.debug(
            "Simples: factor_r=%.4f schedule=%s bracket_ceiling=%s effective=%.6f",
            factor, schedule.value, bracket.ceiling, rate,
        )

        return SimplesResult(
            eligible=inputs.rbt12 <= SIMPLES_CEILING,
            schedule=schedule,
            effective_rate=rate * 100,
            nominal_rate=bracket.rate * 100,
            deduction=bracket.deduction,
            monthly_tax=inputs.monthly_billing * rate,
            factor_r=factor * 100,
        )
