"""
Regime Engine — Core Dispatcher

TaxEngine is the single entry point. It:
1. Receives TaxInputs (revenue, payroll, activity, client profile, ISS rate)
2. Runs every regime strategy (Simples Nacional, Lucro Presumido, CBS/IBS transition)
3. Compares the regimes and builds the recommendation
"""

import logging
from typing import List, Dict, Any, Optional
from abc import ABC, abstractmethod

from pydantic import BaseModel

from regime_engine.models import (
    Activity,
    TaxInputs,
    TaxComparisonResult,
    SimplesResult,
    PresumedProfitResult,
    TransitionResult,
    Recommendation,
    Regime,
)

logger = logging.getLogger(__name__)

HYBRID_QUALIFIER = " (Considere Regime Híbrido para B2B)"


# ─────────────────────────────────────────────
# Abstract Strategy
# ─────────────────────────────────────────────

class AbstractRegimeStrategy(ABC):
    """Base class for regime-specific tax logic."""

    REGIME_CODE: str = ""
    REGIME_NAME: str = ""

    @abstractmethod
    def calculate(self, inputs: TaxInputs) -> BaseModel:
        """
        Calculate the monthly burden of this regime for the given inputs.
        Must never raise for non-negative inputs: ineligibility is reported
        as a flag alongside a fully computed number.
        """
        pass

    def describe(self) -> Dict[str, Any]:
        return {"code": self.REGIME_CODE, "name": self.REGIME_NAME}


# ─────────────────────────────────────────────
# Recommendation
# ─────────────────────────────────────────────

def recommend(simples_tax: float, presumed_total: float, is_b2b: bool) -> Recommendation:
    """
    Pick the cheaper regime. Ties go to Simples Nacional.
    B2B buyers cannot take input credits from a Simples supplier, so a Simples
    win for a B2B client is flagged for a hybrid-regime review.
    """
    if presumed_total < simples_tax:
        return Recommendation(regime=Regime.LUCRO_PRESUMIDO, label=Regime.LUCRO_PRESUMIDO.value)

    label = Regime.SIMPLES_NACIONAL.value
    if is_b2b:
        return Recommendation(
            regime=Regime.SIMPLES_NACIONAL,
            label=label + HYBRID_QUALIFIER,
            hybrid_review=True,
        )
    return Recommendation(regime=Regime.SIMPLES_NACIONAL, label=label)


# ─────────────────────────────────────────────
# Engine (Dispatcher)
# ─────────────────────────────────────────────

class TaxEngine:
    """
    Main entry point for regime comparisons.
    Stateless: a single instance may be shared across threads.
    """

    def __init__(self):
        # Lazy-import strategies to avoid circular imports
        from regime_engine.strategies.simples import SimplesNacionalStrategy
        from regime_engine.strategies.presumido import LucroPresumidoStrategy
        from regime_engine.strategies.reforma import TransitionStrategy

        self.simples = SimplesNacionalStrategy()
        self.presumido = LucroPresumidoStrategy()
        self.reforma = TransitionStrategy()

    def compare(self, inputs: TaxInputs) -> TaxComparisonResult:
        """Run both regimes plus the transition levy and recommend the cheaper regime."""
        logger.debug(
            "Comparing regimes: rbt12=%s billing=%s payroll=%s activity=%s",
            inputs.rbt12, inputs.monthly_billing, inputs.monthly_payroll, inputs.activity.value,
        )

        simples: SimplesResult = self.simples.calculate(inputs)
        presumed: PresumedProfitResult = self.presumido.calculate(inputs)
        transition: TransitionResult = self.reforma.calculate(inputs)

        recommendation = recommend(simples.monthly_tax, presumed.total, inputs.is_b2b)

        warnings = self._collect_warnings(inputs, simples, presumed)
        for w in warnings:
            logger.info("Regime comparison warning: %s", w)

        return TaxComparisonResult(
            simples=simples,
            presumed_profit=presumed,
            transition=transition,
            recommendation=recommendation,
            warnings=warnings,
            summary=self._generate_summary(simples, presumed, recommendation),
        )

    def supported_regimes(self) -> List[Dict[str, Any]]:
        return [s.describe() for s in (self.simples, self.presumido, self.reforma)]

    # ── Helpers ──

    def _collect_warnings(
        self,
        inputs: TaxInputs,
        simples: SimplesResult,
        presumed: PresumedProfitResult,
    ) -> List[str]:
        warnings: List[str] = []
        if not simples.eligible:
            warnings.append(
                f"RBT12 R$ {inputs.rbt12:,.2f} exceeds the Simples Nacional ceiling; "
                "the Simples figure is shown for reference only."
            )
        if not presumed.eligible:
            warnings.append(
                f"RBT12 R$ {inputs.rbt12:,.2f} exceeds the Lucro Presumido ceiling; "
                "the Lucro Presumido figure is shown for reference only."
            )
        if presumed.surcharge_applied:
            warnings.append("Presumption rates increased by 10% (RBT12 above R$ 5M).")
        if inputs.monthly_billing == 0:
            warnings.append("Monthly billing is zero; effective rates fall back to defaults.")
        return warnings

    def _generate_summary(
        self,
        simples: SimplesResult,
        presumed: PresumedProfitResult,
        recommendation: Recommendation,
    ) -> str:
        parts = [
            f"Simples Nacional (Anexo {simples.schedule.value}): R$ {simples.monthly_tax:,.2f}"
            f" ({simples.effective_rate:.2f}%)",
            f"| Lucro Presumido: R$ {presumed.total:,.2f} ({presumed.effective_rate:.2f}%)",
            f"| Recommended: {recommendation.label}",
        ]
        return " ".join(parts)


_ENGINE: Optional[TaxEngine] = None


def get_engine() -> TaxEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = TaxEngine()
    return _ENGINE


def compute_tax_comparison(
    rbt12: float,
    monthly_billing: float,
    monthly_payroll: float,
    activity: Activity,
    is_b2b: bool = False,
    iss_rate: float = 0.05,
) -> TaxComparisonResult:
    """Functional entry point over the shared, stateless engine."""
    inputs = TaxInputs(
        rbt12=rbt12,
        monthly_billing=monthly_billing,
        monthly_payroll=monthly_payroll,
        activity=activity,
        is_b2b=is_b2b,
        iss_rate=iss_rate,
    )
    return get_engine().compare(inputs)
