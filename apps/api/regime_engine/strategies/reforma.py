"""
Regime Engine — Tax Reform Transition (EC 132/2023)

2026 is the CBS/IBS test year: a flat 1% on revenue (0.9% CBS + 0.1% IBS).
Rate reductions of later phases are not modelled yet.
"""

from regime_engine.core import AbstractRegimeStrategy
from regime_engine.models import TaxInputs, TransitionResult

CBS_IBS_TEST_RATE = 0.01
TEST_PHASE = "test phase"


class TransitionStrategy(AbstractRegimeStrategy):
    REGIME_CODE = "CBS_IBS"
    REGIME_NAME = "CBS/IBS Transition"

    def calculate(self, inputs: TaxInputs) -> TransitionResult:
        return TransitionResult(
            cbs_ibs=inputs.monthly_billing * CBS_IBS_TEST_RATE,
            reduction_pct=0.0,
            phase=TEST_PHASE,
        )
