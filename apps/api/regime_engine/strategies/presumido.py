"""
Regime Engine — Lucro Presumido Strategy

Presumed-profit regime, monthly view

Income taxes on a presumed margin of gross revenue:
- IRPJ: 15% on the presumed base + 10% additional above R$ 20k/month
- CSLL: 9% on the presumed base
- Presumption: 8%/12% commerce, industry and hospital; 32%/32% other services
- LC 224/2025: presumption x 1.10 when RBT12 exceeds R$ 5M

Turnover taxes (cumulative regime):
- PIS 0.65%, COFINS 3%
- ISS at the municipal rate, services only
"""

import logging
from typing import Dict, List, Tuple

from regime_engine.core import AbstractRegimeStrategy
from regime_engine.models import (
    Activity, SERVICE_ACTIVITIES, PresumedProfitResult, TaxInputs, TaxLayer,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# Presumption Rates (IRPJ base, CSLL base)
# ─────────────────────────────────────────────
PRESUMPTION_RATES: Dict[Activity, Tuple[float, float]] = {
    Activity.COMMERCE: (0.08, 0.12),
    Activity.INDUSTRY: (0.08, 0.12),
    Activity.HOSPITAL_SERVICE: (0.08, 0.12),
    Activity.GENERAL_SERVICE: (0.32, 0.32),
    Activity.INTELLECTUAL_SERVICE: (0.32, 0.32),
}

SURCHARGE_THRESHOLD = 5_000_000
SURCHARGE_MULTIPLIER = 1.10

IRPJ_RATE = 0.15
IRPJ_ADDITIONAL_RATE = 0.10
IRPJ_ADDITIONAL_THRESHOLD = 20000  # monthly
CSLL_RATE = 0.09
PIS_RATE = 0.0065
COFINS_RATE = 0.03

PRESUMIDO_CEILING = 78_000_000


def presumption_rates(activity: Activity, rbt12: float) -> Tuple[float, float, bool]:
    """(IRPJ presumption, CSLL presumption, surcharge applied)."""
    income, social = PRESUMPTION_RATES[activity]
    surcharge = rbt12 > SURCHARGE_THRESHOLD
    if surcharge:
        income = income * SURCHARGE_MULTIPLIER
        social = social * SURCHARGE_MULTIPLIER
    return income, social, surcharge


def irpj_due(base: float) -> float:
    additional = (base - IRPJ_ADDITIONAL_THRESHOLD) * IRPJ_ADDITIONAL_RATE if base > IRPJ_ADDITIONAL_THRESHOLD else 0.0
    return base * IRPJ_RATE + additional


class LucroPresumidoStrategy(AbstractRegimeStrategy):
    """Lucro Presumido strategy: presumed-margin income taxes + turnover taxes."""

    REGIME_CODE = "LP"
    REGIME_NAME = "Lucro Presumido"

    def calculate(self, inputs: TaxInputs) -> PresumedProfitResult:
        billing = inputs.monthly_billing
        income_pres, social_pres, surcharge = presumption_rates(inputs.activity, inputs.rbt12)

        irpj_base = billing * income_pres
        irpj = irpj_due(irpj_base)
        csll = billing * social_pres * CSLL_RATE
        pis = billing * PIS_RATE
        cofins = billing * COFINS_RATE
        iss = billing * inputs.iss_rate if inputs.activity in SERVICE_ACTIVITIES else 0.0

        total = irpj + csll + pis + cofins + iss
        # Zero billing has no meaningful rate
        eff_rate = (total / billing) * 100 if billing > 0 else 0.0

        if surcharge:
            logger.debug("Lucro Presumido: LC 224 surcharge applied (rbt12=%s)", inputs.rbt12)

        return PresumedProfitResult(
            eligible=inputs.rbt12 <= PRESUMIDO_CEILING,
            irpj=irpj,
            csll=csll,
            pis=pis,
            cofins=cofins,
            iss=iss,
            total=total,
            effective_rate=eff_rate,
            income_presumption_rate=income_pres * 100,
            social_presumption_rate=social_pres * 100,
            surcharge_applied=surcharge,
            layers=self._build_layers(inputs, irpj_base, irpj, social_pres, csll, pis, cofins, iss),
        )

    def _build_layers(
        self,
        inputs: TaxInputs,
        irpj_base: float,
        irpj: float,
        social_pres: float,
        csll: float,
        pis: float,
        cofins: float,
        iss: float,
    ) -> List[TaxLayer]:
        irpj_desc = f"15% on presumed profit (base: R$ {irpj_base:,.2f})"
        if irpj_base > IRPJ_ADDITIONAL_THRESHOLD:
            irpj_desc += " + 10% additional above R$ 20,000"

        layers = [
            TaxLayer(
                name="IRPJ",
                rate=IRPJ_RATE * 100,
                amount=irpj,
                description=irpj_desc,
                applies_to="presumed_profit",
            ),
            TaxLayer(
                name="CSLL",
                rate=CSLL_RATE * 100,
                amount=csll,
                description=f"9% on presumed profit ({social_pres * 100:.2f}% of revenue)",
                applies_to="presumed_profit",
            ),
            TaxLayer(
                name="PIS",
                rate=PIS_RATE * 100,
                amount=pis,
                description="PIS, cumulative regime",
            ),
            TaxLayer(
                name="COFINS",
                rate=COFINS_RATE * 100,
                amount=cofins,
                description="COFINS, cumulative regime",
            ),
        ]
        if inputs.activity in SERVICE_ACTIVITIES:
            layers.append(TaxLayer(
                name="ISS",
                rate=inputs.iss_rate * 100,
                amount=iss,
                description=f"Municipal service tax at {inputs.iss_rate * 100:.1f}%",
            ))
        return layers
