"""
Regime Engine — Simples Nacional vs Lucro Presumido

Architecture:
- TaxEngine: Dispatcher that runs every regime strategy and recommends one
- TaxInputs: RBT12, monthly billing and payroll, activity, client profile, ISS rate
- TaxComparisonResult: Both regimes, the CBS/IBS transition levy and the recommendation
- compute_weighted_comparison: Multi-activity split on top of the engine
"""

from regime_engine.models import (
    Activity,
    ActivityLine,
    Schedule,
    Regime,
    TaxInputs,
    TaxComparisonResult,
    SimplesResult,
    PresumedProfitResult,
    TransitionResult,
    Recommendation,
    WeightedComparisonResult,
)
from regime_engine.core import TaxEngine, compute_tax_comparison
from regime_engine.activity import (
    map_cnae_to_activity,
    check_simples_eligibility,
    activity_lines_from_cnaes,
)
from regime_engine.aggregation import compute_weighted_comparison
from regime_engine.records import (
    BillingRecord,
    PayrollRecord,
    FinancialSummary,
    summarize_records,
)

__all__ = [
    "TaxEngine",
    "compute_tax_comparison",
    "compute_weighted_comparison",
    "map_cnae_to_activity",
    "check_simples_eligibility",
    "activity_lines_from_cnaes",
    "summarize_records",
    "Activity",
    "ActivityLine",
    "Schedule",
    "Regime",
    "TaxInputs",
    "TaxComparisonResult",
    "SimplesResult",
    "PresumedProfitResult",
    "TransitionResult",
    "Recommendation",
    "WeightedComparisonResult",
    "BillingRecord",
    "PayrollRecord",
    "FinancialSummary",
]
