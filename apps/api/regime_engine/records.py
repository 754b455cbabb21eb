"""
Regime Engine — Billing & Payroll Summaries

Turns extracted billing (faturamento) and payroll (folha) records into the
engine's inputs: RBT12, a representative monthly billing and payroll, and the
accumulated Factor R. Payroll is uplifted by the employer FGTS deposit (8%).
"""

from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from pydantic import BaseModel, Field

FGTS_RATE = 0.08

MONTH_PREFIXES = ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez")


class BillingRecord(BaseModel):
    month: str = Field(..., description="Month name or number, e.g. 'Janeiro', 'jan', '01'")
    year: int
    services: float = Field(default=0.0)
    total: float = Field(default=0.0)


class PayrollRecord(BaseModel):
    type: str = Field(default="", description="Payroll item, e.g. 'Salário', 'Pró-labore'")
    competence: str = Field(..., description="MM/YYYY")
    value: float = Field(default=0.0)


class MonthlyStats(BaseModel):
    avg: float = 0.0
    latest: float = 0.0
    median: float = 0.0
    months: int = 0


class FinancialSummary(BaseModel):
    total_billing: float = 0.0
    total_payroll: float = Field(default=0.0, description="Payroll including FGTS")
    rbt12: float = 0.0
    monthly_billing: float = 0.0
    monthly_payroll: float = 0.0
    factor_r: float = Field(default=0.0, description="Accumulated payroll / billing, in %")
    billing_stats: MonthlyStats = Field(default_factory=MonthlyStats)
    payroll_stats: MonthlyStats = Field(default_factory=MonthlyStats)


def month_number(label: str) -> Optional[int]:
    text = str(label).strip().lower()
    if text.isdigit():
        n = int(text)
        return n if 1 <= n <= 12 else None
    for idx, prefix in enumerate(MONTH_PREFIXES, start=1):
        if prefix in text:
            return idx
    return None


def parse_competence(competence: str) -> Optional[Tuple[int, int]]:
    """'03/2025' -> (2025, 3). None when the competence is malformed."""
    parts = competence.strip().split("/")
    if len(parts) != 2:
        return None
    try:
        month, year = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not 1 <= month <= 12:
        return None
    return year, month


def _monthly_series(rows: List[Tuple[int, int, float]]) -> pd.Series:
    if not rows:
        return pd.Series(dtype=float)
    frame = pd.DataFrame(rows, columns=["year", "month", "amount"])
    return frame.groupby(["year", "month"])["amount"].sum().sort_index()


def _stats(series: pd.Series) -> MonthlyStats:
    values = series[series > 0].to_numpy(dtype=float)
    if values.size == 0:
        return MonthlyStats()
    return MonthlyStats(
        avg=float(np.mean(values)),
        latest=float(values[-1]),
        median=float(np.median(values)),
        months=int(values.size),
    )


def summarize_records(
    billing: List[BillingRecord],
    payroll: List[PayrollRecord],
) -> FinancialSummary:
    """
    Records whose month cannot be resolved still count toward the totals but
    are left out of the month-by-month statistics.
    """
    total_billing = float(sum(r.total for r in billing))
    total_payroll = float(sum(r.value for r in payroll)) * (1 + FGTS_RATE)

    billing_rows = []
    for r in billing:
        month = month_number(r.month)
        if month is not None:
            billing_rows.append((r.year, month, r.total))

    payroll_rows = []
    for r in payroll:
        parsed = parse_competence(r.competence)
        if parsed is not None:
            payroll_rows.append((parsed[0], parsed[1], r.value))

    return FinancialSummary(
        total_billing=total_billing,
        total_payroll=total_payroll,
        rbt12=total_billing,
        monthly_billing=total_billing / 12,
        monthly_payroll=total_payroll / 12,
        factor_r=(total_payroll / total_billing) * 100 if total_billing > 0 else 0.0,
        billing_stats=_stats(_monthly_series(billing_rows)),
        payroll_stats=_stats(_monthly_series(payroll_rows)),
    )
