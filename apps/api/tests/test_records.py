import pytest

from regime_engine import BillingRecord, PayrollRecord, summarize_records
from regime_engine.records import month_number, parse_competence

MONTHS = ["Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
          "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro"]


def test_full_year_summary():
    billing = [BillingRecord(month=m, year=2024, total=100_000) for m in MONTHS]
    payroll = [PayrollRecord(type="Salário", competence=f"{i:02d}/2024", value=10_000) for i in range(1, 13)]

    s = summarize_records(billing, payroll)

    assert s.total_billing == pytest.approx(1_200_000)
    assert s.rbt12 == pytest.approx(1_200_000)
    assert s.monthly_billing == pytest.approx(100_000)
    # payroll uplifted by FGTS 8%
    assert s.total_payroll == pytest.approx(129_600)
    assert s.monthly_payroll == pytest.approx(10_800)
    assert s.factor_r == pytest.approx(10.8)

    assert s.billing_stats.months == 12
    assert s.billing_stats.avg == pytest.approx(100_000)
    assert s.billing_stats.median == pytest.approx(100_000)
    assert s.payroll_stats.months == 12
    assert s.payroll_stats.avg == pytest.approx(10_000)


def test_latest_follows_calendar_order():
    billing = [
        BillingRecord(month="mar", year=2024, total=300),
        BillingRecord(month="dez", year=2023, total=50),
        BillingRecord(month="jan", year=2024, total=100),
        BillingRecord(month="fev", year=2024, total=200),
    ]
    s = summarize_records(billing, [])

    assert s.billing_stats.latest == pytest.approx(300)
    assert s.billing_stats.median == pytest.approx(150)
    assert s.billing_stats.avg == pytest.approx(162.5)


def test_records_of_the_same_month_are_summed():
    billing = [
        BillingRecord(month="jan", year=2024, total=100),
        BillingRecord(month="Janeiro", year=2024, total=50),
    ]
    s = summarize_records(billing, [])

    assert s.billing_stats.months == 1
    assert s.billing_stats.avg == pytest.approx(150)


def test_malformed_competence_counts_in_totals_only():
    payroll = [
        PayrollRecord(competence="01/2024", value=1000),
        PayrollRecord(competence="13/2024", value=1000),
        PayrollRecord(competence="janeiro", value=1000),
    ]
    s = summarize_records([], payroll)

    assert s.total_payroll == pytest.approx(3240)
    assert s.payroll_stats.months == 1
    assert s.factor_r == 0.0


def test_zero_months_are_ignored_in_stats():
    billing = [
        BillingRecord(month="01", year=2024, total=0),
        BillingRecord(month="02", year=2024, total=500),
    ]
    s = summarize_records(billing, [])
    assert s.billing_stats.months == 1
    assert s.billing_stats.latest == pytest.approx(500)


def test_empty_records():
    s = summarize_records([], [])
    assert s.rbt12 == 0.0
    assert s.billing_stats.months == 0
    assert s.billing_stats.avg == 0.0


def test_month_number():
    assert month_number("Março") == 3
    assert month_number("03") == 3
    assert month_number("SET/24") == 9
    assert month_number("13") is None
    assert month_number("foo") is None


def test_parse_competence():
    assert parse_competence("03/2025") == (2025, 3)
    assert parse_competence(" 12/2024 ") == (2024, 12)
    assert parse_competence("2024-03") is None
    assert parse_competence("aa/2024") is None
