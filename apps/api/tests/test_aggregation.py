import pytest

from regime_engine import Activity, ActivityLine, Regime, compute_tax_comparison, compute_weighted_comparison


def _line(activity, pct, label=""):
    return ActivityLine(activity=activity, percentage=pct, label=label)


def test_same_activity_split_matches_undivided_call():
    # IRPJ base stays below R$ 20k in every call, so everything is linear in billing
    whole = compute_tax_comparison(1_200_000, 50_000, 0, Activity.GENERAL_SERVICE)
    split = compute_weighted_comparison(
        1_200_000, 50_000, 0,
        [_line(Activity.GENERAL_SERVICE, 60), _line(Activity.GENERAL_SERVICE, 40)],
    )

    assert split.monthly_billing == pytest.approx(50_000)
    assert split.simples_monthly_tax == pytest.approx(whole.simples.monthly_tax)
    assert split.presumed_total == pytest.approx(whole.presumed_profit.total)
    assert split.irpj == pytest.approx(whole.presumed_profit.irpj)
    assert split.iss == pytest.approx(whole.presumed_profit.iss)
    assert split.cbs_ibs == pytest.approx(whole.transition.cbs_ibs)
    assert split.simples_effective_rate == pytest.approx(whole.simples.effective_rate)
    assert split.presumed_effective_rate == pytest.approx(whole.presumed_profit.effective_rate)


def test_irpj_additional_is_not_linear_across_splits():
    # undivided base 32000 pays the 10% additional; 19200 and 12800 do not
    whole = compute_tax_comparison(1_200_000, 100_000, 0, Activity.GENERAL_SERVICE)
    split = compute_weighted_comparison(
        1_200_000, 100_000, 0,
        [_line(Activity.GENERAL_SERVICE, 60), _line(Activity.GENERAL_SERVICE, 40)],
    )

    assert whole.presumed_profit.irpj == pytest.approx(6000.0)
    assert split.irpj == pytest.approx(4800.0)


def test_mixed_activities_sum_absolutes_and_recompute_rates():
    # commerce 60k: Simples Anexo I 8.825% -> 5295; LP 720 + 648 + 390 + 1800 = 3558
    # intellectual 40k (no payroll): Anexo V 19.075% -> 7630; LP 1920 + 1152 + 260 + 1200 + 2000 = 6532
    res = compute_weighted_comparison(
        1_200_000, 100_000, 0,
        [_line(Activity.COMMERCE, 60, "Loja"), _line(Activity.INTELLECTUAL_SERVICE, 40, "Consultoria")],
    )

    assert len(res.lines) == 2
    assert res.lines[0].weight == pytest.approx(0.6)
    assert res.simples_monthly_tax == pytest.approx(5295 + 7630)
    assert res.presumed_total == pytest.approx(3558 + 6532)
    assert res.simples_effective_rate == pytest.approx(12.925)
    assert res.presumed_effective_rate == pytest.approx(10.09)
    assert res.iss == pytest.approx(2000.0)
    assert res.recommendation.regime == Regime.LUCRO_PRESUMIDO

    # a plain mean of the line rates would give a different figure
    mean_rate = sum(lc.result.presumed_profit.effective_rate for lc in res.lines) / len(res.lines)
    assert mean_rate != pytest.approx(res.presumed_effective_rate)


def test_zero_share_lines_are_dropped():
    res = compute_weighted_comparison(
        1_200_000, 100_000, 0,
        [_line(Activity.GENERAL_SERVICE, 100), _line(Activity.COMMERCE, 0)],
    )
    assert [lc.line.activity for lc in res.lines] == [Activity.GENERAL_SERVICE]
    assert res.warnings == []


def test_no_active_lines_uses_fallback_activity():
    res = compute_weighted_comparison(
        1_200_000, 100_000, 0, [], fallback_activity=Activity.COMMERCE,
    )
    assert len(res.lines) == 1
    assert res.lines[0].line.activity == Activity.COMMERCE
    assert res.lines[0].weight == 1.0


def test_shares_not_adding_to_100_are_flagged():
    res = compute_weighted_comparison(
        1_200_000, 100_000, 0, [_line(Activity.COMMERCE, 50)],
    )
    assert res.monthly_billing == pytest.approx(50_000)
    assert any("50.00%" in w for w in res.warnings)


def test_zero_billing_rates_fall_back_to_zero():
    res = compute_weighted_comparison(1_200_000, 0, 0, [_line(Activity.INDUSTRY, 100)])
    assert res.simples_effective_rate == 0.0
    assert res.presumed_effective_rate == 0.0


def test_eligibility_follows_company_rbt12():
    res = compute_weighted_comparison(
        6_000_000, 500_000, 0,
        [_line(Activity.COMMERCE, 50), _line(Activity.INDUSTRY, 50)],
    )
    assert res.simples_eligible is False
    assert res.presumed_eligible is True
    assert res.surcharge_applied is True


def test_b2b_hybrid_qualifier_on_blended_result():
    res = compute_weighted_comparison(
        1_200_000, 100_000, 40_000,
        [_line(Activity.INTELLECTUAL_SERVICE, 100)],
        is_b2b=True,
    )
    assert res.recommendation.regime == Regime.SIMPLES_NACIONAL
    assert res.recommendation.hybrid_review is True
