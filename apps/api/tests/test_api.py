import logging

from fastapi.testclient import TestClient

import main
from main import app, resolve_iss_rate, resolve_log_level
from regime_engine import activity_lines_from_cnaes
from regime_engine.core import get_engine

client = TestClient(app)


def test_health():
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert [r["code"] for r in data["regimes"]] == ["SN", "LP", "CBS_IBS"]


def test_compare():
    resp = client.post("/api/v1/tax/compare", json={
        "rbt12": 1_200_000,
        "monthly_billing": 100_000,
        "monthly_payroll": 30_000,
        "activity": "intellectual_service",
        "iss_rate": 0.05,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["simples"]["schedule"] == "III"
    assert round(data["simples"]["monthly_tax"], 2) == 13030.0
    assert round(data["presumed_profit"]["total"], 2) == 17530.0
    assert data["recommendation"]["regime"] == "Simples Nacional"
    assert data["transition"]["phase"] == "test phase"


def test_compare_rejects_out_of_range_iss_and_negative_amounts():
    resp = client.post("/api/v1/tax/compare", json={
        "rbt12": 1_200_000, "monthly_billing": 100_000, "iss_rate": 0.06,
    })
    assert resp.status_code == 422

    resp = client.post("/api/v1/tax/compare", json={
        "rbt12": -1, "monthly_billing": 100_000,
    })
    assert resp.status_code == 422


def test_compare_rejects_unknown_activity():
    resp = client.post("/api/v1/tax/compare", json={
        "rbt12": 1_200_000, "monthly_billing": 100_000, "activity": "agribusiness",
    })
    assert resp.status_code == 422


def test_weighted_compare():
    resp = client.post("/api/v1/tax/compare/weighted", json={
        "rbt12": 1_200_000,
        "monthly_billing": 100_000,
        "monthly_payroll": 0,
        "lines": [
            {"activity": "commerce", "percentage": 60, "label": "Loja"},
            {"activity": "intellectual_service", "percentage": 40, "label": "Consultoria"},
        ],
    })
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["lines"]) == 2
    assert round(data["presumed_total"], 2) == 10090.0
    assert data["recommendation"]["regime"] == "Lucro Presumido"


def test_records_summary():
    resp = client.post("/api/v1/records/summary", json={
        "billing": [{"month": "Janeiro", "year": 2024, "total": 120_000}],
        "payroll": [{"type": "Salário", "competence": "01/2024", "value": 10_000}],
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["rbt12"] == 120_000
    assert round(data["total_payroll"], 2) == 10_800.0


def test_records_summary_requires_records():
    resp = client.post("/api/v1/records/summary", json={"billing": [], "payroll": []})
    assert resp.status_code == 400


def test_activity_for_cnae():
    resp = client.get("/api/v1/activity/cnae/6201501")
    assert resp.status_code == 200
    assert resp.json() == {"cnae": "6201501", "prefix": "62", "activity": "intellectual_service"}

    resp = client.get("/api/v1/activity/cnae/x")
    assert resp.status_code == 400


def test_legal_nature_eligibility():
    resp = client.get("/api/v1/activity/legal-nature/2046")
    assert resp.status_code == 200
    assert resp.json()["eligible"] is False

    resp = client.get("/api/v1/activity/legal-nature/2062")
    assert resp.json()["eligible"] is True


def test_cnae_endpoint_agrees_with_activity_lines():
    line = activity_lines_from_cnaes(111301)[0]
    resp = client.get(f"/api/v1/activity/cnae/{line.cnae}")
    assert resp.status_code == 200
    assert resp.json() == {"cnae": "0111301", "prefix": "01", "activity": line.activity.value}

    resp = client.get("/api/v1/activity/cnae/111301")
    assert resp.json()["activity"] == line.activity.value


def test_unknown_log_level_falls_back_to_info():
    assert resolve_log_level("verbose") == logging.INFO
    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level(" WARNING ") == logging.WARNING


def test_default_iss_rate_is_clamped():
    assert resolve_iss_rate("0.03") == 0.03
    assert resolve_iss_rate("0.10") == 0.05
    assert resolve_iss_rate("0.01") == 0.02
    assert resolve_iss_rate("abc") == 0.05
    assert resolve_iss_rate("nan") == 0.05


def test_endpoints_share_one_engine():
    assert main.get_engine() is get_engine()
    assert not hasattr(main, "ENGINE")
