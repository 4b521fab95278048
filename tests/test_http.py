import pytest
from fastapi.testclient import TestClient

from taxcalc.api.http import app
from taxcalc.core.regimes import RegimeTableError
from tests.fixtures.tables import flat_regime_row, write_table_json


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def test_health_reports_build_and_defaults(monkeypatch):
    monkeypatch.setenv("BUILD_VERSION", "1.2.3")
    monkeypatch.setenv("BUILD_SHA", "abc123")
    with TestClient(app) as c:
        body = c.get("/health").json()
    assert body["ok"] is True
    assert body["build"] == {"version": "1.2.3", "sha": "abc123"}
    assert body["defaults"] == {"regime": "new", "tax_year": "2025"}
    assert body["regime_table"]["configs"] == 14
    assert len(body["regime_table"]["digest"]) == 12


def test_estimate_flat_regime(client):
    resp = client.get("/tax/estimate", params={"income": "900000", "regime": "new", "tax_year": "2025"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["taxable_income"] == "825000.00"
    assert body["result"]["total_tax"] == "23400.00"
    assert body["result"]["resolution"] == "exact"
    assert body["formatted"]["after_tax_income"] == "₹8,76,600"


def test_estimate_garbage_income_is_not_an_error(client):
    resp = client.get("/tax/estimate", params={"income": "lots", "deductions": "-3"})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["total_tax"] == "0.00"
    assert (result["regime"], result["tax_year"]) == ("new", "2025")


@pytest.mark.parametrize("income", ["1e999999999", "5e1000000", "1e1000000k"])
def test_estimate_huge_exponent_income_is_zero(client, income):
    resp = client.get("/tax/estimate", params={"income": income, "regime": "new", "tax_year": "2025"})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["gross_income"] == "0.00"
    assert result["total_tax"] == "0.00"


@pytest.mark.parametrize("income", ["1e999999999", "5e1000000", "1e1000000k"])
def test_compute_huge_exponent_income_is_zero(client, income):
    resp = client.post("/tax/compute", json={"grossIncome": income, "deductions": income, "regime": "old"})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["gross_income"] == "0.00"
    assert result["other_deductions"] == "0.00"
    assert result["total_tax"] == "0.00"


def test_compute_accepts_widget_payload(client):
    payload = {"grossIncome": 600000, "deductions": "100000", "regime": "old", "taxYear": "2025-26"}
    resp = client.post("/tax/compute", json=payload)
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["taxable_income"] == "450000.00"
    assert result["total_tax"] == "10400.00"
    assert result["tax_year"] == "2025"


def test_compute_reports_fallback_resolution(client):
    resp = client.post("/tax/compute", json={"income": 100000, "filingStatus": "headOfHousehold", "year": 2030})
    result = resp.json()["result"]
    assert result["regime"] == "head_of_household"
    assert result["tax_year"] == "2024"
    assert result["resolution"] == "nearest_year"
    assert result["currency"] == "USD"


def test_regimes_listing(client):
    body = client.get("/regimes").json()
    by_name = {entry["regime"]: entry for entry in body["regimes"]}
    assert by_name["new"]["years"] == ["2023", "2024", "2025"]
    assert by_name["new"]["allows_itemized"] is False
    assert by_name["single"]["currency"] == "USD"


def test_broken_table_fails_startup(tmp_path, monkeypatch):
    row = flat_regime_row()
    row["brackets"][-1]["upper"] = "9999999"
    path = write_table_json(tmp_path / "table.json", [row])
    monkeypatch.setenv("TAXCALC_REGIME_TABLE", str(path))
    monkeypatch.setenv("TAXCALC_DEFAULT_REGIME", "flat")
    with pytest.raises(RegimeTableError):
        with TestClient(app):
            pass


def test_log_dir_receives_file_sink(tmp_path, monkeypatch):
    monkeypatch.setenv("TAXCALC_LOG_DIR", str(tmp_path / "logs"))
    with TestClient(app) as c:
        c.get("/health")
    log_file = tmp_path / "logs" / "http.log"
    assert log_file.exists()
    assert "Startup complete" in log_file.read_text(encoding="utf-8")
