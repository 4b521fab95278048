from decimal import Decimal as D

import pytest

from taxcalc.config import Settings
from taxcalc.core.estimator import estimate
from taxcalc.core.regimes import RegimeTableError, build_regime_table, get_regime_table
from taxcalc.core.regimes.loader import load_regime_configs
from tests.fixtures.tables import flat_regime_row, write_table_json


def test_load_json_table(tmp_path):
    path = write_table_json(tmp_path / "table.json", [flat_regime_row(), flat_regime_row(tax_year="2024")])
    configs = load_regime_configs(path)
    assert [c.key for c in configs] == [("flat", "2025"), ("flat", "2024")]
    assert configs[0].jurisdiction == "XX"
    assert configs[0].currency == "INR"
    assert configs[0].brackets[-1].upper is None
    assert configs[0].rebate.rebate_cap == D("60000")


def test_json_table_drives_estimates(tmp_path, monkeypatch):
    path = write_table_json(tmp_path / "table.json", [flat_regime_row("Flat Rate")])
    monkeypatch.setenv("TAXCALC_REGIME_TABLE", str(path))
    monkeypatch.setenv("TAXCALC_DEFAULT_REGIME", "flat_rate")
    table = get_regime_table()
    assert table.regimes() == ["flat_rate"]
    result = estimate(900000, table=table)
    assert result.total_tax == D("23400")


def test_missing_file_is_a_table_error(tmp_path):
    with pytest.raises(RegimeTableError, match="cannot read"):
        load_regime_configs(tmp_path / "missing.json")


def test_invalid_json_is_a_table_error(tmp_path):
    path = tmp_path / "table.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RegimeTableError, match="not valid JSON"):
        load_regime_configs(path)


def test_schema_errors_are_collected(tmp_path):
    row = flat_regime_row()
    del row["currency"]
    row["surprise"] = True
    path = write_table_json(tmp_path / "table.json", [row])
    with pytest.raises(RegimeTableError) as excinfo:
        load_regime_configs(path)
    joined = " ".join(excinfo.value.problems)
    assert "currency" in joined
    assert "surprise" in joined


def test_broken_brackets_fail_at_load_not_at_calculation(tmp_path):
    row = flat_regime_row()
    row["brackets"][1]["lower"] = "450000"
    path = write_table_json(tmp_path / "table.json", [row])
    settings = Settings(default_regime="flat", default_tax_year="2025")
    with pytest.raises(RegimeTableError, match="gap or overlap"):
        build_regime_table(settings, path=str(path))
