from decimal import Decimal as D

import pytest

from taxcalc.config import Settings
from taxcalc.core.regimes import (
    RegimeNotFoundError,
    RegimeTable,
    RegimeTableError,
    build_regime_table,
    get_regime_table,
    normalize_regime,
    normalize_tax_year,
)
from tests.fixtures.tables import make_config, make_itemized_config, make_table


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("new", "new"),
        ("marriedJoint", "married_joint"),
        ("Married Joint", "married_joint"),
        ("head-of-household", "head_of_household"),
        ("  OLD ", "old"),
        ("", None),
        (None, None),
    ],
)
def test_normalize_regime(raw, expected):
    assert normalize_regime(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("2025", "2025"), ("2025-26", "2025"), ("FY 2024-25", "2024"), (2023, "2023"), ("next year", None), (None, None)],
)
def test_normalize_tax_year(raw, expected):
    assert normalize_tax_year(raw) == expected


def test_builtin_table_validates_and_covers_every_year():
    table = get_regime_table()
    assert table.coverage_gaps() == []
    assert table.regimes() == [
        "head_of_household",
        "married_joint",
        "married_separate",
        "new",
        "old",
        "single",
    ]
    assert table.years("new") == ["2023", "2024", "2025"]
    assert table.years("marriedJoint") == ["2023", "2024"]
    assert table.default_key == ("new", "2025")


def test_get_regime_table_is_cached():
    assert get_regime_table() is get_regime_table()


def test_exact_resolution():
    table = make_table()
    config, resolution = table.resolve("itemized", "2025")
    assert resolution == "exact"
    assert config.regime == "itemized"


def test_missing_year_falls_back_to_nearest_year():
    table = make_table(
        make_config(tax_year="2020"),
        make_config(tax_year="2024"),
        make_config(tax_year="2025"),
    )
    config, resolution = table.resolve("flat", "2023")
    assert resolution == "nearest_year"
    assert config.tax_year == "2024"
    config, _ = table.resolve("flat", "2030")
    assert config.tax_year == "2025"
    config, _ = table.resolve("flat", "2015")
    assert config.tax_year == "2020"


def test_nearest_year_tie_prefers_later_year():
    table = make_table(make_config(tax_year="2022"), make_config(tax_year="2024"), default=("flat", "2024"))
    config, resolution = table.resolve("flat", "2023")
    assert (config.tax_year, resolution) == ("2024", "nearest_year")


def test_unreadable_year_uses_latest_for_regime():
    table = make_table(make_config(tax_year="2023"), make_config(tax_year="2025"))
    config, resolution = table.resolve("flat", "someday")
    assert (config.tax_year, resolution) == ("2025", "nearest_year")


def test_unknown_regime_falls_back_to_default():
    table = make_table()
    config, resolution = table.resolve("martian", "2025")
    assert resolution == "default"
    assert config.key == ("flat", "2025")


def test_missing_regime_and_year_use_table_default():
    table = make_table()
    config, resolution = table.resolve(None, None)
    assert (config.key, resolution) == (("flat", "2025"), "exact")


def test_strict_get_raises_for_unknown_combination():
    with pytest.raises(RegimeNotFoundError):
        make_table().get("flat", "1999")


def test_coverage_gap_is_a_validation_error():
    table = make_table(
        make_config(tax_year="2024"),
        make_config(tax_year="2025"),
        make_itemized_config(tax_year="2025"),
    )
    assert table.coverage_gaps() == [("XX", "itemized", "2024")]
    with pytest.raises(RegimeTableError) as excinfo:
        table.validate()
    assert any("itemized/2024" in problem for problem in excinfo.value.problems)


def test_missing_default_is_a_validation_error():
    table = make_table(default=("flat", "1999"))
    with pytest.raises(RegimeTableError, match="default config flat/1999"):
        table.validate()


def test_invalid_config_values_are_reported():
    table = RegimeTable(
        [make_config(standard_deduction=D("-1"), cess_rate=D("2"))],
        "flat",
        "2025",
    )
    problems = table.problems()
    assert any("negative standard deduction" in p for p in problems)
    assert any("cess rate" in p for p in problems)


def test_duplicate_keys_are_reported():
    table = RegimeTable([make_config(), make_config()], "flat", "2025")
    assert any("defined more than once" in p for p in table.problems())


def test_regime_shared_across_jurisdictions_is_reported():
    table = RegimeTable(
        [make_config(), make_config(tax_year="2024", jurisdiction="YY")],
        "flat",
        "2025",
    )
    assert any("several jurisdictions" in p for p in table.problems())


def test_build_regime_table_honours_default_settings():
    settings = Settings(default_regime="single", default_tax_year="2024")
    table = build_regime_table(settings)
    assert table.default.key == ("single", "2024")


def test_build_regime_table_rejects_unknown_default():
    with pytest.raises(RegimeTableError):
        build_regime_table(Settings(default_regime="nonexistent"))


def test_digest_is_stable():
    assert make_table().digest() == make_table().digest()
    assert len(make_table().digest()) == 12
