import pathlib
import sys

import pytest

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

from taxcalc.config import get_settings  # noqa: E402
from taxcalc.core.regimes import get_regime_table  # noqa: E402

_ENV_KEYS = (
    "TAXCALC_DEFAULT_REGIME",
    "TAXCALC_DEFAULT_TAX_YEAR",
    "TAXCALC_REGIME_TABLE",
    "TAXCALC_LOG_LEVEL",
    "TAXCALC_LOG_DIR",
    "BUILD_VERSION",
    "BUILD_SHA",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    get_regime_table.cache_clear()
    yield
    get_settings.cache_clear()
    get_regime_table.cache_clear()
