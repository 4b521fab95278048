from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request

from taxcalc import __version__
from taxcalc.config import get_settings
from taxcalc.core.estimator import compute
from taxcalc.core.models import CalculationInput, CalculationResult
from taxcalc.core.regimes import RegimeTable, get_regime_table
from taxcalc.formatting import format_result
from taxcalc.lifespan import build_application_lifespan

logger = logging.getLogger("taxcalc.http")


async def _announce_defaults(app: FastAPI) -> None:
    table = app.state.regime_table
    logger.info(
        "Tax estimator ready; default=%s/%s regimes=%s",
        *table.default_key,
        ",".join(table.regimes()),
    )


app = FastAPI(
    title="Tax Estimator",
    version=__version__,
    description="Progressive bracket tax estimates with standard deduction, rebate and cess per regime/year.",
    lifespan=build_application_lifespan("http", startup_hook=_announce_defaults),
)


def _table(request: Request) -> RegimeTable:
    table = getattr(request.app.state, "regime_table", None)
    return table if table is not None else get_regime_table()


def _payload(result: CalculationResult) -> dict[str, Any]:
    return {
        "result": result.model_dump(mode="json"),
        "formatted": format_result(result),
    }


@app.get("/health")
def health(request: Request):
    settings = getattr(request.app.state, "settings", get_settings())
    table = _table(request)
    return {
        "ok": True,
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
        },
        "defaults": {
            "regime": table.default_key[0],
            "tax_year": table.default_key[1],
        },
        "regime_table": {
            "configs": len(table),
            "digest": getattr(request.app.state, "table_digest", None) or table.digest(),
        },
    }


@app.get("/regimes")
def list_regimes(request: Request):
    table = _table(request)
    entries = []
    for regime in table.regimes():
        years = table.years(regime)
        latest = table.get(regime, years[-1])
        entries.append(
            {
                "regime": regime,
                "label": latest.label,
                "jurisdiction": latest.jurisdiction,
                "currency": latest.currency,
                "allows_itemized": latest.allows_itemized,
                "years": years,
            }
        )
    return {"regimes": entries}


@app.get("/tax/estimate")
def estimate(
    request: Request,
    income: str | None = None,
    deductions: str | None = None,
    regime: str | None = None,
    tax_year: str | None = None,
):
    payload = CalculationInput(gross_income=income, deductions=deductions, regime=regime, tax_year=tax_year)
    return _payload(compute(payload, table=_table(request)))


@app.post("/tax/compute")
def compute_tax(payload: CalculationInput, request: Request):
    result = compute(payload, table=_table(request))
    if result.resolution != "exact":
        logger.info(
            "Request for %s/%s served by %s/%s (%s)",
            payload.regime,
            payload.tax_year,
            result.regime,
            result.tax_year,
            result.resolution,
        )
    return _payload(result)
