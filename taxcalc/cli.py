from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Literal, Sequence

from rich.console import Console
from rich.table import Table

from taxcalc.config import get_settings
from taxcalc.core.estimator import estimate
from taxcalc.core.models import CalculationResult
from taxcalc.core.regimes import RegimeTable, RegimeTableError, build_regime_table
from taxcalc.formatting import format_currency, format_percentage

ColorPreference = Literal["auto", "always", "never"]

_RESULT_ROWS = (
    ("Gross income", "gross_income"),
    ("Standard deduction", "standard_deduction"),
    ("Other deductions", "other_deductions"),
    ("Taxable income", "taxable_income"),
    ("Tax from brackets", "base_tax"),
    ("Rebate", "rebate_applied"),
    ("Cess", "cess_amount"),
    ("Total tax", "total_tax"),
    ("After-tax income", "after_tax_income"),
)


def _resolve_color_preference(pref: ColorPreference) -> ColorPreference:
    if pref == "auto" and os.getenv("NO_COLOR"):
        return "never"
    return pref


def _get_console(pref: ColorPreference) -> Console:
    resolved = _resolve_color_preference(pref)
    if resolved == "never":
        return Console(no_color=True, highlight=False)
    return Console(force_terminal=resolved == "always" or None)


def _build_table(title: str, columns: list[str]) -> Table:
    table = Table(title=title, expand=False)
    for column in columns:
        table.add_column(column)
    return table


def _print_result(result: CalculationResult, console: Console) -> None:
    title = f"Estimate: {result.regime} {result.tax_year}"
    if result.resolution != "exact":
        title += f" ({result.resolution.replace('_', ' ')})"
    table = _build_table(title, ["Metric", "Value"])
    for label, field in _RESULT_ROWS:
        table.add_row(label, format_currency(getattr(result, field), result.currency))
    table.add_row("Effective rate", format_percentage(result.effective_rate))
    table.add_row("Marginal rate", format_percentage(result.marginal_rate))
    console.print(table)


def _print_regimes(table: RegimeTable, console: Console) -> None:
    listing = _build_table("Configured regimes", ["Regime", "Jurisdiction", "Years", "Deductions", "Description"])
    for regime in table.regimes():
        years = table.years(regime)
        latest = table.get(regime, years[-1])
        listing.add_row(
            regime,
            latest.jurisdiction,
            ", ".join(years),
            "itemized" if latest.allows_itemized else "flat",
            latest.label,
        )
    console.print(listing)


def _print_table_problems(exc: RegimeTableError, console: Console) -> None:
    console.print(f"[bold red]Regime table has {len(exc.problems)} problem(s):[/bold red]")
    for problem in exc.problems:
        console.print(f"  - {problem}", markup=False)


def _cmd_estimate(args: argparse.Namespace, console: Console) -> int:
    try:
        table = build_regime_table(path=args.table)
    except RegimeTableError as exc:
        _print_table_problems(exc, console)
        return 1
    income = args.income_option if args.income_option is not None else args.income
    result = estimate(income, args.deductions, regime=args.regime, tax_year=args.year, table=table)
    if args.json:
        console.print_json(json.dumps(result.model_dump(mode="json")))
    else:
        _print_result(result, console)
    return 0


def _cmd_regimes(args: argparse.Namespace, console: Console) -> int:
    try:
        table = build_regime_table(path=args.table)
    except RegimeTableError as exc:
        _print_table_problems(exc, console)
        return 1
    _print_regimes(table, console)
    return 0


def _cmd_validate(args: argparse.Namespace, console: Console) -> int:
    try:
        table = build_regime_table(path=args.table)
    except RegimeTableError as exc:
        _print_table_problems(exc, console)
        return 1
    console.print(f"Regime table OK: {len(table)} configs, digest {table.digest()}")
    return 0


def _cmd_serve(args: argparse.Namespace, console: Console) -> int:
    import uvicorn

    console.print(f"Serving tax estimator on http://{args.host}:{args.port}")
    uvicorn.run("taxcalc.api.http:app", host=args.host, port=args.port)
    return 0


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="taxcalc",
        description="Estimate income tax from progressive brackets.",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output preference (default: auto).",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Alias for --color never.",
    )
    parser.add_argument("--table", help="Path to a JSON regime table (defaults to TAXCALC_REGIME_TABLE or built-ins).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    est = subparsers.add_parser("estimate", help="Estimate tax for one income.")
    est.add_argument(
        "income",
        nargs="?",
        help="Gross income, e.g. 900000, 9L or 85k. Put -- before a negative amount.",
    )
    est.add_argument(
        "--income",
        dest="income_option",
        metavar="AMOUNT",
        help="Gross income as an option, e.g. --income=-5000; wins over the positional.",
    )
    est.add_argument("--deductions", default="0", help="Itemized deductions (ignored by flat regimes).")
    est.add_argument("--regime", help="Regime or filing status, e.g. new, old, single, married_joint.")
    est.add_argument("--year", help="Tax year, e.g. 2025 or 2025-26.")
    est.add_argument("--json", action="store_true", help="Print the raw result as JSON.")
    est.set_defaults(handler=_cmd_estimate)

    reg = subparsers.add_parser("regimes", help="List configured regimes and years.")
    reg.set_defaults(handler=_cmd_regimes)

    val = subparsers.add_parser("validate", help="Check a regime table for gaps and bracket errors.")
    val.set_defaults(handler=_cmd_validate)

    srv = subparsers.add_parser("serve", help="Run the HTTP estimator.")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.set_defaults(handler=_cmd_serve)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.numeric_log_level(), format="%(levelname)s %(name)s - %(message)s")
    console = _get_console(args.color)
    return args.handler(args, console)


if __name__ == "__main__":
    sys.exit(main())
