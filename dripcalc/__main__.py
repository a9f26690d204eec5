"""CLI entry point for dripcalc."""

from __future__ import annotations

import argparse
from dataclasses import asdict
import json
import logging
from pathlib import Path
import sys

from .profiles import build_profile, profile_names
from .schema import Assumptions, SchemaError, load_assumptions
from .simulation import ScenarioResult, run_scenarios
from .validate import validate_assumptions

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Leveraged DRIP portfolio projection")
    parser.add_argument("assumptions", nargs="?", help="Path to assumptions JSON file")
    parser.add_argument("--profile", choices=profile_names(), help="Use a built-in investor profile instead of a file")
    parser.add_argument("-o", "--output", default="projection.json", help="Output JSON path")
    parser.add_argument("--months", type=int, help="Override simulation length in months")
    parser.add_argument("--runs", type=int, help="Number of runs for random price/dividend models")
    parser.add_argument("--seed", type=int, help="Random seed for reproducibility")
    parser.add_argument("--base-year", type=int, help="Calendar year the simulation starts in (default: current year)")
    parser.add_argument("--validate", action="store_true", help="Validate assumptions only")
    parser.add_argument("--summary", action="store_true", help="Print text summary to stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format=LOG_FORMAT)


def _print_validation(errors: list[str], warnings: list[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}")
    for error in errors:
        print(f"ERROR: {error}", file=sys.stderr)


def _load(args: argparse.Namespace) -> Assumptions:
    if args.profile:
        return build_profile(args.profile)
    if not args.assumptions:
        raise ValueError("an assumptions file or --profile is required")
    return load_assumptions(args.assumptions)


def _result_payload(result: ScenarioResult) -> dict:
    return {
        "mode": result.mode,
        "seed": result.seed,
        "scenario_count": result.scenario_count,
        "loan_paid_off_rate": result.loan_paid_off_rate,
        "summary": asdict(result.baseline.summary),
        "amortization": [asdict(entry) for entry in result.baseline.amortization],
        "yearly_percentiles": [asdict(row) for row in result.yearly_percentiles],
    }


def _print_summary(result: ScenarioResult) -> None:
    summary = result.baseline.summary
    last = result.baseline.amortization[-1]
    print(f"Mode: {result.mode}")
    print(f"Months: {last.month}")
    print(f"Initial shares: {summary.initial_share_count:,.2f}")
    print(f"Annualized dividend yield: {summary.annualized_dividend_yield_percent:.2f}%")
    print(f"Monthly loan payment: ${summary.monthly_loan_payment:,.2f}")
    print(f"Loan payoff month: {summary.loan_payoff_month}")
    print(f"Ending net portfolio value: ${last.net_portfolio_value:,.0f}")
    if result.scenario_count > 1:
        final = result.yearly_percentiles[-1] if result.yearly_percentiles else None
        print(f"Scenarios: {result.scenario_count}")
        if final is not None:
            print(f"Month {final.month} net value p10/p50/p90: ${final.p10:,.0f} / ${final.p50:,.0f} / ${final.p90:,.0f}")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        assumptions = _load(args)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load assumptions: {exc}", file=sys.stderr)
        return 2

    if args.months is not None:
        assumptions.simulation_months = args.months

    validation = validate_assumptions(assumptions)
    _print_validation(validation.errors, validation.warnings)
    if not validation.is_valid:
        return 1

    if args.validate:
        print("Assumptions are valid.")
        return 0

    result = run_scenarios(assumptions, runs=args.runs, seed=args.seed, base_year=args.base_year)
    if args.summary:
        _print_summary(result)

    output = Path(args.output)
    output.write_text(json.dumps(_result_payload(result), indent=2), encoding="utf-8")
    print(f"Wrote projection to {output}")
    if result.seed is not None:
        print(f"Seed: {result.seed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
