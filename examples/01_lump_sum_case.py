#!/usr/bin/env python3
"""
Lump-Sum Valuation Demo.

Values the worked example: a participant born 1959-12-05 with a $73.79
monthly benefit at NRD 2025-01-01, electing to retire on 2026-04-01 under a
plan terminating 2024-06-30, normal form 3-year certain and life.

    "What is the benefit worth today, and is it below the de-minimis limit?"

Key Concepts:
- Segment rates: three §417(e) rates for years [0,5], (5,20], (20,∞)
- PV per $1: annuity factor at the annuity start date, discounted to DOPT
- Late-retirement adjustment: benefit scaled so NRD and DOR values agree

Usage:
    python examples/01_lump_sum_case.py
    python examples/01_lump_sum_case.py --form LIFE_DUE_MTHLY --json
    python examples/01_lump_sum_case.py --rates rates.json --mortality table.json
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path if running as script
sys.path.insert(0, "src")

from pension_lsv import (
    CaseRequest,
    MortalityLoader,
    SegmentRateLoader,
    value_case,
)

FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "fixtures"


def main() -> int:
    parser = argparse.ArgumentParser(description="Value a single lump-sum case")
    parser.add_argument(
        "--rates",
        type=Path,
        default=FIXTURES_DIR / "segment_rates_sample.json",
        help="Segment rates JSON (month -> i1, i2, i3)",
    )
    parser.add_argument(
        "--mortality",
        type=Path,
        default=FIXTURES_DIR / "mortality_sample.json",
        help="Mortality table JSON",
    )
    parser.add_argument("--form", default="CERTAIN_N_AND_LIFE_DUE_MTHLY", help="Benefit form tag")
    parser.add_argument("--certain-years", default="3", help="Certain period n in years")
    parser.add_argument("--benefit", default="73.79", help="Monthly benefit at NRD")
    parser.add_argument("--no-adjustment", action="store_true", help="Skip late-retirement adjustment")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log valuation intermediates")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    rate_table = SegmentRateLoader().from_json(args.rates)
    mortality = MortalityLoader().from_json(args.mortality)

    request = CaseRequest(
        date_of_birth="1959-12-05",
        termination_of_employment="2024-05-31",
        benefit_freeze_date="2020-07-31",
        normal_retirement_date="2025-01-01",
        requested_retirement_date="2026-04-01",
        plan_termination_date="2024-06-30",
        benefit_at_nrd=args.benefit,
        form=args.form,
        certain_years=args.certain_years,
        apply_late_retirement_adjustment=not args.no_adjustment,
        de_minimis_threshold="5000",
    )

    outcome = value_case(request, rate_table, mortality)
    if not outcome.ok:
        print(f"Rejected: {outcome.error.kind.value}: {outcome.error.message}")
        return 1

    result = outcome.unwrap()
    if args.json:
        print(result.to_json())
        return 0

    factors = result.pv_per_dollar
    print("=" * 60)
    print(f"Lump-Sum Valuation ({result.inputs.form.value})")
    print("=" * 60)
    print(f"Mortality basis:        {mortality.basis_id}")
    print(f"Segment rates:          {result.inputs.rates.as_tuple()}")
    print(f"Age at NRD / DOR:       {result.age_at_nrd:.4f} / {result.age_at_dor:.4f}")
    print(f"PV per $1 at ASD:       {factors.at_asd_nrd:.4f} / {factors.at_asd_dor:.4f}")
    print(f"PV per $1 at DOPT:      {factors.at_dopt_nrd:.4f} / {factors.at_dopt_dor:.4f}")
    print(f"Benefit at NRD / DOR:   {result.benefit_at_nrd:.2f} / {result.benefit_at_dor:.2f}")
    print(f"Lump sum at DOPT:       {result.lump_sum:,.2f}")
    print(f"De-minimis threshold:   {result.threshold:,.2f}")
    print(f"Eligible:               {'yes' if result.eligible else 'no'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
