#!/usr/bin/env python
"""
Regenerate lump-sum golden files from the sample fixtures.

Usage:
    python scripts/regenerate_goldens.py --verify  # Check drift without regenerating
    python scripts/regenerate_goldens.py           # Regenerate tests/golden/outputs/lump_sum_cases.json

Golden values are produced from:
- tests/fixtures/segment_rates_sample.json (2024-06 rates)
- tests/fixtures/mortality_sample.json
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pension_lsv.config.tolerances import GOLDEN_RELATIVE_TOLERANCE
from pension_lsv.loaders.mortality import MortalityLoader
from pension_lsv.loaders.segment_rates import SegmentRateLoader
from pension_lsv.valuation.discount import integral_discount
from pension_lsv.validation.inputs import CaseRequest, value_case

ROOT = Path(__file__).parent.parent
GOLDEN_DIR = ROOT / "tests" / "golden" / "outputs"
FIXTURES_DIR = ROOT / "tests" / "fixtures"
GOLDEN_FILE = "lump_sum_cases.json"

BASE_PARAMETERS = {
    "date_of_birth": "1959-12-05",
    "termination_of_employment": "2024-05-31",
    "benefit_freeze_date": "2020-07-31",
    "normal_retirement_date": "2025-01-01",
    "requested_retirement_date": "2026-04-01",
    "plan_termination_date": "2024-06-30",
    "benefit_at_nrd": 73.79,
    "form": "CERTAIN_N_AND_LIFE_DUE_MTHLY",
    "certain_years": 3,
    "apply_late_retirement_adjustment": True,
    "de_minimis_threshold": 5000,
}

CASES = {
    "certain_and_life_n3": {},
    "certain_and_life_n0": {"certain_years": 0},
    "life_due": {"form": "LIFE_DUE_MTHLY", "certain_years": 0},
    "certain_continuous_n10_unadjusted": {
        "form": "CERTAIN_N_CONTINUOUS",
        "certain_years": 10,
        "apply_late_retirement_adjustment": False,
    },
}

INTEGRAL_LIMITS = ["3", "25"]


def regenerate_lump_sum_cases() -> dict:
    """Value every golden case with the current implementation."""
    rate_table = SegmentRateLoader().from_json(FIXTURES_DIR / "segment_rates_sample.json")
    mortality = MortalityLoader().from_json(FIXTURES_DIR / "mortality_sample.json")
    rates = rate_table.rates_for(BASE_PARAMETERS["plan_termination_date"])

    data: dict = {
        "_meta": {
            "source": "Current implementation snapshot",
            "generated": datetime.now().strftime("%Y-%m-%d"),
            "tolerance_tier": "golden_relative",
            "rates_fixture": "segment_rates_sample.json (2024-06)",
            "mortality_fixture": "mortality_sample.json",
            "notes": f"Segment rates i1={rates.i1}, i2={rates.i2}, i3={rates.i3}",
        }
    }

    for name, overrides in CASES.items():
        parameters = {**BASE_PARAMETERS, **overrides}
        result = value_case(CaseRequest(**parameters), rate_table, mortality).unwrap()
        factors = result.pv_per_dollar
        data[name] = {
            "parameters": parameters,
            "expected": {
                "age_at_nrd": result.age_at_nrd,
                "age_at_dor": result.age_at_dor,
                "at_asd_nrd": factors.at_asd_nrd,
                "at_asd_dor": factors.at_asd_dor,
                "at_dopt_nrd": factors.at_dopt_nrd,
                "at_dopt_dor": factors.at_dopt_dor,
                "benefit_at_nrd": result.benefit_at_nrd,
                "benefit_at_dor": result.benefit_at_dor,
                "lump_sum": result.lump_sum,
                "eligible": result.eligible,
            },
        }

    data["integral_discount"] = {
        "rates": rates.to_dict(),
        "expected": {n: integral_discount(float(n), rates) for n in INTEGRAL_LIMITS},
    }
    return data


def verify_golden(filepath: Path, current_data: dict, tolerance: float) -> list[str]:
    """Verify golden file matches current implementation (relative tolerance)."""
    if not filepath.exists():
        return [f"Golden file does not exist: {filepath}"]

    with open(filepath) as f:
        stored_data = json.load(f)

    errors = []

    for key, current_example in current_data.items():
        if key.startswith("_"):
            continue

        if key not in stored_data:
            errors.append(f"Missing example: {key}")
            continue

        current_expected = current_example.get("expected", {})
        stored_expected = stored_data[key].get("expected", {})

        for value_key, current_value in current_expected.items():
            if value_key not in stored_expected:
                continue
            stored_value = stored_expected[value_key]

            if isinstance(current_value, bool) or isinstance(stored_value, bool):
                if current_value != stored_value:
                    errors.append(f"{key}.{value_key}: current={current_value}, stored={stored_value}")
                continue

            scale = max(abs(stored_value), 1.0)
            if abs(current_value - stored_value) > tolerance * scale:
                errors.append(
                    f"{key}.{value_key}: current={current_value}, stored={stored_value}, "
                    f"diff={abs(current_value - stored_value)}"
                )

    return errors


def main():
    parser = argparse.ArgumentParser(description="Regenerate golden files")
    parser.add_argument("--verify", action="store_true", help="Verify without regenerating")
    args = parser.parse_args()

    data = regenerate_lump_sum_cases()
    path = GOLDEN_DIR / GOLDEN_FILE

    if args.verify:
        errors = verify_golden(path, data, GOLDEN_RELATIVE_TOLERANCE)
        if errors:
            print("Lump-sum cases drift detected:")
            for e in errors:
                print(f"  - {e}")
            print(f"\n{len(errors)} drift(s) detected. Run without --verify to regenerate.")
            sys.exit(1)
        print("Lump-sum cases: OK")
        print("\nAll golden files verified successfully.")
    else:
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        print(f"Regenerated: {path}")


if __name__ == "__main__":
    main()
