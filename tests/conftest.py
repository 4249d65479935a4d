"""
Centralized pytest fixtures for the pension-lsv test suite.

Fixture Categories:
1. Tolerances - Tiered numerical tolerances
2. Checksum Verification - Ensure fixtures haven't changed unexpectedly
3. Resources - Sample segment rates and mortality tables
4. Cases - The worked lump-sum example and variations
"""

import hashlib
import warnings
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path

import pytest

from pension_lsv.loaders.mortality import MortalityLoader, MortalityTable
from pension_lsv.loaders.segment_rates import SegmentRateLoader, SegmentRateTable
from pension_lsv.valuation.discount import SegmentRates
from pension_lsv.valuation.engine import CaseInputs
from pension_lsv.valuation.forms import BenefitForm
from pension_lsv.validation.inputs import CaseRequest

# =============================================================================
# FIXTURE PATHS
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SEGMENT_RATES_JSON = FIXTURES_DIR / "segment_rates_sample.json"
SEGMENT_RATES_CSV = FIXTURES_DIR / "segment_rates_sample.csv"
MORTALITY_JSON = FIXTURES_DIR / "mortality_sample.json"
MORTALITY_CSV = FIXTURES_DIR / "mortality_sample.csv"
CHECKSUMS_PATH = FIXTURES_DIR / "CHECKSUMS.sha256"


# =============================================================================
# TOLERANCE TIERS
# =============================================================================


@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    """

    # Closed-form identities
    analytical: float = 1e-12

    # Quadrature cross-checks
    quadrature: float = 1e-8

    # Golden regression (relative)
    golden: float = 1e-6


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# CHECKSUM VERIFICATION
# =============================================================================


def _compute_sha256(filepath: Path) -> str:
    """Compute SHA-256 hash of a file."""
    sha256_hash = hashlib.sha256()
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(4096), b""):
            sha256_hash.update(chunk)
    return sha256_hash.hexdigest()


def _load_expected_checksums() -> dict[str, str]:
    """Load expected checksums from CHECKSUMS.sha256 file."""
    checksums = {}
    if CHECKSUMS_PATH.exists():
        with open(CHECKSUMS_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    parts = line.split()
                    if len(parts) >= 2:
                        checksum, filename = parts[0], parts[1]
                        checksums[filename] = checksum
    return checksums


@pytest.fixture(scope="session", autouse=True)
def verify_fixture_checksums():
    """
    Verify test fixtures haven't changed unexpectedly.

    The golden outputs were computed from these exact fixtures. If they
    changed, either:
    1. The change was intentional → update CHECKSUMS.sha256 and goldens
    2. The change was unintentional → investigate the cause
    """
    expected = _load_expected_checksums()

    for filename, expected_hash in expected.items():
        filepath = FIXTURES_DIR / filename
        if filepath.exists():
            actual_hash = _compute_sha256(filepath)
            if actual_hash != expected_hash:
                warnings.warn(
                    f"Fixture checksum mismatch for {filename}!\n"
                    f"  Expected: {expected_hash}\n"
                    f"  Actual:   {actual_hash}\n"
                    f"If intentional, update tests/fixtures/CHECKSUMS.sha256",
                    UserWarning,
                )


# =============================================================================
# RESOURCES
# =============================================================================


@pytest.fixture(scope="session")
def rate_table() -> SegmentRateTable:
    """Sample segment rates by month."""
    return SegmentRateLoader().from_json(SEGMENT_RATES_JSON)


@pytest.fixture(scope="session")
def sample_mortality() -> MortalityTable:
    """Sample unisex mortality table, ages 0-120."""
    return MortalityLoader().from_json(MORTALITY_JSON)


@pytest.fixture
def june_2024_rates() -> SegmentRates:
    """Segment rates for the worked example's plan-termination month."""
    return SegmentRates(i1=0.0512, i2=0.0531, i3=0.0546)


@pytest.fixture
def flat_rates() -> SegmentRates:
    """Single 5% rate in every segment."""
    return SegmentRates(i1=0.05, i2=0.05, i3=0.05)


@pytest.fixture
def no_death_table() -> MortalityTable:
    """Mortality table with qx = 0 at every age 0-120."""
    return MortalityLoader().from_dict({age: 0.0 for age in range(121)}, basis_id="immortal")


# =============================================================================
# CASES
# =============================================================================


@pytest.fixture
def worked_example(
    june_2024_rates: SegmentRates,
    sample_mortality: MortalityTable,
) -> CaseInputs:
    """The worked example: 3-year certain and life, late retirement."""
    return CaseInputs(
        date_of_birth=date(1959, 12, 5),
        termination_of_employment=date(2024, 5, 31),
        benefit_freeze_date=date(2020, 7, 31),
        normal_retirement_date=date(2025, 1, 1),
        requested_retirement_date=date(2026, 4, 1),
        plan_termination_date=date(2024, 6, 30),
        benefit_at_nrd=73.79,
        form=BenefitForm.CERTAIN_N_AND_LIFE_DUE_MONTHLY,
        certain_years=3,
        rates=june_2024_rates,
        mortality=sample_mortality,
        apply_late_retirement_adjustment=True,
        de_minimis_threshold=5000.0,
    )


@pytest.fixture
def worked_request() -> CaseRequest:
    """The worked example as raw request values."""
    return CaseRequest(
        date_of_birth="1959-12-05",
        termination_of_employment="2024-05-31",
        benefit_freeze_date="2020-07-31",
        normal_retirement_date="2025-01-01",
        requested_retirement_date="2026-04-01",
        plan_termination_date="2024-06-30",
        benefit_at_nrd="73.79",
        form="CERTAIN_N_AND_LIFE_DUE_MTHLY",
        certain_years="3",
        apply_late_retirement_adjustment=True,
        de_minimis_threshold="5000",
    )


@pytest.fixture
def make_case(worked_example: CaseInputs):
    """Factory for variations of the worked example."""

    def _make(**changes) -> CaseInputs:
        return replace(worked_example, **changes)

    return _make
