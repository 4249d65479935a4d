"""
Tests for Mortality Loader - loaders/mortality.py.

[T1] Mortality properties:
- qx = probability of death within year, given alive at age x
- px = 1 - qx = probability of surviving year
- Ages outside the table die with certainty (qx = 1)
"""

import json
from pathlib import Path

import pytest

from pension_lsv.config.settings import DataConfig, Settings
from pension_lsv.loaders.mortality import MortalityLoader, MortalityTable
from pension_lsv.loaders.resources import DataLoadError

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def loader() -> MortalityLoader:
    """Mortality loader instance."""
    return MortalityLoader()


def _write_json(path: Path, document: object) -> Path:
    path.write_text(json.dumps(document))
    return path


class TestMortalityTable:
    """Tests for MortalityTable dataclass."""

    @pytest.fixture
    def simple_table(self) -> MortalityTable:
        """Simple mortality table for testing."""
        return MortalityTable({age: 0.001 + 0.0001 * age for age in range(101)}, basis_id="Test")

    def test_table_creation(self, simple_table: MortalityTable) -> None:
        assert simple_table.basis_id == "Test"
        assert simple_table.min_age == 0
        assert simple_table.max_age == 100
        assert len(simple_table) == 101

    def test_get_qx(self, simple_table: MortalityTable) -> None:
        assert simple_table.get_qx(50) == pytest.approx(0.001 + 0.0001 * 50)

    def test_qx_plus_px_equals_one(self, simple_table: MortalityTable) -> None:
        for age in range(0, 101):
            assert simple_table.get_qx(age) + simple_table.get_px(age) == pytest.approx(1.0)

    def test_missing_age_defaults_to_one(self, simple_table: MortalityTable) -> None:
        assert 101 not in simple_table
        assert simple_table.get_qx(101) == 1.0
        assert simple_table.get_px(101) == 0.0

    def test_custom_default(self, simple_table: MortalityTable) -> None:
        assert simple_table.get_qx(150, default=0.5) == 0.5

    def test_values_not_range_checked(self) -> None:
        """Out-of-range qx is stored as supplied; survival clamps later."""
        table = MortalityTable({70: 1.3, 71: -0.1})
        assert table.get_qx(70) == 1.3
        assert table.get_qx(71) == -0.1

    def test_immutable(self, simple_table: MortalityTable) -> None:
        with pytest.raises(AttributeError):
            simple_table.basis_id = "other"  # type: ignore[misc]
        with pytest.raises(TypeError):
            simple_table.qx[50] = 0.5  # type: ignore[index]

    def test_detached_from_source(self) -> None:
        source = {65: 0.02}
        table = MortalityTable(source)
        source[65] = 0.9
        assert table.get_qx(65) == 0.02

    def test_rejects_fractional_age(self) -> None:
        with pytest.raises(ValueError, match="integer"):
            MortalityTable({65.5: 0.02})

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError, match="no ages"):
            MortalityTable({})


class TestMortalityLoaderInMemory:
    def test_from_dict(self, loader: MortalityLoader) -> None:
        table = loader.from_dict({65: 0.02, 66: 0.022}, basis_id="Custom")
        assert table.basis_id == "Custom"
        assert table.max_age == 66

    def test_from_sequence(self, loader: MortalityLoader) -> None:
        table = loader.from_sequence([0.01, 0.02, 0.03], start_age=60)
        assert table.min_age == 60
        assert table.get_qx(62) == 0.03


class TestMortalityLoaderJson:
    def test_sample_fixture(self, loader: MortalityLoader) -> None:
        table = loader.from_json(FIXTURES_DIR / "mortality_sample.json")
        assert table.basis_id == "Sample unisex 2024 (test fixture)"
        assert table.min_age == 0
        assert table.max_age == 120
        assert table.get_qx(65) == 0.0155

    def test_qx_object_form(self, loader: MortalityLoader, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "table.json", {"basisId": "obj", "qx": {"65": 0.02, "66": 0.03}})
        table = loader.from_json(path)
        assert table.get_qx(66) == 0.03
        assert table.basis_id == "obj"

    def test_min_age_offsets_list(self, loader: MortalityLoader, tmp_path: Path) -> None:
        path = _write_json(tmp_path / "table.json", {"qx": [0.01, 0.02], "minAge": 60})
        table = loader.from_json(path)
        assert table.get_qx(61) == 0.02
        # Basis defaults to the file stem
        assert table.basis_id == "table"

    def test_missing_file(self, loader: MortalityLoader, tmp_path: Path) -> None:
        with pytest.raises(DataLoadError, match="Cannot read"):
            loader.from_json(tmp_path / "absent.json")

    def test_invalid_json(self, loader: MortalityLoader, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(DataLoadError):
            loader.from_json(path)

    @pytest.mark.parametrize(
        "document",
        [
            {"basisId": "no rates"},
            {"qx": "0.02"},
            {"qx": [0.01, None]},
            {"qx": []},
            [0.01, 0.02],
        ],
    )
    def test_malformed(self, loader: MortalityLoader, tmp_path: Path, document: object) -> None:
        path = _write_json(tmp_path / "table.json", document)
        with pytest.raises(DataLoadError):
            loader.from_json(path)

    def test_nan_rejected(self, loader: MortalityLoader, tmp_path: Path) -> None:
        path = tmp_path / "nan.json"
        path.write_text('{"qx": [0.01, NaN]}')
        with pytest.raises(DataLoadError, match="NaN"):
            loader.from_json(path)


class TestMortalityLoaderCsv:
    def test_sample_fixture(self, loader: MortalityLoader) -> None:
        table = loader.from_csv(FIXTURES_DIR / "mortality_sample.csv")
        assert table.min_age == 60
        assert table.max_age == 70
        assert table.get_qx(65) == pytest.approx(0.0155)
        assert table.basis_id == "mortality_sample"

    def test_explicit_basis(self, loader: MortalityLoader) -> None:
        table = loader.from_csv(FIXTURES_DIR / "mortality_sample.csv", basis_id="CSV basis")
        assert table.basis_id == "CSV basis"

    def test_missing_columns(self, loader: MortalityLoader, tmp_path: Path) -> None:
        path = tmp_path / "bad.csv"
        path.write_text("age,rate\n65,0.02\n")
        with pytest.raises(DataLoadError, match="qx"):
            loader.from_csv(path)

    def test_missing_file(self, loader: MortalityLoader, tmp_path: Path) -> None:
        with pytest.raises(DataLoadError):
            loader.from_csv(tmp_path / "absent.csv")


class TestDataDirectory:
    """Default resources come from PENSION_LSV_DATA_DIR."""

    def test_default_resource_from_data_dir(
        self, loader: MortalityLoader, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(tmp_path / "mortality.json", {"basisId": "dir", "qx": [0.5]})
        monkeypatch.setattr(
            "pension_lsv.loaders.resources.SETTINGS",
            Settings(data=DataConfig(data_dir=tmp_path)),
        )
        assert loader.from_json().basis_id == "dir"

    def test_relative_name_inside_data_dir(
        self, loader: MortalityLoader, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(tmp_path / "other_basis.json", {"basisId": "other", "qx": [0.5]})
        monkeypatch.setattr(
            "pension_lsv.loaders.resources.SETTINGS",
            Settings(data=DataConfig(data_dir=tmp_path)),
        )
        assert loader.from_json("other_basis.json").basis_id == "other"

    def test_no_path_and_no_data_dir(
        self, loader: MortalityLoader, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("PENSION_LSV_DATA_DIR", raising=False)
        monkeypatch.setattr("pension_lsv.loaders.resources.SETTINGS", Settings())
        with pytest.raises(DataLoadError, match="PENSION_LSV_DATA_DIR"):
            loader.from_json()
