"""
Unit tests for streamlit_app/utils/data_manager.py - Saved weapon list settings.
"""
import json

import pytest

from elden_ring_calc.core import Attribute, WeaponType
from elden_ring_calc.streamlit_app.utils.data_manager import (
    REGULATION_DATA_ENV,
    DEFAULT_REGULATION_DATA_FILE,
    AppState,
    get_regulation_data_path,
    load_app_state,
    save_app_state,
)


class TestAppStateDefaults:
    """Defaults match a fresh visit to the weapon list."""

    def test_default_attributes(self):
        state = AppState()
        assert state.get_attributes() == {attribute: 30 for attribute in Attribute}

    def test_default_filters(self):
        state = AppState()
        assert state.get_weapon_types() == [WeaponType.AXE]
        assert state.affinity_ids == [0, -1]
        assert state.include_dlc is True
        assert state.effective_only is False

    def test_default_sort(self):
        state = AppState()
        assert state.sort_by == "totalAttack"
        assert state.reverse is False
        assert state.upgrade_level == 25

    def test_defaults_not_shared(self):
        first = AppState()
        first.attributes["str"] = 80
        assert AppState().attributes["str"] == 30


class TestSaveLoad:
    """Tests for save_app_state() / load_app_state()."""

    def test_round_trip(self, tmp_path):
        path = str(tmp_path / "app_state.json")
        state = AppState(two_handing=True, upgrade_level=10, sort_by="2Attack", reverse=True)
        state.attributes["dex"] = 55

        assert save_app_state(state, path) is True
        loaded = load_app_state(path)

        assert loaded == state
        assert loaded.get_attributes()[Attribute.DEX] == 55

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_app_state(str(tmp_path / "nothing.json")) == AppState()

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "app_state.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_app_state(str(path)) == AppState()

    def test_non_object_gives_defaults(self, tmp_path):
        path = tmp_path / "app_state.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert load_app_state(str(path)) == AppState()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "app_state.json"
        path.write_text(json.dumps({"ghPages": True, "sort_by": "poise"}), encoding="utf-8")
        state = load_app_state(str(path))
        assert state.sort_by == "poise"

    def test_partial_attributes_completed(self, tmp_path):
        path = tmp_path / "app_state.json"
        path.write_text(json.dumps({"attributes": {"str": 45}}), encoding="utf-8")
        state = load_app_state(str(path))
        assert state.attributes == {"str": 45, "dex": 30, "int": 30, "fai": 30, "arc": 30}

    def test_creates_directory(self, tmp_path):
        path = str(tmp_path / "nested" / "app_state.json")
        assert save_app_state(AppState(), path) is True
        assert load_app_state(path) == AppState()


class TestStoredValueRanges:
    """Stored values are brought back into the range the settings widgets accept."""

    def write_state(self, tmp_path, data):
        path = tmp_path / "app_state.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_upgrade_level_clamped(self, tmp_path):
        assert load_app_state(self.write_state(tmp_path, {"upgrade_level": 40})).upgrade_level == 25
        assert load_app_state(self.write_state(tmp_path, {"upgrade_level": -3})).upgrade_level == 0

    def test_attributes_clamped(self, tmp_path):
        path = self.write_state(tmp_path, {"upgrade_level": 40, "attributes": {"str": 500, "dex": 0}})
        state = load_app_state(path)
        assert state.attributes == {"str": 99, "dex": 1, "int": 30, "fai": 30, "arc": 30}
        assert state.upgrade_level == 25

    def test_unknown_weapon_types_dropped(self, tmp_path):
        state = load_app_state(self.write_state(tmp_path, {"weapon_types": [10, 999, 6]}))
        assert state.get_weapon_types() == [WeaponType.AXE, WeaponType.KATANA]

    def test_unknown_affinities_dropped(self, tmp_path):
        state = load_app_state(self.write_state(tmp_path, {"affinity_ids": [0, 42, -1]}))
        assert state.affinity_ids == [0, -1]

    def test_unknown_sort_key_reset(self, tmp_path):
        state = load_app_state(self.write_state(tmp_path, {"sort_by": "9WeakRate", "reverse": True}))
        assert state.sort_by == "totalAttack"
        assert state.reverse is True

    def test_adjusted_state_saved_back(self, tmp_path):
        path = self.write_state(tmp_path, {"upgrade_level": 40})
        save_app_state(load_app_state(path), path)
        with open(path, encoding="utf-8") as f:
            assert json.load(f)["upgrade_level"] == 25


class TestRegulationDataPath:
    """The data file can be overridden from the environment."""

    def test_default(self, monkeypatch):
        monkeypatch.delenv(REGULATION_DATA_ENV, raising=False)
        assert get_regulation_data_path() == DEFAULT_REGULATION_DATA_FILE

    def test_override(self, monkeypatch):
        monkeypatch.setenv(REGULATION_DATA_ENV, "/tmp/regulation-dlc.json")
        assert get_regulation_data_path() == "/tmp/regulation-dlc.json"
