"""Tests for layout profiles and YAML configuration files."""

import pytest

from prettygraphs.config import (
    DEFAULT_PRESET,
    LayoutProfile,
    get_preset,
    list_presets,
    load_config,
    profile_from_dict,
    save_config,
)
from prettygraphs.errors import ConfigurationError
from prettygraphs.graph.model import Canvas
from prettygraphs.layout.annealing import TerminationMode


class TestPresets:
    def test_list_presets(self):
        assert list_presets() == ["quick", "sandbox", "thorough"]

    def test_default_preset_matches_sandbox_schedule(self):
        profile = get_preset(DEFAULT_PRESET)
        assert profile.annealing.initial_temperature == 100.0
        assert profile.annealing.cooling_factor == 0.95
        assert profile.annealing.max_iterations == 2000

    def test_quick_preset_stops_on_either_bound(self):
        assert get_preset("quick").annealing.termination == TerminationMode.EITHER

    def test_presets_are_valid(self):
        for name in list_presets():
            get_preset(name).validate()

    def test_get_preset_returns_copy(self):
        profile = get_preset("sandbox")
        profile.annealing.max_iterations = 1
        assert get_preset("sandbox").annealing.max_iterations == 2000

    def test_unknown_preset(self):
        with pytest.raises(ConfigurationError, match="Available"):
            get_preset("nope")


class TestProfileFromDict:
    def test_overrides_fields(self):
        profile = profile_from_dict({
            "annealing": {"max_iterations": 500, "termination": "either"},
            "energy": {"ideal_length": 30, "ordered_pairs": False},
        })
        assert profile.annealing.max_iterations == 500
        assert profile.annealing.termination == TerminationMode.EITHER
        assert profile.energy.ideal_length == 30.0
        assert profile.energy.ordered_pairs is False
        # untouched values come from the default preset
        assert profile.annealing.cooling_factor == 0.95

    def test_nested_weights_and_canvas(self):
        profile = profile_from_dict({
            "energy": {
                "weights": {"intersections": 2.5, "angles": 1},
                "canvas": {"width": 512},
            },
        })
        assert profile.energy.weights.intersections == 2.5
        assert profile.energy.weights.angles == 1.0
        assert profile.energy.weights.edge_length == 1.0
        assert profile.energy.canvas == Canvas(512.0, 256.0)

    def test_adjacent_crossing_skip_from_yaml(self):
        assert get_preset("sandbox").energy.skip_shared_endpoint_crossings is False
        profile = profile_from_dict({"energy": {"skip_shared_endpoint_crossings": True}})
        assert profile.energy.skip_shared_endpoint_crossings is True

    def test_base_profile_used(self):
        profile = profile_from_dict({}, base=get_preset("thorough"), name="mine")
        assert profile.name == "mine"
        assert profile.annealing.max_jitter == 5.0

    def test_base_not_modified(self):
        base = get_preset("quick")
        profile_from_dict({"annealing": {"max_iterations": 7}}, base=base)
        assert base.annealing.max_iterations == 300

    @pytest.mark.parametrize("data", [
        {"schedule": {}},
        {"annealing": {"speed": 3}},
        {"energy": {"weights": {"gravity": 1.0}}},
        {"energy": {"canvas": {"depth": 10}}},
        {"annealing": []},
    ])
    def test_unknown_keys_rejected(self, data):
        with pytest.raises(ConfigurationError):
            profile_from_dict(data)

    @pytest.mark.parametrize("data", [
        {"annealing": {"max_iterations": 10.5}},
        {"annealing": {"max_iterations": "many"}},
        {"annealing": {"termination": "sometimes"}},
        {"annealing": {"cooling_factor": 1.2}},
        {"energy": {"ordered_pairs": "yes"}},
        {"energy": {"ideal_length": 0}},
        {"energy": {"weights": {"boundary": -1}}},
        {"energy": {"canvas": {"width": "wide"}}},
    ])
    def test_invalid_values_rejected(self, data):
        with pytest.raises(ConfigurationError):
            profile_from_dict(data)

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigurationError):
            profile_from_dict(["annealing"])


class TestConfigFiles:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "tuned.yaml"
        path.write_text(
            "annealing:\n"
            "  initial_temperature: 80\n"
            "  termination: either\n"
            "energy:\n"
            "  min_node_distance: 15\n"
            "  weights:\n"
            "    angles: 0.5\n"
        )
        profile = load_config(path)
        assert profile.name == "tuned"
        assert profile.annealing.initial_temperature == 80.0
        assert profile.annealing.termination == TerminationMode.EITHER
        assert profile.energy.min_node_distance == 15.0
        assert profile.energy.weights.angles == 0.5

    def test_empty_file_gives_default(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path).annealing.max_iterations == 2000

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("annealing: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Could not parse"):
            load_config(path)

    def test_save_and_reload(self, tmp_path):
        profile = get_preset("quick")
        profile.energy.weights.intersections = 3.0
        profile.energy.canvas = Canvas(300.0, 200.0)
        path = save_config(profile, tmp_path / "saved.yaml")

        reloaded = load_config(path)
        assert reloaded.to_dict() == profile.to_dict()

    def test_profile_to_dict_sections(self):
        data = LayoutProfile(name="x").to_dict()
        assert set(data) == {"annealing", "energy"}
        assert data["energy"]["canvas"] == {"width": 256.0, "height": 256.0}
