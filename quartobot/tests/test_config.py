"""
Tests for the search configuration.
"""

import json

import pytest

from quartobot.config import SearchConfig, get_fast_config, get_production_config


class TestSearchConfig:
    """Tests for SearchConfig defaults, validation and serialization."""

    def test_defaults(self):
        config = SearchConfig()
        assert config.exploration_constant == 2.0
        assert config.iterations_per_move == 1_000_000
        assert not config.log_move_statistics
        assert not config.log_expected_value
        assert config.seed is None
        assert config.validate()

    def test_presets(self):
        assert get_fast_config().iterations_per_move < get_production_config().iterations_per_move
        assert get_fast_config().validate()

    @pytest.mark.parametrize("kwargs", [
        {'exploration_constant': -0.5},
        {'iterations_per_move': 0},
        {'seed': -1},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            SearchConfig(**kwargs).validate()

    def test_from_dict_ignores_unknown_keys(self):
        config = SearchConfig.from_dict({'iterations_per_move': 50, 'board_size': 4})
        assert config.iterations_per_move == 50
        assert config.exploration_constant == 2.0

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "search.json"
        config = SearchConfig(iterations_per_move=1234, seed=7, log_expected_value=True)
        config.save(str(path))

        with open(path) as f:
            assert json.load(f)['iterations_per_move'] == 1234

        loaded = SearchConfig.from_file(str(path))
        assert loaded == config

    def test_str(self):
        text = str(SearchConfig(seed=3))
        assert "1000000 iterations/move" in text
        assert "Seed: 3" in text

    def test_from_file_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{iterations_per_move: 5")
        with pytest.raises(ValueError):
            SearchConfig.from_file(str(path))
