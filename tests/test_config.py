"""
Tests for configuration loading.
"""

import pytest

from flappy_arcade.config import GameConfig, load_config, make_config
from flappy_arcade.errors import ConfigError


class TestDefaults:
    def test_default_tuning(self):
        config = GameConfig()
        assert config.initial_gap == 350.0
        assert config.minimum_gap == 70.0
        assert config.gap_decrease_per_point == 5.0
        assert config.gravity == 0.5
        assert config.flap_impulse == -8.0
        assert config.start_position == (100, 300)
        assert config.spawn_interval == 2.5
        assert config.leaderboard_size == 10

    def test_tick_time(self):
        assert make_config(tick_rate=50).tick_time == 0.02

    def test_load_without_file(self):
        assert load_config() == GameConfig()

    def test_frozen(self):
        config = GameConfig()
        with pytest.raises(AttributeError):
            config.gravity = 1.0


class TestYamlOverrides:
    def test_overrides_applied(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("initial_gap: 300\ntick_rate: 30\ndb_file: scores.db\n")
        config = load_config(path)
        assert config.initial_gap == 300.0
        assert isinstance(config.initial_gap, float)
        assert config.tick_rate == 30
        assert config.db_file == "scores.db"
        assert config.minimum_gap == 70.0

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == GameConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("gravity: 0.4\npipe_colour: green\n")
        with pytest.raises(ConfigError, match="pipe_colour"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_bad_value_type(self):
        with pytest.raises(ConfigError):
            make_config(gravity="heavy")

    @pytest.mark.parametrize("overrides", [
        {"tick_rate": 2.9},
        {"countdown_start": 3.5},
        {"db_file": None},
        {"gravity": None},
        {"leaderboard_key": 42},
        {"leaderboard_size": True},
    ])
    def test_lossy_values_rejected(self, overrides):
        """Values that would be truncated or stringified are refused."""
        with pytest.raises(ConfigError):
            make_config(**overrides)

    def test_whole_float_accepted_for_int(self):
        assert make_config(tick_rate=30.0).tick_rate == 30

    def test_null_in_yaml_rejected(self, tmp_path):
        path = tmp_path / "game.yaml"
        path.write_text("db_file:\n")
        with pytest.raises(ConfigError, match="db_file"):
            load_config(path)


class TestValidation:
    @pytest.mark.parametrize("overrides", [
        {"minimum_gap": 350},
        {"minimum_gap": 0},
        {"initial_gap": 60},
        {"gap_decrease_per_point": -1},
        {"screen_height": 0},
        {"spawn_interval": 0},
        {"tick_rate": 0},
        {"countdown_start": 0},
        {"leaderboard_size": 0},
        {"leaderboard_key": ""},
    ])
    def test_rejected(self, overrides):
        with pytest.raises(ConfigError):
            make_config(**overrides)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            make_config(minimum_gap=500)
