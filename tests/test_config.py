"""Tests for configuration loading."""

import os

import yaml


class TestLoadConfig:
    """Tests for YAML configuration."""

    def test_defaults(self):
        from linez.config import load_config

        config = load_config(None)

        assert config.loop.iterations_per_frame == 4096
        assert config.loop.seed is None
        assert config.sampler.thickness == 1
        assert config.sampler.antialias is False
        assert config.display.headless is False
        assert config.tracing.enabled is False

    def test_missing_file_falls_back(self, temp_dir):
        from linez.config import AppConfig, load_config

        assert load_config(os.path.join(temp_dir, "nope.yaml")) == AppConfig()

    def test_partial_override(self, temp_dir):
        from linez.config import load_config

        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"sampler": {"thickness": 3}, "loop": {"seed": 11}}, f)

        config = load_config(path)

        assert config.sampler.thickness == 3
        assert config.sampler.max_thickness == 1
        assert config.loop.seed == 11
        assert config.loop.iterations_per_frame == 4096

    def test_unknown_keys_ignored(self, temp_dir):
        from linez.config import load_config

        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"sampler": {"bogus": 1}, "nonsense": {"a": 2}, "display": "flat"}, f)

        config = load_config(path)

        assert not hasattr(config.sampler, "bogus")
        assert config.display.window_title == "linez"

    def test_empty_file(self, temp_dir):
        from linez.config import AppConfig, load_config

        path = os.path.join(temp_dir, "empty.yaml")
        open(path, "w", encoding="utf-8").close()

        assert load_config(path) == AppConfig()


class TestSaveDefaultConfig:
    """Tests for writing the default config."""

    def test_round_trip(self, temp_dir):
        from linez.config import AppConfig, load_config, save_default_config

        path = os.path.join(temp_dir, "defaults.yaml")
        save_default_config(path)

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        assert set(data) == {"sampler", "loop", "image", "display", "tracing"}
        assert load_config(path) == AppConfig()
