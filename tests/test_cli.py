"""Tests for the command-line interface."""

import os

import pytest


class TestCli:
    """Tests for argument handling and commands."""

    def test_no_command_prints_help(self, capsys):
        from linez.cli import main

        assert main([]) == 0
        assert "linez" in capsys.readouterr().out

    def test_init_config(self, temp_dir):
        from linez.cli import main
        from linez.config import AppConfig, load_config

        path = os.path.join(temp_dir, "cfg.yaml")

        assert main(["init-config", "--out", path]) == 0
        assert load_config(path) == AppConfig()

    def test_run_missing_target(self, temp_dir, capsys):
        from linez.cli import main

        code = main(["run", os.path.join(temp_dir, "missing.png"), "--headless"])

        assert code == 1
        assert "Error: Image not found" in capsys.readouterr().err

    def test_run_requires_target(self):
        from linez.cli import main

        with pytest.raises(SystemExit):
            main(["run"])


class TestApplyOverrides:
    """Tests for mapping flags onto the configuration."""

    def test_flags_override_config(self):
        from linez.cli import apply_overrides, build_parser
        from linez.config import AppConfig

        args = build_parser().parse_args([
            "run", "img.png",
            "--iterations", "100",
            "--seed", "5",
            "--thickness", "2",
            "--max-thickness", "4",
            "--antialias",
            "--scale", "3",
            "--max-edge", "256",
            "--headless",
            "--trace", "--trace-level", "DEBUG",
        ])
        config = apply_overrides(AppConfig(), args)

        assert config.loop.iterations_per_frame == 100
        assert config.loop.seed == 5
        assert config.sampler.thickness == 2
        assert config.sampler.max_thickness == 4
        assert config.sampler.antialias is True
        assert config.display.scale == 3
        assert config.image.max_edge == 256
        assert config.display.headless is True
        assert config.tracing.enabled is True
        assert config.tracing.level == "DEBUG"

    def test_absent_flags_keep_config(self):
        from linez.cli import apply_overrides, build_parser
        from linez.config import AppConfig

        config = AppConfig()
        config.sampler.thickness = 3
        args = build_parser().parse_args(["run", "img.png"])

        config = apply_overrides(config, args)

        assert config.sampler.thickness == 3
        assert config.loop.iterations_per_frame == 4096
        assert config.tracing.enabled is False
