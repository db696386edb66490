"""Tests for the command-line entry point."""

import json
from argparse import Namespace
from unittest.mock import patch

import pytest

from opening_tree.cli import apply_overrides, build_engine, main
from opening_tree.config import AppConfig
from opening_tree.errors import ConfigError


def make_args(**overrides):
    values = dict(
        engine=None,
        output=None,
        moves=None,
        color=None,
        engine_depth=None,
        variation_depth=None,
        threads=None,
        hash=None,
        multipv=None,
        no_progress=False,
        print_all=False,
    )
    values.update(overrides)
    return Namespace(**values)


class TestOverrides:
    """Tests for apply_overrides() and build_engine()."""

    def test_no_overrides(self):
        config = AppConfig()
        assert apply_overrides(config, make_args()) == config

    def test_overrides(self):
        config = apply_overrides(
            AppConfig(),
            make_args(
                engine="sf16",
                output="lines.txt",
                moves="d2d4 d7d5",
                color="black",
                engine_depth=12,
                variation_depth=3,
                threads=2,
                hash=128,
                multipv=4,
            ),
        )

        assert config.engine_path == "sf16"
        assert str(config.output_path) == "lines.txt"
        assert config.variations.initial_moves == "d2d4 d7d5"
        assert config.variations.is_white is False
        assert config.variations.engine_depth == 12
        assert config.variations.variation_depth == 3
        assert (config.engine.threads, config.engine.hash_mb, config.engine.multipv) == (2, 128, 4)

    def test_invalid_override(self):
        with pytest.raises(ConfigError):
            apply_overrides(AppConfig(), make_args(moves="e4"))

    def test_build_engine_stages_options(self):
        config = apply_overrides(AppConfig(), make_args(threads=2, hash=64, multipv=3))

        engine = build_engine(config)

        assert not engine.is_running
        assert (engine.threads, engine.hash_mb, engine.multipv) == (2, 64, 3)

    def test_build_engine_keeps_client_defaults(self):
        engine = build_engine(AppConfig())
        assert (engine.threads, engine.hash_mb, engine.multipv) == (8, 2048, 5)


class TestMain:
    """Tests for main()."""

    def test_missing_config_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--config", str(tmp_path / "missing.json")])

        assert excinfo.value.code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_illegal_initial_line_exits(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(
            json.dumps({"variation-config": {"initial-moves": "e2e4 e2e4"}})
        )

        with patch("opening_tree.cli.build_engine") as mock_build:
            with pytest.raises(SystemExit) as excinfo:
                main(["--config", str(config_path)])

        assert excinfo.value.code == 1
        mock_build.assert_not_called()

    def test_launch_failure_exits(self, tmp_path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"engine-path": str(tmp_path / "no-engine")}))

        with pytest.raises(SystemExit) as excinfo:
            main(["--config", str(config_path), "--no-progress"])

        assert excinfo.value.code == 1
        assert "Could not start engine" in capsys.readouterr().err

    def test_end_to_end(self, tmp_path, fake_engine_path):
        output_path = tmp_path / "lines.txt"
        config_path = tmp_path / "config.json"
        config_path.write_text(
            json.dumps(
                {
                    "engine-path": str(fake_engine_path),
                    "output-path": str(output_path),
                    "engine-settings": {"memory": 16, "threads": 1, "print-progress": True},
                    "variation-config": {
                        "initial-moves": "e2e4",
                        "engine-depth": 3,
                        "variation-depth": 2,
                        "is-white": False,
                    },
                }
            )
        )

        main(["--config", str(config_path), "--multipv", "2"])

        assert output_path.read_text().splitlines() == ["e2e4 a7a5 a2a3", "e2e4 a7a5 a2a4"]
