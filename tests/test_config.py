"""Tests for configuration loading."""

import json

from dirkill.config import Config, load_config, save_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "config.json")
        assert config == Config()
        assert config.patterns == ["node_modules"]
        assert config.size_workers == 4

    def test_reads_values(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"patterns": ["target", ".venv"], "dry_run": True}))

        config = load_config(path)
        assert config.patterns == ["target", ".venv"]
        assert config.dry_run
        assert config.auto_size

    def test_invalid_json_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_config(path) == Config()

    def test_invalid_values_give_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"size_workers": 0}))
        assert load_config(path) == Config()


class TestSaveConfig:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = Config(patterns=["target"], ignore_patterns=[r"^\.git$"], refresh_interval=0.2)

        assert save_config(config, path)
        assert load_config(path) == config
