"""Tests for runtime configuration loading."""

import json

from devhelper.config_runtime import CONFIG_FILE_NAME, DEFAULTS, load_runtime_config


def write_config(root, data):
    (root / CONFIG_FILE_NAME).write_text(json.dumps(data), encoding="utf-8")


class TestRuntimeConfig:
    def test_defaults(self, tmp_path):
        cfg = load_runtime_config(tmp_path)
        assert cfg == DEFAULTS
        assert cfg is not DEFAULTS
        assert cfg["timeouts"]["command"] == 10.0

    def test_file_overrides(self, tmp_path):
        write_config(tmp_path, {"timeouts": {"command": 30}, "output": {"max_fix_lines": 5}})
        cfg = load_runtime_config(tmp_path)
        assert cfg["timeouts"]["command"] == 30.0
        assert isinstance(cfg["timeouts"]["command"], float)
        assert cfg["output"]["max_fix_lines"] == 5
        assert cfg["timeouts"]["probe"] == 5.0

    def test_wrong_types_and_unknown_keys_ignored(self, tmp_path):
        write_config(
            tmp_path,
            {"output": {"max_fix_lines": "many", "colour": "red"}, "safety": {"allow": [".*"]}},
        )
        cfg = load_runtime_config(tmp_path)
        assert cfg["output"]["max_fix_lines"] == 20
        assert "colour" not in cfg["output"]
        assert "safety" not in cfg

    def test_malformed_file(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("{not json", encoding="utf-8")
        assert load_runtime_config(tmp_path) == DEFAULTS

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        write_config(tmp_path, {"output": {"max_fix_lines": 5}})
        monkeypatch.setenv("DEV_HELPER_OUTPUT_MAX_FIX_LINES", "8")
        monkeypatch.setenv("DEV_HELPER_TIMEOUTS_PROBE", "2.5")
        cfg = load_runtime_config(tmp_path)
        assert cfg["output"]["max_fix_lines"] == 8
        assert cfg["timeouts"]["probe"] == 2.5

    def test_invalid_env_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DEV_HELPER_TIMEOUTS_COMMAND", "soon")
        assert load_runtime_config(tmp_path)["timeouts"]["command"] == 10.0

    def test_non_positive_timeout_reset(self, tmp_path):
        write_config(tmp_path, {"timeouts": {"command": -1, "probe": 0}})
        cfg = load_runtime_config(tmp_path)
        assert cfg["timeouts"]["command"] == 10.0
        assert cfg["timeouts"]["probe"] == 5.0

    def test_output_limits_below_one_reset(self, tmp_path, monkeypatch):
        write_config(tmp_path, {"output": {"max_fix_lines": -1, "reflog_entries": 0}})
        cfg = load_runtime_config(tmp_path)
        assert cfg["output"] == DEFAULTS["output"]

        monkeypatch.setenv("DEV_HELPER_OUTPUT_MAX_FIX_LINES", "-3")
        assert load_runtime_config(tmp_path)["output"]["max_fix_lines"] == 20

    def test_loading_never_writes(self, tmp_path):
        load_runtime_config(tmp_path)
        assert list(tmp_path.iterdir()) == []
