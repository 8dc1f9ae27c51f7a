"""Runtime configuration for dev-helper - centralized configuration management.

Configuration tunes timeouts and output limits only. The command-safety
rule tables are not configurable here.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any

from devhelper.utils.logging import logger

CONFIG_FILE_NAME = ".dev-helper.json"

DEFAULTS = {
    "timeouts": {
        "command": 10.0,
        "probe": 5.0,
    },
    "output": {
        "max_fix_lines": 20,
        "reflog_entries": 10,
    },
}


def load_runtime_config(root: str | Path = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .dev-helper.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (DEV_HELPER_<SECTION>_<KEY>)
    2. <root>/.dev-helper.json
    3. Built-in defaults

    The file is only ever read. Values whose type does not match the
    default are ignored.
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / CONFIG_FILE_NAME
    try:
        if path.is_file():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and _same_kind(value, cfg[section][key]):
                                cfg[section][key] = type(cfg[section][key])(value)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config file from {}: {}", path, e)

    for section in cfg:
        for key in cfg[section]:
            env_var = f"DEV_HELPER_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                default_value = cfg[section][key]
                try:
                    if isinstance(default_value, bool):
                        cfg[section][key] = value.strip().lower() in ("true", "1", "yes", "on")
                    elif isinstance(default_value, int):
                        cfg[section][key] = int(value)
                    elif isinstance(default_value, float):
                        cfg[section][key] = float(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning(
                        "Invalid value for environment variable {}: '{}' - {}", env_var, value, e
                    )

    for key in cfg["timeouts"]:
        if cfg["timeouts"][key] <= 0:
            logger.warning("Non-positive {} timeout ignored", key)
            cfg["timeouts"][key] = DEFAULTS["timeouts"][key]

    for key in cfg["output"]:
        if cfg["output"][key] < 1:
            logger.warning("output.{} must be at least 1, using {}", key, DEFAULTS["output"][key])
            cfg["output"][key] = DEFAULTS["output"][key]

    return cfg


def _same_kind(value: Any, default: Any) -> bool:
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, type(default)) and not isinstance(value, bool)
