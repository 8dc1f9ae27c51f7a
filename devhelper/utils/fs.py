"""Read-only filesystem helpers used by detectors and the explain engine.

Every helper swallows OS and decode errors and returns a neutral value:
an unreadable file is treated the same as a missing one.
"""

import json
import re
from pathlib import Path
from typing import Any


def _resolve(name: str | Path, base_dir: str | Path) -> Path:
    path = Path(name)
    return path if path.is_absolute() else Path(base_dir) / path


def file_exists(name: str | Path, base_dir: str | Path = ".") -> bool:
    try:
        return _resolve(name, base_dir).is_file()
    except OSError:
        return False


def directory_exists(name: str | Path, base_dir: str | Path = ".") -> bool:
    try:
        return _resolve(name, base_dir).is_dir()
    except OSError:
        return False


def path_exists(name: str | Path, base_dir: str | Path = ".") -> bool:
    try:
        return _resolve(name, base_dir).exists()
    except OSError:
        return False


def read_text(name: str | Path, base_dir: str | Path = ".") -> str | None:
    try:
        return _resolve(name, base_dir).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def read_json(name: str | Path, base_dir: str | Path = ".") -> Any | None:
    content = read_text(name, base_dir)
    if content is None:
        return None
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return None


def list_files(directory: str | Path = ".", pattern: str | None = None) -> list[str]:
    """Entry names in a directory, optionally filtered by a regex."""
    try:
        names = sorted(entry.name for entry in Path(directory).iterdir())
    except OSError:
        return []
    if pattern:
        regex = re.compile(pattern)
        return [name for name in names if regex.search(name)]
    return names


def find_files(names: list[str], base_dir: str | Path = ".") -> dict[str, bool]:
    return {name: file_exists(name, base_dir) for name in names}
