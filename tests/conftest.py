"""Pytest configuration and fixtures."""
import json
import subprocess
from pathlib import Path

import pytest

from devhelper.safety.executor import GuardedExecutor


class FakeSpawn:
    """Stand-in for subprocess.run that records every call.

    Responses are keyed by the space-joined argv. A response is either a
    (returncode, stdout, stderr) tuple or an exception instance to raise.
    Unknown commands get ``default``.
    """

    def __init__(self, responses=None, default=(1, "", "")):
        self.responses = dict(responses or {})
        self.default = default
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        response = self.responses.get(" ".join(argv), self.default)
        if isinstance(response, BaseException):
            raise response
        returncode, stdout, stderr = response
        return subprocess.CompletedProcess(argv, returncode, stdout, stderr)

    @property
    def commands(self):
        return [" ".join(argv) for argv, _ in self.calls]


def snapshot_tree(root: Path) -> dict:
    """Map of relative path -> bytes (None for directories)."""
    tree = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        tree[rel] = None if path.is_dir() else path.read_bytes()
    return tree


@pytest.fixture
def fake_spawn():
    return FakeSpawn()


@pytest.fixture
def executor(fake_spawn):
    return GuardedExecutor(spawn=fake_spawn)


@pytest.fixture
def node_project(tmp_path):
    """A bare Node.js project: package.json and nothing else."""
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "demo-app", "version": "1.0.0", "scripts": {"start": "node index.js"}}),
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's own dev-helper settings out of the tests."""
    for var in (
        "DEV_HELPER_TIMEOUTS_COMMAND",
        "DEV_HELPER_TIMEOUTS_PROBE",
        "DEV_HELPER_OUTPUT_MAX_FIX_LINES",
        "DEV_HELPER_OUTPUT_REFLOG_ENTRIES",
    ):
        monkeypatch.delenv(var, raising=False)
