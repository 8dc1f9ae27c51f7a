"""Detector interface and check definitions.

Detectors may read files, list directories and query tool versions through
the guarded executor. They never build, install, start or modify anything;
commands they suggest are shown to the user as fixes, never run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Union, runtime_checkable

from devhelper.utils.version import extract_version

CHECK_SKIP = "skip"
CHECK_MANUAL = "manual"

CheckOutcome = Union[bool, str]
CheckFn = Callable[[Path, dict[str, Any]], CheckOutcome]
FixFn = Callable[[dict[str, Any], Path], Union[str, None]]


@dataclass(frozen=True)
class CheckDefinition:
    """One readiness check a detector proposes.

    ``check`` returns True/False, or CHECK_SKIP / CHECK_MANUAL when the check
    does not apply or needs a human. ``fix`` is a literal command or a
    callable building one from the analysis.
    """

    id: str
    name: str
    check: CheckFn
    fix: str | FixFn | None = None
    get_version: Callable[[], str | None] | None = None
    get_script: Callable[[Path], str | None] | None = None
    warning: str | None = None

    def resolve_fix(self, analysis: dict[str, Any], directory: Path) -> str | None:
        if callable(self.fix):
            return self.fix(analysis, directory)
        return self.fix


@runtime_checkable
class Detector(Protocol):
    """What the scan needs from a per-ecosystem detector."""

    name: str
    type: str
    config_files: tuple[str, ...]

    def detect(self, directory: Path) -> bool: ...

    def analyze(self, directory: Path) -> dict[str, Any]: ...

    def checks(self) -> list[CheckDefinition]: ...


@dataclass
class Detection:
    """A detector that matched, with its analysis and proposed checks."""

    detector: Detector
    analysis: dict[str, Any]
    checks: list[CheckDefinition] = field(default_factory=list)

    @property
    def type(self) -> str:
        return self.analysis.get("type", self.detector.type)


def version_of(executor, tool: str, flag: str = "--version") -> Callable[[], str | None]:
    """Build a get_version callable for a tool."""

    def _get() -> str | None:
        return extract_version(executor.tool_version(tool, flag))

    return _get
