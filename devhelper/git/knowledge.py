"""Git error knowledge base, loaded from the YAML file shipped with the package."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from devhelper.utils.logging import logger

if TYPE_CHECKING:
    from devhelper.git.analyzer import RepositoryStatus

DEFAULT_DATA_FILE = Path(__file__).resolve().parent.parent / "data" / "git_errors.yaml"

CATEGORY_LABELS = {
    "git": "Git Error",
    "runtime": "Runtime Error",
    "build": "Build Error",
    "system": "System Error",
    "dependency": "Dependency Error",
    "config": "Configuration Error",
    "permission": "Permission Error",
    "unknown": "Unknown Error",
}

# Filled in when a rendering context does not provide a value
PLACEHOLDER_DEFAULTS = {
    "branch": "<branch>",
    "commit": "<commit>",
    "package_manager": "npm",
    "directory": ".",
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class GitError:
    """One known error state: how to recognize it and how to explain it."""

    id: str
    title: str
    explanation: str
    reason: str | None = None
    patterns: tuple[str, ...] = ()
    fixes: tuple[str, ...] = ()
    warning: str | None = None
    category: str = "unknown"

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS.get(self.category, "Error")

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        return any(pattern in lowered for pattern in self.patterns)

    def render(self, **context: str | None) -> GitError:
        """Copy with {placeholders} in the text filled from context."""
        values = dict(PLACEHOLDER_DEFAULTS)
        values.update({key: value for key, value in context.items() if value})

        def fill(text: str | None) -> str | None:
            if text is None:
                return None
            return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), text)

        return replace(
            self,
            explanation=fill(self.explanation),
            reason=fill(self.reason),
            fixes=tuple(fill(line) for line in self.fixes),
            warning=fill(self.warning),
        )


@dataclass
class KnowledgeBase:
    """Lazily loaded collection of GitError entries."""

    data_file: Path = DEFAULT_DATA_FILE
    _errors: list[GitError] = field(default_factory=list, init=False, repr=False)
    _loaded: bool = field(default=False, init=False, repr=False)

    def load(self) -> list[GitError]:
        if self._loaded:
            return self._errors

        with open(self.data_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or not isinstance(data.get("errors"), list):
            raise ValueError(f"Invalid knowledge base format in {self.data_file}")

        errors = []
        for entry in data["errors"]:
            try:
                errors.append(
                    GitError(
                        id=entry["id"],
                        title=entry["title"],
                        explanation=entry["explanation"],
                        reason=entry.get("reason"),
                        patterns=tuple(p.lower() for p in entry.get("patterns", [])),
                        fixes=tuple("" if line is None else str(line) for line in entry.get("fixes", [])),
                        warning=entry.get("warning"),
                        category=entry.get("category", "unknown"),
                    )
                )
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping invalid knowledge base entry in {}: {}", self.data_file, e)

        self._errors = errors
        self._loaded = True
        return self._errors

    def all_errors(self) -> list[GitError]:
        return list(self.load())

    def get(self, error_id: str) -> GitError | None:
        return next((e for e in self.load() if e.id == error_id), None)

    def categories(self) -> list[str]:
        seen: list[str] = []
        for error in self.load():
            if error.category and error.category not in seen:
                seen.append(error.category)
        return seen

    def match_error(self, text: str | None) -> GitError | None:
        """First entry with a pattern contained in the (pasted) error text."""
        if not text:
            return None
        return next((e for e in self.load() if e.matches(text)), None)

    def find_by_pattern(self, fragment: str) -> GitError | None:
        """First entry with a pattern that contains the fragment."""
        needle = fragment.lower()
        for error in self.load():
            if any(needle in pattern for pattern in error.patterns):
                return error
        return None

    def match_state(self, status: RepositoryStatus) -> GitError | None:
        """Map a repository status to the most pressing known condition."""
        if not status.is_repo:
            return self.find_by_pattern("not a git repository")
        if status.is_detached_head:
            return self.find_by_pattern("detached HEAD")
        if status.has_conflicts:
            return self.find_by_pattern("merge conflict")
        if status.is_rebase_in_progress:
            return self.find_by_pattern("rebase in progress")
        if status.is_merge_in_progress:
            return self.find_by_pattern("merge in progress")
        if status.is_cherry_pick_in_progress:
            return self.find_by_pattern("cherry-pick")
        if not status.has_upstream and status.branch:
            return self.find_by_pattern("no upstream branch")
        if status.ahead > 0 and status.behind > 0:
            return self.find_by_pattern("branches have diverged")
        return None

    def validate(self) -> list[str]:
        """Problems with the loaded entries (duplicate ids, missing patterns)."""
        problems = []
        ids = [e.id for e in self.load()]
        for error in self._errors:
            if ids.count(error.id) > 1:
                problems.append(f"Duplicate id: {error.id}")
            if not error.patterns:
                problems.append(f"No patterns for {error.id}")
            if not error.fixes:
                problems.append(f"No fixes for {error.id}")
        return problems


_default = KnowledgeBase()


def default_knowledge_base() -> KnowledgeBase:
    return _default


def match_error(text: str | None) -> GitError | None:
    return _default.match_error(text)


def match_state(status: RepositoryStatus) -> GitError | None:
    return _default.match_state(status)


def find_by_pattern(fragment: str) -> GitError | None:
    return _default.find_by_pattern(fragment)


def all_errors() -> list[GitError]:
    return _default.all_errors()


def categories() -> list[str]:
    return _default.categories()
