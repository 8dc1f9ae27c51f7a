"""Version parsing and comparison for tool output."""

import re
from dataclasses import dataclass

_VERSION_PATTERNS = (
    re.compile(r"v?(\d+\.\d+\.\d+)"),
    re.compile(r"version\s+v?(\d+\.\d+\.\d+)", re.IGNORECASE),
    re.compile(r"v?(\d+\.\d+)"),
)


@dataclass(frozen=True)
class ParsedVersion:
    """A version split into numeric components."""

    major: int
    minor: int
    patch: int
    prerelease: str | None
    original: str

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)


def parse_version(version_str: str | None) -> ParsedVersion | None:
    """Parse "v18.17.0" or "3.11.4-rc1" into components."""
    if not version_str:
        return None

    cleaned = version_str.strip()
    cleaned = re.sub(r"^v", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"[^\d.\-a-z]", " ", cleaned, flags=re.IGNORECASE).split(" ")[0]

    match = re.match(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-(.+))?", cleaned)
    if not match:
        return None

    return ParsedVersion(
        major=int(match.group(1)),
        minor=int(match.group(2) or 0),
        patch=int(match.group(3) or 0),
        prerelease=match.group(4),
        original=version_str.strip(),
    )


def extract_version(output: str | None) -> str | None:
    """Pull the version number out of tool output like "Python 3.11.4"."""
    if not output:
        return None

    for pattern in _VERSION_PATTERNS:
        match = pattern.search(output)
        if match:
            return match.group(1)

    return None


def compare_versions(v1: str | None, v2: str | None) -> int:
    """Return -1, 0 or 1. Unparseable versions sort lowest."""
    parsed1 = parse_version(v1)
    parsed2 = parse_version(v2)

    if not parsed1 and not parsed2:
        return 0
    if not parsed1:
        return -1
    if not parsed2:
        return 1

    if parsed1.key == parsed2.key:
        return 0
    return 1 if parsed1.key > parsed2.key else -1


def meets_minimum(version: str | None, minimum: str) -> bool:
    return compare_versions(version, minimum) >= 0


def format_version(version: str | None) -> str:
    """Normalize a version for display."""
    parsed = parse_version(version)
    if not parsed:
        return version or "unknown"

    formatted = f"{parsed.major}.{parsed.minor}.{parsed.patch}"
    if parsed.prerelease:
        formatted += f"-{parsed.prerelease}"
    return formatted
