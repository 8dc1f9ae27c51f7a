"""Command classifier - the allow/deny decision for every external command.

dev-helper is a read-only analyzer. It may run version queries, tool
existence probes and read-only git/docker introspection, and nothing else.

Classification is a pure function of the command string and two immutable
rule tables:

    1. DENY_LIST is scanned first. Any match refuses the command, even when
       an allow pattern would also match.
    2. ALLOW_LIST is scanned second. A full match permits the command.
    3. Everything else is refused.

Deny patterns are searched case-insensitively anywhere in the string. Allow
patterns must match the whole normalized string, case-sensitively, so that
flags such as ``python -V`` and ``python -v`` stay distinct.

The only shell-looking syntax ever accepted is a single trailing ``2>&1``
token. It is stripped during normalization and turned into a flag that
makes the executor merge stderr into stdout; commands are never handed to
a shell.
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass
from enum import Enum

from devhelper.utils.error_handler import DevHelperError

REASON_INVALID = "invalid command"
REASON_DANGEROUS = "matches dangerous pattern"
REASON_ALLOWED = "on allowlist"
REASON_NOT_ALLOWED = "not on allowlist"

STDERR_MERGE_TOKEN = "2>&1"

# Bare tool / ref names interpolated into probes
NAME = r"[\w-]+"
CONFIG_KEY = r"[\w.]+"


class RuleKind(Enum):
    """Classification carried by a rule."""

    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class CommandPattern:
    """An immutable classification rule."""

    regex: re.Pattern[str]
    kind: RuleKind
    description: str

    def matches(self, command: str) -> bool:
        if self.kind is RuleKind.ALLOW:
            return self.regex.fullmatch(command) is not None
        return self.regex.search(command) is not None


@dataclass(frozen=True)
class SafetyVerdict:
    """Outcome of one classification, with a reason for audit logging."""

    safe: bool
    reason: str


@dataclass(frozen=True)
class ParsedCommand:
    """An allowed command split into an argv list for a no-shell spawn."""

    argv: tuple[str, ...]
    merge_stderr: bool = False


class UnsafeCommandError(DevHelperError):
    """Raised when a caller insists on a command the classifier refuses."""

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Security violation: {reason}")


def deny(pattern: str, description: str) -> CommandPattern:
    return CommandPattern(re.compile(pattern, re.IGNORECASE), RuleKind.DENY, description)


def allow(pattern: str, description: str) -> CommandPattern:
    return CommandPattern(re.compile(pattern), RuleKind.ALLOW, description)


def _no_version_flag(tool: str, flags: tuple[str, ...]) -> CommandPattern:
    """Deny a runtime invoked with anything other than a bare version flag."""
    flag_alt = "|".join(f"(?-i:{re.escape(flag)})" for flag in flags)
    name = re.escape(tool)
    return deny(
        rf"(?:^\s*{name}\s*$)|(?:\b{name}\s+(?!(?:{flag_alt})\s*$))",
        f"{tool} invoked without a version flag",
    )


def _subcommands(tool: str, verbs: tuple[str, ...], description: str) -> CommandPattern:
    verb_alt = "|".join(re.escape(verb) for verb in verbs)
    return deny(rf"\b{re.escape(tool)}\s+(?:{verb_alt})(?=\s|$)", description)


def _programs(names: tuple[str, ...], description: str) -> CommandPattern:
    """Deny a program name in command position or after a path separator."""
    name_alt = "|".join(re.escape(name) for name in names)
    return deny(rf"(?:^|[\s/\\])(?:{name_alt})(?:\.exe)?(?=\s|$)", description)


DENY_LIST: tuple[CommandPattern, ...] = (
    # Shell metacharacters: chaining, piping, substitution, redirection
    deny(r"[;&|]", "command chaining or piping"),
    deny(r"[\r\n]", "multi-line command"),
    deny(r"\$", "variable expansion or command substitution"),
    deny(r"`", "backtick substitution"),
    deny(r"[<>]", "input or output redirection"),
    # Interpreters and runtimes without a version flag
    _no_version_flag("node", ("--version", "-v")),
    _no_version_flag("python", ("--version", "-V")),
    _no_version_flag("python3", ("--version", "-V")),
    _no_version_flag("py", ("--version", "-V")),
    _no_version_flag("java", ("--version", "-version")),
    _no_version_flag("php", ("--version", "-v")),
    _no_version_flag("ruby", ("--version", "-v")),
    _no_version_flag("perl", ("--version", "-v")),
    _no_version_flag("deno", ("--version",)),
    _no_version_flag("mvn", ("--version", "-v")),
    _no_version_flag("gradle", ("--version", "-v")),
    _no_version_flag("cmake", ("--version",)),
    _no_version_flag("make", ("--version",)),
    _no_version_flag("gcc", ("--version",)),
    _no_version_flag("clang", ("--version",)),
    deny(r"\bg\+\+\s+(?!--version\s*$)", "C++ compiler invocation"),
    deny(r"\bclang\+\+\s+(?!--version\s*$)", "C++ compiler invocation"),
    # JavaScript package managers
    _subcommands(
        "npm",
        ("install", "i", "ci", "add", "start", "run", "run-script", "exec", "test", "t",
         "build", "publish", "update", "uninstall", "link", "rebuild", "init", "audit", "pack"),
        "npm install/run/build/test",
    ),
    _programs(("npx", "pnpx", "bunx", "uvx"), "package runner"),
    _subcommands(
        "yarn",
        ("install", "add", "remove", "upgrade", "start", "run", "dev", "build", "test", "dlx", "exec"),
        "yarn install/run/build/test",
    ),
    deny(r"^\s*yarn\s*$", "bare yarn installs dependencies"),
    _subcommands(
        "pnpm",
        ("install", "i", "add", "remove", "update", "start", "run", "dev", "build", "test", "exec", "dlx"),
        "pnpm install/run/build/test",
    ),
    _subcommands(
        "bun",
        ("install", "i", "add", "remove", "run", "start", "dev", "build", "test", "x", "create"),
        "bun install/run/build/test",
    ),
    # Python package managers
    _subcommands("pip", ("install", "uninstall", "download", "wheel"), "pip install"),
    _subcommands("pip3", ("install", "uninstall", "download", "wheel"), "pip install"),
    _subcommands("poetry", ("install", "run", "add", "remove", "update", "build", "shell", "publish"), "poetry install/run"),
    _subcommands("pipenv", ("install", "run", "shell", "sync", "update", "uninstall"), "pipenv install/run"),
    _subcommands("conda", ("install", "run", "activate", "create", "update", "remove", "env"), "conda install/run"),
    _subcommands("uv", ("pip", "run", "sync", "add", "remove", "tool", "venv", "build"), "uv install/run"),
    # JVM build wrappers
    _programs(("gradlew", "gradlew.bat", "mvnw", "mvnw.cmd"), "build wrapper execution"),
    # Other ecosystems
    _subcommands("go", ("run", "build", "test", "install", "get", "generate", "mod", "clean", "work"), "go run/build/test"),
    _subcommands("cargo", ("run", "build", "test", "install", "fetch", "add", "remove", "update", "clean", "bench", "publish"), "cargo run/build/test"),
    _subcommands("dotnet", ("run", "build", "test", "restore", "publish", "tool", "add", "new", "clean", "watch"), ".NET run/build/test"),
    _subcommands("composer", ("install", "update", "require", "remove", "run", "run-script", "exec", "dump-autoload", "create-project"), "composer install/run"),
    _subcommands("flutter", ("run", "build", "pub", "create", "upgrade", "clean", "test"), "flutter run/build"),
    _subcommands("dart", ("run", "pub", "compile", "create", "test"), "dart run"),
    _subcommands("meson", ("setup", "compile", "install", "test"), "meson build"),
    _programs(("ninja",), "ninja build"),
    # Containers
    _subcommands(
        "docker",
        ("run", "start", "stop", "restart", "rm", "rmi", "kill", "compose", "build", "buildx", "exec",
         "pull", "push", "create", "cp", "commit", "load", "import", "system", "volume", "network",
         "image", "container", "swarm", "stack", "login"),
        "container run/build/compose",
    ),
    _subcommands(
        "docker-compose",
        ("up", "down", "run", "start", "stop", "restart", "build", "exec", "rm", "pull", "push", "create", "kill"),
        "container compose",
    ),
    _subcommands("podman", ("run", "start", "build", "exec", "compose", "rm", "pull"), "container run/build"),
    # Version-control writes and network operations
    _subcommands(
        "git",
        ("push", "pull", "fetch", "clone", "commit", "checkout", "switch", "reset", "clean", "merge",
         "rebase", "add", "rm", "mv", "init", "restore", "cherry-pick", "revert", "tag", "gc", "prune",
         "am", "apply", "submodule", "worktree", "update-ref", "filter-branch"),
        "git write operation",
    ),
    deny(r"\bgit\s+stash\s+(?!list\s*$)", "git stash write operation"),
    deny(r"\bgit\s+branch\s+-[dDmMcCf]", "git branch write operation"),
    deny(r"\bgit\s+remote\s+(?!-v\s*$)", "git remote write operation"),
    deny(
        r"\bgit\s+config\s+(?!--get\s|--global\s+(?:user\.name|user\.email|init\.defaultBranch)\s*$)",
        "git config write",
    ),
    # Destructive filesystem verbs
    _programs(
        ("rm", "rmdir", "del", "erase", "rd", "mv", "move", "ren", "cp", "copy", "xcopy", "robocopy",
         "mkdir", "md", "touch", "ln", "chmod", "chown", "truncate", "dd", "shred", "mkfs", "tee"),
        "filesystem modification",
    ),
    # Network fetches and remote shells
    _programs(("curl", "wget", "ssh", "scp", "sftp", "nc", "ncat", "telnet", "ftp", "rsync"), "network access"),
    # Privilege escalation
    _programs(("sudo", "su", "doas", "runas", "pkexec"), "privilege escalation"),
    # Nested shells and evaluators
    deny(r"\b(?:ba|z|k|da|fi|c|tc)?sh\s+-c\b", "nested shell execution"),
    deny(r"\b(?:powershell|pwsh)\b", "PowerShell execution"),
    deny(r"\bcmd(?:\.exe)?\s+/[ck]\b", "cmd.exe execution"),
    _programs(("eval", "exec", "xargs", "source", "env", "nohup", "timeout", "start"), "indirect execution"),
)


def _version_queries() -> tuple[CommandPattern, ...]:
    queries = {
        "git": ("--version",),
        "node": ("--version", "-v"),
        "npm": ("--version", "-v"),
        "yarn": ("--version",),
        "pnpm": ("--version",),
        "bun": ("--version",),
        "deno": ("--version",),
        "python": ("--version", "-V"),
        "python3": ("--version", "-V"),
        "pip": ("--version",),
        "pip3": ("--version",),
        "poetry": ("--version",),
        "pipenv": ("--version",),
        "conda": ("--version",),
        "java": ("--version", "-version"),
        "javac": ("--version", "-version"),
        "mvn": ("--version", "-v"),
        "gradle": ("--version", "-v"),
        "rustc": ("--version",),
        "cargo": ("--version",),
        "rustup": ("--version",),
        "dotnet": ("--version",),
        "php": ("--version", "-v"),
        "composer": ("--version",),
        "flutter": ("--version",),
        "dart": ("--version",),
        "docker": ("--version", "-v"),
        "docker-compose": ("--version",),
        "cmake": ("--version",),
        "make": ("--version",),
        "gcc": ("--version",),
        "g++": ("--version",),
        "clang": ("--version",),
        "clang++": ("--version",),
    }
    patterns = []
    for tool, flags in queries.items():
        flag_alt = "|".join(re.escape(flag) for flag in flags)
        patterns.append(allow(rf"{re.escape(tool)}\s+(?:{flag_alt})", f"{tool} version query"))
    return tuple(patterns)


ALLOW_LIST: tuple[CommandPattern, ...] = _version_queries() + (
    allow(r"go\s+version", "go version query"),
    allow(r"docker\s+version", "docker version query"),
    # Tool existence probes
    allow(rf"which\s+{NAME}", "tool existence probe (Unix)"),
    allow(rf"where\s+{NAME}", "tool existence probe (Windows)"),
    # Shell builtin: classification only, the executor probes with which/where
    allow(rf"command\s+-v\s+{NAME}", "tool existence probe (POSIX)"),
    # Git configuration reads
    allow(r"git\s+config\s+--global\s+(?:user\.name|user\.email|init\.defaultBranch)", "git config read"),
    allow(rf"git\s+config\s+--get\s+{CONFIG_KEY}", "git config read"),
    # Git status and branch introspection
    allow(r"git\s+status(?:\s+--porcelain|\s+-sb)?", "git status"),
    allow(r"git\s+branch\s+--show-current", "current branch"),
    allow(r"git\s+symbolic-ref\s+HEAD", "current branch ref"),
    allow(
        r"git\s+rev-parse\s+(?:--git-dir|--is-inside-work-tree|--show-toplevel|--short\s+HEAD|--abbrev-ref\s+HEAD)",
        "git rev-parse",
    ),
    allow(r"git\s+rev-parse\s+--abbrev-ref\s+--symbolic-full-name\s+@\{u\}", "upstream lookup"),
    allow(r"git\s+rev-list\s+--left-right\s+--count\s+HEAD\.\.\.@\{upstream\}", "ahead/behind count"),
    allow(r"git\s+diff\s+(?:--cached\s+)?--quiet", "git diff quiet"),
    allow(r"git\s+diff\s+--name-only(?:\s+--diff-filter=U)?", "git diff names"),
    allow(r"git\s+ls-files\s+(?:--others\s+--exclude-standard|-u)", "git ls-files"),
    allow(r"git\s+remote(?:\s+-v)?", "git remotes"),
    allow(r"git\s+stash\s+list", "git stash list"),
    allow(r'git\s+log\s+-1\s+--format="(?:%h %s|%H|%h)"', "last commit"),
    allow(r'git\s+reflog\s+-\d{1,2}\s+--format="%h %gd %gs"', "recent reflog"),
    # Docker daemon status
    allow(r"docker\s+(?:info|ps)", "docker daemon status"),
)


def normalize(command: str) -> tuple[str, bool]:
    """Strip whitespace and a single trailing ``2>&1`` token.

    Returns the remaining command and whether stderr should be merged.
    """
    stripped = command.strip()
    tokens = stripped.split()
    if len(tokens) > 1 and tokens[-1] == STDERR_MERGE_TOKEN:
        return stripped[: -len(STDERR_MERGE_TOKEN)].rstrip(), True
    return stripped, False


class CommandClassifier:
    """Allow/deny classifier over injected, immutable rule tables."""

    def __init__(
        self,
        deny_list: tuple[CommandPattern, ...] = DENY_LIST,
        allow_list: tuple[CommandPattern, ...] = ALLOW_LIST,
    ) -> None:
        self._deny_list = tuple(deny_list)
        self._allow_list = tuple(allow_list)

    @property
    def deny_list(self) -> tuple[CommandPattern, ...]:
        return self._deny_list

    @property
    def allow_list(self) -> tuple[CommandPattern, ...]:
        return self._allow_list

    def classify(self, command: object) -> SafetyVerdict:
        """Decide whether a command string may be executed."""
        if not isinstance(command, str) or not command.strip():
            return SafetyVerdict(False, REASON_INVALID)

        normalized, _ = normalize(command)

        for pattern in self._deny_list:
            if pattern.matches(normalized):
                return SafetyVerdict(False, REASON_DANGEROUS)

        for pattern in self._allow_list:
            if pattern.matches(normalized):
                return SafetyVerdict(True, REASON_ALLOWED)

        return SafetyVerdict(False, REASON_NOT_ALLOWED)

    def is_safe(self, command: object) -> bool:
        return self.classify(command).safe

    def matching_rule(self, command: object) -> CommandPattern | None:
        """The rule that decided the verdict, or None for invalid/default-deny."""
        if not isinstance(command, str) or not command.strip():
            return None
        normalized, _ = normalize(command)
        for pattern in self._deny_list + self._allow_list:
            if pattern.matches(normalized):
                return pattern
        return None

    def parse(self, command: str) -> ParsedCommand:
        """Classify, then split into argv. Raises UnsafeCommandError if refused."""
        verdict = self.classify(command)
        if not verdict.safe:
            raise UnsafeCommandError(command, verdict.reason)

        normalized, merge_stderr = normalize(command)
        try:
            argv = shlex.split(normalized)
        except ValueError as e:
            raise UnsafeCommandError(command, REASON_INVALID) from e
        if not argv:
            raise UnsafeCommandError(command, REASON_INVALID)
        return ParsedCommand(argv=tuple(argv), merge_stderr=merge_stderr)


DEFAULT_CLASSIFIER = CommandClassifier()


def classify(command: object) -> SafetyVerdict:
    """Classify against the built-in rule tables."""
    return DEFAULT_CLASSIFIER.classify(command)


def assert_command_safe(command: str) -> None:
    """Raise UnsafeCommandError unless the command is allowed."""
    verdict = classify(command)
    if not verdict.safe:
        raise UnsafeCommandError(command, verdict.reason)
