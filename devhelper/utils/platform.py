"""Platform-specific helpers. Nothing here spawns a process."""

import os
import platform
import tempfile
from pathlib import Path

IS_WINDOWS = platform.system() == "Windows"
IS_MAC = platform.system() == "Darwin"
IS_LINUX = platform.system() == "Linux"


def path_separator() -> str:
    return ";" if IS_WINDOWS else ":"


def venv_activate_command(venv_path: str = "venv") -> str:
    """Command a user types to activate a virtual environment."""
    if IS_WINDOWS:
        return f"{venv_path}\\Scripts\\activate"
    return f"source {venv_path}/bin/activate"


def copy_command(source: str, dest: str) -> str:
    if IS_WINDOWS:
        return f"copy {source} {dest}"
    return f"cp {source} {dest}"


def get_shell() -> str:
    if IS_WINDOWS:
        return os.environ.get("COMSPEC", "cmd.exe")
    return os.environ.get("SHELL", "/bin/sh")


def is_elevated() -> bool:
    """True when running as root/administrator."""
    if IS_WINDOWS:
        try:
            import ctypes

            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    return hasattr(os, "geteuid") and os.geteuid() == 0


def _total_memory_gb() -> str:
    try:
        pages = os.sysconf("SC_PHYS_PAGES")
        page_size = os.sysconf("SC_PAGE_SIZE")
        return f"{round(pages * page_size / (1024**3))} GB"
    except (AttributeError, ValueError, OSError):
        return "unknown"


def get_platform_info() -> dict[str, object]:
    """Platform facts for diagnostics."""
    return {
        "platform": platform.system().lower(),
        "arch": platform.machine(),
        "release": platform.release(),
        "version": platform.version() or "unknown",
        "python": platform.python_version(),
        "homedir": str(Path.home()),
        "tmpdir": tempfile.gettempdir(),
        "cpus": os.cpu_count() or 0,
        "memory": _total_memory_gb(),
        "shell": get_shell(),
        "elevated": is_elevated(),
    }
