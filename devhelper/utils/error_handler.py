"""Centralized error handler for dev-helper commands."""

from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from devhelper.utils.exit_codes import ExitCodes
from devhelper.utils.logging import logger


class DevHelperError(Exception):
    """Base class for errors raised by dev-helper itself."""

    pass


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that keeps a diagnostic command from ever failing the caller.

    Unexpected errors are logged with full traceback through loguru (stderr),
    reported in one line on the console, and the command still exits 0.
    Nothing is written into the scanned directory.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Inner wrapper that implements the try-except logic."""
        try:
            return func(*args, **kwargs)
        except (click.exceptions.Exit, click.Abort, click.UsageError):
            raise
        except Exception as e:
            from devhelper.ui import print_error

            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=str(e),
            )
            print_error(f"{type(e).__name__}: {e}")
            print_error("The diagnostic run stopped early. Set DEV_HELPER_DEBUG=true for details.")
            return ExitCodes.SUCCESS

    return wrapper
