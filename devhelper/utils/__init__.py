"""dev-helper utilities package."""

from .error_handler import DevHelperError, handle_exceptions
from .exit_codes import ExitCodes
from .logging import audit_logger, logger

__all__ = [
    "DevHelperError",
    "ExitCodes",
    "audit_logger",
    "handle_exceptions",
    "logger",
]
