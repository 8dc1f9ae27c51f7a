"""Centralized logging configuration using Loguru with Pino-compatible output.

All log output goes to stderr (or an explicit log file). stdout is reserved
for the report a user asked for, so diagnostics never mix into it.

Usage:
    from devhelper.utils.logging import logger
    logger.warning("Message")
    logger.debug("Debug message")  # Only shows if DEV_HELPER_LOG_LEVEL=DEBUG

Environment Variables:
    DEV_HELPER_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: WARNING)
    DEV_HELPER_LOG_JSON: 0|1 (default: 0, human-readable)
    DEV_HELPER_LOG_FILE: path to log file (optional)
    DEV_HELPER_DEBUG: true|1 forces DEBUG and shows blocked-command audit records
    DEV_HELPER_REQUEST_ID: correlation ID for tracing
"""

import json
import os
import sys
import uuid

from loguru import logger

logger.remove()

PINO_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

AUDIT_CHANNEL = "safety"


def is_debug_enabled() -> bool:
    """Return True when DEV_HELPER_DEBUG asks for audit output."""
    return os.environ.get("DEV_HELPER_DEBUG", "").strip().lower() in ("true", "1", "yes", "on")


_log_level = "DEBUG" if is_debug_enabled() else os.environ.get("DEV_HELPER_LOG_LEVEL", "WARNING").upper()
_json_mode = os.environ.get("DEV_HELPER_LOG_JSON", "0") == "1"
_log_file = os.environ.get("DEV_HELPER_LOG_FILE")
_request_id = os.environ.get("DEV_HELPER_REQUEST_ID") or str(uuid.uuid4())


def _pino_record(record) -> dict:
    pino_log = {
        "level": PINO_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "pid": record["process"].id,
        "request_id": record["extra"].get("request_id", _request_id),
    }

    for key, value in record["extra"].items():
        if key not in ("request_id",):
            pino_log[key] = value

    if record["exception"]:
        pino_log["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }

    return pino_log


def pino_compatible_sink(message):
    """Format log records as Pino-compatible NDJSON on stderr.

    {"level":30,"time":1715629847123,"msg":"...","pid":12345,"request_id":"..."}
    """
    # Never call logger.* inside a sink: infinite recursion
    sys.stderr.write(json.dumps(_pino_record(message.record), default=str) + "\n")
    sys.stderr.flush()


# No emojis - Windows CP1252 compatibility
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")
logger.level("CRITICAL", color="<red><bold>")

if _json_mode:
    logger.add(
        pino_compatible_sink,
        level=_log_level,
        colorize=False,
    )
else:
    logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,
    )

if _log_file:

    def _file_pino_sink(message):
        """Write Pino-format JSON to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(_pino_record(message.record), default=str) + "\n")

    logger.add(
        _file_pino_sink,
        level="DEBUG",
    )


def get_request_id() -> str:
    """Get the current request ID for correlation."""
    return _request_id


audit_logger = logger.bind(channel=AUDIT_CHANNEL)


__all__ = [
    "AUDIT_CHANNEL",
    "audit_logger",
    "get_request_id",
    "is_debug_enabled",
    "logger",
]
