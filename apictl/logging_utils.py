"""Logging utilities for apictl.

Log output goes to stderr so that listings and archive paths printed on stdout
stay machine-readable. With ``--json`` every line on stderr is a JSON object:
plain log messages become ``{"level", "message"}`` objects and the outcome of
an operation is emitted as its ``ActionResult``.
"""

from __future__ import annotations

import json
import logging
import sys

from apictl.models import LOGGER_NAME, ActionResult

RESULT_ICONS = {
    "exported": "✓",
    "imported": "✓",
    "deleted": "✓",
    "added": "✓",
    "removed": "✓",
    "listed": "·",
    "error": "✗",
}


class StructuredFormatter(logging.Formatter):
    """Formatter that can emit JSON lines when configured."""

    def __init__(self, json_mode: bool = False, verbose: bool = False):
        super().__init__()
        self.json_mode = json_mode
        self.verbose = verbose

    def format(self, record: logging.LogRecord) -> str:
        result = getattr(record, "action_result", None)
        if self.json_mode:
            if result is not None:
                return json.dumps(result.to_dict())
            payload = {"level": record.levelname, "message": record.getMessage()}
            if self.verbose:
                payload["time"] = self.formatTime(record)
            if record.exc_info:
                payload["error"] = self.formatException(record.exc_info)
            return json.dumps(payload)

        line = f"[{record.levelname:<7}] {record.getMessage()}"
        if self.verbose:
            line = f"{self.formatTime(record, '%H:%M:%S')} {line}"
        return line


def setup_logging(json_mode: bool = False, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # main() may run more than once per process, keep a single handler
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(json_mode=json_mode, verbose=verbose))
    logger.addHandler(handler)
    return logger


def log_result(logger: logging.Logger, result: ActionResult) -> None:
    """Log the outcome of an operation; errors are logged at ERROR level."""
    level = logging.ERROR if result.action == "error" else logging.INFO
    icon = RESULT_ICONS.get(result.action, "?")
    detail = f" ({result.detail})" if result.detail else ""
    logger.log(
        level,
        f"{icon} [{result.target_type}] {result.target_name}@{result.environment}: "
        f"{result.operation} → {result.action}{detail}",
        extra={"action_result": result},
    )
