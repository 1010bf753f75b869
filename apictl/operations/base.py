"""Base class and registry for operations."""

from __future__ import annotations

import argparse
import json
import logging
from abc import ABC, abstractmethod

import requests

from apictl.auth import execute_pre_command_with_basic_auth
from apictl.client import ApimClient
from apictl.config import MainConfig
from apictl.logging_utils import log_result
from apictl.models import LOGGER_NAME, ActionResult

# ---------------------------------------------------------------------------
# Operation Registry
# ---------------------------------------------------------------------------

_operation_registry: dict[str, type[Operation]] = {}


def register_operation(name: str):
    """Decorator to register an operation class under a CLI subcommand name."""

    def decorator(cls):
        _operation_registry[name] = cls
        cls.operation_name = name
        return cls

    return decorator


def get_operation_registry() -> dict[str, type[Operation]]:
    """Get the operation registry."""
    return _operation_registry


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def str_to_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def add_bool_flag(parser: argparse.ArgumentParser, flag: str, help: str) -> None:
    """Add a flag usable as ``--flag``, ``--flag=true`` or ``--flag=false``. Unset stays None."""
    parser.add_argument(flag, nargs="?", const=True, default=None, type=str_to_bool, metavar="BOOL", help=help)


def add_environment_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-e",
        "--environment",
        default=None,
        help="Environment to use (default: the only configured environment)",
    )
    parser.add_argument("-u", "--username", default=None, help="Username (default: $APICTL_USERNAME or prompt)")
    parser.add_argument("-p", "--password", default=None, help="Password (default: $APICTL_PASSWORD or prompt)")


def resolve_option(explicit: bool | None, from_meta: bool | None, default: bool = False) -> bool:
    """Command-line value wins over the meta file, which wins over the default."""
    if explicit is not None:
        return explicit
    if from_meta is not None:
        return from_meta
    return default


# ---------------------------------------------------------------------------
# Operation Base Class
# ---------------------------------------------------------------------------


class Operation(ABC):
    """Base class for all operations."""

    operation_name: str = ""
    target_type: str = ""

    def __init__(self, config: MainConfig, args: argparse.Namespace, client: ApimClient | None = None):
        self.config = config
        self.args = args
        self.logger = logging.getLogger(LOGGER_NAME)
        self.results: list[ActionResult] = []
        self._client = client

    @staticmethod
    @abstractmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add operation-specific CLI arguments."""
        ...

    @abstractmethod
    def run(self) -> ActionResult:
        """Execute the operation once."""
        ...

    @property
    def client(self) -> ApimClient:
        if self._client is None:
            self._client = self.connect()
        return self._client

    @property
    def environment_name(self) -> str:
        if self._client is not None:
            return self._client.environment.name
        return getattr(self.args, "environment", None) or self.config.default_environment() or ""

    def connect(self) -> ApimClient:
        """Build a client for the requested environment, authenticating with Basic credentials."""
        credentials, env = execute_pre_command_with_basic_auth(
            self.config,
            getattr(self.args, "environment", None),
            getattr(self.args, "username", None),
            getattr(self.args, "password", None),
        )
        insecure = getattr(self.args, "insecure", False) or self.config.insecure
        if insecure:
            self.logger.debug("TLS verification disabled")
        return ApimClient(
            env,
            credentials,
            timeout_ms=self.config.http_request_timeout,
            verify=not insecure,
            max_retries=getattr(self.args, "max_retries", 0),
        )

    def _result(self, target_name: str, action: str, detail: str = "", environment: str | None = None) -> ActionResult:
        return self._record(
            ActionResult(
                target_type=self.target_type,
                target_name=target_name,
                environment=environment if environment is not None else self.environment_name,
                operation=self.operation_name,
                action=action,
                detail=detail,
            )
        )

    def _http_error(self, target_name: str, doing: str, error: requests.HTTPError) -> ActionResult:
        """Report a failed request: 500 means bad credentials, anything else is shown as-is."""
        resp = error.response
        if resp is not None and resp.status_code == 500:
            message = "Incorrect password"
        elif resp is not None:
            message = f"Error {doing}: {resp.status_code} {resp.reason}"
        else:
            message = f"Error {doing}: {error}"
        print(message)
        return self._result(target_name, "error", message)

    def _record(self, result: ActionResult) -> ActionResult:
        self.results.append(result)
        log_result(self.logger, result)
        return result


def print_listing(items: list[dict], columns: list[tuple[str, str]], output_format: str = "table") -> None:
    """Print items as an aligned table, JSON lines, or an indented JSON array.

    ``columns`` is a list of (header, key) pairs used by the table format.
    """
    if output_format == "jsonArray":
        print(json.dumps(items, indent=1))
        return
    if output_format == "json":
        for item in items:
            print(json.dumps(item))
        return

    rows = [[str(item.get(key, "")) for _, key in columns] for item in items]
    headers = [header for header, _ in columns]
    widths = [max([len(headers[i])] + [len(row[i]) for row in rows]) for i in range(len(headers))]
    print("   ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip())
    for row in rows:
        print("   ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())
