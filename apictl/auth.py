"""Credential resolution and HTTP Basic encoding."""

from __future__ import annotations

import base64
import getpass
import logging
import os

from apictl.config import MainConfig
from apictl.models import LOGGER_NAME, PASSWORD_ENV, USERNAME_ENV, Environment


def resolve_credentials(username: str | None, password: str | None) -> tuple[str, str]:
    """Flags win, then APICTL_USERNAME/APICTL_PASSWORD, then an interactive prompt."""
    try:
        username = username or os.environ.get(USERNAME_ENV) or input("Username: ").strip()
        password = password or os.environ.get(PASSWORD_ENV) or getpass.getpass("Password: ")
    except EOFError:
        username = password = ""
    if not username or not password:
        raise SystemExit("ERROR: Username and password are required.")
    return username, password


def encode_basic_credentials(username: str, password: str) -> str:
    return base64.b64encode(f"{username}:{password}".encode()).decode("ascii")


def execute_pre_command_with_basic_auth(
    config: MainConfig, environment: str | None, username: str | None, password: str | None
) -> tuple[str, Environment]:
    """Resolve the target environment and credentials shared by every remote command."""
    env = config.get_environment(environment)
    username, password = resolve_credentials(username, password)
    logging.getLogger(LOGGER_NAME).debug(f"Using environment '{env.name}' ({env.apim_endpoint}) as '{username}'")
    return encode_basic_credentials(username, password), env
