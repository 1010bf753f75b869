"""Loading and saving of main_config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from apictl.models import (
    CONFIG_DIR_ENV,
    DEFAULT_CONFIG_DIR_NAME,
    DEFAULT_EXPORT_DIR_NAME,
    DEFAULT_HTTP_TIMEOUT_MS,
    MAIN_CONFIG_FILE_NAME,
    Environment,
)


def get_config_dir(override: str | None = None) -> Path:
    """Resolve the config directory: explicit override, then $APICTL_CONFIG_DIR, then ~/.wso2apictl."""
    if override:
        return Path(override).expanduser()
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / DEFAULT_CONFIG_DIR_NAME


def main_config_path(config_dir: Path) -> Path:
    return config_dir / MAIN_CONFIG_FILE_NAME


@dataclass
class MainConfig:
    """In-memory view of main_config.yaml."""

    path: Path
    export_directory: Path
    http_request_timeout: int = DEFAULT_HTTP_TIMEOUT_MS
    insecure: bool = False
    environments: dict[str, Environment] = field(default_factory=dict)

    def default_environment(self) -> str | None:
        """The only configured environment, if there is exactly one."""
        if len(self.environments) == 1:
            return next(iter(self.environments))
        return None

    def get_environment(self, name: str | None) -> Environment:
        name = name or self.default_environment()
        if not name:
            raise SystemExit("ERROR: No environment specified and no default environment is configured.")
        env = self.environments.get(name)
        if env is None:
            raise SystemExit(f"ERROR: Environment '{name}' not found in {self.path}")
        return env

    def add_environment(self, env: Environment) -> None:
        if env.name in self.environments:
            raise ValueError(f"Environment '{env.name}' already exists")
        self.environments[env.name] = env

    def remove_environment(self, name: str) -> Environment:
        if name not in self.environments:
            raise ValueError(f"Environment '{name}' not found")
        return self.environments.pop(name)

    def to_dict(self) -> dict:
        return {
            "config": {
                "export_directory": str(self.export_directory),
                "http_request_timeout": self.http_request_timeout,
                "insecure": self.insecure,
            },
            "environments": {name: env.to_dict() for name, env in self.environments.items()},
        }


def load_main_config(path: Path) -> MainConfig:
    """Read main_config.yaml. A missing file yields an empty config with defaults."""
    data: dict = {}
    if path.exists():
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    settings = data.get("config") or {}
    export_dir = settings.get("export_directory") or (path.parent / DEFAULT_EXPORT_DIR_NAME)
    environments = {
        name: Environment.from_dict(name, env_data or {})
        for name, env_data in (data.get("environments") or {}).items()
    }
    return MainConfig(
        path=path,
        export_directory=Path(export_dir).expanduser(),
        http_request_timeout=int(settings.get("http_request_timeout") or DEFAULT_HTTP_TIMEOUT_MS),
        insecure=bool(settings.get("insecure", False)),
        environments=environments,
    )


def save_main_config(config: MainConfig) -> None:
    config.path.parent.mkdir(parents=True, exist_ok=True)
    with open(config.path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
