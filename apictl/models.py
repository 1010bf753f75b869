"""Data models and constants for apictl."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PROJECT_NAME = "apictl"
LOGGER_NAME = "apictl"

API_IMPORT_EXPORT_PRODUCT = "api-import-export-2.6.0-v2"
PUBLISHER_REST_CONTEXT = "/api/am/publisher/v1"
DEVPORTAL_REST_CONTEXT = "/api/am/store/v1"
ADMIN_REST_CONTEXT = "/api/am/admin/v1"

HEADER_AUTHORIZATION = "Authorization"
HEADER_ACCEPT = "Accept"
HEADER_VALUE_AUTH_BASIC_PREFIX = "Basic"
HEADER_VALUE_APPLICATION_ZIP = "application/zip"
HEADER_VALUE_APPLICATION_JSON = "application/json"

META_FILE_API = "api_meta.yaml"
META_FILE_APPLICATION = "application_meta.yaml"

EXPORTED_APIS_DIR = "apis"
EXPORTED_APPS_DIR = "apps"

CONFIG_DIR_ENV = "APICTL_CONFIG_DIR"
DEFAULT_CONFIG_DIR_NAME = ".wso2apictl"
MAIN_CONFIG_FILE_NAME = "main_config.yaml"
DEFAULT_EXPORT_DIR_NAME = "exported"
DEFAULT_HTTP_TIMEOUT_MS = 10000

USERNAME_ENV = "APICTL_USERNAME"
PASSWORD_ENV = "APICTL_PASSWORD"

# Retry configuration (disabled unless --max-retries is given)
DEFAULT_MAX_RETRIES = 0
RETRY_BACKOFF_FACTOR = 0.5  # seconds
# 500 is reported as bad credentials by the platform, so it is never retried
RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

OUTPUT_FORMATS = ("table", "json", "jsonArray")

# ImportConfig attribute -> meta file key
IMPORT_CONFIG_KEYS = {
    "update": "update",
    "preserve_owner": "preserveOwner",
    "preserve_provider": "preserveProvider",
    "skip_subscriptions": "skipSubscriptions",
    "skip_keys": "skipKeys",
}


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class Environment:
    """An API Manager deployment the CLI can talk to."""

    name: str
    apim_endpoint: str
    token_endpoint: str = ""
    publisher: str = ""
    devportal: str = ""
    admin: str = ""

    @property
    def base_url(self) -> str:
        return self.apim_endpoint.rstrip("/")

    @property
    def import_export_endpoint(self) -> str:
        return f"{self.base_url}/{API_IMPORT_EXPORT_PRODUCT}"

    @property
    def publisher_endpoint(self) -> str:
        return (self.publisher or f"{self.base_url}{PUBLISHER_REST_CONTEXT}").rstrip("/")

    @property
    def devportal_endpoint(self) -> str:
        return (self.devportal or f"{self.base_url}{DEVPORTAL_REST_CONTEXT}").rstrip("/")

    @property
    def devportal_applications_endpoint(self) -> str:
        return f"{self.devportal_endpoint}/applications"

    @property
    def admin_endpoint(self) -> str:
        return (self.admin or f"{self.base_url}{ADMIN_REST_CONTEXT}").rstrip("/")

    def to_dict(self) -> dict:
        d = {"apim_endpoint": self.apim_endpoint}
        if self.token_endpoint:
            d["token_endpoint"] = self.token_endpoint
        if self.publisher:
            d["publisher_endpoint"] = self.publisher
        if self.devportal:
            d["devportal_endpoint"] = self.devportal
        if self.admin:
            d["admin_endpoint"] = self.admin
        return d

    @classmethod
    def from_dict(cls, name: str, data: dict) -> Environment:
        return cls(
            name=name,
            apim_endpoint=data.get("apim_endpoint", ""),
            token_endpoint=data.get("token_endpoint", ""),
            publisher=data.get("publisher_endpoint", ""),
            devportal=data.get("devportal_endpoint", ""),
            admin=data.get("admin_endpoint", ""),
        )



def _mapping(data: Any, where: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be a mapping, got {type(data).__name__}")
    return data


@dataclass
class ImportConfig:
    """Import options carried in a meta file. ``None`` means not specified."""

    update: bool | None = None
    preserve_owner: bool | None = None
    preserve_provider: bool | None = None
    skip_subscriptions: bool | None = None
    skip_keys: bool | None = None

    def to_dict(self) -> dict:
        return {
            yaml_key: getattr(self, attr)
            for attr, yaml_key in IMPORT_CONFIG_KEYS.items()
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> ImportConfig:
        data = _mapping(data, "deploy.import")
        return cls(**{attr: data.get(yaml_key) for attr, yaml_key in IMPORT_CONFIG_KEYS.items()})


@dataclass
class DeployConfig:
    import_config: ImportConfig = field(default_factory=ImportConfig)

    def to_dict(self) -> dict:
        return {"import": self.import_config.to_dict()}

    @classmethod
    def from_dict(cls, data: dict | None) -> DeployConfig:
        data = _mapping(data, "deploy")
        return cls(import_config=ImportConfig.from_dict(data.get("import")))


@dataclass
class MetaData:
    """Contents of ``api_meta.yaml`` / ``application_meta.yaml``."""

    name: str
    owner: str = ""
    version: str = ""
    deploy: DeployConfig = field(default_factory=DeployConfig)

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"name": self.name}
        if self.owner:
            d["owner"] = self.owner
        if self.version:
            d["version"] = self.version
        d["deploy"] = self.deploy.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict | None) -> MetaData:
        data = _mapping(data, "meta file")
        return cls(
            name=str(data.get("name", "")),
            owner=str(data.get("owner", "") or ""),
            version=str(data.get("version", "") or ""),
            deploy=DeployConfig.from_dict(data.get("deploy")),
        )


@dataclass
class ActionResult:
    """Result of a single command against an environment."""

    target_type: str
    target_name: str
    environment: str
    operation: str
    action: str  # "exported", "imported", "deleted", "listed", "added", "removed", "error"
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "target_type": self.target_type,
            "target_name": self.target_name,
            "environment": self.environment,
            "operation": self.operation,
            "action": self.action,
            "detail": self.detail,
        }
