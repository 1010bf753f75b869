"""Test-side REST helper for preparing and inspecting an API Manager environment."""

from __future__ import annotations

import base64
import copy
import logging
import uuid
from typing import Any, Callable

import requests

logger = logging.getLogger("apictl.integration")

DEVPORTAL_CONTEXT = "/api/am/store/v1"

UNLIMITED_POLICY = "Unlimited"
PRODUCTION_KEY_TYPE = "PRODUCTION"
SANDBOX_KEY_TYPE = "SANDBOX"
GRANT_TYPES_TO_BE_SUPPORTED = ["refresh_token", "password", "client_credentials"]
DEFAULT_TOKEN_VALIDITY_PERIOD = 3600

# Fields of an application / subscription that take part in cross-environment comparisons
APPLICATION_FIELDS = (
    "applicationId",
    "name",
    "throttlingPolicy",
    "description",
    "tokenType",
    "status",
    "groups",
    "subscriptionCount",
    "keys",
    "attributes",
    "subscriptionScopes",
    "owner",
    "hashEnabled",
)
SUBSCRIPTION_FIELDS = (
    "subscriptionId",
    "applicationId",
    "apiId",
    "throttlingPolicy",
    "requestedThrottlingPolicy",
    "status",
    "redirectionParams",
)


def copy_app(app: dict[str, Any]) -> dict[str, Any]:
    """Deep copy of the comparable part of an application."""
    return {key: copy.deepcopy(app.get(key)) for key in APPLICATION_FIELDS}


def copy_subscription(subscription: dict[str, Any]) -> dict[str, Any]:
    return {key: copy.deepcopy(subscription.get(key)) for key in SUBSCRIPTION_FIELDS}


class Client:
    """Devportal REST client for one environment, used to set up and verify test data."""

    def __init__(self, env_name: str, apim_url: str, token_url: str = "", verify: bool = False):
        self.env_name = env_name
        self.apim_url = apim_url.rstrip("/")
        self.token_url = token_url
        self.devportal_url = f"{self.apim_url}{DEVPORTAL_CONTEXT}"
        self.session = requests.Session()
        self.session.verify = verify
        self._cleanups: list[Callable[[], None]] = []

    def get_env_name(self) -> str:
        return self.env_name

    def get_apim_url(self) -> str:
        return self.apim_url

    def get_token_url(self) -> str:
        return self.token_url

    def login(self, username: str, password: str) -> None:
        credentials = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
        self.session.headers["Authorization"] = f"Basic {credentials}"

    def cleanup(self) -> None:
        """Run registered cleanups, most recent first."""
        while self._cleanups:
            action = self._cleanups.pop()
            try:
                action()
            except requests.RequestException as e:
                logger.warning(f"Cleanup failed on {self.env_name}: {e}")

    def _call(self, method: str, path: str, **kwargs) -> requests.Response:
        resp = self.session.request(method, f"{self.devportal_url}{path}", **kwargs)
        resp.raise_for_status()
        return resp

    # -- Applications --

    @staticmethod
    def generate_sample_app_data() -> dict[str, Any]:
        return {
            "name": f"app-{uuid.uuid4().hex[:12]}",
            "throttlingPolicy": UNLIMITED_POLICY,
            "description": "Sample application created by the apictl integration tests",
            "tokenType": "JWT",
            "groups": [],
            "attributes": {},
        }

    @classmethod
    def generate_sample_app_with_name_in_space_data(cls) -> dict[str, Any]:
        app = cls.generate_sample_app_data()
        app["name"] = app["name"].replace("-", " app ")
        return app

    def add_application(self, app: dict, username: str, password: str, do_clean: bool) -> dict:
        self.login(username, password)
        created = self._call("POST", "/applications", json=app).json()
        if do_clean:
            app_id = created["applicationId"]

            def delete() -> None:
                self.login(username, password)
                self.delete_application(app_id)

            self._cleanups.append(delete)
        return created

    def get_application(self, app_id: str) -> dict:
        return self._call("GET", f"/applications/{app_id}").json()

    def get_applications(self) -> dict:
        return self._call("GET", "/applications", params={"limit": 1000}).json()

    def get_application_by_name(self, name: str) -> dict:
        for app in self._call("GET", "/applications", params={"query": name}).json().get("list", []):
            if app["name"] == name:
                return app
        raise LookupError(f"Application '{name}' not found in {self.env_name}")

    def delete_application(self, app_id: str) -> None:
        self._call("DELETE", f"/applications/{app_id}")

    def delete_application_by_name(self, name: str) -> None:
        try:
            app = self.get_application_by_name(name)
        except LookupError:
            return
        self.delete_application(app["applicationId"])

    # -- Keys --

    def generate_keys(self, app_id: str, key_type: str) -> dict:
        body = {
            "keyType": key_type,
            "grantTypesToBeSupported": GRANT_TYPES_TO_BE_SUPPORTED,
            "validityTime": DEFAULT_TOKEN_VALIDITY_PERIOD,
        }
        return self._call("POST", f"/applications/{app_id}/generate-keys", json=body).json()

    def get_oauth_keys(self, application: dict) -> dict:
        return self._call("GET", f"/applications/{application['applicationId']}/oauth-keys").json()

    # -- Subscriptions --

    def find_api_id(self, name: str, version: str) -> str | None:
        apis = self._call("GET", "/apis", params={"query": f"name:{name}"}).json().get("list", [])
        for api in apis:
            if api["name"] == name and api["version"] == version:
                return api["id"]
        return None

    def add_subscription(self, app_id: str, api_id: str, policy: str = UNLIMITED_POLICY) -> dict:
        body = {"applicationId": app_id, "apiId": api_id, "throttlingPolicy": policy}
        return self._call("POST", "/subscriptions", json=body).json()

    def get_application_subscriptions(self, app_id: str) -> dict:
        return self._call("GET", "/subscriptions", params={"applicationId": app_id, "limit": 1000}).json()
