"""Fixtures for tests that run apictl against two live API Manager environments.

Set APICTL_IT_DEV_APIM and APICTL_IT_PROD_APIM to the base URLs of the two
environments to enable them; every test here is skipped otherwise.
Tenant users are built as <user>@<tenant> from APICTL_IT_TENANT (default: wso2.com).
"""

import os

import pytest

from .apim import Client
from .base import Apictl
from .testutils import Credentials

DEV_ENV_NAME = "development"
PROD_ENV_NAME = "production"
DEFAULT_TENANT = "wso2.com"


def _credentials(prefix: str, default_user: str) -> Credentials:
    username = os.environ.get(f"APICTL_IT_{prefix}_USERNAME", default_user)
    password = os.environ.get(f"APICTL_IT_{prefix}_PASSWORD", username)
    return Credentials(username, password)


def _environment(env_name: str, url_var: str) -> Client:
    apim_url = os.environ.get(url_var)
    if not apim_url:
        pytest.skip(f"{url_var} is not set")
    return Client(env_name, apim_url, os.environ.get(f"{url_var}_TOKEN", ""))


@pytest.fixture
def dev():
    client = _environment(DEV_ENV_NAME, "APICTL_IT_DEV_APIM")
    yield client
    client.cleanup()


@pytest.fixture
def prod():
    client = _environment(PROD_ENV_NAME, "APICTL_IT_PROD_APIM")
    yield client
    client.cleanup()


@pytest.fixture
def ctl(tmp_path):
    apictl = Apictl(tmp_path / "apictl")
    yield apictl
    apictl.cleanup()


@pytest.fixture
def admin_user() -> Credentials:
    return _credentials("ADMIN", "admin")


@pytest.fixture
def subscriber_user() -> Credentials:
    return _credentials("SUBSCRIBER", "subscriber")


@pytest.fixture
def devops_user() -> Credentials:
    return _credentials("DEVOPS", "devops")


@pytest.fixture
def tenant() -> str:
    return os.environ.get("APICTL_IT_TENANT", DEFAULT_TENANT)


def _tenant_user(user: Credentials, tenant: str) -> Credentials:
    return Credentials(f"{user.username}@{tenant}", user.password)


@pytest.fixture
def tenant_admin_user(admin_user, tenant) -> Credentials:
    return _tenant_user(admin_user, tenant)


@pytest.fixture
def tenant_subscriber_user(subscriber_user, tenant) -> Credentials:
    return _tenant_user(subscriber_user, tenant)


@pytest.fixture
def tenant_devops_user(devops_user, tenant) -> Credentials:
    return _tenant_user(devops_user, tenant)
