"""Shared test fixtures for apictl tests."""

import io
import logging
import sys
import zipfile
from pathlib import Path
from typing import Any

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from apictl.auth import encode_basic_credentials
from apictl.client import ApimClient
from apictl.config import MainConfig
from apictl.models import LOGGER_NAME, Environment

# Constants for use in tests - pytest makes conftest.py fixtures available,
# but these constants need to be imported directly from tests
MOCK_APIM_URL = "https://apim.example.com"


@pytest.fixture
def dev_environment() -> Environment:
    return Environment(name="dev", apim_endpoint=MOCK_APIM_URL)


@pytest.fixture
def mock_client(dev_environment):
    """ApimClient pointing at mock server."""
    return ApimClient(dev_environment, encode_basic_credentials("admin", "admin"))


@pytest.fixture
def main_config(tmp_path, dev_environment) -> MainConfig:
    """Config with a single 'dev' environment exporting under tmp_path."""
    return MainConfig(
        path=tmp_path / "main_config.yaml",
        export_directory=tmp_path / "exported",
        environments={"dev": dev_environment},
    )


@pytest.fixture
def zip_bytes():
    """Factory building an in-memory zip archive from {entry name: text content}."""

    def build(entries: dict[str, str]) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for name, content in entries.items():
                zf.writestr(name, content)
        return buf.getvalue()

    return build


@pytest.fixture
def exported_app_zip(zip_bytes) -> bytes:
    """Archive body as returned by the devportal application export endpoint."""
    return zip_bytes(
        {
            "admin-SampleApp/application.yaml": "type: application\ndata:\n  name: SampleApp\n",
            "admin-SampleApp/subscriptions.yaml": "[]\n",
        }
    )


@pytest.fixture
def sample_app() -> dict[str, Any]:
    """Sample application API response."""
    return {
        "applicationId": "7d4a1c3e-0000-4000-8000-000000000001",
        "name": "SampleApp",
        "owner": "admin",
        "status": "APPROVED",
        "groupId": "",
        "throttlingPolicy": "Unlimited",
        "subscriptionCount": 1,
    }


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers installed by main() so they never point at another test's captured stream."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
