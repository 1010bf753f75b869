"""
apictl: A CLI tool for moving APIs and applications between API Manager environments.

Exports APIs and applications from one environment as zip archives (with an embedded
api_meta.yaml / application_meta.yaml describing import options) and imports them into another.

Environment:
    APICTL_CONFIG_DIR - Directory holding main_config.yaml (default: ~/.wso2apictl)
    APICTL_USERNAME   - Username used when --username is not given
    APICTL_PASSWORD   - Password used when --password is not given
"""

from apictl.cli import main

__version__ = "0.1.0"
__all__ = ["main", "__version__"]
