"""Environment management operations (main_config.yaml)."""

from __future__ import annotations

import argparse

from apictl.config import save_main_config
from apictl.models import ActionResult, Environment
from apictl.operations.base import Operation, register_operation


@register_operation("add-env")
class AddEnvOperation(Operation):
    """Add an API Manager environment to the configuration."""

    target_type = "environment"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-e", "--environment", required=True, help="Name of the environment to add")
        parser.add_argument("--apim", required=True, help="API Manager endpoint, e.g. https://localhost:9443")
        parser.add_argument("--token", default="", help="Token endpoint")
        parser.add_argument("--publisher", default="", help="Publisher REST endpoint (default: derived from --apim)")
        parser.add_argument("--devportal", default="", help="Devportal REST endpoint (default: derived from --apim)")
        parser.add_argument("--admin", default="", help="Admin REST endpoint (default: derived from --apim)")

    def run(self) -> ActionResult:
        name = self.args.environment
        env = Environment(
            name=name,
            apim_endpoint=self.args.apim,
            token_endpoint=self.args.token,
            publisher=self.args.publisher,
            devportal=self.args.devportal,
            admin=self.args.admin,
        )
        try:
            self.config.add_environment(env)
        except ValueError as e:
            print(f"Error adding environment: {e}")
            return self._result(name, "error", str(e), environment=name)

        save_main_config(self.config)
        print(f"Successfully added environment '{name}'")
        return self._result(name, "added", env.apim_endpoint, environment=name)


@register_operation("remove-env")
class RemoveEnvOperation(Operation):
    """Remove an API Manager environment from the configuration."""

    target_type = "environment"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-e", "--environment", required=True, help="Name of the environment to remove")

    def run(self) -> ActionResult:
        name = self.args.environment
        try:
            self.config.remove_environment(name)
        except ValueError as e:
            print(f"Error removing environment: {e}")
            return self._result(name, "error", str(e), environment=name)

        save_main_config(self.config)
        print(f"Successfully removed environment '{name}'")
        return self._result(name, "removed", environment=name)
