"""Application delete operation."""

from __future__ import annotations

import argparse

import requests

from apictl.models import ActionResult
from apictl.operations.base import Operation, add_environment_arguments, register_operation


@register_operation("delete-app")
class DeleteAppOperation(Operation):
    """Delete an application from an environment."""

    target_type = "application"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-n", "--name", required=True, help="Name of the application to be deleted")
        parser.add_argument("-o", "--owner", default=None, help="Owner of the application to be deleted")
        add_environment_arguments(parser)

    def run(self) -> ActionResult:
        name, owner = self.args.name, self.args.owner
        target = f"{owner}/{name}" if owner else name

        try:
            app = self.client.get_app_by_name(name, owner)
        except requests.HTTPError as e:
            return self._http_error(target, "finding Application", e)

        if app is None:
            message = f"Error deleting Application: '{target}' not found"
            print(message)
            return self._result(target, "error", message)

        try:
            self.client.delete_app(app["applicationId"])
        except requests.HTTPError as e:
            return self._http_error(target, "deleting Application", e)

        print(f"{name} Application deleted successfully!")
        return self._result(target, "deleted", app["applicationId"])
