"""API export operation."""

from __future__ import annotations

import argparse
import zipfile

import requests

from apictl.archive import write_api_to_zip
from apictl.models import ActionResult
from apictl.operations.base import Operation, add_environment_arguments, register_operation


@register_operation("export-api")
class ExportApiOperation(Operation):
    """Export an API from an environment as a zip archive."""

    target_type = "api"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-n", "--name", required=True, help="Name of the API to be exported")
        parser.add_argument("-v", "--version", required=True, help="Version of the API to be exported")
        parser.add_argument("-r", "--provider", default="", help="Provider of the API")
        add_environment_arguments(parser)

    def run(self) -> ActionResult:
        name, version = self.args.name, self.args.version
        target = f"{name}:{version}"

        try:
            resp = self.client.export_api(name, version, self.args.provider)
        except requests.HTTPError as e:
            return self._http_error(target, "exporting API", e)

        try:
            archive = write_api_to_zip(name, version, self.environment_name, resp.content, self.config.export_directory)
        except (OSError, zipfile.BadZipFile) as e:
            message = f"Error creating zip archive: {e}"
            print(message)
            return self._result(target, "error", message)

        print("Successfully exported API!")
        print(f"Find the exported API at {archive}")

        # only to report the number of APIs matching the exported name
        try:
            count = self.client.list_apis(query=name)["count"]
        except requests.HTTPError as e:
            # export already succeeded; report the listing failure as-is
            message = f"Error getting list of APIs: {e}"
            print(message)
            return self._result(target, "error", message)
        print("Number of APIs exported:", count)

        return self._result(target, "exported", str(archive))
