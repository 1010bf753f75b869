"""Application export operation."""

from __future__ import annotations

import argparse
import zipfile
from pathlib import Path

import requests

from apictl.archive import write_application_to_zip
from apictl.models import EXPORTED_APPS_DIR, ActionResult
from apictl.operations.base import Operation, add_bool_flag, add_environment_arguments, register_operation


@register_operation("export-app")
class ExportAppOperation(Operation):
    """Export an application from an environment as a zip archive."""

    target_type = "application"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-n", "--name", required=True, help="Name of the application to be exported")
        parser.add_argument("-o", "--owner", required=True, help="Owner of the application to be exported")
        add_bool_flag(parser, "--with-keys", "Export the application's keys as well")
        parser.add_argument("--format", default="", help="Format of the application definition (JSON or YAML)")
        add_environment_arguments(parser)

    def run(self) -> ActionResult:
        name, owner = self.args.name, self.args.owner
        target = f"{owner}/{name}"

        try:
            resp = self.client.export_app(name, owner, with_keys=bool(self.args.with_keys), format=self.args.format)
        except requests.HTTPError as e:
            return self._http_error(target, "exporting Application", e)

        location = Path(self.config.export_directory) / EXPORTED_APPS_DIR / self.environment_name
        try:
            archive = write_application_to_zip(name, owner, location, resp.content)
        except (OSError, zipfile.BadZipFile) as e:
            message = f"Error creating the final zip archive with application_meta.yaml file: {e}"
            print(message)
            return self._result(target, "error", message)

        print("Successfully exported Application!")
        print(f"Find the exported Application at {archive}")
        return self._result(target, "exported", str(archive))
