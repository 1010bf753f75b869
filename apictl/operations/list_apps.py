"""Application listing operation."""

from __future__ import annotations

import argparse

import requests

from apictl.models import OUTPUT_FORMATS, ActionResult
from apictl.operations.base import Operation, add_environment_arguments, print_listing, register_operation

APP_COLUMNS = [
    ("ID", "applicationId"),
    ("NAME", "name"),
    ("OWNER", "owner"),
    ("STATUS", "status"),
    ("GROUP ID", "groupId"),
]


@register_operation("list-apps")
class ListAppsOperation(Operation):
    """List applications in an environment, optionally only those of one owner."""

    target_type = "application"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--owner", default=None, help="Only list applications owned by this user")
        parser.add_argument("--format", dest="output_format", default="table", choices=OUTPUT_FORMATS)
        add_environment_arguments(parser)

    def run(self) -> ActionResult:
        try:
            apps = self.client.list_apps(owner=self.args.owner or "")["list"]
        except requests.HTTPError as e:
            return self._http_error(self.args.owner or "*", "listing Applications", e)

        print_listing(apps, APP_COLUMNS, self.args.output_format)
        return self._result(self.args.owner or "*", "listed", f"{len(apps)} applications")
