"""API listing operation."""

from __future__ import annotations

import argparse

import requests

from apictl.models import OUTPUT_FORMATS, ActionResult
from apictl.operations.base import Operation, add_environment_arguments, print_listing, register_operation

API_COLUMNS = [
    ("ID", "id"),
    ("NAME", "name"),
    ("VERSION", "version"),
    ("CONTEXT", "context"),
    ("STATUS", "lifeCycleStatus"),
    ("PROVIDER", "provider"),
]


@register_operation("list-apis")
class ListApisOperation(Operation):
    """List APIs in an environment."""

    target_type = "api"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-q", "--query", default="", help="Search query (e.g. 'name:PizzaShackAPI')")
        parser.add_argument("--format", dest="output_format", default="table", choices=OUTPUT_FORMATS)
        add_environment_arguments(parser)

    def run(self) -> ActionResult:
        try:
            apis = self.client.list_apis(query=self.args.query)
        except requests.HTTPError as e:
            return self._http_error(self.args.query or "*", "listing APIs", e)

        print_listing(apis["list"], API_COLUMNS, self.args.output_format)
        return self._result(self.args.query or "*", "listed", f"{apis['count']} APIs")
