"""API import operation."""

from __future__ import annotations

import argparse
import shutil
import zipfile
from pathlib import Path

import requests
import yaml

from apictl.archive import read_meta_file, zip_directory
from apictl.models import META_FILE_API, ActionResult, ImportConfig
from apictl.operations.base import (
    Operation,
    add_bool_flag,
    add_environment_arguments,
    register_operation,
    resolve_option,
)


@register_operation("import-api")
class ImportApiOperation(Operation):
    """Import an exported API archive (zip or extracted directory) into an environment."""

    target_type = "api"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-f", "--file", required=True, help="Zip archive or directory of the API")
        add_bool_flag(parser, "--preserve-provider", "Keep the original provider (default: true)")
        add_bool_flag(parser, "--update", "Overwrite the API if it already exists")
        add_environment_arguments(parser)

    def run(self) -> ActionResult:
        path = Path(self.args.file)
        if not path.exists():
            message = f"Error importing API: {path} does not exist"
            print(message)
            return self._result(path.name, "error", message)

        try:
            meta = read_meta_file(path, META_FILE_API)
            upload = zip_directory(path) if path.is_dir() else path
        except (OSError, zipfile.BadZipFile, yaml.YAMLError, ValueError) as e:
            message = f"Error reading API archive: {e}"
            print(message)
            return self._result(path.name, "error", message)

        options = meta.deploy.import_config if meta else ImportConfig()
        preserve_provider = resolve_option(self.args.preserve_provider, options.preserve_provider, default=True)
        update = resolve_option(self.args.update, options.update)
        target = f"{meta.name}:{meta.version}" if meta and meta.name else path.stem

        try:
            self.client.import_api(str(upload), preserve_provider=preserve_provider, update=update)
        except requests.HTTPError as e:
            return self._http_error(target, "importing API", e)
        finally:
            if upload != path:
                shutil.rmtree(upload.parent, ignore_errors=True)

        print("Successfully imported API!")
        return self._result(target, "imported", f"preserveProvider={preserve_provider}, update={update}")
