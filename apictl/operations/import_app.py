"""Application import operation."""

from __future__ import annotations

import argparse
import shutil
import zipfile
from pathlib import Path

import requests
import yaml

from apictl.archive import read_meta_file, zip_directory
from apictl.models import META_FILE_APPLICATION, ActionResult, ImportConfig
from apictl.operations.base import (
    Operation,
    add_bool_flag,
    add_environment_arguments,
    register_operation,
    resolve_option,
)


@register_operation("import-app")
class ImportAppOperation(Operation):
    """Import an exported application archive (zip or extracted directory) into an environment."""

    target_type = "application"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("-f", "--file", required=True, help="Zip archive or directory of the application")
        parser.add_argument("-o", "--owner", default="", help="Owner to assign the imported application to")
        add_bool_flag(parser, "--preserve-owner", "Keep the original owner of the application")
        add_bool_flag(parser, "--update", "Update the application if it already exists")
        add_bool_flag(parser, "--skip-keys", "Do not import the application's keys")
        add_bool_flag(parser, "--skip-subscriptions", "Do not import the application's subscriptions")
        add_environment_arguments(parser)

    def run(self) -> ActionResult:
        path = Path(self.args.file)
        if not path.exists():
            message = f"Error importing Application: {path} does not exist"
            print(message)
            return self._result(path.name, "error", message)

        try:
            meta = read_meta_file(path, META_FILE_APPLICATION)
            upload = zip_directory(path) if path.is_dir() else path
        except (OSError, zipfile.BadZipFile, yaml.YAMLError, ValueError) as e:
            message = f"Error reading Application archive: {e}"
            print(message)
            return self._result(path.name, "error", message)

        # Flags given on the command line override the deploy options in application_meta.yaml
        options = meta.deploy.import_config if meta else ImportConfig()
        preserve_owner = resolve_option(self.args.preserve_owner, options.preserve_owner)
        update = resolve_option(self.args.update, options.update)
        skip_keys = resolve_option(self.args.skip_keys, options.skip_keys)
        skip_subscriptions = resolve_option(self.args.skip_subscriptions, options.skip_subscriptions)
        target = f"{meta.owner}/{meta.name}" if meta and meta.name else path.stem

        try:
            self.client.import_app(
                str(upload),
                owner=self.args.owner,
                preserve_owner=preserve_owner,
                skip_subscriptions=skip_subscriptions,
                skip_keys=skip_keys,
                update=update,
            )
        except requests.HTTPError as e:
            return self._http_error(target, "importing Application", e)
        finally:
            if upload != path:
                shutil.rmtree(upload.parent, ignore_errors=True)

        print("Successfully imported Application!")
        return self._result(
            target,
            "imported",
            f"preserveOwner={preserve_owner}, update={update}, "
            f"skipKeys={skip_keys}, skipSubscriptions={skip_subscriptions}",
        )
