"""CLI entry point for apictl."""

from __future__ import annotations

import argparse
import sys

import requests
import yaml

# Ensure all operations are registered by importing the operations package
import apictl.operations  # noqa: F401
from apictl.config import get_config_dir, load_main_config, main_config_path
from apictl.logging_utils import setup_logging
from apictl.models import DEFAULT_MAX_RETRIES, PROJECT_NAME
from apictl.operations import get_operation_registry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROJECT_NAME,
        description="Export and import APIs and applications between API Manager environments.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    APICTL_CONFIG_DIR - Directory holding main_config.yaml (default: ~/.wso2apictl)
    APICTL_USERNAME   - Username used when --username is not given
    APICTL_PASSWORD   - Password used when --password is not given

Examples:
    # Register an environment
    apictl add-env -e dev --apim https://localhost:9443

    # Export an API
    apictl export-api -n TwitterAPI -v 1.0.0 -e dev
    apictl export-api -n FacebookAPI -v 2.1.0 -e production

    # Export an application together with its keys
    apictl export-app -n SampleApp -o admin --with-keys -e dev

    # Import it into another environment, keeping the owner
    apictl import-app -f ~/.wso2apictl/exported/apps/dev/admin_SampleApp.zip \\
        --preserve-owner --update -e production
""",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--json", action="store_true", dest="json_output", help="Output results as JSON lines (to stderr)"
    )
    parser.add_argument(
        "-k", "--insecure", action="store_true", help="Allow connections to endpoints with untrusted certificates"
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help=f"Maximum retry attempts for transient errors (default: {DEFAULT_MAX_RETRIES})",
    )
    parser.add_argument(
        "--config-dir", default=None, help="Directory holding main_config.yaml (default: from APICTL_CONFIG_DIR)"
    )

    subparsers = parser.add_subparsers(dest="operation", required=True, help="Operation to perform")

    registry = get_operation_registry()
    for name, op_cls in sorted(registry.items()):
        sub = subparsers.add_parser(name, help=op_cls.__doc__)
        op_cls.add_arguments(sub)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    logger = setup_logging(json_mode=args.json_output, verbose=args.verbose)
    logger.debug(f"{args.operation} called")

    # Load configuration
    config_path = main_config_path(get_config_dir(args.config_dir))
    try:
        config = load_main_config(config_path)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error reading {config_path}: {e}")
        return 1

    # Instantiate and run the operation
    registry = get_operation_registry()
    op_cls = registry[args.operation]
    operation = op_cls(config=config, args=args)

    try:
        operation.run()
    except SystemExit as e:
        logger.error(str(e))
        return 1
    except requests.RequestException as e:
        logger.error(f"Fatal API error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    # Exit code: non-zero if any errors
    errors = sum(1 for r in operation.results if r.action == "error")
    return 1 if errors > 0 else 0


if __name__ == "__main__":
    sys.exit(main())
