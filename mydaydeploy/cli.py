# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for myday-deploy.

This module provides the ``myday-deploy`` entry point, which uploads a new
app or a new version of an existing app to the myday platform.

Example:
    Upload or update a global app on the current platform:
        ```bash
        $ myday-deploy --appId acme.timesheet --file dist/timesheet.zip \\
            --apiUrl https://api.myday.cloud --idSrvUrl https://identity.myday.cloud \\
            --clientId deploy-bot --clientSecret "$SECRET"
        ```

    Check what is deployed without uploading:
        ```bash
        $ myday-deploy ... --dryRun
        ```

    Keep settings in a file and the secret in the environment:
        ```bash
        $ export MYDAY_CLIENT_SECRET=...
        $ myday-deploy --config deploy.yaml --file dist/timesheet.zip
        ```

Exit Codes:

- 0: Success (including a completed dry run)
- 1: Error (invalid options, authentication or API failure)
- 2: Usage error (unknown flag, missing flag argument)

Note:
    Option precedence is flags > ``MYDAY_*`` environment variables (and
    ``.env``) > ``--config`` file. Errors always go to stderr, even in
    silent mode. Verbose mode shows full tracebacks on errors.

"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from mydaydeploy import __version__
from mydaydeploy.config import (
    OutputMode,
    load_deployment_config,
    load_options_file,
    merge_options,
    options_from_env,
)
from mydaydeploy.config.loader import KNOWN_OPTIONS
from mydaydeploy.core import deploy_app
from mydaydeploy.exceptions import ConfigError, MydayDeployError
from mydaydeploy.logging import get_logger, set_global_logger


def _print_error(err: Exception, show_traceback: bool) -> None:
    print(f"Error: {err}", file=sys.stderr)
    if show_traceback:
        import traceback

        traceback.print_exc()


def cmd_deploy(args: argparse.Namespace) -> int:
    """Handler for the deployment command.

    Merges options from the ``--config`` file, the environment and the
    command line, validates them, then runs the deployment.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success or dry run, 1 for failure).

    """
    cli_options = {name: getattr(args, name, None) for name in KNOWN_OPTIONS}

    try:
        file_options = load_options_file(args.config) if args.config else {}
        config = load_deployment_config(
            merge_options(file_options, options_from_env(), cli_options)
        )
    except ConfigError as err:
        _print_error(err, bool(args.verbose))
        return 1

    logger = get_logger(config.output_mode)
    set_global_logger(logger)

    try:
        deploy_app(config, logger=logger)
    except MydayDeployError as err:
        _print_error(err, config.output_mode is OutputMode.VERBOSE)
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="myday-deploy",
        description="Upload and update apps on the myday platform",
        epilog="For more information and OAuth access, contact Collabco Support.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"myday-deploy {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with default values for the options below",
    )

    app = parser.add_argument_group("App options")
    app.add_argument("--appId", dest="appId", help="Application ID, e.g. acme.timesheet")
    app.add_argument("--file", dest="file", help="Path to a zip archive")

    platform = parser.add_argument_group("Platform options")
    platform.add_argument(
        "--platform",
        dest="platform",
        choices=["v2", "v3"],
        default=None,
        help="Platform version (default: v3)",
    )
    platform.add_argument(
        "--tenantId",
        dest="tenantId",
        help="Tenant ID, only for tenant-level apps",
    )
    platform.add_argument("--apiUrl", dest="apiUrl", help="Base URL for myday APIs")

    identity = parser.add_argument_group("Identity Server options")
    identity.add_argument(
        "--idSrvUrl", dest="idSrvUrl", help="Base URL for myday Identity Server"
    )
    identity.add_argument("--clientId", dest="clientId", help="OAuth client ID")
    identity.add_argument(
        "--clientSecret", dest="clientSecret", help="OAuth client secret"
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        default=None,
        help="Verbose mode (additional output)",
    )
    output.add_argument(
        "-s",
        "--silent",
        dest="silent",
        action="store_true",
        default=None,
        help="Silent mode (disable output, errors are still printed)",
    )

    parser.add_argument(
        "--dryRun",
        "--dry",
        dest="dryRun",
        action="store_true",
        default=None,
        help="Dry run, does not upload the app",
    )
    parser.add_argument(
        "--timeout",
        dest="timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: none)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the myday-deploy CLI.

    This function is registered as the 'myday-deploy' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    sys.exit(cmd_deploy(args))


if __name__ == "__main__":
    main()
