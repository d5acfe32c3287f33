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

"""Core orchestration for myday-deploy.

This module sequences a deployment:

1. **Authorize** - client-credentials grant against the Identity Server;
   yields an authenticated ApiClient.
2. **Resolve version** - look up the app in its scope. Not found means a
   first upload, found means an update.
3. **Upload** - publish the package (skipped for a dry run).

Each step runs once. Any error aborts the run and propagates to the
caller unchanged; the CLI layer formats it for display.

Design Principles:

- The platform adapter is selected once from the config and drives every
  platform-specific detail (OAuth scope, token endpoint, URLs, fields)
- The authenticated client is an immutable value passed to each step
- The function returns a frozen DeployResult for easy testing

Example:
    Programmatic usage:
        ```python
        from mydaydeploy.config import load_deployment_config
        from mydaydeploy.core import deploy_app

        config = load_deployment_config(options)
        result = deploy_app(config)
        print(f"{result.app_id}: {result.previous_version} -> {result.new_version}")
        ```

"""

from __future__ import annotations

import requests

from mydaydeploy.auth import authorize
from mydaydeploy.config.loader import DeploymentConfig
from mydaydeploy.io.client import make_session
from mydaydeploy.io.upload import upload_app
from mydaydeploy.logging import Logger, get_global_logger
from mydaydeploy.platforms import get_platform
from mydaydeploy.results import (
    STATUS_DRY_RUN,
    STATUS_UPDATED,
    STATUS_UPLOADED,
    DeployResult,
)
from mydaydeploy.versioning import get_current_version

TOTAL_STEPS = 3


def deploy_app(
    config: DeploymentConfig,
    *,
    session: requests.Session | None = None,
    logger: Logger | None = None,
) -> DeployResult:
    """Deploy an app package to myday.

    This is the main entry point for the ``myday-deploy`` command.

    Args:
        config: Validated deployment configuration.
        session: Session to send requests with. A new session is created
            (and closed afterwards) when omitted; a given session is left
            open.
        logger: Output logger (defaults to the global logger).

    Returns:
        The deployment outcome. For a dry run, ``new_version`` is None.

    Raises:
        AuthenticationFailedError: If no access token could be obtained.
        ApiRequestFailedError: If a myday API request fails, including the
            server rejecting a lower version.
        UnexpectedResponseShapeError: If a response lacks expected fields.

    """
    if logger is None:
        logger = get_global_logger()

    if session is not None:
        return _run(config, session, logger)
    with make_session() as session:
        return _run(config, session, logger)


def _run(
    config: DeploymentConfig, session: requests.Session, logger: Logger
) -> DeployResult:
    adapter = get_platform(config.platform)

    logger.verbose("CONFIG", "Starting with following configuration:")
    for key, value in config.redacted().items():
        logger.verbose("CONFIG", f" - {key + ':':<14}{value}")

    logger.step(1, TOTAL_STEPS, "Requesting an access token...")
    client = authorize(
        config.id_srv_url,
        config.client_id,
        config.client_secret,
        adapter.client_scope,
        use_discovery=adapter.uses_discovery,
        session=session,
        timeout=config.timeout,
        logger=logger,
    )

    logger.step(2, TOTAL_STEPS, f"Checking current version of {config.app_id}...")
    current_version = get_current_version(
        client,
        config.app_id,
        config.platform,
        config.api_url,
        config.scope,
        logger=logger,
    )

    if config.dry_run:
        if current_version is not None:
            logger.info(f"Current {config.app_id} version is {current_version}.")
        else:
            logger.info(f"App {config.app_id} does not exist yet.")
        logger.info("Dry run selected, quitting.")
        return DeployResult(
            app_id=config.app_id,
            platform=config.platform,
            scope=config.scope,
            previous_version=current_version,
            new_version=None,
            status=STATUS_DRY_RUN,
        )

    is_update = current_version is not None
    logger.step(
        3,
        TOTAL_STEPS,
        f"{'Updating' if is_update else 'Uploading'} {config.app_id} from {config.file.name}...",
    )
    new_version = upload_app(
        client,
        config.file,
        config.app_id,
        config.platform,
        config.api_url,
        config.scope,
        is_update,
        logger=logger,
    )

    if is_update:
        logger.info(
            f"Successfully updated {config.app_id} app from {current_version} to {new_version}."
        )
    else:
        logger.info(
            f"Successfully uploaded {config.app_id} app for the first time, with version {new_version}."
        )

    return DeployResult(
        app_id=config.app_id,
        platform=config.platform,
        scope=config.scope,
        previous_version=current_version,
        new_version=new_version,
        status=STATUS_UPDATED if is_update else STATUS_UPLOADED,
    )
