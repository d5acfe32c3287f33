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

"""Package upload for myday-deploy.

This module publishes an app package (zip archive) to the myday app store.
The request sequence depends on the platform generation and is built by its
adapter:

- v2: one multipart POST to ``/apps/upload`` or ``/apps/update``
- v3: multipart POST to ``/files/file``, then POST (first upload) or PUT
  (update) to ``/app/store`` with the returned ``fileId``

``is_update`` must be True exactly when the version lookup found the app.

Note:
    The app store rejects versions lower (semver) than the published one;
    the same version is accepted. That check is left to the server and
    surfaces here as ApiRequestFailedError. Nothing is rolled back: if the
    v3 registration fails, the file uploaded in the first step stays on the
    Files API.

Example:
    Upload a first version:
        ```python
        from pathlib import Path
        from mydaydeploy.config import Platform, Scope
        from mydaydeploy.io.upload import upload_app

        new_version = upload_app(
            client,
            Path("dist/timesheet.zip"),
            "acme.timesheet",
            Platform.CURRENT,
            "https://api.myday.cloud",
            Scope.GLOBAL,
            is_update=False,
        )
        ```
"""

from __future__ import annotations

from pathlib import Path

from mydaydeploy.config.loader import Platform, Scope
from mydaydeploy.io.client import ApiClient
from mydaydeploy.logging import Logger, get_global_logger
from mydaydeploy.platforms import AppRecord, get_platform

__all__ = ["upload_app", "upload_package"]


def upload_package(
    client: ApiClient,
    file: Path,
    app_id: str,
    platform: Platform | str,
    base_url: str,
    scope: Scope,
    is_update: bool,
    *,
    logger: Logger | None = None,
) -> AppRecord:
    """Upload an app package and return the published app record.

    Args:
        client: Authenticated API client.
        file: Path to the zip archive.
        app_id: Application ID.
        platform: Platform generation.
        base_url: Base myday API URL.
        scope: Collection scope of the app.
        is_update: Whether the app already exists in this scope.
        logger: Output logger (defaults to the global logger).

    Returns:
        The app record returned by the app store, with the new version.

    Raises:
        ApiRequestFailedError: If any request fails; later steps are skipped.
        UnexpectedResponseShapeError: If a response lacks ``fileId`` or
            ``version``.
    """
    if logger is None:
        logger = get_global_logger()

    adapter = get_platform(platform)
    logger.verbose(
        "UPLOAD",
        f"{'Updating' if is_update else 'Uploading new'} app {app_id} "
        f"on platform {adapter.platform.value} ({scope.value} scope)",
    )
    record = adapter.upload(
        client, Path(file), app_id, base_url.rstrip("/"), scope, is_update, logger
    )
    logger.verbose(
        "UPLOAD",
        f"{'Updated' if is_update else 'Uploaded new'} {record.name or app_id} "
        f"app with version {record.version}",
    )
    return record


def upload_app(
    client: ApiClient,
    file: Path,
    app_id: str,
    platform: Platform | str,
    base_url: str,
    scope: Scope,
    is_update: bool,
    *,
    logger: Logger | None = None,
) -> str:
    """Upload an app package and return the new version number."""
    return upload_package(
        client, file, app_id, platform, base_url, scope, is_update, logger=logger
    ).version
