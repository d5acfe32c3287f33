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

"""Current version lookup for myday-deploy.

Lists all apps of a scope on the myday API and returns the version of the
app being deployed. A missing app is not an error: it means this is the
first upload to this environment, and the caller uploads instead of
updating.

Note:
    Apps hidden from the listing (for example by feature flags) look like
    they do not exist, and the subsequent first-time upload fails on the
    server.

Example:
    ```python
    from mydaydeploy.versioning import get_current_version

    version = get_current_version(
        client, "acme.timesheet", Platform.LEGACY, "https://api.myday.cloud", Scope.GLOBAL
    )
    if version is None:
        print("First deployment")
    ```
"""

from __future__ import annotations

from mydaydeploy.config.loader import Platform, Scope
from mydaydeploy.io.client import ApiClient
from mydaydeploy.logging import Logger, get_global_logger
from mydaydeploy.platforms import AppRecord, get_platform

__all__ = ["find_current_app", "get_current_version"]


def find_current_app(
    client: ApiClient,
    app_id: str,
    platform: Platform | str,
    base_url: str,
    scope: Scope,
    *,
    logger: Logger | None = None,
) -> AppRecord | None:
    """Return the published record of ``app_id``, or None if not found.

    Raises:
        ApiRequestFailedError: If the listing request fails.
        UnexpectedResponseShapeError: If the listing is not an array of app
            records, or the matching record has no version.
    """
    if logger is None:
        logger = get_global_logger()

    adapter = get_platform(platform)
    listing_request = adapter.build_listing_request(base_url.rstrip("/"), scope)
    logger.verbose("APPS", f"Fetching existing apps: {listing_request}")

    records = client.send(listing_request)
    count = len(records) if isinstance(records, list) else 0
    logger.verbose("APPS", f"Found {count} apps for scope {scope.value}")

    found = adapter.find_app(records, app_id)
    if found:
        logger.verbose(
            "APPS", f"Found {found.name or app_id} app with version {found.version}"
        )
    else:
        logger.verbose(
            "APPS", "Could not find such app on this environment. Is this a new app?"
        )
    return found


def get_current_version(
    client: ApiClient,
    app_id: str,
    platform: Platform | str,
    base_url: str,
    scope: Scope,
    *,
    logger: Logger | None = None,
) -> str | None:
    """Return the currently published version of ``app_id``, if any."""
    found = find_current_app(
        client, app_id, platform, base_url, scope, logger=logger
    )
    return found.version if found else None
