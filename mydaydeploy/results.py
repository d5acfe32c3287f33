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

"""Public API return types for myday-deploy.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from mydaydeploy.core import deploy_app
        from mydaydeploy.results import DeployResult

        result: DeployResult = deploy_app(config)
        print(result.new_version)  # Attribute access, not dict access
        ```

Note:
    Only public API return types belong in this module. Domain types
    (like AppRecord) remain co-located with their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass

from mydaydeploy.config.loader import Platform, Scope

STATUS_DRY_RUN = "dry_run"
STATUS_UPLOADED = "uploaded"
STATUS_UPDATED = "updated"


@dataclass(frozen=True)
class DeployResult:
    """Result from deploying an app package.

    Attributes:
        app_id: Application ID.
        platform: Platform generation deployed to.
        scope: Collection scope of the app.
        previous_version: Version published before this run, None if the app
            did not exist.
        new_version: Version published by this run, None for a dry run.
        status: "dry_run", "uploaded" (first upload) or "updated".
    """

    app_id: str
    platform: Platform
    scope: Scope
    previous_version: str | None
    new_version: str | None
    status: str

    @property
    def dry_run(self) -> bool:
        return self.status == STATUS_DRY_RUN

    @property
    def is_update(self) -> bool:
        return self.previous_version is not None
